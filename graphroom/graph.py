"""
Graph model for Graph Room.

Nodes and edges are immutable records; GraphStore swaps in updated copies.
A GraphSnapshot is the complete {nodes, edges} state at one instant and is the
unit of import/export and the input to the pure geometry/matrix engines.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from graphroom.utils import NodeId, EdgeId, display_name


class EdgeDirection(Enum):
    """Direction chosen in the edge dialog, relative to the clicked (from, to) pair."""
    FORWARD = "forward"
    UNDIRECTED = "undirected"
    REVERSE = "reverse"

    @classmethod
    def parse(cls, value) -> "EdgeDirection":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())

    def orient(self, source: NodeId, target: NodeId) -> Tuple[NodeId, NodeId, bool]:
        """
        Apply this direction to an endpoint pair.

        Returns (source, target, directed). REVERSE swaps the pair unless it
        is a self-loop; UNDIRECTED keeps the order as given.
        """
        if self is EdgeDirection.UNDIRECTED:
            return source, target, False
        if self is EdgeDirection.REVERSE and source != target:
            return target, source, True
        return source, target, True


@dataclass(frozen=True)
class Node:
    id: NodeId
    x: float = 0.0
    y: float = 0.0
    label: str = ""

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def display_name(self) -> str:
        return display_name(self.id, self.label)


@dataclass(frozen=True)
class Edge:
    id: EdgeId
    source: NodeId
    target: NodeId
    weight: int = 0
    directed: bool = False

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    @property
    def direction(self) -> EdgeDirection:
        """Direction to preselect when this edge is edited."""
        return EdgeDirection.FORWARD if self.directed else EdgeDirection.UNDIRECTED


@dataclass(frozen=True)
class GraphSnapshot:
    nodes: Tuple[Node, ...] = field(default_factory=tuple)
    edges: Tuple[Edge, ...] = field(default_factory=tuple)

import itertools
import logging
import math
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Tuple

from graphroom.errors import IllegalMutation, ReferentialIntegrityViolation, ValidationError
from graphroom.graph import Edge, EdgeDirection, GraphSnapshot, Node
from graphroom.utils import EdgeId, NodeId, coerce_weight, numeric_value

logger = logging.getLogger(__name__)


class GraphStore:
    """
    Owns the canonical nodes and edges of the diagram.

    Exactly one store holds the authoritative state. Other components read
    snapshot() on every render and never keep their own copy.

    Invariants:
    - node ids and edge ids are unique
    - every edge endpoint references a node in the store; removing a node
      removes all of its incident edges, self-loops included
    """

    def __init__(self):
        self._nodes: Dict[NodeId, Node] = {}
        self._edges: Dict[EdgeId, Edge] = {}
        self._next_node_id = 1
        self._edge_seq = itertools.count(1)
        self._on_node_removed: Optional[Callable[[NodeId], None]] = None

    def set_on_node_removed(self, callback: Callable[[NodeId], None]):
        self._on_node_removed = callback

    # --- Reads ---

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges.values())

    @property
    def next_node_id(self) -> int:
        return self._next_node_id

    def get_node(self, node_id: NodeId) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_edge(self, edge_id: EdgeId) -> Optional[Edge]:
        return self._edges.get(edge_id)

    def snapshot(self) -> GraphSnapshot:
        return GraphSnapshot(nodes=tuple(self._nodes.values()), edges=tuple(self._edges.values()))

    # --- Node Operations ---

    def add_node(self, position: Tuple[float, float]) -> Node:
        """Create a node with the next sequential numeric id and label "Node {id}"."""
        while str(self._next_node_id) in self._nodes:
            self._next_node_id += 1
        node_id = NodeId(str(self._next_node_id))
        self._next_node_id += 1

        x, y = position
        node = Node(id=node_id, x=float(x), y=float(y), label=f"Node {node_id}")
        self._nodes[node_id] = node
        logger.debug(f"Added node {node_id} at ({node.x:.1f}, {node.y:.1f})")
        return node

    def remove_node(self, node_id: NodeId) -> None:
        """Remove a node and every edge touching it. Absent ids are ignored."""
        if node_id not in self._nodes:
            return
        incident = [eid for eid, e in self._edges.items() if node_id in (e.source, e.target)]
        for eid in incident:
            del self._edges[eid]
        del self._nodes[node_id]
        logger.debug(f"Removed node {node_id} and {len(incident)} incident edge(s)")

        if self._on_node_removed:
            self._on_node_removed(node_id)

    def rename_node(self, node_id: NodeId, label: str) -> None:
        node = self._nodes.get(node_id)
        if node is None:
            return
        self._nodes[node_id] = replace(node, label=label)

    def set_node_position(self, node_id: NodeId, x: float, y: float) -> None:
        node = self._nodes.get(node_id)
        if node is None:
            return
        self._nodes[node_id] = replace(node, x=float(x), y=float(y))

    # --- Edge Operations ---

    def _require_node(self, node_id: NodeId) -> None:
        if node_id not in self._nodes:
            raise IllegalMutation(f"Node {node_id!r} does not exist")

    def _new_edge_id(self, source: NodeId, target: NodeId) -> EdgeId:
        while True:
            edge_id = EdgeId(f"{source}-{target}-{next(self._edge_seq)}")
            if edge_id not in self._edges:
                return edge_id

    def create_edge(self, source: NodeId, target: NodeId, weight,
                    direction=EdgeDirection.FORWARD) -> Edge:
        """
        Create an edge between two existing nodes.

        Args:
            source: Node clicked first
            target: Node clicked second (may equal source for a self-loop)
            weight: Coerced to max(0, trunc(weight))
            direction: FORWARD keeps (source, target), REVERSE swaps them
                unless it is a self-loop, UNDIRECTED keeps the order undirected

        Raises:
            IllegalMutation: if either endpoint is missing
        """
        self._require_node(source)
        self._require_node(target)

        frm, to, directed = EdgeDirection.parse(direction).orient(source, target)
        edge = Edge(
            id=self._new_edge_id(frm, to),
            source=frm,
            target=to,
            weight=coerce_weight(weight),
            directed=directed,
        )
        self._edges[edge.id] = edge
        logger.debug(f"Created edge {edge.id} ({'directed' if directed else 'undirected'}, w={edge.weight})")
        return edge

    def update_edge(self, edge_id: EdgeId, weight, direction) -> Optional[Edge]:
        """Change weight and direction; the swap rule applies to the current endpoints."""
        edge = self._edges.get(edge_id)
        if edge is None:
            return None
        frm, to, directed = EdgeDirection.parse(direction).orient(edge.source, edge.target)
        updated = replace(edge, source=frm, target=to, weight=coerce_weight(weight), directed=directed)
        self._edges[edge_id] = updated
        return updated

    def remove_edge(self, edge_id: EdgeId) -> None:
        self._edges.pop(edge_id, None)

    # --- Bulk Operations ---

    def clear(self) -> None:
        self._nodes = {}
        self._edges = {}
        self._next_node_id = 1
        logger.info("Graph cleared")

    def replace_all(self, snapshot: GraphSnapshot) -> None:
        """
        Atomically replace the whole graph (used by import).

        The snapshot is checked before anything is touched, so a bad snapshot
        leaves the current graph exactly as it was. The node-id counter is
        reset to (max numeric node id) + 1, or 1 if there is none.

        Raises:
            ValidationError: duplicate node or edge ids
            ReferentialIntegrityViolation: an edge endpoint is not in the snapshot
        """
        nodes: Dict[NodeId, Node] = {}
        for node in snapshot.nodes:
            if node.id in nodes:
                raise ValidationError(f"Duplicate node id {node.id!r}")
            nodes[node.id] = node

        edges: Dict[EdgeId, Edge] = {}
        for edge in snapshot.edges:
            if edge.id in edges:
                raise ValidationError(f"Duplicate edge id {edge.id!r}")
            for endpoint in (edge.source, edge.target):
                if endpoint not in nodes:
                    raise ReferentialIntegrityViolation(edge.id, endpoint)
            edges[edge.id] = edge

        max_numeric = 0
        for node_id in nodes:
            value = numeric_value(node_id)
            if value is not None:
                max_numeric = max(max_numeric, math.floor(value))

        self._nodes = nodes
        self._edges = edges
        self._next_node_id = max_numeric + 1
        logger.info(f"Replaced graph: {len(nodes)} node(s), {len(edges)} edge(s)")

"""
Edge geometry for Graph Room.

Pure functions mapping a graph snapshot to rendering geometry:
- line clipping so strokes and arrowheads stop at node boundaries
- self-loop curves, spread left/right and outward when a node has several
- bowed quadratic curves for mirrored pairs (A->B and B->A)
- label anchors for every edge
- hit-testing of nodes and edges under the pointer

Nothing here is cached; the scene is recomputed from the snapshot on every
render, so every function must be deterministic in its inputs.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import networkx as nx

from graphroom.constants import (
    NODE_RADIUS,
    ARROW_PADDING,
    EDGE_LABEL_LIFT,
    LOOP_BASE_DX,
    LOOP_BASE_DY,
    LOOP_TIER_DX,
    LOOP_TIER_DY,
    LOOP_MIN_INNER,
    LOOP_INNER_FACTOR,
    LOOP_LABEL_FACTOR,
    LOOP_LABEL_LIFT,
    MIRROR_OFFSET_FACTOR,
    MIRROR_OFFSET_MIN,
    MIRROR_OFFSET_MAX,
    MIRROR_LABEL_NUDGE,
    EDGE_HIT_TOLERANCE,
)
from graphroom.graph import Edge, GraphSnapshot, Node
from graphroom.utils import EdgeId, NodeId

Point = Tuple[float, float]

STRAIGHT = "straight"
MIRRORED = "mirrored"
SELF_LOOP = "self_loop"


@dataclass(frozen=True)
class EdgeGeometry:
    """
    Geometry for one edge.

    kind is STRAIGHT (start/end only), MIRRORED (one quadratic control point
    in controls) or SELF_LOOP (two cubic control points, start == end).
    offset is the signed perpendicular bow of a mirrored edge, 0 otherwise.
    """
    edge_id: EdgeId
    kind: str
    start: Point
    end: Point
    controls: Tuple[Point, ...]
    label: Point
    offset: float = 0.0

    @property
    def path(self) -> str:
        """SVG path data."""
        (sx, sy), (ex, ey) = self.start, self.end
        if self.kind == SELF_LOOP:
            (c1x, c1y), (c2x, c2y) = self.controls
            return f"M {sx:.2f} {sy:.2f} C {c1x:.2f} {c1y:.2f}, {c2x:.2f} {c2y:.2f}, {ex:.2f} {ey:.2f}"
        if self.kind == MIRRORED:
            cx, cy = self.controls[0]
            return f"M {sx:.2f} {sy:.2f} Q {cx:.2f} {cy:.2f} {ex:.2f} {ey:.2f}"
        return f"M {sx:.2f} {sy:.2f} L {ex:.2f} {ey:.2f}"

    def points(self, steps: int = 24) -> List[Point]:
        """Polyline approximation of the drawn path, used for hit-testing."""
        if self.kind == STRAIGHT:
            return [self.start, self.end]
        if self.kind == MIRRORED:
            controls = (self.start, self.controls[0], self.end)
        else:
            controls = (self.start,) + tuple(self.controls) + (self.end,)
        return [_bezier(controls, i / steps) for i in range(steps + 1)]


def _bezier(controls: Sequence[Point], t: float) -> Point:
    """De Casteljau evaluation of a Bezier curve of any degree."""
    points = list(controls)
    while len(points) > 1:
        points = [
            (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)
            for a, b in zip(points, points[1:])
        ]
    return points[0]


def _segment_distance(point: Point, a: Point, b: Point) -> float:
    dx, dy = b[0] - a[0], b[1] - a[1]
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(point[0] - a[0], point[1] - a[1])
    t = _clamp(((point[0] - a[0]) * dx + (point[1] - a[1]) * dy) / length_sq, 0.0, 1.0)
    return math.hypot(point[0] - (a[0] + t * dx), point[1] - (a[1] + t * dy))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _end_padding(edge: Edge, radius: float) -> float:
    return radius + (ARROW_PADDING if edge.directed else 0)


def line_clip(start: Point, end: Point, pad_start: float, pad_end: float) -> Tuple[Point, Point]:
    """
    Shorten the segment start->end by pad_start at the start and pad_end at the end.

    The direction length is clamped to at least 1 so coincident points do not
    divide by zero (they simply stay put).
    """
    dx, dy = end[0] - start[0], end[1] - start[1]
    length = max(1.0, math.hypot(dx, dy))
    ux, uy = dx / length, dy / length
    return (
        (start[0] + ux * pad_start, start[1] + uy * pad_start),
        (end[0] - ux * pad_end, end[1] - uy * pad_end),
    )


def self_loop_indices(edges: Iterable[Edge]) -> Dict[EdgeId, int]:
    """Ordinal (0, 1, 2, ...) of each self-loop among the loops of its node, in edge order."""
    counts: Dict[NodeId, int] = {}
    indices: Dict[EdgeId, int] = {}
    for edge in edges:
        if edge.is_self_loop:
            i = counts.get(edge.source, 0)
            indices[edge.id] = i
            counts[edge.source] = i + 1
    return indices


def self_loop_geometry(node: Node, loop_index: int, edge_id: EdgeId = EdgeId(""),
                       radius: float = NODE_RADIUS) -> EdgeGeometry:
    """
    Cubic loop leaving and re-entering the node at the same boundary point.

    Even indices go to the right, odd to the left; every pair of loops moves one
    tier further out so more than two loops on a node do not overlap.
    """
    side = 1 if loop_index % 2 == 0 else -1
    tier = loop_index // 2
    dx = LOOP_BASE_DX + tier * LOOP_TIER_DX
    dy = LOOP_BASE_DY + tier * LOOP_TIER_DY

    anchor = (node.x + side * radius, node.y)
    c1 = (node.x + side * (radius + dx), node.y - dy)
    c2 = (node.x + side * (radius + max(LOOP_MIN_INNER, dx * LOOP_INNER_FACTOR)), node.y - dy)
    label = (node.x + side * (radius + dx * LOOP_LABEL_FACTOR), node.y - dy - LOOP_LABEL_LIFT)

    return EdgeGeometry(edge_id=edge_id, kind=SELF_LOOP, start=anchor, end=anchor,
                        controls=(c1, c2), label=label)


def has_mirror(edge: Edge, edges: Iterable[Edge]) -> bool:
    """True iff another edge runs between the same two nodes with endpoints swapped."""
    if edge.is_self_loop:
        return False
    return any(
        other.id != edge.id and other.source == edge.target and other.target == edge.source
        for other in edges
    )


def mirror_offset(edge: Edge, separation: float, radius: float = NODE_RADIUS) -> float:
    """
    Signed perpendicular bow for a mirrored edge.

    The magnitude depends only on the gap between the nodes. The sign comes
    from comparing endpoint ids, so A->B and B->A always get opposite signs.
    """
    magnitude = _clamp(MIRROR_OFFSET_FACTOR * (separation - 2 * radius),
                       MIRROR_OFFSET_MIN, MIRROR_OFFSET_MAX)
    return magnitude if edge.source < edge.target else -magnitude


def mirrored_edge_geometry(edge: Edge, from_node: Node, to_node: Node,
                           radius: float = NODE_RADIUS) -> EdgeGeometry:
    """
    Quadratic curve bowed away from the straight line between the endpoints.

    The normal is taken from the chord between the lexicographically smaller
    and larger node ids, which is the same for both edges of a mirrored pair;
    combined with the signed offset this puts the two curves on opposite sides
    regardless of render order.
    """
    p1, p2 = from_node.position, to_node.position
    separation = math.hypot(p2[0] - p1[0], p2[1] - p1[1])
    offset = mirror_offset(edge, separation, radius)

    low, high = (p1, p2) if edge.source < edge.target else (p2, p1)
    cdx, cdy = high[0] - low[0], high[1] - low[1]
    length = max(1.0, math.hypot(cdx, cdy))
    nx_, ny_ = -cdy / length, cdx / length

    mid = ((p1[0] + p2[0]) / 2, (p1[1] + p2[1]) / 2)
    control = (mid[0] + nx_ * offset, mid[1] + ny_ * offset)

    start, _ = line_clip(p1, control, radius, 0)
    _, end = line_clip(control, p2, 0, _end_padding(edge, radius))

    # Quadratic Bezier at t=0.5
    bx = 0.25 * start[0] + 0.5 * control[0] + 0.25 * end[0]
    by = 0.25 * start[1] + 0.5 * control[1] + 0.25 * end[1]
    nudge = MIRROR_LABEL_NUDGE if offset >= 0 else -MIRROR_LABEL_NUDGE
    label = (bx + nx_ * nudge, by + ny_ * nudge)

    return EdgeGeometry(edge_id=edge.id, kind=MIRRORED, start=start, end=end,
                        controls=(control,), label=label, offset=offset)


def straight_edge_geometry(edge: Edge, from_node: Node, to_node: Node,
                           radius: float = NODE_RADIUS) -> EdgeGeometry:
    """Clipped straight segment with its label just above the midpoint."""
    start, end = line_clip(from_node.position, to_node.position, radius, _end_padding(edge, radius))
    label = ((start[0] + end[0]) / 2, (start[1] + end[1]) / 2 - EDGE_LABEL_LIFT)
    return EdgeGeometry(edge_id=edge.id, kind=STRAIGHT, start=start, end=end,
                        controls=(), label=label)


def build_scene(snapshot: GraphSnapshot, radius: float = NODE_RADIUS) -> List[EdgeGeometry]:
    """
    Geometry for every drawable edge of a snapshot, in edge order.

    Edges whose endpoints are missing are skipped.
    """
    graph = nx.MultiDiGraph()
    for node in snapshot.nodes:
        graph.add_node(node.id, node=node)
    for edge in snapshot.edges:
        if edge.source in graph and edge.target in graph:
            graph.add_edge(edge.source, edge.target, key=edge.id)

    drawable = [e for e in snapshot.edges if graph.has_edge(e.source, e.target, key=e.id)]
    loop_indices = self_loop_indices(drawable)
    scene = []
    for edge in drawable:
        from_node = graph.nodes[edge.source]["node"]
        to_node = graph.nodes[edge.target]["node"]

        if edge.is_self_loop:
            scene.append(self_loop_geometry(from_node, loop_indices[edge.id], edge.id, radius))
        elif has_mirror(edge, drawable):
            scene.append(mirrored_edge_geometry(edge, from_node, to_node, radius))
        else:
            scene.append(straight_edge_geometry(edge, from_node, to_node, radius))
    return scene


def node_at(nodes: Sequence[Node], point: Point, radius: float = NODE_RADIUS) -> Optional[Node]:
    """Topmost node whose circle contains point (later nodes are drawn on top)."""
    for node in reversed(nodes):
        if math.hypot(point[0] - node.x, point[1] - node.y) <= radius:
            return node
    return None


def edge_at(scene: Sequence[EdgeGeometry], point: Point,
            tolerance: float = EDGE_HIT_TOLERANCE) -> Optional[EdgeId]:
    """Topmost edge whose drawn path passes within tolerance of point."""
    for geo in reversed(scene):
        polyline = geo.points()
        if any(_segment_distance(point, a, b) <= tolerance for a, b in zip(polyline, polyline[1:])):
            return geo.edge_id
    return None

"""
Graph visualizer that produces SVG markup for the editor canvas.

The markup is recomputed from the current snapshot on every render: edge
geometry comes from graphroom.geometry, nothing is cached between renders.

Graph elements carry ids of the form "node:<id>" / "edge:<id>". Pointer
events are hit-tested geometrically (graphroom.geometry.node_at / edge_at),
so the markup itself is display only.
"""

from html import escape
from typing import Optional

from graphroom.constants import (
    NODE_RADIUS,
    ARROW_SIZE,
    NODE_ELEMENT_PREFIX,
    EDGE_ELEMENT_PREFIX,
)
from graphroom.edit.controller import InteractionState
from graphroom.geometry import build_scene
from graphroom.graph import GraphSnapshot, Node

STROKE_COLOR = "#e5e7eb"
TEXT_COLOR = "#e5e7eb"
NODE_FILL = "#57c3d1"
NODE_STROKE = "#0b5566"
NODE_TEXT = "#0a0fff"
HIGHLIGHT_STROKE = "#facc15"


class GraphVisualizer:
    """
    Build the SVG content for a snapshot.

    Edges are drawn before nodes so node circles sit on top of line ends.
    The node picked as connect source (or being dragged) is outlined.
    """

    def __init__(self, radius: float = NODE_RADIUS):
        self.radius = radius

    @staticmethod
    def _defs() -> str:
        half = ARROW_SIZE / 2
        return (
            '<defs>'
            f'<marker id="arrowhead" markerWidth="{ARROW_SIZE}" markerHeight="{ARROW_SIZE}" '
            f'refX="{ARROW_SIZE - 2}" refY="{half:g}" orient="auto" markerUnits="userSpaceOnUse">'
            f'<polygon points="0 0, {ARROW_SIZE} {half:g}, 0 {ARROW_SIZE}" fill="{STROKE_COLOR}" />'
            '</marker>'
            '</defs>'
        )

    def _node(self, node: Node, highlighted: bool) -> str:
        element_id = escape(NODE_ELEMENT_PREFIX + node.id, quote=True)
        stroke = HIGHLIGHT_STROKE if highlighted else NODE_STROKE
        stroke_width = 4 if highlighted else 1
        return (
            f'<g id="{element_id}" style="cursor: grab">'
            f'<circle cx="{node.x:.2f}" cy="{node.y:.2f}" r="{self.radius:g}" '
            f'fill="{NODE_FILL}" stroke="{stroke}" stroke-width="{stroke_width}" />'
            f'<text x="{node.x:.2f}" y="{node.y + 5:.2f}" text-anchor="middle" '
            f'font-size="20" font-weight="600" fill="{NODE_TEXT}" pointer-events="none">'
            f'{escape(node.display_name)}</text>'
            '</g>'
        )

    def generate_svg(self, snapshot: GraphSnapshot, state: Optional[InteractionState] = None) -> str:
        """Return the SVG body (defs, edges, nodes) for the canvas."""
        edges = {e.id: e for e in snapshot.edges}
        parts = [self._defs()]

        for geo in build_scene(snapshot, self.radius):
            edge = edges[geo.edge_id]
            element_id = escape(EDGE_ELEMENT_PREFIX + edge.id, quote=True)
            marker = ' marker-end="url(#arrowhead)"' if edge.directed else ''
            lx, ly = geo.label
            parts.append(
                f'<g id="{element_id}" style="cursor: pointer">'
                f'<path d="{geo.path}" fill="none" stroke="{STROKE_COLOR}" stroke-width="2"{marker} />'
                f'<text x="{lx:.2f}" y="{ly:.2f}" text-anchor="middle" font-size="10" '
                f'fill="{TEXT_COLOR}">{edge.weight}</text>'
                '</g>'
            )

        marked = set()
        if state is not None:
            marked = {state.connect_source_id, state.dragging_node_id} - {None}
        for node in snapshot.nodes:
            parts.append(self._node(node, node.id in marked))

        return ''.join(parts)

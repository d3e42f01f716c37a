"""
Edit Handlers - Event handlers for the canvas in app.py

This module extracts the pointer event handling from app.py to keep the main
application file focused on layout and dialogs. Raw NiceGUI mouse events are
normalized here, hit-tested against the current scene and forwarded to the
InteractionController.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from graphroom.edit.actions import GraphCommands
from graphroom.geometry import edge_at, node_at
from graphroom.utils import EdgeId, NodeId

logger = logging.getLogger(__name__)

# Max seconds between clicks on one element that still count as a multi-click
DOUBLE_CLICK_INTERVAL = 0.4

NODE = 'node'
EDGE = 'edge'
CANVAS = 'canvas'


def _raw_args(event: Any) -> Any:
    return event.args if hasattr(event, 'args') else event


def parse_pointer(event: Any) -> Optional[Tuple[float, float]]:
    """
    Extract canvas coordinates from a pointer event.

    Accepts NiceGUI MouseEventArguments (image_x/image_y), dict payloads and
    [x, y] lists. Returns None when no usable coordinates are present.
    """
    if hasattr(event, 'image_x') and hasattr(event, 'image_y'):
        raw = {'image_x': event.image_x, 'image_y': event.image_y}
    else:
        raw = _raw_args(event)

    if isinstance(raw, (list, tuple)) and len(raw) >= 2:
        x, y = raw[0], raw[1]
    elif isinstance(raw, dict):
        x = raw.get('image_x', raw.get('offsetX', raw.get('x')))
        y = raw.get('image_y', raw.get('offsetY', raw.get('y')))
    else:
        return None

    try:
        return float(x), float(y)
    except (TypeError, ValueError):
        return None


def parse_event_type(event: Any) -> Optional[str]:
    kind = getattr(event, 'type', None)
    if kind is None and isinstance(_raw_args(event), dict):
        kind = _raw_args(event).get('type')
    return kind


class ClickCounter:
    """
    Consecutive click count per element.

    NiceGUI mouse events do not carry the browser's event.detail, so clicks on
    the same element within interval seconds of each other count up
    (1, 2, 3, ...) the way the browser does; anything else starts again at 1.
    """

    def __init__(self, interval: float = DOUBLE_CLICK_INTERVAL, clock: Callable[[], float] = time.monotonic):
        self.interval = interval
        self._clock = clock
        self._target: Optional[str] = None
        self._last = 0.0
        self._count = 0

    def click(self, target: str) -> int:
        now = self._clock()
        if target == self._target and now - self._last <= self.interval:
            self._count += 1
        else:
            self._count = 1
        self._target, self._last = target, now
        return self._count


def setup_edit_handlers(
    commands: GraphCommands,
    refresh_canvas: Callable[[], None],
) -> Dict[str, Callable]:
    """
    Set up all canvas event handlers.

    Args:
        commands: GraphCommands instance (owns store and controller)
        refresh_canvas: Re-renders the canvas from the current snapshot

    Returns:
        Dict with handler functions for binding to UI events
    """
    controller = commands.controller
    store = commands.store
    clicks = ClickCounter()

    def hit_test(point) -> Optional[Tuple[str, str]]:
        """Nodes are drawn over edges, so they win."""
        node = node_at(store.nodes, point)
        if node is not None:
            return NODE, node.id
        edge_id = edge_at(commands.scene(), point)
        if edge_id is not None:
            return EDGE, edge_id
        return None

    def handle_click(point):
        target = hit_test(point)
        if target is None:
            clicks.click(CANVAS)
            controller.click_canvas(*point)
            return
        kind, element_id = target
        # node and edge ids may collide, so counts are keyed per kind
        count = clicks.click(f'{kind}:{element_id}')
        if kind == NODE:
            controller.click_node(NodeId(element_id), count)
        else:
            controller.click_edge(EdgeId(element_id))

    def handle_double_click(point):
        target = hit_test(point)
        if target is None:
            return
        kind, element_id = target
        if kind == NODE:
            controller.double_click_node(NodeId(element_id))
        else:
            controller.double_click_edge(EdgeId(element_id))

    def handle_context_menu(event):
        point = parse_pointer(event)
        if point is None:
            return
        target = hit_test(point)
        if target is None or target[0] != EDGE:
            return
        controller.context_menu_edge(EdgeId(target[1]), *point)

    def handle_mouse(event):
        """Canvas mouse events: drag, clicks, double clicks and the edge context menu."""
        kind = parse_event_type(event)
        point = parse_pointer(event)

        if kind == 'mousedown':
            target = hit_test(point) if point else None
            if target is None or target[0] != NODE:
                return
            controller.pointer_down(NodeId(target[1]))
        elif kind == 'mousemove':
            if controller.state.dragging_node_id is None:
                return
            controller.pointer_move(*(point or (None, None)))
        elif kind == 'mouseup':
            controller.pointer_up()
        elif kind == 'click' and point is not None:
            handle_click(point)
        elif kind == 'dblclick' and point is not None:
            handle_double_click(point)
        elif kind == 'contextmenu':
            handle_context_menu(event)
            return
        else:
            return
        refresh_canvas()

    return {
        'handle_mouse': handle_mouse,
    }

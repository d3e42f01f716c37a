"""
Interaction Controller - Single source of truth for pointer interaction state.

This controller turns discrete UI events into graph mutations or dialog requests:
- Mode toggles (add node / delete node / delete edge) from the toolbar
- Pointer down/move/up for dragging nodes
- Single clicks for two-click edge creation
- Double clicks and context menus for rename/edit dialogs

The three tool modes are one tagged InteractionMode value, so two tools can
never be active at once. Dragging and a pending connect source only exist while
no tool is active.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple, Union

from graphroom.graph_store import GraphStore
from graphroom.utils import EdgeId, NodeId

logger = logging.getLogger(__name__)


class InteractionMode(Enum):
    IDLE = "idle"
    ADD_NODE = "add_node"
    DELETE_NODE = "delete_node"
    DELETE_EDGE = "delete_edge"


TOOL_MODES = (InteractionMode.ADD_NODE, InteractionMode.DELETE_NODE, InteractionMode.DELETE_EDGE)

# (current mode, toggled mode) -> next mode
TOGGLE_TRANSITIONS: Dict[Tuple[InteractionMode, InteractionMode], InteractionMode] = {
    (current, toggled): InteractionMode.IDLE if current is toggled else toggled
    for current in InteractionMode
    for toggled in TOOL_MODES
}

_MODE_STATE_NAMES = {
    InteractionMode.IDLE: "Idle",
    InteractionMode.ADD_NODE: "AddNodeMode",
    InteractionMode.DELETE_NODE: "DeleteNodeMode",
    InteractionMode.DELETE_EDGE: "DeleteEdgeMode",
}


@dataclass(frozen=True)
class InteractionState:
    """Immutable snapshot of current interaction state."""
    mode: InteractionMode = InteractionMode.IDLE
    dragging_node_id: Optional[NodeId] = None
    connect_source_id: Optional[NodeId] = None

    @property
    def name(self) -> str:
        if self.dragging_node_id is not None:
            return f"Dragging({self.dragging_node_id})"
        if self.connect_source_id is not None:
            return f"ConnectPending({self.connect_source_id})"
        return _MODE_STATE_NAMES[self.mode]


@dataclass(frozen=True)
class CreateEdgeRequest:
    """Ask the edge dialog to create an edge between two clicked nodes."""
    source_id: NodeId
    target_id: NodeId


@dataclass(frozen=True)
class EditEdgeRequest:
    """Ask the edge dialog (or the context menu first) to edit an edge."""
    edge_id: EdgeId
    from_context_menu: bool = False
    x: float = 0
    y: float = 0


@dataclass(frozen=True)
class RenameRequest:
    """Ask the rename dialog to edit a node label."""
    node_id: NodeId


DialogRequest = Union[CreateEdgeRequest, EditEdgeRequest, RenameRequest]


class InteractionController:
    """Finite-state machine over pointer and click events."""

    def __init__(self, store: GraphStore):
        self._store = store
        self._state = InteractionState()
        self._dispatch: Optional[Callable[[DialogRequest], None]] = None
        store.set_on_node_removed(self._forget_node)

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def mode(self) -> InteractionMode:
        return self._state.mode

    def set_dispatcher(self, callback: Callable[[DialogRequest], None]):
        self._dispatch = callback

    def _set_state(self, state: InteractionState) -> InteractionState:
        if state != self._state:
            self._state = state
        return self._state

    def _send(self, request: DialogRequest) -> DialogRequest:
        logger.debug(f"Dispatching {request}")
        if self._dispatch:
            self._dispatch(request)
        return request

    def _forget_node(self, node_id: NodeId):
        """Drop drag/connect state that points at a node that no longer exists."""
        state = self._state
        self._set_state(InteractionState(
            mode=state.mode,
            dragging_node_id=None if state.dragging_node_id == node_id else state.dragging_node_id,
            connect_source_id=None if state.connect_source_id == node_id else state.connect_source_id,
        ))

    # --- Modes ---

    def toggle_mode(self, mode: InteractionMode) -> InteractionState:
        """Flip a tool mode. Any toggle cancels dragging and a pending connection."""
        if mode not in TOOL_MODES:
            raise ValueError(f"{mode} is not a toggleable mode")
        next_mode = TOGGLE_TRANSITIONS[(self._state.mode, mode)]
        return self._set_state(InteractionState(mode=next_mode))

    def reset(self) -> InteractionState:
        return self._set_state(InteractionState())

    # --- Pointer ---

    def pointer_down(self, node_id: NodeId) -> InteractionState:
        state = self._state
        if state.mode is not InteractionMode.IDLE or self._store.get_node(node_id) is None:
            return state
        return self._set_state(InteractionState(
            mode=state.mode, dragging_node_id=node_id, connect_source_id=state.connect_source_id
        ))

    def pointer_move(self, x: Optional[float], y: Optional[float]) -> InteractionState:
        node_id = self._state.dragging_node_id
        if node_id is None or x is None or y is None:
            return self._state
        self._store.set_node_position(node_id, x, y)
        return self._state

    def pointer_up(self) -> InteractionState:
        state = self._state
        if state.dragging_node_id is None:
            return state
        return self._set_state(InteractionState(mode=state.mode, connect_source_id=state.connect_source_id))

    # --- Clicks ---

    def click_canvas(self, x: Optional[float], y: Optional[float]):
        """Place a node at the pointer, only in add-node mode."""
        if self._state.mode is not InteractionMode.ADD_NODE or x is None or y is None:
            return None
        return self._store.add_node((x, y))

    def click_node(self, node_id: NodeId, click_count: int = 1) -> Optional[CreateEdgeRequest]:
        """
        Handle a genuine single click on a node.

        Clicks with click_count != 1 belong to a double click and are ignored.
        With no tool active, the first click selects the connect source and the
        second click (on any node, including the same one) requests an edge.
        """
        if click_count != 1:
            return None
        state = self._state

        if state.mode is InteractionMode.DELETE_NODE:
            self._store.remove_node(node_id)
            return None
        if state.mode is not InteractionMode.IDLE:
            return None
        if self._store.get_node(node_id) is None:
            return None

        if state.connect_source_id is None:
            self._set_state(InteractionState(
                mode=state.mode, dragging_node_id=state.dragging_node_id, connect_source_id=node_id
            ))
            return None

        source_id = state.connect_source_id
        self._set_state(InteractionState(mode=state.mode, dragging_node_id=state.dragging_node_id))
        if self._store.get_node(source_id) is None:
            return None
        return self._send(CreateEdgeRequest(source_id=source_id, target_id=node_id))

    def double_click_node(self, node_id: NodeId) -> Optional[RenameRequest]:
        state = self._state
        if state.mode is not InteractionMode.IDLE:
            return None
        self._set_state(InteractionState(mode=state.mode, dragging_node_id=state.dragging_node_id))
        if self._store.get_node(node_id) is None:
            return None
        return self._send(RenameRequest(node_id=node_id))

    def click_edge(self, edge_id: EdgeId) -> None:
        if self._state.mode is InteractionMode.DELETE_EDGE:
            self._store.remove_edge(edge_id)

    def double_click_edge(self, edge_id: EdgeId) -> Optional[EditEdgeRequest]:
        if self._store.get_edge(edge_id) is None:
            return None
        return self._send(EditEdgeRequest(edge_id=edge_id))

    def context_menu_edge(self, edge_id: EdgeId, x: float = 0, y: float = 0) -> Optional[EditEdgeRequest]:
        if self._store.get_edge(edge_id) is None:
            return None
        return self._send(EditEdgeRequest(edge_id=edge_id, from_context_menu=True, x=x, y=y))

    # --- Presentation ---

    def hint(self) -> str:
        """Toolbar status text for the current state."""
        state = self._state
        if state.connect_source_id is not None:
            return f"Select the target node to connect from {state.connect_source_id}..."
        if state.mode is InteractionMode.ADD_NODE:
            return "Click the board to create nodes. Press the button again to exit."
        if state.mode is InteractionMode.DELETE_NODE:
            return "Click a node to delete it. Press the button again to exit."
        if state.mode is InteractionMode.DELETE_EDGE:
            return "Click an edge to delete it. Press the button again to exit."
        return ("Click a node and then another (or the same one) to connect. "
                "Double-click a node to rename; double-click an edge to edit; right-click an edge for the menu.")

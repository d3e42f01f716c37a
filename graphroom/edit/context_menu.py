"""
Edge Context Menu - right-click menu for edges with a scoped dismissal subscription.

Dismissal listeners (Escape key, click outside the menu) only exist while the
menu is open: open() acquires them through the subscribe callable and close()
releases them. Nothing is registered globally.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from graphroom.edit.actions import GraphCommands
from graphroom.edit.controller import EditEdgeRequest
from graphroom.utils import EdgeId

logger = logging.getLogger(__name__)

# subscribe(on_dismiss) registers listeners and returns the function that removes them
Unsubscribe = Callable[[], None]
Subscribe = Callable[[Callable[[], None]], Unsubscribe]


@dataclass(frozen=True)
class MenuState:
    visible: bool = False
    x: float = 0
    y: float = 0
    edge_id: Optional[EdgeId] = None


class EdgeContextMenu:
    """Owns the menu's visibility and the lifetime of its dismissal listeners."""

    def __init__(self, commands: GraphCommands, subscribe: Subscribe,
                 on_change: Optional[Callable[[MenuState], None]] = None):
        self._commands = commands
        self._subscribe = subscribe
        self._on_change = on_change
        self._unsubscribe: Optional[Unsubscribe] = None
        self._state = MenuState()

    @property
    def state(self) -> MenuState:
        return self._state

    @property
    def is_subscribed(self) -> bool:
        return self._unsubscribe is not None

    def _set_state(self, state: MenuState):
        self._state = state
        if self._on_change:
            self._on_change(state)

    def open(self, edge_id: EdgeId, x: float, y: float) -> MenuState:
        if self._unsubscribe is not None:
            self._release()
        self._unsubscribe = self._subscribe(self.close)
        self._set_state(MenuState(visible=True, x=x, y=y, edge_id=edge_id))
        return self._state

    def close(self) -> MenuState:
        if not self._state.visible and self._unsubscribe is None:
            return self._state
        self._release()
        self._set_state(MenuState())
        return self._state

    def _release(self):
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    # --- Menu items ---

    def edit(self) -> Optional[EditEdgeRequest]:
        """Close the menu and ask for the edge dialog."""
        edge_id = self._state.edge_id
        self.close()
        if edge_id is None:
            return None
        return self._commands.controller.double_click_edge(edge_id)

    def delete(self) -> None:
        edge_id = self._state.edge_id
        self.close()
        if edge_id is not None:
            logger.debug(f"Deleting edge {edge_id} from context menu")
            self._commands.delete_edge(edge_id)

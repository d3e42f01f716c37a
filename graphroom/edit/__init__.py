"""
Interactive editing system for the Graph Room canvas.

This package provides click/drag editing:
- InteractionController: pointer interaction state machine
- GraphCommands: command surface called by toolbar and dialogs
- EdgeContextMenu: right-click menu with scoped dismissal listeners
- handlers: Event handlers for app.py integration

Usage:
    from graphroom.edit import InteractionController, GraphCommands, EdgeContextMenu
    from graphroom.edit.handlers import setup_edit_handlers
"""

from graphroom.constants import (
    NODE_RADIUS,
    NODE_ELEMENT_PREFIX,
    EDGE_ELEMENT_PREFIX,
)
from graphroom.edit.controller import (
    InteractionController,
    InteractionMode,
    InteractionState,
    CreateEdgeRequest,
    EditEdgeRequest,
    RenameRequest,
)
from graphroom.edit.actions import GraphCommands
from graphroom.edit.context_menu import EdgeContextMenu, MenuState
from graphroom.edit.handlers import setup_edit_handlers

__all__ = [
    'InteractionController',
    'InteractionMode',
    'InteractionState',
    'CreateEdgeRequest',
    'EditEdgeRequest',
    'RenameRequest',
    'GraphCommands',
    'EdgeContextMenu',
    'MenuState',
    'setup_edit_handlers',
    'NODE_RADIUS',
    'NODE_ELEMENT_PREFIX',
    'EDGE_ELEMENT_PREFIX',
]

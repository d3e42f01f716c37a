"""
Graph Commands - the command surface the UI layer calls into.

Toolbar buttons and confirmed dialogs end up here. Each command is a thin,
synchronous wrapper around GraphStore / InteractionController plus the pure
engines, so the UI never mutates the store directly.
"""

import logging
from typing import List, Optional

from graphroom.adjacency import AdjacencyMatrix, build_matrix
from graphroom.conversion import deserialize, sanitize_filename, serialize
from graphroom.edit.controller import InteractionController, InteractionMode, InteractionState
from graphroom.errors import GraphError
from graphroom.geometry import EdgeGeometry, build_scene
from graphroom.graph import Edge, EdgeDirection, GraphSnapshot
from graphroom.graph_store import GraphStore
from graphroom.utils import EdgeId, NodeId

logger = logging.getLogger(__name__)


class GraphCommands:
    """
    Executes editor commands against the single GraphStore.

    Import is all-or-nothing: the text is fully parsed and validated before
    replace_all() swaps the graph, so a failed import leaves it untouched.
    """

    def __init__(self, store: GraphStore, controller: InteractionController):
        self.store = store
        self.controller = controller

    # --- Toolbar ---

    def toggle_add_node(self) -> InteractionState:
        return self.controller.toggle_mode(InteractionMode.ADD_NODE)

    def toggle_delete_node(self) -> InteractionState:
        return self.controller.toggle_mode(InteractionMode.DELETE_NODE)

    def toggle_delete_edge(self) -> InteractionState:
        return self.controller.toggle_mode(InteractionMode.DELETE_EDGE)

    def clear_graph(self) -> None:
        self.store.clear()
        self.controller.reset()

    # --- Dialog confirmations ---

    def confirm_create_edge(self, source: NodeId, target: NodeId, weight,
                            direction=EdgeDirection.FORWARD) -> Edge:
        return self.store.create_edge(source, target, weight, direction)

    def confirm_edit_edge(self, edge_id: EdgeId, weight, direction) -> Optional[Edge]:
        return self.store.update_edge(edge_id, weight, direction)

    def delete_edge(self, edge_id: EdgeId) -> None:
        self.store.remove_edge(edge_id)

    def rename_node(self, node_id: NodeId, label: str) -> None:
        self.store.rename_node(node_id, label)

    # --- Import / Export ---

    def import_graph(self, text: str) -> GraphSnapshot:
        """
        Replace the whole graph with the contents of an exchange-format file.

        Raises:
            ParseError / ValidationError: the graph is left unchanged
        """
        try:
            snapshot = deserialize(text)
            self.store.replace_all(snapshot)
        except GraphError as e:
            logger.warning(f"Import failed: {e}")
            raise
        self.controller.reset()
        return snapshot

    def export_graph(self) -> str:
        return serialize(self.store.snapshot())

    def export_filename(self, name: Optional[str]) -> str:
        return sanitize_filename(name)

    # --- Derived views ---

    def adjacency_matrix(self) -> AdjacencyMatrix:
        snapshot = self.store.snapshot()
        return build_matrix(snapshot.nodes, snapshot.edges)

    def scene(self) -> List[EdgeGeometry]:
        return build_scene(self.store.snapshot())

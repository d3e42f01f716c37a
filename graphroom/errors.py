"""
Error types raised by the Graph Room core.

Every error leaves the prior graph state intact; the UI layer catches them
at the import/dialog boundary and reports them with a notification.
"""


class GraphError(Exception):
    """Base class for graph editor errors."""


class ParseError(GraphError):
    """Import text is not valid JSON."""


class ValidationError(GraphError):
    """Input has the wrong shape or violates a graph invariant."""


class ReferentialIntegrityViolation(ValidationError):
    """An edge references a node id that is not present."""

    def __init__(self, edge_id: str, node_id: str):
        super().__init__(f"Edge {edge_id!r} references unknown node {node_id!r}")
        self.edge_id = edge_id
        self.node_id = node_id


class IllegalMutation(ValidationError):
    """A mutation targets a node or edge that does not exist."""

"""
JSON exchange format for Graph Room.

{
  "nodes": [{"id": str, "x": number, "y": number, "label": str}, ...],
  "edges": [{"id": str, "from": str, "to": str, "value": int >= 0, "directed": bool}, ...]
}

deserialize() is lenient: malformed entries are filtered out and missing
fields get defaults, but text that is not JSON or whose top level is not an
object is rejected. Edges whose endpoints do not survive node filtering are
dropped without being reported to the user.
"""

import json
import logging
import math
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from graphroom.errors import ParseError, ReferentialIntegrityViolation, ValidationError
from graphroom.graph import Edge, GraphSnapshot, Node
from graphroom.utils import EdgeId, NodeId, coerce_weight

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "graphroom"

# \t \n \v \f \r are left in for the whitespace collapse
_ILLEGAL_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x08\x0e-\x1f\x7f]')
_WHITESPACE_RUNS = re.compile(r"\s+")
_DIGITS = re.compile(r"\d+")


def serialize(snapshot: GraphSnapshot) -> str:
    """Canonical JSON text for a snapshot."""
    payload = {
        "nodes": [
            {"id": n.id, "x": n.x, "y": n.y, "label": n.label}
            for n in snapshot.nodes
        ],
        "edges": [
            {"id": e.id, "from": e.source, "to": e.target, "value": e.weight, "directed": e.directed}
            for e in snapshot.edges
        ],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _finite_number(value: Any, default: float = 0.0) -> float:
    """Numbers and numeric strings that are finite; anything else is the default."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return default
    elif isinstance(value, str):
        try:
            number = float(value.strip()) if value.strip() else default
        except ValueError:
            return default
    else:
        return default
    return number if math.isfinite(number) else default


def _clean_nodes(raw_nodes: List[Any]) -> List[Node]:
    nodes: Dict[str, Node] = {}
    for raw in raw_nodes:
        if not isinstance(raw, dict) or not isinstance(raw.get("id"), str):
            continue
        node_id = raw["id"]
        if node_id in nodes:
            logger.debug(f"Skipping duplicate node id {node_id!r}")
            continue
        label = raw.get("label")
        nodes[node_id] = Node(
            id=NodeId(node_id),
            x=_finite_number(raw.get("x")),
            y=_finite_number(raw.get("y")),
            label=label if isinstance(label, str) else node_id,
        )
    return list(nodes.values())


def _clean_edges(raw_edges: List[Any], node_ids: set) -> List[Edge]:
    edges: Dict[str, Edge] = {}
    dropped = 0
    for raw in raw_edges:
        if not isinstance(raw, dict):
            continue
        edge_id, source, target = raw.get("id"), raw.get("from"), raw.get("to")
        if not all(isinstance(v, str) for v in (edge_id, source, target)):
            continue
        missing = next((end for end in (source, target) if end not in node_ids), None)
        if missing is not None:
            dropped += 1
            logger.debug(str(ReferentialIntegrityViolation(edge_id, missing)))
            continue
        if edge_id in edges:
            logger.debug(f"Skipping duplicate edge id {edge_id!r}")
            continue
        edges[edge_id] = Edge(
            id=EdgeId(edge_id),
            source=NodeId(source),
            target=NodeId(target),
            weight=coerce_weight(_finite_number(raw.get("value"))),
            directed=bool(raw.get("directed", False)),
        )
    if dropped:
        logger.info(f"Dropped {dropped} edge(s) with unresolved endpoints during import")
    return list(edges.values())


def deserialize(text: str) -> GraphSnapshot:
    """
    Parse and sanitize exchange-format text.

    Raises:
        ParseError: text is not valid JSON
        ValidationError: the top-level value is not an object
    """
    try:
        raw = json.loads(text)
    except (ValueError, RecursionError, TypeError) as e:
        # ValueError covers JSONDecodeError and over-long integer literals
        raise ParseError(f"Invalid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ValidationError("Invalid graph file: top-level value must be an object")

    raw_nodes = raw.get("nodes") if isinstance(raw.get("nodes"), list) else []
    raw_edges = raw.get("edges") if isinstance(raw.get("edges"), list) else []

    nodes = _clean_nodes(raw_nodes)
    edges = _clean_edges(raw_edges, {n.id for n in nodes})
    return GraphSnapshot(nodes=tuple(nodes), edges=tuple(edges))


def default_export_name(now: Optional[datetime] = None) -> str:
    """Timestamped fallback, e.g. graphroom-20260114-120000.json."""
    now = now or datetime.now()
    return f"{EXPORT_PREFIX}-{now:%Y%m%d-%H%M%S}.json"


def sanitize_filename(name: Optional[str], now: Optional[datetime] = None) -> str:
    """
    Make a user-supplied export name safe for the filesystem.

    Strips characters that are illegal in file names, collapses whitespace,
    appends .json if missing and falls back to a timestamped name when nothing
    usable is left.
    """
    cleaned = _ILLEGAL_FILENAME_CHARS.sub("", name or "")
    cleaned = _WHITESPACE_RUNS.sub(" ", cleaned).strip().rstrip(".").strip()
    if not cleaned or cleaned.lower() == ".json":
        return default_export_name(now)
    if not cleaned.lower().endswith(".json"):
        cleaned += ".json"
    return cleaned


def parse_weight_input(text: Optional[str]) -> int:
    """
    Validate the weight typed into the edge dialog.

    Only digits are accepted (0, 1, 2, ...).

    Raises:
        ValidationError: empty or non-digit input
    """
    value = (text or "").strip()
    if not _DIGITS.fullmatch(value):
        raise ValidationError("Enter digits only (0, 1, 2, ...).")
    return int(value)

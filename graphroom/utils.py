"""
Identifier helpers for Graph Room.

Node and edge ids are opaque strings. The only place that interprets an id as
a number is this module: numeric_value() and the numeric-first ordering key
used by the adjacency matrix and the node-id counter.
"""

import math
import re
from typing import NewType, Optional, Tuple, Union

NodeId = NewType("NodeId", str)
EdgeId = NewType("EdgeId", str)

_DIGIT_RUNS = re.compile(r"(\d+)")


def numeric_value(identifier: str) -> Optional[float]:
    """Return the finite numeric value of an id, or None if it is not a number."""
    text = identifier.strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def natural_key(text: str) -> Tuple[Union[str, int], ...]:
    """
    Case-insensitive key that compares digit runs by value.

    re.split with a capture group always alternates text/digits, so text parts
    land on even positions and integers on odd positions.
    """
    parts = _DIGIT_RUNS.split(text.casefold())
    return tuple(int(p) if i % 2 else p for i, p in enumerate(parts))


def numeric_first_key(identifier: str) -> tuple:
    """
    Sort key for node ids.

    Numeric ids come first, ascending by value; all other ids follow in
    natural case-insensitive order.
    """
    value = numeric_value(identifier)
    if value is not None:
        return (0, value, ())
    return (1, 0.0, natural_key(identifier))


def coerce_weight(value) -> int:
    """Edge weights are non-negative integers: max(0, trunc(value))."""
    if isinstance(value, bool):
        value = int(value)
    if isinstance(value, int):
        return max(0, value)
    if not isinstance(value, float) or not math.isfinite(value):
        return 0
    return max(0, math.trunc(value))


def display_name(node_id: str, label: Optional[str]) -> str:
    """Label shown for a node; falls back to the id when blank."""
    if label and label.strip():
        return label
    return node_id

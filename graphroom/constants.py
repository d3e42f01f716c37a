"""
Shared constants for the diagram editor.

These values are used by the geometry engine, the SVG scene and the event
handlers. They are presentation tuning and can be recalibrated freely.
"""

# Node circle radius in canvas pixels
NODE_RADIUS = 45

# Arrowhead marker size; directed strokes stop this much short of the target boundary
ARROW_SIZE = 12
ARROW_PADDING = 2

# Label lift above a straight edge's midpoint
EDGE_LABEL_LIFT = 5

# Self-loops: base offsets plus growth per tier (two loops per tier, one each side)
LOOP_BASE_DX = 40
LOOP_BASE_DY = 35
LOOP_TIER_DX = 22
LOOP_TIER_DY = 18
LOOP_MIN_INNER = 24
LOOP_INNER_FACTOR = 0.6
LOOP_LABEL_FACTOR = 0.65
LOOP_LABEL_LIFT = 6

# Mirrored edges: perpendicular bow = clamp(factor * (separation - 2r), min, max)
MIRROR_OFFSET_FACTOR = 0.25
MIRROR_OFFSET_MIN = 24
MIRROR_OFFSET_MAX = 60
MIRROR_LABEL_NUDGE = 10

# Max distance from a drawn edge path that still counts as clicking the edge
EDGE_HIT_TOLERANCE = 6

# SVG element id prefixes identifying graph elements in the rendered scene
NODE_ELEMENT_PREFIX = "node:"
EDGE_ELEMENT_PREFIX = "edge:"

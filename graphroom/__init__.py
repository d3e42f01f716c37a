"""
Graph Room - interactive node-link diagram editor.

Core packages:
- graph / graph_store: canonical graph model and its mutation contract
- edit: pointer interaction state machine, command surface, context menu
- geometry / graph_viz: edge geometry and SVG scene rendering
- adjacency: adjacency matrix projection
- conversion: JSON exchange format
"""

__version__ = "0.1.0"

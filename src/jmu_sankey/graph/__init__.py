"""Flow graph construction.

Modules:
    model: Node, Link, DiagramKind and SankeyGraph
    rules: Per-kind construction rules
    builder: Kind dispatch and the fixed diagram slots
"""

from .builder import DIAGRAM_SLOTS, build, build_all
from .model import DiagramKind, Link, Node, SankeyGraph

__all__ = [
    "DIAGRAM_SLOTS",
    "DiagramKind",
    "Link",
    "Node",
    "SankeyGraph",
    "build",
    "build_all",
]

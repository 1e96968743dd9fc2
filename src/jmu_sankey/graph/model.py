"""Flow graph data model shared by every diagram kind."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any


class DiagramKind(str, Enum):
    """The four flow-graph rule sets."""

    STUDENT_COSTS = "student-costs"
    COMPREHENSIVE_FEE = "comprehensive-fee"
    REVENUES = "revenues"
    ATHLETICS = "athletics"


@dataclass(frozen=True)
class Node:
    """Flow graph endpoint, keyed by name."""

    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name}


@dataclass(frozen=True)
class Link:
    """Directed, weighted edge between two named nodes."""

    source: str
    target: str
    value: float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int | float):
            msg = f"Link value must be a number, got {self.value!r}"
            raise TypeError(msg)
        if not math.isfinite(self.value) or self.value < 0:
            msg = f"Link value must be finite and >= 0, got {self.value!r}"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source, "target": self.target, "value": self.value}


class SankeyGraph:
    """NodeSet plus LinkList for one diagram build.

    Nodes are kept in a name-keyed dict so membership checks stay O(1) while
    preserving discovery order. Links with the same (source, target) are kept
    as parallel links; the layout sums them.
    """

    def __init__(self, kind: DiagramKind) -> None:
        self.kind = kind
        self._nodes: dict[str, Node] = {}
        self._links: list[Link] = []
        self.skipped: list[str] = []

    @property
    def nodes(self) -> tuple[Node, ...]:
        return tuple(self._nodes.values())

    @property
    def links(self) -> tuple[Link, ...]:
        return tuple(self._links)

    @property
    def node_names(self) -> list[str]:
        return list(self._nodes)

    def ensure_node(self, name: str) -> Node:
        """Register a node if no node with this name exists yet."""
        node = self._nodes.get(name)
        if node is None:
            node = Node(name)
            self._nodes[name] = node
        return node

    def add_link(self, source: str, target: str, value: float) -> Link:
        """Append a link, registering either endpoint if it is new."""
        link = Link(source, target, value)
        self.ensure_node(source)
        self.ensure_node(target)
        self._links.append(link)
        return link

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """Serialize to the ``{nodes, links}`` shape d3-sankey consumes.

        Every call returns new dicts, so the layout can mutate its input
        without touching this graph.
        """
        return {
            "nodes": [node.to_dict() for node in self._nodes.values()],
            "links": [link.to_dict() for link in self._links],
        }

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return (
            f"SankeyGraph(kind={self.kind.value!r}, nodes={len(self._nodes)}, "
            f"links={len(self._links)})"
        )

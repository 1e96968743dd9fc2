"""Dispatch from diagram kind to its construction rule."""

import logging
from typing import assert_never

from jmu_sankey.dataset import Dataset
from jmu_sankey.graph.model import DiagramKind, SankeyGraph
from jmu_sankey.graph.rules import (
    build_athletics,
    build_comprehensive_fee,
    build_revenues,
    build_student_costs,
)

logger = logging.getLogger(__name__)

__all__ = ["DIAGRAM_SLOTS", "build", "build_all"]

# Page container each diagram is drawn into
DIAGRAM_SLOTS: tuple[tuple[DiagramKind, str], ...] = (
    (DiagramKind.STUDENT_COSTS, "containerOne"),
    (DiagramKind.COMPREHENSIVE_FEE, "containerTwo"),
    (DiagramKind.REVENUES, "containerThree"),
    (DiagramKind.ATHLETICS, "containerFour"),
)


def build(
    dataset: Dataset,
    kind: DiagramKind | str,
    *,
    revenue_year: str = "2023",
) -> SankeyGraph:
    """Build the flow graph for one diagram kind.

    Args:
        dataset: Loaded budget dataset. Never modified.
        kind: Diagram kind or its string value.
        revenue_year: Year column read by the revenues rule.

    Returns:
        A new SankeyGraph owned by the caller.

    Raises:
        ValueError: If kind is not a known diagram kind.
        MissingCollectionError: If the kind's sub-collection is absent.
    """
    kind = DiagramKind(kind)

    match kind:
        case DiagramKind.STUDENT_COSTS:
            graph = build_student_costs(dataset)
        case DiagramKind.COMPREHENSIVE_FEE:
            graph = build_comprehensive_fee(dataset)
        case DiagramKind.REVENUES:
            graph = build_revenues(dataset, year=revenue_year)
        case DiagramKind.ATHLETICS:
            graph = build_athletics(dataset)
        case _:
            assert_never(kind)

    logger.info(
        "Built %s graph: %d nodes, %d links, %d skipped records",
        kind.value,
        len(graph),
        len(graph.links),
        len(graph.skipped),
    )
    return graph


def build_all(dataset: Dataset, *, revenue_year: str = "2023") -> dict[DiagramKind, SankeyGraph]:
    """Build every diagram kind against the same dataset.

    Raises:
        MissingCollectionError: If any kind's sub-collection is absent.
    """
    return {
        kind: build(dataset, kind, revenue_year=revenue_year) for kind, _container in DIAGRAM_SLOTS
    }

"""Graph construction rules, one per diagram kind.

Each rule reads one dataset sub-collection and returns a fresh SankeyGraph.
A record is fully read before the graph is touched, so a record that fails
validation is skipped without leaving partial nodes or links behind. Athletics
is the exception: its record name is always registered, and an unusable sport
value drops only that sport's links.
"""

import logging

from jmu_sankey.dataset import Dataset, Record, RecordError
from jmu_sankey.graph.model import DiagramKind, SankeyGraph

logger = logging.getLogger(__name__)

__all__ = [
    "ATHLETICS_HUB",
    "FEE_ROOT",
    "REVENUE_ROOT",
    "SEMESTERS",
    "SPORTS",
    "STUDENT_ROOT",
    "build_athletics",
    "build_comprehensive_fee",
    "build_revenues",
    "build_student_costs",
]

STUDENT_COSTS_COLLECTION = "student-costs"
REVENUES_COLLECTION = "jmu-revenues"
ATHLETICS_COLLECTION = "jmu-athletics"

STUDENT_ITEMIZED = "student itemized"
FEE_COMPONENT = "Auxiliary Comprehensive Fee Component"

STUDENT_ROOT = "JMU Student"
SEMESTERS = ("Fall", "Spring")
FEE_ROOT = "Auxiliary Comprehensive Fee"
REVENUE_ROOT = "JMU"
ATHLETICS_HUB = "JMU Athletics"
SPORTS = (
    "Football",
    "Men's Basketball",
    "Women's Basketball",
    "Other sports",
    "Non-Program Specific",
)


def _skip(graph: SankeyGraph, record: Record, error: RecordError) -> None:
    logger.warning("Skipping %r in %s diagram: %s", record, graph.kind.value, error)
    graph.skipped.append(str(error))


def build_student_costs(dataset: Dataset) -> SankeyGraph:
    """Student -> semester -> itemized cost."""
    graph = SankeyGraph(DiagramKind.STUDENT_COSTS)
    graph.ensure_node(STUDENT_ROOT)
    for semester in SEMESTERS:
        graph.ensure_node(semester)

    for record in dataset.records(STUDENT_COSTS_COLLECTION):
        if record.get("type") != STUDENT_ITEMIZED:
            continue
        try:
            name = record.text("name")
            semester = record.text("semester")
            cost = record.amount("in-state")
        except RecordError as e:
            _skip(graph, record, e)
            continue

        graph.ensure_node(name)
        graph.add_link(STUDENT_ROOT, semester, cost)
        graph.add_link(semester, name, cost)

    return graph


def build_comprehensive_fee(dataset: Dataset) -> SankeyGraph:
    """Comprehensive fee -> component."""
    graph = SankeyGraph(DiagramKind.COMPREHENSIVE_FEE)
    graph.ensure_node(FEE_ROOT)

    for record in dataset.records(STUDENT_COSTS_COLLECTION):
        if record.get("type") != FEE_COMPONENT:
            continue
        try:
            name = record.text("name")
            amount = record.amount("amount")
        except RecordError as e:
            _skip(graph, record, e)
            continue

        graph.ensure_node(name)
        graph.add_link(FEE_ROOT, name, amount)

    return graph


def build_revenues(dataset: Dataset, year: str = "2023") -> SankeyGraph:
    """JMU -> revenue category -> revenue line.

    Net figures can be negative in the source data; flow direction is fixed,
    so the magnitude is used.
    """
    graph = SankeyGraph(DiagramKind.REVENUES)
    graph.ensure_node(REVENUE_ROOT)

    for record in dataset.records(REVENUES_COLLECTION):
        try:
            category = record.text("type")
            name = record.text("name")
            raw = record.number(year)
        except RecordError as e:
            _skip(graph, record, e)
            continue

        value = abs(raw)
        graph.ensure_node(category)
        graph.ensure_node(name)
        graph.add_link(REVENUE_ROOT, category, value)
        graph.add_link(category, name, value)

    return graph


def build_athletics(dataset: Dataset) -> SankeyGraph:
    """Sport -> JMU Athletics -> expense line, for each positive sport amount."""
    graph = SankeyGraph(DiagramKind.ATHLETICS)
    for sport in SPORTS:
        graph.ensure_node(sport)
    graph.ensure_node(ATHLETICS_HUB)

    for record in dataset.records(ATHLETICS_COLLECTION):
        try:
            name = record.text("name")
        except RecordError as e:
            _skip(graph, record, e)
            continue

        graph.ensure_node(name)
        for sport in SPORTS:
            try:
                amount = record.number(sport, required=False)
            except RecordError as e:
                # Only this sport's flow is dropped; the record's other sports still count
                _skip(graph, record, e)
                continue
            if amount is None or amount <= 0:
                continue
            graph.add_link(sport, ATHLETICS_HUB, amount)
            graph.add_link(ATHLETICS_HUB, name, amount)

    return graph

"""
Comparison Engine

Builds the cross-dataset comparison of weakness categories.

Dataset 0 is the baseline: deltas run between consecutive datasets, while
overlaps always compare dataset 0 with each later dataset. The engine is a
pure function of its input and is simply re-run whenever the set of
datasets changes.
"""

import logging
from typing import Mapping, Optional, Sequence

from sarif_compare.aggregator import aggregate_dataset, category_counts
from sarif_compare.models import ComparisonResult, ComparisonRow, Dataset, RuleGroup

__all__ = [
    "overlap_percentage",
    "average_overlaps",
    "build_row",
    "compare",
    "compare_datasets",
]

logger = logging.getLogger(__name__)


def overlap_percentage(a: int, b: int) -> float:
    """Overlap of two category counts as a percentage in ``[0, 100]``.

    Two empty counts give 0, not 100: a category missing from both datasets
    must not be reported as fully overlapping.
    """
    if a == 0 and b == 0:
        return 0.0
    return min(a, b) / max(a, b) * 100


def average_overlaps(rows: Sequence[ComparisonRow], pairings: int) -> tuple[float, ...]:
    """Mean overlap per pairing across all rows (0 for every pairing when there are no rows)"""
    if not rows:
        return tuple(0.0 for _ in range(pairings))
    return tuple(sum(row.overlaps[i] for row in rows) / len(rows) for i in range(pairings))


def build_row(category: str, findings: Sequence[int], contributors: Sequence = ()) -> ComparisonRow:
    """Derive deltas and overlaps for one category's per-dataset counts"""
    counts = tuple(findings)
    deltas = tuple(counts[i + 1] - counts[i] for i in range(len(counts) - 1))
    overlaps = tuple(overlap_percentage(counts[0], count) for count in counts[1:])
    return ComparisonRow(
        category=category,
        findings=counts,
        deltas=deltas,
        overlaps=overlaps,
        contributors=tuple(contributors),
    )


def compare(
    aggregates: Sequence[Mapping[str, list[RuleGroup]]],
    names: Optional[Sequence[str]] = None,
) -> ComparisonResult:
    """Compare the category aggregates of several datasets.

    Args:
        aggregates: One :func:`group_by_category` output per dataset, baseline first
        names: Display names (tool names) per dataset; defaults to ``Dataset N``

    Returns:
        ComparisonResult with one row per category in the union of all
        datasets' categories, sorted lexicographically
    """
    if names is None:
        names = [f"Dataset {i + 1}" for i in range(len(aggregates))]

    counts = [category_counts(aggregate) for aggregate in aggregates]
    all_categories = sorted({category for aggregate in aggregates for category in aggregate})

    rows = []
    for category in all_categories:
        findings = [per_dataset.get(category, 0) for per_dataset in counts]
        contributors = [
            tuple((group.rule_id, group.count) for group in aggregate.get(category, []))
            for aggregate in aggregates
        ]
        rows.append(build_row(category, findings, contributors))

    pairings = max(len(aggregates) - 1, 0)
    result = ComparisonResult(
        names=tuple(names),
        rows=tuple(rows),
        average_overlaps=average_overlaps(rows, pairings),
    )
    logger.debug("Compared %d datasets across %d categories", len(aggregates), len(rows))
    return result


def compare_datasets(datasets: Sequence[Dataset]) -> ComparisonResult:
    """Run the full core pipeline (store, aggregator, engine) over datasets"""
    return compare([aggregate_dataset(dataset) for dataset in datasets], [dataset.name for dataset in datasets])

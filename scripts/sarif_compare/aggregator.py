"""
Category Aggregator

Rolls one dataset's rule groups up to weakness categories.

Rules whose tags carry no CWE are left out of the category view entirely;
they stay visible in the per-rule summary (see ``summary.py``).
"""

import logging
from typing import Mapping, Optional

from sarif_compare.categories import resolve_category
from sarif_compare.finding_store import group_by_rule
from sarif_compare.models import Dataset, Finding, Rule, RuleGroup

__all__ = ["group_by_category", "category_counts", "aggregate_dataset"]

logger = logging.getLogger(__name__)


def group_by_category(
    groups: Mapping[Optional[str], list[Finding]],
    rules: Mapping[str, Rule],
) -> dict[str, list[RuleGroup]]:
    """Group rule groups under their resolved category.

    Args:
        groups: Output of :func:`group_by_rule` for one dataset
        rules: The same dataset's rule metadata

    Returns:
        Mapping of ``CWE-<n>`` to the rule groups resolving to it, in the
        rule iteration order of ``groups``
    """
    categories: dict[str, list[RuleGroup]] = {}
    skipped = 0

    for rule_id, items in groups.items():
        category = resolve_category(rules, rule_id)
        if category is None:
            skipped += 1
            continue
        if category not in categories:
            categories[category] = []
        categories[category].append(RuleGroup(rule_id=rule_id, findings=tuple(items)))

    logger.debug(
        "Aggregated %d rule groups into %d categories (%d without category)",
        len(groups) - skipped,
        len(categories),
        skipped,
    )
    return categories


def category_counts(categories: Mapping[str, list[RuleGroup]]) -> dict[str, int]:
    """Number of findings per category (sum of group sizes)"""
    return {category: sum(group.count for group in entries) for category, entries in categories.items()}


def aggregate_dataset(dataset: Dataset) -> dict[str, list[RuleGroup]]:
    """Convenience wrapper: Finding Store then Category Aggregator for one dataset"""
    return group_by_category(group_by_rule(dataset.findings), dataset.rules)

"""
Finding Store

Partitions one dataset's findings by the rule that produced them.
"""

import logging
from typing import Iterable, Optional

from sarif_compare.models import Finding

__all__ = ["group_by_rule", "count_findings"]

logger = logging.getLogger(__name__)


def group_by_rule(findings: Iterable[Finding]) -> dict[Optional[str], list[Finding]]:
    """Group findings by ``rule_id``.

    Groups appear in the order their rule was first seen and each group
    keeps the relative order of its findings. An empty or missing rule id
    is a group of its own, not an error.

    Args:
        findings: Findings of a single dataset, in document order

    Returns:
        Mapping of rule id to the findings sharing it
    """
    grouped: dict[Optional[str], list[Finding]] = {}

    for finding in findings:
        if finding.rule_id not in grouped:
            grouped[finding.rule_id] = []
        grouped[finding.rule_id].append(finding)

    logger.debug("Grouped findings into %d rule groups", len(grouped))
    return grouped


def count_findings(groups: dict[Optional[str], list[Finding]]) -> int:
    """Total number of findings across all rule groups"""
    return sum(len(items) for items in groups.values())

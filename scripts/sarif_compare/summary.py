"""
Per-rule summary of a single dataset.

Flattens the Finding Store and Category Resolver output into one line per
rule: its category (if any), tags, finding count and effective severity.
Each line also carries the rule description and its findings for detail
views.
"""

from typing import Mapping, Sequence

from sarif_compare.categories import resolve_category
from sarif_compare.finding_store import group_by_rule
from sarif_compare.models import Dataset, Finding, Rule, RuleSummaryRow

__all__ = [
    "SEVERITY_ORDER",
    "severity_weight",
    "effective_level",
    "summarize_rules",
    "total_findings",
]

SEVERITY_ORDER = ["error", "warning", "info", "note"]


def severity_weight(severity: str) -> int:
    """Sort weight of a level; unknown levels (including ``none``) sort last"""
    level = severity.lower()
    if level in SEVERITY_ORDER:
        return SEVERITY_ORDER.index(level)
    return len(SEVERITY_ORDER)


def effective_level(finding: Finding, rules: Mapping[str, Rule]) -> str:
    """Finding level, else the rule's default level, else ``none``"""
    if finding.level:
        return finding.level.lower()
    rule = rules.get(finding.rule_id) if finding.rule_id is not None else None
    if rule is not None and rule.level:
        return rule.level.lower()
    return "none"


def summarize_rules(dataset: Dataset) -> list[RuleSummaryRow]:
    """One summary row per rule group, most severe first.

    The severity of a row is the effective level of the group's first
    finding. Rows with equal severity keep the Finding Store order.
    """
    rows = []
    for rule_id, items in group_by_rule(dataset.findings).items():
        rule = dataset.rules.get(rule_id) if rule_id is not None else None
        rows.append(
            RuleSummaryRow(
                rule_id=rule_id,
                category=resolve_category(dataset.rules, rule_id) or "",
                tags=rule.tags if rule is not None else (),
                count=len(items),
                severity=effective_level(items[0], dataset.rules),
                description=(rule.short_description or rule.name or "") if rule is not None else "",
                findings=tuple(items),
            )
        )

    rows.sort(key=lambda row: severity_weight(row.severity))
    return rows


def total_findings(rows: Sequence[RuleSummaryRow]) -> int:
    return sum(row.count for row in rows)

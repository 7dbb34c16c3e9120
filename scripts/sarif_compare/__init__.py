"""SARIF comparison package: group findings by rule and CWE, compare up to three runs."""

from sarif_compare.aggregator import aggregate_dataset, category_counts, group_by_category
from sarif_compare.categories import cwe_from_tags, resolve_category
from sarif_compare.comparison import average_overlaps, compare, compare_datasets, overlap_percentage
from sarif_compare.exceptions import ConfigError, DatasetLimitError, SarifCompareError, SarifLoadError
from sarif_compare.finding_store import count_findings, group_by_rule
from sarif_compare.ingest import load_sarif, load_sarif_text, parse_sarif
from sarif_compare.models import (
    ComparisonResult,
    ComparisonRow,
    Dataset,
    Finding,
    Location,
    Rule,
    RuleGroup,
    RuleSummaryRow,
)
from sarif_compare.session import ComparisonSession
from sarif_compare.summary import effective_level, summarize_rules

__version__ = "1.0.0"

__all__ = [
    "ComparisonResult",
    "ComparisonRow",
    "ComparisonSession",
    "ConfigError",
    "Dataset",
    "DatasetLimitError",
    "Finding",
    "Location",
    "Rule",
    "RuleGroup",
    "RuleSummaryRow",
    "SarifCompareError",
    "SarifLoadError",
    "aggregate_dataset",
    "average_overlaps",
    "category_counts",
    "compare",
    "compare_datasets",
    "count_findings",
    "cwe_from_tags",
    "effective_level",
    "group_by_category",
    "group_by_rule",
    "load_sarif",
    "load_sarif_text",
    "overlap_percentage",
    "parse_sarif",
    "resolve_category",
    "summarize_rules",
]

"""
SARIF Comparison Data Models.

This module contains the core dataclass definitions shared by the ingestion
layer, the comparison core and the exporters.

Classes:
    Location: Physical location of a finding (file + optional region)
    Finding: One reported static-analysis issue
    Rule: Per-dataset metadata describing a kind of finding
    Dataset: One ingested analysis run (findings + rule metadata)
    RuleGroup: A rule id paired with the findings it produced
    ComparisonRow: Cross-dataset view of one weakness category
    ComparisonResult: Snapshot produced by one comparison run
    RuleSummaryRow: Flattened per-rule summary line
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Location:
    """File path plus an optional line/column range"""

    uri: str = ""
    start_line: Optional[int] = None
    start_column: Optional[int] = None
    end_line: Optional[int] = None
    end_column: Optional[int] = None

    def display(self) -> str:
        if self.start_line is None:
            return self.uri
        return f"{self.uri}:{self.start_line}"


@dataclass(frozen=True)
class Finding:
    """One reported issue"""

    rule_id: Optional[str]  # empty or missing ids form their own group
    message: str = ""
    locations: tuple[Location, ...] = ()
    level: Optional[str] = None  # lower-cased at ingestion; None when absent


@dataclass(frozen=True)
class Rule:
    """Rule metadata, unique by id within one dataset's tool"""

    id: str
    name: Optional[str] = None
    short_description: Optional[str] = None
    level: Optional[str] = None  # defaultConfiguration.level
    tags: tuple[str, ...] = ()


@dataclass
class Dataset:
    """One analysis run.

    Rule ids are scoped to the dataset: the same id in two datasets need
    not denote the same rule, so every dataset owns its own mapping.
    """

    name: str
    findings: list[Finding] = field(default_factory=list)
    rules: dict[str, Rule] = field(default_factory=dict)
    source: Optional[str] = None

    @property
    def total_findings(self) -> int:
        return len(self.findings)


@dataclass(frozen=True)
class RuleGroup:
    """A rule id and the findings it produced, in document order"""

    rule_id: Optional[str]
    findings: tuple[Finding, ...]

    @property
    def count(self) -> int:
        return len(self.findings)


@dataclass(frozen=True)
class ComparisonRow:
    """One weakness category across every compared dataset"""

    category: str
    findings: tuple[int, ...]
    deltas: tuple[int, ...]
    overlaps: tuple[float, ...]
    # (rule_id, count) pairs per dataset, in dataset order
    contributors: tuple[tuple[tuple[Optional[str], int], ...], ...] = ()


@dataclass(frozen=True)
class ComparisonResult:
    """Rows and averages derived from one snapshot of datasets"""

    names: tuple[str, ...]
    rows: tuple[ComparisonRow, ...]
    average_overlaps: tuple[float, ...]

    @property
    def categories(self) -> list[str]:
        return [row.category for row in self.rows]


@dataclass(frozen=True)
class RuleSummaryRow:
    """Per-rule summary line"""

    rule_id: Optional[str]
    category: str
    tags: tuple[str, ...]
    count: int
    severity: str
    description: str = ""  # rule short description, else its name
    findings: tuple[Finding, ...] = ()


__all__ = [
    "Location",
    "Finding",
    "Rule",
    "Dataset",
    "RuleGroup",
    "ComparisonRow",
    "ComparisonResult",
    "RuleSummaryRow",
]

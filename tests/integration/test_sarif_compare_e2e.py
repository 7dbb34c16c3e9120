#!/usr/bin/env python3
"""
End-to-end tests for SARIF comparison
Tests the complete workflow: SARIF files on disk -> session -> console summary and exports.
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "scripts"))

from openpyxl import load_workbook

from sarif_compare.ingest import load_sarif
from sarif_compare.report import save_results
from sarif_compare.session import ComparisonSession


def _write(path: Path, name: str, rules, results) -> Path:
    doc = {
        "version": "2.1.0",
        "runs": [{"tool": {"driver": {"name": name, "rules": rules}}, "results": results}],
    }
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def _hits(rule_id, count, level=None):
    hit = {"ruleId": rule_id, "message": {"text": f"{rule_id} finding"}}
    if level:
        hit["level"] = level
    return [dict(hit) for _ in range(count)]


@pytest.fixture
def sarif_files(tmp_path):
    codeql = _write(
        tmp_path / "codeql.sarif",
        "CodeQL",
        [
            {"id": "A", "properties": {"tags": ["security", "CWE-79"]}},
            {"id": "C", "properties": {"tags": ["CWE-89"]}},
        ],
        _hits("A", 2) + _hits("C", 1, "error"),
    )
    semgrep = _write(
        tmp_path / "semgrep.sarif",
        "Semgrep",
        [{"id": "B", "defaultConfiguration": {"level": "warning"}, "properties": {"tags": ["CWE:79"]}}],
        _hits("B", 3),
    )
    snyk = _write(
        tmp_path / "snyk.sarif",
        "Snyk",
        [{"id": "D", "properties": {"tags": ["CWE-22"]}}],
        _hits("D", 1) + _hits("untagged", 4),
    )
    return [codeql, semgrep, snyk]


class TestComparisonWorkflowE2E:
    def test_three_tool_comparison(self, sarif_files):
        session = ComparisonSession()
        for path in sarif_files:
            session.upload(load_sarif(path))

        result, summaries = session.snapshot()

        assert result.names == ("CodeQL", "Semgrep", "Snyk")
        assert result.categories == ["CWE-22", "CWE-79", "CWE-89"]

        by_category = {row.category: row for row in result.rows}
        xss = by_category["CWE-79"]
        assert xss.findings == (2, 3, 0)
        assert xss.deltas == (1, -3)
        assert xss.overlaps[0] == pytest.approx(200 / 3)
        assert xss.overlaps[1] == 0.0

        traversal = by_category["CWE-22"]
        assert traversal.findings == (0, 0, 1)
        assert traversal.overlaps == (0.0, 0.0)

        # Untagged and unknown rules never reach the comparison
        assert sum(sum(row.findings) for row in result.rows) == 7

        assert [row.rule_id for row in summaries[0]] == ["C", "A"]
        assert summaries[0][0].severity == "error"
        assert summaries[1][0].severity == "warning"

    def test_replace_and_reset(self, sarif_files, tmp_path):
        session = ComparisonSession()
        session.upload(load_sarif(sarif_files[0]))
        session.upload(load_sarif(sarif_files[1]))

        replacement = _write(
            tmp_path / "semgrep2.sarif",
            "Semgrep",
            [{"id": "B", "properties": {"tags": ["CWE-79"]}}],
            _hits("B", 2),
        )
        session.upload(load_sarif(replacement), index=1)
        assert session.result().rows[0].overlaps == (100.0,)

        session.reset()
        assert session.result().rows == ()

    def test_exports(self, sarif_files, tmp_path):
        session = ComparisonSession()
        for path in sarif_files:
            session.upload(load_sarif(path))
        result, summaries = session.snapshot()

        written = save_results(result, summaries, str(tmp_path / "out"), formats=["xlsx", "json", "md"])
        names = {path.name for path in written}
        assert {"sarif-comparison.xlsx", "sarif-summary-1.xlsx", "sarif-summary-3.xlsx"} <= names

        ws = load_workbook(tmp_path / "out" / "sarif-comparison.xlsx")["Comparison Summary"]
        assert ws["A1"].value == "CodeQL vs Semgrep vs Snyk"
        assert ws["A3"].value == "CWE"

        summary = load_workbook(tmp_path / "out" / "sarif-summary-3.xlsx")["Summary"]
        last = list(summary.iter_rows(values_only=True))[-1]
        assert last[0] == "TOTAL"
        assert last[3] == 5

        md = next(path for path in written if path.suffix == ".md").read_text(encoding="utf-8")
        assert "| CWE-79 | 2 | 3 | 0 | +1 | -3 | 66.7% | 0.0% |" in md
        assert "#### `A`" in md
        assert "- A finding\n" in md

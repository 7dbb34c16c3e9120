#!/usr/bin/env python3
"""
Unit tests for the sarif-compare command line
"""

import json
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../scripts"))

import pytest

from sarif_compare.cli import build_parser, main


def _write_sarif(directory, filename, name, findings):
    """Write a SARIF file where ``findings`` maps rule id -> (cwe tag, count)."""
    rules = [{"id": rule_id, "properties": {"tags": [tag]}} for rule_id, (tag, _) in findings.items()]
    results = [
        {"ruleId": rule_id, "message": {"text": f"{rule_id} hit"}}
        for rule_id, (_, count) in findings.items()
        for _ in range(count)
    ]
    doc = {"version": "2.1.0", "runs": [{"tool": {"driver": {"name": name, "rules": rules}}, "results": results}]}
    path = directory / filename
    path.write_text(json.dumps(doc), encoding="utf-8")
    return str(path)


@pytest.fixture(autouse=True)
def _restore_root_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path):
    for key in list(os.environ):
        if key.startswith("SARIF_COMPARE_") or key == "LOG_LEVEL":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def two_files(tmp_path):
    return [
        _write_sarif(tmp_path, "codeql.sarif", "CodeQL", {"r1": ("CWE-79", 2)}),
        _write_sarif(tmp_path, "semgrep.sarif", "Semgrep", {"r2": ("CWE:79", 3)}),
    ]


class TestParser:
    def test_compare_requires_files(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["compare"])

    def test_options(self):
        args = build_parser().parse_args(["compare", "a.sarif", "--format", "json", "--run-index", "1", "--quiet"])
        assert args.files == ["a.sarif"]
        assert args.format == "json"
        assert args.run_index == 1
        assert args.quiet is True


class TestCompareCommand:
    def test_writes_requested_formats(self, two_files, tmp_path, capsys):
        out_dir = tmp_path / "out"
        code = main(["compare", *two_files, "--output-dir", str(out_dir), "--format", "json,md", "--quiet"])
        assert code == 0
        stdout = capsys.readouterr().out
        assert "CodeQL: 2 findings | Δ +1 | Semgrep: 3 findings | overlap 66.7%" in stdout
        assert len(list(out_dir.glob("*.json"))) == 1
        assert len(list(out_dir.glob("*.md"))) == 1
        assert not list(out_dir.glob("*.xlsx"))

    def test_default_xlsx(self, two_files, tmp_path):
        out_dir = tmp_path / "xlsx"
        assert main(["compare", *two_files, "--output-dir", str(out_dir), "--quiet"]) == 0
        assert (out_dir / "sarif-comparison.xlsx").exists()
        assert (out_dir / "sarif-summary-1.xlsx").exists()
        assert (out_dir / "sarif-summary-2.xlsx").exists()

    def test_too_many_files(self, two_files):
        with pytest.raises(SystemExit) as exc_info:
            main(["compare", *two_files, *two_files])
        assert exc_info.value.code == 2

    def test_invalid_sarif_file(self, two_files, tmp_path):
        broken = tmp_path / "broken.sarif"
        broken.write_text("{not json", encoding="utf-8")
        assert main(["compare", two_files[0], str(broken), "--output-dir", str(tmp_path / "o")]) == 2

    def test_missing_config_file(self, two_files, tmp_path):
        assert main(["compare", *two_files, "--config", str(tmp_path / "missing.yml")]) == 2

    def test_invalid_format_rejected(self, two_files, tmp_path):
        out_dir = tmp_path / "bad"
        assert main(["compare", *two_files, "--output-dir", str(out_dir), "--format", "pdf"]) == 2
        assert not out_dir.exists()


class TestSummaryCommand:
    def test_single_file_summary(self, tmp_path):
        path = _write_sarif(tmp_path, "one.sarif", "CodeQL", {"sqli": ("CWE-89", 2), "xss": ("CWE-79", 1)})
        out_dir = tmp_path / "summary"
        assert main(["summary", path, "--output-dir", str(out_dir), "--quiet"]) == 0
        assert (out_dir / "sarif-summary.xlsx").exists()
        assert not (out_dir / "sarif-comparison.xlsx").exists()

    def test_prints_rule_summary(self, tmp_path, capsys):
        path = _write_sarif(tmp_path, "style.sarif", "Linter", {"plain-rule": ("style", 2)})
        assert main(["summary", path, "--format", "json", "--output-dir", str(tmp_path / "s"), "--quiet"]) == 0
        out = capsys.readouterr().out
        assert "RULES - Linter" in out
        assert "plain-rule | - | 2 findings | style" in out
        assert "TOTAL: 2 findings" in out
        assert "SARIF COMPARISON - RESULTS" not in out


class TestConsoleOutput:
    def test_compare_prints_rules_per_dataset(self, two_files, tmp_path, capsys):
        assert main(["compare", *two_files, "--format", "json", "--output-dir", str(tmp_path / "c"), "--quiet"]) == 0
        out = capsys.readouterr().out
        assert "RULES - CodeQL" in out
        assert "RULES - Semgrep" in out
        assert "r2 | CWE-79 | 3 findings" in out

    def test_numeric_formats_in_config_file(self, two_files, tmp_path):
        config = tmp_path / "bad-formats.yml"
        config.write_text("output:\n  formats: 5\n", encoding="utf-8")
        assert main(["compare", *two_files, "--config", str(config)]) == 2

    def test_config_source_is_logged(self, two_files, tmp_path, caplog):
        config = tmp_path / "cfg.yml"
        config.write_text("output:\n  formats: json\n", encoding="utf-8")
        logging.getLogger().setLevel(logging.WARNING)
        assert main(["compare", *two_files, "--config", str(config), "--output-dir", str(tmp_path / "l")]) == 0
        assert "Loading config from" in caplog.text

#!/usr/bin/env python3
"""
Unit tests for the Category Resolver

Covers:
  - CWE extraction from ``CWE-`` and ``CWE:`` tags
  - First-match tie-break across several CWE tags
  - Malformed and case-mismatched tags
  - Rule lookup within one dataset's rules
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../scripts"))

import pytest

from sarif_compare.categories import cwe_from_tags, resolve_category
from sarif_compare.models import Rule


# ---------------------------------------------------------------------------
# cwe_from_tags
# ---------------------------------------------------------------------------


class TestCweFromTags:
    @pytest.mark.parametrize(
        "tags,expected",
        [
            (["CWE-79"], "CWE-79"),
            (["CWE:89"], "CWE-89"),
            (["security", "CWE-22: Path Traversal"], "CWE-22"),
            (["external/cwe/cwe-079"], None),
            (["cwe-79"], None),
            ([], None),
            (["security", "correctness"], None),
        ],
    )
    def test_extraction(self, tags, expected):
        assert cwe_from_tags(tags) == expected

    def test_first_match_wins(self):
        assert cwe_from_tags(["CWE-79", "CWE-80"]) == "CWE-79"
        assert cwe_from_tags(["CWE:80", "CWE-79"]) == "CWE-80"

    def test_prefix_without_digits_has_no_category(self):
        assert cwe_from_tags(["CWE-unknown"]) is None
        assert cwe_from_tags(["CWE:"]) is None

    def test_malformed_first_tag_is_not_skipped(self):
        """Only the first prefixed tag is consulted."""
        assert cwe_from_tags(["CWE-abc", "CWE-79"]) is None

    def test_accepts_tuple(self):
        assert cwe_from_tags(("x", "CWE-352")) == "CWE-352"


# ---------------------------------------------------------------------------
# resolve_category
# ---------------------------------------------------------------------------


class TestResolveCategory:
    def setup_method(self):
        self.rules = {
            "xss": Rule(id="xss", tags=("security", "CWE-79")),
            "style": Rule(id="style", tags=("maintainability",)),
            "bare": Rule(id="bare"),
        }

    def test_known_rule(self):
        assert resolve_category(self.rules, "xss") == "CWE-79"

    def test_rule_without_cwe_tag(self):
        assert resolve_category(self.rules, "style") is None

    def test_rule_without_tags(self):
        assert resolve_category(self.rules, "bare") is None

    def test_unknown_rule(self):
        assert resolve_category(self.rules, "missing") is None

    def test_missing_rule_id(self):
        assert resolve_category(self.rules, None) is None
        assert resolve_category(self.rules, "") is None

"""
Category Resolver

Maps a rule to its weakness category (CWE) by scanning the rule's free-text
tags. Tags come from loosely structured tool metadata, so resolution is plain
string matching with a first-match tie-break rather than a lookup table.
"""

import re
from typing import Iterable, Mapping, Optional

from sarif_compare.models import Rule

__all__ = ["CWE_PREFIXES", "cwe_from_tags", "resolve_category"]

CWE_PREFIXES = ("CWE:", "CWE-")

_CWE_PATTERN = re.compile(r"CWE[-:](\d+)")


def cwe_from_tags(tags: Iterable[str]) -> Optional[str]:
    """Return the normalized ``CWE-<digits>`` category for a tag list.

    Only the first tag carrying a ``CWE:``/``CWE-`` prefix is considered.
    When that tag has no digits after the separator the rule has no
    category; later tags are not consulted.

    Args:
        tags: Rule tags in document order

    Returns:
        ``"CWE-<digits>"`` or ``None``
    """
    cwe_tag = next((tag for tag in tags if tag.startswith(CWE_PREFIXES)), None)
    if cwe_tag is None:
        return None

    match = _CWE_PATTERN.search(cwe_tag)
    if not match:
        return None
    return f"CWE-{match.group(1)}"


def resolve_category(rules: Mapping[str, Rule], rule_id: Optional[str]) -> Optional[str]:
    """Resolve the category of ``rule_id`` within one dataset's rules.

    Unknown rules (including missing ids) have no category.
    """
    if rule_id is None:
        return None
    rule = rules.get(rule_id)
    if rule is None:
        return None
    return cwe_from_tags(rule.tags)

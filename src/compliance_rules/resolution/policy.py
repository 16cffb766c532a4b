"""Policy defaults for rule specificity and tie-break ordering."""

from __future__ import annotations

from typing import Dict, Tuple

from compliance_rules.constants import Scope


# Higher rank wins.
SPECIFICITY_RANK: Dict[Scope, int] = {
    Scope.GLOBAL: 0,
    Scope.CATEGORY: 1,
    Scope.SUBCATEGORY: 2,
}


def specificity_rank(scope: Scope) -> int:
    """Return the precedence rank of a scope (subcategory > category > global)."""
    return SPECIFICITY_RANK[scope]


def rule_id_sort_key(rule_id: str) -> Tuple[int, int, str]:
    """
    Natural ordering key for rule ids, used for the lowest-id tie-break.

    Numeric ids compare numerically ("2" < "10") and sort before non-numeric
    ids, which compare as plain strings.
    """
    text = str(rule_id)
    if text.isascii() and text.isdigit():
        return (0, int(text), text)
    return (1, 0, text)


__all__ = [
    "SPECIFICITY_RANK",
    "specificity_rank",
    "rule_id_sort_key",
]

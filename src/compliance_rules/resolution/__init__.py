"""
Rule hierarchy resolution for compliance_rules.

Provides specificity ranking, matcher evaluation and effective-rule selection.
"""

from .hierarchy import (
    NO_RULE_FOUND,
    NoRuleFound,
    RuleResolution,
    explain_resolution,
    match_rules,
    resolve_rule,
    rule_matches,
)
from .policy import SPECIFICITY_RANK, rule_id_sort_key, specificity_rank

__all__ = [
    "NO_RULE_FOUND",
    "NoRuleFound",
    "RuleResolution",
    "explain_resolution",
    "match_rules",
    "resolve_rule",
    "rule_matches",
    "SPECIFICITY_RANK",
    "rule_id_sort_key",
    "specificity_rank",
]

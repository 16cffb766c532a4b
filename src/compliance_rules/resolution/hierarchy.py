"""
Hierarchical rule resolution.

Resolver Contract
1) Input: rule category, immutable RuleTable snapshot, ResolutionTarget
2) Candidates: active rules of the category whose matcher matches the target at
   their scope (wildcard always matches; exact matchers need string equality
   with the target field chosen by the scope)
3) Ranking: subcategory > category > global
4) Tie-breaker: lowest rule id (natural order) among same-specificity winners
5) No candidate: NO_RULE_FOUND, a valid "nothing applies" outcome, not an error
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

from compliance_rules.constants import RuleCategory, Scope
from compliance_rules.resolution.policy import rule_id_sort_key, specificity_rank
from compliance_rules.schemas.rule_contract import ResolutionTarget, Rule, RuleTable

logger = logging.getLogger(__name__)


class NoRuleFound:
    """Falsy sentinel returned when no active rule applies to a target."""

    _instance: Optional["NoRuleFound"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_RULE_FOUND"


NO_RULE_FOUND = NoRuleFound()


@dataclass(frozen=True)
class RuleResolution:
    """Outcome of a resolution pass, with the data needed to explain it."""

    category: RuleCategory
    rule: Optional[Rule]
    candidates: Tuple[Rule, ...] = ()
    tied_rule_ids: Tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        return self.rule is not None

    @property
    def has_tie(self) -> bool:
        return len(self.tied_rule_ids) > 1


def rule_matches(rule: Rule, target: ResolutionTarget) -> bool:
    """True when the rule's matcher accepts the target at the rule's scope."""
    if rule.scope is Scope.GLOBAL or rule.is_wildcard:
        return True
    value = target.value_for(rule.scope)
    return value is not None and value == rule.target_matcher


def _rank_key(rule: Rule):
    return (-specificity_rank(rule.scope), rule_id_sort_key(rule.rule_id))


def match_rules(
    category: RuleCategory,
    table: RuleTable,
    target: ResolutionTarget,
    predicate: Optional[Callable[[Rule], bool]] = None,
) -> List[Rule]:
    """
    All active rules of ``category`` matching ``target``, best first.

    Ordered by specificity (most specific first), then by rule id.

    Args:
        category: Rule category to consider.
        table: Rule table snapshot.
        target: Concrete target being evaluated.
        predicate: Optional extra filter (e.g. the folder trigger event type).
    """
    matched = [
        rule
        for rule in table.of_category(category)
        if rule.is_active
        and rule_matches(rule, target)
        and (predicate is None or predicate(rule))
    ]
    matched.sort(key=_rank_key)
    return matched


def explain_resolution(
    category: RuleCategory,
    table: RuleTable,
    target: ResolutionTarget,
) -> RuleResolution:
    """Resolve the effective rule and report the candidates and any tie."""
    candidates = match_rules(category, table, target)
    if not candidates:
        logger.debug(f"No {category.value} rule matches target {target.target_id!r}")
        return RuleResolution(category=category, rule=None)

    winner = candidates[0]
    tied = tuple(
        rule.rule_id for rule in candidates if rule.scope is winner.scope
    )
    logger.debug(
        f"Resolved {category.value} rule {winner.rule_id} ({winner.scope.value}) "
        f"from {len(candidates)} candidates"
    )
    return RuleResolution(
        category=category,
        rule=winner,
        candidates=tuple(candidates),
        tied_rule_ids=tied if len(tied) > 1 else (),
    )


def resolve_rule(
    category: RuleCategory,
    table: RuleTable,
    target: ResolutionTarget,
) -> Union[Rule, NoRuleFound]:
    """
    Select the single effective rule of ``category`` for ``target``.

    Returns:
        The winning Rule, or NO_RULE_FOUND when no active rule matches.
    """
    resolution = explain_resolution(category, table, target)
    return resolution.rule if resolution.rule is not None else NO_RULE_FOUND


__all__ = [
    "NoRuleFound",
    "NO_RULE_FOUND",
    "RuleResolution",
    "rule_matches",
    "match_rules",
    "explain_resolution",
    "resolve_rule",
]

"""
Rule table deterministic audits.

These gates check a rule table snapshot for data-quality defects that the
engine tolerates at evaluation time but that should be fixed by the rule
author: duplicate same-specificity rules (resolved by the lowest-id
tie-break), malformed interval tokens, repeated tokens within a reminder rule,
and malformed folder path templates.

``validate_rule`` is the save-time counterpart: it raises the typed error for a
single rule so a bad rule can be rejected before it reaches the scheduler.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Tuple

from compliance_rules.config import DEFAULT_CONFIG, EngineConfig
from compliance_rules.constants import RuleCategory
from compliance_rules.errors import InvalidRuleError, RuleEngineError
from compliance_rules.parsing.intervals import parse_interval
from compliance_rules.parsing.templates import parse_template
from compliance_rules.schemas.rule_contract import (
    FolderPayload,
    ReminderPayload,
    Rule,
    RuleTable,
)


@dataclass
class AuditResult:
    gate_id: str
    passed: bool
    total: int
    succeeded: int
    threshold: float
    details: str = ""

    @property
    def success_rate(self) -> float:
        return self.succeeded / self.total if self.total else 1.0


def _uniqueness_key(rule: Rule) -> Tuple[str, ...]:
    key = (rule.category.value, rule.scope.value, rule.target_matcher)
    if isinstance(rule.payload, FolderPayload):
        # Folder rules are additive per trigger; uniqueness is per trigger event.
        key = key + (rule.payload.trigger.value,)
    return key


def duplicate_rule_gate(table: RuleTable) -> AuditResult:
    """At most one rule per (category, scope, matcher)."""
    groups: Dict[Tuple[str, ...], List[str]] = defaultdict(list)
    for rule in table:
        groups[_uniqueness_key(rule)].append(rule.rule_id)
    duplicates = {key: ids for key, ids in groups.items() if len(ids) > 1}
    failing = sum(len(ids) for ids in duplicates.values())
    details = "; ".join(
        f"{'/'.join(key)}: {sorted(ids)}" for key, ids in sorted(duplicates.items())
    )
    return AuditResult(
        gate_id="duplicate_rules",
        passed=not duplicates,
        total=len(table),
        succeeded=len(table) - failing,
        threshold=1.0,
        details=details,
    )


def interval_token_gate(table: RuleTable, config: EngineConfig = DEFAULT_CONFIG) -> AuditResult:
    """Every reminder token parses under the configured grammar."""
    total = 0
    bad: List[str] = []
    for rule in table.of_category(RuleCategory.REMINDER):
        for token in rule.payload.tokens:
            total += 1
            try:
                parse_interval(token, allow_mixed_direction=config.allow_mixed_direction_tokens)
            except RuleEngineError:
                bad.append(f"{rule.rule_id}:{token}")
    return AuditResult(
        gate_id="interval_tokens",
        passed=not bad,
        total=total,
        succeeded=total - len(bad),
        threshold=1.0,
        details=", ".join(bad),
    )


def duplicate_token_gate(table: RuleTable) -> AuditResult:
    """No reminder rule lists the same token twice."""
    rules = table.of_category(RuleCategory.REMINDER)
    offenders = [
        rule.rule_id for rule in rules
        if len(set(rule.payload.tokens)) != len(rule.payload.tokens)
    ]
    return AuditResult(
        gate_id="duplicate_tokens",
        passed=not offenders,
        total=len(rules),
        succeeded=len(rules) - len(offenders),
        threshold=1.0,
        details=", ".join(offenders),
    )


def path_template_gate(table: RuleTable) -> AuditResult:
    """Every folder path template is syntactically valid."""
    rules = table.of_category(RuleCategory.FOLDER)
    bad: List[str] = []
    for rule in rules:
        try:
            parse_template(rule.payload.path_template)
        except RuleEngineError as exc:
            bad.append(f"{rule.rule_id}: {exc}")
    return AuditResult(
        gate_id="path_templates",
        passed=not bad,
        total=len(rules),
        succeeded=len(rules) - len(bad),
        threshold=1.0,
        details="; ".join(bad),
    )


def audit_rule_table(table: RuleTable, config: EngineConfig = DEFAULT_CONFIG) -> List[AuditResult]:
    """Run every rule-table gate."""
    return [
        duplicate_rule_gate(table),
        interval_token_gate(table, config),
        duplicate_token_gate(table),
        path_template_gate(table),
    ]


def validate_rule(rule: Rule, config: EngineConfig = DEFAULT_CONFIG) -> None:
    """
    Save-time validation of a single rule.

    Raises:
        InvalidTokenError: For a malformed reminder token.
        InvalidRuleError: For a repeated reminder token.
        MalformedTemplateError: For a malformed folder path template.
    """
    if isinstance(rule.payload, ReminderPayload):
        seen = set()
        for token in rule.payload.tokens:
            parse_interval(token, allow_mixed_direction=config.allow_mixed_direction_tokens)
            if token in seen:
                raise InvalidRuleError(rule.rule_id, f"interval {token!r} listed more than once")
            seen.add(token)
    elif isinstance(rule.payload, FolderPayload):
        parse_template(rule.payload.path_template)


__all__ = [
    "AuditResult",
    "duplicate_rule_gate",
    "interval_token_gate",
    "duplicate_token_gate",
    "path_template_gate",
    "audit_rule_table",
    "validate_rule",
]

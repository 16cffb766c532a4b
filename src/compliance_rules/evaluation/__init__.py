"""
Evaluation module for compliance_rules.

Provides deterministic data-quality audits over rule table snapshots.
"""

from .rule_audits import (
    AuditResult,
    audit_rule_table,
    duplicate_rule_gate,
    duplicate_token_gate,
    interval_token_gate,
    path_template_gate,
    validate_rule,
)

__all__ = [
    "AuditResult",
    "audit_rule_table",
    "duplicate_rule_gate",
    "duplicate_token_gate",
    "interval_token_gate",
    "path_template_gate",
    "validate_rule",
]

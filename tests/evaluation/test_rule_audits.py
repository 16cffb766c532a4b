from __future__ import annotations

import pytest

from compliance_rules.config import EngineConfig
from compliance_rules.errors import InvalidRuleError, InvalidTokenError, MalformedTemplateError
from compliance_rules.evaluation.rule_audits import (
    audit_rule_table,
    duplicate_rule_gate,
    duplicate_token_gate,
    interval_token_gate,
    path_template_gate,
    validate_rule,
)
from compliance_rules.schemas.rule_contract import RuleTable


def _table(records):
    return RuleTable.from_records(records)


def _reminder(rule_id, intervals, scope="global", target="*"):
    return {"id": rule_id, "category": "reminder", "scope": scope, "target": target,
            "intervals": intervals}


def _folder(rule_id, template, trigger="compliance-head", scope="global", target="*"):
    return {"id": rule_id, "category": "folder", "scope": scope, "target": target,
            "pathTemplate": template, "triggerType": trigger}


def test_clean_table_passes_every_gate():
    table = _table([
        _reminder("1", ["T-7", "D+1"]),
        _reminder("2", ["T-15"], scope="compliance-head", target="GST"),
        _folder("3", "/{{compliance_head}}/{{year}}"),
    ])
    results = audit_rule_table(table)
    assert [result.gate_id for result in results] == [
        "duplicate_rules", "interval_tokens", "duplicate_tokens", "path_templates",
    ]
    assert all(result.passed for result in results)
    assert all(result.success_rate == 1.0 for result in results)


def test_duplicate_rule_gate_flags_same_scope_and_matcher():
    table = _table([
        _reminder("2", ["T-7"], scope="compliance-head", target="GST"),
        _reminder("10", ["T-3"], scope="compliance-head", target="GST"),
        _reminder("4", ["T-3"], scope="compliance-head", target="ROC"),
    ])
    result = duplicate_rule_gate(table)
    assert not result.passed
    assert result.total == 3
    assert result.succeeded == 1
    assert "reminder/category/GST" in result.details


def test_folder_rules_are_unique_per_trigger():
    table = _table([
        _folder("1", "/{{compliance_head}}", trigger="compliance-head"),
        _folder("2", "/{{sub_head}}", trigger="sub-head"),
    ])
    assert duplicate_rule_gate(table).passed


def test_interval_token_gate_lists_bad_tokens():
    table = _table([_reminder("1", ["T-7", "T+3", "X-1"])])
    result = interval_token_gate(table)
    assert not result.passed
    assert result.total == 3
    assert result.succeeded == 1
    assert result.details == "1:T+3, 1:X-1"

    relaxed = interval_token_gate(table, EngineConfig(allow_mixed_direction_tokens=True))
    assert relaxed.succeeded == 2


def test_duplicate_token_gate():
    table = _table([_reminder("1", ["T-7", "T-7"]), _reminder("2", ["T-3"], scope="compliance-head", target="GST")])
    result = duplicate_token_gate(table)
    assert not result.passed
    assert result.details == "1"


def test_path_template_gate():
    table = _table([_folder("1", "/{{compliance_head}}/{{year"), _folder("2", "/{{entity}}", trigger="entity")])
    result = path_template_gate(table)
    assert not result.passed
    assert result.succeeded == 1
    assert result.details.startswith("1:")


def test_validate_rule_raises_typed_errors():
    with pytest.raises(InvalidTokenError):
        validate_rule(_table([_reminder("1", ["T-07"])]).rules[0])
    with pytest.raises(InvalidRuleError):
        validate_rule(_table([_reminder("1", ["T-7", "T-7"])]).rules[0])
    with pytest.raises(MalformedTemplateError):
        validate_rule(_table([_folder("1", "/{{compliance_head")]).rules[0])

    validate_rule(_table([_reminder("1", ["T-7", "D+1"])]).rules[0])


def test_oversized_tokens_fail_audit_and_validation():
    table = _table([_reminder("1", ["T-7", "D+99999999"])])
    result = interval_token_gate(table)
    assert not result.passed
    assert result.details == "1:D+99999999"
    with pytest.raises(InvalidTokenError):
        validate_rule(table.rules[0])

from __future__ import annotations

import pytest

from compliance_rules.errors import (
    MalformedTemplateError,
    TemplateError,
    UnresolvedVariableError,
)
from compliance_rules.parsing.templates import (
    extract_variables,
    parse_template,
    resolve_template,
)


def test_missing_variable_is_named():
    with pytest.raises(UnresolvedVariableError) as exc_info:
        resolve_template("/{{compliance_head}}/{{year}}", {"compliance_head": "GST"})
    assert exc_info.value.names == ["year"]


def test_all_variables_supplied_resolves():
    path = resolve_template(
        "/{{compliance_head}}/{{year}}",
        {"compliance_head": "GST", "year": "2025"},
    )
    assert path == "/GST/2025"


def test_every_unresolved_name_is_listed_once():
    with pytest.raises(UnresolvedVariableError) as exc_info:
        resolve_template("/{{quarter}}/{{entity}}/{{quarter}}", {})
    assert exc_info.value.names == ["entity", "quarter"]
    assert "entity" in str(exc_info.value)


def test_repeated_variables_are_all_replaced():
    assert resolve_template("{{a}}-{{a}}-{{b}}", {"a": "x", "b": "y"}) == "x-x-y"


def test_whitespace_inside_braces_is_allowed():
    assert resolve_template("/{{ entity }}", {"entity": "ABC Corp"}) == "/ABC Corp"


def test_values_are_stringified_and_none_is_missing():
    assert resolve_template("{{year}}", {"year": 2025}) == "2025"
    with pytest.raises(UnresolvedVariableError):
        resolve_template("{{year}}", {"year": None})


def test_substituted_values_are_not_rescanned():
    assert resolve_template("/{{name}}", {"name": "{{year}}"}) == "/{{year}}"


def test_template_without_placeholders_passes_through():
    assert resolve_template("/Archive/Static", {}) == "/Archive/Static"
    assert resolve_template("", {}) == ""


@pytest.mark.parametrize(
    "template, position",
    [
        ("/{{compliance_head}}/{{year", 21),
        ("/{{", 1),
        ("/GST}}/x", 4),
        ("/{{}}/x", 1),
        ("/{{bad name}}", 1),
        ("/{{{year}}}", 1),
    ],
)
def test_malformed_templates_fail_before_substitution(template, position):
    with pytest.raises(MalformedTemplateError) as exc_info:
        resolve_template(template, {"compliance_head": "GST", "year": "2025"})
    assert exc_info.value.position == position


def test_malformed_wins_over_unresolved():
    with pytest.raises(MalformedTemplateError):
        resolve_template("/{{missing}}/{{", {})


def test_template_errors_share_base_class():
    assert issubclass(MalformedTemplateError, TemplateError)
    assert issubclass(UnresolvedVariableError, TemplateError)


def test_extract_variables_in_first_appearance_order():
    assert extract_variables("/GST/{{sub_head}}/{{entity}}/{{quarter}}/{{entity}}") == [
        "sub_head",
        "entity",
        "quarter",
    ]


def test_parse_template_segments():
    assert parse_template("/{{year}}/x") == ["/", ("year", 1), "/x"]

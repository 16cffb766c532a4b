"""
Serialization utilities for compliance_rules.

This module turns loosely typed records (JSON rule exports, CSV rows read with
pandas) into the frozen contract types. Dashboard exports use camelCase keys
and their own vocabulary ("compliance-head", "folderStructure",
"defaultUsers"), so both spellings are accepted.
"""

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import numpy as np
import pandas as pd

from compliance_rules.constants import (
    SCOPE_ALIASES,
    TRIGGER_ALIASES,
    WILDCARD,
    AccessLevel,
    FolderEventType,
    RetentionAction,
    RetentionUnit,
    RuleCategory,
    Scope,
)
from compliance_rules.errors import InvalidRuleError
from compliance_rules.schemas.rule_contract import (
    FolderPayload,
    ReminderPayload,
    ResolutionTarget,
    RetentionPayload,
    Rule,
    RuleTable,
)


def is_missing(value: Any) -> bool:
    """True for None, blank strings and NaN-like DataFrame cells."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, np.ndarray)):
        return False
    return bool(pd.isna(value))


def normalize_cell_list(x: Any) -> List[str]:
    """
    Normalize list-like values to a plain list of strings.

    Handles the shapes that show up in records and DataFrame cells:
    - None / NaN -> empty list
    - numpy.ndarray, tuple, list -> list
    - "T-7, T-3" or "T-7|T-3" (CSV cell) -> ["T-7", "T-3"]

    Example:
        >>> normalize_cell_list(np.array(["admin", "gst-team"]))
        ['admin', 'gst-team']
        >>> normalize_cell_list("T-7|D+1")
        ['T-7', 'D+1']
        >>> normalize_cell_list(None)
        []
    """
    if isinstance(x, np.ndarray):
        x = x.tolist()
    if isinstance(x, (list, tuple)):
        return [str(item).strip() for item in x if not is_missing(item)]
    if is_missing(x):
        return []
    text = str(x)
    separator = "|" if "|" in text else ","
    return [part.strip() for part in text.split(separator) if part.strip()]


def parse_date(value: Any) -> date:
    """
    Coerce a date-like value to ``datetime.date``.

    Accepts date, datetime, pandas Timestamp and ISO-8601 strings.

    Raises:
        ValueError: If the value is missing or unparseable.
    """
    if is_missing(value):
        raise ValueError("date value is missing")
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        raise ValueError(f"Unparseable date: {value!r}") from None


def _first(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in record and not is_missing(record[key]):
            return record[key]
    return default


def _enum(enum_cls, raw: Any, rule_id: Optional[str], field_name: str):
    try:
        return enum_cls(str(raw).strip().lower())
    except ValueError:
        raise InvalidRuleError(rule_id, f"unknown {field_name} {raw!r}") from None


def _parse_scope(raw: Any, rule_id: Optional[str]) -> Scope:
    key = str(raw).strip().lower()
    if key not in SCOPE_ALIASES:
        raise InvalidRuleError(rule_id, f"unknown scope {raw!r}")
    return SCOPE_ALIASES[key]


def _parse_trigger(raw: Any, rule_id: Optional[str]) -> FolderEventType:
    key = str(raw).strip().lower()
    if key in TRIGGER_ALIASES:
        return TRIGGER_ALIASES[key]
    return _enum(FolderEventType, key, rule_id, "trigger")


def _parse_bool(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in {"1", "true", "yes", "on"}
    return bool(raw)


def _dedupe(items: List[str]) -> tuple:
    return tuple(dict.fromkeys(items))


def rule_from_record(record: Mapping[str, Any]) -> Rule:
    """
    Build a typed Rule from a plain record.

    Payload fields may be nested under ``payload`` or given at the top level.

    Raises:
        InvalidRuleError: For missing fields or unknown vocabulary.
    """
    raw_id = _first(record, "id", "rule_id", "ruleId")
    if raw_id is None:
        raise InvalidRuleError(None, "rule id is required")
    rule_id = str(raw_id)

    raw_category = _first(record, "category", "rule_category", "ruleCategory")
    if raw_category is None:
        raise InvalidRuleError(rule_id, "rule category is required")
    category = _enum(RuleCategory, raw_category, rule_id, "rule category")

    scope = _parse_scope(_first(record, "scope", "type", default=Scope.GLOBAL.value), rule_id)
    matcher = _first(record, "target_matcher", "targetMatcher", "target", default=WILDCARD)

    payload_source: Dict[str, Any] = dict(record)
    nested = record.get("payload")
    if isinstance(nested, Mapping):
        payload_source.update(nested)

    if category is RuleCategory.REMINDER:
        payload = ReminderPayload(tokens=tuple(normalize_cell_list(
            _first(payload_source, "tokens", "intervals", default=[])
        )))
    elif category is RuleCategory.RETENTION:
        raw_period = _first(payload_source, "period", "retentionPeriod", "retention_period")
        try:
            period = int(raw_period)
        except (TypeError, ValueError):
            raise InvalidRuleError(rule_id, f"retention period must be an integer, got {raw_period!r}") from None
        if isinstance(raw_period, float) and raw_period != period:
            raise InvalidRuleError(rule_id, f"retention period must be an integer, got {raw_period!r}")
        payload = RetentionPayload(
            period=period,
            unit=_enum(RetentionUnit, _first(payload_source, "unit", "retentionUnit", "retention_unit"), rule_id, "retention unit"),
            action=_enum(RetentionAction, _first(payload_source, "action"), rule_id, "retention action"),
        )
    else:
        template = _first(payload_source, "path_template", "pathTemplate", "folderStructure")
        if template is None:
            raise InvalidRuleError(rule_id, "folder rule needs a path template")
        raw_trigger = _first(payload_source, "trigger", "triggerType", "trigger_type")
        if raw_trigger is None:
            raise InvalidRuleError(rule_id, "folder rule needs a trigger event type")
        payload = FolderPayload(
            path_template=str(template),
            trigger=_parse_trigger(raw_trigger, rule_id),
            access_level=_enum(
                AccessLevel,
                _first(payload_source, "access_level", "accessLevel", default=AccessLevel.RESTRICTED.value),
                rule_id,
                "access level",
            ),
            default_assignees=_dedupe(normalize_cell_list(
                _first(payload_source, "default_assignees", "defaultAssignees", "defaultUsers", default=[])
            )),
        )

    return Rule(
        rule_id=rule_id,
        category=category,
        scope=scope,
        payload=payload,
        target_matcher=str(matcher).strip() if scope is not Scope.GLOBAL else WILDCARD,
        is_active=_parse_bool(_first(record, "is_active", "isActive", default=True)),
        name=str(_first(record, "name", default="")),
    )


def load_rule_table(path: Union[str, Path]) -> RuleTable:
    """
    Load a rule table snapshot from a JSON file.

    The file holds either a list of rule records or ``{"rules": [...]}``.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    records = data.get("rules", []) if isinstance(data, dict) else data
    return RuleTable.from_records(records)


def target_from_record(record: Mapping[str, Any]) -> ResolutionTarget:
    """Build a ResolutionTarget from a task/document record or DataFrame row."""
    def _text(*keys: str) -> Optional[str]:
        value = _first(record, *keys)
        return None if value is None else str(value).strip()

    return ResolutionTarget(
        category_name=_text("category_name", "compliance_head", "complianceHead"),
        subcategory_name=_text("subcategory_name", "sub_head", "subHead"),
        entity_name=_text("entity_name", "entity", "entityName"),
        document_type_name=_text("document_type_name", "document_type", "documentType"),
        target_id=_text("target_id", "id", "task_id", "document_id"),
    )


__all__ = [
    "is_missing",
    "normalize_cell_list",
    "parse_date",
    "rule_from_record",
    "load_rule_table",
    "target_from_record",
]

"""
Rule engine contract definitions.

These dataclasses describe the canonical shape of rules, resolution targets and
engine outputs. Keeping them centralized allows the resolver, the schedulers,
the folder trigger engine and downstream consumers (notifier, vault service)
to share a single source of truth.

All inputs are frozen: a RuleTable is an immutable snapshot, so one resolution
pass always sees a consistent view of the rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Dict, Iterable, Iterator, Optional, Tuple, Union

from compliance_rules.constants import (
    WILDCARD,
    AccessLevel,
    FolderEventType,
    RetentionAction,
    RetentionUnit,
    RuleCategory,
    Scope,
)
from compliance_rules.errors import InvalidRuleError, RuleEngineError

SchemaVersion = "rules_v1"


# =============================================================================
# PAYLOADS
# =============================================================================

@dataclass(frozen=True)
class ReminderPayload:
    """Ordered interval tokens, e.g. ("T-30", "T-7", "D+1")."""

    tokens: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RetentionPayload:
    """How long a document is kept and what happens when the period elapses."""

    period: int
    unit: RetentionUnit
    action: RetentionAction


@dataclass(frozen=True)
class FolderPayload:
    """Folder structure created when the trigger event fires."""

    path_template: str
    trigger: FolderEventType
    access_level: AccessLevel = AccessLevel.RESTRICTED
    default_assignees: Tuple[str, ...] = ()


Payload = Union[ReminderPayload, RetentionPayload, FolderPayload]

PAYLOAD_TYPES = {
    RuleCategory.REMINDER: ReminderPayload,
    RuleCategory.RETENTION: RetentionPayload,
    RuleCategory.FOLDER: FolderPayload,
}


# =============================================================================
# RULES
# =============================================================================

@dataclass(frozen=True)
class Rule:
    """
    A rule attached at one specificity level of the compliance taxonomy.

    The variant is discriminated by ``category`` (which payload it carries)
    and ``scope`` (which target field ``target_matcher`` is compared with).
    """

    rule_id: str
    category: RuleCategory
    scope: Scope
    payload: Payload
    target_matcher: str = WILDCARD
    is_active: bool = True
    name: str = ""

    def __post_init__(self):
        expected = PAYLOAD_TYPES[self.category]
        if not isinstance(self.payload, expected):
            raise InvalidRuleError(
                self.rule_id,
                f"{self.category.value} rule needs {expected.__name__}, "
                f"got {type(self.payload).__name__}",
            )
        if self.scope is Scope.GLOBAL and self.target_matcher != WILDCARD:
            raise InvalidRuleError(self.rule_id, "global rules must use the '*' matcher")
        if not self.target_matcher:
            raise InvalidRuleError(self.rule_id, "target matcher must not be empty")
        if isinstance(self.payload, RetentionPayload):
            period = self.payload.period
            if isinstance(period, bool) or not isinstance(period, int) or period <= 0:
                raise InvalidRuleError(
                    self.rule_id, f"retention period must be a positive integer, got {period!r}"
                )

    @property
    def is_wildcard(self) -> bool:
        return self.target_matcher == WILDCARD

    def to_dict(self) -> Dict[str, object]:
        """Convert to a flat, serialisable dict for DataFrame construction."""
        row = {
            "rule_id": self.rule_id,
            "name": self.name,
            "category": self.category.value,
            "scope": self.scope.value,
            "target_matcher": self.target_matcher,
            "is_active": self.is_active,
        }
        for key, value in asdict(self.payload).items():
            row[key] = value.value if hasattr(value, "value") else value
        return row


@dataclass(frozen=True)
class RuleTable:
    """Immutable snapshot of the rule store for one evaluation call or sweep."""

    rules: Tuple[Rule, ...] = ()

    def __post_init__(self):
        # Accept any iterable but always store a tuple.
        if not isinstance(self.rules, tuple):
            object.__setattr__(self, "rules", tuple(self.rules))

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def of_category(self, category: RuleCategory) -> Tuple[Rule, ...]:
        return tuple(rule for rule in self.rules if rule.category is category)

    def get(self, rule_id: str) -> Optional[Rule]:
        for rule in self.rules:
            if rule.rule_id == rule_id:
                return rule
        return None

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, object]]) -> "RuleTable":
        """Build a snapshot from plain dict records (see utils.serialize)."""
        from compliance_rules.utils.serialize import rule_from_record

        return cls(tuple(rule_from_record(record) for record in records))


# =============================================================================
# TARGETS
# =============================================================================

@dataclass(frozen=True)
class ResolutionTarget:
    """
    The concrete target being evaluated against the rule table.

    Supplied by the caller; the engine never fetches it itself.
    """

    category_name: Optional[str] = None
    subcategory_name: Optional[str] = None
    entity_name: Optional[str] = None
    document_type_name: Optional[str] = None
    target_id: Optional[str] = None

    def value_for(self, scope: Scope) -> Optional[str]:
        """Return the field a rule at ``scope`` is matched against."""
        if scope is Scope.CATEGORY:
            return self.category_name
        if scope is Scope.SUBCATEGORY:
            return self.subcategory_name
        return None


# =============================================================================
# OUTPUTS
# =============================================================================

@dataclass(frozen=True)
class ScheduledEvent:
    """A dated reminder firing or retention execution."""

    firing_date: date
    kind: str
    source_rule_id: str
    target_id: Optional[str] = None
    token: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class FolderCreationRequest:
    """A folder the vault service should create."""

    path: str
    access_level: AccessLevel
    default_assignees: Tuple[str, ...]
    trigger_rule_id: str

    def to_dict(self) -> Dict[str, object]:
        row = asdict(self)
        row["access_level"] = self.access_level.value
        row["default_assignees"] = list(self.default_assignees)
        return row


@dataclass(frozen=True)
class FolderCreationOutcome:
    """Result of applying one matched folder rule: a request or its failure."""

    rule_id: str
    request: Optional[FolderCreationRequest] = None
    error: Optional[RuleEngineError] = None

    @property
    def ok(self) -> bool:
        return self.request is not None and self.error is None


@dataclass
class FolderCreationLogRow:
    """Row in the folder creation log shown on the auto-folder settings screen."""

    log_id: str
    rule_id: str
    rule_name: str
    folder_path: Optional[str]
    trigger_data: str
    created_at: str
    status: str
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass
class SweepFailure:
    """One isolated per-target failure aggregated by a sweep."""

    target_id: Optional[str]
    category: str
    error_type: str
    message: str
    rule_id: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass
class TieBreakWarning:
    """Duplicate same-specificity rules resolved by the lowest-id tie-break."""

    target_id: Optional[str]
    category: str
    scope: str
    chosen_rule_id: str
    tied_rule_ids: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, object]:
        row = asdict(self)
        row["tied_rule_ids"] = list(self.tied_rule_ids)
        return row


__all__ = [
    "SchemaVersion",
    "ReminderPayload",
    "RetentionPayload",
    "FolderPayload",
    "Payload",
    "Rule",
    "RuleTable",
    "ResolutionTarget",
    "ScheduledEvent",
    "FolderCreationRequest",
    "FolderCreationOutcome",
    "FolderCreationLogRow",
    "SweepFailure",
    "TieBreakWarning",
]

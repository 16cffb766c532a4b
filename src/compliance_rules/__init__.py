"""
Compliance rule resolution and temporal scheduling engine.

Resolves the effective reminder, retention and folder rules for a target from
an immutable rule table snapshot, and turns them into concrete reminder dates,
retention executions and folder paths.
"""

from compliance_rules.config import DEFAULT_CONFIG, EngineConfig
from compliance_rules.constants import (
    WILDCARD,
    AccessLevel,
    FolderEventType,
    RetentionAction,
    RetentionUnit,
    RuleCategory,
    Scope,
)
from compliance_rules.errors import (
    InvalidEventError,
    InvalidRuleError,
    InvalidTokenError,
    MalformedTemplateError,
    RuleEngineError,
    TemplateError,
    UnresolvedVariableError,
)
from compliance_rules.folders.trigger import FolderRuleTriggerEngine
from compliance_rules.parsing.intervals import parse_interval, format_interval
from compliance_rules.parsing.templates import resolve_template
from compliance_rules.resolution.hierarchy import NO_RULE_FOUND, NoRuleFound, resolve_rule
from compliance_rules.scheduling.reminders import generate_reminders
from compliance_rules.scheduling.retention import RetentionSchedule, next_execution
from compliance_rules.schemas.rule_contract import (
    FolderCreationRequest,
    FolderPayload,
    ReminderPayload,
    ResolutionTarget,
    RetentionPayload,
    Rule,
    RuleTable,
    ScheduledEvent,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "EngineConfig",
    "WILDCARD",
    "AccessLevel",
    "FolderEventType",
    "RetentionAction",
    "RetentionUnit",
    "RuleCategory",
    "Scope",
    "InvalidEventError",
    "InvalidRuleError",
    "InvalidTokenError",
    "MalformedTemplateError",
    "RuleEngineError",
    "TemplateError",
    "UnresolvedVariableError",
    "FolderRuleTriggerEngine",
    "parse_interval",
    "format_interval",
    "resolve_template",
    "NO_RULE_FOUND",
    "NoRuleFound",
    "resolve_rule",
    "generate_reminders",
    "RetentionSchedule",
    "next_execution",
    "FolderCreationRequest",
    "FolderPayload",
    "ReminderPayload",
    "ResolutionTarget",
    "RetentionPayload",
    "Rule",
    "RuleTable",
    "ScheduledEvent",
]

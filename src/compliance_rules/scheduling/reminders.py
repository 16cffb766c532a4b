"""
Reminder schedule generation.

Turns a task's due date and its effective reminder rule into concrete, ordered
reminder firing dates. Generation is pure: identical inputs always yield
identical events.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Union

from compliance_rules.config import DEFAULT_CONFIG, EngineConfig
from compliance_rules.constants import EVENT_KIND_REMINDER, RuleCategory
from compliance_rules.errors import InvalidRuleError
from compliance_rules.parsing.intervals import parse_interval
from compliance_rules.resolution.hierarchy import NoRuleFound, resolve_rule
from compliance_rules.schemas.rule_contract import (
    ReminderPayload,
    ResolutionTarget,
    Rule,
    RuleTable,
    ScheduledEvent,
)

logger = logging.getLogger(__name__)


def generate_reminders(
    due_date: date,
    rule: Union[Rule, NoRuleFound],
    target_id: Optional[str] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[ScheduledEvent]:
    """
    Build the reminder events for one task.

    Each token fires at ``due_date - days`` (before-tokens) or
    ``due_date + days`` (after-tokens). Events are sorted by firing date;
    events on the same date keep the order of their tokens in the rule.
    Repeated tokens are emitted once.

    Args:
        due_date: The task's due date (the anchor).
        rule: Effective reminder rule, or NO_RULE_FOUND (yields no events).
        target_id: Task identifier copied onto each event.
        config: Engine configuration (token grammar mode).

    Returns:
        Ordered list of ScheduledEvent.

    Raises:
        InvalidTokenError: If any token in the rule is malformed.
        InvalidRuleError: If ``rule`` is not a reminder rule.
    """
    if isinstance(rule, NoRuleFound):
        return []
    if not isinstance(rule.payload, ReminderPayload):
        raise InvalidRuleError(rule.rule_id, "not a reminder rule")

    events: List[ScheduledEvent] = []
    seen = set()
    for token in rule.payload.tokens:
        if token in seen:
            continue
        seen.add(token)
        offset = parse_interval(token, allow_mixed_direction=config.allow_mixed_direction_tokens)
        events.append(ScheduledEvent(
            firing_date=offset.apply(due_date),
            kind=EVENT_KIND_REMINDER,
            source_rule_id=rule.rule_id,
            target_id=target_id,
            token=token,
        ))

    # list.sort is stable, so same-day events keep token order
    events.sort(key=lambda event: event.firing_date)
    logger.debug(f"Generated {len(events)} reminders from rule {rule.rule_id} for {target_id!r}")
    return events


def schedule_reminders(
    due_date: date,
    table: RuleTable,
    target: ResolutionTarget,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[ScheduledEvent]:
    """Resolve the effective reminder rule for ``target`` and generate its events."""
    rule = resolve_rule(RuleCategory.REMINDER, table, target)
    return generate_reminders(due_date, rule, target_id=target.target_id, config=config)


__all__ = ["generate_reminders", "schedule_reminders"]

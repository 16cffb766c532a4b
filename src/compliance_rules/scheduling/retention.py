"""
Retention scheduling.

A retention rule archives or deletes documents ``period`` days/months/years
after an anchor date. Rules recur until deactivated: once an execution fires,
the execution date itself becomes the next anchor. Month and year steps use the
clamp policy from ``scheduling.dates`` (Jan 31 + 1 month = Feb 28).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import List, Optional, Union

from compliance_rules.constants import RetentionAction, RetentionUnit
from compliance_rules.errors import InvalidRuleError
from compliance_rules.scheduling.dates import add_months, add_years
from compliance_rules.schemas.rule_contract import RetentionPayload, Rule, ScheduledEvent

logger = logging.getLogger(__name__)


def next_execution(
    anchor: date,
    period: int,
    unit: Union[RetentionUnit, str],
) -> date:
    """
    Compute the next execution date of a retention rule.

    Args:
        anchor: Last execution date, or the rule's start date before the first run.
        period: Positive number of units.
        unit: days, months or years.

    Returns:
        The execution date.

    Raises:
        InvalidRuleError: If ``period`` is not a positive integer, ``unit``
            is unknown, or the execution date falls outside year 1 to 9999.
    """
    if isinstance(period, bool) or not isinstance(period, int) or period <= 0:
        raise InvalidRuleError(None, f"retention period must be a positive integer, got {period!r}")
    unit = _coerce_unit(unit)
    try:
        if unit is RetentionUnit.DAYS:
            return anchor + timedelta(days=period)
        if unit is RetentionUnit.MONTHS:
            return add_months(anchor, period)
        return add_years(anchor, period)
    except (OverflowError, ValueError):
        raise InvalidRuleError(
            None, f"execution date out of range: {anchor} + {period} {unit.value}"
        ) from None


def upcoming_executions(
    anchor: date,
    period: int,
    unit: Union[RetentionUnit, str],
    count: int,
) -> List[date]:
    """
    The next ``count`` executions, each anchored on the previous execution.

    Because every step restarts from the actual execution date, a clamped
    month step carries forward (Jan 31 -> Feb 28 -> Mar 28).
    """
    dates: List[date] = []
    current = anchor
    for _ in range(max(0, count)):
        current = next_execution(current, period, unit)
        dates.append(current)
    return dates


@dataclass(frozen=True)
class RetentionSchedule:
    """Recurring execution state of one retention rule for one target."""

    rule_id: str
    action: RetentionAction
    period: int
    unit: RetentionUnit
    anchor: date
    next_execution: date
    last_executed: Optional[date] = None
    target_id: Optional[str] = None

    @classmethod
    def start(cls, rule: Rule, anchor: date, target_id: Optional[str] = None) -> "RetentionSchedule":
        """Begin a schedule for ``rule`` anchored at ``anchor``."""
        payload = _retention_payload(rule)
        return cls(
            rule_id=rule.rule_id,
            action=payload.action,
            period=payload.period,
            unit=payload.unit,
            anchor=anchor,
            next_execution=next_execution(anchor, payload.period, payload.unit),
            target_id=target_id,
        )

    def is_due(self, as_of: date) -> bool:
        return self.next_execution <= as_of

    def record_execution(self, executed_on: date) -> "RetentionSchedule":
        """
        Return the schedule after an execution fired on ``executed_on``.

        The execution date becomes the new anchor; the original start date is
        not used again.
        """
        logger.debug(f"Retention rule {self.rule_id} executed on {executed_on}, re-anchoring")
        return replace(
            self,
            anchor=executed_on,
            last_executed=executed_on,
            next_execution=next_execution(executed_on, self.period, self.unit),
        )

    def to_event(self) -> ScheduledEvent:
        return ScheduledEvent(
            firing_date=self.next_execution,
            kind=self.action.value,
            source_rule_id=self.rule_id,
            target_id=self.target_id,
        )


def schedule_retention(
    anchor: date,
    rule: Rule,
    target_id: Optional[str] = None,
) -> ScheduledEvent:
    """The next execution of ``rule`` from ``anchor`` as a ScheduledEvent."""
    return RetentionSchedule.start(rule, anchor, target_id=target_id).to_event()


def _retention_payload(rule: Rule) -> RetentionPayload:
    if not isinstance(rule.payload, RetentionPayload):
        raise InvalidRuleError(rule.rule_id, "not a retention rule")
    return rule.payload


def _coerce_unit(unit: Union[RetentionUnit, str]) -> RetentionUnit:
    if isinstance(unit, RetentionUnit):
        return unit
    try:
        return RetentionUnit(str(unit).strip().lower())
    except ValueError:
        raise InvalidRuleError(None, f"unknown retention unit {unit!r}") from None


__all__ = [
    "next_execution",
    "upcoming_executions",
    "RetentionSchedule",
    "schedule_retention",
]

"""
Batch sweeps over tasks and documents.

A sweep evaluates every target against one rule table snapshot. Each target is
independent: a malformed rule or a bad target record fails only that target,
is recorded as a SweepFailure, and the sweep moves on. Duplicate
same-specificity rules are resolved by the lowest-id tie-break and reported as
data-quality warnings.

Sweep Contract
1) Input: iterable of target records (dicts or a DataFrame), RuleTable snapshot
2) Reminders: due_date + resolved reminder rule -> reminder events, optionally
   restricted to [window_start, window_end]
3) Retention: anchor (last execution, else start date) + resolved retention
   rule -> next execution; only due executions unless include_pending
4) Output: SweepReport with events, failures and tie-break warnings
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd
from tqdm import tqdm

from compliance_rules.config import DEFAULT_CONFIG, EngineConfig
from compliance_rules.constants import RuleCategory
from compliance_rules.errors import RuleEngineError
from compliance_rules.resolution.hierarchy import RuleResolution, explain_resolution
from compliance_rules.scheduling.reminders import generate_reminders
from compliance_rules.scheduling.retention import RetentionSchedule
from compliance_rules.schemas.rule_contract import (
    ResolutionTarget,
    RuleTable,
    ScheduledEvent,
    SweepFailure,
    TieBreakWarning,
)
from compliance_rules.utils.serialize import is_missing, parse_date, target_from_record

logger = logging.getLogger(__name__)

EVENT_COLUMNS = ["firing_date", "kind", "source_rule_id", "target_id", "token"]
FAILURE_COLUMNS = ["target_id", "category", "error_type", "message", "rule_id"]
TIE_BREAK_COLUMNS = ["target_id", "category", "scope", "chosen_rule_id", "tied_rule_ids"]

DUE_DATE_FIELDS = ("due_date", "dueDate")
ANCHOR_FIELDS = ("last_executed", "lastExecuted", "anchor_date", "created_at", "createdAt", "uploaded_at")

Records = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


@dataclass
class SweepReport:
    """Aggregated outcome of one sweep."""

    category: str
    as_of: Optional[date] = None
    events: List[ScheduledEvent] = field(default_factory=list)
    failures: List[SweepFailure] = field(default_factory=list)
    tie_breaks: List[TieBreakWarning] = field(default_factory=list)
    targets_processed: int = 0
    targets_without_rule: int = 0

    def events_frame(self) -> pd.DataFrame:
        return _rows_to_df([event.to_dict() for event in self.events], EVENT_COLUMNS)

    def failures_frame(self) -> pd.DataFrame:
        return _rows_to_df([failure.to_dict() for failure in self.failures], FAILURE_COLUMNS)

    def tie_breaks_frame(self) -> pd.DataFrame:
        return _rows_to_df([warning.to_dict() for warning in self.tie_breaks], TIE_BREAK_COLUMNS)

    def summary(self) -> Dict[str, int]:
        return {
            "targets_processed": self.targets_processed,
            "targets_without_rule": self.targets_without_rule,
            "events": len(self.events),
            "failures": len(self.failures),
            "tie_breaks": len(self.tie_breaks),
        }


def _rows_to_df(rows: List[Dict[str, object]], columns: List[str]) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(rows, columns=columns)


def _iter_records(records: Records) -> List[Mapping[str, Any]]:
    if isinstance(records, pd.DataFrame):
        return records.to_dict("records")
    return list(records)


def _first_present(record: Mapping[str, Any], fields) -> Any:
    for name in fields:
        value = record.get(name)
        if not is_missing(value):
            return value
    return None


def _resolve(
    category: RuleCategory,
    table: RuleTable,
    target: ResolutionTarget,
    report: SweepReport,
) -> RuleResolution:
    resolution = explain_resolution(category, table, target)
    if resolution.has_tie:
        logger.warning(
            f"Duplicate {resolution.rule.scope.value}-scoped {category.value} rules "
            f"{list(resolution.tied_rule_ids)} for target {target.target_id!r}; "
            f"using lowest id {resolution.rule.rule_id}"
        )
        report.tie_breaks.append(TieBreakWarning(
            target_id=target.target_id,
            category=category.value,
            scope=resolution.rule.scope.value,
            chosen_rule_id=resolution.rule.rule_id,
            tied_rule_ids=resolution.tied_rule_ids,
        ))
    return resolution


def _record_failure(
    report: SweepReport,
    target_id: Optional[str],
    exc: Exception,
    rule_id: Optional[str] = None,
) -> None:
    logger.warning(f"{report.category} sweep: target {target_id!r} failed: {exc}")
    report.failures.append(SweepFailure(
        target_id=target_id,
        category=report.category,
        error_type=type(exc).__name__,
        message=str(exc),
        rule_id=rule_id,
    ))


def sweep_reminders(
    tasks: Records,
    table: RuleTable,
    window_start: Optional[date] = None,
    window_end: Optional[date] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> SweepReport:
    """
    Generate reminder events for every task.

    Args:
        tasks: Task records with ``due_date`` and taxonomy fields
            (compliance_head, sub_head, ...).
        table: Rule table snapshot shared by the whole sweep.
        window_start: Drop events firing before this date.
        window_end: Drop events firing after this date.
        config: Engine configuration.

    Returns:
        SweepReport with events sorted by (firing_date, target_id).
    """
    report = SweepReport(category=RuleCategory.REMINDER.value, as_of=window_start)
    records = _iter_records(tasks)
    for record in tqdm(records, desc="Reminders", disable=not config.show_progress):
        report.targets_processed += 1
        target = target_from_record(record)
        rule_id = None
        try:
            due_date = parse_date(_first_present(record, DUE_DATE_FIELDS))
            resolution = _resolve(RuleCategory.REMINDER, table, target, report)
            if not resolution.found:
                report.targets_without_rule += 1
                continue
            rule_id = resolution.rule.rule_id
            events = generate_reminders(
                due_date, resolution.rule, target_id=target.target_id, config=config
            )
        except (RuleEngineError, ValueError) as exc:
            _record_failure(report, target.target_id, exc, rule_id)
            continue
        report.events.extend(
            event for event in events
            if (window_start is None or event.firing_date >= window_start)
            and (window_end is None or event.firing_date <= window_end)
        )

    report.events.sort(key=lambda event: (event.firing_date, event.target_id or ""))
    logger.info(f"Reminder sweep: {report.summary()}")
    return report


def sweep_retention(
    documents: Records,
    table: RuleTable,
    as_of: date,
    include_pending: bool = False,
    config: EngineConfig = DEFAULT_CONFIG,
) -> SweepReport:
    """
    Compute retention executions for every document.

    The anchor is the document's last execution date when present, otherwise
    its start date (``anchor_date`` / ``created_at`` / ``uploaded_at``).

    Args:
        documents: Document records with anchor and taxonomy fields.
        table: Rule table snapshot shared by the whole sweep.
        as_of: Sweep date; executions on or before it are due.
        include_pending: Also emit executions that are not yet due.
        config: Engine configuration.

    Returns:
        SweepReport whose events are archive/delete executions.
    """
    report = SweepReport(category=RuleCategory.RETENTION.value, as_of=as_of)
    records = _iter_records(documents)
    for record in tqdm(records, desc="Retention", disable=not config.show_progress):
        report.targets_processed += 1
        target = target_from_record(record)
        rule_id = None
        try:
            anchor = parse_date(_first_present(record, ANCHOR_FIELDS))
            resolution = _resolve(RuleCategory.RETENTION, table, target, report)
            if not resolution.found:
                report.targets_without_rule += 1
                continue
            rule_id = resolution.rule.rule_id
            schedule = RetentionSchedule.start(resolution.rule, anchor, target_id=target.target_id)
        except (RuleEngineError, ValueError) as exc:
            _record_failure(report, target.target_id, exc, rule_id)
            continue
        if include_pending or schedule.is_due(as_of):
            report.events.append(schedule.to_event())

    report.events.sort(key=lambda event: (event.firing_date, event.target_id or ""))
    logger.info(f"Retention sweep: {report.summary()}")
    return report


__all__ = [
    "SweepReport",
    "sweep_reminders",
    "sweep_retention",
]

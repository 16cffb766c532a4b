from __future__ import annotations

from datetime import date

import pandas as pd

from compliance_rules.schemas.rule_contract import RuleTable
from compliance_rules.sweep import EVENT_COLUMNS, sweep_reminders, sweep_retention


def _table(extra=()):
    records = [
        {"id": "1", "category": "reminder", "scope": "global", "intervals": ["T-7", "T-1"]},
        {"id": "2", "category": "reminder", "scope": "compliance-head", "target": "GST",
         "intervals": ["T-15", "T-7", "D+1"]},
        {"id": "10", "category": "retention", "scope": "global",
         "retentionPeriod": 1, "retentionUnit": "years", "action": "archive"},
    ]
    return RuleTable.from_records(records + list(extra))


def test_reminder_sweep_windows_and_orders_events():
    tasks = [
        {"id": "task-1", "compliance_head": "GST", "due_date": "2025-07-10"},
        {"id": "task-2", "compliance_head": "ROC", "due_date": "2025-07-01"},
    ]
    report = sweep_reminders(
        tasks, _table(), window_start=date(2025, 6, 24), window_end=date(2025, 6, 30)
    )
    assert [(event.firing_date, event.target_id, event.source_rule_id) for event in report.events] == [
        (date(2025, 6, 24), "task-2", "1"),
        (date(2025, 6, 25), "task-1", "2"),
        (date(2025, 6, 30), "task-2", "1"),
    ]
    assert report.summary() == {
        "targets_processed": 2,
        "targets_without_rule": 0,
        "events": 3,
        "failures": 0,
        "tie_breaks": 0,
    }


def test_bad_task_records_fail_in_isolation():
    tasks = [
        {"id": "task-1", "compliance_head": "GST", "due_date": "2025-07-10"},
        {"id": "task-2", "compliance_head": "GST", "due_date": "not-a-date"},
        {"id": "task-3", "compliance_head": "GST"},
    ]
    report = sweep_reminders(tasks, _table())
    assert len(report.events) == 3
    assert [failure.target_id for failure in report.failures] == ["task-2", "task-3"]
    assert {failure.error_type for failure in report.failures} == {"ValueError"}


def test_malformed_rule_fails_only_its_targets():
    bad = {"id": "3", "category": "reminder", "scope": "compliance-head", "target": "TDS",
           "intervals": ["T-7", "T7"]}
    tasks = [
        {"id": "task-1", "compliance_head": "TDS", "due_date": "2025-07-10"},
        {"id": "task-2", "compliance_head": "ROC", "due_date": "2025-07-10"},
    ]
    report = sweep_reminders(tasks, _table([bad]))
    assert len(report.failures) == 1
    failure = report.failures[0]
    assert failure.target_id == "task-1"
    assert failure.rule_id == "3"
    assert failure.error_type == "InvalidTokenError"
    assert {event.target_id for event in report.events} == {"task-2"}


def test_targets_without_rule_are_counted_not_failed():
    table = RuleTable.from_records([
        {"id": "2", "category": "reminder", "scope": "compliance-head", "target": "GST",
         "intervals": ["T-7"]},
    ])
    tasks = [{"id": "task-1", "compliance_head": "ROC", "due_date": "2025-07-10"}]
    report = sweep_reminders(tasks, table)
    assert report.events == []
    assert report.failures == []
    assert report.targets_without_rule == 1


def test_duplicate_rules_are_reported_as_tie_breaks():
    duplicate = {"id": "12", "category": "reminder", "scope": "compliance-head", "target": "GST",
                 "intervals": ["T-30"]}
    tasks = [{"id": "task-1", "compliance_head": "GST", "due_date": "2025-07-10"}]
    report = sweep_reminders(tasks, _table([duplicate]))
    assert {event.source_rule_id for event in report.events} == {"2"}
    assert len(report.tie_breaks) == 1
    warning = report.tie_breaks[0]
    assert warning.chosen_rule_id == "2"
    assert warning.tied_rule_ids == ("2", "12")
    assert warning.scope == "category"


def test_reminder_sweep_accepts_dataframe():
    tasks = pd.DataFrame([
        {"id": "task-1", "compliance_head": "GST", "sub_head": None, "due_date": "2025-07-10"},
        {"id": "task-2", "compliance_head": None, "sub_head": None, "due_date": "2025-07-10"},
    ])
    report = sweep_reminders(tasks, _table())
    frame = report.events_frame()
    assert list(frame.columns) == EVENT_COLUMNS
    assert len(frame) == 5
    assert report.failures_frame().empty


def test_retention_sweep_emits_due_executions():
    documents = [
        {"id": "doc-1", "compliance_head": "GST", "created_at": "2024-06-01"},
        {"id": "doc-2", "compliance_head": "GST", "created_at": "2025-01-01"},
        {"id": "doc-3", "compliance_head": "GST", "created_at": "2020-01-01",
         "last_executed": "2025-05-01"},
    ]
    report = sweep_retention(documents, _table(), as_of=date(2025, 6, 30))
    assert [(event.target_id, event.firing_date, event.kind) for event in report.events] == [
        ("doc-1", date(2025, 6, 1), "archive"),
    ]

    pending = sweep_retention(documents, _table(), as_of=date(2025, 6, 30), include_pending=True)
    assert [(event.target_id, event.firing_date) for event in pending.events] == [
        ("doc-1", date(2025, 6, 1)),
        ("doc-2", date(2026, 1, 1)),
        ("doc-3", date(2026, 5, 1)),
    ]


def test_retention_sweep_records_missing_anchor():
    documents = [{"id": "doc-1", "compliance_head": "GST"}]
    report = sweep_retention(documents, _table(), as_of=date(2025, 6, 30))
    assert report.events == []
    assert [failure.target_id for failure in report.failures] == ["doc-1"]


def test_out_of_range_reminder_fails_only_its_task():
    table = RuleTable.from_records([
        {"id": "1", "category": "reminder", "scope": "global", "intervals": ["T-1"]},
        {"id": "3", "category": "reminder", "scope": "compliance-head", "target": "TDS",
         "intervals": ["D+99999999"]},
    ])
    tasks = [
        {"id": "task-1", "compliance_head": "TDS", "due_date": "2025-06-30"},
        {"id": "task-2", "compliance_head": "ROC", "due_date": "2025-06-30"},
        {"id": "task-3", "compliance_head": "ROC", "due_date": "0001-01-01"},
    ]
    report = sweep_reminders(tasks, table)
    assert [(event.target_id, event.firing_date) for event in report.events] == [
        ("task-2", date(2025, 6, 29)),
    ]
    assert [(failure.target_id, failure.rule_id, failure.error_type) for failure in report.failures] == [
        ("task-1", "3", "InvalidTokenError"),
        ("task-3", "1", "InvalidTokenError"),
    ]


def test_out_of_range_retention_fails_only_its_document():
    documents = [
        {"id": "doc-1", "compliance_head": "GST", "created_at": "9999-06-01"},
        {"id": "doc-2", "compliance_head": "GST", "created_at": "2024-06-01"},
    ]
    report = sweep_retention(documents, _table(), as_of=date(2025, 6, 30))
    assert [event.target_id for event in report.events] == ["doc-2"]
    assert [(failure.target_id, failure.rule_id, failure.error_type) for failure in report.failures] == [
        ("doc-1", "10", "InvalidRuleError"),
    ]

from __future__ import annotations

import json
import sys
from datetime import date

import pandas as pd

from compliance_rules.config import EngineConfig
from compliance_rules.run_sweep import main, run_sweep

RULES = [
    {"id": "1", "category": "reminder", "scope": "global", "intervals": ["T-7", "T-1"]},
    {"id": "2", "category": "reminder", "scope": "compliance-head", "target": "GST",
     "intervals": ["T-7", "T7"]},
    {"id": "3", "category": "retention", "scope": "global",
     "retentionPeriod": 30, "retentionUnit": "days", "action": "delete"},
]


def _write_inputs(tmp_path):
    rules_path = tmp_path / "rules.json"
    rules_path.write_text(json.dumps({"rules": RULES}), encoding="utf-8")
    tasks_path = tmp_path / "tasks.csv"
    pd.DataFrame([
        {"id": "task-1", "compliance_head": "ROC", "due_date": "2025-07-07"},
        {"id": "task-2", "compliance_head": "GST", "due_date": "2025-07-07"},
    ]).to_csv(tasks_path, index=False)
    documents_path = tmp_path / "documents.csv"
    pd.DataFrame([
        {"id": "doc-1", "compliance_head": "GST", "created_at": "2025-05-31"},
        {"id": "doc-2", "compliance_head": "GST", "created_at": "2025-06-15"},
    ]).to_csv(documents_path, index=False)
    return rules_path, tasks_path, documents_path


def test_run_sweep_writes_reports(tmp_path):
    rules_path, tasks_path, documents_path = _write_inputs(tmp_path)
    output_dir = tmp_path / "out"

    results = run_sweep(
        rules_path=rules_path,
        output_dir=output_dir,
        as_of=date(2025, 6, 30),
        tasks_path=tasks_path,
        documents_path=documents_path,
        config=EngineConfig(),
    )

    assert results["reminders"]["events"] == 1
    assert results["reminders"]["failures"] == 1
    assert results["retention"]["events"] == 1

    reminders = pd.read_csv(output_dir / "reminders_events.csv", dtype=str)
    assert reminders[["firing_date", "target_id", "token"]].values.tolist() == [
        ["2025-06-30", "task-1", "T-7"],
    ]
    failures = pd.read_csv(output_dir / "reminders_failures.csv", dtype=str)
    assert failures["error_type"].tolist() == ["InvalidTokenError"]

    retention = pd.read_csv(output_dir / "retention_events.csv", dtype=str)
    assert retention[["firing_date", "kind", "target_id"]].values.tolist() == [
        ["2025-06-30", "delete", "doc-1"],
    ]

    audits = pd.read_csv(output_dir / "rule_audits.csv")
    by_gate = dict(zip(audits["gate_id"], audits["passed"]))
    assert by_gate["interval_tokens"] == False  # noqa: E712
    assert by_gate["duplicate_rules"] == True  # noqa: E712


def test_run_sweep_window_days(tmp_path):
    rules_path, tasks_path, _ = _write_inputs(tmp_path)
    results = run_sweep(
        rules_path=rules_path,
        output_dir=tmp_path / "out",
        as_of=date(2025, 6, 30),
        tasks_path=tasks_path,
        window_days=7,
        config=EngineConfig(),
    )
    # task-1: T-7 on 06-30 and T-1 on 07-06
    assert results["reminders"]["events"] == 2
    assert "retention" not in results


def test_main_prints_summary(tmp_path, monkeypatch, capsys):
    rules_path, tasks_path, _ = _write_inputs(tmp_path)
    monkeypatch.setattr(sys, "argv", [
        "compliance-sweep",
        "--rules", str(rules_path),
        "--tasks", str(tasks_path),
        "--as-of", "2025-06-30",
        "--output", str(tmp_path / "out"),
    ])
    main()
    out = capsys.readouterr().out
    assert "reminders: 1 events, 1 failures, 0 tie-breaks" in out
    assert (tmp_path / "out" / "reminders_events.csv").exists()

#!/usr/bin/env python3
"""
Run the daily compliance sweep.

Loads a rule table snapshot, audits it, then evaluates reminder and retention
rules across task and document exports and writes CSV reports for the
notification dispatcher and the vault service.

Usage:
    python -m compliance_rules.run_sweep --rules rules.json \
        [--tasks tasks.csv] [--documents documents.csv] \
        [--as-of 2025-06-30] [--window-days 1] [--output out/]
"""

import argparse
import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from compliance_rules.config import EngineConfig
from compliance_rules.evaluation.rule_audits import audit_rule_table
from compliance_rules.sweep import SweepReport, sweep_reminders, sweep_retention
from compliance_rules.utils.serialize import load_rule_table, parse_date

logger = logging.getLogger(__name__)


# =============================================================================
# SWEEP
# =============================================================================

def run_sweep(
    rules_path: Path,
    output_dir: Path,
    as_of: date,
    tasks_path: Optional[Path] = None,
    documents_path: Optional[Path] = None,
    window_days: int = 1,
    config: Optional[EngineConfig] = None,
) -> Dict[str, Dict[str, int]]:
    """
    Run all sweeps and write their reports.

    Args:
        rules_path: JSON rule table export.
        output_dir: Directory for CSV reports.
        as_of: Sweep date.
        tasks_path: CSV of tasks (due_date + taxonomy columns).
        documents_path: CSV of documents (anchor + taxonomy columns).
        window_days: Reminder window length starting at ``as_of``.
        config: Engine configuration; loaded from the environment if None.

    Returns:
        Summary counts per sweep.
    """
    config = config or EngineConfig.from_env()
    table = load_rule_table(rules_path)
    logger.info(f"Loaded {len(table)} rules from {rules_path}")

    output_dir.mkdir(parents=True, exist_ok=True)
    audits = audit_rule_table(table, config)
    for audit in audits:
        if not audit.passed:
            logger.warning(f"Rule audit {audit.gate_id} failed: {audit.details}")
    pd.DataFrame([vars(audit) for audit in audits]).to_csv(
        output_dir / "rule_audits.csv", index=False
    )

    results: Dict[str, Dict[str, int]] = {}
    if tasks_path is not None:
        tasks_df = pd.read_csv(tasks_path, dtype=str)
        window_end = as_of + timedelta(days=max(window_days, 1) - 1)
        report = sweep_reminders(
            tasks_df, table, window_start=as_of, window_end=window_end, config=config
        )
        _write_report(report, output_dir, "reminders")
        results["reminders"] = report.summary()

    if documents_path is not None:
        documents_df = pd.read_csv(documents_path, dtype=str)
        report = sweep_retention(documents_df, table, as_of=as_of, config=config)
        _write_report(report, output_dir, "retention")
        results["retention"] = report.summary()

    return results


def _write_report(report: SweepReport, output_dir: Path, name: str) -> None:
    report.events_frame().to_csv(output_dir / f"{name}_events.csv", index=False)
    report.failures_frame().to_csv(output_dir / f"{name}_failures.csv", index=False)
    report.tie_breaks_frame().to_csv(output_dir / f"{name}_tie_breaks.csv", index=False)


# =============================================================================
# CLI
# =============================================================================

def main():
    parser = argparse.ArgumentParser(
        description="Run the compliance reminder/retention sweep"
    )
    parser.add_argument(
        "--rules",
        required=True,
        help="Path to the rule table JSON export",
    )
    parser.add_argument(
        "--tasks",
        default=None,
        help="Path to tasks CSV",
    )
    parser.add_argument(
        "--documents",
        default=None,
        help="Path to documents CSV",
    )
    parser.add_argument(
        "--as-of",
        default=None,
        help="Sweep date (YYYY-MM-DD), defaults to today",
    )
    parser.add_argument(
        "--window-days",
        type=int,
        default=1,
        help="Number of days of reminders to emit, starting at --as-of",
    )
    parser.add_argument(
        "--output",
        default="output",
        help="Output directory",
    )

    args = parser.parse_args()

    config = EngineConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    as_of = parse_date(args.as_of) if args.as_of else date.today()
    results = run_sweep(
        rules_path=Path(args.rules),
        output_dir=Path(args.output),
        as_of=as_of,
        tasks_path=Path(args.tasks) if args.tasks else None,
        documents_path=Path(args.documents) if args.documents else None,
        window_days=args.window_days,
        config=config,
    )
    for name, summary in results.items():
        print(f"{name}: {summary['events']} events, {summary['failures']} failures, "
              f"{summary['tie_breaks']} tie-breaks")


if __name__ == "__main__":
    main()

"""
Temporal scheduling for compliance_rules.

Submodules:
    dates: Clamped month/year arithmetic and clock-derived template variables
    reminders: Reminder firing dates from interval tokens
    retention: Recurring archive/delete execution dates
"""

from compliance_rules.scheduling.dates import add_months, add_years, implicit_variables
from compliance_rules.scheduling.reminders import generate_reminders, schedule_reminders
from compliance_rules.scheduling.retention import (
    RetentionSchedule,
    next_execution,
    schedule_retention,
    upcoming_executions,
)

__all__ = [
    "add_months",
    "add_years",
    "implicit_variables",
    "generate_reminders",
    "schedule_reminders",
    "RetentionSchedule",
    "next_execution",
    "schedule_retention",
    "upcoming_executions",
]

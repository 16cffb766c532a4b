"""
Calendar arithmetic helpers.

Month and year steps clamp to the last valid day of the target month:

    add_months(date(2025, 1, 31), 1)  -> 2025-02-28
    add_years(date(2024, 2, 29), 1)   -> 2025-02-28

They never roll over into the following month.
"""

import calendar
from datetime import date
from typing import Dict

from compliance_rules.config import DEFAULT_CONFIG, EngineConfig
from compliance_rules.constants import VAR_MONTH, VAR_QUARTER, VAR_YEAR

# Locale-independent month labels
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def add_months(anchor: date, months: int) -> date:
    """Advance ``anchor`` by ``months`` calendar months, clamping the day."""
    month_index = anchor.month - 1 + months
    year = anchor.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(anchor.day, last_day))


def add_years(anchor: date, years: int) -> date:
    """Advance ``anchor`` by ``years``; Feb 29 clamps to Feb 28 on non-leap years."""
    return add_months(anchor, 12 * years)


def quarter_of(day: date) -> int:
    return (day.month - 1) // 3 + 1


def implicit_variables(as_of: date, config: EngineConfig = DEFAULT_CONFIG) -> Dict[str, str]:
    """
    Template variables derived from the evaluation clock.

    Returns:
        Dict with ``year`` ("2025"), ``month`` ("January" or "01") and
        ``quarter`` ("Q1-2025" by default).
    """
    if config.month_label_format == "number":
        month = f"{as_of.month:02d}"
    else:
        month = MONTH_NAMES[as_of.month - 1]
    quarter = config.quarter_label_format.format(quarter=quarter_of(as_of), year=as_of.year)
    return {
        VAR_YEAR: str(as_of.year),
        VAR_MONTH: month,
        VAR_QUARTER: quarter,
    }


__all__ = ["add_months", "add_years", "quarter_of", "implicit_variables"]

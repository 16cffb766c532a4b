"""
Parsing module for compliance_rules.

Submodules:
    intervals: Interval token parsing ("T-15", "D+7")
    templates: Strict {{variable}} template resolution
"""

from compliance_rules.parsing.intervals import (
    Direction,
    IntervalOffset,
    parse_interval,
    format_interval,
    describe_interval,
    is_valid_interval,
)
from compliance_rules.parsing.templates import (
    parse_template,
    extract_variables,
    resolve_template,
)

__all__ = [
    # Interval tokens
    "Direction",
    "IntervalOffset",
    "parse_interval",
    "format_interval",
    "describe_interval",
    "is_valid_interval",
    # Templates
    "parse_template",
    "extract_variables",
    "resolve_template",
]

"""
Interval token parsing.

Reminder rules encode offsets from a task's due date as compact tokens:

    T-15  -> 15 days before the anchor date
    D+7   -> 7 days after the anchor date

Despite the letters, both forms are a signed day count relative to a single
anchor. By default "T" must be paired with "-" and "D" with "+"; the mixed
forms ("T+3", "D-2") are only accepted when explicitly enabled, in which case
the sign character alone decides the direction.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from compliance_rules.errors import InvalidTokenError

TOKEN_PATTERN = re.compile(r"(?P<letter>[TD])(?P<sign>[+-])(?P<days>[0-9]+)")

LETTER_BEFORE = "T"
LETTER_AFTER = "D"

# Largest accepted day count (100 years)
MAX_INTERVAL_DAYS = 36500


class Direction(Enum):
    """Whether an offset lands before or after the anchor date."""
    BEFORE = "before"
    AFTER = "after"


@dataclass(frozen=True)
class IntervalOffset:
    """Parsed interval token."""

    direction: Direction
    days: int

    @property
    def signed_days(self) -> int:
        return -self.days if self.direction is Direction.BEFORE else self.days

    def apply(self, anchor: date) -> date:
        """
        Return the date this offset lands on relative to ``anchor``.

        Raises:
            InvalidTokenError: If the result falls outside the supported
                date range (year 1 to 9999).
        """
        try:
            return anchor + timedelta(days=self.signed_days)
        except OverflowError:
            raise InvalidTokenError(
                format_interval(self), f"lands outside the supported date range from {anchor}"
            ) from None


def parse_interval(token: str, allow_mixed_direction: bool = False) -> IntervalOffset:
    """
    Parse an interval token into a direction and day count.

    Args:
        token: Token text such as "T-15" or "D+7".
        allow_mixed_direction: Accept "T+n" and "D-n".

    Returns:
        IntervalOffset with a non-negative day count.

    Raises:
        InvalidTokenError: If the token does not match the grammar, has
            leading zeros, exceeds MAX_INTERVAL_DAYS, or uses a disallowed
            letter/sign pairing.

    Example:
        >>> parse_interval("T-15")
        IntervalOffset(direction=<Direction.BEFORE: 'before'>, days=15)
    """
    if not isinstance(token, str):
        raise InvalidTokenError(token, "token must be a string")
    match = TOKEN_PATTERN.fullmatch(token)
    if not match:
        raise InvalidTokenError(token)

    digits = match.group("days")
    if len(digits) > 1 and digits.startswith("0"):
        raise InvalidTokenError(token, "day count must not have leading zeros")
    days = int(digits)
    if days > MAX_INTERVAL_DAYS:
        raise InvalidTokenError(token, f"day count exceeds {MAX_INTERVAL_DAYS}")

    letter = match.group("letter")
    sign = match.group("sign")
    if not allow_mixed_direction:
        if letter == LETTER_BEFORE and sign != "-":
            raise InvalidTokenError(token, "'T' tokens count days before the anchor and need '-'")
        if letter == LETTER_AFTER and sign != "+":
            raise InvalidTokenError(token, "'D' tokens count days after the anchor and need '+'")

    direction = Direction.BEFORE if sign == "-" else Direction.AFTER
    return IntervalOffset(direction=direction, days=days)


def format_interval(offset: IntervalOffset, letter: str = "") -> str:
    """
    Encode an offset back to token text.

    The letter defaults to the conventional one for the direction ("T" before,
    "D" after), which makes parse/format an exact round trip for every token
    accepted in the default mode.
    """
    if not letter:
        letter = LETTER_BEFORE if offset.direction is Direction.BEFORE else LETTER_AFTER
    if letter not in (LETTER_BEFORE, LETTER_AFTER):
        raise ValueError(f"Unknown token letter: {letter!r}")
    if offset.days < 0:
        raise ValueError("Offset day count must be non-negative")
    sign = "-" if offset.direction is Direction.BEFORE else "+"
    return f"{letter}{sign}{offset.days}"


def describe_interval(token: str, allow_mixed_direction: bool = False) -> str:
    """
    Human-readable label for a token, as shown in the reminder configurator.

    >>> describe_interval("T-15")
    '15 days before'
    >>> describe_interval("D+1")
    '1 day after'
    """
    offset = parse_interval(token, allow_mixed_direction=allow_mixed_direction)
    if offset.days == 0:
        return "on the due date"
    unit = "day" if offset.days == 1 else "days"
    return f"{offset.days} {unit} {offset.direction.value}"


def is_valid_interval(token: str, allow_mixed_direction: bool = False) -> bool:
    try:
        parse_interval(token, allow_mixed_direction=allow_mixed_direction)
    except InvalidTokenError:
        return False
    return True


__all__ = [
    "Direction",
    "IntervalOffset",
    "TOKEN_PATTERN",
    "MAX_INTERVAL_DAYS",
    "parse_interval",
    "format_interval",
    "describe_interval",
    "is_valid_interval",
]

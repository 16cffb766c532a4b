from __future__ import annotations

from datetime import date

import pytest

from compliance_rules.errors import InvalidTokenError
from compliance_rules.parsing.intervals import (
    Direction,
    IntervalOffset,
    describe_interval,
    format_interval,
    is_valid_interval,
    parse_interval,
)


def test_parse_before_and_after_tokens():
    assert parse_interval("T-15") == IntervalOffset(Direction.BEFORE, 15)
    assert parse_interval("D+7") == IntervalOffset(Direction.AFTER, 7)


def test_offset_applies_relative_to_anchor():
    anchor = date(2025, 6, 30)
    assert parse_interval("T-15").apply(anchor) == date(2025, 6, 15)
    assert parse_interval("D+1").apply(anchor) == date(2025, 7, 1)
    assert parse_interval("T-0").apply(anchor) == anchor


@pytest.mark.parametrize("token", ["T-30", "T-15", "T-7", "T-3", "T-1", "T-0", "D+1", "D+3", "D+15", "D+30", "D+365"])
def test_round_trip_reproduces_token(token):
    assert format_interval(parse_interval(token)) == token


@pytest.mark.parametrize(
    "token",
    ["", "T15", "X-3", "t-3", "T-", "T-3d", " T-3", "T-3 ", "T-3\n", "T--3", "T-1.5", "T-07"],
)
def test_malformed_tokens_raise(token):
    with pytest.raises(InvalidTokenError) as exc_info:
        parse_interval(token)
    assert exc_info.value.token == token


def test_non_string_token_raises():
    with pytest.raises(InvalidTokenError):
        parse_interval(15)


def test_mixed_direction_rejected_by_default():
    with pytest.raises(InvalidTokenError):
        parse_interval("T+3")
    with pytest.raises(InvalidTokenError):
        parse_interval("D-2")


def test_mixed_direction_uses_sign_when_allowed():
    assert parse_interval("T+3", allow_mixed_direction=True) == IntervalOffset(Direction.AFTER, 3)
    assert parse_interval("D-2", allow_mixed_direction=True) == IntervalOffset(Direction.BEFORE, 2)
    offset = parse_interval("T+3", allow_mixed_direction=True)
    assert format_interval(offset, letter="T") == "T+3"


def test_invalid_token_error_is_value_error():
    assert issubclass(InvalidTokenError, ValueError)
    assert not is_valid_interval("Q-1")
    assert is_valid_interval("D+7")


def test_describe_interval_labels():
    assert describe_interval("T-15") == "15 days before"
    assert describe_interval("T-1") == "1 day before"
    assert describe_interval("D+1") == "1 day after"
    assert describe_interval("D+0") == "on the due date"


def test_day_count_is_capped():
    assert parse_interval("D+36500").days == 36500
    with pytest.raises(InvalidTokenError) as exc_info:
        parse_interval("D+99999999")
    assert exc_info.value.token == "D+99999999"
    assert not is_valid_interval("T-36501")


def test_apply_past_calendar_limits_raises_typed_error():
    with pytest.raises(InvalidTokenError) as exc_info:
        parse_interval("D+30").apply(date(9999, 12, 20))
    assert exc_info.value.token == "D+30"
    with pytest.raises(InvalidTokenError):
        parse_interval("T-5").apply(date(1, 1, 2))

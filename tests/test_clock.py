"""Tests for time-of-day parsing and same-day target arithmetic."""

from datetime import timedelta

import pytest

from shuttle.clock import (TimeOfDay, delay_until, is_future, parse_time_of_day,
                           resolve_target_instant, seconds_since_midnight)
from shuttle.exceptions import FormatError
from tests.conftest import FIXED_NOW


def test_parses_hh_mm_ss() -> None:
    """Given a valid time string, when parsing, then components are returned."""
    assert parse_time_of_day("15:10:22") == TimeOfDay(15, 10, 22)


def test_parse_strips_whitespace() -> None:
    """Given surrounding whitespace, when parsing, then it is ignored."""
    assert parse_time_of_day("  07:05:00 ") == TimeOfDay(7, 5, 0)


@pytest.mark.parametrize("text", ["15:10", "15", "", "15:10:22:01", "aa:bb:cc", "15:-1:00", "1.5:10:22"])
def test_rejects_malformed_input(text: str) -> None:
    """Given a malformed time, when parsing, then FormatError is raised."""
    with pytest.raises(FormatError):
        parse_time_of_day(text)


@pytest.mark.parametrize("text", ["24:00:00", "12:60:00", "12:00:60"])
def test_rejects_out_of_range_components(text: str) -> None:
    """Given an out-of-range component, when parsing, then FormatError is raised."""
    with pytest.raises(FormatError, match="out of range"):
        parse_time_of_day(text)


@pytest.mark.parametrize("text", ["00:00:00", "08:30:15", "23:59:59"])
def test_resolved_instant_keeps_exact_components_and_date(text: str) -> None:
    """Given a valid time, when resolving on today, then date and components match."""
    target = resolve_target_instant(parse_time_of_day(text), FIXED_NOW)

    assert (target.hour, target.minute, target.second) == parse_time_of_day(text)
    assert target.date() == FIXED_NOW.date()
    assert target.tzinfo == FIXED_NOW.tzinfo
    assert target.microsecond == 0


def test_past_time_is_not_rolled_to_tomorrow() -> None:
    """Given a time that already passed today, when resolving, then it stays today."""
    target = resolve_target_instant(TimeOfDay(11, 0, 0), FIXED_NOW)

    assert target.date() == FIXED_NOW.date()
    assert delay_until(target, FIXED_NOW) == timedelta(hours=-1)
    assert not is_future(target, FIXED_NOW)


def test_zero_delay_is_not_future() -> None:
    """Given a target equal to now, when classifying, then it is not in the future."""
    target = resolve_target_instant(TimeOfDay(12, 0, 0), FIXED_NOW)

    assert delay_until(target, FIXED_NOW) == timedelta(0)
    assert not is_future(target, FIXED_NOW)


def test_one_second_ahead_is_future() -> None:
    """Given a target one second ahead, when classifying, then it is in the future."""
    target = resolve_target_instant(TimeOfDay(12, 0, 1), FIXED_NOW)

    assert is_future(target, FIXED_NOW)


def test_seconds_since_midnight() -> None:
    """Given a time of day, when converting, then seconds since midnight are returned."""
    assert seconds_since_midnight(TimeOfDay(1, 2, 3)) == 3723
    assert seconds_since_midnight(FIXED_NOW) == 12 * 3600


def test_time_of_day_renders_zero_padded() -> None:
    """Given a TimeOfDay, when formatting, then it is zero-padded HH:MM:SS."""
    assert str(TimeOfDay(7, 5, 3)) == "07:05:03"

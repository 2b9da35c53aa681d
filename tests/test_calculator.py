from datetime import time

import pytest

from overtime.calculator import (
    DEFAULT_HOURLY_RATE,
    OvertimeCalculator,
    calculate,
    elapsed_minutes,
    minutes_since_midnight,
)
from overtime.models import round_half_up


def test_full_day_with_lunch_break():
    result = calculate("08:00", "18:00", True)

    assert result.total_hours == 10.0
    assert result.net_hours == 9.0
    assert result.total_value == 140.13
    assert result.hourly_rate == DEFAULT_HOURLY_RATE
    assert result.lunch_discount is True


def test_short_evening_shift_without_lunch():
    result = calculate("18:00", "21:00", False)

    assert (result.total_hours, result.net_hours, result.total_value) == (3.0, 3.0, 46.71)


def test_shift_crossing_midnight_counts_the_wrapped_minutes():
    result = calculate("23:00", "01:00", False)

    assert result.total_hours == 2.0
    assert result.total_value == 31.14


def test_zero_length_shift_is_returned_for_the_validator_to_reject():
    result = calculate("00:00", "00:00", False)

    assert result.total_hours == 0
    assert result.net_hours == 0
    assert result.total_value == 0


def test_lunch_on_a_short_shift_goes_negative():
    result = calculate("08:00", "08:30", True)

    assert result.total_hours == 0.5
    assert result.net_hours == -0.5


def test_fractional_hours_are_rounded_to_cents():
    result = calculate("18:00", "18:20", False)

    assert result.total_hours == 0.33
    assert result.total_value == 5.19


@pytest.mark.parametrize("start,end", [("", "10:00"), ("08:00", None), ("abc", "10:00")])
def test_missing_or_unparsable_times_give_nothing(start, end):
    assert calculate(start, end, False) is None


def test_custom_rate_flows_into_value():
    result = calculate("10:00", "12:00", False, hourly_rate=20.0)

    assert result.total_value == 40.0
    assert result.hourly_rate == 20.0


def test_minutes_since_midnight_accepts_time_objects_and_ignores_seconds():
    assert minutes_since_midnight(time(7, 45)) == 465
    assert minutes_since_midnight("07:45:59") == 465
    assert minutes_since_midnight("   ") is None


def test_elapsed_minutes_wraps_negative_spans():
    assert elapsed_minutes(22 * 60, 2 * 60) == 240
    assert elapsed_minutes(60, 120) == 60


def test_round_half_up_rounds_halves_away_from_zero():
    assert round_half_up(0.125) == 0.13
    assert round(0.125, 2) == 0.12


def test_calculator_applies_lunch_from_six_hours_when_not_told():
    calculator = OvertimeCalculator()

    six_hours = calculator.calculate("08:00", "14:00")
    just_under = calculator.calculate("08:00", "13:59")

    assert six_hours.lunch_discount is True
    assert six_hours.net_hours == 5.0
    assert just_under.lunch_discount is False


def test_calculator_explicit_choice_wins_over_threshold():
    calculator = OvertimeCalculator(hourly_rate=10.0, auto_lunch_threshold=6.0)

    result = calculator.calculate("08:00", "18:00", lunch_discount=False)

    assert result.lunch_discount is False
    assert result.total_value == 100.0


def test_calculator_returns_none_without_both_times():
    assert OvertimeCalculator().calculate("08:00", "") is None


@pytest.mark.parametrize(
    "start,end,lunch",
    [("08:00", "18:00", True), ("23:00", "01:00", False), ("18:00", "18:20", False)],
)
def test_calculate_is_repeatable(start, end, lunch):
    assert calculate(start, end, lunch) == calculate(start, end, lunch)


@pytest.mark.parametrize("start,end", [("08:00", "14:00"), ("22:00", "02:00")])
def test_calculator_is_repeatable_on_auto_lunch_and_overnight_shifts(start, end):
    first = OvertimeCalculator().calculate(start, end)
    second = OvertimeCalculator().calculate(start, end)

    assert first == second
    assert first is not second

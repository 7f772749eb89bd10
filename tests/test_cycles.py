"""Cycle statistics, date helpers, and answer coercion tests.

Reference cycle used throughout: LMP Monday 2024-01-01, so cycle day ``n``
is January ``n``.
"""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from contrasafe_rulesets.answers import get_list, is_true, to_date, to_number
from contrasafe_rulesets.cycles import (
    calendar_days,
    calendar_fertile_days,
    calendar_safe_window,
    complete_cycles,
    cycle_day_date,
    cycle_statistics,
    cycles_in_calendar_range,
    is_fertile_day,
    is_safe_day,
    predicted_date,
    round_half_up,
    sdm_fertile_window,
    sdm_safe_window,
)
from contrasafe_rulesets.dates import (
    add_days,
    format_date,
    format_long_date,
    format_short_day,
    to_day,
)
from contrasafe_rulesets.engines import evaluate_calendar_method, evaluate_standard_days
from contrasafe_rulesets.models.answer import CycleAnswers

LMP = date(2024, 1, 1)


# =====================================================================
# Rounding and statistics
# =====================================================================


class TestStatistics:
    @pytest.mark.parametrize(
        "value, expected",
        [(25.5, 26), (26.4, 26), (26.5, 27), (0.5, 1), (28.0, 28), (27.49, 27)],
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_complete_cycles(self):
        assert complete_cycles([28] * 6) == [28] * 6
        assert complete_cycles([28] * 5 + [None]) is None
        assert complete_cycles([]) is None

    def test_cycle_statistics(self):
        stats = cycle_statistics([26, 28, 30, 27, 29, 28])
        assert (stats.shortest, stats.longest, stats.average) == (26, 30, 28)

    def test_average_rounds_half_up(self):
        assert cycle_statistics([26, 26, 26, 27, 27, 27]).average == 27

    def test_incomplete_statistics(self):
        assert cycle_statistics([28, None, 28, 28, 28, 28]) is None

    def test_calendar_range(self):
        assert cycles_in_calendar_range([21, 35, 28]) is True
        assert cycles_in_calendar_range([20, 28]) is False
        assert cycles_in_calendar_range([28, 36]) is False


class TestCalendarFertileDays:
    def test_formula(self):
        assert tuple(calendar_fertile_days(26, 30)) == (8, 19, True)

    def test_earliest_clamped_to_day_one(self):
        days = calendar_fertile_days(19, 25)
        assert days.earliest == 1
        assert days.latest == 14
        assert days.valid is True

    def test_empty_range_is_invalid(self):
        days = calendar_fertile_days(35, 21)
        assert (days.earliest, days.latest) == (17, 10)
        assert days.valid is False


# =====================================================================
# Dates
# =====================================================================


class TestDates:
    def test_cycle_day_one_is_lmp(self):
        assert cycle_day_date(LMP, 1) == LMP
        assert cycle_day_date(LMP, 8) == date(2024, 1, 8)

    def test_add_days_crosses_leap_day(self):
        assert add_days(date(2024, 2, 28), 1) == date(2024, 2, 29)
        assert add_days(date(2023, 2, 28), 1) == date(2023, 3, 1)

    def test_datetime_time_dropped(self):
        assert to_day(datetime(2024, 3, 10, 23, 59)) == date(2024, 3, 10)
        assert add_days(datetime(2024, 3, 10, 23, 59), 1) == date(2024, 3, 11)

    def test_formats(self):
        assert format_date(date(2024, 1, 8)) == "08/01/2024"
        assert format_long_date(date(2027, 3, 15)) == "Monday, March 15, 2027"
        assert format_short_day(date(2024, 1, 1)) == "Mon 1"

    def test_predicted_date(self):
        nxt = predicted_date(LMP, 28)
        assert nxt.predicted_date == date(2024, 1, 29)
        assert nxt.formatted_date == "Monday, January 29, 2024"


# =====================================================================
# Windows
# =====================================================================


class TestWindows:
    def test_sdm_fertile_window(self):
        window = sdm_fertile_window(LMP)
        assert (window.start, window.end) == (date(2024, 1, 8), date(2024, 1, 19))
        assert (window.start_display, window.end_display) == ("08/01/2024", "19/01/2024")

    def test_sdm_safe_window(self):
        safe = sdm_safe_window(LMP, 28)
        assert (safe.before_fertile.start, safe.before_fertile.end) == (
            date(2024, 1, 1),
            date(2024, 1, 7),
        )
        assert (safe.after_fertile.start, safe.after_fertile.end) == (
            date(2024, 1, 20),
            date(2024, 1, 28),
        )

    def test_calendar_safe_window(self):
        safe = calendar_safe_window(LMP, 8, 19)
        assert safe.before_fertile.end == date(2024, 1, 7)
        assert safe.after_fertile.start == date(2024, 1, 20)
        assert safe.after_fertile.end is None
        assert safe.after_fertile.end_display is None

    def test_calendar_safe_window_without_before(self):
        safe = calendar_safe_window(LMP, 1, 10)
        assert safe.before_fertile is None
        assert safe.after_fertile.start == date(2024, 1, 11)

    def test_calendar_days(self):
        days = calendar_days(LMP, 28, 8, 19)
        assert len(days) == 28
        assert [d.day_number for d in days] == list(range(1, 29))
        assert days[0].day_type == "safe"
        assert days[0].formatted_date == "Mon 1"
        assert days[7].day_type == "fertile"
        assert days[18].day_type == "fertile"
        assert days[19].day_type == "safe"
        assert days[27].day_type == "expected-period"
        assert days[27].calendar_date == date(2024, 1, 28)


class TestDayLookups:
    def test_sdm_result(self):
        result = evaluate_standard_days(CycleAnswers(cycle_lengths=[28] * 6, lmp_date=LMP))
        assert is_fertile_day(result, date(2024, 1, 8)) is True
        assert is_fertile_day(result, date(2024, 1, 7)) is False
        assert is_safe_day(result, date(2024, 1, 7)) is True
        assert is_safe_day(result, date(2024, 1, 20)) is True
        assert is_safe_day(result, date(2024, 1, 29)) is False

    def test_calendar_after_window_open_ended(self):
        result = evaluate_calendar_method(
            CycleAnswers(cycle_lengths=[26, 28, 30, 27, 29, 28], lmp_date=LMP)
        )
        assert is_safe_day(result, date(2024, 2, 15)) is True
        assert is_safe_day(result, date(2023, 12, 31)) is False

    def test_dateless_result(self):
        result = evaluate_standard_days(CycleAnswers(cycle_lengths=[28] * 6))
        assert is_fertile_day(result, LMP) is False
        assert is_safe_day(result, LMP) is False


# =====================================================================
# Answer coercion and CycleAnswers
# =====================================================================


class TestCoercion:
    @pytest.mark.parametrize("value", [True, False, "abc", "nan", "inf", None, [28], {}])
    def test_not_numbers(self, value):
        assert to_number(value) is None

    def test_numbers(self):
        assert to_number(" 28 ") == 28.0
        assert to_number(7) == 7.0
        assert to_number(7.5) == 7.5

    def test_to_date(self):
        assert to_date("2024-01-01") == LMP
        assert to_date("2024-01-01T08:00:00") == LMP
        assert to_date(datetime(2024, 1, 1, 8)) == LMP
        assert to_date("01/01/2024") is None
        assert to_date(None) is None

    def test_accessors(self):
        answers = {"flag": "true", "multi": ["a", 1, "b"], "single": "a"}
        assert is_true(answers, "flag") is False
        assert get_list(answers, "multi") == ["a", "b"]
        assert get_list(answers, "single") == []


class TestCycleAnswers:
    def test_from_flat_answers(self):
        answers = {f"cycle-{i}": 28 for i in range(1, 7)}
        answers["cycle-3"] = "27.5"
        answers["lmp-date"] = "2024-01-01"
        parsed = CycleAnswers.from_answers(answers)
        assert parsed.cycle_lengths == [28, 28, 27.5, 28, 28, 28]
        assert isinstance(parsed.cycle_lengths[0], int)
        assert parsed.lmp_date == LMP

    def test_unparseable_values_are_unanswered(self):
        parsed = CycleAnswers.from_answers({"cycle-1": "abc", "lmp-date": "soon"})
        assert parsed.cycle_lengths == [None] * 6
        assert parsed.lmp_date is None

    def test_from_cycle_durations_list(self):
        parsed = CycleAnswers.from_answers({"cycle-durations": [28, 29, 30]})
        assert parsed.cycle_lengths == [28, 29, 30, None, None, None]

    def test_per_cycle_keys_take_precedence(self):
        parsed = CycleAnswers.from_answers({"cycle-durations": [30] * 6, "cycle-1": 28})
        assert parsed.cycle_lengths == [28, None, None, None, None, None]

    def test_slot_count_enforced(self):
        with pytest.raises(ValidationError):
            CycleAnswers(cycle_lengths=[28] * 5)

"""Unit tests for calendar helpers"""

import pytest
from datetime import date

from src.domain.calendar_utils import (
    Weekday,
    count_occurrences,
    days_in_month,
    occurrence_dates,
    ranges_overlap,
    weekday_of,
)


class TestWeekdayOf:
    def test_sunday_is_zero(self):
        # 1 February 2026 is a Sunday
        assert weekday_of(date(2026, 2, 1)) == Weekday.SUNDAY
        assert weekday_of(date(2026, 2, 1)) == 0

    def test_saturday_is_six(self):
        assert weekday_of(date(2026, 2, 7)) == Weekday.SATURDAY


class TestCountOccurrences:
    def test_february_2026_has_four_mondays(self):
        assert count_occurrences(2026, 2, Weekday.MONDAY) == 4

    def test_march_2026_has_five_mondays(self):
        assert count_occurrences(2026, 3, Weekday.MONDAY) == 5

    def test_leap_february_has_five_of_its_first_weekday(self):
        # 1 February 2028 is a Tuesday
        assert count_occurrences(2028, 2, Weekday.TUESDAY) == 5
        assert count_occurrences(2028, 2, Weekday.WEDNESDAY) == 4

    @pytest.mark.parametrize("year", [2024, 2025, 2026, 2100])
    def test_every_month_counts_four_or_five_and_sums_to_days_in_month(self, year):
        for month in range(1, 13):
            counts = [count_occurrences(year, month, dow) for dow in range(7)]
            assert all(count in (4, 5) for count in counts)
            assert sum(counts) == days_in_month(year, month)


class TestOccurrenceDates:
    def test_dates_stay_inside_the_month(self):
        dates = occurrence_dates(2026, 3, Weekday.MONDAY)

        assert dates == [
            date(2026, 3, 2),
            date(2026, 3, 9),
            date(2026, 3, 16),
            date(2026, 3, 23),
            date(2026, 3, 30),
        ]

    def test_matches_count(self):
        for dow in range(7):
            assert len(occurrence_dates(2026, 1, dow)) == count_occurrences(2026, 1, dow)


class TestRangesOverlap:
    window = (date(2026, 2, 1), date(2026, 3, 1))

    def test_open_ended_range_started_before_window(self):
        assert ranges_overlap(date(2025, 6, 1), None, *self.window)

    def test_range_ending_on_first_day(self):
        assert ranges_overlap(date(2025, 6, 1), date(2026, 2, 1), *self.window)

    def test_range_ending_before_window(self):
        assert not ranges_overlap(date(2025, 6, 1), date(2026, 1, 31), *self.window)

    def test_range_starting_on_exclusive_end(self):
        assert not ranges_overlap(date(2026, 3, 1), None, *self.window)

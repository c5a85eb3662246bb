"""Unit tests for duration and session pricing"""

import pytest
from decimal import Decimal

from src.domain.exceptions import ConfigurationError, ValidationError
from src.domain.pricing import (
    RateTable,
    SportRate,
    calculate_hours,
    effective_rate,
    parse_time,
    session_amount,
)


class TestCalculateHours:
    def test_ninety_minutes(self):
        assert calculate_hours("10:00", "11:30") == Decimal("1.50")

    @pytest.mark.parametrize("end", ["24:00", "00:00"])
    def test_midnight_end_means_end_of_day(self, end):
        assert calculate_hours("22:00", end) == Decimal("2.00")

    def test_end_before_start_is_rejected(self):
        with pytest.raises(ValidationError):
            calculate_hours("11:00", "10:00")

    def test_empty_range_is_rejected(self):
        with pytest.raises(ValidationError):
            calculate_hours("10:00", "10:00")

    @pytest.mark.parametrize("value", ["", "10", "25:00", "10:60", "24:30", "ab:cd", None])
    def test_malformed_time_is_rejected(self, value):
        with pytest.raises(ValidationError):
            parse_time(value)


class TestSessionAmount:
    def test_off_peak_session_uses_single_rate(self, rate_table):
        # 1.5h x 15
        assert session_amount("10:00", "11:30", "badminton", rate_table) == Decimal("22.50")

    def test_peak_session_uses_single_rate(self, rate_table):
        assert session_amount("19:00", "21:00", "badminton", rate_table) == Decimal("36.00")

    def test_session_ending_at_boundary_is_off_peak(self, rate_table):
        assert session_amount("16:00", "18:00", "badminton", rate_table) == Decimal("30.00")

    def test_straddling_session_is_split_at_boundary(self, rate_table):
        # 1h x 15 + 1h x 18
        amount = session_amount("17:00", "19:00", "badminton", rate_table)

        assert amount == Decimal("33.00")
        assert Decimal("30.00") < amount < Decimal("36.00")

    def test_uneven_split(self, rate_table):
        # 0.5h x 15 + 1h x 18
        assert session_amount("17:30", "19:00", "badminton", rate_table) == Decimal("25.50")

    def test_flat_sport_ignores_boundary(self, rate_table):
        assert session_amount("17:00", "19:00", "pickleball", rate_table) == Decimal("50.00")

    def test_sport_lookup_is_case_insensitive(self, rate_table):
        assert session_amount("10:00", "11:00", " Badminton ", rate_table) == Decimal("15.00")

    def test_override_wins_over_peak_split(self, rate_table):
        amount = session_amount(
            "17:00", "19:00", "badminton", rate_table, hourly_rate_override=Decimal("80.00")
        )
        assert amount == Decimal("160.00")

    def test_override_applies_to_unknown_sport(self, rate_table):
        amount = session_amount(
            "10:00", "11:30", "squash", rate_table, hourly_rate_override=Decimal("80.00")
        )
        assert amount == Decimal("120.00")

    def test_zero_override_is_still_an_override(self, rate_table):
        amount = session_amount(
            "10:00", "11:00", "badminton", rate_table, hourly_rate_override=Decimal("0")
        )
        assert amount == Decimal("0.00")

    def test_unknown_sport_raises_configuration_error(self, rate_table):
        with pytest.raises(ConfigurationError) as exc_info:
            session_amount("10:00", "11:00", "squash", rate_table)

        assert exc_info.value.code == "CONFIGURATION_ERROR"

    def test_rounds_half_up_to_cents(self):
        table = RateTable(rates={"tennis": SportRate(off_peak_rate=Decimal("10.01"))})

        # 20 minutes x 10.01 / 60 = 3.33666...
        assert session_amount("10:00", "10:20", "tennis", table) == Decimal("3.34")


class TestEffectiveRate:
    def test_average_rate(self):
        assert effective_rate(Decimal("33.00"), Decimal("2.00")) == Decimal("16.50")

    def test_zero_hours(self):
        assert effective_rate(Decimal("10.00"), Decimal("0")) == Decimal("0.00")

"""Duration and Rate Calculation

Times are "HH:MM" 24-hour strings. A booking ending at midnight is written
as "24:00" (or "00:00"); no other overnight wrap is accepted.

Money is rounded to cents with ROUND_HALF_UP once per session, so
``sessions * session_amount(...)`` always equals the sum of the
individual sessions.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional, Tuple
from pydantic import BaseModel, Field
from src.domain.exceptions import ConfigurationError, ValidationError

MONEY_QUANT = Decimal("0.01")
HOURS_QUANT = Decimal("0.01")
MINUTES_PER_DAY = 24 * 60


def to_money(value) -> Decimal:
    return Decimal(value).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def parse_time(value: str) -> int:
    """
    Parse an "HH:MM" string into minutes since midnight

    Raises:
        ValidationError: If the value is not a valid 24-hour time
    """
    try:
        hour_str, minute_str = value.split(":")
        hour, minute = int(hour_str), int(minute_str)
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid time '{value}'", reason="expected HH:MM")

    if not (0 <= minute < 60) or not (0 <= hour <= 24) or (hour == 24 and minute != 0):
        raise ValidationError(f"Invalid time '{value}'", reason="out of range")

    return hour * 60 + minute


def minutes_range(start_time: str, end_time: str) -> Tuple[int, int]:
    """Return (start, end) minutes, with a midnight end mapped to 24:00"""
    start = parse_time(start_time)
    end = parse_time(end_time)

    if start >= MINUTES_PER_DAY:
        raise ValidationError(f"Invalid start time '{start_time}'", reason="start must be before 24:00")
    if end == 0:
        end = MINUTES_PER_DAY
    if end <= start:
        raise ValidationError(
            f"End time {end_time} must be after start time {start_time}",
            reason="overnight ranges are not supported",
        )
    return start, end


def calculate_hours(start_time: str, end_time: str) -> Decimal:
    """Elapsed hours between two times of the same day"""
    start, end = minutes_range(start_time, end_time)
    return (Decimal(end - start) / Decimal(60)).quantize(HOURS_QUANT, rounding=ROUND_HALF_UP)


def effective_rate(amount: Decimal, hours: Decimal) -> Decimal:
    """Average hourly rate of a priced session (for display)"""
    if not hours:
        return Decimal("0.00")
    return to_money(amount / hours)


class SportRate(BaseModel):
    """
    Hourly pricing for one sport

    ``peak_rate`` of None means the sport is priced flat all day.
    """

    off_peak_rate: Decimal = Field(..., ge=0, description="Hourly rate before peak_start")
    peak_rate: Optional[Decimal] = Field(default=None, ge=0, description="Hourly rate from peak_start")
    peak_start: str = Field(default="18:00", description="Peak-hour boundary (HH:MM)")

    def price(self, start: int, end: int) -> Decimal:
        """Price a session given as minutes since midnight"""
        if self.peak_rate is None:
            return to_money(Decimal(end - start) * self.off_peak_rate / 60)

        boundary = parse_time(self.peak_start)
        if end <= boundary:
            minutes_off_peak, minutes_peak = end - start, 0
        elif start >= boundary:
            minutes_off_peak, minutes_peak = 0, end - start
        else:
            minutes_off_peak, minutes_peak = boundary - start, end - boundary

        raw = (
            Decimal(minutes_off_peak) * self.off_peak_rate
            + Decimal(minutes_peak) * self.peak_rate
        ) / 60
        return to_money(raw)


class RateTable(BaseModel):
    """Rates keyed by lower-case sport name"""

    rates: Dict[str, SportRate] = Field(default_factory=dict)

    @classmethod
    def from_config(cls, raw: Dict[str, dict]) -> "RateTable":
        return cls(rates={sport.strip().lower(): SportRate(**conf) for sport, conf in raw.items()})

    def for_sport(self, sport: str) -> SportRate:
        """
        Look up a sport's rate

        Raises:
            ConfigurationError: If the sport has no configured rate
        """
        key = (sport or "").strip().lower()
        if key not in self.rates:
            raise ConfigurationError(
                f"No rate configured for sport '{sport}'",
                reason=f"known sports: {sorted(self.rates)}",
            )
        return self.rates[key]


def session_amount(
    start_time: str,
    end_time: str,
    sport: str,
    rate_table: RateTable,
    hourly_rate_override: Optional[Decimal] = None,
) -> Decimal:
    """
    Price one session

    An hourly override is applied flat over the whole duration and bypasses
    peak splitting. Otherwise the sport's rate from the table is used, split
    at the peak boundary when the session straddles it.

    Raises:
        ValidationError: Malformed time range
        ConfigurationError: Sport missing from the rate table (no override)
    """
    start, end = minutes_range(start_time, end_time)

    if hourly_rate_override is not None:
        return to_money(Decimal(end - start) * Decimal(hourly_rate_override) / 60)

    return rate_table.for_sport(sport).price(start, end)

"""Billing Period Value Type

A (month, year) billing cycle. Used as a key, never persisted on its own.
"""

from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo
from pydantic import BaseModel, Field


class BillingPeriod(BaseModel):
    """
    Billing Period - immutable (month, year) pair

    Periods compare chronologically so that ``BillingPeriod(12, 2025) <
    BillingPeriod(1, 2026)``.
    """

    month: int = Field(..., ge=1, le=12, description="Month (1-12)")
    year: int = Field(..., ge=1, description="Calendar year")

    class Config:
        frozen = True

    @classmethod
    def of(cls, month: int, year: int) -> "BillingPeriod":
        return cls(month=month, year=year)

    @classmethod
    def containing(cls, day: date) -> "BillingPeriod":
        return cls(month=day.month, year=day.year)

    @classmethod
    def current(cls, timezone: str, now: Optional[datetime] = None) -> "BillingPeriod":
        """Period containing ``now`` in the given timezone"""
        now = now or datetime.now(ZoneInfo(timezone))
        return cls(month=now.month, year=now.year)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def next_first_day(self) -> date:
        """First day of the following period (exclusive upper bound)"""
        if self.month == 12:
            return date(self.year + 1, 1, 1)
        return date(self.year, self.month + 1, 1)

    @property
    def last_day(self) -> date:
        return self.next_first_day - timedelta(days=1)

    def contains(self, day: date) -> bool:
        return self.first_day <= day < self.next_first_day

    def previous(self) -> "BillingPeriod":
        if self.month == 1:
            return BillingPeriod(month=12, year=self.year - 1)
        return BillingPeriod(month=self.month - 1, year=self.year)

    def is_before(self, other: "BillingPeriod") -> bool:
        return (self.year, self.month) < (other.year, other.month)

    def __lt__(self, other: "BillingPeriod") -> bool:
        return self.is_before(other)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

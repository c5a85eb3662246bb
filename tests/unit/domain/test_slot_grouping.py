"""Unit tests for recurring slot grouping"""

from datetime import date
from decimal import Decimal

from src.domain.payment_status import DisplayStatus
from src.domain.slot_grouping import derive_group_status, group_recurring_slots
from tests.fixtures.factories import make_recurring


class TestGroupRecurringSlots:
    def test_rate_change_rows_collapse_into_one_group(self, rate_table):
        old = make_recurring(
            "rb-old",
            hourly_rate=Decimal("70.00"),
            start_date=date(2025, 6, 1),
            end_date=date(2025, 12, 31),
        )
        new = make_recurring("rb-new", hourly_rate=Decimal("80.00"), start_date=date(2026, 1, 1))

        groups = group_recurring_slots([new, old], rate_table)

        assert len(groups) == 1
        group = groups[0]
        assert group.member_slot_ids == ["rb-old", "rb-new"]
        assert group.hourly_rate == Decimal("80.00")
        assert group.amount_per_session == Decimal("120.00")
        assert group.duration == Decimal("1.50")
        assert group.start_date == date(2025, 6, 1)
        assert group.end_date is None

    def test_end_date_is_latest_when_all_members_end(self, rate_table):
        rows = [
            make_recurring("a", start_date=date(2025, 1, 1), end_date=date(2025, 6, 30)),
            make_recurring("b", start_date=date(2025, 7, 1), end_date=date(2025, 12, 31)),
        ]

        groups = group_recurring_slots(rows, rate_table)

        assert groups[0].end_date == date(2025, 12, 31)

    def test_active_when_any_member_is_active(self, rate_table):
        rows = [
            make_recurring("a", is_active=False, start_date=date(2025, 1, 1)),
            make_recurring("b", is_active=True, start_date=date(2026, 1, 1)),
        ]

        assert group_recurring_slots(rows, rate_table)[0].is_active is True

    def test_different_court_or_time_is_a_separate_group(self, rate_table):
        rows = [
            make_recurring("a"),
            make_recurring("b", court_id=2),
            make_recurring("c", start_time="11:30", end_time="13:00"),
        ]

        assert len(group_recurring_slots(rows, rate_table)) == 3

    def test_guest_slots_group_by_guest_name(self, rate_table):
        rows = [
            make_recurring("a", customer_id=None, guest_name="Walk-in Club"),
            make_recurring("b", customer_id=None, guest_name="Walk-in Club", start_date=date(2026, 2, 1)),
            make_recurring("c", customer_id=None, guest_name="Other Club"),
        ]

        groups = group_recurring_slots(rows, rate_table)

        assert sorted(len(g.member_slot_ids) for g in groups) == [1, 2]

    def test_rate_table_price_without_override(self, rate_table):
        rows = [make_recurring("a", hourly_rate=None, start_time="17:00", end_time="19:00")]

        assert group_recurring_slots(rows, rate_table)[0].amount_per_session == Decimal("33.00")

    def test_groups_ordered_by_day_of_week(self, rate_table):
        rows = [make_recurring("wed", day_of_week=3), make_recurring("sun", day_of_week=0)]

        groups = group_recurring_slots(rows, rate_table)

        assert [g.member_slot_ids[0] for g in groups] == ["sun", "wed"]


class TestDeriveGroupStatus:
    def test_all_paid(self):
        assert derive_group_status([DisplayStatus.PAID, DisplayStatus.PAID]) == DisplayStatus.PAID

    def test_some_paid_is_partial(self):
        assert derive_group_status([DisplayStatus.PAID, DisplayStatus.OVERDUE]) == DisplayStatus.PARTIAL

    def test_none_paid_with_overdue(self):
        assert derive_group_status([DisplayStatus.UNPAID, DisplayStatus.OVERDUE]) == DisplayStatus.OVERDUE

    def test_none_paid(self):
        assert derive_group_status([DisplayStatus.UNPAID]) == DisplayStatus.UNPAID

    def test_empty(self):
        assert derive_group_status([]) == DisplayStatus.UNPAID

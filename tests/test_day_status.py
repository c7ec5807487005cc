"""
Unit tests for calendar day status and single-property calendars.
"""
import pytest
from datetime import date

from booking_dashboard.calendar.day_status import (
    CalendarDayResolver, filter_calendar_reservations, split_property_reservations
)
from booking_dashboard.utils.models import Property, PropertyType, Reservation


PARENT = Property(id="parent", name="Villa", type=PropertyType.PARENT)
CHILD_A = Property(id="child-a", name="Villa A", type=PropertyType.CHILD, parent_id="parent")
CHILD_B = Property(id="child-b", name="Villa B", type=PropertyType.CHILD, parent_id="parent")
STANDALONE = Property(id="solo", name="Cabin")

DAY = date(2024, 1, 10)


def _reservation(res_id, property_id, start=date(2024, 1, 9), end=date(2024, 1, 11), **kwargs):
    return Reservation(id=res_id, property_id=property_id, start_date=start, end_date=end, **kwargs)


def test_filter_drops_bare_blocked_rows():
    real = _reservation("r1", "solo")
    bare = _reservation("r2", "solo", notes="Blocked")
    propagated = _reservation("r3", "solo", notes="Blocked", source_reservation_id="r9")
    explicit = _reservation("r4", "solo", notes="Blocked", is_blocking=True)

    kept = filter_calendar_reservations([real, bare, propagated, explicit])

    assert kept == [real, propagated, explicit]


class TestCalendarDayResolver:

    @pytest.fixture
    def properties(self):
        return [PARENT, CHILD_A, CHILD_B, STANDALONE]

    def test_direct_reservation(self, properties):
        r = _reservation("r1", "solo")
        resolver = CalendarDayResolver([r], properties)

        status = resolver.day_reservation_status(STANDALONE, DAY)

        assert status.has_reservation is True
        assert status.is_indirect is False
        assert status.reservations == [r]

    def test_check_out_day_counts_as_occupied(self, properties):
        r = _reservation("r1", "solo", end=DAY)
        resolver = CalendarDayResolver([r], properties)

        assert resolver.day_reservation_status(STANDALONE, DAY).has_reservation is True

    def test_free_day(self, properties):
        r = _reservation("r1", "solo", start=date(2024, 1, 12), end=date(2024, 1, 14))
        resolver = CalendarDayResolver([r], properties)

        status = resolver.day_reservation_status(STANDALONE, DAY)

        assert status.has_reservation is False
        assert status.reservations == []

    def test_child_reservation_shows_on_parent(self, properties):
        r = _reservation("r1", "child-a")
        resolver = CalendarDayResolver([r], properties)

        status = resolver.day_reservation_status(PARENT, DAY)

        assert status.has_reservation is True
        assert status.is_indirect is True
        assert status.reservations == [r]

    def test_parent_reservation_shows_on_child(self, properties):
        r = _reservation("r1", "parent")
        resolver = CalendarDayResolver([r], properties)

        status = resolver.day_reservation_status(CHILD_B, DAY)

        assert status.is_indirect is True
        assert status.reservations == [r]

    def test_siblings_do_not_block_each_other(self, properties):
        r = _reservation("r1", "child-a")
        block = _reservation("b1", "parent", status="Blocked", notes="Blocked",
                             source_reservation_id="r1", is_blocking=True)
        resolver = CalendarDayResolver([r, block], properties)

        status = resolver.day_reservation_status(CHILD_B, DAY)

        assert status.has_reservation is False

    def test_direct_wins_over_indirect(self, properties):
        own = _reservation("r1", "parent")
        child = _reservation("r2", "child-a")
        resolver = CalendarDayResolver([own, child], properties)

        status = resolver.day_reservation_status(PARENT, DAY)

        assert status.is_indirect is False
        assert status.reservations == [own]

    def test_property_row_covers_each_day(self, properties):
        r = _reservation("r1", "solo", start=DAY, end=DAY)
        resolver = CalendarDayResolver([r], properties)

        row = resolver.property_row(STANDALONE, [date(2024, 1, 9), DAY, date(2024, 1, 11)])

        assert [s.has_reservation for s in row] == [False, True, False]

    def test_source_reservation_info(self, properties):
        r = _reservation("r1", "child-a")
        block = _reservation("b1", "parent", status="Blocked", source_reservation_id="r1")
        resolver = CalendarDayResolver([r, block], properties)

        assert resolver.source_reservation_info(block) == (CHILD_A, r)
        assert resolver.source_reservation_info(r) == (None, None)

    def test_blocking_property_names(self, properties):
        r = _reservation("r1", "child-a")
        block = _reservation("b1", "parent", status="Blocked", source_reservation_id="r1")
        own = _reservation("r2", "parent")
        resolver = CalendarDayResolver([r, block, own], properties)

        status = resolver.day_reservation_status(PARENT, DAY)

        assert resolver.blocking_property_names(status) == ["Villa A"]

    def test_blocking_property_names_empty_for_own_stays(self, properties):
        r = _reservation("r1", "solo")
        resolver = CalendarDayResolver([r], properties)

        status = resolver.day_reservation_status(STANDALONE, DAY)

        assert resolver.blocking_property_names(status) == []


class TestSplitPropertyReservations:

    def test_split(self):
        own = _reservation("r1", "parent")
        propagated = _reservation("b1", "parent", status="Blocked", notes="Blocked",
                                  source_reservation_id="r2")
        bare = _reservation("b2", "parent", notes="Blocked")
        relationship_flagged = _reservation("b3", "parent", is_relationship_block=True)
        related_real = _reservation("r2", "child-a")
        related_block = _reservation("b4", "child-a", status="Blocked", source_reservation_id="r1")
        unrelated = _reservation("r3", "solo")

        view = split_property_reservations(
            [own, propagated, bare, relationship_flagged, related_real, related_block, unrelated],
            "parent",
            {"child-a", "child-b"},
        )

        assert view.reservations == [own]
        assert view.propagated_blocks == [propagated]
        assert view.relationship_blocks == [related_real]

    def test_no_property_gives_empty_view(self):
        view = split_property_reservations([_reservation("r1", "solo")], None)

        assert view.reservations == []
        assert view.propagated_blocks == []
        assert view.relationship_blocks == []

"""
Unit tests for reservation grouping.
"""
import pytest
from datetime import date, datetime

from booking_dashboard.calendar.grouping import ReservationGrouper
from booking_dashboard.utils.models import Reservation, Platform


def _reservation(res_id, start, end, **kwargs):
    return Reservation(
        id=res_id,
        property_id="prop-1",
        start_date=start,
        end_date=end,
        platform=Platform.AIRBNB,
        **kwargs
    )


@pytest.fixture
def morning():
    return datetime(2024, 1, 10, 10, 0)


@pytest.fixture
def afternoon():
    return datetime(2024, 1, 10, 13, 5)


def group_reservations(reservations, now):
    return ReservationGrouper().group(reservations, now)


def _buckets_containing(groups, reservation):
    return [name for name, bucket in vars(groups).items() if reservation in bucket]


def test_check_in_today_is_not_active(morning):
    r = _reservation("r1", date(2024, 1, 10), date(2024, 1, 12))

    groups = group_reservations([r], morning)

    assert _buckets_containing(groups, r) == ["checking_in"]


def test_check_out_today_before_cutoff(morning):
    r = _reservation("r2", date(2024, 1, 5), date(2024, 1, 10))

    groups = group_reservations([r], morning)

    assert _buckets_containing(groups, r) == ["checking_out"]


def test_check_out_today_after_cutoff_lands_nowhere(afternoon):
    r = _reservation("r2", date(2024, 1, 5), date(2024, 1, 10))

    groups = group_reservations([r], afternoon)

    assert _buckets_containing(groups, r) == []


def test_check_in_tomorrow(morning):
    r = _reservation("r3", date(2024, 1, 11), date(2024, 1, 14))

    groups = group_reservations([r], morning)

    assert _buckets_containing(groups, r) == ["checking_in_tomorrow"]


def test_check_out_tomorrow_is_also_active(morning):
    r = _reservation("r4", date(2024, 1, 8), date(2024, 1, 11))

    groups = group_reservations([r], morning)

    assert _buckets_containing(groups, r) == ["checking_out_tomorrow", "active"]


def test_upcoming(morning):
    r = _reservation("r5", date(2024, 1, 15), date(2024, 1, 18))

    groups = group_reservations([r], morning)

    assert _buckets_containing(groups, r) == ["upcoming"]


def test_long_stay_is_only_active(morning):
    r = _reservation("r6", date(2024, 1, 1), date(2024, 1, 20))

    groups = group_reservations([r], morning)

    assert _buckets_containing(groups, r) == ["active"]


def test_past_reservation_is_ignored(morning):
    r = _reservation("r7", date(2024, 1, 1), date(2024, 1, 5))

    groups = group_reservations([r], morning)

    assert _buckets_containing(groups, r) == []


def test_same_day_stay_only_checks_in(morning):
    r = _reservation("r8", date(2024, 1, 10), date(2024, 1, 10))

    groups = group_reservations([r], morning)

    assert _buckets_containing(groups, r) == ["checking_in"]


def test_one_night_tomorrow_only_checks_in_tomorrow(morning):
    r = _reservation("r9", date(2024, 1, 11), date(2024, 1, 11))

    groups = group_reservations([r], morning)

    assert _buckets_containing(groups, r) == ["checking_in_tomorrow"]


@pytest.mark.parametrize("block_fields", [
    {"source_reservation_id": "src-1"},
    {"is_relationship_block": True},
    {"notes": "Blocked"},
])
def test_derived_blocks_are_never_active(morning, block_fields):
    r = _reservation("b1", date(2024, 1, 8), date(2024, 1, 12), **block_fields)

    groups = group_reservations([r], morning)

    assert groups.active == []


def test_derived_block_still_appears_in_check_in_bucket(morning):
    r = _reservation("b2", date(2024, 1, 10), date(2024, 1, 12), source_reservation_id="src-1")

    groups = group_reservations([r], morning)

    assert groups.checking_in == [r]


def test_input_order_preserved_within_bucket(morning):
    first = _reservation("a", date(2024, 1, 20), date(2024, 1, 22))
    second = _reservation("b", date(2024, 1, 15), date(2024, 1, 17))

    groups = group_reservations([first, second], morning)

    assert groups.upcoming == [first, second]


def test_custom_cutoff_hour(afternoon):
    r = _reservation("r2", date(2024, 1, 5), date(2024, 1, 10))

    groups = ReservationGrouper(checkout_cutoff_hour=14).group([r], afternoon)

    assert groups.checking_out == [r]


def test_empty_input_gives_empty_groups(morning):
    groups = group_reservations([], morning)

    assert all(bucket == [] for bucket in vars(groups).values())

"""
Unit tests for dashboard statistics.
"""
import asyncio
import pytest
from datetime import date
from unittest.mock import AsyncMock, Mock

from booking_dashboard.api.services.dashboard_service import DashboardService
from booking_dashboard.supabase_sync.supabase_client import SupabaseFetchError
from booking_dashboard.utils.models import Property, PropertyType, Reservation


TODAY = date(2024, 2, 10)

PROPERTIES = [
    Property(id="parent", name="Villa", type=PropertyType.PARENT),
    Property(id="child", name="Villa A", type=PropertyType.CHILD, parent_id="parent"),
    Property(id="solo", name="Cabin"),
]

RESERVATIONS = [
    Reservation(id="p1", property_id="parent", start_date=date(2024, 2, 1), end_date=date(2024, 2, 5)),
    Reservation(id="c1", property_id="child", start_date=date(2024, 2, 10), end_date=date(2024, 2, 12)),
    Reservation(id="b1", property_id="parent", start_date=date(2024, 2, 10), end_date=date(2024, 2, 12),
                status="Blocked", source_reservation_id="c1", is_blocking=True),
    Reservation(id="s1", property_id="solo", start_date=date(2024, 2, 28), end_date=date(2024, 3, 3)),
]


@pytest.fixture
def data_source():
    source = Mock()
    source.fetch_properties = AsyncMock(return_value=PROPERTIES)
    source.fetch_all_reservations = AsyncMock(return_value=RESERVATIONS)
    return source


@pytest.fixture
def service(data_source):
    return DashboardService(data_source, Mock())


def test_headline_counts(service):
    stats = asyncio.run(service.get_stats(TODAY))

    assert stats["total_properties"] == 3
    assert stats["active_reservations"] == 2
    assert stats["check_ins_today"] == 2
    assert stats["check_outs_today"] == 0


def test_occupancy_rates(service):
    stats = asyncio.run(service.get_stats(TODAY))
    rates = {row["id"]: row["occupancy_rate"] for row in stats["property_occupancy"]}

    # February 2024 has 29 days.
    assert rates["parent"] == 17.24
    assert rates["child"] == 27.59
    assert rates["solo"] == 6.9


def test_occupancy_rows_carry_property_fields(service):
    stats = asyncio.run(service.get_stats(TODAY))
    child = next(row for row in stats["property_occupancy"] if row["id"] == "child")

    assert child["type"] == "child"
    assert child["parent_id"] == "parent"


def test_fetch_failure_gives_empty_stats(service, data_source):
    data_source.fetch_all_reservations.side_effect = SupabaseFetchError("timeout")

    stats = asyncio.run(service.get_stats(TODAY))

    assert stats["total_properties"] == 0
    assert stats["property_occupancy"] == []
    service.logger.error.assert_called_once()

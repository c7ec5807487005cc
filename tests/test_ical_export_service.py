"""
Unit tests for the iCal export service.
"""
import pytest
from datetime import date, datetime, timezone
from unittest.mock import Mock

from booking_dashboard.api.services.ical_export_service import ICalExportService, ICalTokenError
from booking_dashboard.utils.models import Platform, Property, PropertyType, Reservation


VILLA = Property(id="parent", name="Villa, Sea View", type=PropertyType.PARENT)
LOCKED = Property(id="locked", name="Cabin", ical_token="secret")
NOW = datetime(2024, 2, 1, 8, 30, tzinfo=timezone.utc)


def _reservation(res_id, start, end, **kwargs):
    return Reservation(id=res_id, property_id="parent", start_date=start, end_date=end,
                       status="Reserved", platform=Platform.MANUAL, source="Manual", **kwargs)


@pytest.fixture
def supabase_client():
    client = Mock()
    client.get_property_by_id.side_effect = {"parent": VILLA, "locked": LOCKED}.get
    client.get_exportable_reservations.return_value = []
    return client


@pytest.fixture
def service(supabase_client):
    return ICalExportService(supabase_client, Mock())


def test_feed_has_one_event_per_reservation(service):
    feed = service.generate_feed(VILLA, [
        _reservation("m1", date(2024, 3, 1), date(2024, 3, 4), guest_name="Jane Roe"),
        _reservation("m2", date(2024, 3, 10), date(2024, 3, 12)),
    ], now=NOW)

    lines = feed.split("\r\n")
    assert lines[0] == "BEGIN:VCALENDAR"
    assert feed.endswith("END:VCALENDAR\r\n")
    assert "X-WR-CALNAME:Villa\\, Sea View" in lines
    assert lines.count("BEGIN:VEVENT") == 2
    assert "DTSTART;VALUE=DATE:20240301" in lines
    assert "DTEND;VALUE=DATE:20240304" in lines
    assert "DTSTAMP:20240201T083000Z" in lines
    assert "SUMMARY:Reservation - Jane Roe" in lines
    assert "SUMMARY:Reservation" in lines
    assert any(line.startswith("UID:reservation-m1@") for line in lines)


def test_same_day_reservation_ends_next_day(service):
    feed = service.generate_feed(VILLA, [_reservation("m1", date(2024, 3, 1), date(2024, 3, 1))], now=NOW)

    assert "DTEND;VALUE=DATE:20240302" in feed.split("\r\n")


def test_text_is_escaped(service):
    feed = service.generate_feed(VILLA, [
        _reservation("m1", date(2024, 3, 1), date(2024, 3, 2), guest_name="Roe; Jane", notes="Late arrival\nNo pets"),
    ], now=NOW)

    lines = feed.split("\r\n")
    assert "SUMMARY:Reservation - Roe\\; Jane" in lines
    assert "DESCRIPTION:Reservation ID: m1\\nLate arrival\\nNo pets" in lines


def test_get_feed_unknown_property(service, supabase_client):
    assert service.get_feed("missing") is None
    supabase_client.get_exportable_reservations.assert_not_called()


def test_get_feed_requires_matching_token(service, supabase_client):
    with pytest.raises(ICalTokenError):
        service.get_feed("locked", "wrong")
    with pytest.raises(ICalTokenError):
        service.get_feed("locked")

    supabase_client.get_exportable_reservations.assert_not_called()


def test_get_feed_with_token(service, supabase_client):
    feed = service.get_feed("locked", "secret")

    supabase_client.get_exportable_reservations.assert_called_once_with("locked")
    assert "X-WR-CALNAME:Cabin" in feed


def test_get_feed_without_token_on_open_property(service, supabase_client):
    supabase_client.get_exportable_reservations.return_value = [
        _reservation("m1", date(2024, 3, 1), date(2024, 3, 4)),
    ]

    feed = service.get_feed("parent")

    assert feed.count("BEGIN:VEVENT") == 1

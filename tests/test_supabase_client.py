"""
Unit tests for the Supabase client module.
"""
import pytest
from unittest.mock import Mock
from datetime import date

from booking_dashboard.supabase_sync.supabase_client import SupabaseClient, SupabaseFetchError
from booking_dashboard.utils.models import Platform, PropertyType


@pytest.fixture
def supabase_client():
    client = SupabaseClient()
    client.initialized = True
    client.client = Mock()
    return client


def _mock_select_return(mock_client, rows):
    table = Mock()
    mock_client.table.return_value = table
    for method in ("select", "eq", "neq", "gt", "gte", "lt", "lte", "ilike", "limit", "order",
                   "insert", "update", "delete"):
        getattr(table, method).return_value = table

    res = Mock()
    res.data = rows
    table.execute.return_value = res
    return table


RESERVATION_ROW = {
    "id": "res-1",
    "property_id": "prop-1",
    "start_date": "2024-02-10",
    "end_date": "2024-02-14T00:00:00+00:00",
    "platform": "Airbnb",
    "guest_name": "John Doe",
    "status": "confirmed",
}


def test_get_reservations_for_month_uses_overlap_bounds(supabase_client):
    table = _mock_select_return(supabase_client.client, [RESERVATION_ROW])

    reservations = supabase_client.get_reservations_for_month(2, 2024)

    supabase_client.client.table.assert_called_with("reservations")
    table.lte.assert_called_once_with("start_date", "2024-02-29")
    table.gte.assert_called_once_with("end_date", "2024-02-01")
    assert len(reservations) == 1
    assert reservations[0].end_date == date(2024, 2, 14)
    assert reservations[0].platform == Platform.AIRBNB


def test_get_reservations_applies_filters(supabase_client):
    table = _mock_select_return(supabase_client.client, [])

    supabase_client.get_reservations(
        property_id="prop-1",
        platform=Platform.VRBO,
        start_date=date(2024, 1, 1),
        search_text="  doe ",
    )

    table.eq.assert_any_call("property_id", "prop-1")
    table.eq.assert_any_call("platform", "Vrbo")
    table.gte.assert_called_once_with("start_date", "2024-01-01")
    table.ilike.assert_called_once_with("guest_name", "%doe%")
    table.lte.assert_not_called()


def test_get_property_by_id(supabase_client):
    _mock_select_return(supabase_client.client, [
        {"id": "child-1", "name": "Villa A", "type": "child", "parent_id": "parent-1"}
    ])

    prop = supabase_client.get_property_by_id("child-1")

    assert prop.type == PropertyType.CHILD
    assert prop.parent_id == "parent-1"


def test_get_property_by_id_not_found(supabase_client):
    _mock_select_return(supabase_client.client, [])

    assert supabase_client.get_property_by_id("missing") is None


def test_get_child_property_ids(supabase_client):
    table = _mock_select_return(supabase_client.client, [{"id": "child-1"}, {"id": "child-2"}])

    ids = supabase_client.get_child_property_ids("parent-1")

    table.select.assert_called_once_with("id")
    table.eq.assert_called_once_with("parent_id", "parent-1")
    assert ids == ["child-1", "child-2"]


def test_get_ical_links(supabase_client):
    _mock_select_return(supabase_client.client, [
        {"id": "link-1", "property_id": "prop-1", "platform": "Booking", "url": "https://example.com/a.ics"}
    ])

    links = supabase_client.get_ical_links("prop-1")

    assert links[0].platform == Platform.BOOKING
    assert links[0].url == "https://example.com/a.ics"


def test_query_error_raises_fetch_error(supabase_client):
    table = _mock_select_return(supabase_client.client, [])
    table.execute.side_effect = Exception("connection refused")

    with pytest.raises(SupabaseFetchError, match="connection refused"):
        supabase_client.get_reservations_for_month(1, 2024)


def test_missing_configuration_raises_fetch_error(mocker):
    config = mocker.patch("booking_dashboard.supabase_sync.supabase_client.supabase_config")
    config.url = ""
    config.get_auth_key.return_value = ""

    client = SupabaseClient()
    assert client.initialize() is False
    with pytest.raises(SupabaseFetchError):
        client.get_properties()


def test_initialize_creates_client(mocker):
    config = mocker.patch("booking_dashboard.supabase_sync.supabase_client.supabase_config")
    config.url = "https://project.supabase.co"
    config.get_auth_key.return_value = "service-key"
    create = mocker.patch("booking_dashboard.supabase_sync.supabase_client.create_client")

    client = SupabaseClient()
    assert client.initialize() is True

    create.assert_called_once_with("https://project.supabase.co", "service-key")
    assert client.client is create.return_value


def test_invoke_function_decodes_json_bytes(supabase_client):
    supabase_client.client.functions.invoke.return_value = b'{"success": true, "results": {"total": 2}}'

    response = supabase_client.invoke_function("sync-ical", {"url": "u"})

    assert response == {"success": True, "results": {"total": 2}}
    supabase_client.client.functions.invoke.assert_called_once_with(
        "sync-ical", invoke_options={"body": {"url": "u"}, "responseType": "json"}
    )


def test_invoke_function_passes_dicts_through(supabase_client):
    supabase_client.client.functions.invoke.return_value = {"success": False, "error": "bad feed"}

    assert supabase_client.invoke_function("sync-ical", {}) == {"success": False, "error": "bad feed"}


def test_has_overlapping_reservation_excludes_itself(supabase_client):
    table = _mock_select_return(supabase_client.client, [{"id": "res-2"}])

    taken = supabase_client.has_overlapping_reservation(
        "prop-1", date(2024, 2, 10), date(2024, 2, 14), exclude_reservation_id="res-1"
    )

    assert taken is True
    table.select.assert_called_once_with("id")
    table.lt.assert_called_once_with("start_date", "2024-02-14")
    table.gt.assert_called_once_with("end_date", "2024-02-10")
    table.neq.assert_called_once_with("id", "res-1")


def test_has_overlapping_reservation_free(supabase_client):
    table = _mock_select_return(supabase_client.client, [])

    assert supabase_client.has_overlapping_reservation("prop-1", date(2024, 2, 10), date(2024, 2, 14)) is False
    table.neq.assert_not_called()


def test_get_exportable_reservations_only_manual(supabase_client):
    table = _mock_select_return(supabase_client.client, [RESERVATION_ROW])

    reservations = supabase_client.get_exportable_reservations("prop-1")

    table.eq.assert_any_call("source", "Manual")
    table.neq.assert_called_once_with("status", "Blocked")
    assert [r.id for r in reservations] == ["res-1"]


def test_insert_reservations_returns_stored_rows(supabase_client):
    table = _mock_select_return(supabase_client.client, [RESERVATION_ROW])

    inserted = supabase_client.insert_reservations([{"id": "res-1"}])

    table.insert.assert_called_once_with([{"id": "res-1"}])
    assert inserted[0].guest_name == "John Doe"


def test_update_manual_reservation_missing_row(supabase_client):
    table = _mock_select_return(supabase_client.client, [])

    assert supabase_client.update_manual_reservation("res-9", {"notes": "late"}) is None
    table.update.assert_called_once_with({"notes": "late"})
    table.eq.assert_any_call("source", "Manual")


def test_delete_manual_reservation(supabase_client):
    _mock_select_return(supabase_client.client, [RESERVATION_ROW])

    assert supabase_client.delete_manual_reservation("res-1") is True


def test_delete_propagated_blocks_counts_rows(supabase_client):
    table = _mock_select_return(supabase_client.client, [{"id": "b1"}, {"id": "b2"}])

    assert supabase_client.delete_propagated_blocks("res-1") == 2
    table.eq.assert_called_once_with("source_reservation_id", "res-1")


def test_write_error_is_raised(supabase_client):
    supabase_client.client.table.side_effect = Exception("permission denied")

    with pytest.raises(SupabaseFetchError):
        supabase_client.insert_reservations([{"id": "res-1"}])

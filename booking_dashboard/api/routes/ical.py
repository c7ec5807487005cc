"""
iCal synchronisation and export endpoints.

The handlers are plain functions: the sync and export services make blocking
Supabase calls, so FastAPI runs them in its threadpool.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from ..dependencies import get_ical_export_service, get_ical_sync_service
from ..models import (
    PropertySyncResponse, PropertySyncSummary, SyncICalRequest, SyncICalResponse, SyncResultModel
)
from ..services.ical_export_service import ICalExportService, ICalTokenError
from ..services.ical_sync_service import ICalSyncService
from ...supabase_sync.supabase_client import SupabaseFetchError
from ...utils.models import Platform

router = APIRouter(prefix="/ical", tags=["iCal"])


@router.post(
    "/sync",
    response_model=SyncICalResponse,
    summary="Sync one iCal feed",
    description="Import reservations from an Airbnb, Booking or Vrbo iCal feed. Failures are reported in the body, not as HTTP errors.",
)
def sync_ical(
    request: SyncICalRequest,
    sync_service: ICalSyncService = Depends(get_ical_sync_service),
):
    result = sync_service.sync_link(request.url, request.property_id, Platform(request.platform.value))
    if result.success:
        message = (f"Found {result.results.total} events: {result.results.added} added, "
                   f"{result.results.updated} updated")
    else:
        message = result.error or "Sync failed"
    return {"success": result.success, "message": message, "data": SyncResultModel.from_domain(result)}


@router.post(
    "/sync/property/{property_id}",
    response_model=PropertySyncResponse,
    summary="Sync every iCal feed of a property",
)
def sync_property(
    property_id: str,
    sync_service: ICalSyncService = Depends(get_ical_sync_service),
):
    summary = sync_service.sync_property(property_id)
    success = summary["failed"] == 0 and not summary.get("error")
    if summary.get("error"):
        message = summary["error"]
    elif success:
        message = f"{summary['synced']} calendars synced"
    else:
        message = f"{summary['synced']} calendars synced, {summary['failed']} failed"

    return {
        "success": success,
        "message": message,
        "data": PropertySyncSummary(
            synced=summary["synced"],
            failed=summary["failed"],
            results=[SyncResultModel.from_domain(r) for r in summary["results"]],
            error=summary.get("error"),
        ),
    }


@router.get(
    "/property/{property_id}.ics",
    summary="Export a property's iCal feed",
    description="Manual reservations of the property as an iCal calendar, for import into booking platforms",
    response_class=Response,
    responses={200: {"content": {"text/calendar": {}}}, 403: {"description": "Invalid token"},
               404: {"description": "Property not found"}},
)
def export_ical_feed(
    property_id: str,
    token: Optional[str] = Query(None, description="Feed token of the property"),
    export_service: ICalExportService = Depends(get_ical_export_service),
):
    try:
        feed = export_service.get_feed(property_id, token)
    except ICalTokenError:
        raise HTTPException(status_code=403, detail="Invalid token")
    except SupabaseFetchError as e:
        raise HTTPException(status_code=500, detail={"message": "Failed to build iCal feed", "details": {"error": str(e)}})

    if feed is None:
        raise HTTPException(status_code=404, detail="Property not found")

    return Response(
        content=feed,
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{property_id}.ics"'},
    )

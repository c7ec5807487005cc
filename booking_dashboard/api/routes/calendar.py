"""
Multi-property calendar endpoints.
"""
from datetime import date, timedelta
from typing import Optional
from fastapi import APIRouter, Depends, Query

from ..dependencies import get_calendar_service
from ..models import (
    CalendarWindow, CalendarWindowResponse, DayStatusModel, ErrorResponse,
    MultiCalendarResponse, PageDirection, PropertyRowModel, ReservationListResponse,
    ReservationModel
)
from ..services.calendar_service import CalendarService


router = APIRouter(prefix="/calendar", tags=["calendar"])


def _window_model(window) -> CalendarWindow:
    fetch_start, fetch_end = window.padded_range()
    page = timedelta(days=window.length)
    return CalendarWindow(
        start_date=window.anchor_start,
        end_date=window.end_date,
        days=window.visible_days(),
        previous_start=window.anchor_start - page,
        next_start=window.anchor_start + page,
        fetch_start=fetch_start,
        fetch_end=fetch_end,
    )


@router.get(
    "/window",
    response_model=CalendarWindowResponse,
    summary="Get the visible calendar window",
    description="Visible days starting at `start` (default: four days before today), optionally paged one window forward or backward",
)
async def get_window(
    start: Optional[date] = Query(None, description="Anchor of the currently displayed window"),
    direction: Optional[PageDirection] = Query(None, description="Page forward or backward"),
    calendar_service: CalendarService = Depends(get_calendar_service),
):
    window = calendar_service.get_window(start, direction.value if direction else None)
    return {
        "success": True,
        "message": f"Calendar window {window.anchor_start} to {window.end_date}",
        "data": _window_model(window),
    }


@router.get(
    "/reservations",
    response_model=ReservationListResponse,
    summary="Get reservations for the calendar window",
    responses={500: {"description": "Internal server error", "model": ErrorResponse}},
)
async def get_window_reservations(
    start: Optional[date] = Query(None, description="Anchor of the displayed window"),
    calendar_service: CalendarService = Depends(get_calendar_service),
):
    window = calendar_service.get_window(start)
    reservations = await calendar_service.get_window_reservations(window)
    return {
        "success": True,
        "message": f"Found {len(reservations)} reservations",
        "data": [ReservationModel.from_domain(r) for r in reservations],
    }


@router.get(
    "/properties",
    response_model=MultiCalendarResponse,
    summary="Get per-property occupancy for the calendar window",
)
async def get_multi_calendar(
    start: Optional[date] = Query(None, description="Anchor of the displayed window"),
    calendar_service: CalendarService = Depends(get_calendar_service),
):
    window = calendar_service.get_window(start)
    calendar_data = await calendar_service.get_multi_calendar(window)

    rows = []
    for row in calendar_data["rows"]:
        prop = row["property"]
        rows.append(PropertyRowModel(
            property_id=prop.id,
            name=prop.name,
            type=prop.type.value,
            parent_id=prop.parent_id,
            days=[
                DayStatusModel(
                    day=day,
                    has_reservation=status.has_reservation,
                    is_indirect=status.is_indirect,
                    reservation_ids=[r.id for r in status.reservations],
                    blocked_by=blocked_by,
                )
                for day, status, blocked_by in zip(calendar_data["days"], row["days"], row["blocked_by"])
            ],
        ))

    return {"success": True, "message": f"{len(rows)} properties", "data": rows}

"""
Single-property calendar endpoints.
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query

from ..dependencies import get_calendar_service
from ..models import (
    PropertyCalendarModel, PropertyCalendarResponse, RelatedProperties, RelatedPropertiesResponse
)
from ..services.calendar_service import CalendarService


router = APIRouter(prefix="/properties", tags=["properties"])


@router.get(
    "/{property_id}/related",
    response_model=RelatedPropertiesResponse,
    summary="Get related properties",
    description="Children of a parent property, or the parent of a child property",
)
async def get_related_properties(
    property_id: str,
    calendar_service: CalendarService = Depends(get_calendar_service),
):
    related = await calendar_service.get_related_property_ids(property_id)
    return {
        "success": True,
        "message": f"{len(related)} related properties",
        "data": RelatedProperties(property_id=property_id, related_property_ids=related),
    }


@router.get(
    "/{property_id}/calendar",
    response_model=PropertyCalendarResponse,
    summary="Get a property's monthly calendar",
    description="The property's own reservations, blocks propagated onto it and reservations of related properties",
)
async def get_property_calendar(
    property_id: str,
    month: Optional[int] = Query(None, ge=1, le=12, description="Month (defaults to the current month)"),
    year: Optional[int] = Query(None, ge=1970, le=2100, description="Year (defaults to the current year)"),
    calendar_service: CalendarService = Depends(get_calendar_service),
):
    today = date.today()
    month = month or today.month
    year = year or today.year

    view = await calendar_service.get_property_calendar(property_id, month, year)
    return {
        "success": True,
        "message": f"Calendar for {month}/{year}",
        "data": PropertyCalendarModel.from_domain(view),
    }

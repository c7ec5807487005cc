"""
Reservation endpoints: grouping, filtered listing and manual reservations.
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from ..dependencies import get_calendar_service, get_reservation_service
from ..models import (
    CreateReservationRequest, DeletedReservation, DeleteReservationResponse, ErrorResponse,
    ReservationGroupsModel, ReservationGroupsResponse, ReservationListResponse, ReservationModel,
    ReservationMutation, ReservationMutationResponse, UpdateReservationRequest
)
from ..services.calendar_service import CalendarService
from ..services.reservation_service import (
    ReservationConflictError, ReservationNotFoundError, ReservationService
)
from ...supabase_sync.supabase_client import SupabaseFetchError
from ...utils.models import Platform


router = APIRouter(prefix="/reservations", tags=["reservations"])


def _mutation(reservation, blocks) -> ReservationMutation:
    return ReservationMutation(
        reservation=ReservationModel.from_domain(reservation),
        blocks=[ReservationModel.from_domain(b) for b in blocks],
    )


@router.get(
    "/groups",
    response_model=ReservationGroupsResponse,
    summary="Get reservations grouped for today",
    description="Check-ins and check-outs for today and tomorrow, upcoming arrivals and stays in progress",
    responses={500: {"description": "Internal server error", "model": ErrorResponse}},
)
async def get_reservation_groups(
    calendar_service: CalendarService = Depends(get_calendar_service),
):
    groups = await calendar_service.get_reservation_groups()
    return {
        "success": True,
        "message": "Reservation groups",
        "data": ReservationGroupsModel.from_domain(groups),
    }


@router.get(
    "",
    response_model=ReservationListResponse,
    summary="List reservations",
    responses={500: {"description": "Internal server error", "model": ErrorResponse}},
)
def list_reservations(
    property_id: Optional[str] = Query(None, description="Only this property"),
    platform: Optional[Platform] = Query(None, description="Only this platform"),
    start_date: Optional[date] = Query(None, description="Check-in on or after"),
    end_date: Optional[date] = Query(None, description="Check-out on or before"),
    search: Optional[str] = Query(None, description="Guest name contains"),
    reservation_service: ReservationService = Depends(get_reservation_service),
):
    try:
        reservations = reservation_service.list_reservations(
            property_id=property_id,
            platform=platform,
            start_date=start_date,
            end_date=end_date,
            search_text=search,
        )
    except SupabaseFetchError as e:
        raise HTTPException(status_code=500, detail={"message": "Failed to fetch reservations", "details": {"error": str(e)}})

    return {
        "success": True,
        "message": f"Found {len(reservations)} reservations",
        "data": [ReservationModel.from_domain(r) for r in reservations],
    }


@router.post(
    "",
    response_model=ReservationMutationResponse,
    status_code=201,
    summary="Create a manual reservation",
    description="Stores the reservation and blocks the related parent or child properties for the same dates",
    responses={409: {"description": "Dates already taken"}, 500: {"model": ErrorResponse}},
)
def create_reservation(
    request: CreateReservationRequest,
    reservation_service: ReservationService = Depends(get_reservation_service),
):
    try:
        reservation, blocks = reservation_service.create_manual_reservation(**request.model_dump())
    except ReservationConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SupabaseFetchError as e:
        raise HTTPException(status_code=500, detail={"message": "Failed to create reservation", "details": {"error": str(e)}})

    return {
        "success": True,
        "message": f"Reservation created, {len(blocks)} related properties blocked",
        "data": _mutation(reservation, blocks),
    }


@router.patch(
    "/{reservation_id}",
    response_model=ReservationMutationResponse,
    summary="Update a manual reservation",
    responses={404: {"description": "Reservation not found"}, 409: {"description": "Dates already taken"}},
)
def update_reservation(
    reservation_id: str,
    request: UpdateReservationRequest,
    reservation_service: ReservationService = Depends(get_reservation_service),
):
    updates = {
        key: value for key, value in request.model_dump(exclude_unset=True).items()
        if value is not None or key == "notes"
    }
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        reservation, blocks = reservation_service.update_manual_reservation(reservation_id, updates)
    except ReservationNotFoundError:
        raise HTTPException(status_code=404, detail=f"Manual reservation {reservation_id} not found")
    except ReservationConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SupabaseFetchError as e:
        raise HTTPException(status_code=500, detail={"message": "Failed to update reservation", "details": {"error": str(e)}})

    return {"success": True, "message": "Reservation updated", "data": _mutation(reservation, blocks)}


@router.delete(
    "/{reservation_id}",
    response_model=DeleteReservationResponse,
    summary="Delete a manual reservation",
    description="Deletes the reservation together with the blocks it propagated",
    responses={404: {"description": "Reservation not found"}},
)
def delete_reservation(
    reservation_id: str,
    reservation_service: ReservationService = Depends(get_reservation_service),
):
    try:
        removed = reservation_service.delete_manual_reservation(reservation_id)
    except ReservationNotFoundError:
        raise HTTPException(status_code=404, detail=f"Manual reservation {reservation_id} not found")
    except SupabaseFetchError as e:
        raise HTTPException(status_code=500, detail={"message": "Failed to delete reservation", "details": {"error": str(e)}})

    return {
        "success": True,
        "message": "Reservation deleted",
        "data": DeletedReservation(reservation_id=reservation_id, blocks_removed=removed),
    }

"""
Immutable data models for API responses and requests.
"""
from typing import Optional, Dict, Any, List
from datetime import datetime, date
from pydantic import BaseModel, Field, ConfigDict, field_serializer, model_validator
from enum import Enum

from ..utils.models import Reservation, ReservationGroups, PropertyCalendarView, ICalSyncResult


class PlatformName(str, Enum):
    """Platforms an iCal feed can be synced from."""
    AIRBNB = "airbnb"
    BOOKING = "booking"
    VRBO = "vrbo"


class PageDirection(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


class APIResponse(BaseModel):
    """Base API response model."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool = Field(..., description="Whether the request was successful")
    message: str = Field(..., description="Response message")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Response timestamp")

    @field_serializer('timestamp')
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()


class ErrorResponse(APIResponse):
    """Error response model."""
    error_code: Optional[str] = Field(None, description="Error code for debugging")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")


class HealthResponse(BaseModel):
    """Health check response model."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Health check timestamp")
    version: str = Field(..., description="API version")
    dependencies: Dict[str, str] = Field(default_factory=dict, description="Dependency statuses")

    @field_serializer('timestamp')
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()


class ReservationModel(BaseModel):
    """Reservation as exposed to the dashboard."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    property_id: str
    start_date: date
    end_date: date
    status: Optional[str] = None
    platform: str
    guest_name: Optional[str] = None
    guest_count: Optional[int] = None
    notes: Optional[str] = None
    is_blocking: bool = False
    is_relationship_block: bool = False
    source_reservation_id: Optional[str] = None

    @classmethod
    def from_domain(cls, reservation: Reservation) -> "ReservationModel":
        return cls(
            id=reservation.id,
            property_id=reservation.property_id,
            start_date=reservation.start_date,
            end_date=reservation.end_date,
            status=reservation.status,
            platform=reservation.platform.value,
            guest_name=reservation.guest_name,
            guest_count=reservation.guest_count,
            notes=reservation.notes,
            is_blocking=reservation.is_blocking,
            is_relationship_block=reservation.is_relationship_block,
            source_reservation_id=reservation.source_reservation_id,
        )


def _models(reservations: List[Reservation]) -> List[ReservationModel]:
    return [ReservationModel.from_domain(r) for r in reservations]


class CalendarWindow(BaseModel):
    """Visible days of the multi-property calendar and its neighbours."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    start_date: date = Field(..., description="First visible day")
    end_date: date = Field(..., description="Last visible day")
    days: List[date] = Field(..., description="Visible days in order")
    previous_start: date = Field(..., description="Anchor of the previous page")
    next_start: date = Field(..., description="Anchor of the next page")
    fetch_start: date = Field(..., description="First day of the padded fetch range")
    fetch_end: date = Field(..., description="Last day of the padded fetch range")


class CalendarWindowResponse(APIResponse):
    data: CalendarWindow = Field(..., description="Calendar window")


class DayStatusModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    day: date
    has_reservation: bool
    is_indirect: bool
    reservation_ids: List[str] = Field(default_factory=list)
    blocked_by: List[str] = Field(default_factory=list, description="Properties whose reservations block this day")


class PropertyRowModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    property_id: str
    name: str
    type: str
    parent_id: Optional[str] = None
    days: List[DayStatusModel] = Field(default_factory=list)


class MultiCalendarResponse(APIResponse):
    data: List[PropertyRowModel] = Field(..., description="Per-property day statuses")


class ReservationListResponse(APIResponse):
    data: List[ReservationModel] = Field(..., description="Reservations")


class ReservationGroupsModel(BaseModel):
    """Reservations bucketed relative to now."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    checking_in: List[ReservationModel] = Field(default_factory=list)
    checking_out: List[ReservationModel] = Field(default_factory=list)
    checking_in_tomorrow: List[ReservationModel] = Field(default_factory=list)
    checking_out_tomorrow: List[ReservationModel] = Field(default_factory=list)
    upcoming: List[ReservationModel] = Field(default_factory=list)
    active: List[ReservationModel] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, groups: ReservationGroups) -> "ReservationGroupsModel":
        return cls(**{name: _models(bucket) for name, bucket in vars(groups).items()})


class ReservationGroupsResponse(APIResponse):
    data: ReservationGroupsModel = Field(..., description="Reservation groups")


class RelatedProperties(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    property_id: str
    related_property_ids: List[str] = Field(default_factory=list)


class RelatedPropertiesResponse(APIResponse):
    data: RelatedProperties


class PropertyCalendarModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    reservations: List[ReservationModel] = Field(default_factory=list)
    propagated_blocks: List[ReservationModel] = Field(default_factory=list)
    relationship_blocks: List[ReservationModel] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, view: PropertyCalendarView) -> "PropertyCalendarModel":
        return cls(
            reservations=_models(view.reservations),
            propagated_blocks=_models(view.propagated_blocks),
            relationship_blocks=_models(view.relationship_blocks),
        )


class PropertyCalendarResponse(APIResponse):
    data: PropertyCalendarModel


class PropertyOccupancy(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    type: str
    parent_id: Optional[str] = None
    occupancy_rate: float = Field(..., ge=0, le=100, description="Occupied share of the current month (%)")


class DashboardStats(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    total_properties: int = Field(..., ge=0)
    active_reservations: int = Field(..., ge=0)
    check_ins_today: int = Field(..., ge=0)
    check_outs_today: int = Field(..., ge=0)
    property_occupancy: List[PropertyOccupancy] = Field(default_factory=list)


class DashboardResponse(APIResponse):
    data: DashboardStats


class SyncICalRequest(BaseModel):
    """Request model for syncing one iCal feed."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = Field(..., min_length=1, description="iCal feed URL")
    property_id: str = Field(..., min_length=1, description="Property receiving the reservations")
    platform: PlatformName = Field(..., description="Platform the feed comes from")


class SyncCountsModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    total: int = 0
    added: int = 0
    updated: int = 0
    skipped: int = 0


class SyncResultModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool
    results: Optional[SyncCountsModel] = None
    error: Optional[str] = None
    property_id: Optional[str] = None
    platform: Optional[str] = None

    @classmethod
    def from_domain(cls, result: ICalSyncResult) -> "SyncResultModel":
        return cls(**result.to_dict())


class SyncICalResponse(APIResponse):
    data: SyncResultModel


class PropertySyncSummary(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    synced: int = 0
    failed: int = 0
    results: List[SyncResultModel] = Field(default_factory=list)
    error: Optional[str] = None


class PropertySyncResponse(APIResponse):
    data: PropertySyncSummary


class CreateReservationRequest(BaseModel):
    """Request model for a manual reservation."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    property_id: str = Field(..., min_length=1, description="Property being reserved")
    start_date: date = Field(..., description="Check-in day")
    end_date: date = Field(..., description="Check-out day")
    guest_name: str = Field(..., min_length=1, description="Guest name")
    guest_count: Optional[int] = Field(None, ge=1, description="Number of guests")
    status: str = Field("Reserved", min_length=1, description="Reservation status")
    notes: Optional[str] = Field(None, description="Free-form notes")

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class UpdateReservationRequest(BaseModel):
    """Partial update of a manual reservation; omitted fields stay as they are."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    property_id: Optional[str] = Field(None, min_length=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    guest_name: Optional[str] = Field(None, min_length=1)
    guest_count: Optional[int] = Field(None, ge=1)
    status: Optional[str] = Field(None, min_length=1)
    notes: Optional[str] = None


class ReservationMutation(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    reservation: ReservationModel
    blocks: List[ReservationModel] = Field(default_factory=list, description="Blocks written on related properties")


class ReservationMutationResponse(APIResponse):
    data: ReservationMutation


class DeletedReservation(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    reservation_id: str
    blocks_removed: int = Field(0, ge=0)


class DeleteReservationResponse(APIResponse):
    data: DeletedReservation

"""
Data models for the Rental Calendar Dashboard.
"""
from dataclasses import dataclass, field
from datetime import datetime, date
from typing import Optional, Dict, Any, List
from enum import Enum

from config.settings import app_config

BLOCKED = app_config.blocked_marker
MANUAL_SOURCE = "Manual"


class Platform(Enum):
    """Booking platforms a reservation can originate from."""
    AIRBNB = "airbnb"
    BOOKING = "booking"
    VRBO = "vrbo"
    MANUAL = "manual"
    OTHER = "other"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "Platform":
        """Map a stored platform label ("Airbnb", "VRBO", ...) to the enum."""
        if not value:
            return cls.OTHER
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER


class PropertyType(Enum):
    """Position of a property in a parent/child relationship."""
    STANDALONE = "standalone"
    PARENT = "parent"
    CHILD = "child"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "PropertyType":
        if not value:
            return cls.STANDALONE
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.STANDALONE


def parse_day(value: Any) -> Optional[date]:
    """Reduce a stored date/datetime value to a calendar day."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace('Z', '+00:00'))


@dataclass
class Property:
    """A rentable unit, optionally part of a parent/child relationship."""
    id: str
    name: str = ""
    type: PropertyType = PropertyType.STANDALONE
    parent_id: Optional[str] = None
    address: Optional[str] = None
    internal_code: Optional[str] = None
    capacity: Optional[int] = None
    ical_token: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not isinstance(self.type, PropertyType):
            self.type = PropertyType.from_value(self.type)

    @property
    def is_parent(self) -> bool:
        return self.type == PropertyType.PARENT

    @property
    def is_child(self) -> bool:
        return self.type == PropertyType.CHILD

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Property':
        """Create a Property from a Supabase row."""
        return cls(
            id=str(data['id']),
            name=data.get('name') or "",
            type=PropertyType.from_value(data.get('type')),
            parent_id=str(data['parent_id']) if data.get('parent_id') else None,
            address=data.get('address'),
            internal_code=data.get('internal_code'),
            capacity=data.get('capacity'),
            ical_token=data.get('ical_token'),
            created_at=_parse_timestamp(data.get('created_at')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type.value,
            'parent_id': self.parent_id,
            'address': self.address,
            'internal_code': self.internal_code,
            'capacity': self.capacity,
        }


@dataclass
class Reservation:
    """A stay, manual booking or synthetic block on one property."""
    id: str
    property_id: str
    start_date: date
    end_date: date
    status: Optional[str] = None
    platform: Platform = Platform.OTHER
    source: Optional[str] = None
    guest_name: Optional[str] = None
    guest_count: Optional[int] = None
    notes: Optional[str] = None
    is_blocking: bool = False
    is_relationship_block: bool = False
    source_reservation_id: Optional[str] = None
    external_id: Optional[str] = None
    ical_url: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not isinstance(self.platform, Platform):
            self.platform = Platform.from_value(self.platform)
        self.start_date = parse_day(self.start_date)
        self.end_date = parse_day(self.end_date)

    @property
    def is_derived_block(self) -> bool:
        """True for blocks mirrored from a related property's reservation."""
        return (
            self.is_relationship_block
            or bool(self.source_reservation_id)
            or self.notes == BLOCKED
        )

    @property
    def is_blocked(self) -> bool:
        return self.notes == BLOCKED or self.status == BLOCKED

    def covers(self, day: date) -> bool:
        """Whether ``day`` falls within the stay, check-out day included."""
        return self.start_date <= day <= self.end_date

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Reservation':
        """Create a Reservation from a Supabase row."""
        return cls(
            id=str(data['id']),
            property_id=str(data['property_id']),
            start_date=parse_day(data['start_date']),
            end_date=parse_day(data['end_date']),
            status=data.get('status'),
            platform=Platform.from_value(data.get('platform')),
            source=data.get('source'),
            guest_name=data.get('guest_name'),
            guest_count=data.get('guest_count'),
            notes=data.get('notes'),
            is_blocking=bool(data.get('is_blocking')),
            is_relationship_block=bool(data.get('is_relationship_block')),
            source_reservation_id=(
                str(data['source_reservation_id']) if data.get('source_reservation_id') else None
            ),
            external_id=data.get('external_id'),
            ical_url=data.get('ical_url'),
            created_at=_parse_timestamp(data.get('created_at')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'property_id': self.property_id,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'status': self.status,
            'platform': self.platform.value,
            'source': self.source,
            'guest_name': self.guest_name,
            'guest_count': self.guest_count,
            'notes': self.notes,
            'is_blocking': self.is_blocking,
            'is_relationship_block': self.is_relationship_block,
            'source_reservation_id': self.source_reservation_id,
        }

    def to_row(self) -> Dict[str, Any]:
        """Row for the reservations table, platform stored by its label."""
        row = self.to_dict()
        row['platform'] = app_config.platform_labels[self.platform.value]
        return row

    def __str__(self) -> str:
        return (f"Reservation(id='{self.id}', "
                f"property='{self.property_id}', "
                f"start='{self.start_date}', "
                f"end='{self.end_date}')")


@dataclass
class ICalLink:
    """An external iCal feed imported into a property's reservations."""
    id: str
    property_id: str
    platform: Platform
    url: str
    last_synced: Optional[datetime] = None

    def __post_init__(self):
        if not isinstance(self.platform, Platform):
            self.platform = Platform.from_value(self.platform)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ICalLink':
        return cls(
            id=str(data['id']),
            property_id=str(data['property_id']),
            platform=Platform.from_value(data.get('platform')),
            url=data['url'],
            last_synced=_parse_timestamp(data.get('last_synced')),
        )


@dataclass
class SyncCounts:
    """Reservation counts reported by the sync function."""
    total: int = 0
    added: int = 0
    updated: int = 0
    skipped: int = 0


@dataclass
class ICalSyncResult:
    """Result of an iCal sync invocation."""
    success: bool
    results: Optional[SyncCounts] = None
    error: Optional[str] = None
    property_id: Optional[str] = None
    platform: Optional[Platform] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'results': vars(self.results) if self.results else None,
            'error': self.error,
            'property_id': self.property_id,
            'platform': self.platform.value if self.platform else None,
        }


@dataclass
class ReservationGroups:
    """Reservations bucketed relative to the current instant."""
    checking_in: List[Reservation] = field(default_factory=list)
    checking_out: List[Reservation] = field(default_factory=list)
    checking_in_tomorrow: List[Reservation] = field(default_factory=list)
    checking_out_tomorrow: List[Reservation] = field(default_factory=list)
    upcoming: List[Reservation] = field(default_factory=list)
    active: List[Reservation] = field(default_factory=list)


@dataclass
class DayReservationStatus:
    """Occupancy of one property on one calendar day."""
    has_reservation: bool = False
    is_indirect: bool = False
    reservations: List[Reservation] = field(default_factory=list)


@dataclass
class PropertyCalendarView:
    """Reservations relevant to a single property's calendar."""
    reservations: List[Reservation] = field(default_factory=list)
    propagated_blocks: List[Reservation] = field(default_factory=list)
    relationship_blocks: List[Reservation] = field(default_factory=list)

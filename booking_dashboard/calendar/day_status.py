"""
Per-property, per-day occupancy for the multi-property calendar.
"""
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from .relations import PropertyRelationships
from ..utils.models import (
    BLOCKED, DayReservationStatus, Property, PropertyCalendarView, Reservation
)


def filter_calendar_reservations(reservations: Iterable[Reservation]) -> List[Reservation]:
    """Drop bare "Blocked" rows; propagated and explicit blocking rows stay."""
    return [
        r for r in reservations
        if r.notes != BLOCKED or r.source_reservation_id or r.is_blocking
    ]


class CalendarDayResolver:
    """Answers "what occupies property P on day D" for one fetched snapshot."""

    def __init__(self, reservations: Iterable[Reservation], properties: Iterable[Property],
                 relationships: Optional[PropertyRelationships] = None):
        self.reservations = list(reservations)
        self.properties = {p.id: p for p in properties}
        self.relationships = relationships or PropertyRelationships.from_properties(
            self.properties.values()
        )
        self._by_id: Dict[str, Reservation] = {r.id: r for r in self.reservations}

    def reservations_for_property(self, property_id: str) -> List[Reservation]:
        return [r for r in self.reservations if r.property_id == property_id]

    def source_reservation_info(self, reservation: Reservation) -> Tuple[Optional[Property], Optional[Reservation]]:
        """Property and reservation a propagated block was mirrored from."""
        if not reservation.source_reservation_id:
            return None, None
        source = self._by_id.get(reservation.source_reservation_id)
        if source is None:
            return None, None
        return self.properties.get(source.property_id), source

    def _real_reservations_on(self, property_id: str, day: date) -> List[Reservation]:
        return [
            r for r in self.reservations
            if r.property_id == property_id
            and not (r.status == BLOCKED and r.source_reservation_id)
            and r.covers(day)
        ]

    def day_reservation_status(self, prop: Property, day: date) -> DayReservationStatus:
        direct = [r for r in self.reservations_for_property(prop.id) if r.covers(day)]
        if direct:
            return DayReservationStatus(has_reservation=True, is_indirect=False, reservations=direct)

        if prop.is_parent:
            for child_id in self.relationships.parent_to_children.get(prop.id, []):
                child_reservations = self._real_reservations_on(child_id, day)
                if child_reservations:
                    return DayReservationStatus(True, True, child_reservations)

        if prop.is_child and prop.parent_id:
            parent_reservations = self._real_reservations_on(prop.parent_id, day)
            if parent_reservations:
                return DayReservationStatus(True, True, parent_reservations)

        return DayReservationStatus()

    def property_row(self, prop: Property, days: Iterable[date]) -> List[DayReservationStatus]:
        return [self.day_reservation_status(prop, day) for day in days]

    def blocking_property_names(self, status: DayReservationStatus) -> List[str]:
        """Names of the properties whose reservations produced the blocks in ``status``."""
        names = []
        for reservation in status.reservations:
            source_property, _ = self.source_reservation_info(reservation)
            if source_property is not None and source_property.name not in names:
                names.append(source_property.name)
        return names


def split_property_reservations(
    reservations: Iterable[Reservation],
    property_id: Optional[str],
    related_property_ids: Iterable[str] = (),
) -> PropertyCalendarView:
    """Separate a property's own stays from the blocks shown on its calendar."""
    related = set(related_property_ids)
    view = PropertyCalendarView()

    for r in reservations:
        if r.property_id == property_id:
            if r.source_reservation_id and r.is_blocked:
                view.propagated_blocks.append(r)
            elif not r.is_blocked and not r.is_relationship_block:
                view.reservations.append(r)
        elif r.property_id in related and not r.source_reservation_id:
            view.relationship_blocks.append(r)

    return view

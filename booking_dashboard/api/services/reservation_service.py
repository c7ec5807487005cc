"""
Reservation listing and manual reservation mutations.

Creating a manual reservation also writes the blocks it projects onto
related properties; moving or deleting it replaces or removes those blocks.
"""
from datetime import date
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from ...calendar.relations import PropertyRelationships, generate_related_property_blocks
from ...supabase_sync.supabase_client import SupabaseClient, SupabaseFetchError
from ...utils.logger import get_logger
from ...utils.models import MANUAL_SOURCE, Platform, Reservation

# Fields that move a stay, and its blocks with it.
_PLACEMENT_FIELDS = ("property_id", "start_date", "end_date")


class ReservationNotFoundError(Exception):
    """Raised when no manual reservation has the requested id."""


class ReservationConflictError(Exception):
    """Raised when a stay would overlap another one on the same property."""


class ReservationService:
    """Service for reading and editing reservations."""

    def __init__(self, supabase_client: Optional[SupabaseClient] = None, logger=None):
        self.supabase_client = supabase_client or SupabaseClient()
        self.logger = logger or get_logger("reservation_service")

    def list_reservations(
        self,
        property_id: Optional[str] = None,
        platform: Optional[Platform] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search_text: Optional[str] = None,
    ) -> List[Reservation]:
        return self.supabase_client.get_reservations(
            property_id=property_id,
            platform=platform,
            start_date=start_date,
            end_date=end_date,
            search_text=search_text,
        )

    def create_manual_reservation(
        self,
        property_id: str,
        start_date: date,
        end_date: date,
        guest_name: str,
        guest_count: Optional[int] = None,
        status: str = "Reserved",
        notes: Optional[str] = None,
    ) -> Tuple[Reservation, List[Reservation]]:
        """
        Store a manual reservation and block its related properties.

        Returns:
            The stored reservation and the blocks written for it

        Raises:
            ValueError: end_date before start_date
            ReservationConflictError: the property is already taken
            SupabaseFetchError: the reservation could not be stored
        """
        _check_dates(start_date, end_date)
        if self.supabase_client.has_overlapping_reservation(property_id, start_date, end_date):
            raise ReservationConflictError(
                f"Property {property_id} is not available from {start_date} to {end_date}"
            )

        reservation = Reservation(
            id=str(uuid4()),
            property_id=property_id,
            start_date=start_date,
            end_date=end_date,
            status=status,
            platform=Platform.MANUAL,
            source=MANUAL_SOURCE,
            guest_name=guest_name,
            guest_count=guest_count,
            notes=notes,
        )
        stored = self.supabase_client.insert_reservations([reservation.to_row()])
        if not stored:
            raise SupabaseFetchError("Failed to create reservation")

        self.logger.info("Created manual reservation", reservation_id=stored[0].id, property_id=property_id)
        return stored[0], self.propagate_blocks(stored[0])

    def update_manual_reservation(
        self, reservation_id: str, updates: Dict[str, Any]
    ) -> Tuple[Reservation, List[Reservation]]:
        """
        Apply ``updates`` to a manual reservation.

        When the property or the dates change, the old blocks are removed and
        new ones are written for the new placement.
        """
        current = self._get_manual(reservation_id)

        property_id = updates.get("property_id", current.property_id)
        start_date = updates.get("start_date", current.start_date)
        end_date = updates.get("end_date", current.end_date)
        _check_dates(start_date, end_date)

        moved = any(
            field_name in updates and updates[field_name] != getattr(current, field_name)
            for field_name in _PLACEMENT_FIELDS
        )
        if moved and self.supabase_client.has_overlapping_reservation(
            property_id, start_date, end_date, exclude_reservation_id=reservation_id
        ):
            raise ReservationConflictError(
                f"Property {property_id} is not available from {start_date} to {end_date}"
            )

        row = {key: value.isoformat() if isinstance(value, date) else value for key, value in updates.items()}
        updated = self.supabase_client.update_manual_reservation(reservation_id, row)
        if updated is None:
            raise ReservationNotFoundError(reservation_id)

        if not moved:
            return updated, []

        try:
            self.supabase_client.delete_propagated_blocks(reservation_id)
        except SupabaseFetchError as e:
            self.logger.error("Old blocks kept; skipping re-propagation",
                              reservation_id=reservation_id, error=str(e))
            return updated, []
        return updated, self.propagate_blocks(updated)

    def delete_manual_reservation(self, reservation_id: str) -> int:
        """Delete a manual reservation and its blocks; returns the blocks removed."""
        self._get_manual(reservation_id)

        try:
            removed = self.supabase_client.delete_propagated_blocks(reservation_id)
        except SupabaseFetchError as e:
            self.logger.error("Error deleting propagated blocks", reservation_id=reservation_id, error=str(e))
            removed = 0

        if not self.supabase_client.delete_manual_reservation(reservation_id):
            raise ReservationNotFoundError(reservation_id)
        return removed

    def propagate_blocks(self, reservation: Reservation) -> List[Reservation]:
        """Write the blocks ``reservation`` projects onto related properties."""
        try:
            prop = self.supabase_client.get_property_by_id(reservation.property_id)
            if prop is None:
                return []
            child_ids = self.supabase_client.get_child_property_ids(prop.id) if prop.is_parent else []

            blocks = generate_related_property_blocks(
                reservation, PropertyRelationships.for_property(prop, child_ids)
            )
            if not blocks:
                return []
            written = self.supabase_client.insert_reservations([block.to_row() for block in blocks])
        except SupabaseFetchError as e:
            self.logger.error("Error propagating reservation blocks",
                              reservation_id=reservation.id, error=str(e))
            return []

        self.logger.info("Propagated reservation blocks",
                         reservation_id=reservation.id, properties=[b.property_id for b in written])
        return written

    def _get_manual(self, reservation_id: str) -> Reservation:
        reservation = self.supabase_client.get_reservation_by_id(reservation_id)
        if reservation is None or reservation.source != MANUAL_SOURCE:
            raise ReservationNotFoundError(reservation_id)
        return reservation


def _check_dates(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise ValueError("end_date must not be before start_date")

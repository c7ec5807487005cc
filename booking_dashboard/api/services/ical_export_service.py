"""
iCal feed of a property's manual reservations, for import by the booking
platforms.
"""
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional
from urllib.parse import urlparse

from ...supabase_sync.supabase_client import SupabaseClient
from ...utils.logger import get_logger
from ...utils.models import Property, Reservation
from config.settings import api_config


class ICalTokenError(Exception):
    """Raised when a feed is requested without the property's token."""


def _escape(text: str) -> str:
    return (text.replace("\\", "\\\\")
                .replace(";", "\\;")
                .replace(",", "\\,")
                .replace("\n", "\\n"))


class ICalExportService:
    """Service for exporting reservations as iCal."""

    def __init__(self, supabase_client: Optional[SupabaseClient] = None, logger=None):
        self.supabase_client = supabase_client or SupabaseClient()
        self.logger = logger or get_logger("ical_export")

    def get_feed(self, property_id: str, token: Optional[str] = None) -> Optional[str]:
        """
        Build the feed for a property.

        Returns:
            iCal text, or None when the property does not exist

        Raises:
            ICalTokenError: the property has a feed token and ``token`` differs
        """
        prop = self.supabase_client.get_property_by_id(property_id)
        if prop is None:
            return None
        if prop.ical_token and prop.ical_token != token:
            self.logger.warning("Rejected iCal export with invalid token", property_id=property_id)
            raise ICalTokenError(property_id)

        reservations = self.supabase_client.get_exportable_reservations(property_id)
        self.logger.info("Exporting iCal feed", property_id=property_id, events=len(reservations))
        return self.generate_feed(prop, reservations)

    def generate_feed(self, prop: Property, reservations: Iterable[Reservation],
                      now: Optional[datetime] = None) -> str:
        """
        Render an RFC 5545 calendar with one all-day event per reservation.

        Lines are CRLF-terminated and never start with a space, which would
        mark them as folded continuations.
        """
        stamp = (now or datetime.now(timezone.utc)).strftime("%Y%m%dT%H%M%SZ")
        uid_domain = (urlparse(api_config.base_url or "").hostname or "localhost").strip()

        lines = [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            f"PRODID:-//{uid_domain}//Rental Calendar//EN",
            "CALSCALE:GREGORIAN",
            "METHOD:PUBLISH",
            f"X-WR-CALNAME:{_escape(prop.name or prop.id)}",
        ]

        for reservation in reservations:
            # DTEND is exclusive; the check-out day is free for the next guest.
            end = max(reservation.end_date, reservation.start_date + timedelta(days=1))
            summary = f"Reservation - {reservation.guest_name}" if reservation.guest_name else "Reservation"
            description = f"Reservation ID: {reservation.id}"
            if reservation.notes:
                description += f"\n{reservation.notes}"

            lines.extend([
                "BEGIN:VEVENT",
                f"UID:reservation-{reservation.id}@{uid_domain}",
                f"DTSTAMP:{stamp}",
                f"DTSTART;VALUE=DATE:{reservation.start_date:%Y%m%d}",
                f"DTEND;VALUE=DATE:{end:%Y%m%d}",
                f"SUMMARY:{_escape(summary)}",
                "STATUS:CONFIRMED",
                "TRANSP:OPAQUE",
                f"DESCRIPTION:{_escape(description)}",
                "END:VEVENT",
            ])

        lines.append("END:VCALENDAR")
        return "\r\n".join(lines) + "\r\n"

"""
Supabase client helper for reading rental calendar data.
"""
import calendar
import json
from datetime import date
from typing import Optional, Dict, Any, List

from supabase import create_client

from ..utils.models import BLOCKED, MANUAL_SOURCE, Property, Reservation, ICalLink, Platform
from ..utils.logger import get_logger
from config.settings import supabase_config, app_config


class SupabaseFetchError(Exception):
    """Raised when a query against the hosted store fails."""


class SupabaseClient:
    """Supabase client for properties, reservations and iCal links."""

    def __init__(self):
        self.logger = get_logger("supabase_client")
        self.client = None
        self.initialized = False

    def initialize(self) -> bool:
        """Initialize Supabase client from environment configuration."""
        try:
            if self.initialized:
                return True

            auth_key = supabase_config.get_auth_key()

            if not supabase_config.url or not auth_key:
                self.logger.error("Supabase configuration missing", url=bool(supabase_config.url))
                return False

            self.client = create_client(supabase_config.url, auth_key)
            self.initialized = True
            self.logger.info("Supabase client initialized successfully", url=supabase_config.url)
            return True
        except Exception as e:
            self.logger.error("Failed to initialize Supabase client", error=str(e))
            self.initialized = False
            return False

    def _ensure(self) -> None:
        if not self.initialized and not self.initialize():
            raise SupabaseFetchError("Failed to initialize Supabase client")

    @staticmethod
    def _rows(res) -> List[Dict[str, Any]]:
        """Extract rows from a query response (handles both supabase-py shapes)."""
        if hasattr(res, "data"):
            return res.data or []
        return getattr(res, "json", {}).get("data", []) or []

    # Reservations
    def get_reservations(
        self,
        property_id: Optional[str] = None,
        platform: Optional[Platform] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search_text: Optional[str] = None,
    ) -> List[Reservation]:
        """Fetch reservations, optionally filtered."""
        try:
            self._ensure()
            query = self.client.table(app_config.reservations_collection).select("*")

            if property_id:
                query = query.eq("property_id", property_id)
            if platform:
                query = query.eq("platform", app_config.platform_labels[platform.value])
            if start_date:
                query = query.gte("start_date", start_date.isoformat())
            if end_date:
                query = query.lte("end_date", end_date.isoformat())
            if search_text and search_text.strip():
                query = query.ilike("guest_name", f"%{search_text.strip()}%")

            rows = self._rows(query.execute())
            self.logger.info("Fetched reservations", count=len(rows), property_id=property_id)
            return [Reservation.from_dict(row) for row in rows]
        except SupabaseFetchError:
            raise
        except Exception as e:
            self.logger.error("Error fetching reservations", property_id=property_id, error=str(e))
            raise SupabaseFetchError(str(e)) from e

    def get_reservations_for_month(self, month: int, year: int) -> List[Reservation]:
        """Fetch reservations overlapping the given calendar month."""
        first_day = date(year, month, 1)
        last_day = date(year, month, calendar.monthrange(year, month)[1])
        try:
            self._ensure()
            res = (
                self.client.table(app_config.reservations_collection)
                .select("*")
                .lte("start_date", last_day.isoformat())
                .gte("end_date", first_day.isoformat())
                .order("start_date")
                .execute()
            )
            rows = self._rows(res)
            self.logger.info("Fetched reservations for month", month=month, year=year, count=len(rows))
            return [Reservation.from_dict(row) for row in rows]
        except SupabaseFetchError:
            raise
        except Exception as e:
            self.logger.error("Error fetching reservations for month", month=month, year=year, error=str(e))
            raise SupabaseFetchError(str(e)) from e

    def get_reservation_by_id(self, reservation_id: str) -> Optional[Reservation]:
        try:
            self._ensure()
            res = (
                self.client.table(app_config.reservations_collection)
                .select("*")
                .eq("id", reservation_id)
                .limit(1)
                .execute()
            )
            rows = self._rows(res)
            return Reservation.from_dict(rows[0]) if rows else None
        except SupabaseFetchError:
            raise
        except Exception as e:
            self.logger.error("Error fetching reservation", reservation_id=reservation_id, error=str(e))
            raise SupabaseFetchError(str(e)) from e

    def has_overlapping_reservation(
        self,
        property_id: str,
        start_date: date,
        end_date: date,
        exclude_reservation_id: Optional[str] = None,
    ) -> bool:
        """Whether another stay on the property overlaps [start_date, end_date)."""
        try:
            self._ensure()
            query = (
                self.client.table(app_config.reservations_collection)
                .select("id")
                .eq("property_id", property_id)
                .lt("start_date", end_date.isoformat())
                .gt("end_date", start_date.isoformat())
            )
            if exclude_reservation_id:
                query = query.neq("id", exclude_reservation_id)
            return bool(self._rows(query.execute()))
        except SupabaseFetchError:
            raise
        except Exception as e:
            self.logger.error("Error checking availability", property_id=property_id, error=str(e))
            raise SupabaseFetchError(str(e)) from e

    def get_exportable_reservations(self, property_id: str) -> List[Reservation]:
        """Manual, non-blocked reservations of a property in start order."""
        try:
            self._ensure()
            res = (
                self.client.table(app_config.reservations_collection)
                .select("*")
                .eq("property_id", property_id)
                .eq("source", MANUAL_SOURCE)
                .neq("status", BLOCKED)
                .order("start_date")
                .execute()
            )
            return [Reservation.from_dict(row) for row in self._rows(res)]
        except SupabaseFetchError:
            raise
        except Exception as e:
            self.logger.error("Error fetching reservations for export", property_id=property_id, error=str(e))
            raise SupabaseFetchError(str(e)) from e

    def insert_reservations(self, rows: List[Dict[str, Any]]) -> List[Reservation]:
        """Insert reservation rows and return them as stored."""
        try:
            self._ensure()
            res = self.client.table(app_config.reservations_collection).insert(rows).execute()
            inserted = [Reservation.from_dict(row) for row in self._rows(res)]
            self.logger.info("Inserted reservations", count=len(inserted))
            return inserted
        except SupabaseFetchError:
            raise
        except Exception as e:
            self.logger.error("Error inserting reservations", count=len(rows), error=str(e))
            raise SupabaseFetchError(str(e)) from e

    def update_manual_reservation(self, reservation_id: str, updates: Dict[str, Any]) -> Optional[Reservation]:
        """Update a manual reservation; None when no manual row has that id."""
        try:
            self._ensure()
            res = (
                self.client.table(app_config.reservations_collection)
                .update(updates)
                .eq("id", reservation_id)
                .eq("source", MANUAL_SOURCE)
                .execute()
            )
            rows = self._rows(res)
            self.logger.info("Updated reservation", reservation_id=reservation_id, fields=sorted(updates))
            return Reservation.from_dict(rows[0]) if rows else None
        except SupabaseFetchError:
            raise
        except Exception as e:
            self.logger.error("Error updating reservation", reservation_id=reservation_id, error=str(e))
            raise SupabaseFetchError(str(e)) from e

    def delete_manual_reservation(self, reservation_id: str) -> bool:
        """Delete a manual reservation; False when no manual row has that id."""
        try:
            self._ensure()
            res = (
                self.client.table(app_config.reservations_collection)
                .delete()
                .eq("id", reservation_id)
                .eq("source", MANUAL_SOURCE)
                .execute()
            )
            deleted = bool(self._rows(res))
            self.logger.info("Deleted reservation", reservation_id=reservation_id, deleted=deleted)
            return deleted
        except SupabaseFetchError:
            raise
        except Exception as e:
            self.logger.error("Error deleting reservation", reservation_id=reservation_id, error=str(e))
            raise SupabaseFetchError(str(e)) from e

    def delete_propagated_blocks(self, source_reservation_id: str) -> int:
        """Delete the blocks mirrored from a reservation; returns how many went."""
        try:
            self._ensure()
            res = (
                self.client.table(app_config.reservations_collection)
                .delete()
                .eq("source_reservation_id", source_reservation_id)
                .execute()
            )
            count = len(self._rows(res))
            self.logger.info("Deleted propagated blocks", source_reservation_id=source_reservation_id, count=count)
            return count
        except SupabaseFetchError:
            raise
        except Exception as e:
            self.logger.error("Error deleting propagated blocks",
                              source_reservation_id=source_reservation_id, error=str(e))
            raise SupabaseFetchError(str(e)) from e

    # Properties
    def get_properties(self) -> List[Property]:
        try:
            self._ensure()
            res = self.client.table(app_config.properties_collection).select("*").order("name").execute()
            return [Property.from_dict(row) for row in self._rows(res)]
        except SupabaseFetchError:
            raise
        except Exception as e:
            self.logger.error("Error fetching properties", error=str(e))
            raise SupabaseFetchError(str(e)) from e

    def get_property_by_id(self, property_id: str) -> Optional[Property]:
        """Fetch a property by ID; None when no row matches."""
        try:
            self._ensure()
            res = (
                self.client.table(app_config.properties_collection)
                .select("*")
                .eq("id", property_id)
                .limit(1)
                .execute()
            )
            rows = self._rows(res)
            return Property.from_dict(rows[0]) if rows else None
        except SupabaseFetchError:
            raise
        except Exception as e:
            self.logger.error("Error fetching property", property_id=property_id, error=str(e))
            raise SupabaseFetchError(str(e)) from e

    def get_child_property_ids(self, parent_id: str) -> List[str]:
        """Ids of the properties whose parent_id references ``parent_id``."""
        try:
            self._ensure()
            res = (
                self.client.table(app_config.properties_collection)
                .select("id")
                .eq("parent_id", parent_id)
                .execute()
            )
            return [str(row["id"]) for row in self._rows(res) if row.get("id")]
        except SupabaseFetchError:
            raise
        except Exception as e:
            self.logger.error("Error fetching child properties", parent_id=parent_id, error=str(e))
            raise SupabaseFetchError(str(e)) from e

    # iCal links
    def get_ical_links(self, property_id: Optional[str] = None) -> List[ICalLink]:
        try:
            self._ensure()
            query = self.client.table(app_config.ical_links_collection).select("*")
            if property_id:
                query = query.eq("property_id", property_id)
            return [ICalLink.from_dict(row) for row in self._rows(query.execute())]
        except SupabaseFetchError:
            raise
        except Exception as e:
            self.logger.error("Error fetching iCal links", property_id=property_id, error=str(e))
            raise SupabaseFetchError(str(e)) from e

    # Edge functions
    def invoke_function(self, function_name: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Invoke a Supabase edge function and decode its JSON reply."""
        self._ensure()
        response = self.client.functions.invoke(
            function_name,
            invoke_options={"body": body, "responseType": "json"},
        )
        if isinstance(response, (bytes, str)):
            response = json.loads(response or "{}")
        self.logger.info("Invoked edge function", function=function_name)
        return response or {}

    # Context manager helpers
    def __enter__(self):
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass

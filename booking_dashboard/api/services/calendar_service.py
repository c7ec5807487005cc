"""
Calendar service: window paging, padded reservation fetches, grouping and
single-property calendars.
"""
import asyncio
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from ...calendar.date_window import DateWindow
from ...calendar.day_status import (
    CalendarDayResolver, filter_calendar_reservations, split_property_reservations
)
from ...calendar.fetching import fetch_reservations_for_range
from ...calendar.grouping import ReservationGrouper
from ...calendar.relations import PropertyRelationResolver
from ...supabase_sync.data_source import CalendarDataSource
from ...utils.logger import get_logger
from ...utils.models import Reservation, ReservationGroups, PropertyCalendarView


class CalendarService:
    """Service for calendar views over the hosted reservation store."""

    def __init__(self, data_source: CalendarDataSource, logger=None):
        self.data_source = data_source
        self.logger = logger or get_logger("calendar_service")
        self.grouper = ReservationGrouper()
        self.relation_resolver = PropertyRelationResolver(data_source, self.logger)

    def get_window(self, start: Optional[date] = None, direction: Optional[str] = None,
                   today: Optional[date] = None) -> DateWindow:
        """
        Build the visible window, optionally paged once from ``start``.

        Args:
            start: Anchor of the currently displayed window (defaults to today - 4)
            direction: "forward" or "backward" to move one page
            today: Override for the current day

        Returns:
            DateWindow for the requested page
        """
        window = DateWindow(today=today, anchor_start=start)
        if direction == "forward":
            window.go_forward()
        elif direction == "backward":
            window.go_backward()
        return window

    async def get_window_reservations(self, window: DateWindow) -> List[Reservation]:
        """Reservations overlapping the padded window; empty on fetch failure."""
        start, end = window.padded_range()
        try:
            reservations = await fetch_reservations_for_range(self.data_source, start, end)
        except Exception as e:
            self.logger.error("Error fetching window reservations",
                              start=start.isoformat(), end=end.isoformat(), error=str(e))
            return []
        return filter_calendar_reservations(reservations)

    async def get_multi_calendar(self, window: DateWindow) -> Dict[str, Any]:
        """Day-by-day occupancy of every property across the window."""
        days = window.visible_days()
        try:
            properties, reservations = await asyncio.gather(
                self.data_source.fetch_properties(),
                self.get_window_reservations(window),
            )
        except Exception as e:
            self.logger.error("Error building multi-property calendar", error=str(e))
            return {"days": days, "rows": []}

        resolver = CalendarDayResolver(reservations, properties)
        rows = []
        for prop in properties:
            statuses = resolver.property_row(prop, days)
            rows.append({
                "property": prop,
                "days": statuses,
                "blocked_by": [resolver.blocking_property_names(s) for s in statuses],
            })
        return {"days": days, "rows": rows}

    async def get_reservation_groups(self, now: Optional[datetime] = None) -> ReservationGroups:
        """Dashboard buckets for ``now``; empty buckets on fetch failure."""
        try:
            reservations = await self.data_source.fetch_all_reservations()
        except Exception as e:
            self.logger.error("Error fetching reservations for grouping", error=str(e))
            return ReservationGroups()
        return self.grouper.group(reservations, now)

    async def get_related_property_ids(self, property_id: Optional[str]) -> List[str]:
        related = await self.relation_resolver.resolve(property_id)
        return sorted(related)

    async def get_property_calendar(self, property_id: str, month: int, year: int) -> PropertyCalendarView:
        """A property's own stays plus the blocks its related properties impose."""
        related = await self.relation_resolver.resolve(property_id)
        try:
            monthly = await self.data_source.fetch_reservations_for_month(month, year)
        except Exception as e:
            self.logger.error("Error fetching reservations for property calendar",
                              property_id=property_id, month=month, year=year, error=str(e))
            return PropertyCalendarView()

        relevant = {property_id, *related}
        return split_property_reservations(
            [r for r in monthly if r.property_id in relevant], property_id, related
        )

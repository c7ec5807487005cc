import asyncio
import calendar
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from ...supabase_sync.data_source import CalendarDataSource
from ...utils.logger import get_logger
from ...utils.models import Property, Reservation


class DashboardService:
    def __init__(self, data_source: CalendarDataSource, logger=None):
        self.data_source = data_source
        self.logger = logger or get_logger("dashboard_service")

    async def get_stats(self, today: Optional[date] = None) -> Dict[str, Any]:
        today = today or date.today()
        try:
            properties, reservations = await asyncio.gather(
                self.data_source.fetch_properties(),
                self.data_source.fetch_all_reservations(),
            )
        except Exception as e:
            self.logger.error("Error calculating dashboard stats", error=str(e))
            properties, reservations = [], []

        return {
            "total_properties": len(properties),
            "active_reservations": sum(1 for r in reservations if r.covers(today)),
            "check_ins_today": sum(1 for r in reservations if r.start_date == today),
            "check_outs_today": sum(1 for r in reservations if r.end_date == today),
            "property_occupancy": [
                {**prop.to_dict(), "occupancy_rate": self._occupancy_rate(prop, reservations, today)}
                for prop in properties
            ],
        }

    @staticmethod
    def _counts_for(prop: Property, reservation: Reservation) -> bool:
        """Whether a reservation occupies ``prop``."""
        if prop.is_parent:
            # Blocks mirrored from children would count the same stay twice.
            return reservation.property_id == prop.id and not reservation.source_reservation_id
        if prop.is_child:
            return reservation.property_id == prop.id or (
                reservation.property_id == prop.parent_id and not reservation.source_reservation_id
            )
        return reservation.property_id == prop.id

    def _occupancy_rate(self, prop: Property, reservations: List[Reservation], today: date) -> float:
        days_in_month = calendar.monthrange(today.year, today.month)[1]
        month_start = today.replace(day=1)
        month_end = today.replace(day=days_in_month)

        relevant = [
            r for r in reservations
            if r.start_date <= month_end and r.end_date >= month_start and self._counts_for(prop, r)
        ]

        occupied = 0
        for offset in range(days_in_month):
            day = month_start + timedelta(days=offset)
            if any(r.covers(day) for r in relevant):
                occupied += 1

        return round(occupied / days_in_month * 100, 2)

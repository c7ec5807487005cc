"""
Async facade over the Supabase client.

The supabase-py client is synchronous; every call here runs it in a worker
thread so several queries (one per calendar month, for instance) can be in
flight at once and joined with ``asyncio.gather``.
"""
import asyncio
from typing import List, Optional

from .supabase_client import SupabaseClient
from ..utils.models import Property, Reservation


class CalendarDataSource:
    """Awaitable reads used by the calendar services."""

    def __init__(self, supabase_client: Optional[SupabaseClient] = None):
        self.supabase_client = supabase_client or SupabaseClient()

    async def fetch_reservations_for_month(self, month: int, year: int) -> List[Reservation]:
        return await asyncio.to_thread(self.supabase_client.get_reservations_for_month, month, year)

    async def fetch_all_reservations(self) -> List[Reservation]:
        return await asyncio.to_thread(self.supabase_client.get_reservations)

    async def fetch_property_by_id(self, property_id: str) -> Optional[Property]:
        return await asyncio.to_thread(self.supabase_client.get_property_by_id, property_id)

    async def fetch_child_property_ids(self, parent_id: str) -> List[str]:
        return await asyncio.to_thread(self.supabase_client.get_child_property_ids, parent_id)

    async def fetch_properties(self) -> List[Property]:
        return await asyncio.to_thread(self.supabase_client.get_properties)

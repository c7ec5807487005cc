"""
Concurrent per-month reservation fetching for a date range.
"""
import asyncio
from datetime import date
from typing import Dict, List

from .date_window import months_in_range
from ..utils.models import Reservation


async def fetch_reservations_for_range(data_source, start: date, end: date) -> List[Reservation]:
    """
    Fetch every reservation overlapping [start, end].

    One query per calendar month is issued concurrently; the result is only
    assembled once all of them have returned, and the first failure is
    propagated to the caller. Reservations spanning a month boundary come
    back from both queries and are kept once.
    """
    batches = await asyncio.gather(*(
        data_source.fetch_reservations_for_month(month, year)
        for month, year in months_in_range(start, end)
    ))

    unique: Dict[str, Reservation] = {}
    for batch in batches:
        for reservation in batch:
            if reservation.start_date <= end and reservation.end_date >= start:
                unique.setdefault(reservation.id, reservation)

    return sorted(unique.values(), key=lambda r: (r.start_date, r.platform.value))

"""
Temporal grouping of reservations for the dashboard lists.
"""
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..utils.models import Reservation, ReservationGroups
from config.settings import app_config

CHECKOUT_CUTOFF_HOUR = app_config.checkout_cutoff_hour


class ReservationGrouper:
    """
    Buckets reservations relative to the current instant.

    The first five buckets form an if/elif chain evaluated in order; a
    reservation lands in at most one of them. ``active`` is checked
    separately and skips derived blocks.
    """

    def __init__(self, checkout_cutoff_hour: int = CHECKOUT_CUTOFF_HOUR):
        self.checkout_cutoff_hour = checkout_cutoff_hour

    def group(self, reservations: Iterable[Reservation], now: Optional[datetime] = None) -> ReservationGroups:
        now = now or datetime.now()
        today = now.date()
        tomorrow = today + timedelta(days=1)
        groups = ReservationGroups()

        for reservation in reservations:
            start, end = reservation.start_date, reservation.end_date

            if start == today:
                groups.checking_in.append(reservation)
            elif end == today:
                # Past the cutoff the guest is assumed gone; no other bucket applies.
                if now.hour < self.checkout_cutoff_hour:
                    groups.checking_out.append(reservation)
            elif start == tomorrow:
                groups.checking_in_tomorrow.append(reservation)
            elif end == tomorrow:
                groups.checking_out_tomorrow.append(reservation)
            elif start > tomorrow:
                groups.upcoming.append(reservation)

            if not reservation.is_derived_block and start < today < end:
                groups.active.append(reservation)

        return groups

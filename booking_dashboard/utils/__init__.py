"""
Utility modules for the rental calendar dashboard.
"""

from .models import (
    Platform, PropertyType, Property, Reservation, ICalLink,
    SyncCounts, ICalSyncResult, ReservationGroups,
    DayReservationStatus, PropertyCalendarView
)
from .logger import setup_logger, get_logger, SyncLogger

__all__ = [
    'Platform', 'PropertyType', 'Property', 'Reservation', 'ICalLink',
    'SyncCounts', 'ICalSyncResult', 'ReservationGroups',
    'DayReservationStatus', 'PropertyCalendarView',
    'setup_logger', 'get_logger', 'SyncLogger'
]

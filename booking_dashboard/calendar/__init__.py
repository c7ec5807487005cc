"""
Calendar computations: date window paging, reservation grouping and
property relationships.
"""

from .date_window import DateWindow, months_in_range, DAYS_TO_SHOW, DAYS_BEFORE_TODAY
from .grouping import ReservationGrouper
from .relations import (
    PropertyRelationResolver, PropertyRelationships, generate_related_property_blocks
)
from .day_status import (
    CalendarDayResolver, filter_calendar_reservations, split_property_reservations
)
from .fetching import fetch_reservations_for_range

__all__ = [
    'DateWindow', 'months_in_range', 'DAYS_TO_SHOW', 'DAYS_BEFORE_TODAY',
    'ReservationGrouper',
    'PropertyRelationResolver', 'PropertyRelationships', 'generate_related_property_blocks',
    'CalendarDayResolver', 'filter_calendar_reservations', 'split_property_reservations',
    'fetch_reservations_for_range',
]

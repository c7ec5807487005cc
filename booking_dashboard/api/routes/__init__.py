"""
API routes and endpoints.
"""

from . import calendar, dashboard, health, ical, properties, reservations

__all__ = ["calendar", "dashboard", "health", "ical", "properties", "reservations"]

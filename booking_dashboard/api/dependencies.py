"""
Dependency injection and service container for FastAPI application.
"""
from typing import Optional
from functools import lru_cache

from ..supabase_sync.supabase_client import SupabaseClient
from ..supabase_sync.data_source import CalendarDataSource
from ..utils.logger import setup_logger
from .config import settings


# Global service instances
_supabase_client: Optional[SupabaseClient] = None
_logger = None


def get_logger():
    """Get application logger instance."""
    global _logger
    if _logger is None:
        _logger = setup_logger("fastapi_app", settings.log_level)
    return _logger


def get_supabase_client() -> SupabaseClient:
    """Get Supabase client instance."""
    global _supabase_client
    if _supabase_client is None:
        _supabase_client = SupabaseClient()
    return _supabase_client


@lru_cache(maxsize=1)
def get_data_source() -> CalendarDataSource:
    return CalendarDataSource(get_supabase_client())


@lru_cache(maxsize=1)
def get_calendar_service():
    """Get calendar service instance with caching."""
    from .services.calendar_service import CalendarService
    return CalendarService(get_data_source(), get_logger())


@lru_cache(maxsize=1)
def get_dashboard_service():
    """Get dashboard service instance with caching."""
    from .services.dashboard_service import DashboardService
    return DashboardService(get_data_source(), get_logger())


@lru_cache(maxsize=1)
def get_ical_sync_service():
    """Get iCal sync service instance with caching."""
    from .services.ical_sync_service import ICalSyncService
    return ICalSyncService(get_supabase_client(), get_logger())


@lru_cache(maxsize=1)
def get_reservation_service():
    """Get reservation service instance with caching."""
    from .services.reservation_service import ReservationService
    return ReservationService(get_supabase_client(), get_logger())


@lru_cache(maxsize=1)
def get_ical_export_service():
    """Get iCal export service instance with caching."""
    from .services.ical_export_service import ICalExportService
    return ICalExportService(get_supabase_client(), get_logger())


def reset_services() -> None:
    """Drop cached instances (application shutdown)."""
    global _supabase_client, _logger
    _supabase_client = None
    _logger = None
    get_data_source.cache_clear()
    get_calendar_service.cache_clear()
    get_dashboard_service.cache_clear()
    get_ical_sync_service.cache_clear()
    get_reservation_service.cache_clear()
    get_ical_export_service.cache_clear()

"""
Supabase access for the rental calendar dashboard.
"""

from .supabase_client import SupabaseClient, SupabaseFetchError
from .data_source import CalendarDataSource

__all__ = ['SupabaseClient', 'SupabaseFetchError', 'CalendarDataSource']

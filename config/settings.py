"""
Configuration settings for the Rental Calendar Dashboard.
"""
import os
from typing import Dict
from dataclasses import dataclass
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class SupabaseConfig:
    """Supabase configuration settings."""
    url: str = os.getenv("SUPABASE_URL", "")
    anon_key: str = os.getenv("SUPABASE_ANON_KEY", "")
    service_role_key: str = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")

    def get_auth_key(self) -> str:
        """Prefer service role key for server-side operations when available."""
        return self.service_role_key or self.anon_key


@dataclass
class AppConfig:
    """Application configuration settings."""
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Data storage table names
    properties_collection: str = "properties"
    reservations_collection: str = "reservations"
    ical_links_collection: str = "ical_links"

    # Edge function that imports an iCal feed into reservations
    sync_function_name: str = os.getenv("SYNC_ICAL_FUNCTION", "sync-ical")

    # Multi-property calendar window
    days_to_show: int = 15
    days_before_today: int = 4
    fetch_padding_days: int = int(os.getenv("FETCH_PADDING_DAYS", "7"))

    # Reservations ending today are listed as checking out until this hour
    checkout_cutoff_hour: int = int(os.getenv("CHECKOUT_CUTOFF_HOUR", "12"))

    supported_platforms: tuple = ("airbnb", "booking", "vrbo")

    # Marker written into notes/status of synthetic block reservations
    blocked_marker: str = "Blocked"

    platform_labels: Dict[str, str] = None

    def __post_init__(self):
        if self.platform_labels is None:
            self.platform_labels = {
                "airbnb": "Airbnb",
                "booking": "Booking",
                "vrbo": "Vrbo",
                "manual": "Manual",
                "other": "Other",
            }


@dataclass
class APIConfig:
    """API and URL configuration settings."""
    base_url: str = os.getenv("API_BASE_URL", "http://127.0.0.1:8001")


supabase_config = SupabaseConfig()
app_config = AppConfig()
api_config = APIConfig()

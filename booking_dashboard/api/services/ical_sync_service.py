"""
iCal synchronisation through the hosted sync function.
"""
from typing import Any, Dict, Iterable, List, Optional

from ...supabase_sync.supabase_client import SupabaseClient
from ...utils.logger import get_logger, SyncLogger
from ...utils.models import ICalLink, ICalSyncResult, Platform, SyncCounts
from config.settings import app_config


class ICalSyncService:
    """Service for importing external iCal feeds into reservations."""

    def __init__(self, supabase_client: Optional[SupabaseClient] = None, logger=None):
        self.supabase_client = supabase_client or SupabaseClient()
        self.logger = logger or get_logger("ical_sync")
        self.sync_logger = SyncLogger(self.logger)

    def sync_link(self, url: str, property_id: str, platform: Platform) -> ICalSyncResult:
        """
        Import one iCal feed.

        Failures are returned as ``ICalSyncResult(success=False, error=...)``
        rather than raised.
        """
        if not isinstance(platform, Platform):
            platform = Platform.from_value(platform)

        try:
            response = self.supabase_client.invoke_function(
                app_config.sync_function_name,
                {
                    "url": url,
                    "propertyId": property_id,
                    "platform": app_config.platform_labels[platform.value],
                },
            )
        except Exception as e:
            self.logger.error("Error invoking iCal sync", property_id=property_id, error=str(e))
            return ICalSyncResult(success=False, error=str(e), property_id=property_id, platform=platform)

        return self._parse_response(response, property_id, platform)

    def _parse_response(self, response: Dict[str, Any], property_id: str, platform: Platform) -> ICalSyncResult:
        if not response.get("success"):
            return ICalSyncResult(
                success=False,
                error=response.get("error") or "Unknown sync error",
                property_id=property_id,
                platform=platform,
            )

        counts = response.get("results") or {}
        return ICalSyncResult(
            success=True,
            results=SyncCounts(
                total=int(counts.get("total", 0)),
                added=int(counts.get("added", 0)),
                updated=int(counts.get("updated", 0)),
                skipped=int(counts.get("skipped", 0)),
            ),
            property_id=property_id,
            platform=platform,
        )

    def sync_links(self, links: Iterable[ICalLink]) -> Dict[str, Any]:
        """Sync links one after another and summarise the run."""
        self.sync_logger.reset_stats()
        results: List[ICalSyncResult] = []

        for link in links:
            result = self.sync_link(link.url, link.property_id, link.platform)
            self.sync_logger.log_sync_result(result)
            results.append(result)

        self.sync_logger.print_summary()
        return {
            "synced": sum(1 for r in results if r.success),
            "failed": sum(1 for r in results if not r.success),
            "results": results,
        }

    def sync_property(self, property_id: str) -> Dict[str, Any]:
        """Sync every iCal link registered for a property."""
        try:
            links = self.supabase_client.get_ical_links(property_id)
        except Exception as e:
            self.sync_logger.log_error(e, f"Fetching iCal links for property {property_id}")
            return {"synced": 0, "failed": 0, "results": [], "error": str(e)}

        if not links:
            self.logger.info("No iCal links for property", property_id=property_id)
        return self.sync_links(links)

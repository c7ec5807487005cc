"""
Command-line entry point for the Rental Calendar Dashboard.
"""
import asyncio
from typing import Optional

import click

from .api.services.calendar_service import CalendarService
from .api.services.ical_sync_service import ICalSyncService
from .supabase_sync.data_source import CalendarDataSource
from .supabase_sync.supabase_client import SupabaseClient
from .utils.logger import setup_logger
from .utils.models import Platform
from config.settings import app_config


class CalendarDashboard:
    """Wires the Supabase client into the calendar and sync services."""

    def __init__(self, log_level: str = "INFO", log_file: Optional[str] = None):
        self.logger = setup_logger("rental_calendar", log_level, log_file)
        self.supabase_client = SupabaseClient()
        self.calendar_service = CalendarService(CalendarDataSource(self.supabase_client), self.logger)
        self.sync_service = ICalSyncService(self.supabase_client, self.logger)


@click.group()
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              default=app_config.log_level.upper(), help='Logging level')
@click.option('--log-file', type=str, help='Log file path (optional)')
@click.pass_context
def main(ctx, log_level, log_file):
    """
    Rental Calendar Dashboard.

    Inspect the reservation calendar and sync iCal feeds from Airbnb,
    Booking and Vrbo into Supabase.
    """
    ctx.obj = CalendarDashboard(log_level, log_file)


@main.command()
@click.option('--start', type=click.DateTime(formats=['%Y-%m-%d']), help='Window anchor (YYYY-MM-DD)')
@click.option('--pages', type=int, default=0, help='Pages to move (negative goes back)')
@click.pass_obj
def window(dashboard: CalendarDashboard, start, pages):
    """Print the visible calendar window and its reservations."""
    cal_window = dashboard.calendar_service.get_window(start.date() if start else None)
    for _ in range(abs(pages)):
        if pages > 0:
            cal_window.go_forward()
        else:
            cal_window.go_backward()

    reservations = asyncio.run(dashboard.calendar_service.get_window_reservations(cal_window))

    click.echo(f"Window: {cal_window.anchor_start} -> {cal_window.end_date}")
    click.echo("  " + " ".join(day.strftime('%d') for day in cal_window.visible_days()))
    click.echo(f"Reservations in padded range: {len(reservations)}")
    for reservation in reservations:
        click.echo(f"  {reservation.property_id}: {reservation.start_date} -> {reservation.end_date} "
                   f"({reservation.platform.value})")


@main.command()
@click.pass_obj
def groups(dashboard: CalendarDashboard):
    """Print today's check-ins, check-outs, upcoming and active stays."""
    reservation_groups = asyncio.run(dashboard.calendar_service.get_reservation_groups())
    for name, bucket in vars(reservation_groups).items():
        click.echo(f"{name.replace('_', ' ').title()}: {len(bucket)}")
        for reservation in bucket:
            click.echo(f"  {reservation.guest_name or reservation.id} "
                       f"({reservation.start_date} -> {reservation.end_date})")


@main.command('sync-ical')
@click.option('--property-id', required=True, help='Property to sync')
@click.option('--url', help='iCal feed URL (omit to sync every link of the property)')
@click.option('--platform', type=click.Choice(list(app_config.supported_platforms)),
              help='Platform of the feed (required with --url)')
@click.pass_obj
def sync_ical(dashboard: CalendarDashboard, property_id, url, platform):
    """Sync iCal feeds into the reservation store."""
    if url:
        if not platform:
            raise click.UsageError("--platform is required with --url")
        result = dashboard.sync_service.sync_link(url, property_id, Platform(platform))
        if not result.success:
            click.echo(f"Error: {result.error}")
            click.get_current_context().exit(1)
        click.echo(f"Synced {result.results.total} events: {result.results.added} added, "
                   f"{result.results.updated} updated, {result.results.skipped} skipped")
        return

    summary = dashboard.sync_service.sync_property(property_id)
    if summary.get("error"):
        click.echo(f"Error: {summary['error']}")
        click.get_current_context().exit(1)
    click.echo(f"{summary['synced']} calendars synced, {summary['failed']} failed")
    if summary['failed']:
        click.get_current_context().exit(1)


if __name__ == "__main__":
    main()

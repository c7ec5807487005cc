"""
Logging utility for the Rental Calendar Dashboard.
"""
import logging
import sys
from typing import Optional
from colorama import Fore, Style, init
import structlog

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class ColorizedFormatter(logging.Formatter):
    """Custom formatter with colorized output."""

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.MAGENTA + Style.BRIGHT,
    }

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{Style.RESET_ALL}"

        if record.levelno >= logging.WARNING:
            record.msg = f"{Fore.RED}{record.msg}{Style.RESET_ALL}"

        return super().format(record)


def setup_logger(
    name: str = "rental_calendar",
    level: str = "INFO",
    log_file: Optional[str] = None
) -> structlog.BoundLogger:
    """
    Set up structured logging with colorized console output.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging to file

    Returns:
        Configured structured logger
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if log_file else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger(name)

    stdlib_logger = logging.getLogger(name)
    stdlib_logger.setLevel(getattr(logging, level.upper()))

    if not stdlib_logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_formatter = ColorizedFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(console_formatter)
        stdlib_logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            stdlib_logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "rental_calendar") -> structlog.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name

    Returns:
        Configured structured logger
    """
    return structlog.get_logger(name)


class SyncLogger:
    """Specialized logger for iCal sync runs with summary tracking."""

    def __init__(self, logger: structlog.BoundLogger):
        self.logger = logger
        self.reset_stats()

    def log_sync_result(self, result):
        """Record the outcome of one iCal link sync."""
        platform = result.platform.value if result.platform else "unknown"
        self.stats['platforms'][platform] = self.stats['platforms'].get(platform, 0) + 1

        if not result.success:
            self.stats['failed'] += 1
            self.logger.warning(
                "iCal sync failed",
                property_id=result.property_id,
                platform=platform,
                error=result.error
            )
            return

        self.stats['synced'] += 1
        if result.results:
            self.stats['added'] += result.results.added
            self.stats['updated'] += result.results.updated
            self.stats['skipped'] += result.results.skipped
        self.logger.info(
            "iCal link synced",
            property_id=result.property_id,
            platform=platform,
            added=result.results.added if result.results else 0,
            updated=result.results.updated if result.results else 0
        )

    def log_error(self, error: Exception, context: str = ""):
        """Log an error."""
        self.stats['failed'] += 1
        self.logger.error(
            "Error occurred",
            error=str(error),
            error_type=type(error).__name__,
            context=context
        )

    def print_summary(self):
        """Print a summary of all sync operations."""
        self.logger.info("Sync summary", **self.stats)

        print(f"\n{Fore.CYAN}{'='*50}")
        print(f"{Fore.WHITE}ICAL SYNC SUMMARY")
        print(f"{Fore.CYAN}{'='*50}")
        print(f"{Fore.GREEN}✓ Calendars synced: {self.stats['synced']}")
        print(f"{Fore.BLUE}✓ Reservations added: {self.stats['added']}")
        print(f"{Fore.BLUE}✓ Reservations updated: {self.stats['updated']}")
        print(f"{Fore.YELLOW}⚠ Reservations skipped: {self.stats['skipped']}")
        print(f"{Fore.RED}✗ Failed: {self.stats['failed']}")

        if self.stats['platforms']:
            print(f"\n{Fore.WHITE}By Platform:")
            for platform, count in self.stats['platforms'].items():
                print(f"  {Fore.CYAN}{platform}: {count}")

        print(f"{Fore.CYAN}{'='*50}\n")

    def reset_stats(self):
        """Reset statistics."""
        self.stats = {
            'synced': 0,
            'failed': 0,
            'added': 0,
            'updated': 0,
            'skipped': 0,
            'platforms': {}
        }

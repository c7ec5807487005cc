"""
Sliding date window for the multi-property calendar.
"""
from datetime import date, timedelta
from typing import List, Optional, Tuple

from config.settings import app_config

DAYS_TO_SHOW = app_config.days_to_show
DAYS_BEFORE_TODAY = app_config.days_before_today


class DateWindow:
    """
    Fixed-length run of calendar days anchored a few days before today.

    Paging moves the anchor by a whole window, so consecutive pages never
    overlap. There are no bounds: the window can page arbitrarily far into
    the past or the future.
    """

    def __init__(self, today: Optional[date] = None, length: int = DAYS_TO_SHOW,
                 anchor_start: Optional[date] = None):
        self.length = length
        if anchor_start is None:
            anchor_start = (today or date.today()) - timedelta(days=DAYS_BEFORE_TODAY)
        self.anchor_start = anchor_start

    @property
    def end_date(self) -> date:
        return self.anchor_start + timedelta(days=self.length - 1)

    def visible_days(self) -> List[date]:
        return [self.anchor_start + timedelta(days=i) for i in range(self.length)]

    def go_forward(self) -> None:
        self.anchor_start += timedelta(days=self.length)

    def go_backward(self) -> None:
        self.anchor_start -= timedelta(days=self.length)

    def padded_range(self, padding_days: int = app_config.fetch_padding_days) -> Tuple[date, date]:
        """Window bounds widened on both sides for overlap-safe fetching."""
        padding = timedelta(days=padding_days)
        return self.anchor_start - padding, self.end_date + padding

    def __repr__(self) -> str:
        return f"DateWindow(start={self.anchor_start}, end={self.end_date})"


def months_in_range(start: date, end: date) -> List[Tuple[int, int]]:
    """(month, year) pairs touched by [start, end], in calendar order."""
    months = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        months.append((month, year))
        month += 1
        if month > 12:
            month = 1
            year += 1
    return months

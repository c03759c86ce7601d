"""Cutoffs for the trailing statistics windows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class WindowBounds:
    """Inclusive lower bounds of the today / week / month windows."""

    day_start: datetime
    week_start: datetime
    month_start: datetime


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def subtract_months(moment: datetime, months: int = 1) -> datetime:
    """
    Step back a number of calendar months, keeping the day of month.

    A day that does not exist in the target month rolls over into the next
    one instead of being clamped: Mar 31 minus one month is Mar 3 (Mar 2 in a
    leap year), the way calendar month setters overflow.
    """
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    first_of_month = moment.replace(year=year, month=month + 1, day=1)
    return first_of_month + timedelta(days=moment.day - 1)


def compute_window_bounds(now: datetime) -> WindowBounds:
    day_start = start_of_day(now)
    return WindowBounds(
        day_start=day_start,
        week_start=day_start - timedelta(days=7),
        month_start=subtract_months(day_start, 1),
    )


def align_to(moment: Optional[datetime], reference: datetime) -> Optional[datetime]:
    """
    Make `moment` comparable with `reference`.

    Naive timestamps are read in the reference's timezone; aware timestamps
    compared with a naive reference are converted to local time.
    """
    if moment is None:
        return None
    if reference.tzinfo is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=reference.tzinfo)
    if reference.tzinfo is None and moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment

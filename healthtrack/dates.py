# -*- coding: utf-8 -*-
"""Calendar helpers.

All stored and compared timestamps are naive local datetimes. Aware values
coming from clients are converted to local time before they are stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional


def local_now() -> datetime:
    return datetime.now()


def to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def to_iso(value: datetime) -> str:
    return to_local_naive(value).isoformat()


def parse_iso(value: str) -> datetime:
    return to_local_naive(datetime.fromisoformat(value.replace("Z", "+00:00")))


def day_distance(later: date, earlier: date) -> int:
    return (later - earlier).days


@dataclass(frozen=True)
class Window:
    """Closed time interval ``[start, end]``; a missing bound is unbounded."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @classmethod
    def for_day(cls, day: date) -> "Window":
        return cls(start=start_of_day(day), end=end_of_day(day))

    @classmethod
    def for_days(cls, first: Optional[date], last: Optional[date]) -> "Window":
        return cls(
            start=start_of_day(first) if first is not None else None,
            end=end_of_day(last) if last is not None else None,
        )

    def contains(self, ts: datetime) -> bool:
        if self.start is not None and ts < self.start:
            return False
        if self.end is not None and ts > self.end:
            return False
        return True

    def contains_date(self, day: date) -> bool:
        # A bare calendar date is placed at its midnight.
        return self.contains(start_of_day(day))

    def date_bounds(self) -> tuple[Optional[str], Optional[str]]:
        """Widest ``YYYY-MM-DD`` bounds covering the window, for SQL prefiltering."""
        first = self.start.date().isoformat() if self.start is not None else None
        last = self.end.date().isoformat() if self.end is not None else None
        return first, last

    @property
    def span(self) -> timedelta:
        if self.start is None or self.end is None:
            raise ValueError("span of an unbounded window")
        return self.end - self.start

"""Hour computation for a daily time record.

A DTR's hours come from the first ``in`` and the first ``out`` timelog in
timestamp order. Missing either end means there is nothing to compute and
the stored hours are left alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Protocol, Sequence
from zoneinfo import ZoneInfo

from guardtime.core.config import Settings
from guardtime.core.errors import ValidationError

SECONDS_PER_HOUR = 3600.0


class TimelogLike(Protocol):
    id: int
    mode: str
    timestamp: datetime


@dataclass(frozen=True)
class HoursBreakdown:
    regular_hours: float
    overtime_hours: float
    night_differential: float

    @classmethod
    def zero(cls) -> "HoursBreakdown":
        return cls(0.0, 0.0, 0.0)

    def __add__(self, other: "HoursBreakdown") -> "HoursBreakdown":
        return HoursBreakdown(
            regular_hours=self.regular_hours + other.regular_hours,
            overtime_hours=self.overtime_hours + other.overtime_hours,
            night_differential=self.night_differential + other.night_differential,
        )


@dataclass
class ShiftHoursRule:
    regular_hours_cap: float = 8.0
    night_start_hour: int = 22
    night_end_hour: int = 6
    night_diff_rate: float = 0.10
    night_diff_mode: str = "flat"  # flat|overlap
    max_shift_hours: float = 24.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "ShiftHoursRule":
        return cls(
            regular_hours_cap=settings.regular_hours_cap,
            night_start_hour=settings.night_start_hour,
            night_end_hour=settings.night_end_hour,
            night_diff_rate=settings.night_diff_rate,
            night_diff_mode=settings.night_diff_mode,
            max_shift_hours=settings.max_shift_hours,
        )

    def in_night_window(self, moment: datetime) -> bool:
        if self.night_start_hour > self.night_end_hour:
            return moment.hour >= self.night_start_hour or moment.hour < self.night_end_hour
        return self.night_start_hour <= moment.hour < self.night_end_hour

    def night_overlap_hours(self, start: datetime, end: datetime) -> float:
        """Hours of [start, end) that fall inside any night window."""
        overlap = 0.0
        day: date = start.date() - timedelta(days=1)
        while day <= end.date():
            window_start = datetime.combine(day, datetime.min.time()).replace(hour=self.night_start_hour)
            window_end = datetime.combine(day, datetime.min.time()).replace(hour=self.night_end_hour)
            if window_end <= window_start:
                window_end += timedelta(days=1)
            latest_start = max(start, window_start)
            earliest_end = min(end, window_end)
            if earliest_end > latest_start:
                overlap += (earliest_end - latest_start).total_seconds() / SECONDS_PER_HOUR
            day += timedelta(days=1)
        return overlap

    def classify(self, start: datetime, end: datetime) -> HoursBreakdown:
        if end < start:
            raise ValidationError("Time-out must not be earlier than time-in")
        hours_worked = (end - start).total_seconds() / SECONDS_PER_HOUR
        if hours_worked > self.max_shift_hours:
            raise ValidationError(f"A shift cannot exceed {self.max_shift_hours:g} hours")

        regular = min(hours_worked, self.regular_hours_cap)
        overtime = max(0.0, hours_worked - self.regular_hours_cap)

        if self.night_diff_mode == "overlap":
            night = self.night_overlap_hours(start, end) * self.night_diff_rate
        elif self.in_night_window(start) or self.in_night_window(end):
            # Flat premium on the whole shift, compatible with historical records
            night = hours_worked * self.night_diff_rate
        else:
            night = 0.0

        return HoursBreakdown(regular_hours=regular, overtime_hours=overtime, night_differential=night)


def order_timelogs(timelogs: Iterable[TimelogLike]) -> list:
    return sorted(timelogs, key=lambda log: (log.timestamp, log.id or 0))


def find_shift_bounds(timelogs: Sequence[TimelogLike]) -> Optional[tuple[datetime, datetime]]:
    ordered = order_timelogs(timelogs)
    start = next((log for log in ordered if log.mode == "in"), None)
    end = next((log for log in ordered if log.mode == "out"), None)
    if start is None or end is None:
        return None
    return start.timestamp, end.timestamp


def compute_dtr_hours(timelogs: Sequence[TimelogLike], rule: ShiftHoursRule) -> Optional[HoursBreakdown]:
    """Hours for one DTR, or None when the in/out pair is incomplete."""
    bounds = find_shift_bounds(timelogs)
    if bounds is None:
        return None
    return rule.classify(*bounds)


def to_local_naive(moment: datetime, timezone: str) -> datetime:
    """Store timestamps as naive local wall time; aware input is converted first."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(ZoneInfo(timezone)).replace(tzinfo=None)

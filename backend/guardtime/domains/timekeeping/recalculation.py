"""Bottom-up recalculation of the timekeeping hierarchy.

Every mutation below the timesheet level ends here: the owning timesheet row
is locked, the DTR is recomputed from its timelogs (unless the caller edited
the hours by hand) and the timesheet totals are re-summed from all of its
DTRs. Nothing is committed; the request handler owns the transaction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from guardtime.core.config import settings
from guardtime.core.errors import AggregationFailure, NotFoundError
from guardtime.core.logging import get_logger
from guardtime.core.observability import get_meter, get_tracer
from guardtime.domains.timekeeping.hours import HoursBreakdown, ShiftHoursRule, compute_dtr_hours
from guardtime.models import DTR, Timelog, Timesheet

logger = get_logger(__name__)
tracer = get_tracer(__name__)
meter = get_meter(__name__)
recalculation_counter = meter.create_counter(
    "guardtime.recalculations",
    unit="1",
    description="Timesheet aggregations performed, by triggering operation",
)

# Float sums drift in the last bits; anything below this is treated as equal
TOLERANCE = 1e-6


@dataclass
class Inconsistency:
    timesheet_id: int
    stored: HoursBreakdown
    expected: HoursBreakdown


def breakdown_of(record) -> HoursBreakdown:
    return HoursBreakdown(
        regular_hours=record.regular_hours or 0.0,
        overtime_hours=record.overtime_hours or 0.0,
        night_differential=record.night_differential or 0.0,
    )


def _differs(left: HoursBreakdown, right: HoursBreakdown) -> bool:
    return (
        abs(left.regular_hours - right.regular_hours) > TOLERANCE
        or abs(left.overtime_hours - right.overtime_hours) > TOLERANCE
        or abs(left.night_differential - right.night_differential) > TOLERANCE
    )


class RecalculationService:
    def __init__(self, db: Session, rule: Optional[ShiftHoursRule] = None):
        self.db = db
        self.rule = rule or ShiftHoursRule.from_settings(settings)

    def lock_timesheet(self, timesheet_id: int, origin: str) -> Timesheet:
        """Take the row lock that serializes every aggregation under one timesheet."""
        timesheet = (
            self.db.query(Timesheet)
            .filter(Timesheet.id == timesheet_id)
            .with_for_update()
            .one_or_none()
        )
        if timesheet is None:
            raise AggregationFailure("timesheet", timesheet_id, origin)
        return timesheet

    def lock_for_dtr(self, dtr_id: int, origin: str) -> tuple[DTR, Timesheet]:
        dtr = self.db.get(DTR, dtr_id)
        if dtr is None:
            raise AggregationFailure("dtr", dtr_id, origin)
        return dtr, self.lock_timesheet(dtr.timesheet_id, origin)

    def recompute_dtr(self, dtr: DTR) -> bool:
        """Rewrite the DTR hours from its timelogs; False when the in/out pair is incomplete."""
        timelogs = (
            self.db.query(Timelog)
            .filter(Timelog.dtr_id == dtr.id)
            .order_by(Timelog.timestamp.asc(), Timelog.id.asc())
            .all()
        )
        hours = compute_dtr_hours(timelogs, self.rule)
        if hours is None:
            logger.info("hours_skipped", dtr_id=dtr.id, timelogs=len(timelogs))
            return False

        dtr.regular_hours = hours.regular_hours
        dtr.overtime_hours = hours.overtime_hours
        dtr.night_differential = hours.night_differential
        logger.info(
            "dtr_recalculated",
            dtr_id=dtr.id,
            regular_hours=hours.regular_hours,
            overtime_hours=hours.overtime_hours,
            night_differential=hours.night_differential,
        )
        return True

    def sum_dtrs(self, timesheet_id: int) -> HoursBreakdown:
        dtrs = self.db.query(DTR).filter(DTR.timesheet_id == timesheet_id).all()
        total = HoursBreakdown.zero()
        for dtr in dtrs:
            total = total + breakdown_of(dtr)
        return total

    def aggregate_timesheet(self, timesheet: Timesheet) -> HoursBreakdown:
        # Pending DTR writes and deletes must be visible to the sibling query
        self.db.flush()
        totals = self.sum_dtrs(timesheet.id)
        timesheet.regular_hours = totals.regular_hours
        timesheet.overtime_hours = totals.overtime_hours
        timesheet.night_differential = totals.night_differential
        self.db.flush()
        logger.info(
            "timesheet_aggregated",
            timesheet_id=timesheet.id,
            regular_hours=totals.regular_hours,
            overtime_hours=totals.overtime_hours,
            night_differential=totals.night_differential,
        )
        return totals

    def propagate_from_dtr(self, dtr_id: int, origin: str, recompute: bool = True) -> tuple[DTR, Timesheet]:
        """Recompute one DTR (optionally) and re-aggregate its timesheet.

        ``recompute=False`` is the manual-correction path: the DTR keeps the
        hours the caller wrote and only the timesheet totals are refreshed.
        """
        with tracer.start_as_current_span("timesheet.recalculate") as span:
            span.set_attribute("guardtime.origin", origin)
            span.set_attribute("guardtime.dtr_id", dtr_id)
            self.db.flush()
            dtr, timesheet = self.lock_for_dtr(dtr_id, origin)
            span.set_attribute("guardtime.timesheet_id", timesheet.id)
            if recompute:
                self.recompute_dtr(dtr)
            self.aggregate_timesheet(timesheet)
            recalculation_counter.add(1, {"origin": origin})
            return dtr, timesheet

    def propagate_from_timelog(self, timelog_id: int, origin: str) -> tuple[Timelog, DTR, Timesheet]:
        self.db.flush()
        timelog = self.db.get(Timelog, timelog_id)
        if timelog is None:
            raise AggregationFailure("timelog", timelog_id, origin)
        dtr, timesheet = self.propagate_from_dtr(timelog.dtr_id, origin)
        return timelog, dtr, timesheet

    def reaggregate(self, timesheet_id: int, origin: str) -> Timesheet:
        """Re-sum a timesheet after one of its DTRs went away."""
        with tracer.start_as_current_span("timesheet.recalculate") as span:
            span.set_attribute("guardtime.origin", origin)
            span.set_attribute("guardtime.timesheet_id", timesheet_id)
            timesheet = self.lock_timesheet(timesheet_id, origin)
            self.aggregate_timesheet(timesheet)
            recalculation_counter.add(1, {"origin": origin})
            return timesheet

    def recalculate_timesheet(self, timesheet_id: int) -> Timesheet:
        """Recompute every DTR of a timesheet from its timelogs, then re-sum it."""
        if self.db.get(Timesheet, timesheet_id) is None:
            raise NotFoundError("Timesheet", timesheet_id)
        timesheet = self.lock_timesheet(timesheet_id, "maintenance")
        dtrs = self.db.query(DTR).filter(DTR.timesheet_id == timesheet_id).order_by(DTR.date, DTR.id).all()
        for dtr in dtrs:
            self.recompute_dtr(dtr)
        self.aggregate_timesheet(timesheet)
        recalculation_counter.add(1, {"origin": "maintenance"})
        return timesheet

    def find_inconsistent_timesheets(self) -> list[Inconsistency]:
        found = []
        for timesheet in self.db.query(Timesheet).order_by(Timesheet.id).all():
            expected = self.sum_dtrs(timesheet.id)
            stored = breakdown_of(timesheet)
            if _differs(stored, expected):
                found.append(Inconsistency(timesheet_id=timesheet.id, stored=stored, expected=expected))
        if found:
            logger.warning("timesheets_inconsistent", count=len(found))
        return found

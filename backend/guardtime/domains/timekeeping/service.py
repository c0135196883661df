"""Mutation entry points for the timekeeping hierarchy.

Each function validates the target, applies the change and hands off to
:class:`RecalculationService`. Snapshots are taken before the caller commits
so deleted rows can still be reported back.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from guardtime.core.config import settings
from guardtime.core.errors import AggregationFailure, ConflictError, NotFoundError
from guardtime.core.logging import get_logger
from guardtime.domains.timekeeping.hours import to_local_naive
from guardtime.domains.timekeeping.recalculation import RecalculationService
from guardtime.domains.timekeeping.schemas import (
    Cascade,
    ClockEventCreate,
    ClockEventOut,
    ClockEventUpdate,
    DTRCreate,
    DTROut,
    DTRUpdate,
    TimelogCreate,
    TimelogOut,
    TimelogUpdate,
    TimesheetCreate,
    TimesheetOut,
    TimesheetUpdate,
)
from guardtime.models import DTR, ClockEvent, Timelog, Timesheet

logger = get_logger(__name__)


def local_now() -> datetime:
    return datetime.now(ZoneInfo(settings.timezone)).replace(tzinfo=None)


def local_time(moment: Optional[datetime]) -> datetime:
    if moment is None:
        return local_now()
    return to_local_naive(moment, settings.timezone)


def _get_or_404(db: Session, model, entity_id: int, entity: str):
    row = db.get(model, entity_id)
    if row is None:
        raise NotFoundError(entity, entity_id)
    return row


def _cascade(
    timesheet: Timesheet,
    dtr: Optional[DTR] = None,
    timelog: Optional[Timelog] = None,
    clock_event: Optional[ClockEvent] = None,
) -> Cascade:
    return Cascade(
        timesheet=TimesheetOut.model_validate(timesheet),
        dtr=DTROut.model_validate(dtr) if dtr is not None else None,
        timelog=TimelogOut.model_validate(timelog) if timelog is not None else None,
        clock_event=ClockEventOut.model_validate(clock_event) if clock_event is not None else None,
    )


# Timesheets


def get_timesheet(db: Session, timesheet_id: int) -> Timesheet:
    return _get_or_404(db, Timesheet, timesheet_id, "Timesheet")


def list_timesheets(db: Session) -> list[Timesheet]:
    return db.query(Timesheet).order_by(Timesheet.created_at.desc(), Timesheet.id.desc()).all()


def create_timesheet(db: Session, payload: TimesheetCreate) -> Timesheet:
    timesheet = Timesheet(
        employee_name=payload.employee_name,
        pay_period=payload.pay_period,
        detachment=payload.detachment,
        shift=payload.shift,
        regular_hours=0.0,
        overtime_hours=0.0,
        night_differential=0.0,
    )
    db.add(timesheet)
    db.flush()
    logger.info("timesheet_created", timesheet_id=timesheet.id, employee_name=timesheet.employee_name)
    return timesheet


def update_timesheet(db: Session, timesheet_id: int, payload: TimesheetUpdate) -> Timesheet:
    # Totals are owned by the recalculation service and never taken from the client
    timesheet = get_timesheet(db, timesheet_id)
    timesheet.employee_name = payload.employee_name
    timesheet.pay_period = payload.pay_period
    timesheet.detachment = payload.detachment
    timesheet.shift = payload.shift
    db.flush()
    return timesheet


def delete_timesheet(db: Session, timesheet_id: int) -> TimesheetOut:
    timesheet = get_timesheet(db, timesheet_id)
    snapshot = TimesheetOut.model_validate(timesheet)
    db.delete(timesheet)
    db.flush()
    logger.info("timesheet_deleted", timesheet_id=timesheet_id)
    return snapshot


def list_timesheet_dtrs(db: Session, timesheet_id: int) -> list[DTR]:
    get_timesheet(db, timesheet_id)
    return db.query(DTR).filter(DTR.timesheet_id == timesheet_id).order_by(DTR.date.asc(), DTR.id.asc()).all()


# DTRs


def get_dtr(db: Session, dtr_id: int) -> DTR:
    return _get_or_404(db, DTR, dtr_id, "DTR")


def create_dtr(db: Session, payload: DTRCreate) -> Cascade:
    recalc = RecalculationService(db)
    get_timesheet(db, payload.timesheet_id)
    recalc.lock_timesheet(payload.timesheet_id, "dtr.create")

    dtr = DTR(
        timesheet_id=payload.timesheet_id,
        date=payload.date or local_now().date(),
        regular_hours=payload.regular_hours,
        overtime_hours=payload.overtime_hours,
        night_differential=payload.night_differential,
    )
    db.add(dtr)
    db.flush()
    dtr, timesheet = recalc.propagate_from_dtr(dtr.id, "dtr.create", recompute=False)
    return _cascade(timesheet, dtr=dtr)


def update_dtr(db: Session, dtr_id: int, payload: DTRUpdate) -> Cascade:
    recalc = RecalculationService(db)
    dtr = get_dtr(db, dtr_id)
    recalc.lock_timesheet(dtr.timesheet_id, "dtr.update")

    if payload.date is not None:
        dtr.date = payload.date
    dtr.regular_hours = payload.regular_hours
    dtr.overtime_hours = payload.overtime_hours
    dtr.night_differential = payload.night_differential
    logger.info("dtr_hours_overridden", dtr_id=dtr.id)

    dtr, timesheet = recalc.propagate_from_dtr(dtr.id, "dtr.update", recompute=False)
    return _cascade(timesheet, dtr=dtr)


def delete_dtr(db: Session, dtr_id: int) -> Cascade:
    recalc = RecalculationService(db)
    dtr = get_dtr(db, dtr_id)
    timesheet_id = dtr.timesheet_id
    recalc.lock_timesheet(timesheet_id, "dtr.delete")

    snapshot = DTROut.model_validate(dtr)
    db.delete(dtr)
    timesheet = recalc.reaggregate(timesheet_id, "dtr.delete")
    return _cascade(timesheet, dtr=snapshot)


def list_dtr_timelogs(db: Session, dtr_id: int) -> list[Timelog]:
    get_dtr(db, dtr_id)
    return (
        db.query(Timelog)
        .filter(Timelog.dtr_id == dtr_id)
        .order_by(Timelog.timestamp.asc(), Timelog.id.asc())
        .all()
    )


# Timelogs


def get_timelog(db: Session, timelog_id: int) -> Timelog:
    return _get_or_404(db, Timelog, timelog_id, "Timelog")


def create_timelog(db: Session, payload: TimelogCreate) -> Cascade:
    recalc = RecalculationService(db)
    get_dtr(db, payload.dtr_id)
    recalc.lock_for_dtr(payload.dtr_id, "timelog.create")

    timestamp = local_time(payload.timestamp)
    timelog = Timelog(dtr_id=payload.dtr_id, mode=payload.mode, timestamp=timestamp)
    db.add(timelog)
    db.flush()
    clock_event = None
    if payload.with_clock_event:
        clock_event = ClockEvent(timelog_id=timelog.id, clock_time=timestamp)
        db.add(clock_event)

    timelog, dtr, timesheet = recalc.propagate_from_timelog(timelog.id, "timelog.create")
    logger.info("timelog_created", timelog_id=timelog.id, dtr_id=dtr.id, mode=timelog.mode)
    return _cascade(timesheet, dtr=dtr, timelog=timelog, clock_event=clock_event)


def update_timelog(db: Session, timelog_id: int, payload: TimelogUpdate) -> Cascade:
    recalc = RecalculationService(db)
    timelog = get_timelog(db, timelog_id)
    recalc.lock_for_dtr(timelog.dtr_id, "timelog.update")

    timelog.mode = payload.mode
    timelog.timestamp = local_time(payload.timestamp)
    # The clock event mirrors its timelog
    for clock_event in timelog.clock_events:
        clock_event.clock_time = timelog.timestamp

    timelog, dtr, timesheet = recalc.propagate_from_timelog(timelog.id, "timelog.update")
    return _cascade(timesheet, dtr=dtr, timelog=timelog)


def delete_timelog(db: Session, timelog_id: int) -> Cascade:
    recalc = RecalculationService(db)
    timelog = get_timelog(db, timelog_id)
    dtr_id = timelog.dtr_id
    recalc.lock_for_dtr(dtr_id, "timelog.delete")

    snapshot = TimelogOut.model_validate(timelog)
    db.delete(timelog)
    dtr, timesheet = recalc.propagate_from_dtr(dtr_id, "timelog.delete")
    return _cascade(timesheet, dtr=dtr, timelog=snapshot)


def list_timelog_clock_events(db: Session, timelog_id: int) -> list[ClockEvent]:
    get_timelog(db, timelog_id)
    return db.query(ClockEvent).filter(ClockEvent.timelog_id == timelog_id).order_by(ClockEvent.id).all()


# Clock events


def get_clock_event(db: Session, clock_event_id: int) -> ClockEvent:
    return _get_or_404(db, ClockEvent, clock_event_id, "Clock event")


def create_clock_event(db: Session, payload: ClockEventCreate) -> Cascade:
    recalc = RecalculationService(db)
    timelog = get_timelog(db, payload.timelog_id)
    recalc.lock_for_dtr(timelog.dtr_id, "clockevent.create")

    existing = db.query(ClockEvent).filter(ClockEvent.timelog_id == timelog.id).first()
    if existing is not None:
        raise ConflictError("Timelog already has a clock event")

    clock_event = ClockEvent(timelog_id=timelog.id, clock_time=local_time(payload.clock_time))
    db.add(clock_event)
    timelog.timestamp = clock_event.clock_time

    timelog, dtr, timesheet = recalc.propagate_from_timelog(timelog.id, "clockevent.create")
    logger.info("clock_event_created", clock_event_id=clock_event.id, timelog_id=timelog.id)
    return _cascade(timesheet, dtr=dtr, timelog=timelog, clock_event=clock_event)


def update_clock_event(db: Session, clock_event_id: int, payload: ClockEventUpdate) -> Cascade:
    recalc = RecalculationService(db)
    clock_event = get_clock_event(db, clock_event_id)
    timelog = db.get(Timelog, clock_event.timelog_id)
    if timelog is None:
        raise AggregationFailure("timelog", clock_event.timelog_id, "clockevent.update")
    recalc.lock_for_dtr(timelog.dtr_id, "clockevent.update")

    clock_event.clock_time = local_time(payload.clock_time)
    timelog.timestamp = clock_event.clock_time

    timelog, dtr, timesheet = recalc.propagate_from_timelog(timelog.id, "clockevent.update")
    return _cascade(timesheet, dtr=dtr, timelog=timelog, clock_event=clock_event)


def delete_clock_event(db: Session, clock_event_id: int) -> Cascade:
    recalc = RecalculationService(db)
    clock_event = get_clock_event(db, clock_event_id)
    timelog_id = clock_event.timelog_id
    timelog = db.get(Timelog, timelog_id)
    if timelog is None:
        raise AggregationFailure("timelog", timelog_id, "clockevent.delete")
    recalc.lock_for_dtr(timelog.dtr_id, "clockevent.delete")

    snapshot = ClockEventOut.model_validate(clock_event)
    db.delete(clock_event)

    timelog, dtr, timesheet = recalc.propagate_from_timelog(timelog_id, "clockevent.delete")
    return _cascade(timesheet, dtr=dtr, timelog=timelog, clock_event=snapshot)

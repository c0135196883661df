from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from guardtime.core.security import require_caller, require_caller_with_role
from guardtime.db.session import get_session
from guardtime.domains.timekeeping import service
from guardtime.domains.timekeeping.schemas import (
    Cascade,
    ClockEventCreate,
    ClockEventEnvelope,
    ClockEventListEnvelope,
    ClockEventOut,
    ClockEventUpdate,
    DTRCreate,
    DTREnvelope,
    DTRListEnvelope,
    DTROut,
    DTRUpdate,
    TimelogCreate,
    TimelogEnvelope,
    TimelogListEnvelope,
    TimelogOut,
    TimelogUpdate,
    TimesheetCreate,
    TimesheetEnvelope,
    TimesheetListEnvelope,
    TimesheetOut,
    TimesheetUpdate,
)
from guardtime.models import User

timesheet_router = APIRouter(prefix="/timesheets", tags=["timesheets"])
dtr_router = APIRouter(prefix="/dtrs", tags=["dtrs"])
timelog_router = APIRouter(prefix="/timelogs", tags=["timelogs"])
clock_event_router = APIRouter(prefix="/clockevents", tags=["clockevents"])

routers = (timesheet_router, dtr_router, timelog_router, clock_event_router)

require_timekeeper = require_caller_with_role("timekeeper")


# Timesheets


@timesheet_router.get("", response_model=TimesheetListEnvelope)
def list_timesheets(db: Session = Depends(get_session), caller: User = Depends(require_caller)):
    rows = service.list_timesheets(db)
    return TimesheetListEnvelope(timesheets=[TimesheetOut.model_validate(row) for row in rows])


@timesheet_router.post("/create", response_model=TimesheetEnvelope, status_code=201)
def create_timesheet(
    payload: TimesheetCreate,
    db: Session = Depends(get_session),
    caller: User = Depends(require_timekeeper),
):
    timesheet = service.create_timesheet(db, payload)
    db.commit()
    db.refresh(timesheet)
    return TimesheetEnvelope(timesheet=TimesheetOut.model_validate(timesheet))


@timesheet_router.get("/{timesheet_id}", response_model=TimesheetEnvelope)
def get_timesheet(timesheet_id: int, db: Session = Depends(get_session), caller: User = Depends(require_caller)):
    return TimesheetEnvelope(timesheet=TimesheetOut.model_validate(service.get_timesheet(db, timesheet_id)))


@timesheet_router.put("/{timesheet_id}", response_model=TimesheetEnvelope)
def update_timesheet(
    timesheet_id: int,
    payload: TimesheetUpdate,
    db: Session = Depends(get_session),
    caller: User = Depends(require_timekeeper),
):
    timesheet = service.update_timesheet(db, timesheet_id, payload)
    db.commit()
    db.refresh(timesheet)
    return TimesheetEnvelope(timesheet=TimesheetOut.model_validate(timesheet))


@timesheet_router.delete("/{timesheet_id}", response_model=Cascade, response_model_exclude_none=True)
def delete_timesheet(
    timesheet_id: int,
    db: Session = Depends(get_session),
    caller: User = Depends(require_timekeeper),
):
    snapshot = service.delete_timesheet(db, timesheet_id)
    db.commit()
    return Cascade(timesheet=snapshot)


@timesheet_router.get("/{timesheet_id}/dtrs", response_model=DTRListEnvelope)
def list_timesheet_dtrs(
    timesheet_id: int,
    db: Session = Depends(get_session),
    caller: User = Depends(require_caller),
):
    rows = service.list_timesheet_dtrs(db, timesheet_id)
    return DTRListEnvelope(dtrs=[DTROut.model_validate(row) for row in rows])


# DTRs


@dtr_router.post("/create", response_model=Cascade, response_model_exclude_none=True, status_code=201)
def create_dtr(payload: DTRCreate, db: Session = Depends(get_session), caller: User = Depends(require_timekeeper)):
    result = service.create_dtr(db, payload)
    db.commit()
    return result


@dtr_router.get("/{dtr_id}", response_model=DTREnvelope)
def get_dtr(dtr_id: int, db: Session = Depends(get_session), caller: User = Depends(require_caller)):
    return DTREnvelope(dtr=DTROut.model_validate(service.get_dtr(db, dtr_id)))


@dtr_router.put("/{dtr_id}", response_model=Cascade, response_model_exclude_none=True)
def update_dtr(
    dtr_id: int,
    payload: DTRUpdate,
    db: Session = Depends(get_session),
    caller: User = Depends(require_timekeeper),
):
    result = service.update_dtr(db, dtr_id, payload)
    db.commit()
    return result


@dtr_router.delete("/{dtr_id}", response_model=Cascade, response_model_exclude_none=True)
def delete_dtr(dtr_id: int, db: Session = Depends(get_session), caller: User = Depends(require_timekeeper)):
    result = service.delete_dtr(db, dtr_id)
    db.commit()
    return result


@dtr_router.get("/{dtr_id}/timelogs", response_model=TimelogListEnvelope)
def list_dtr_timelogs(dtr_id: int, db: Session = Depends(get_session), caller: User = Depends(require_caller)):
    rows = service.list_dtr_timelogs(db, dtr_id)
    return TimelogListEnvelope(timelogs=[TimelogOut.model_validate(row) for row in rows])


# Timelogs


@timelog_router.post("/create", response_model=Cascade, response_model_exclude_none=True, status_code=201)
def create_timelog(
    payload: TimelogCreate,
    db: Session = Depends(get_session),
    caller: User = Depends(require_timekeeper),
):
    result = service.create_timelog(db, payload)
    db.commit()
    return result


@timelog_router.get("/{timelog_id}", response_model=TimelogEnvelope)
def get_timelog(timelog_id: int, db: Session = Depends(get_session), caller: User = Depends(require_caller)):
    return TimelogEnvelope(timelog=TimelogOut.model_validate(service.get_timelog(db, timelog_id)))


@timelog_router.put("/{timelog_id}", response_model=Cascade, response_model_exclude_none=True)
def update_timelog(
    timelog_id: int,
    payload: TimelogUpdate,
    db: Session = Depends(get_session),
    caller: User = Depends(require_timekeeper),
):
    result = service.update_timelog(db, timelog_id, payload)
    db.commit()
    return result


@timelog_router.delete("/{timelog_id}", response_model=Cascade, response_model_exclude_none=True)
def delete_timelog(timelog_id: int, db: Session = Depends(get_session), caller: User = Depends(require_timekeeper)):
    result = service.delete_timelog(db, timelog_id)
    db.commit()
    return result


@timelog_router.get("/{timelog_id}/clockevents", response_model=ClockEventListEnvelope)
def list_timelog_clock_events(
    timelog_id: int,
    db: Session = Depends(get_session),
    caller: User = Depends(require_caller),
):
    rows = service.list_timelog_clock_events(db, timelog_id)
    return ClockEventListEnvelope(clock_events=[ClockEventOut.model_validate(row) for row in rows])


# Clock events


@clock_event_router.post("/create", response_model=Cascade, response_model_exclude_none=True, status_code=201)
def create_clock_event(
    payload: ClockEventCreate,
    db: Session = Depends(get_session),
    caller: User = Depends(require_timekeeper),
):
    result = service.create_clock_event(db, payload)
    db.commit()
    return result


@clock_event_router.get("/{clock_event_id}", response_model=ClockEventEnvelope)
def get_clock_event(clock_event_id: int, db: Session = Depends(get_session), caller: User = Depends(require_caller)):
    return ClockEventEnvelope(clock_event=ClockEventOut.model_validate(service.get_clock_event(db, clock_event_id)))


@clock_event_router.put("/{clock_event_id}", response_model=Cascade, response_model_exclude_none=True)
def update_clock_event(
    clock_event_id: int,
    payload: ClockEventUpdate,
    db: Session = Depends(get_session),
    caller: User = Depends(require_timekeeper),
):
    result = service.update_clock_event(db, clock_event_id, payload)
    db.commit()
    return result


@clock_event_router.delete("/{clock_event_id}", response_model=Cascade, response_model_exclude_none=True)
def delete_clock_event(
    clock_event_id: int,
    db: Session = Depends(get_session),
    caller: User = Depends(require_timekeeper),
):
    result = service.delete_clock_event(db, clock_event_id)
    db.commit()
    return result

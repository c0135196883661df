from __future__ import annotations

import datetime as dt

from pydantic import Field, field_validator

from guardtime.core.schemas import Mode, RequestModel, ResponseModel, Shift

# Requests


class TimesheetCreate(RequestModel):
    employee_name: str = Field(min_length=1)
    pay_period: str = Field(min_length=1)
    detachment: str = Field(min_length=1)
    shift: Shift

    @field_validator("employee_name", "pay_period", "detachment")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class TimesheetUpdate(TimesheetCreate):
    pass


class DTRCreate(RequestModel):
    timesheet_id: int
    date: dt.date | None = None
    regular_hours: float = Field(default=0.0, ge=0)
    overtime_hours: float = Field(default=0.0, ge=0)
    night_differential: float = Field(default=0.0, ge=0)


class DTRUpdate(RequestModel):
    date: dt.date | None = None
    regular_hours: float = Field(ge=0)
    overtime_hours: float = Field(ge=0)
    night_differential: float = Field(ge=0)


class TimelogCreate(RequestModel):
    dtr_id: int
    mode: Mode = "in"
    timestamp: dt.datetime | None = None
    with_clock_event: bool = False


class TimelogUpdate(RequestModel):
    mode: Mode
    timestamp: dt.datetime


class ClockEventCreate(RequestModel):
    timelog_id: int
    clock_time: dt.datetime | None = None


class ClockEventUpdate(RequestModel):
    clock_time: dt.datetime


# Responses


class TimesheetOut(ResponseModel):
    id: int
    employee_name: str
    pay_period: str
    detachment: str
    shift: str
    regular_hours: float
    overtime_hours: float
    night_differential: float
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class DTROut(ResponseModel):
    id: int
    timesheet_id: int
    date: dt.date
    regular_hours: float
    overtime_hours: float
    night_differential: float
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class TimelogOut(ResponseModel):
    id: int
    dtr_id: int
    mode: str
    timestamp: dt.datetime
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class ClockEventOut(ResponseModel):
    id: int
    timelog_id: int
    clock_time: dt.datetime
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class TimesheetEnvelope(ResponseModel):
    timesheet: TimesheetOut


class TimesheetListEnvelope(ResponseModel):
    timesheets: list[TimesheetOut]


class DTREnvelope(ResponseModel):
    dtr: DTROut


class DTRListEnvelope(ResponseModel):
    dtrs: list[DTROut]


class TimelogEnvelope(ResponseModel):
    timelog: TimelogOut


class TimelogListEnvelope(ResponseModel):
    timelogs: list[TimelogOut]


class ClockEventEnvelope(ResponseModel):
    clock_event: ClockEventOut


class ClockEventListEnvelope(ResponseModel):
    clock_events: list[ClockEventOut]


class Cascade(ResponseModel):
    """Ancestor snapshot returned by every mutation below the timesheet level."""

    success: bool = True
    clock_event: ClockEventOut | None = None
    timelog: TimelogOut | None = None
    dtr: DTROut | None = None
    timesheet: TimesheetOut | None = None

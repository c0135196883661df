from datetime import date, datetime

from sqlalchemy.orm import Session

from guardtime.core.security import hash_password
from guardtime.domains.timekeeping.recalculation import RecalculationService
from guardtime.models import DTR, ClockEvent, Employee, PayPeriod, Timelog, Timesheet, User


def seed(session: Session) -> None:
    admin = User(email="admin@example.com", hashed_password=hash_password("change-me-now"), role="admin")
    timekeeper = User(
        email="timekeeper@example.com", hashed_password=hash_password("change-me-now"), role="timekeeper"
    )
    session.add_all([admin, timekeeper])

    guard = Employee(
        employee_no="G-0001",
        first_name="Juan",
        last_name="Dela Cruz",
        classification="GUARD",
        base_salary=16000,
        hourly_rate=76.92,
        daily_rate=615.38,
        hire_date=date(2022, 6, 1),
    )
    relief = Employee(
        employee_no="G-0002",
        first_name="Maria",
        last_name="Santos",
        classification="GUARD",
        base_salary=16000,
        hourly_rate=76.92,
        daily_rate=615.38,
        hire_date=date(2023, 2, 15),
    )
    period = PayPeriod(code="2025-01-A", start_date=date(2025, 1, 1), end_date=date(2025, 1, 15))
    session.add_all([guard, relief, period])

    timesheet = Timesheet(
        employee_name=guard.full_name,
        pay_period=period.code,
        detachment="Makati Main Gate",
        shift="Night Shift",
    )
    session.add(timesheet)
    session.flush()

    shifts = [
        (date(2025, 1, 2), datetime(2025, 1, 2, 22, 0), datetime(2025, 1, 3, 6, 0)),
        (date(2025, 1, 3), datetime(2025, 1, 3, 22, 0), datetime(2025, 1, 4, 8, 0)),
    ]
    for work_date, time_in, time_out in shifts:
        dtr = DTR(timesheet_id=timesheet.id, date=work_date)
        session.add(dtr)
        session.flush()
        for mode, moment in (("in", time_in), ("out", time_out)):
            timelog = Timelog(dtr_id=dtr.id, mode=mode, timestamp=moment)
            session.add(timelog)
            session.flush()
            session.add(ClockEvent(timelog_id=timelog.id, clock_time=moment))

    RecalculationService(session).recalculate_timesheet(timesheet.id)
    session.commit()

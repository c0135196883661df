from datetime import date, datetime

import pytest

from guardtime.core.errors import AggregationFailure, NotFoundError
from guardtime.domains.timekeeping.recalculation import RecalculationService
from guardtime.models import DTR, Timelog, Timesheet


def _timesheet(db, **totals) -> Timesheet:
    timesheet = Timesheet(
        employee_name="Maria Santos",
        pay_period="2025-01-A",
        detachment="BGC Tower 2",
        shift="Night Shift",
        **totals,
    )
    db.add(timesheet)
    db.flush()
    return timesheet


def _dtr_with_shift(db, timesheet_id: int, time_in: datetime, time_out: datetime, **hours) -> DTR:
    dtr = DTR(timesheet_id=timesheet_id, date=time_in.date(), **hours)
    db.add(dtr)
    db.flush()
    db.add_all(
        [
            Timelog(dtr_id=dtr.id, mode="in", timestamp=time_in),
            Timelog(dtr_id=dtr.id, mode="out", timestamp=time_out),
        ]
    )
    db.flush()
    return dtr


def test_timesheet_totals_match_dtr_sums_after_every_mutation(api, client, timekeeper_headers):
    timesheet = api.timesheet()
    first = api.shift(timesheet["id"], "2025-01-02", "2025-01-02T08:00:00", "2025-01-02T17:00:00")
    api.shift(timesheet["id"], "2025-01-03", "2025-01-03T22:00:00", "2025-01-04T07:00:00")
    client.put(
        f"/timelogs/{first['timelog']['id']}",
        json={"mode": "out", "timestamp": "2025-01-02T19:00:00"},
        headers=timekeeper_headers,
    )

    dtrs = api.get(f"/timesheets/{timesheet['id']}/dtrs")["dtrs"]
    stored = api.get(f"/timesheets/{timesheet['id']}")["timesheet"]

    for field in ("regularHours", "overtimeHours", "nightDifferential"):
        assert stored[field] == pytest.approx(sum(dtr[field] for dtr in dtrs))
    assert stored["regularHours"] == 16
    assert stored["overtimeHours"] == 4
    assert stored["nightDifferential"] == pytest.approx(0.9)


def test_orphaned_timelog_fails_with_level_and_rolls_back(client, timekeeper_headers, db_session):
    orphan = Timelog(dtr_id=999, mode="in", timestamp=datetime(2025, 1, 2, 8))
    db_session.add(orphan)
    db_session.commit()

    response = client.put(
        f"/timelogs/{orphan.id}",
        json={"mode": "out", "timestamp": "2025-01-02T17:00:00"},
        headers=timekeeper_headers,
    )

    assert response.status_code == 500
    body = response.json()
    assert body["level"] == "dtr"
    assert body["error"].startswith("Recalculation failed")
    db_session.expire_all()
    assert db_session.get(Timelog, orphan.id).mode == "in"


def test_orphaned_dtr_fails_at_timesheet_level(client, timekeeper_headers, db_session):
    orphan = DTR(timesheet_id=555, date=date(2025, 1, 2))
    db_session.add(orphan)
    db_session.commit()

    response = client.put(
        f"/dtrs/{orphan.id}",
        json={"regularHours": 8, "overtimeHours": 0, "nightDifferential": 0},
        headers=timekeeper_headers,
    )

    assert response.status_code == 500
    assert response.json()["level"] == "timesheet"


def test_propagate_from_missing_dtr_raises(db_session):
    with pytest.raises(AggregationFailure) as excinfo:
        RecalculationService(db_session).propagate_from_dtr(12345, "test")

    assert excinfo.value.level == "dtr"
    assert excinfo.value.origin == "test"


def test_recalculate_timesheet_repairs_stale_hours(db_session):
    timesheet = _timesheet(db_session, regular_hours=3.0)
    _dtr_with_shift(db_session, timesheet.id, datetime(2025, 1, 2, 8), datetime(2025, 1, 2, 17), regular_hours=1.0)
    _dtr_with_shift(db_session, timesheet.id, datetime(2025, 1, 3, 22), datetime(2025, 1, 4, 6))

    RecalculationService(db_session).recalculate_timesheet(timesheet.id)

    assert timesheet.regular_hours == 16
    assert timesheet.overtime_hours == 1
    assert timesheet.night_differential == pytest.approx(0.8)


def test_recalculating_twice_changes_nothing(db_session):
    timesheet = _timesheet(db_session)
    dtr = _dtr_with_shift(db_session, timesheet.id, datetime(2025, 1, 2, 21), datetime(2025, 1, 3, 7, 30))
    recalc = RecalculationService(db_session)

    recalc.recalculate_timesheet(timesheet.id)
    first = (dtr.regular_hours, dtr.overtime_hours, dtr.night_differential, timesheet.regular_hours)
    recalc.recalculate_timesheet(timesheet.id)

    assert (dtr.regular_hours, dtr.overtime_hours, dtr.night_differential, timesheet.regular_hours) == first


def test_recalculate_missing_timesheet_is_not_found(db_session):
    with pytest.raises(NotFoundError):
        RecalculationService(db_session).recalculate_timesheet(404)


def test_find_inconsistent_timesheets_reports_drift(db_session):
    healthy = _timesheet(db_session, regular_hours=8.0)
    db_session.add(DTR(timesheet_id=healthy.id, date=date(2025, 1, 2), regular_hours=8.0))
    drifted = _timesheet(db_session, regular_hours=16.0)
    db_session.add(DTR(timesheet_id=drifted.id, date=date(2025, 1, 2), regular_hours=8.0))
    db_session.flush()

    problems = RecalculationService(db_session).find_inconsistent_timesheets()

    assert [problem.timesheet_id for problem in problems] == [drifted.id]
    assert problems[0].stored.regular_hours == 16
    assert problems[0].expected.regular_hours == 8

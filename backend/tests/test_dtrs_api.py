import pytest


def test_create_dtr_with_explicit_hours_updates_timesheet(api):
    timesheet = api.timesheet()

    cascade = api.dtr(timesheet["id"], "2025-01-02", regularHours=8, overtimeHours=2, nightDifferential=0.5)

    assert cascade["success"] is True
    assert cascade["dtr"]["regularHours"] == 8
    assert cascade["timesheet"]["regularHours"] == 8
    assert cascade["timesheet"]["overtimeHours"] == 2
    assert cascade["timesheet"]["nightDifferential"] == 0.5


def test_create_dtr_defaults_to_zero_hours(api):
    timesheet = api.timesheet()

    cascade = api.dtr(timesheet["id"])

    assert cascade["dtr"]["regularHours"] == 0
    assert cascade["timesheet"]["regularHours"] == 0


def test_create_dtr_requires_timesheet_id(client, timekeeper_headers):
    response = client.post("/dtrs/create", json={"date": "2025-01-02"}, headers=timekeeper_headers)

    assert response.status_code == 400
    assert "timesheetId" in response.json()["error"]


def test_create_dtr_for_missing_timesheet_is_404(client, timekeeper_headers):
    response = client.post("/dtrs/create", json={"timesheetId": 77}, headers=timekeeper_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Timesheet not found"}


def test_negative_hours_are_rejected(api, client, timekeeper_headers):
    timesheet = api.timesheet()

    response = client.post(
        "/dtrs/create",
        json={"timesheetId": timesheet["id"], "regularHours": -1},
        headers=timekeeper_headers,
    )

    assert response.status_code == 400


def test_manual_edit_keeps_caller_values_and_reaggregates(api, client, timekeeper_headers):
    timesheet = api.timesheet()
    first = api.shift(timesheet["id"], "2025-01-02", "2025-01-02T08:00:00", "2025-01-02T17:00:00")
    api.shift(timesheet["id"], "2025-01-03", "2025-01-03T08:00:00", "2025-01-03T16:00:00")

    response = client.put(
        f"/dtrs/{first['dtr']['id']}",
        json={"regularHours": 7.5, "overtimeHours": 0, "nightDifferential": 0},
        headers=timekeeper_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"success", "dtr", "timesheet"}
    # Timelogs still say 9 hours; the manual correction wins
    assert body["dtr"]["regularHours"] == 7.5
    assert body["dtr"]["overtimeHours"] == 0
    assert body["timesheet"]["regularHours"] == 15.5
    assert body["timesheet"]["overtimeHours"] == 0


def test_update_requires_all_hour_fields(api, client, timekeeper_headers):
    timesheet = api.timesheet()
    dtr = api.dtr(timesheet["id"])["dtr"]

    response = client.put(f"/dtrs/{dtr['id']}", json={"regularHours": 8}, headers=timekeeper_headers)

    assert response.status_code == 400


def test_update_missing_dtr_is_404(client, timekeeper_headers):
    response = client.put(
        "/dtrs/999",
        json={"regularHours": 8, "overtimeHours": 0, "nightDifferential": 0},
        headers=timekeeper_headers,
    )

    assert response.status_code == 404
    assert response.json() == {"error": "DTR not found"}


def test_deleting_a_dtr_reaggregates_the_remaining_ones(api, client, timekeeper_headers):
    timesheet = api.timesheet()
    first = api.shift(timesheet["id"], "2025-01-02", "2025-01-02T08:00:00", "2025-01-02T16:00:00")
    second = api.shift(timesheet["id"], "2025-01-03", "2025-01-03T08:00:00", "2025-01-03T16:00:00")
    assert second["timesheet"]["regularHours"] == 16

    response = client.delete(f"/dtrs/{first['dtr']['id']}", headers=timekeeper_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["dtr"]["id"] == first["dtr"]["id"]
    assert body["timesheet"]["regularHours"] == 8
    assert api.get(f"/timesheets/{timesheet['id']}")["timesheet"]["regularHours"] == 8


def test_deleting_a_dtr_removes_its_timelogs_and_clock_events(api, client, timekeeper_headers):
    timesheet = api.timesheet()
    dtr = api.dtr(timesheet["id"])["dtr"]
    timelog = api.timelog(dtr["id"], "in", "2025-01-02T08:00:00", with_clock_event=True)

    client.delete(f"/dtrs/{dtr['id']}", headers=timekeeper_headers)

    assert client.get(f"/timelogs/{timelog['timelog']['id']}", headers=timekeeper_headers).status_code == 404
    assert client.get(f"/clockevents/{timelog['clockEvent']['id']}", headers=timekeeper_headers).status_code == 404


def test_list_timelogs_of_dtr_in_time_order(api):
    timesheet = api.timesheet()
    dtr = api.dtr(timesheet["id"])["dtr"]
    api.timelog(dtr["id"], "out", "2025-01-02T17:00:00")
    api.timelog(dtr["id"], "in", "2025-01-02T08:00:00")

    timelogs = api.get(f"/dtrs/{dtr['id']}/timelogs")["timelogs"]

    assert [log["mode"] for log in timelogs] == ["in", "out"]


@pytest.mark.parametrize("role_headers", ["viewer_headers", "payroll_headers"])
def test_only_timekeepers_edit_dtrs(request, api, client, role_headers):
    timesheet = api.timesheet()
    dtr = api.dtr(timesheet["id"])["dtr"]
    headers = request.getfixturevalue(role_headers)

    response = client.put(
        f"/dtrs/{dtr['id']}",
        json={"regularHours": 8, "overtimeHours": 0, "nightDifferential": 0},
        headers=headers,
    )

    assert response.status_code == 403

import pytest


def _employee(client, headers, employee_no="G-0001", hourly_rate=100.0):
    payload = {
        "employeeNo": employee_no,
        "firstName": "Juan",
        "lastName": "Dela Cruz",
        "hourlyRate": hourly_rate,
        "baseSalary": 16000,
    }
    response = client.post("/employees", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _run(client, headers, code="2025-01-A"):
    period = client.post(
        "/pay-periods",
        json={"code": code, "startDate": "2025-01-01", "endDate": "2025-01-15"},
        headers=headers,
    )
    assert period.status_code == 201, period.text
    run = client.post("/payroll/runs", json={"payPeriodId": period.json()["id"]}, headers=headers)
    assert run.status_code == 201, run.text
    return run.json()


def test_payslip_from_explicit_amounts(client, payroll_headers):
    employee = _employee(client, payroll_headers)
    run = _run(client, payroll_headers)
    item = {
        "employeeId": employee["id"],
        "basicPay": 50000,
        "overtimePay": 5000,
        "allowances": [{"name": "transport", "amount": 1500}, {"name": "meal", "amount": 2000}],
        "sssEe": 1600,
        "philhealthEe": 437.5,
        "hdmfEe": 200,
        "withholdingTax": 8000,
    }

    response = client.post(f"/payroll/runs/{run['id']}/payslips", json={"items": [item]}, headers=payroll_headers)

    assert response.status_code == 200, response.text
    payslip = response.json()["payslips"][0]
    assert payslip["grossPay"] == 58500
    assert payslip["totalDeductions"] == pytest.approx(10237.5)
    assert payslip["netPay"] == pytest.approx(48262.5)
    assert payslip["allowancesTotal"] == 3500
    assert payslip["taxStatus"] == "override"
    assert payslip["status"] == "DRAFT"
    assert payslip["allowancesDetail"] == [
        {"name": "transport", "amount": 1500},
        {"name": "meal", "amount": 2000},
    ]


def test_payslip_earnings_derived_from_timesheet(api, client, payroll_headers):
    employee = _employee(client, payroll_headers)
    run = _run(client, payroll_headers)
    timesheet = api.timesheet()
    api.shift(timesheet["id"], "2025-01-02", "2025-01-02T08:00:00", "2025-01-02T17:00:00")
    api.shift(timesheet["id"], "2025-01-03", "2025-01-03T22:00:00", "2025-01-04T06:00:00")

    response = client.post(
        f"/payroll/runs/{run['id']}/payslips",
        json={"items": [{"employeeId": employee["id"], "timesheetId": timesheet["id"]}]},
        headers=payroll_headers,
    )

    assert response.status_code == 200, response.text
    payslip = response.json()["payslips"][0]
    assert payslip["timesheetId"] == timesheet["id"]
    assert payslip["basicPay"] == 1600
    assert payslip["overtimePay"] == 125
    assert payslip["nightDiffPay"] == 80
    assert payslip["grossPay"] == 1805
    assert payslip["sssEe"] == 250
    assert payslip["sssEr"] == 530
    assert payslip["philhealthEe"] == 250
    assert payslip["hdmfEe"] == pytest.approx(36.1)
    assert payslip["taxStatus"] == "bracket"
    assert payslip["taxBracket"] == 1
    assert payslip["netPay"] == pytest.approx(1268.9)


def test_explicit_amount_wins_over_timesheet(api, client, payroll_headers):
    employee = _employee(client, payroll_headers)
    run = _run(client, payroll_headers)
    timesheet = api.timesheet()
    api.shift(timesheet["id"], "2025-01-02", "2025-01-02T08:00:00", "2025-01-02T17:00:00")

    response = client.post(
        f"/payroll/runs/{run['id']}/payslips",
        json={"items": [{"employeeId": employee["id"], "timesheetId": timesheet["id"], "basicPay": 1000}]},
        headers=payroll_headers,
    )

    payslip = response.json()["payslips"][0]
    assert payslip["basicPay"] == 1000
    assert payslip["overtimePay"] == 125


def test_regenerating_a_draft_updates_the_same_payslip(client, payroll_headers):
    employee = _employee(client, payroll_headers)
    run = _run(client, payroll_headers)
    url = f"/payroll/runs/{run['id']}/payslips"

    first = client.post(url, json={"items": [{"employeeId": employee["id"], "basicPay": 10000}]}, headers=payroll_headers)
    second = client.post(url, json={"items": [{"employeeId": employee["id"], "basicPay": 12000}]}, headers=payroll_headers)

    assert first.json()["payslips"][0]["id"] == second.json()["payslips"][0]["id"]
    listed = client.get(url, headers=payroll_headers).json()["payslips"]
    assert len(listed) == 1
    assert listed[0]["basicPay"] == 12000


def test_negative_taxable_income_is_flagged(client, payroll_headers):
    employee = _employee(client, payroll_headers)
    run = _run(client, payroll_headers)

    response = client.post(
        f"/payroll/runs/{run['id']}/payslips",
        json={"items": [{"employeeId": employee["id"], "basicPay": 100}]},
        headers=payroll_headers,
    )

    payslip = response.json()["payslips"][0]
    assert payslip["taxStatus"] == "no_bracket"
    assert payslip["taxBracket"] is None
    assert payslip["withholdingTax"] == 0


def test_run_lifecycle_locks_payslips(client, payroll_headers):
    employee = _employee(client, payroll_headers)
    run = _run(client, payroll_headers)
    url = f"/payroll/runs/{run['id']}/payslips"
    client.post(url, json={"items": [{"employeeId": employee["id"], "basicPay": 10000}]}, headers=payroll_headers)

    approved = client.post(f"/payroll/runs/{run['id']}/approve", headers=payroll_headers)
    assert approved.status_code == 200
    assert approved.json()["status"] == "APPROVED"

    regenerate = client.post(url, json={"items": [{"employeeId": employee["id"], "basicPay": 1}]}, headers=payroll_headers)
    assert regenerate.status_code == 409

    paid = client.post(f"/payroll/runs/{run['id']}/pay", headers=payroll_headers)
    assert paid.json()["status"] == "PAID"
    payslip = client.get(url, headers=payroll_headers).json()["payslips"][0]
    assert payslip["status"] == "PAID"
    assert client.get(f"/payslips/{payslip['id']}", headers=payroll_headers).json()["basicPay"] == 10000

    void = client.post(f"/payroll/runs/{run['id']}/void", json={"reason": "duplicate"}, headers=payroll_headers)
    assert void.status_code == 409
    assert void.json() == {"error": "Cannot move payroll run from PAID to VOIDED"}


def test_void_draft_run_records_reason(client, payroll_headers):
    run = _run(client, payroll_headers)

    response = client.post(f"/payroll/runs/{run['id']}/void", json={"reason": "wrong period"}, headers=payroll_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "VOIDED"
    assert body["voidReason"] == "wrong period"
    assert body["voidedAt"]


def test_empty_run_cannot_be_approved(client, payroll_headers):
    run = _run(client, payroll_headers)

    response = client.post(f"/payroll/runs/{run['id']}/approve", headers=payroll_headers)

    assert response.status_code == 409


def test_one_regular_run_per_pay_period(client, payroll_headers):
    run = _run(client, payroll_headers)

    response = client.post("/payroll/runs", json={"payPeriodId": run["payPeriodId"]}, headers=payroll_headers)

    assert response.status_code == 409


def test_pay_period_dates_must_be_ordered(client, payroll_headers):
    response = client.post(
        "/pay-periods",
        json={"code": "2025-01-B", "startDate": "2025-01-31", "endDate": "2025-01-16"},
        headers=payroll_headers,
    )

    assert response.status_code == 400


def test_preview_totals_without_writing(client, payroll_headers):
    first = _employee(client, payroll_headers, "G-0001")
    second = _employee(client, payroll_headers, "G-0002")
    run = _run(client, payroll_headers)
    items = [
        {"employeeId": first["id"], "basicPay": 17500, "allowances": [{"name": "rice", "amount": 1000}]},
        {"employeeId": second["id"], "basicPay": 100},
    ]

    response = client.post(f"/payroll/runs/{run['id']}/preview", json={"items": items}, headers=payroll_headers)

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["grossPay"] == 18600
    assert body["employerContributions"]["sss"] == 2460
    assert body["untaxedEmployees"] == [second["id"]]
    assert client.get(f"/payroll/runs/{run['id']}/payslips", headers=payroll_headers).json()["payslips"] == []


def test_payslip_for_unknown_employee_is_404(client, payroll_headers):
    run = _run(client, payroll_headers)

    response = client.post(
        f"/payroll/runs/{run['id']}/payslips",
        json={"items": [{"employeeId": 999, "basicPay": 100}]},
        headers=payroll_headers,
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Employee not found"}


def test_timekeepers_cannot_run_payroll(client, timekeeper_headers):
    response = client.post("/payroll/runs", json={"payPeriodId": 1}, headers=timekeeper_headers)

    assert response.status_code == 403


@pytest.mark.parametrize("action", ["payslips", "preview"])
def test_batch_naming_an_employee_twice_is_rejected(client, payroll_headers, action):
    employee = _employee(client, payroll_headers)
    run = _run(client, payroll_headers)
    item = {"employeeId": employee["id"], "basicPay": 10000}

    response = client.post(f"/payroll/runs/{run['id']}/{action}", json={"items": [item, item]}, headers=payroll_headers)

    assert response.status_code == 400
    assert "appears more than once" in response.json()["error"]
    assert client.get(f"/payroll/runs/{run['id']}/payslips", headers=payroll_headers).json()["payslips"] == []

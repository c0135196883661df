from __future__ import annotations


def test_login_issues_a_working_token(client, admin_headers):
    response = client.post("/auth/login", json={"email": "admin@example.com", "password": "correct-horse"})

    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "admin"
    assert body["token_type"] == "bearer"

    headers = {"Authorization": f"Bearer {body['access_token']}"}
    assert client.get("/users", headers=headers).status_code == 200


def test_login_email_is_case_insensitive(client, viewer_headers):
    response = client.post("/auth/login", json={"email": "Viewer@Example.com", "password": "correct-horse"})

    assert response.status_code == 200


def test_login_rejects_bad_password(client, admin_headers):
    response = client.post("/auth/login", json={"email": "admin@example.com", "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


def test_logout_revokes_the_session(client, viewer_headers):
    assert client.post("/auth/logout", headers=viewer_headers).status_code == 204

    response = client.get("/timesheets", headers=viewer_headers)
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired session"}


def test_requests_without_a_token_are_rejected(client):
    response = client.get("/timesheets")

    assert response.status_code == 401
    assert response.json() == {"error": "Authentication required"}


def test_admin_creates_and_lists_users(client, admin_headers):
    created = client.post(
        "/users",
        json={"email": "clerk@example.com", "password": "supersecret", "role": "timekeeper"},
        headers=admin_headers,
    )

    assert created.status_code == 201
    assert created.json()["role"] == "timekeeper"
    emails = [user["email"] for user in client.get("/users", headers=admin_headers).json()]
    assert "clerk@example.com" in emails


def test_duplicate_user_is_a_conflict(client, admin_headers):
    payload = {"email": "clerk@example.com", "password": "supersecret"}
    client.post("/users", json=payload, headers=admin_headers)

    response = client.post("/users", json={**payload, "email": "CLERK@example.com"}, headers=admin_headers)

    assert response.status_code == 409
    assert response.json() == {"error": "User already exists"}


def test_user_management_is_admin_only(client, timekeeper_headers):
    response = client.get("/users", headers=timekeeper_headers)

    assert response.status_code == 403
    assert response.json() == {"error": "Insufficient permissions"}


def test_viewer_can_read_but_not_write_timesheets(client, viewer_headers):
    assert client.get("/timesheets", headers=viewer_headers).status_code == 200

    response = client.post(
        "/timesheets/create",
        json={"employeeName": "Juan", "payPeriod": "2025-01-A", "detachment": "Gate", "shift": "Day Shift"},
        headers=viewer_headers,
    )
    assert response.status_code == 403


def test_employee_numbers_are_unique(client, payroll_headers):
    payload = {"employeeNo": "G-0001", "firstName": "Ana", "lastName": "Reyes", "hourlyRate": 90}
    first = client.post("/employees", json=payload, headers=payroll_headers)
    second = client.post("/employees", json=payload, headers=payroll_headers)

    assert first.status_code == 201
    assert first.json()["fullName"] == "Ana Reyes"
    assert second.status_code == 409


def test_unknown_employee_delete_is_404(client, payroll_headers):
    response = client.delete("/employees/42", headers=payroll_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Employee not found"}


def test_health_endpoints(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/health/db").json() == {"status": "ok", "database": "reachable"}


def test_employee_payload_rejects_unknown_fields(client, payroll_headers):
    payload = {"employeeNo": "G-0001", "firstName": "Ana", "lastName": "Reyes", "nickname": "Ann"}

    response = client.post("/employees", json=payload, headers=payroll_headers)

    assert response.status_code == 400
    assert "nickname" in response.json()["error"]


def test_employee_response_is_camel_case(client, payroll_headers):
    payload = {"employeeNo": "G-0001", "firstName": "Ana", "lastName": "Reyes"}

    response = client.post("/employees", json=payload, headers=payroll_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["employeeNo"] == "G-0001"
    assert body["hourlyRate"] == 0
    assert "employee_no" not in body


def test_user_payload_rejects_unknown_fields(client, admin_headers):
    payload = {"email": "clerk@example.com", "password": "supersecret", "isAdmin": True}

    response = client.post("/users", json=payload, headers=admin_headers)

    assert response.status_code == 400


def test_login_payload_rejects_unknown_fields(client, admin_headers):
    payload = {"email": "admin@example.com", "password": "correct-horse", "remember": True}

    assert client.post("/auth/login", json=payload).status_code == 400

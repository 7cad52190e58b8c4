"""HTTP API tests: authentication, error mapping and the main endpoints."""

from collections.abc import AsyncGenerator
from datetime import date
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.config import get_settings
from workforce_api.database import get_db
from workforce_api.models.domain.principal import Principal
from workforce_api.models.orm import EmploymentPeriodORM, StatusHistoryORM

from tests.factories import count_rows, make_employee, reload_employee

EMPLOYEE_PAYLOAD = {
    "full_name": "Amina Hassan",
    "national_id": "30456789",
    "id_no": "KE-4411",
    "phone_number": "0722000111",
    "hire_date": "2023-02-01",
    "birth_date": "1992-11-20",
}


@pytest.fixture
async def token_client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Client that authenticates with real bearer tokens."""
    from workforce_api.main import create_app

    app = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as db:
            yield db
            await db.commit()

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def make_token(**claims) -> str:
    settings = get_settings()
    payload = {"sub": str(uuid4()), "is_admin": True}
    payload.update(claims)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


class TestHealthAndAuth:
    """Health endpoint and authentication."""

    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_security_headers(self, client):
        response = await client.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    async def test_missing_token(self, token_client):
        response = await token_client.get("/api/v1/employees")
        assert response.status_code == 401

    async def test_invalid_token(self, token_client):
        response = await token_client.get(
            "/api/v1/employees", headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired token"

    async def test_valid_token(self, token_client):
        response = await token_client.get(
            "/api/v1/employees", headers={"Authorization": f"Bearer {make_token()}"}
        )
        assert response.status_code == 200
        assert response.json()["total"] == 0

    async def test_non_admin_token(self, token_client):
        response = await token_client.get(
            "/api/v1/employees",
            headers={"Authorization": f"Bearer {make_token(is_admin=False)}"},
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"

    async def test_non_admin_principal(self, client, current_principal):
        current_principal["principal"] = Principal(id=uuid4(), is_admin=False)
        response = await client.get("/api/v1/employees")
        assert response.status_code == 403


class TestEmployeeEndpoints:
    """Directory endpoints."""

    async def test_create_and_fetch(self, client):
        response = await client.post("/api/v1/employees", json=EMPLOYEE_PAYLOAD)

        assert response.status_code == 201
        body = response.json()
        assert body["employee_no"] == "MSD-1"
        assert body["status"] == "active"

        fetched = await client.get(f"/api/v1/employees/{body['id']}")
        assert fetched.json()["full_name"] == "Amina Hassan"

        periods = await client.get(f"/api/v1/employees/{body['id']}/periods")
        assert [p["start_date"] for p in periods.json()] == ["2023-02-01"]

    async def test_next_number(self, client, session):
        await make_employee(session, employee_no="MSD-41")
        response = await client.get("/api/v1/employees/next-number")
        assert response.json() == {"employee_no": "MSD-42"}

    async def test_duplicate_reports_field(self, client):
        await client.post("/api/v1/employees", json=EMPLOYEE_PAYLOAD)

        response = await client.post(
            "/api/v1/employees", json={**EMPLOYEE_PAYLOAD, "national_id": "1"}
        )

        assert response.status_code == 409
        assert response.json()["code"] == "duplicate_identifier"
        assert response.json()["field"] == "id_no"

    async def test_future_birth_date_is_400(self, client):
        response = await client.post(
            "/api/v1/employees", json={**EMPLOYEE_PAYLOAD, "birth_date": "2999-01-01"}
        )
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    async def test_unknown_employee_is_404(self, client):
        response = await client.get(f"/api/v1/employees/{uuid4()}/profile")
        assert response.status_code == 404
        assert response.json()["code"] == "employee_not_found"

    async def test_invalid_uuid_is_422(self, client):
        response = await client.get("/api/v1/employees/'; DROP TABLE employees; --")
        assert response.status_code == 422

    async def test_update(self, client, session):
        employee = await make_employee(session)
        response = await client.put(
            f"/api/v1/employees/{employee.id}", json={"cv_received": True, "notes": "On file"}
        )
        assert response.status_code == 200
        assert response.json()["cv_received"] is True

    async def test_separated_list(self, client, session):
        await make_employee(session)
        gone = await make_employee(session, status="terminated", with_open_period=False)

        response = await client.get("/api/v1/employees/separated")

        assert [e["id"] for e in response.json()["items"]] == [str(gone.id)]


class TestStatusEndpoints:
    """Status change and separation endpoints."""

    async def test_hold(self, client, session):
        employee = await make_employee(session)

        response = await client.post(
            f"/api/v1/employees/{employee.id}/status",
            json={"status": "ON_HOLD", "expected_status": "active"},
        )

        assert response.status_code == 200
        assert response.json()["employee"]["status"] == "on_hold"
        assert response.json()["history"]["old_status"] == "active"

    async def test_invalid_transition_is_409(self, client, session):
        employee = await make_employee(session, status="on_hold")

        response = await client.post(
            f"/api/v1/employees/{employee.id}/status", json={"status": "resigned"}
        )

        assert response.status_code == 409
        assert response.json()["code"] == "invalid_transition"

    async def test_unknown_status_is_400(self, client, session):
        employee = await make_employee(session)

        response = await client.post(
            f"/api/v1/employees/{employee.id}/status", json={"status": "retired"}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_status"

    async def test_stale_expected_status_is_409(self, client, session):
        employee = await make_employee(session, status="on_hold")

        response = await client.post(
            f"/api/v1/employees/{employee.id}/status",
            json={"status": "active", "expected_status": "active"},
        )

        assert response.status_code == 409
        assert response.json()["code"] == "concurrent_modification"

    async def test_termination_requires_capability(self, client, session):
        employee = await make_employee(session)

        response = await client.post(
            f"/api/v1/employees/{employee.id}/separation",
            json={"separation_type": "terminated", "separation_date": "2024-03-01"},
        )

        assert response.status_code == 403
        assert response.json()["code"] == "permission_denied"
        assert (await reload_employee(session, employee.id)).status == "active"

    async def test_termination(self, client, session, current_principal, terminator):
        current_principal["principal"] = terminator
        employee = await make_employee(session)

        response = await client.post(
            f"/api/v1/employees/{employee.id}/separation",
            json={
                "separation_type": "terminated",
                "separation_date": "2024-03-01",
                "separation_reason": "Misconduct",
                "eligible_for_rehire": False,
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["employee"]["status"] == "terminated"
        assert body["period_closed"] is True
        assert body["closed_period"]["end_date"] == "2024-03-01"
        assert body["history"]["reason"] == "Misconduct"

    async def test_incomplete_clearance_is_400(self, client, session):
        employee = await make_employee(session)

        response = await client.post(
            f"/api/v1/employees/{employee.id}/separation",
            json={
                "separation_type": "resigned",
                "separation_date": "2024-03-01",
                "clearance_done": True,
                "clearance_amount": 200,
            },
        )

        assert response.status_code == 400
        assert response.json()["code"] == "incomplete_clearance"
        assert await count_rows(session, StatusHistoryORM) == 0

    async def test_missing_separation_date_is_400(self, client, session):
        employee = await make_employee(session)

        response = await client.post(
            f"/api/v1/employees/{employee.id}/separation",
            json={"separation_type": "resigned", "separation_date": ""},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "missing_field"
        assert response.json()["field"] == "separation_date"

    async def test_separation_via_status_endpoint_rejected(self, client, session):
        employee = await make_employee(session)

        response = await client.post(
            f"/api/v1/employees/{employee.id}/status", json={"status": "resigned"}
        )

        assert response.status_code == 409
        assert response.json()["reason"] == "separation details are required"
        assert await count_rows(session, EmploymentPeriodORM) == 1

    async def test_profile_and_history(self, client, session):
        employee = await make_employee(session)
        await client.post(f"/api/v1/employees/{employee.id}/status", json={"status": "on_hold"})

        profile = await client.get(f"/api/v1/employees/{employee.id}/profile")
        history = await client.get(f"/api/v1/employees/{employee.id}/history")

        assert profile.status_code == 200
        assert profile.json()["allowed_transitions"] == ["active"]
        assert [h["new_status"] for h in history.json()] == ["on_hold"]


class TestAttendanceEndpoints:
    """Attendance endpoints."""

    async def test_set_and_read_day(self, client, session):
        employee = await make_employee(session)

        put = await client.put(
            f"/api/v1/attendance/{employee.id}/2024-04-02",
            json={"status": "present", "start_time": "13:05"},
        )
        sheet = await client.get("/api/v1/attendance/day/2024-04-02")

        assert put.status_code == 200
        assert put.json()["start_time"] == "13:05:00"
        assert put.json()["start_time_label"] == "1:05 AM"
        rows = sheet.json()["rows"]
        assert len(rows) == 1
        assert rows[0]["record"]["status"] == "present"

    async def test_invalid_start_time_is_400(self, client, session):
        employee = await make_employee(session)

        response = await client.put(
            f"/api/v1/attendance/{employee.id}/2024-04-02",
            json={"status": "present", "start_time": "29:00"},
        )

        assert response.status_code == 400

    async def test_bulk_present_and_month(self, client, session):
        first = await make_employee(session)
        second = await make_employee(session)
        await make_employee(session, status="resigned", with_open_period=False)

        bulk = await client.post(
            "/api/v1/attendance/bulk-present", json={"day": "2024-04-03", "start_time": "8:00"}
        )
        month = await client.get("/api/v1/attendance/month/2024-04")
        summary = await client.get(f"/api/v1/attendance/{first.id}/summary", params={"month": "2024-04"})

        assert bulk.status_code == 200
        assert set(bulk.json()["written"]) == {str(first.id), str(second.id)}
        assert bulk.json()["failed"] == []
        assert month.json()["days_in_month"] == 30
        assert month.json()["records"][str(second.id)]["2024-04-03"]["status"] == "present"
        assert summary.json()["present"] == 1

    async def test_month_with_explicit_selection(self, client, session):
        gone = await make_employee(session, status="terminated", with_open_period=False)

        response = await client.get(
            "/api/v1/attendance/month/2024-04", params={"employee_id": [str(gone.id)]}
        )

        assert [e["id"] for e in response.json()["employees"]] == [str(gone.id)]

    async def test_bad_month_is_400(self, client):
        response = await client.get("/api/v1/attendance/month/2024-13")
        assert response.status_code == 400
        assert response.json()["field"] == "month"

    async def test_summary_unknown_employee(self, client):
        response = await client.get(
            f"/api/v1/attendance/{uuid4()}/summary", params={"month": date.today().strftime("%Y-%m")}
        )
        assert response.status_code == 404

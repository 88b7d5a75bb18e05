"""
tests.test_employees_api

HTTP-level tests for the employee service (`/api/v1/employees`).

Responsibilities:
- Cover status codes for every CRUD path and the problem-detail bodies.
- Verify department enrichment, including the fallback when the department
  service is unreachable.
- Verify idempotent creation through the `Idempotency-Key` header.
"""

from __future__ import annotations

import asyncio

import pytest

from org_services.db.repositories.employees import EmployeeRepo

ADA = {"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com", "departmentId": 1}


async def _create(client, headers=None, **overrides):
    r = await client.post("/api/v1/employees", json={**ADA, **overrides}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


@pytest.mark.asyncio
async def test_create_enriches_and_publishes(employee_api, publisher, fake_departments) -> None:
    created = await _create(employee_api, headers={"X-Trace-Id": "t-1"})

    assert created["firstName"] == "Ada"
    assert created["departmentId"] == 1
    assert created["department"]["code"] == "ENG"
    # The trace id travels to the department service.
    assert fake_departments.calls[-1].headers["X-Trace-Id"] == "t-1"

    events = publisher.of("employee-events")
    assert [e["eventType"] for e in events] == ["EMPLOYEE_CREATED"]
    assert events[0]["employeeId"] == created["id"]
    assert events[0]["email"] == "ada@example.com"


@pytest.mark.asyncio
async def test_get_with_and_without_department(employee_api) -> None:
    created = await _create(employee_api)

    r = await employee_api.get(f"/api/v1/employees/{created['id']}")
    assert r.status_code == 200
    assert r.json()["department"] is None

    r = await employee_api.get(
        f"/api/v1/employees/{created['id']}", params={"includeDepartment": "true"}
    )
    assert r.status_code == 200
    assert r.json()["department"]["name"] == "Engineering"


@pytest.mark.asyncio
async def test_department_service_down_falls_back(employee_api, fake_departments) -> None:
    fake_departments.down = True

    created = await _create(employee_api)

    assert created["department"] == {
        "id": 1,
        "name": "Department Service Unavailable",
        "code": "SERVICE_DOWN",
        "description": "Department service is temporarily down, please try again later",
    }


@pytest.mark.asyncio
async def test_employee_without_department_is_not_enriched(employee_api, fake_departments) -> None:
    created = await _create(employee_api, departmentId=None, email="grace@example.com")

    assert created["departmentId"] is None
    assert created["department"] is None
    assert fake_departments.calls == []


@pytest.mark.asyncio
async def test_duplicate_email_is_conflict(employee_api) -> None:
    await _create(employee_api)

    r = await employee_api.post("/api/v1/employees", json={**ADA, "firstName": "Other"})
    assert r.status_code == 409
    body = r.json()
    assert body["title"] == "Duplicate Email"
    assert body["detail"] == "Email already exists"


@pytest.mark.asyncio
async def test_unique_constraint_backs_up_email_check(employee_api, monkeypatch) -> None:
    await _create(employee_api)

    async def never_exists(self, email: str) -> bool:
        return False

    monkeypatch.setattr(EmployeeRepo, "exists_by_email", never_exists)

    r = await employee_api.post("/api/v1/employees", json={**ADA, "firstName": "Other"})
    assert r.status_code == 409
    assert r.json()["title"] == "Duplicate Key"

    r = await employee_api.get("/api/v1/employees")
    assert r.json()["totalElements"] == 1


@pytest.mark.asyncio
async def test_validation_errors(employee_api) -> None:
    r = await employee_api.post(
        "/api/v1/employees",
        json={"firstName": "", "lastName": "Lovelace", "email": "not-an-email"},
    )
    assert r.status_code == 400
    fields = {e["field"] for e in r.json()["errors"]}
    assert fields == {"firstName", "email"}

    r = await employee_api.get("/api/v1/employees/search")
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "query"

    r = await employee_api.get("/api/v1/employees/abc")
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "employee_id"


@pytest.mark.asyncio
async def test_missing_employee_is_not_found(employee_api) -> None:
    r = await employee_api.get("/api/v1/employees/42")
    assert r.status_code == 404
    assert r.json()["detail"] == "Employee not found"

    r = await employee_api.put("/api/v1/employees/42", json=ADA)
    assert r.status_code == 404

    r = await employee_api.patch("/api/v1/employees/42", json={"firstName": "X"})
    assert r.status_code == 404

    r = await employee_api.delete("/api/v1/employees/42")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_idempotency_key_replays_creation(employee_api, publisher) -> None:
    headers = {"Idempotency-Key": "create-ada-1"}
    first = await _create(employee_api, headers=headers)
    second = await _create(employee_api, headers=headers)

    assert second == first
    assert len(publisher.of("employee-events")) == 1

    r = await employee_api.get("/api/v1/employees")
    assert r.json()["totalElements"] == 1

    # Without the key the same body is a duplicate.
    r = await employee_api.post("/api/v1/employees", json=ADA)
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_concurrent_requests_with_one_key_create_once(employee_api, publisher) -> None:
    headers = {"Idempotency-Key": "create-ada-2"}
    first, second = await asyncio.gather(
        employee_api.post("/api/v1/employees", json=ADA, headers=headers),
        employee_api.post("/api/v1/employees", json=ADA, headers=headers),
    )

    assert (first.status_code, second.status_code) == (201, 201)
    assert first.json() == second.json()
    assert len(publisher.of("employee-events")) == 1


@pytest.mark.asyncio
async def test_blank_idempotency_key_is_ignored(employee_api) -> None:
    await _create(employee_api, headers={"Idempotency-Key": ""})

    r = await employee_api.post(
        "/api/v1/employees", json=ADA, headers={"Idempotency-Key": ""}
    )
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_replace_moves_department(employee_api, publisher) -> None:
    created = await _create(employee_api)

    r = await employee_api.put(
        f"/api/v1/employees/{created['id']}",
        json={**ADA, "lastName": "King", "departmentId": 2},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["lastName"] == "King"
    assert body["department"]["code"] == "SAL"

    updated = publisher.of("employee-events")[-1]
    assert updated["eventType"] == "EMPLOYEE_UPDATED"
    assert updated["oldDepartmentId"] == 1
    assert updated["newDepartmentId"] == 2


@pytest.mark.asyncio
async def test_replace_can_clear_department(employee_api) -> None:
    created = await _create(employee_api)

    body = {k: v for k, v in ADA.items() if k != "departmentId"}
    r = await employee_api.put(f"/api/v1/employees/{created['id']}", json=body)
    assert r.status_code == 200
    assert r.json()["departmentId"] is None


@pytest.mark.asyncio
async def test_patch_changes_only_supplied_fields(employee_api) -> None:
    created = await _create(employee_api)
    await _create(employee_api, email="grace@example.com", firstName="Grace")

    r = await employee_api.patch(f"/api/v1/employees/{created['id']}", json={"firstName": "Augusta"})
    assert r.status_code == 200
    body = r.json()
    assert body["firstName"] == "Augusta"
    assert body["lastName"] == "Lovelace"
    assert body["email"] == "ada@example.com"

    r = await employee_api.patch(
        f"/api/v1/employees/{created['id']}", json={"email": "grace@example.com"}
    )
    assert r.status_code == 409

    r = await employee_api.patch(f"/api/v1/employees/{created['id']}", json={"email": "bad"})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_delete_employee(employee_api, publisher) -> None:
    created = await _create(employee_api)

    r = await employee_api.delete(f"/api/v1/employees/{created['id']}")
    assert r.status_code == 204

    r = await employee_api.get(f"/api/v1/employees/{created['id']}")
    assert r.status_code == 404
    assert publisher.of("employee-events")[-1]["eventType"] == "EMPLOYEE_DELETED"


@pytest.mark.asyncio
async def test_list_filters_search_and_stats(employee_api) -> None:
    await _create(employee_api)
    await _create(employee_api, firstName="Grace", lastName="Hopper", email="grace@navy.mil")
    await _create(
        employee_api, firstName="Alan", lastName="Turing", email="alan@example.com", departmentId=2
    )
    await _create(
        employee_api, firstName="Edsger", lastName="Dijkstra", email="ed@example.com",
        departmentId=None,
    )

    r = await employee_api.get("/api/v1/employees", params={"departmentId": 1})
    assert r.status_code == 200
    assert {e["lastName"] for e in r.json()["content"]} == {"Lovelace", "Hopper"}

    r = await employee_api.get("/api/v1/employees", params={"lastName": "TUR"})
    assert [e["firstName"] for e in r.json()["content"]] == ["Alan"]

    r = await employee_api.get("/api/v1/employees", params={"email": "grace@navy.mil"})
    assert r.json()["totalElements"] == 1

    r = await employee_api.get("/api/v1/employees", params={"sort": "lastName,desc", "size": 2})
    page = r.json()
    assert [e["lastName"] for e in page["content"]] == ["Turing", "Lovelace"]
    assert page["totalPages"] == 2

    r = await employee_api.get("/api/v1/employees/search", params={"query": "example"})
    assert r.json()["totalElements"] == 3

    r = await employee_api.get("/api/v1/employees/stats")
    assert r.status_code == 200
    assert r.json() == {
        "totalEmployees": 4,
        "employeesByDepartment": {"1": 2, "2": 1},
        "employeesWithoutDepartment": 1,
    }

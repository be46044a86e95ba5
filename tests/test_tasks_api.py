# tests/test_tasks_api.py

import pytest
from fastapi.testclient import TestClient

from taskmaster.main import create_app

from .helpers import make_collaborator, make_task


def test_new_task_is_pending(client) -> None:
    ana = make_collaborator(client, "ana", "Ana")
    task_id = make_task(client, ana, "Write report")

    tasks = client.get("/api/tasks").json()
    assert len(tasks) == 1
    task = tasks[0]
    assert task["id"] == task_id
    assert task["status"] == "pending"
    assert task["failure_reason"] is None
    assert task["due_date"] == "2025-01-10"
    assert task["assigned_name"] == "Ana"


def test_task_for_unknown_user_is_rejected(client) -> None:
    res = client.post(
        "/api/tasks",
        json={"title": "Orphan", "description": "", "assigned_to": 999, "due_date": "2025-01-10"},
    )
    assert res.status_code == 400
    assert client.get("/api/tasks").json() == []


def test_collaborator_sees_only_own_tasks(client) -> None:
    ana = make_collaborator(client, "ana")
    bruno = make_collaborator(client, "bruno")
    ana_task = make_task(client, ana, "Ana's")
    make_task(client, bruno, "Bruno's")

    res = client.get("/api/tasks", params={"userId": ana, "role": "collaborator"})
    tasks = res.json()
    assert [t["id"] for t in tasks] == [ana_task]
    assert all(t["assigned_to"] == ana for t in tasks)


def test_master_and_anonymous_see_everything(client, master) -> None:
    ana = make_collaborator(client, "ana", "Ana")
    bruno = make_collaborator(client, "bruno", "Bruno")
    make_task(client, ana)
    make_task(client, bruno)

    as_master = client.get("/api/tasks", params={"userId": master["id"], "role": "master"}).json()
    anonymous = client.get("/api/tasks").json()

    assert as_master == anonymous
    assert {t["assigned_name"] for t in as_master} == {"Ana", "Bruno"}


def test_mark_failed_with_reason(client) -> None:
    ana = make_collaborator(client, "ana")
    task_id = make_task(client, ana)

    res = client.patch(f"/api/tasks/{task_id}", json={"status": "failed", "failure_reason": "blocked"})
    assert res.status_code == 200
    assert res.json() == {"success": True}

    task = client.get("/api/tasks", params={"userId": ana}).json()[0]
    assert task["status"] == "failed"
    assert task["failure_reason"] == "blocked"


def test_empty_reason_is_stored_as_null(client) -> None:
    ana = make_collaborator(client, "ana")
    task_id = make_task(client, ana)
    client.patch(f"/api/tasks/{task_id}", json={"status": "completed", "failure_reason": ""})

    task = client.get("/api/tasks").json()[0]
    assert task["status"] == "completed"
    assert task["failure_reason"] is None


def test_terminal_task_can_be_changed_by_default(client) -> None:
    ana = make_collaborator(client, "ana")
    task_id = make_task(client, ana)
    client.patch(f"/api/tasks/{task_id}", json={"status": "completed"})

    res = client.patch(f"/api/tasks/{task_id}", json={"status": "failed", "failure_reason": "redo"})
    assert res.status_code == 200
    assert client.get("/api/tasks").json()[0]["status"] == "failed"


def test_unknown_status_is_rejected(client) -> None:
    ana = make_collaborator(client, "ana")
    task_id = make_task(client, ana)
    res = client.patch(f"/api/tasks/{task_id}", json={"status": "archived"})
    assert res.status_code == 422


def test_unknown_task_id(client) -> None:
    res = client.patch("/api/tasks/4242", json={"status": "completed"})
    assert res.status_code == 404


@pytest.fixture()
def strict_client(settings):
    strict = settings.model_copy(update={"ENFORCE_TASK_LIFECYCLE": True})
    with TestClient(create_app(strict)) as c:
        yield c


def test_enforced_lifecycle_blocks_second_transition(strict_client) -> None:
    ana = make_collaborator(strict_client, "ana")
    task_id = make_task(strict_client, ana)

    assert strict_client.patch(f"/api/tasks/{task_id}", json={"status": "completed"}).status_code == 200

    res = strict_client.patch(f"/api/tasks/{task_id}", json={"status": "failed", "failure_reason": "x"})
    assert res.status_code == 409
    assert strict_client.get("/api/tasks").json()[0]["status"] == "completed"


def test_enforced_lifecycle_requires_reason(strict_client) -> None:
    ana = make_collaborator(strict_client, "ana")
    task_id = make_task(strict_client, ana)

    res = strict_client.patch(f"/api/tasks/{task_id}", json={"status": "failed"})
    assert res.status_code == 409
    assert strict_client.patch("/api/tasks/999", json={"status": "completed"}).status_code == 404

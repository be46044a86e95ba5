# tests/helpers.py

API_KEY = "test-secret"


def make_collaborator(client, username: str, name: str | None = None, password: str = "x") -> int:
    res = client.post(
        "/api/users",
        json={"username": username, "password": password, "name": name or username.title()},
    )
    assert res.status_code == 200, res.text
    return res.json()["id"]


def make_task(client, assigned_to: int, title: str = "Task", due_date: str = "2025-01-10") -> int:
    res = client.post(
        "/api/tasks",
        json={
            "title": title,
            "description": f"{title} description",
            "assigned_to": assigned_to,
            "due_date": due_date,
        },
    )
    assert res.status_code == 200, res.text
    return res.json()["id"]


def log_event(client, user_id: int, event: str):
    return client.post("/api/time-logs", json={"userId": user_id, "type": event})

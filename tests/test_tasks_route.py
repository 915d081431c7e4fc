from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine, select

from app.api.routes.auth import get_current_user
from app.db.session import create_db_and_tables, get_session
from app.main import app
from app.models.user import User


@pytest.fixture
def client_with_tasks_db() -> Iterator[tuple[TestClient, Callable[[str], None]]]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)

    first_email = "tasks-one@test.dev"
    second_email = "tasks-two@test.dev"
    with Session(engine) as session:
        session.add(User(email=first_email, name="Tasks User One", password_hash="hashed"))
        session.add(User(email=second_email, name="Tasks User Two", password_hash="hashed"))
        session.commit()

    current_email = {"value": first_email}

    def set_current_user(email: str) -> None:
        current_email["value"] = email

    def get_test_session():
        with Session(engine) as session:
            yield session

    def get_test_user() -> User:
        with Session(engine) as session:
            user = session.exec(select(User).where(User.email == current_email["value"])).first()
            assert user is not None
            return user

    app.dependency_overrides[get_session] = get_test_session
    app.dependency_overrides[get_current_user] = get_test_user

    with TestClient(app) as client:
        yield client, set_current_user

    app.dependency_overrides.clear()


@pytest.fixture
def tasks_client(client_with_tasks_db) -> TestClient:
    client, _ = client_with_tasks_db
    return client


def _create(client: TestClient, **payload) -> dict:
    response = client.post("/tasks", json=payload)
    assert response.status_code == 201
    return response.json()["task"]


def test_create_task_applies_defaults(tasks_client: TestClient) -> None:
    task = _create(tasks_client, title="  Write report  ")

    assert task["title"] == "Write report"
    assert task["status"] == "pending"
    assert task["priority"] == "medium"
    assert task["description"] is None
    assert "userId" in task and "createdAt" in task and "updatedAt" in task


def test_create_task_validates_title_and_enums(tasks_client: TestClient) -> None:
    assert tasks_client.post("/tasks", json={"title": ""}).status_code == 422
    assert tasks_client.post("/tasks", json={"description": "no title"}).status_code == 422
    assert (
        tasks_client.post("/tasks", json={"title": "x", "status": "done"}).status_code == 422
    )


def test_list_tasks_filters_and_orders_newest_first(tasks_client: TestClient) -> None:
    _create(tasks_client, title="Buy milk", priority="low")
    _create(
        tasks_client,
        title="Plan trip",
        description="Book the TRAIN tickets",
        status="in-progress",
        priority="high",
    )
    _create(tasks_client, title="Train for marathon", status="completed", priority="high")

    all_tasks = tasks_client.get("/tasks").json()["tasks"]
    assert [task["title"] for task in all_tasks] == ["Train for marathon", "Plan trip", "Buy milk"]

    in_progress = tasks_client.get("/tasks", params={"status": "in-progress"}).json()["tasks"]
    assert [task["title"] for task in in_progress] == ["Plan trip"]

    high = tasks_client.get("/tasks", params={"priority": "high"}).json()["tasks"]
    assert {task["title"] for task in high} == {"Plan trip", "Train for marathon"}

    searched = tasks_client.get("/tasks", params={"search": "train"}).json()["tasks"]
    assert {task["title"] for task in searched} == {"Plan trip", "Train for marathon"}

    combined = tasks_client.get(
        "/tasks",
        params={"search": "train", "status": "completed"},
    ).json()["tasks"]
    assert [task["title"] for task in combined] == ["Train for marathon"]


def test_update_task_changes_only_given_fields(tasks_client: TestClient) -> None:
    task = _create(tasks_client, title="Draft", description="first pass")

    response = tasks_client.put(
        f"/tasks/{task['id']}",
        json={"status": "completed", "priority": "high"},
    )

    assert response.status_code == 200
    updated = response.json()["task"]
    assert updated["status"] == "completed"
    assert updated["priority"] == "high"
    assert updated["title"] == "Draft"
    assert updated["description"] == "first pass"

    cleared = tasks_client.put(f"/tasks/{task['id']}", json={"description": None})
    assert cleared.json()["task"]["description"] is None


def test_delete_task(tasks_client: TestClient) -> None:
    task = _create(tasks_client, title="Temporary")

    response = tasks_client.delete(f"/tasks/{task['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Task deleted successfully"}

    assert tasks_client.delete(f"/tasks/{task['id']}").status_code == 404
    assert tasks_client.get("/tasks").json()["tasks"] == []


def test_tasks_are_scoped_to_their_owner(
    client_with_tasks_db: tuple[TestClient, Callable[[str], None]],
) -> None:
    client, set_current_user = client_with_tasks_db
    task = _create(client, title="Private")

    set_current_user("tasks-two@test.dev")
    assert client.get("/tasks").json()["tasks"] == []
    assert client.put(f"/tasks/{task['id']}", json={"title": "Hijacked"}).status_code == 404
    assert client.delete(f"/tasks/{task['id']}").status_code == 404

    set_current_user("tasks-one@test.dev")
    [mine] = client.get("/tasks").json()["tasks"]
    assert mine["title"] == "Private"


def test_tasks_require_authentication() -> None:
    response = TestClient(app).get("/tasks")

    assert response.status_code == 401


def test_blank_titles_are_rejected_after_trimming(tasks_client: TestClient) -> None:
    assert tasks_client.post("/tasks", json={"title": "   "}).status_code == 422

    task = _create(tasks_client, title="Keep me")
    response = tasks_client.put(f"/tasks/{task['id']}", json={"title": "  "})
    assert response.status_code == 422

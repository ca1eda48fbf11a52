from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from fastapi import FastAPI
from fastapi.testclient import TestClient

import richgoals.goals as goals_router
from richgoals.services.goals_service import ReflectionConflictError
from richgoals.services.principles import InvalidPrincipleError


def _app_with_overrides(user_id=None):
    app = FastAPI()
    app.include_router(goals_router.router)

    async def override_db():
        yield object()

    app.dependency_overrides[goals_router.get_db_connection] = override_db
    if user_id is not None:
        app.dependency_overrides[goals_router.get_current_user_id] = lambda: user_id
    return app


def test_goals_auth_required() -> None:
    with TestClient(_app_with_overrides()) as client:
        response = client.get("/goals")
    assert response.status_code == 401


def test_list_goals(monkeypatch) -> None:
    user_id = uuid4()
    goal_id = uuid4()

    async def fake_list(connection, uid):
        assert uid == user_id
        return [
            {
                "id": goal_id,
                "user_id": uid,
                "principle": "responsibility",
                "goal_text": "Finish homework before games",
                "progress": 60,
                "created_at": datetime(2026, 4, 1, 8, 0, 0),
                "has_reflection": False,
            }
        ]

    monkeypatch.setattr(goals_router, "list_goals", fake_list)

    with TestClient(_app_with_overrides(user_id)) as client:
        response = client.get("/goals")

    assert response.status_code == 200
    payload = response.json()
    assert payload[0]["id"] == str(goal_id)
    assert payload[0]["progress"] == 60
    assert "user_id" not in payload[0]


def _reflection_row(goal_id):
    return {
        "id": uuid4(),
        "user_id": uuid4(),
        "goal_id": goal_id,
        "principle": "i-matter",
        "reflection_text": "I kept going.",
        "created_at": datetime(2026, 5, 1, 9, 0, 0),
    }


def test_create_reflection_success(monkeypatch) -> None:
    goal_id = uuid4()

    async def fake_create(connection, uid, gid, data):
        assert gid == goal_id
        assert data == {"principle": "i-matter", "reflection_text": "I kept going."}
        return _reflection_row(gid)

    monkeypatch.setattr(goals_router, "create_reflection", fake_create)

    with TestClient(_app_with_overrides(uuid4())) as client:
        response = client.post(
            f"/goals/{goal_id}/reflection",
            json={"principle": "i-matter", "reflection_text": "I kept going."},
        )

    assert response.status_code == 201
    assert response.json()["goal_id"] == str(goal_id)


def test_create_reflection_error_mapping(monkeypatch) -> None:
    goal_id = uuid4()
    cases = [
        (LookupError("Goal not found"), 404),
        (ReflectionConflictError("A reflection already exists for this goal"), 409),
        (InvalidPrincipleError("Invalid principleId"), 422),
    ]

    for error, expected_status in cases:
        async def fake_create(connection, uid, gid, data, error=error):
            raise error

        monkeypatch.setattr(goals_router, "create_reflection", fake_create)

        with TestClient(_app_with_overrides(uuid4())) as client:
            response = client.post(
                f"/goals/{goal_id}/reflection",
                json={"principle": "i-matter", "reflection_text": "text"},
            )

        assert response.status_code == expected_status

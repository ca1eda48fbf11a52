"""Goals router: read-only progress listing and completion reflections."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from .auth import get_current_user_id
from .database import get_db_connection
from .services.goals_service import ReflectionConflictError, create_reflection, list_goals

router = APIRouter(prefix="/goals", tags=["goals"])


class GoalResponse(BaseModel):
    id: UUID
    principle: str | None = None
    goal_text: str
    progress: int
    created_at: datetime
    has_reflection: bool


class ReflectionCreateRequest(BaseModel):
    principle: str
    reflection_text: str = Field(min_length=1, max_length=5000)


class ReflectionResponse(BaseModel):
    id: UUID
    goal_id: UUID
    principle: str
    reflection_text: str
    created_at: datetime


@router.get("", response_model=list[GoalResponse])
async def list_goals_endpoint(
    user_id: UUID = Depends(get_current_user_id),
    connection: Any = Depends(get_db_connection),
) -> list[GoalResponse]:
    """List current user's goals. Progress is synced externally and read-only here."""
    rows = await list_goals(connection, user_id)
    return [GoalResponse(**row) for row in rows]


@router.post(
    "/{goal_id}/reflection",
    response_model=ReflectionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reflection_endpoint(
    goal_id: UUID,
    payload: ReflectionCreateRequest,
    user_id: UUID = Depends(get_current_user_id),
    connection: Any = Depends(get_db_connection),
) -> ReflectionResponse:
    """Write the one reflection allowed once a goal reaches 100%."""
    try:
        row = await create_reflection(connection, user_id, goal_id, payload.model_dump())
        return ReflectionResponse(**row)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ReflectionConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

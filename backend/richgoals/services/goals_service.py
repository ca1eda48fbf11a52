"""Service layer for reading goals and writing completion reflections."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

from loguru import logger
from psycopg.errors import UniqueViolation

from richgoals.services.principles import get_principle

if TYPE_CHECKING:
    from psycopg import AsyncConnection
else:
    AsyncConnection = Any

COMPLETE_PROGRESS = 100


class ReflectionConflictError(Exception):
    """Raised when a reflection cannot be written for the goal's current state."""


def _normalize_progress(value: Any) -> int:
    """Progress is owned by the classroom sync; clamp whatever it stored to 0..100."""
    try:
        progress = int(value or 0)
    except (TypeError, ValueError):
        return 0
    return max(0, min(progress, COMPLETE_PROGRESS))


def _present_goal(row: dict[str, Any]) -> dict[str, Any]:
    return {
        **row,
        "progress": _normalize_progress(row.get("progress")),
        "has_reflection": bool(row.get("has_reflection")),
    }


async def list_goals(connection: AsyncConnection, user_id: UUID) -> list[dict[str, Any]]:
    """List the user's goals, newest first, with a reflection marker."""
    async with connection.cursor() as cursor:
        await cursor.execute(
            """
            SELECT g.id, g.user_id, g.principle, g.goal_text, g.progress, g.created_at,
                   EXISTS (
                       SELECT 1 FROM reflections r
                       WHERE r.goal_id = g.id AND r.user_id = g.user_id
                   ) AS has_reflection
            FROM goal g
            WHERE g.user_id = %s
            ORDER BY g.created_at DESC
            """,
            (user_id,),
        )
        rows = await cursor.fetchall()

    return [_present_goal(row) for row in rows]


async def get_goal(connection: AsyncConnection, user_id: UUID, goal_id: UUID) -> dict[str, Any]:
    async with connection.cursor() as cursor:
        await cursor.execute(
            """
            SELECT id, user_id, principle, goal_text, progress, created_at
            FROM goal
            WHERE id = %s
              AND user_id = %s
            """,
            (goal_id, user_id),
        )
        row = await cursor.fetchone()

    if row is None:
        raise LookupError("Goal not found")

    return _present_goal(row)


async def _has_reflection(connection: AsyncConnection, user_id: UUID, goal_id: UUID) -> bool:
    async with connection.cursor() as cursor:
        await cursor.execute(
            """
            SELECT id
            FROM reflections
            WHERE user_id = %s
              AND goal_id = %s
            LIMIT 1
            """,
            (user_id, goal_id),
        )
        return await cursor.fetchone() is not None


async def create_reflection(
    connection: AsyncConnection,
    user_id: UUID,
    goal_id: UUID,
    data: dict[str, Any],
) -> dict[str, Any]:
    """
    Write the single reflection allowed for a completed goal.

    Rules:
    - principle must be one of the four RICH principles
    - reflection_text must be non-empty after trimming
    - goal must belong to the user and be at 100% progress
    - at most one reflection per goal
    """
    principle = get_principle(data.get("principle"))
    text = str(data.get("reflection_text") or "").strip()
    if not text:
        raise ValueError("reflection_text is required")

    goal = await get_goal(connection, user_id, goal_id)
    if goal["progress"] < COMPLETE_PROGRESS:
        raise ReflectionConflictError("Reflections can only be written for completed goals")

    if await _has_reflection(connection, user_id, goal_id):
        raise ReflectionConflictError("A reflection already exists for this goal")

    try:
        async with connection.cursor() as cursor:
            await cursor.execute(
                """
                INSERT INTO reflections (user_id, goal_id, principle, reflection_text)
                VALUES (%s, %s, %s, %s)
                RETURNING id, user_id, goal_id, principle, reflection_text, created_at
                """,
                (user_id, goal_id, principle.id, text),
            )
            row = await cursor.fetchone()
    except UniqueViolation as exc:
        raise ReflectionConflictError("A reflection already exists for this goal") from exc

    logger.info(f"Reflection saved for goal {goal_id}")
    return row

"""Profile store: keyed lookups and inserts on `user_profiles`."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol
from uuid import UUID

from psycopg import Error as PsycopgError
from psycopg.errors import UniqueViolation

if TYPE_CHECKING:
    from psycopg import AsyncConnection
else:
    AsyncConnection = Any


class ProfileStoreError(Exception):
    """Raised when the profile store cannot answer a lookup or insert."""


class UsernameTakenError(Exception):
    """Raised when a username is already claimed by another profile."""


class ProfileStore(Protocol):
    async def find_profile_by_username(self, username: str) -> dict[str, Any] | None: ...

    async def find_profile_by_user_id(self, user_id: UUID) -> dict[str, Any] | None: ...

    async def insert_profile(self, user_id: UUID, username: str) -> dict[str, Any]: ...


class PostgresProfileStore:
    """`ProfileStore` backed by one psycopg async connection."""

    def __init__(self, connection: AsyncConnection) -> None:
        self.connection = connection

    async def _fetch_one(self, sql: str, params: tuple[Any, ...]) -> dict[str, Any] | None:
        try:
            async with self.connection.cursor() as cursor:
                await cursor.execute(sql, params)
                return await cursor.fetchone()
        except PsycopgError as exc:
            raise ProfileStoreError(str(exc)) from exc

    async def find_profile_by_username(self, username: str) -> dict[str, Any] | None:
        return await self._fetch_one(
            """
            SELECT user_id, username
            FROM user_profiles
            WHERE username = %s
            LIMIT 1
            """,
            (username,),
        )

    async def find_profile_by_user_id(self, user_id: UUID) -> dict[str, Any] | None:
        return await self._fetch_one(
            """
            SELECT user_id, username
            FROM user_profiles
            WHERE user_id = %s
            """,
            (user_id,),
        )

    async def insert_profile(self, user_id: UUID, username: str) -> dict[str, Any]:
        try:
            async with self.connection.cursor() as cursor:
                await cursor.execute(
                    """
                    INSERT INTO user_profiles (user_id, username)
                    VALUES (%s, %s)
                    RETURNING user_id, username
                    """,
                    (user_id, username),
                )
                return await cursor.fetchone()
        except UniqueViolation as exc:
            raise UsernameTakenError("Username already taken") from exc
        except PsycopgError as exc:
            raise ProfileStoreError(str(exc)) from exc

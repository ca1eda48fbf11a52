"""Profile creation and lookup on top of the profile store."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from loguru import logger

from richgoals.services.profile_store import ProfileStore, ProfileStoreError, UsernameTakenError
from richgoals.services.username_service import (
    TAKEN_MESSAGE,
    check_username_availability,
    normalize_username,
    validate_username_format,
)


class ProfileExistsError(Exception):
    """Raised when the user already claimed a username."""


async def create_profile(store: ProfileStore, user_id: UUID, raw_username: str) -> dict[str, Any]:
    """
    Claim a username for the authenticated user.

    Shares the uniqueness rule with the username check: names are stored
    lowercase, so `Alex` and `alex` collide.
    """
    username = normalize_username(raw_username)

    format_check = validate_username_format(username)
    if not format_check.valid:
        raise ValueError(format_check.message)

    if await store.find_profile_by_user_id(user_id) is not None:
        raise ProfileExistsError("Profile already exists for this user")

    availability = await check_username_availability(store, username)
    if not availability.available:
        if availability.message == TAKEN_MESSAGE:
            raise UsernameTakenError("Username already taken")
        raise ProfileStoreError(availability.message)

    row = await store.insert_profile(user_id, username)
    logger.info(f"Profile created for user {user_id}")
    return row


async def get_profile(store: ProfileStore, user_id: UUID) -> dict[str, Any]:
    row = await store.find_profile_by_user_id(user_id)
    if row is None:
        raise LookupError("Profile not found")
    return row

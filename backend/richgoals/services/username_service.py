"""Local username checks: format rules and availability against the profile store."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from loguru import logger

from richgoals.services.profile_store import ProfileStore, ProfileStoreError

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

TAKEN_MESSAGE = "Username is already taken"
LOOKUP_ERROR_MESSAGE = "Error checking username availability"


@dataclass(frozen=True)
class FormatCheck:
    valid: bool
    message: str | None = None


@dataclass(frozen=True)
class AvailabilityCheck:
    available: bool
    message: str | None = None


def normalize_username(value: str) -> str:
    return value.strip().lower()


def validate_username_format(candidate: Any) -> FormatCheck:
    """
    Check length and character set. First failing rule wins.

    Never raises: non-string input is reported as an invalid format.
    """
    if not isinstance(candidate, str):
        return FormatCheck(valid=False, message="Invalid username format")

    if len(candidate) < USERNAME_MIN_LENGTH:
        return FormatCheck(valid=False, message="Username must be at least 3 characters long")

    if len(candidate) > USERNAME_MAX_LENGTH:
        return FormatCheck(valid=False, message="Username must be 20 characters or less")

    if not USERNAME_PATTERN.fullmatch(candidate):
        return FormatCheck(
            valid=False,
            message="Username can only contain letters, numbers, underscores, and hyphens",
        )

    return FormatCheck(valid=True)


async def check_username_availability(store: ProfileStore, candidate: str) -> AvailabilityCheck:
    """Existence lookup only; the store holds lowercase names, so compare lowercase."""
    normalized = candidate.lower()

    try:
        existing = await store.find_profile_by_username(normalized)
    except ProfileStoreError as exc:
        # fail closed: an unreadable store must not report a name as free
        logger.error(f"Username availability lookup failed: {exc}")
        return AvailabilityCheck(available=False, message=LOOKUP_ERROR_MESSAGE)

    if existing:
        return AvailabilityCheck(available=False, message=TAKEN_MESSAGE)

    return AvailabilityCheck(available=True)

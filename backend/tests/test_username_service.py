from __future__ import annotations

import asyncio

import pytest

from richgoals.services.profile_store import ProfileStoreError
from richgoals.services.username_service import (
    check_username_availability,
    validate_username_format,
)


def _run(coro):
    return asyncio.run(coro)


class FakeProfileStore:
    def __init__(self, usernames=(), error: Exception | None = None):
        self.usernames = set(usernames)
        self.error = error
        self.lookups: list[str] = []

    async def find_profile_by_username(self, username):
        self.lookups.append(username)
        if self.error is not None:
            raise self.error
        if username in self.usernames:
            return {"username": username}
        return None


@pytest.mark.parametrize("candidate", ["", "a", "ab"])
def test_format_rejects_short_names(candidate) -> None:
    result = validate_username_format(candidate)
    assert result.valid is False
    assert "at least 3 characters" in result.message


def test_format_rejects_long_names() -> None:
    result = validate_username_format("a" * 21)
    assert result.valid is False
    assert "20 characters or less" in result.message


@pytest.mark.parametrize("candidate", ["has space", "dots.here", "emoji😀x", "semi;colon", "tab\tname", "abc\n"])
def test_format_rejects_disallowed_characters(candidate) -> None:
    result = validate_username_format(candidate)
    assert result.valid is False
    assert "letters, numbers, underscores, and hyphens" in result.message


def test_format_length_rule_wins_over_charset_rule() -> None:
    result = validate_username_format("a!")
    assert "at least 3 characters" in result.message


@pytest.mark.parametrize("candidate", ["abc", "Valid_Name", "kid-2030", "a" * 20])
def test_format_accepts_valid_names(candidate) -> None:
    result = validate_username_format(candidate)
    assert result.valid is True
    assert result.message is None


def test_format_never_raises_on_non_string() -> None:
    result = validate_username_format(None)
    assert result.valid is False
    assert result.message


def test_availability_lowercases_before_lookup() -> None:
    store = FakeProfileStore(usernames={"valid_name"})

    result = _run(check_username_availability(store, "Valid_Name"))

    assert store.lookups == ["valid_name"]
    assert result.available is False
    assert "already taken" in result.message


def test_availability_reports_free_name() -> None:
    store = FakeProfileStore()

    result = _run(check_username_availability(store, "fresh_name"))

    assert result.available is True
    assert result.message is None


def test_availability_fails_closed_on_store_error() -> None:
    store = FakeProfileStore(error=ProfileStoreError("connection reset"))

    result = _run(check_username_availability(store, "fresh_name"))

    assert result.available is False
    assert result.message == "Error checking username availability"

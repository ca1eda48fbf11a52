"""
Moderation gateway: one provider call per request, decoded defensively.

Every failure mode (no credential, transport error, non-2xx status, envelope
or JSON that cannot be decoded) collapses into the single `UNAVAILABLE`
signal. Callers decide what to do with it; they never see why.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from loguru import logger

from richgoals.ai.gemini_client import GeminiError, GeminiRequestError
from richgoals.ai.moderation_prompts import build_goal_coaching_prompt, build_username_prompt
from richgoals.services.principles import Principle

MAX_FLAGS = 8
MAX_QUESTIONS = 6


class SubjectKind(str, Enum):
    USERNAME = "username"
    GOAL_DRAFT = "goal_draft"


class TextCompletionProvider(Protocol):
    """Remote text-completion capability. Failures raise `GeminiError`."""

    @property
    def is_configured(self) -> bool: ...

    async def generate_text(self, prompt: str) -> str: ...


class Unavailable(Enum):
    """Single signal for "the provider could not give a usable answer"."""

    UNAVAILABLE = "unavailable"


UNAVAILABLE = Unavailable.UNAVAILABLE


@dataclass(frozen=True)
class ModerationRequest:
    subject_kind: SubjectKind
    text: str
    principle: Principle | None = None

    def __post_init__(self) -> None:
        if self.subject_kind is SubjectKind.USERNAME and not self.text.strip():
            raise ValueError("username text must not be empty")


@dataclass
class ModerationVerdict:
    is_appropriate: bool
    flags: list[str] = field(default_factory=list)
    message: str = ""
    questions: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {
            "isAppropriate": self.is_appropriate,
            "flags": list(self.flags),
            "message": self.message,
            "questions": list(self.questions),
        }


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _coerce_text_list(value: Any, limit: int, *, dedupe: bool = False) -> list[str]:
    if not isinstance(value, list):
        return []

    items: list[str] = []
    for raw in value:
        text = _coerce_text(raw)
        if not text:
            continue
        if dedupe and text in items:
            continue
        items.append(text)

    return items[:limit]


def decode_verdict(raw_text: str) -> ModerationVerdict | None:
    """
    Decode-or-default the model's text into a verdict.

    Returns None when the text is not a JSON object. Every field is coerced
    independently; nothing in the reply is trusted to match the schema.
    """
    try:
        parsed = json.loads(raw_text)
    except (TypeError, ValueError):
        return None

    if not isinstance(parsed, dict):
        return None

    return ModerationVerdict(
        is_appropriate=bool(parsed.get("isAppropriate")),
        flags=_coerce_text_list(parsed.get("flags"), MAX_FLAGS, dedupe=True),
        message=_coerce_text(parsed.get("message")),
        questions=_coerce_text_list(parsed.get("questions"), MAX_QUESTIONS),
    )


def build_prompt(request: ModerationRequest) -> str:
    if request.subject_kind is SubjectKind.USERNAME:
        return build_username_prompt(request.text)
    return build_goal_coaching_prompt(request.text, request.principle)


class ModerationGateway:
    def __init__(self, provider: TextCompletionProvider | None) -> None:
        self.provider = provider

    @property
    def enabled(self) -> bool:
        return self.provider is not None and self.provider.is_configured

    async def moderate(self, request: ModerationRequest) -> ModerationVerdict | Unavailable:
        if not self.enabled:
            logger.debug("Moderation disabled: no provider credential configured")
            return UNAVAILABLE

        prompt = build_prompt(request)

        try:
            raw_text = await self.provider.generate_text(prompt)
        except GeminiRequestError as exc:
            logger.warning(
                f"Moderation provider request failed for {request.subject_kind.value}: "
                f"status={exc.status_code}"
            )
            return UNAVAILABLE
        except GeminiError as exc:
            logger.warning(f"Moderation provider returned an unusable envelope: {exc}")
            return UNAVAILABLE

        verdict = decode_verdict(raw_text)
        if verdict is None:
            logger.warning(
                f"Moderation provider returned non-JSON output for {request.subject_kind.value} "
                f"(chars={len(raw_text)})"
            )
            return UNAVAILABLE

        logger.debug(
            f"Moderation verdict for {request.subject_kind.value}: "
            f"appropriate={verdict.is_appropriate}, flags={len(verdict.flags)}, "
            f"questions={len(verdict.questions)}"
        )
        return verdict

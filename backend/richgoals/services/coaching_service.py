"""
Coaching orchestrator: username checks and goal coaching.

Local checks run first and short-circuit; the moderation gateway is only
reached when they pass. Whatever the gateway returns, the orchestrator
enforces the output rules itself before anything reaches the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger

from richgoals.services.moderation_gateway import (
    UNAVAILABLE,
    ModerationGateway,
    ModerationRequest,
    ModerationVerdict,
    SubjectKind,
)
from richgoals.services.principles import Principle, get_fallback_questions, get_principle
from richgoals.services.profile_store import ProfileStore
from richgoals.services.username_service import (
    check_username_availability,
    validate_username_format,
)

USERNAME_AVAILABLE_MESSAGE = "Username is available"
USERNAME_INAPPROPRIATE_MESSAGE = "Username contains inappropriate content"
REWRITE_MESSAGE = "Please rewrite using respectful school-appropriate language."
REFINE_MESSAGE = "Here are questions to help refine your goal:"
START_MESSAGE = "Start with these guiding questions:"


@dataclass(frozen=True)
class UsernameCheckResult:
    available: bool
    appropriate: bool
    message: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "available": self.available,
            "appropriate": self.appropriate,
            "message": self.message,
        }


@dataclass(frozen=True)
class FailOpenPolicy:
    """
    What the user gets when the moderation provider cannot answer.

    Availability wins over strictness: signup is never blocked and goal
    coaching always returns the principle's static questions.
    """

    username_message: str = USERNAME_AVAILABLE_MESSAGE
    coaching_message: str = "AI is unavailable right now. Here are some guiding questions:"

    def username_result(self) -> UsernameCheckResult:
        return UsernameCheckResult(available=True, appropriate=True, message=self.username_message)

    def coaching_verdict(self, principle: Principle) -> ModerationVerdict:
        return ModerationVerdict(
            is_appropriate=True,
            flags=[],
            message=self.coaching_message,
            questions=get_fallback_questions(principle.id),
        )


FAIL_OPEN = FailOpenPolicy()


class CoachingOrchestrator:
    def __init__(
        self,
        profile_store: ProfileStore | None,
        gateway: ModerationGateway,
        policy: FailOpenPolicy = FAIL_OPEN,
    ) -> None:
        self.profile_store = profile_store
        self.gateway = gateway
        self.policy = policy

    async def check_username(self, raw: str) -> UsernameCheckResult:
        """Format -> availability -> appropriateness, stopping at the first failure."""
        if self.profile_store is None:
            raise RuntimeError("check_username requires a profile store")

        format_check = validate_username_format(raw)
        if not format_check.valid:
            return UsernameCheckResult(
                available=False,
                appropriate=False,
                message=format_check.message or "Invalid username format",
            )

        availability = await check_username_availability(self.profile_store, raw)
        if not availability.available:
            # taken names are not judged for content
            return UsernameCheckResult(
                available=False,
                appropriate=True,
                message=availability.message or "Username is already taken",
            )

        verdict = await self.gateway.moderate(
            ModerationRequest(subject_kind=SubjectKind.USERNAME, text=raw)
        )
        if verdict is UNAVAILABLE:
            logger.info("Username moderation unavailable; failing open")
            return self.policy.username_result()

        if verdict.is_appropriate:
            message = verdict.message or USERNAME_AVAILABLE_MESSAGE
        else:
            message = verdict.message or USERNAME_INAPPROPRIATE_MESSAGE

        return UsernameCheckResult(
            available=True,
            appropriate=verdict.is_appropriate,
            message=message,
        )

    async def get_goal_coaching(self, principle_id: str, draft: str = "") -> ModerationVerdict:
        """
        Moderate a goal draft and return guiding questions.

        Raises `InvalidPrincipleError` for an unknown principle before any
        provider call. Every other outcome is a well-formed verdict.
        """
        principle = get_principle(principle_id)
        draft_text = (draft or "").strip()

        verdict = await self.gateway.moderate(
            ModerationRequest(
                subject_kind=SubjectKind.GOAL_DRAFT,
                text=draft_text,
                principle=principle,
            )
        )
        if verdict is UNAVAILABLE:
            logger.info(f"Goal coaching unavailable for principle={principle.id}; using fallback questions")
            return self.policy.coaching_verdict(principle)

        return self._enforce_rules(verdict, principle, has_draft=bool(draft_text))

    def _enforce_rules(
        self,
        verdict: ModerationVerdict,
        principle: Principle,
        *,
        has_draft: bool,
    ) -> ModerationVerdict:
        if not verdict.is_appropriate:
            if verdict.questions:
                logger.debug("Dropping questions the provider sent for a flagged draft")
            return ModerationVerdict(
                is_appropriate=False,
                flags=list(verdict.flags),
                message=verdict.message or REWRITE_MESSAGE,
                questions=[],
            )

        questions = list(verdict.questions)
        if not questions:
            logger.debug(f"Provider approved draft without questions; using fallback for {principle.id}")
            questions = get_fallback_questions(principle.id)

        return ModerationVerdict(
            is_appropriate=True,
            flags=[],
            message=verdict.message or (REFINE_MESSAGE if has_draft else START_MESSAGE),
            questions=questions,
        )

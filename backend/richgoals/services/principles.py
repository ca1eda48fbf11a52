"""The four RICH principles and their static guiding questions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

PrincipleId = Literal["i-matter", "responsibility", "considerate", "strategies"]


class InvalidPrincipleError(ValueError):
    """Raised when a caller passes a principle id outside the fixed set."""


@dataclass(frozen=True)
class Principle:
    id: str
    name: str
    context: str
    fallback_questions: tuple[str, ...]


PRINCIPLES: dict[str, Principle] = {
    "i-matter": Principle(
        id="i-matter",
        name="I Matter",
        context="Self-worth, confidence, healthy habits, positive self-talk.",
        fallback_questions=(
            "What is one positive habit you want to build?",
            "When will you practice it each day?",
            "How will you remind yourself to do it?",
            "How will you track your progress this week?",
            "What will you do if you miss a day?",
        ),
    ),
    "responsibility": Principle(
        id="responsibility",
        name="Responsibility",
        context="Ownership, commitments, time management, finishing work before fun.",
        fallback_questions=(
            "What responsibility are you trying to improve?",
            "When exactly will you do it each day?",
            "What is the first small step you can start with?",
            "How will you prove you completed it?",
            "What might distract you, and how will you handle it?",
        ),
    ),
    "considerate": Principle(
        id="considerate",
        name="Considerate",
        context="Kindness, empathy, listening, helping others respectfully.",
        fallback_questions=(
            "Who do you want to be more considerate toward?",
            "What is one kind action you can do this week?",
            "When and where will you do it?",
            "How will you know it helped the other person?",
            "What will you do if you feel impatient or annoyed?",
        ),
    ),
    "strategies": Principle(
        id="strategies",
        name="Strategies",
        context="Planning, breaking tasks into steps, study and organization skills.",
        fallback_questions=(
            "What goal are you trying to reach?",
            "What are the 3 smallest steps to start?",
            "When will you do step 1?",
            "What tool will you use to stay organized (planner, notes, timer)?",
            "How will you measure progress by the end of the week?",
        ),
    ),
}


def get_principle(principle_id: str | None) -> Principle:
    """Resolve a principle id or raise `InvalidPrincipleError`."""
    principle = PRINCIPLES.get(principle_id) if isinstance(principle_id, str) else None
    if principle is None:
        raise InvalidPrincipleError("Invalid principleId")
    return principle


def get_fallback_questions(principle_id: PrincipleId) -> list[str]:
    return list(get_principle(principle_id).fallback_questions)

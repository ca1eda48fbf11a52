"""Moderation endpoints: username checks, goal coaching, and the principle list."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from .ai.gemini_client import GeminiClient
from .config import settings
from .database import get_profile_store
from .services.coaching_service import CoachingOrchestrator
from .services.moderation_gateway import ModerationGateway
from .services.principles import PRINCIPLES, InvalidPrincipleError
from .services.profile_store import ProfileStore

router = APIRouter(prefix="/api", tags=["moderation"])


class UsernameCheckRequest(BaseModel):
    username: str | None = None


class UsernameCheckResponse(BaseModel):
    available: bool
    appropriate: bool
    message: str


class GoalSuggestionsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    principle_id: str | None = Field(default=None, alias="principleId")
    draft: str | None = None


class CoachResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_appropriate: bool = Field(alias="isAppropriate")
    flags: list[str]
    message: str
    questions: list[str]


class PrincipleOut(BaseModel):
    id: str
    name: str
    context: str


def _get_gemini_client() -> GeminiClient:
    return GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
    )


def _get_gateway() -> ModerationGateway:
    return ModerationGateway(_get_gemini_client())


async def get_username_orchestrator(
    profile_store: ProfileStore = Depends(get_profile_store),
) -> CoachingOrchestrator:
    return CoachingOrchestrator(profile_store, _get_gateway())


def get_coaching_orchestrator() -> CoachingOrchestrator:
    # goal coaching never touches the profile store
    return CoachingOrchestrator(None, _get_gateway())


@router.post("/check-username", response_model=UsernameCheckResponse)
async def check_username_endpoint(
    payload: UsernameCheckRequest,
    orchestrator: CoachingOrchestrator = Depends(get_username_orchestrator),
) -> UsernameCheckResponse:
    """Format, availability and appropriateness of a candidate username."""
    username = (payload.username or "").strip()
    if not username:
        raise HTTPException(status_code=400, detail="Username is required")

    result = await orchestrator.check_username(username)
    return UsernameCheckResponse(**result.to_payload())


@router.post("/goal-suggestions", response_model=CoachResponse)
async def goal_suggestions_endpoint(
    payload: GoalSuggestionsRequest,
    orchestrator: CoachingOrchestrator = Depends(get_coaching_orchestrator),
) -> CoachResponse:
    """
    Moderate a goal draft and return guiding questions.

    An empty or missing draft returns starter questions for the principle.
    """
    try:
        verdict = await orchestrator.get_goal_coaching(payload.principle_id, payload.draft or "")
    except InvalidPrincipleError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return CoachResponse(
        is_appropriate=verdict.is_appropriate,
        flags=verdict.flags,
        message=verdict.message,
        questions=verdict.questions,
    )


@router.get("/principles", response_model=list[PrincipleOut])
def list_principles() -> list[PrincipleOut]:
    return [
        PrincipleOut(id=principle.id, name=principle.name, context=principle.context)
        for principle in PRINCIPLES.values()
    ]

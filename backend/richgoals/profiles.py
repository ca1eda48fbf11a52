"""Username claim and lookup for the signed-in user."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from .auth import get_current_user_id
from .database import get_profile_store
from .services.profile_store import ProfileStore, ProfileStoreError, UsernameTakenError
from .services.profiles_service import ProfileExistsError, create_profile, get_profile

router = APIRouter(prefix="/api", tags=["profiles"])


class CreateProfileRequest(BaseModel):
    username: str | None = None


class CreateProfileResponse(BaseModel):
    success: bool
    message: str
    username: str


class ProfileResponse(BaseModel):
    user_id: UUID
    username: str


@router.post("/create-profile", response_model=CreateProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile_endpoint(
    payload: CreateProfileRequest,
    user_id: UUID = Depends(get_current_user_id),
    profile_store: ProfileStore = Depends(get_profile_store),
) -> CreateProfileResponse:
    if not (payload.username or "").strip():
        raise HTTPException(status_code=400, detail="username is required")

    try:
        row = await create_profile(profile_store, user_id, payload.username)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (UsernameTakenError, ProfileExistsError) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ProfileStoreError as exc:
        raise HTTPException(status_code=500, detail="Failed to create profile") from exc

    return CreateProfileResponse(
        success=True,
        message="Profile created successfully",
        username=row["username"],
    )


@router.get("/profile", response_model=ProfileResponse)
async def get_profile_endpoint(
    user_id: UUID = Depends(get_current_user_id),
    profile_store: ProfileStore = Depends(get_profile_store),
) -> ProfileResponse:
    try:
        row = await get_profile(profile_store, user_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ProfileStoreError as exc:
        raise HTTPException(status_code=500, detail="Failed to load profile") from exc

    return ProfileResponse(**row)

"""Profiles API endpoints.

GET /api/profile - Get the caller's profile
GET /api/profiles - List all profiles
PATCH /api/profiles/{profile_id} - Update a profile
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from honeytrap.api.app import get_caller, get_store
from honeytrap.db import repo
from honeytrap.models.domain import Caller, ProfileEntity
from honeytrap.models.types import ProfileUpdate
from honeytrap.store.base import RecordStore

router = APIRouter()


@router.get("/profile", response_model=ProfileEntity)
def get_current_profile(
    store: RecordStore = Depends(get_store),
    caller: Caller | None = Depends(get_caller),
) -> ProfileEntity:
    """Get the caller's profile.

    Raises:
        HTTPException: 404 if there is no caller or no profile.
    """
    profile = repo.get_current_profile(store, caller)

    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")

    return profile


@router.get("/profiles", response_model=list[ProfileEntity])
def get_all_profiles(store: RecordStore = Depends(get_store)) -> list[ProfileEntity]:
    """List all profiles, newest first."""
    return repo.get_all_profiles(store)


@router.patch("/profiles/{profile_id}", status_code=204)
def update_profile(
    profile_id: str,
    updates: ProfileUpdate,
    store: RecordStore = Depends(get_store),
) -> Response:
    """Update a profile."""
    repo.update_profile(store, profile_id, updates)
    return Response(status_code=204)

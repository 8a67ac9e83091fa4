"""
Profile API Router
Signup profile, current profile and profile updates
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from commentlens.api.schemas import (
    ProfileCreateRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    profile_to_response,
)
from commentlens.app.dependencies import get_current_user_id, get_persistence_service
from commentlens.services import PersistenceService, ServiceError, error_to_http_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/profiles", tags=["Profiles"])


@router.post("", response_model=ProfileResponse, status_code=201)
async def create_profile(
    request: ProfileCreateRequest,
    uid: str = Depends(get_current_user_id),
    service: PersistenceService = Depends(get_persistence_service),
):
    """Create the caller's profile with the starting credit grant"""
    try:
        profile = await service.create_profile(uid, **request.model_dump())
    except ServiceError as e:
        raise HTTPException(error_to_http_status(e), detail=e.to_dict())
    return profile_to_response(profile)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    uid: str = Depends(get_current_user_id),
    service: PersistenceService = Depends(get_persistence_service),
):
    profile = await service.get_profile(uid)
    if profile is None:
        raise HTTPException(404, detail=f"Profile not found: {uid}")
    return profile_to_response(profile)


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    request: ProfileUpdateRequest,
    uid: str = Depends(get_current_user_id),
    service: PersistenceService = Depends(get_persistence_service),
):
    """Update editable profile fields (credits are not editable)"""
    profile = await service.update_profile(uid, **request.model_dump(exclude_none=True))
    if profile is None:
        raise HTTPException(404, detail=f"Profile not found: {uid}")
    return profile_to_response(profile)


# ============================================================================
# Live Session
# ============================================================================


@router.post("/me/session", response_model=ProfileResponse)
async def open_session(
    uid: str = Depends(get_current_user_id),
    service: PersistenceService = Depends(get_persistence_service),
):
    """
    Make the caller the signed-in user of the live profile stream

    The stream follows one session per process; signing in replaces
    whichever user held it before.
    """
    profile = await service.sign_in(uid)
    if profile is None:
        service.sign_out()
        raise HTTPException(404, detail=f"Profile not found: {uid}")
    return profile_to_response(profile)


@router.delete("/me/session", status_code=204)
async def close_session(
    uid: str = Depends(get_current_user_id),
    service: PersistenceService = Depends(get_persistence_service),
):
    if service.signed_in_uid != uid:
        raise HTTPException(409, detail=f"No live session for {uid}")
    service.sign_out()

"""Profile endpoints: a user's applied records."""

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from joblinkhub.api.deps import get_current_user, get_profile_service
from joblinkhub.core.exceptions import NotFound
from joblinkhub.db.session import get_db
from joblinkhub.models.user import User
from joblinkhub.schemas.profile import ProfileResponse, ProfileUpdate
from joblinkhub.schemas.record import RecordResponse
from joblinkhub.services.profile_service import ProfileService

logger = structlog.get_logger(__name__)
router = APIRouter()


def _ensure_self(user_id: UUID, current_user: User) -> None:
    # Other users' profiles are reported as missing
    if user_id != current_user.id:
        raise NotFound("Profile not found")


def _profile_response(profile, applied) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        user_id=profile.user_id,
        applied_records=[RecordResponse.model_validate(record) for record in applied],
        created_at=profile.created_at,
    )


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
    db: AsyncSession = Depends(get_db),
):
    """Get the caller's profile, creating it on first access."""
    _ensure_self(user_id, current_user)
    profile, applied = await profiles.get(user_id)
    await db.commit()
    return _profile_response(profile, applied)


@router.put("/{user_id}", response_model=ProfileResponse)
async def add_applied_record(
    user_id: UUID,
    profile_update: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
    db: AsyncSession = Depends(get_db),
):
    """Add a record to the caller's applied records (no-op if already there)."""
    _ensure_self(user_id, current_user)
    profile, applied = await profiles.add_record(user_id, profile_update.record_id)
    await db.commit()
    logger.info("Profile updated", user_id=str(user_id), record_id=str(profile_update.record_id))
    return _profile_response(profile, applied)

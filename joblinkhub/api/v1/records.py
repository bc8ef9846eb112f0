"""Record endpoints: job applications tracked by their owners."""

from typing import List
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from joblinkhub.api.deps import get_current_user, get_record_service
from joblinkhub.db.session import get_db
from joblinkhub.models.user import User
from joblinkhub.schemas.record import (
    RecordCreate,
    RecordDeleteResponse,
    RecordListItem,
    RecordResponse,
    RecordUpdate,
    StatusResponse,
    StatusUpdate,
)
from joblinkhub.services.record_service import RecordService

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("", response_model=List[RecordListItem])
async def list_records(
    current_user: User = Depends(get_current_user),
    records: RecordService = Depends(get_record_service),
):
    """List all records, newest first, each flagged `isApplied` for the caller."""
    rows = await records.list_records(current_user.id)
    return [
        RecordListItem.model_validate(record).model_copy(update={"is_applied": applied})
        for record, applied in rows
    ]


@router.post("", response_model=RecordResponse, status_code=status.HTTP_201_CREATED)
async def create_record(
    record_in: RecordCreate,
    current_user: User = Depends(get_current_user),
    records: RecordService = Depends(get_record_service),
    db: AsyncSession = Depends(get_db),
):
    """Create a record owned by the caller."""
    record = await records.create(record_in, current_user.id)
    await db.commit()
    return record


@router.post("/duplicate/{record_id}", response_model=RecordResponse, status_code=status.HTTP_201_CREATED)
async def duplicate_record(
    record_id: UUID,
    current_user: User = Depends(get_current_user),
    records: RecordService = Depends(get_record_service),
    db: AsyncSession = Depends(get_db),
):
    """Copy any record into the caller's own list (click count reset)."""
    record = await records.duplicate(record_id, current_user.id)
    await db.commit()
    return record


@router.put("/{record_id}", response_model=RecordResponse)
async def update_record(
    record_id: UUID,
    record_update: RecordUpdate,
    current_user: User = Depends(get_current_user),
    records: RecordService = Depends(get_record_service),
    db: AsyncSession = Depends(get_db),
):
    """Update a record the caller owns."""
    record = await records.update(record_id, current_user.id, record_update)
    await db.commit()
    return record


@router.delete("/{record_id}", response_model=RecordDeleteResponse)
async def delete_record(
    record_id: UUID,
    current_user: User = Depends(get_current_user),
    records: RecordService = Depends(get_record_service),
    db: AsyncSession = Depends(get_db),
):
    """Delete a record the caller owns."""
    await records.delete(record_id, current_user.id)
    await db.commit()
    logger.info("Record deleted", record_id=str(record_id), user_id=str(current_user.id))
    return RecordDeleteResponse(message="Record deleted", id=record_id)


@router.put("/{record_id}/click", response_model=RecordResponse)
async def increment_click(
    record_id: UUID,
    records: RecordService = Depends(get_record_service),
    db: AsyncSession = Depends(get_db),
):
    """Count a visit to the posting link. Open to anyone."""
    record = await records.increment_click(record_id)
    await db.commit()
    return record


@router.patch("/{record_id}/status", response_model=StatusResponse)
async def set_status(
    record_id: UUID,
    status_in: StatusUpdate,
    current_user: User = Depends(get_current_user),
    records: RecordService = Depends(get_record_service),
    db: AsyncSession = Depends(get_db),
):
    """Set the caller's application status (`Applied` or anything else to withdraw)."""
    new_status = await records.set_application_status(record_id, current_user.id, status_in.status)
    await db.commit()
    return StatusResponse(record_id=record_id, status=new_status)


@router.get("/{record_id}/status", response_model=StatusResponse)
async def get_status(
    record_id: UUID,
    current_user: User = Depends(get_current_user),
    records: RecordService = Depends(get_record_service),
):
    """Get the caller's application status for a record."""
    current_status = await records.get_application_status(record_id, current_user.id)
    return StatusResponse(record_id=record_id, status=current_status)

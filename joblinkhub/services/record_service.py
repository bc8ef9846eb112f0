"""Record store: CRUD over job records scoped by owner."""

import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from joblinkhub.core.exceptions import NotFound, ValidationError
from joblinkhub.models.record import Record, RecordApplication
from joblinkhub.schemas.record import RecordCreate, RecordUpdate
from joblinkhub.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

APPLIED = "Applied"
NOT_APPLIED = "Not Applied"

# Columns copied verbatim by duplicate()
COPIED_FIELDS = (
    "company",
    "employment_type",
    "job_title",
    "applied_date",
    "website_link",
    "comment",
    "received_interview",
    "received_offer",
)

NON_NULLABLE_FIELDS = {"company", "employment_type", "job_title", "applied_date", "website_link"}


class RecordService:
    """Record operations. Mutations are checked against the caller's ownership."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.profiles = ProfileService(db)

    async def _get(self, record_id: uuid.UUID) -> Record:
        record = await self.db.get(Record, record_id)
        if record is None:
            raise NotFound("Record not found")
        return record

    async def _get_owned(self, record_id: uuid.UUID, caller_id: uuid.UUID) -> Record:
        # Someone else's record looks exactly like a missing one
        result = await self.db.execute(
            select(Record).where(Record.id == record_id, Record.owner_user_id == caller_id)
        )
        record = result.scalar_one_or_none()
        if record is None:
            raise NotFound("Record not found")
        return record

    async def list_records(self, caller_id: Optional[uuid.UUID] = None) -> List[Tuple[Record, bool]]:
        """All records, newest first, each paired with the caller's isApplied flag."""
        result = await self.db.execute(select(Record).order_by(Record.created_at.desc()))
        records = result.scalars().all()

        applied_ids = set()
        if caller_id is not None:
            applied_ids = await self.profiles.applied_record_ids(caller_id)

        return [(record, record.id in applied_ids) for record in records]

    async def create(self, data: RecordCreate, owner_id: uuid.UUID) -> Record:
        record = Record(
            company=data.company,
            employment_type=data.employment_type,
            job_title=data.job_title,
            applied_date=data.applied_date,
            website_link=data.website_link,
            comment=data.comment,
            click_count=data.click,
            received_interview=data.received_interview,
            received_offer=data.received_offer,
            owner_user_id=owner_id,
        )
        self.db.add(record)
        await self.db.flush()
        await self.db.refresh(record)
        logger.info(f"User {owner_id} created record {record.id}")
        return record

    async def update(self, record_id: uuid.UUID, caller_id: uuid.UUID, patch: RecordUpdate) -> Record:
        record = await self._get_owned(record_id, caller_id)

        update_data = patch.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is None and field in NON_NULLABLE_FIELDS:
                raise ValidationError(f"{field} cannot be empty")
            setattr(record, field, value)

        await self.db.flush()
        await self.db.refresh(record)
        return record

    async def delete(self, record_id: uuid.UUID, caller_id: uuid.UUID) -> None:
        record = await self._get_owned(record_id, caller_id)
        await self.db.execute(delete(RecordApplication).where(RecordApplication.record_id == record.id))
        await self.db.delete(record)
        await self.db.flush()
        logger.info(f"User {caller_id} deleted record {record_id}")

    async def increment_click(self, record_id: uuid.UUID) -> Record:
        """Add one to click_count in a single UPDATE statement."""
        result = await self.db.execute(
            update(Record)
            .where(Record.id == record_id)
            .values(click_count=Record.click_count + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFound("Record not found")

        result = await self.db.execute(
            select(Record).where(Record.id == record_id).execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def duplicate(self, record_id: uuid.UUID, caller_id: uuid.UUID) -> Record:
        """Copy a record for the caller with a fresh click count and mark it applied."""
        source = await self._get(record_id)

        clone = Record(
            **{field: getattr(source, field) for field in COPIED_FIELDS},
            click_count=0,
            owner_user_id=caller_id,
        )
        self.db.add(clone)
        await self.db.flush()
        await self.db.refresh(clone)

        await self.profiles.add_record(caller_id, clone.id)
        logger.info(f"User {caller_id} duplicated record {record_id} as {clone.id}")
        return clone

    async def set_application_status(self, record_id: uuid.UUID, caller_id: uuid.UUID, status: str) -> str:
        """Status "Applied" joins the record's applied set; any other status leaves it."""
        await self._get(record_id)

        if status == APPLIED:
            await self.profiles.add_record(caller_id, record_id)
            return APPLIED

        await self.profiles.remove_record(caller_id, record_id)
        return NOT_APPLIED

    async def get_application_status(self, record_id: uuid.UUID, caller_id: uuid.UUID) -> str:
        await self._get(record_id)
        if await self.profiles.is_applied(caller_id, record_id):
            return APPLIED
        return NOT_APPLIED

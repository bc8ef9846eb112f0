"""Profile and application-membership service."""

import logging
import uuid
from typing import List, Optional, Set, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from joblinkhub.core.exceptions import NotFound
from joblinkhub.models.profile import Profile
from joblinkhub.models.record import Record, RecordApplication

logger = logging.getLogger(__name__)


class ProfileService:
    """
    Tracks which records a user has applied to.

    Membership lives in ``record_applications`` only; a profile's applied
    records are read back from it in application order.

    Inserts run in a savepoint. Losing a race against a concurrent request
    that created the same row rolls back the savepoint only and returns the
    row that request created.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _find_profile(self, user_id: uuid.UUID) -> Optional[Profile]:
        result = await self.db.execute(select(Profile).where(Profile.user_id == user_id))
        return result.scalar_one_or_none()

    async def ensure_profile(self, user_id: uuid.UUID) -> Profile:
        """Return the user's profile, creating an empty one if absent."""
        profile = await self._find_profile(user_id)
        if profile is not None:
            return profile

        try:
            async with self.db.begin_nested():
                profile = Profile(user_id=user_id)
                self.db.add(profile)
        except IntegrityError:
            profile = await self._find_profile(user_id)
            if profile is None:
                raise
            return profile

        logger.info(f"Created profile for user {user_id}")
        return profile

    async def applied_records(self, user_id: uuid.UUID) -> List[Record]:
        result = await self.db.execute(
            select(Record)
            .join(RecordApplication, RecordApplication.record_id == Record.id)
            .where(RecordApplication.user_id == user_id)
            .order_by(RecordApplication.created_at)
        )
        return list(result.scalars().all())

    async def applied_record_ids(self, user_id: uuid.UUID) -> Set[uuid.UUID]:
        result = await self.db.execute(
            select(RecordApplication.record_id).where(RecordApplication.user_id == user_id)
        )
        return set(result.scalars().all())

    async def is_applied(self, user_id: uuid.UUID, record_id: uuid.UUID) -> bool:
        result = await self.db.execute(
            select(RecordApplication.id).where(
                RecordApplication.user_id == user_id,
                RecordApplication.record_id == record_id,
            )
        )
        return result.scalar_one_or_none() is not None

    async def get(self, user_id: uuid.UUID) -> Tuple[Profile, List[Record]]:
        """Profile plus its applied records resolved to full rows."""
        profile = await self.ensure_profile(user_id)
        return profile, await self.applied_records(user_id)

    async def add_record(self, user_id: uuid.UUID, record_id: uuid.UUID) -> Tuple[Profile, List[Record]]:
        """Mark ``record_id`` as applied; a repeated call is a no-op."""
        record = await self.db.get(Record, record_id)
        if record is None:
            raise NotFound("Record not found")

        profile = await self.ensure_profile(user_id)

        if not await self.is_applied(user_id, record_id):
            try:
                async with self.db.begin_nested():
                    self.db.add(RecordApplication(user_id=user_id, record_id=record_id))
            except IntegrityError:
                if not await self.is_applied(user_id, record_id):
                    raise
            else:
                logger.info(f"User {user_id} applied to record {record_id}")

        return profile, await self.applied_records(user_id)

    async def remove_record(self, user_id: uuid.UUID, record_id: uuid.UUID) -> None:
        """Withdraw an application; absent memberships are ignored."""
        await self.db.execute(
            delete(RecordApplication).where(
                RecordApplication.user_id == user_id,
                RecordApplication.record_id == record_id,
            )
        )

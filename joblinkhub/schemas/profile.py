"""Profile schemas."""

from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from joblinkhub.schemas.record import RecordResponse


class ProfileUpdate(BaseModel):
    """Mark a record as applied."""

    record_id: UUID

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ProfileResponse(BaseModel):
    """Profile with applied records in application order."""

    id: UUID
    user_id: UUID
    applied_records: List[RecordResponse] = Field(default_factory=list)
    created_at: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True

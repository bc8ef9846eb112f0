"""Record schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field
from pydantic.alias_generators import to_camel


class RecordCreate(BaseModel):
    """Fields required to track a new job application.

    ``type`` and ``date`` are accepted for ``employmentType`` and
    ``appliedDate`` respectively.
    """

    company: str = Field(..., min_length=1, max_length=255)
    employment_type: str = Field(
        ...,
        min_length=1,
        max_length=100,
        validation_alias=AliasChoices("employmentType", "employment_type", "type"),
    )
    job_title: str = Field(..., min_length=1, max_length=255)
    applied_date: date = Field(
        ...,
        validation_alias=AliasChoices("appliedDate", "applied_date", "date"),
    )
    website_link: str = Field(..., min_length=1)
    comment: Optional[str] = None
    click: int = Field(..., ge=0, description="Initial click count")
    received_interview: Optional[bool] = None
    received_offer: Optional[bool] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class RecordUpdate(BaseModel):
    """Partial update; only fields present in the body are applied.

    Accepts the same ``type`` and ``date`` names as :class:`RecordCreate`.
    """

    company: Optional[str] = Field(None, min_length=1, max_length=255)
    employment_type: Optional[str] = Field(
        None,
        min_length=1,
        max_length=100,
        validation_alias=AliasChoices("employmentType", "employment_type", "type"),
    )
    job_title: Optional[str] = Field(None, min_length=1, max_length=255)
    applied_date: Optional[date] = Field(
        None,
        validation_alias=AliasChoices("appliedDate", "applied_date", "date"),
    )
    website_link: Optional[str] = Field(None, min_length=1)
    comment: Optional[str] = None
    received_interview: Optional[bool] = None
    received_offer: Optional[bool] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class RecordResponse(BaseModel):
    """Record as returned by the API."""

    id: UUID
    company: str
    employment_type: str
    job_title: str
    applied_date: date
    website_link: str
    comment: Optional[str] = None
    click_count: int
    owner_user_id: UUID
    received_interview: Optional[bool] = None
    received_offer: Optional[bool] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class RecordListItem(RecordResponse):
    """Record annotated with the caller's application state."""

    is_applied: bool = False


class StatusUpdate(BaseModel):
    status: str = Field(..., min_length=1, description='"Applied" or any other value to withdraw')


class StatusResponse(BaseModel):
    record_id: UUID
    status: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class RecordDeleteResponse(BaseModel):
    message: str
    id: UUID

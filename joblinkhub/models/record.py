"""Job record and application membership models."""

from datetime import datetime, timedelta

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from joblinkhub.db.base import Base

_last_applied_at = datetime.min


def next_applied_at() -> datetime:
    """utcnow, nudged forward so this process never hands out the same timestamp twice."""
    global _last_applied_at
    now = datetime.utcnow()
    if now <= _last_applied_at:
        now = _last_applied_at + timedelta(microseconds=1)
    _last_applied_at = now
    return now


class Record(Base):
    """A job posting the owner applied to."""

    __tablename__ = "records"

    company = Column(String(255), nullable=False)
    employment_type = Column(String(100), nullable=False)  # fulltime, internship, contract...
    job_title = Column(String(255), nullable=False)
    applied_date = Column(Date, nullable=False)
    website_link = Column(Text, nullable=False)
    comment = Column(Text, nullable=True)
    click_count = Column(Integer, default=0, nullable=False)
    received_interview = Column(Boolean, nullable=True)
    received_offer = Column(Boolean, nullable=True)

    owner_user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    owner = relationship("User", back_populates="records")
    applications = relationship(
        "RecordApplication",
        back_populates="record",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Record {self.job_title} @ {self.company}>"


class RecordApplication(Base):
    """Membership of a user in a record's "applied by" set.

    Rows are ordered by ``created_at``, which is the user's application order.
    """

    __tablename__ = "record_applications"
    __table_args__ = (
        UniqueConstraint("record_id", "user_id", name="uq_record_applications_record_user"),
    )

    record_id = Column(Uuid(as_uuid=True), ForeignKey("records.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=next_applied_at, nullable=False)

    record = relationship("Record", back_populates="applications")

    def __repr__(self):
        return f"<RecordApplication {self.user_id} -> {self.record_id}>"

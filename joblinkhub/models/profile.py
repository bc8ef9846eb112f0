"""Profile model."""

from sqlalchemy import Column, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from joblinkhub.db.base import Base


class Profile(Base):
    """Per-user profile; applied records are derived from record_applications."""

    __tablename__ = "profiles"

    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )

    user = relationship("User", back_populates="profile")

    def __repr__(self):
        return f"<Profile {self.user_id}>"

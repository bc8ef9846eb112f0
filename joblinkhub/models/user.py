"""User model."""

from dataclasses import dataclass
from typing import List, Optional, Union

from sqlalchemy import CheckConstraint, Column, String
from sqlalchemy.orm import relationship

from joblinkhub.db.base import Base


@dataclass(frozen=True)
class LocalIdentity:
    """Username/password account."""

    username: str
    password_hash: str


@dataclass(frozen=True)
class FederatedIdentity:
    """Account vouched for by Google (``provider_id`` is the token subject)."""

    provider_id: str


Identity = Union[LocalIdentity, FederatedIdentity]


class User(Base):
    """User model for authentication."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "google_id IS NOT NULL OR (username IS NOT NULL AND password_hash IS NOT NULL)",
            name="ck_users_has_identity",
        ),
    )

    username = Column(String(150), unique=True, index=True, nullable=True)
    password_hash = Column(String(255), nullable=True)
    google_id = Column(String(255), unique=True, index=True, nullable=True)
    name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=True)

    # Relationships
    records = relationship("Record", back_populates="owner", cascade="all, delete-orphan")
    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")

    @classmethod
    def from_identity(
        cls,
        identity: Identity,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> "User":
        """Build a user from exactly one identity."""
        if isinstance(identity, LocalIdentity):
            if not identity.username or not identity.password_hash:
                raise ValueError("Local identity requires username and password hash")
            return cls(
                username=identity.username,
                password_hash=identity.password_hash,
                name=name,
                email=email,
            )
        if isinstance(identity, FederatedIdentity):
            if not identity.provider_id:
                raise ValueError("Federated identity requires a provider id")
            return cls(google_id=identity.provider_id, name=name, email=email)
        raise TypeError(f"Unsupported identity: {identity!r}")

    @property
    def identities(self) -> List[Identity]:
        """Identities attached to this account (a linked account has both)."""
        found: List[Identity] = []
        if self.username and self.password_hash:
            found.append(LocalIdentity(self.username, self.password_hash))
        if self.google_id:
            found.append(FederatedIdentity(self.google_id))
        return found

    @property
    def local_identity(self) -> Optional[LocalIdentity]:
        for identity in self.identities:
            if isinstance(identity, LocalIdentity):
                return identity
        return None

    def link_google(self, provider_id: str, name: Optional[str] = None) -> None:
        """Attach a Google identity to an existing account."""
        self.google_id = provider_id
        if name and not self.name:
            self.name = name

    def __repr__(self):
        return f"<User {self.username or self.email or self.google_id}>"

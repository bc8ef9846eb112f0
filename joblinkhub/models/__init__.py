"""Database models."""

# Import all models in dependency order to ensure proper relationship initialization
from joblinkhub.models.user import FederatedIdentity, Identity, LocalIdentity, User
from joblinkhub.models.record import Record, RecordApplication
from joblinkhub.models.profile import Profile

# Export all models
__all__ = [
    "User",
    "LocalIdentity",
    "FederatedIdentity",
    "Identity",
    "Record",
    "RecordApplication",
    "Profile",
]

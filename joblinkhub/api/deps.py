"""
API Dependencies
Common dependencies for API endpoints (authentication, services)
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from joblinkhub.config import Settings, get_settings
from joblinkhub.core.exceptions import Unauthorized
from joblinkhub.core.security import decode_token
from joblinkhub.db.session import get_db
from joblinkhub.models.user import User
from joblinkhub.services.auth_service import AuthService
from joblinkhub.services.profile_service import ProfileService
from joblinkhub.services.record_service import RecordService

# auto_error=False so a missing header surfaces as our own Unauthorized
security = HTTPBearer(auto_error=False)


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(db, settings=settings)


def get_record_service(db: AsyncSession = Depends(get_db)) -> RecordService:
    return RecordService(db)


def get_profile_service(db: AsyncSession = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


async def _resolve_user(token: str, auth: AuthService) -> User:
    user_id = decode_token(token, settings=auth.settings)
    user = await auth.get_user(user_id)
    if user is None:
        raise Unauthorized("Not authorized, user not found")
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    """
    Get current authenticated user from the Bearer token.
    """
    if credentials is None:
        raise Unauthorized("Not authorized, no token")
    return await _resolve_user(credentials.credentials, auth)

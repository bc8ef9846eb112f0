"""Authentication: local accounts, Google sign-in and bearer credentials."""

import asyncio
import logging
import uuid
from typing import List, Optional, Tuple

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from joblinkhub.config import Settings, settings as default_settings
from joblinkhub.core.exceptions import (
    DuplicateKey,
    DuplicateUser,
    InvalidCredentials,
    ServerError,
    ValidationError,
)
from joblinkhub.core.security import create_access_token, get_password_hash, verify_password
from joblinkhub.models.user import FederatedIdentity, LocalIdentity, User

logger = logging.getLogger(__name__)


def _email_verified(payload: dict) -> bool:
    # Older tokens carry the claim as a string
    return payload.get("email_verified") in (True, "true")


class AuthService:
    """Resolves credentials to users and issues bearer tokens for them."""

    def __init__(self, db: AsyncSession, settings: Settings = default_settings):
        self.db = db
        self.settings = settings

    def issue_token(self, user: User) -> str:
        return create_access_token(user.id, settings=self.settings)

    async def get_user(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def list_users(self) -> List[User]:
        result = await self.db.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())

    async def _find_one(self, *criteria) -> Optional[User]:
        result = await self.db.execute(select(User).where(*criteria))
        return result.scalar_one_or_none()

    async def _save_new(self, user: User, field: str) -> User:
        try:
            async with self.db.begin_nested():
                self.db.add(user)
        except IntegrityError:
            raise DuplicateKey(field)
        await self.db.refresh(user)
        return user

    async def register(self, username: str, password: str, confirm_password: str) -> Tuple[User, str]:
        """Create a local account and return it with a fresh token."""
        if password != confirm_password:
            raise ValidationError("Passwords do not match")

        if await self._find_one(User.username == username):
            raise DuplicateUser("username")

        user = User.from_identity(LocalIdentity(username, get_password_hash(password)))
        user = await self._save_new(user, "username")
        logger.info(f"Registered local user {user.id}")
        return user, self.issue_token(user)

    async def login(self, username: str, password: str) -> Tuple[User, str]:
        user = await self._find_one(User.username == username)
        identity = user.local_identity if user else None

        if identity is None or not verify_password(password, identity.password_hash):
            logger.info("Rejected login attempt")
            raise InvalidCredentials()

        return user, self.issue_token(user)

    async def _verify_google_token(self, token: str) -> dict:
        client_id = self.settings.GOOGLE_CLIENT_ID
        if not client_id:
            logger.error("Google client ID is not configured")
            raise ServerError("Google client ID is not configured")

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                None,
                lambda: google_id_token.verify_oauth2_token(token, google_requests.Request(), client_id),
            )
        except ValueError as e:
            logger.warning(f"Invalid Google token: {e}")
            raise ValidationError(f"Invalid Google token: {e}")
        except google_exceptions.GoogleAuthError as e:
            logger.error(f"Google token verification failed: {type(e).__name__}: {e}", exc_info=True)
            raise ServerError(f"Google login failed: {e}")

    async def google_login(self, token: str) -> Tuple[User, str]:
        """Sign in with a Google id_token, linking or creating the account as needed."""
        payload = await self._verify_google_token(token)

        google_id = payload.get("sub")
        if not google_id:
            raise ValidationError("Google token missing subject")
        email = payload.get("email")
        email_verified = _email_verified(payload)
        name = payload.get("name")

        user = await self._find_one(User.google_id == google_id)

        if user is None and email:
            user = await self._find_one(User.email == email)
            if user is not None:
                if not email_verified:
                    raise DuplicateKey("email", "Google has not verified this email")
                if user.google_id and user.google_id != google_id:
                    raise DuplicateKey("email", "Email is linked to another Google account")
                user.link_google(google_id, name)
                await self.db.flush()
                logger.info(f"Linked Google identity to existing user {user.id}")

        if user is None:
            # Only verified addresses are stored
            user = User.from_identity(
                FederatedIdentity(google_id), name=name, email=email if email_verified else None
            )
            user = await self._save_new(user, "googleId")
            logger.info(f"Created user {user.id} from Google sign-in")

        return user, self.issue_token(user)

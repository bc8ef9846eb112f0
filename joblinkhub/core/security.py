"""Security utilities: JWT bearer credentials and password hashing."""

import uuid
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from joblinkhub.config import Settings, settings as default_settings
from joblinkhub.core.exceptions import Unauthorized

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


def _truncate(password: str) -> str:
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return encoded[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")
    return password


def get_password_hash(password: str) -> str:
    """Hash a password with a per-password salt."""
    return pwd_context.hash(_truncate(password))


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a stored hash."""
    if not hashed_password:
        return False
    return pwd_context.verify(_truncate(plain_password), hashed_password)


def create_access_token(
    user_id: uuid.UUID,
    expires_delta: Optional[timedelta] = None,
    settings: Settings = default_settings,
) -> str:
    """Create a signed JWT asserting ``user_id``."""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    to_encode = {
        "sub": str(user_id),
        "exp": datetime.utcnow() + expires_delta,
        "type": "access",
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str, settings: Settings = default_settings) -> uuid.UUID:
    """Verify signature and expiry; return the user id the token asserts."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise Unauthorized("Not authorized, token failed")

    if payload.get("type") != "access":
        raise Unauthorized("Not authorized, token failed")

    try:
        return uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise Unauthorized("Not authorized, token failed")

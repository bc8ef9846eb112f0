"""User and authentication endpoints."""

from typing import List

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from joblinkhub.api.deps import get_auth_service, get_current_user
from joblinkhub.db.session import get_db
from joblinkhub.models.user import User
from joblinkhub.schemas.auth import (
    AuthResponse,
    GoogleLoginRequest,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from joblinkhub.services.auth_service import AuthService

logger = structlog.get_logger(__name__)
router = APIRouter()


def _auth_response(user: User, token: str) -> AuthResponse:
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.get("", response_model=List[UserResponse])
async def list_users(
    current_user: User = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
):
    """List all users."""
    return await auth.list_users()


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return current_user


@router.post("/auth/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
    db: AsyncSession = Depends(get_db),
):
    """Register a local account and sign it in."""
    user, token = await auth.register(request.username, request.password, request.confirm_password)
    await db.commit()
    logger.info("User registered", user_id=str(user.id))
    return _auth_response(user, token)


@router.post("/auth/login", response_model=AuthResponse)
async def login(request: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    """Login with username and password."""
    user, token = await auth.login(request.username, request.password)
    logger.info("User logged in", user_id=str(user.id))
    return _auth_response(user, token)


@router.post("/auth/google-login", response_model=AuthResponse)
async def google_login(
    request: GoogleLoginRequest,
    auth: AuthService = Depends(get_auth_service),
    db: AsyncSession = Depends(get_db),
):
    """Login with a Google id_token; creates or links the account on first use."""
    user, token = await auth.google_login(request.token)
    await db.commit()
    logger.info("Google login succeeded", user_id=str(user.id))
    return _auth_response(user, token)

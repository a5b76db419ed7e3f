"""
Authentication Router for Mermaid Studio

Registration, login, token refresh and sign-out. The authenticated user is the
identity that scopes diagram ownership.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.services.auth_service import AuthService
from app.schemas.auth import UserCreate, UserLogin, UserResponse, TokenResponse, TokenRefresh
from app.models.user import User
from app.utils.logging_config import auth_logger
from app.exceptions import (
    TokenExpiredException,
    InvalidCredentialsException,
    UserInactiveException,
)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])
security = HTTPBearer(auto_error=False)


async def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)]
) -> User | None:
    """Identity from the bearer token, or None for anonymous callers."""
    if credentials is None:
        return None
    auth_service = AuthService(db)
    user = await auth_service.get_user_from_token(credentials.credentials)
    if not user:
        auth_logger.warning("Failed authorization attempt via token")
        raise TokenExpiredException()
    if not user.is_active:
        raise UserInactiveException()
    return user


async def get_current_user(
    user: Annotated[User | None, Depends(get_optional_user)]
) -> User:
    """
    Raises:
        TokenExpiredException: token missing or invalid
    """
    if user is None:
        raise TokenExpiredException("Please sign in to continue")
    return user


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """
    Raises:
        UsernameTakenException / EmailTakenException: duplicate account
    """
    auth_service = AuthService(db)
    return await auth_service.create_user(user_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: UserLogin,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """
    Raises:
        InvalidCredentialsException: wrong username or password
        UserInactiveException: account disabled
    """
    auth_service = AuthService(db)
    user = await auth_service.authenticate_user(login_data.username, login_data.password)

    if not user:
        raise InvalidCredentialsException()

    if not user.is_active:
        raise UserInactiveException()

    auth_logger.info("User logged in successfully", extra={"username": user.username})
    return auth_service.create_user_tokens(user)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    token_data: TokenRefresh,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    auth_service = AuthService(db)
    tokens = await auth_service.refresh_tokens(token_data.refresh_token)

    if not tokens:
        raise TokenExpiredException("Invalid refresh token")

    return tokens


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: Annotated[User, Depends(get_current_user)]):
    return current_user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)]
):
    """
    Sign out; the stored API credential is cleared with the session.

    The credential slot is process-wide, so this clears it for every user.
    """
    request.app.state.credentials.clear()
    auth_logger.info("User logged out", extra={"username": current_user.username})

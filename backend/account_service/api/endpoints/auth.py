"""Authentication endpoints for sign-up, sign-in and token refresh."""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
import logging

from account_service.core.exceptions import InvalidCredentialsError, UserAlreadyExistsError, UserNotFoundError
from account_service.schemas.user import SignInRequest, UserCreate, UserResponse
from account_service.schemas.token import TokenPair
from account_service.services.auth import AuthService
from account_service.services.user_directory import UserDirectory
from account_service.api import deps

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/sign-up", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    user_data: UserCreate,
    auth_service: AuthService = Depends(deps.get_auth_service),
) -> UserResponse:
    """
    Register a new user.

    Raises:
        HTTPException: 400 if the login is already taken.
    """
    try:
        return await auth_service.register(user_data)
    except UserAlreadyExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.detail,
        )


@router.post("/sign-in", response_model=TokenPair)
async def sign_in(
    login_data: SignInRequest,
    auth_service: AuthService = Depends(deps.get_auth_service),
) -> TokenPair:
    """
    Authenticate user and return token pair (access + refresh).

    Raises:
        HTTPException: 401 if the login is unknown or the password is wrong.
    """
    try:
        tokens = await auth_service.login(login_data.login, login_data.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

    return TokenPair(access_token=tokens.access_token, refresh_token=tokens.refresh_token)


@router.get("/refresh", response_model=TokenPair)
async def refresh_tokens(
    user_id: str = Depends(deps.get_refresh_user_id),
    auth_service: AuthService = Depends(deps.get_auth_service),
) -> TokenPair:
    """Exchange a valid refresh token (Bearer header) for a new token pair."""
    tokens = auth_service.refresh(user_id)
    return TokenPair(access_token=tokens.access_token, refresh_token=tokens.refresh_token)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user_id: str = Depends(deps.get_current_user_id),
    directory: UserDirectory = Depends(deps.get_user_directory),
) -> UserResponse:
    """Get information about the user owning the access token."""
    try:
        user_uuid = UUID(user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return await directory.get_by_id(user_uuid)
    except UserNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.detail,
        )

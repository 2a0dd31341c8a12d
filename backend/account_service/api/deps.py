from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from uuid import UUID
import logging

from account_service.core.database import get_db
from account_service.core.exceptions import InvalidTokenError
from account_service.core.security import USER_ID_CLAIM, PasswordHasher, TokenIssuer, TokenKind
from account_service.services.auth import AuthService
from account_service.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_user_directory(db: AsyncSession = Depends(get_db)) -> UserDirectory:
    return UserDirectory(db)


def get_auth_service(
    directory: UserDirectory = Depends(get_user_directory),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    return AuthService(directory, hasher, issuer)


def _user_id_from_token(
    credentials: Optional[HTTPAuthorizationCredentials],
    issuer: TokenIssuer,
    kind: TokenKind,
) -> str:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = issuer.verify(credentials.credentials, kind)
    except InvalidTokenError as e:
        logger.warning(f"Rejected {kind.value} token: {e.detail}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload[USER_ID_CLAIM]


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> str:
    """User id from a valid access token, or 401"""
    return _user_id_from_token(credentials, issuer, TokenKind.ACCESS)


async def get_refresh_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> str:
    """User id from a valid refresh token, or 401"""
    return _user_id_from_token(credentials, issuer, TokenKind.REFRESH)


def parse_user_id(id: str) -> UUID:
    """Path parameter ``id`` as UUID, or 400"""
    try:
        return UUID(id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Wrong UUID format of user ID",
        )

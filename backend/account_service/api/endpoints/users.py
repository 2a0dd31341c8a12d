"""User CRUD endpoints."""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
import logging

from account_service.core.exceptions import UserAlreadyExistsError, UserNotFoundError
from account_service.models.user import User
from account_service.schemas.user import UserCreate, UserResponse, UserUpdate
from account_service.services.auth import AuthService
from account_service.services.user_directory import UserDirectory
from account_service.api import deps

router = APIRouter()
logger = logging.getLogger(__name__)


async def get_existing_user_id(
    user_id: UUID = Depends(deps.parse_user_id),
    directory: UserDirectory = Depends(deps.get_user_directory),
) -> UUID:
    """Resolve the ``id`` path parameter to an existing user id, or 404."""
    try:
        await directory.get_by_id(user_id)
    except UserNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.detail,
        )
    return user_id


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    auth_service: AuthService = Depends(deps.get_auth_service),
) -> User:
    """Create a user; the password is stored hashed."""
    try:
        return await auth_service.register(user_data)
    except UserAlreadyExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.detail,
        )


@router.get("", response_model=List[UserResponse])
async def list_users(
    directory: UserDirectory = Depends(deps.get_user_directory),
) -> List[User]:
    users = await directory.list_all()
    if not users:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="None users founded",
        )
    return users


@router.get("/{id}", response_model=UserResponse)
async def get_user(
    user_id: UUID = Depends(get_existing_user_id),
    directory: UserDirectory = Depends(deps.get_user_directory),
) -> User:
    return await directory.get_by_id(user_id)


@router.patch("/{id}", response_model=int)
async def update_user(
    update_data: UserUpdate,
    user_id: UUID = Depends(get_existing_user_id),
    directory: UserDirectory = Depends(deps.get_user_directory),
) -> int:
    """Update name or phone number. Returns the number of updated users."""
    updated = await directory.update(user_id, update_data.model_dump(exclude_unset=True, exclude_none=True))
    logger.info(f"User {user_id} updated")
    return updated


@router.delete("/{id}", response_model=int)
async def delete_user(
    user_id: UUID = Depends(get_existing_user_id),
    directory: UserDirectory = Depends(deps.get_user_directory),
) -> int:
    """Delete a user. Returns the number of deleted users."""
    removed = await directory.remove(user_id)
    logger.info(f"User {user_id} deleted")
    return removed

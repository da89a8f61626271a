"""
User API endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.database import get_db
from taskboard.schemas.user import UserCreate, UserResponse
from taskboard.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/{email}", response_model=UserResponse)
async def save_user(
    email: str,
    user_data: Optional[UserCreate] = None,
    db: AsyncSession = Depends(get_db)
):
    """
    Save a user on first login.

    If a user with this email already exists it is returned unchanged;
    otherwise the profile is stored with a creation timestamp.
    """
    return await UserService(db).save_user(email, user_data)

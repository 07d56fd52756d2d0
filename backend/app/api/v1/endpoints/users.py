"""
User endpoints.
"""
from fastapi import APIRouter, Depends

from app.models.user import User
from app.models.schemas import UserResponse
from app.api.deps import get_current_user


router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Profile and role of the signed-in user (creates the local user on first call)."""
    return UserResponse.model_validate(current_user)

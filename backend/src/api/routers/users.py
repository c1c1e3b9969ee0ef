"""Current-user profile endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import check_rate_limit, get_async_session, get_current_user
from models.user import User
from schemas.user import UserResponse, UserUpdate
from services import user_service
from services.exceptions import CredentialsTakenError

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(check_rate_limit)],
)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)) -> UserResponse:
    """Get the current authenticated user's profile."""
    return UserResponse.model_validate(current_user)


@router.patch("", response_model=UserResponse)
async def edit_user(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> UserResponse:
    """Update the current user's profile with the supplied fields."""
    try:
        user = await user_service.update_user(db, current_user, data)
    except CredentialsTakenError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Credentials taken",
        ) from None
    return UserResponse.model_validate(user)

"""Signup and signin endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import check_auth_rate_limit, get_async_session, get_settings
from core.config import Settings
from schemas.auth import AccessTokenResponse, AuthCredentials
from services import auth_service
from services.exceptions import CredentialsTakenError, InvalidCredentialsError

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    dependencies=[Depends(check_auth_rate_limit)],
)


@router.post("/signup", response_model=AccessTokenResponse, status_code=201)
async def signup(
    data: AuthCredentials,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> AccessTokenResponse:
    """Create an account and return an access token."""
    try:
        token = await auth_service.signup(db, data, settings)
    except CredentialsTakenError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Credentials taken",
        ) from None
    return AccessTokenResponse(access_token=token)


@router.post("/signin", response_model=AccessTokenResponse, status_code=201)
async def signin(
    data: AuthCredentials,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> AccessTokenResponse:
    """Exchange email and password for an access token."""
    try:
        token = await auth_service.signin(db, data, settings)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Credentials incorrect",
        ) from None
    return AccessTokenResponse(access_token=token)

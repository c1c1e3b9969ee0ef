"""Bearer token authentication for protected endpoints."""
import logging

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings, get_settings
from core.security import decode_access_token
from db.session import get_async_session
from models.user import User


logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (missing header handled below so we can return 401, not 403)
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_user_id_from_token(token: str, settings: Settings) -> int:
    """
    Validate an access token and return the user id it was issued for.

    Raises:
        HTTPException: 401 if the token is expired, invalid, or has a malformed sub claim.
    """
    try:
        payload = decode_access_token(token, settings)
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired") from None
    except jwt.PyJWTError as e:
        logger.info("Rejected bearer token: %s", e)
        raise _unauthorized("Invalid token") from None

    try:
        return int(payload["sub"])
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token: malformed sub claim") from None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> User:
    """Dependency that validates the bearer token and returns the current user."""
    if credentials is None:
        raise _unauthorized("Not authenticated")

    user_id = get_user_id_from_token(credentials.credentials, settings)

    user = await db.get(User, user_id)
    if user is None:
        raise _unauthorized("User not found")

    return user

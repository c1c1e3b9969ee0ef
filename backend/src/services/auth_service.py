"""Service layer for signup and signin."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.security import create_access_token, hash_password, verify_password
from schemas.auth import AuthCredentials
from services import user_service
from services.exceptions import InvalidCredentialsError

logger = logging.getLogger(__name__)

# Checked on signin for unknown emails so both failures cost one Argon2 verify
_UNKNOWN_USER_HASH = hash_password("unknown-user")


async def signup(db: AsyncSession, data: AuthCredentials, settings: Settings) -> str:
    """
    Register a new user and return an access token for them.

    Raises:
        CredentialsTakenError: If the email is already registered.
    """
    user = await user_service.create_user(db, data.email, data.password)
    logger.info("User %s signed up", user.id)
    return create_access_token(user.id, user.email, settings)


async def signin(db: AsyncSession, data: AuthCredentials, settings: Settings) -> str:
    """
    Check credentials and return an access token.

    Raises:
        InvalidCredentialsError: If the email is unknown or the password does not match.
    """
    user = await user_service.get_user_by_email(db, data.email)
    if user is None:
        verify_password(_UNKNOWN_USER_HASH, data.password)
        logger.warning("Signin failed: unknown email")
        raise InvalidCredentialsError
    if not verify_password(user.hash, data.password):
        logger.warning("Signin failed for user %s: wrong password", user.id)
        raise InvalidCredentialsError

    logger.info("User %s signed in", user.id)
    return create_access_token(user.id, user.email, settings)

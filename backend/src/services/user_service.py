"""Service layer for user accounts and profile edits."""
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.security import hash_password
from models.user import User
from schemas.user import UserUpdate
from services.exceptions import CredentialsTakenError


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Look up a user by email."""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def _flush_checking_email(db: AsyncSession, email: str) -> None:
    """
    Flush pending changes, mapping an email unique violation to CredentialsTakenError.

    Another request may register the same email between our lookup and the flush;
    the unique index catches it here. The transaction is unusable afterwards and is
    rolled back by the session dependency.
    """
    try:
        await db.flush()
    except IntegrityError as e:
        raise CredentialsTakenError(email) from e


async def create_user(db: AsyncSession, email: str, password: str) -> User:
    """
    Create a user with a hashed password.

    Raises:
        CredentialsTakenError: If the email is already registered.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    if await get_user_by_email(db, email) is not None:
        raise CredentialsTakenError(email)

    user = User(email=email, hash=hash_password(password))
    db.add(user)
    await _flush_checking_email(db, email)
    await db.refresh(user)
    return user


async def update_user(db: AsyncSession, user: User, data: UserUpdate) -> User:
    """
    Apply the fields present in `data` to the user.

    Raises:
        CredentialsTakenError: If the new email belongs to another user.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    update_data = data.model_dump(exclude_unset=True)

    new_email = update_data.get("email")
    if new_email is not None and new_email != user.email:
        existing = await get_user_by_email(db, new_email)
        if existing is not None:
            raise CredentialsTakenError(new_email)

    for field, value in update_data.items():
        setattr(user, field, value)

    await _flush_checking_email(db, new_email or user.email)
    await db.refresh(user)
    return user

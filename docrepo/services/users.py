"""Admin account management."""

import logging

from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from docrepo.core.security import hash_password
from docrepo.models.user import User, UserRole

logger = logging.getLogger(__name__)

_email_adapter = TypeAdapter(EmailStr)


class UserExists(ValueError):
    pass


class InvalidEmail(ValueError):
    pass


def normalize_email(email: str) -> str:
    """Validate with the same rules as the login form and lower-case.

    Raises:
        InvalidEmail: The address would be rejected at login.
    """
    try:
        return _email_adapter.validate_python(email.strip()).lower()
    except ValidationError as exc:
        raise InvalidEmail(f"Invalid email address: {email!r}") from exc


async def create_user(
    session: AsyncSession,
    email: str,
    password: str,
    display_name: str = "",
    role: UserRole = UserRole.EDITOR,
) -> User:
    """Create an admin-panel account. Emails are stored lower-cased."""
    email = normalize_email(email)
    existing = await session.execute(select(User).where(User.email == email))
    if existing.scalar_one_or_none() is not None:
        raise UserExists(email)

    user = User(
        email=email,
        password_hash=hash_password(password),
        display_name=display_name,
        role=role,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    logger.info("Created %s account %s", role, email)
    return user

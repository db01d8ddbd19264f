"""
app/services/user_service.py

Purpose: User data management

- Create users at onboarding
- Update display names
- Remove users (and everything they own) on "stop"
"""

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.core.logging import get_logger, LogContext
from typing import Optional

logger = get_logger(__name__)


async def get_user(session: AsyncSession, number: str) -> Optional[User]:
    """
    Retrieves a user by phone number.

    Args:
        session: Database session
        number: Sender phone number

    Returns:
        User or None if the number has not onboarded
    """
    result = await session.execute(select(User).where(User.number == number))
    return result.scalar_one_or_none()


async def create_user(session: AsyncSession, number: str, name: str) -> User:
    """
    Registers a new user.

    Args:
        session: Database session
        number: Sender phone number
        name: Validated display name

    Returns:
        The new User
    """
    with LogContext(sender=number):
        user = User(number=number, name=name)
        session.add(user)
        await session.flush()

        logger.info("New user created")
        return user


async def update_user_name(session: AsyncSession, number: str, name: str) -> bool:
    """
    Updates a user's display name.

    Returns:
        True if a row was updated
    """
    result = await session.execute(
        update(User).where(User.number == number).values(name=name)
    )

    success = result.rowcount > 0
    if success:
        logger.info("Name updated")
    else:
        logger.warning("Failed to update name")

    return success


async def delete_user(session: AsyncSession, number: str) -> bool:
    """
    Deletes a user. Contacts, groups and pending actions go with them.

    Returns:
        True if a row was deleted
    """
    result = await session.execute(delete(User).where(User.number == number))

    success = result.rowcount > 0
    if success:
        logger.info("User deleted")

    return success

"""
app/services/contact_service.py

Purpose: Contact storage and fuzzy matching

- Lists and searches a user's contacts by name fragment
- Matches several fragments at once for group creation
- Saves imported contacts without creating (submitter, name) duplicates
- Deletes contacts
"""

from enum import Enum
from typing import Iterable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.contact import Contact
from app.core.logging import get_logger

logger = get_logger(__name__)


class SaveResult(str, Enum):
    ADDED = "added"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


def split_fragments(text: str) -> List[str]:
    """
    Splits "John, Alice" into ["John", "Alice"], dropping empty pieces.
    """
    return [fragment.strip() for fragment in (text or "").split(",") if fragment.strip()]


async def list_contacts(session: AsyncSession, submitter: str) -> List[Contact]:
    """
    Returns all of a user's contacts in name order.
    """
    result = await session.execute(
        select(Contact)
        .where(Contact.submitter_number == submitter)
        .order_by(func.lower(Contact.contact_name), Contact.id)
    )
    return list(result.scalars())


async def find_contacts(session: AsyncSession, submitter: str, fragment: str) -> List[Contact]:
    """
    Case-insensitive substring search on contact names.

    Args:
        session: Database session
        submitter: Owner of the contacts
        fragment: Text the name must contain

    Returns:
        Matching contacts in name order
    """
    result = await session.execute(
        select(Contact)
        .where(
            Contact.submitter_number == submitter,
            func.lower(Contact.contact_name).contains(fragment.lower(), autoescape=True),
        )
        .order_by(func.lower(Contact.contact_name), Contact.id)
    )
    return list(result.scalars())


async def match_contacts(session: AsyncSession, submitter: str, fragments: Iterable[str]) -> List[Contact]:
    """
    Union of find_contacts over every fragment.

    Duplicates are removed by identity (sort by id, drop neighbours with
    the same id) and the survivors are then sorted by name for display.
    """
    matches = []
    for fragment in fragments:
        matches.extend(await find_contacts(session, submitter, fragment))

    matches.sort(key=lambda contact: contact.id)
    unique = []
    for contact in matches:
        if not unique or unique[-1].id != contact.id:
            unique.append(contact)

    unique.sort(key=lambda contact: contact.contact_name.lower())
    return unique


async def get_contact_by_name(session: AsyncSession, submitter: str, name: str) -> Optional[Contact]:
    """
    Exact-name lookup used to keep imports from duplicating a contact.
    """
    result = await session.execute(
        select(Contact)
        .where(Contact.submitter_number == submitter, Contact.contact_name == name)
        .order_by(Contact.id)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def save_contact(session: AsyncSession, submitter: str, name: str, number: str) -> SaveResult:
    """
    Adds a contact, or updates the number of an existing contact with the
    same name.

    Returns:
        SaveResult.ADDED, UPDATED or UNCHANGED
    """
    existing = await get_contact_by_name(session, submitter, name)

    if existing is None:
        session.add(Contact(submitter_number=submitter, contact_name=name, contact_user_number=number))
        await session.flush()
        logger.info("Contact added")
        return SaveResult.ADDED

    if existing.contact_user_number == number:
        return SaveResult.UNCHANGED

    existing.contact_user_number = number
    await session.flush()
    logger.info("Contact number updated")
    return SaveResult.UPDATED


async def delete_contacts(session: AsyncSession, contact_ids: Iterable[int]) -> int:
    """
    Deletes contacts by id.

    Returns:
        Number of rows deleted
    """
    contact_ids = list(contact_ids)
    if not contact_ids:
        return 0

    result = await session.execute(delete(Contact).where(Contact.id.in_(contact_ids)))
    return result.rowcount

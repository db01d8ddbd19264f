"""
app/services/group_service.py

Purpose: Group storage

- Lists and searches a user's groups with derived member counts
- Generates the next free group name (group0, group1, ...)
- Creates a group from resolved contacts, closing the pending action
- Deletes groups (members are removed by the database)
"""

from dataclasses import dataclass
from typing import Iterable, List

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.contact import Contact
from app.models.group import Group, GroupMember
from app.models.pending_action import PendingDeletion
from app.services.pending_action_service import clear_pending_action
from app.core.logging import get_logger, LogContext

logger = get_logger(__name__)

GROUP_NAME_PREFIX = "group"


@dataclass
class GroupSummary:
    id: int
    name: str
    member_count: int


def _summary_query():
    return (
        select(Group.id, Group.name, func.count(GroupMember.id))
        .outerjoin(GroupMember, GroupMember.group_id == Group.id)
        .group_by(Group.id, Group.name)
        .order_by(func.lower(Group.name), Group.id)
    )


def _to_summaries(rows) -> List[GroupSummary]:
    return [GroupSummary(id=row[0], name=row[1], member_count=row[2]) for row in rows]


async def list_groups(session: AsyncSession, creator: str) -> List[GroupSummary]:
    """
    Returns all of a user's groups in name order.
    """
    result = await session.execute(_summary_query().where(Group.creator_number == creator))
    return _to_summaries(result.all())


async def find_groups(session: AsyncSession, creator: str, fragment: str) -> List[GroupSummary]:
    """
    Case-insensitive substring search for groups, in name order.

    A group matches when its own name contains the fragment, or when one
    of its members is a contact of the creator whose name contains it.
    """
    needle = fragment.lower()
    groups_with_matching_member = (
        select(GroupMember.group_id)
        .join(Contact, Contact.contact_user_number == GroupMember.member_number)
        .where(
            Contact.submitter_number == creator,
            func.lower(Contact.contact_name).contains(needle, autoescape=True),
        )
    )
    result = await session.execute(
        _summary_query().where(
            Group.creator_number == creator,
            or_(
                func.lower(Group.name).contains(needle, autoescape=True),
                Group.id.in_(groups_with_matching_member),
            ),
        )
    )
    return _to_summaries(result.all())


async def list_pending_deletion_groups(session: AsyncSession, submitter: str) -> List[GroupSummary]:
    """
    Groups attached to a submitter's deletion pending action, in the same
    order find_groups listed them.
    """
    result = await session.execute(
        _summary_query()
        .join(PendingDeletion, PendingDeletion.group_id == Group.id)
        .where(PendingDeletion.pending_action_submitter == submitter)
    )
    return _to_summaries(result.all())


async def list_group_members(session: AsyncSession, group_id: int) -> List[str]:
    """
    Returns the member numbers of a group in insertion order.
    """
    result = await session.execute(
        select(GroupMember.member_number)
        .where(GroupMember.group_id == group_id)
        .order_by(GroupMember.id)
    )
    return list(result.scalars())


async def next_group_name(session: AsyncSession, creator: str) -> str:
    """
    Returns the first "group<N>" (N from 0) the creator is not using.
    """
    result = await session.execute(select(Group.name).where(Group.creator_number == creator))
    taken = set(result.scalars())

    index = 0
    while f"{GROUP_NAME_PREFIX}{index}" in taken:
        index += 1
    return f"{GROUP_NAME_PREFIX}{index}"


async def create_group(session: AsyncSession, creator: str, contacts: List[Contact]) -> Group:
    """
    Creates a group whose members are the contacts' numbers and clears
    the creator's pending action. Runs inside the caller's transaction.

    Args:
        session: Database session
        creator: Phone number of the group owner
        contacts: Resolved contacts, in the order they should be added

    Returns:
        The new Group
    """
    with LogContext(sender=creator):
        name = await next_group_name(session, creator)

        group = Group(creator_number=creator, name=name)
        session.add(group)
        await session.flush()

        session.add_all(
            GroupMember(group_id=group.id, member_number=contact.contact_user_number)
            for contact in contacts
        )
        await clear_pending_action(session, creator)
        await session.flush()

        logger.info(f"Group {name} created with {len(contacts)} member(s)")
        return group


async def delete_groups(session: AsyncSession, group_ids: Iterable[int]) -> int:
    """
    Deletes groups by id.

    Returns:
        Number of groups deleted
    """
    group_ids = list(group_ids)
    if not group_ids:
        return 0

    result = await session.execute(delete(Group).where(Group.id.in_(group_ids)))
    return result.rowcount

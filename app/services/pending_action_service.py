"""
app/services/pending_action_service.py

Purpose: Pending action state management

- One pending action per submitter (a row in pending_actions)
- Entering a new action clears the old one and its candidates
- Writes and reads candidate rows for each action kind
- Periodic sweep of expired pending actions
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.contact import Contact
from app.models.pending_action import (
    DeferredContact,
    PendingAction,
    PendingDeletion,
    PendingGroupMember,
)
from app.flow.states import ActionType, keeps_existing, parse_action_type
from app.core.logging import get_logger, LogContext
from utils.time_utils import expiry_cutoff, utcnow

logger = get_logger(__name__)


@dataclass
class PendingState:
    """
    The pending action on file for a submitter.
    """
    submitter: str
    action_type: ActionType
    created_at: datetime


async def get_pending_action(session: AsyncSession, submitter: str) -> Optional[PendingState]:
    """
    Retrieves the submitter's pending action.

    Expiry is not checked here: an action older than the TTL is still
    returned until the sweep removes it.

    Args:
        session: Database session
        submitter: Phone number

    Returns:
        PendingState, or None when nothing is pending
    """
    result = await session.execute(
        select(PendingAction.action_type, PendingAction.created_at)
        .where(PendingAction.submitter_number == submitter)
    )
    row = result.first()
    if row is None:
        return None

    return PendingState(
        submitter=submitter,
        action_type=parse_action_type(row.action_type),
        created_at=row.created_at,
    )


async def clear_pending_action(session: AsyncSession, submitter: str) -> bool:
    """
    Deletes the submitter's pending action; the database removes its
    candidate rows.

    Returns:
        True if there was something to clear
    """
    result = await session.execute(
        delete(PendingAction).where(PendingAction.submitter_number == submitter)
    )

    cleared = result.rowcount > 0
    if cleared:
        logger.debug("Pending action cleared")
    return cleared


async def set_pending_action(session: AsyncSession, submitter: str, action_type: ActionType) -> PendingState:
    """
    Makes `action_type` the submitter's pending action.

    Any existing pending action is cleared first (with its candidates),
    except when re-entering a kind that accumulates, in which case the
    existing action and its candidates are kept.

    Returns:
        The pending action now on file
    """
    with LogContext(sender=submitter, action_type=action_type.value):
        current = await get_pending_action(session, submitter)

        if current is not None and keeps_existing(current.action_type, action_type):
            logger.debug("Merging into existing pending action")
            return current

        if current is not None:
            logger.info(f"Replacing pending action {current.action_type.value}")
            await clear_pending_action(session, submitter)

        created_at = utcnow()
        await session.execute(
            insert(PendingAction).values(
                submitter_number=submitter,
                action_type=action_type.value,
                created_at=created_at,
            )
        )

        logger.info("Pending action set")
        return PendingState(submitter=submitter, action_type=action_type, created_at=created_at)


# ============================================================
# CANDIDATES
# ============================================================

async def add_pending_deletions(
    session: AsyncSession,
    submitter: str,
    group_ids: Iterable[int],
    contact_ids: Iterable[int],
):
    """
    Attaches deletion candidates to the submitter's pending action.
    """
    rows = [{"pending_action_submitter": submitter, "group_id": group_id, "contact_id": None} for group_id in group_ids]
    rows += [{"pending_action_submitter": submitter, "group_id": None, "contact_id": contact_id} for contact_id in contact_ids]
    if rows:
        await session.execute(insert(PendingDeletion), rows)


async def list_pending_deletion_contacts(session: AsyncSession, submitter: str) -> List[Contact]:
    """
    Contacts attached to a deletion pending action, in name order.
    """
    result = await session.execute(
        select(Contact)
        .join(PendingDeletion, PendingDeletion.contact_id == Contact.id)
        .where(PendingDeletion.pending_action_submitter == submitter)
        .order_by(func.lower(Contact.contact_name), Contact.id)
    )
    return list(result.scalars())


async def add_pending_group_members(session: AsyncSession, submitter: str, contact_ids: Iterable[int]):
    """
    Attaches candidate contacts to a group pending action.
    """
    rows = [{"pending_action_submitter": submitter, "contact_id": contact_id} for contact_id in contact_ids]
    if rows:
        await session.execute(insert(PendingGroupMember), rows)


async def list_pending_group_members(session: AsyncSession, submitter: str) -> List[Contact]:
    """
    Candidate contacts of a group pending action, in name order.
    """
    result = await session.execute(
        select(Contact)
        .join(PendingGroupMember, PendingGroupMember.contact_id == Contact.id)
        .where(PendingGroupMember.pending_action_submitter == submitter)
        .order_by(func.lower(Contact.contact_name), Contact.id)
    )
    return list(result.scalars())


async def add_deferred_contact(
    session: AsyncSession,
    submitter: str,
    name: str,
    number: str,
    description: Optional[str] = None,
) -> bool:
    """
    Adds one number choice for a deferred contact. A (name, number) pair
    that is already deferred is not added again.

    Returns:
        True if a row was added
    """
    result = await session.execute(
        select(func.count(DeferredContact.id)).where(
            DeferredContact.submitter_number == submitter,
            DeferredContact.contact_name == name,
            DeferredContact.phone_number == number,
        )
    )
    if result.scalar_one() > 0:
        return False

    await session.execute(
        insert(DeferredContact).values(
            submitter_number=submitter,
            contact_name=name,
            phone_number=number,
            phone_description=description,
        )
    )
    return True


async def list_deferred_contacts(session: AsyncSession, submitter: str) -> Dict[str, List[DeferredContact]]:
    """
    Deferred contacts grouped by name.

    Returns:
        Dict of name -> number choices. Names are in alphabetical order
        (positions in "confirm 2b"), choices in insertion order (letters).
    """
    result = await session.execute(
        select(DeferredContact)
        .where(DeferredContact.submitter_number == submitter)
        .order_by(func.lower(DeferredContact.contact_name), DeferredContact.contact_name, DeferredContact.id)
    )

    grouped: Dict[str, List[DeferredContact]] = {}
    for row in result.scalars():
        grouped.setdefault(row.contact_name, []).append(row)
    return grouped


async def remove_deferred_contacts(session: AsyncSession, submitter: str, names: Iterable[str]) -> int:
    """
    Purges every deferred row for the given names.

    Returns:
        Number of rows removed
    """
    names = list(names)
    if not names:
        return 0

    result = await session.execute(
        delete(DeferredContact).where(
            DeferredContact.submitter_number == submitter,
            DeferredContact.contact_name.in_(names),
        )
    )
    return result.rowcount


async def count_deferred_contacts(session: AsyncSession, submitter: str) -> int:
    result = await session.execute(
        select(func.count(DeferredContact.id)).where(DeferredContact.submitter_number == submitter)
    )
    return result.scalar_one()


# ============================================================
# EXPIRY
# ============================================================

async def sweep_expired_pending_actions(session: AsyncSession, ttl_seconds: int) -> int:
    """
    Deletes every pending action older than the TTL, with its candidates.
    Idempotent and safe to run alongside normal traffic.

    Returns:
        Number of pending actions removed
    """
    result = await session.execute(
        delete(PendingAction).where(PendingAction.created_at < expiry_cutoff(ttl_seconds))
    )

    if result.rowcount:
        logger.info(f"Swept {result.rowcount} expired pending action(s)")
    return result.rowcount


async def run_pending_action_sweeper(
    session_factory: async_sessionmaker[AsyncSession],
    interval_seconds: int,
    ttl_seconds: int,
):
    """
    Background loop that sweeps expired pending actions every
    `interval_seconds` until cancelled. A failed sweep is logged and
    retried on the next tick.
    """
    logger.info(f"Pending action sweeper started (ttl={ttl_seconds}s, interval={interval_seconds}s)")

    while True:
        await asyncio.sleep(interval_seconds)
        try:
            async with session_factory() as session:
                async with session.begin():
                    await sweep_expired_pending_actions(session, ttl_seconds)
        except Exception as e:
            logger.error(f"Pending action sweep failed: {e}", exc_info=True)

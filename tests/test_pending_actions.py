import asyncio
from datetime import timedelta

import pytest
from sqlalchemy import update

from app.flow.states import ACTION_METADATA, ActionType, keeps_existing, parse_action_type
from app.models.pending_action import DeferredContact, PendingAction, PendingGroupMember
from app.services.contact_service import find_contacts
from app.services.pending_action_service import (
    add_deferred_contact,
    add_pending_group_members,
    get_pending_action,
    run_pending_action_sweeper,
    set_pending_action,
    sweep_expired_pending_actions,
)
from utils.time_utils import utcnow

from conftest import ALICE, BOB


@pytest.fixture
async def users(sms, add_contacts):
    await sms(ALICE, "name A")
    await sms(BOB, "name B")
    await add_contacts(ALICE, ("John Smith", "+12065550123"))


async def age_pending_action(db, submitter, seconds):
    async with db() as session:
        async with session.begin():
            await session.execute(
                update(PendingAction)
                .where(PendingAction.submitter_number == submitter)
                .values(created_at=utcnow() - timedelta(seconds=seconds))
            )


def test_only_deferred_contacts_accumulate():
    assert set(ACTION_METADATA) == set(ActionType)
    assert keeps_existing(ActionType.DEFERRED_CONTACTS, ActionType.DEFERRED_CONTACTS)
    assert not keeps_existing(ActionType.GROUP, ActionType.GROUP)
    assert not keeps_existing(ActionType.DELETION, ActionType.DEFERRED_CONTACTS)
    assert not keeps_existing(None, ActionType.DELETION)


def test_parse_action_type():
    assert parse_action_type("group") == ActionType.GROUP
    assert parse_action_type(None) is None
    with pytest.raises(ValueError):
        parse_action_type("launch_missiles")


async def test_new_action_replaces_old_one_and_its_candidates(db, users, count_rows):
    async with db() as session:
        async with session.begin():
            contacts = await find_contacts(session, ALICE, "john")
            await set_pending_action(session, ALICE, ActionType.GROUP)
            await add_pending_group_members(session, ALICE, [c.id for c in contacts])

    async with db() as session:
        async with session.begin():
            await set_pending_action(session, ALICE, ActionType.DELETION)

    async with db() as session:
        pending = await get_pending_action(session, ALICE)

    assert pending.action_type == ActionType.DELETION
    assert await count_rows(PendingAction) == 1
    assert await count_rows(PendingGroupMember) == 0


async def test_reentering_group_starts_fresh(db, users, count_rows):
    async with db() as session:
        async with session.begin():
            contacts = await find_contacts(session, ALICE, "john")
            await set_pending_action(session, ALICE, ActionType.GROUP)
            await add_pending_group_members(session, ALICE, [c.id for c in contacts])
            await set_pending_action(session, ALICE, ActionType.GROUP)

    assert await count_rows(PendingAction) == 1
    assert await count_rows(PendingGroupMember) == 0


async def test_pending_actions_are_per_submitter(db, users, count_rows):
    async with db() as session:
        async with session.begin():
            await set_pending_action(session, ALICE, ActionType.GROUP)
            await set_pending_action(session, BOB, ActionType.DELETION)

    async with db() as session:
        assert (await get_pending_action(session, ALICE)).action_type == ActionType.GROUP
        assert (await get_pending_action(session, BOB)).action_type == ActionType.DELETION


async def test_sweep_removes_only_expired_actions(db, users, count_rows):
    async with db() as session:
        async with session.begin():
            await set_pending_action(session, ALICE, ActionType.DEFERRED_CONTACTS)
            await add_deferred_contact(session, ALICE, "Bob Lee", "+12065550101", "cell")
            await set_pending_action(session, BOB, ActionType.GROUP)

    await age_pending_action(db, ALICE, 301)

    async with db() as session:
        async with session.begin():
            removed = await sweep_expired_pending_actions(session, 300)

    assert removed == 1
    assert await count_rows(PendingAction, PendingAction.submitter_number == ALICE) == 0
    assert await count_rows(DeferredContact) == 0
    assert await count_rows(PendingAction, PendingAction.submitter_number == BOB) == 1

    async with db() as session:
        async with session.begin():
            assert await sweep_expired_pending_actions(session, 300) == 0


async def test_expired_action_is_still_confirmable_until_swept(sms, db, users):
    await sms(ALICE, "group John")
    await age_pending_action(db, ALICE, 3600)

    assert await sms(ALICE, "confirm 1") == "Created group0 with:\nJohn Smith (206)"


async def test_sweeper_loop_runs_until_cancelled(db, users, count_rows):
    async with db() as session:
        async with session.begin():
            await set_pending_action(session, ALICE, ActionType.GROUP)
    await age_pending_action(db, ALICE, 10)

    task = asyncio.create_task(run_pending_action_sweeper(db, interval_seconds=0.01, ttl_seconds=5))
    await asyncio.sleep(0.2)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert await count_rows(PendingAction) == 0

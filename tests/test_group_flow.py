from sqlalchemy import select

from app.flow.commands import CommandWord
from app.models.group import Group, GroupMember
from app.models.pending_action import PendingAction, PendingGroupMember
from app.services.group_service import list_group_members, next_group_name

from conftest import ALICE

JOHN = ("John Smith", "+12065550123")
JANE = ("Jane Doe", "+15035550125")
ALICE_JONES = ("Alice Jones", "+14255550124")


async def test_group_lists_matches_by_name_and_creates_group0(sms, add_contacts, count_rows, db):
    await sms(ALICE, "name A")
    await add_contacts(ALICE, JOHN, ALICE_JONES, JANE)

    reply = await sms(ALICE, "group John, Alice")

    assert reply.splitlines()[1:] == ["1. Alice Jones (425)", "2. John Smith (206)"]
    assert await count_rows(PendingGroupMember) == 2

    reply = await sms(ALICE, "confirm 1, 2")

    assert reply == "Created group0 with:\nAlice Jones (425)\nJohn Smith (206)"
    assert await count_rows(PendingAction) == 0
    assert await count_rows(PendingGroupMember) == 0

    async with db() as session:
        group_id = (await session.execute(select(Group.id))).scalar_one()
        members = await list_group_members(session, group_id)
    assert members == [ALICE_JONES[1], JOHN[1]]


async def test_overlapping_fragments_list_contact_once(sms, add_contacts):
    await sms(ALICE, "name A")
    await add_contacts(ALICE, JOHN, JANE)

    reply = await sms(ALICE, "group j, smith, doe")

    assert reply.splitlines()[1:] == ["1. Jane Doe (503)", "2. John Smith (206)"]


async def test_group_without_matches_keeps_nothing_pending(sms, add_contacts, count_rows):
    await sms(ALICE, "name A")
    await add_contacts(ALICE, JOHN)

    reply = await sms(ALICE, "group Zed")

    assert reply == 'No contacts match "Zed".'
    assert await count_rows(PendingAction) == 0


async def test_group_without_fragments_returns_hint(sms):
    await sms(ALICE, "name A")

    assert await sms(ALICE, "group ,  ,") == CommandWord.GROUP.hint()


async def test_invalid_and_duplicate_selections(sms, add_contacts, count_rows):
    await sms(ALICE, "name A")
    await add_contacts(ALICE, JOHN, ALICE_JONES)
    await sms(ALICE, "group John, Alice")

    reply = await sms(ALICE, "confirm 2, 2, 7, x")

    assert reply == "Created group0 with:\nJohn Smith (206)\nInvalid selection(s): 7, x"
    assert await count_rows(GroupMember) == 1


async def test_no_valid_selection_keeps_group_pending(sms, add_contacts, count_rows):
    await sms(ALICE, "name A")
    await add_contacts(ALICE, JOHN)
    await sms(ALICE, "group John")

    reply = await sms(ALICE, "confirm 0, 5")

    assert reply.endswith("Invalid selection(s): 0, 5")
    assert await count_rows(Group) == 0
    assert await count_rows(PendingAction) == 1

    assert await sms(ALICE, "confirm 1") == "Created group0 with:\nJohn Smith (206)"


async def test_group_names_fill_the_first_gap(sms, add_contacts, db):
    await sms(ALICE, "name A")
    await add_contacts(ALICE, JOHN)

    for _ in range(3):
        await sms(ALICE, "group John")
        await sms(ALICE, "confirm 1")

    await sms(ALICE, "delete group1")
    await sms(ALICE, "confirm 1")

    async with db() as session:
        assert await next_group_name(session, ALICE) == "group1"


async def test_candidates_sort_case_insensitively(sms, add_contacts):
    await sms(ALICE, "name A")
    await add_contacts(ALICE, ("Zed Lee", "+12065550131"), ("bob lee", "+12065550132"), ("Alice Lee", "+12065550133"))

    reply = await sms(ALICE, "group zed, BOB, alice")

    assert reply.splitlines()[1:] == ["1. Alice Lee (206)", "2. bob lee (206)", "3. Zed Lee (206)"]
    assert await sms(ALICE, "confirm 2") == "Created group0 with:\nbob lee (206)"

from app.flow.commands import CommandWord
from app.models.contact import Contact
from app.models.group import Group, GroupMember
from app.models.pending_action import PendingAction, PendingDeletion

from conftest import ALICE

JOHN = ("John Smith", "+12065550123")
ALICE_JONES = ("Alice Jones", "+14255550124")


async def make_group0(sms, add_contacts):
    await sms(ALICE, "name A")
    await add_contacts(ALICE, JOHN, ALICE_JONES)
    await sms(ALICE, "group John, Alice")
    await sms(ALICE, "confirm 1, 2")


async def test_delete_lists_groups_then_contacts(sms, add_contacts, count_rows):
    await make_group0(sms, add_contacts)

    reply = await sms(ALICE, "delete John")

    assert reply.splitlines()[1:] == [
        "Groups:",
        "1. group0 (2 members)",
        "Contacts:",
        "2. John Smith (206)",
    ]
    assert await count_rows(PendingDeletion) == 2


async def test_confirm_deletes_only_the_selected_group(sms, add_contacts, count_rows):
    await make_group0(sms, add_contacts)
    await sms(ALICE, "delete John")

    reply = await sms(ALICE, "confirm 1")

    assert reply == "Deleted group group0 (2 members)"
    assert await count_rows(Group) == 0
    assert await count_rows(GroupMember) == 0
    assert await count_rows(Contact, Contact.contact_name == "John Smith") == 1
    assert await count_rows(PendingAction) == 0
    assert await count_rows(PendingDeletion) == 0


async def test_contact_indices_continue_after_groups(sms, add_contacts, count_rows):
    await make_group0(sms, add_contacts)
    await sms(ALICE, "delete John")

    reply = await sms(ALICE, "confirm 2")

    assert reply == "Deleted contact John Smith (206)"
    assert await count_rows(Group) == 1
    assert await count_rows(Contact) == 1


async def test_out_of_range_and_non_numeric_tokens(sms, add_contacts, count_rows):
    await make_group0(sms, add_contacts)
    await sms(ALICE, "delete John")

    reply = await sms(ALICE, "confirm 0 3 two")

    assert reply == "Nothing was deleted.\nInvalid selection(s): 0, 3, two"
    assert await count_rows(Group) == 1
    assert await count_rows(Contact) == 2
    assert await count_rows(PendingAction) == 0


async def test_delete_without_matches_leaves_existing_action(sms, add_contacts, count_rows):
    await make_group0(sms, add_contacts)
    await sms(ALICE, "delete Alice")

    reply = await sms(ALICE, "delete Nobody")

    assert reply == 'No groups or contacts match "Nobody".'
    assert await count_rows(PendingDeletion) == 2


async def test_delete_matching_is_case_insensitive_substring(sms, add_contacts):
    await sms(ALICE, "name A")
    await add_contacts(ALICE, JOHN, ALICE_JONES)

    reply = await sms(ALICE, "delete ONE")

    assert reply.splitlines()[1:] == ["Contacts:", "1. Alice Jones (425)"]


async def test_delete_without_query_returns_hint(sms):
    await sms(ALICE, "name A")

    assert await sms(ALICE, "delete") == CommandWord.DELETE.hint()


async def test_confirm_with_nothing_pending(sms, add_contacts, count_rows):
    await make_group0(sms, add_contacts)
    await sms(ALICE, "delete John")
    await sms(ALICE, "confirm 1")

    assert await sms(ALICE, "confirm 1") == "There is nothing to confirm."
    assert await count_rows(Contact) == 2


async def test_names_sort_case_insensitively_and_numbering_holds(sms, add_contacts):
    await sms(ALICE, "name A")
    await add_contacts(ALICE, ("Zed Lee", "+12065550131"), ("bob lee", "+12065550132"), ("Alice Lee", "+12065550133"))

    assert await sms(ALICE, "contacts") == "Contacts:\n- Alice Lee (206)\n- bob lee (206)\n- Zed Lee (206)"

    reply = await sms(ALICE, "delete LEE")
    assert reply.splitlines()[2:] == ["1. Alice Lee (206)", "2. bob lee (206)", "3. Zed Lee (206)"]

    assert await sms(ALICE, "confirm 2") == "Deleted contact bob lee (206)"

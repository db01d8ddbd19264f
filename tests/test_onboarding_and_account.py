from app.flow.commands import CommandWord
from app.models.contact import Contact
from app.models.pending_action import PendingAction
from app.models.user import User
from app.services.contact_service import save_contact
from app.services.pending_action_service import set_pending_action
from app.flow.states import ActionType
from utils.constants import INTERNAL_ERROR_MESSAGE

from conftest import ALICE, BOB


async def test_unknown_sender_gets_banner_without_registering(sms, count_rows):
    reply = await sms(ALICE, "contacts")

    assert reply == f"Welcome to GroupText!\nTo participate:\n{CommandWord.NAME.hint()}"
    assert await count_rows(User) == 0


async def test_unknown_sender_with_unknown_word_gets_banner(sms, count_rows):
    reply = await sms(ALICE, "yo")

    assert reply.startswith("Welcome to GroupText!")
    assert await count_rows(User) == 0


async def test_name_registers_user(sms, db):
    reply = await sms(ALICE, "name Alice J")

    assert reply == f"Hello, Alice J! {CommandWord.H.hint()}"
    async with db() as session:
        user = await session.get(User, ALICE)
    assert user.name == "Alice J"


async def test_empty_name_returns_usage(sms, count_rows):
    reply = await sms(ALICE, "name")

    assert reply == CommandWord.NAME.usage()
    assert await count_rows(User) == 0


async def test_name_too_long_is_rejected_and_name_kept(sms, db):
    await sms(ALICE, "name Alice")

    reply = await sms(ALICE, "name " + "x" * 21)

    assert reply == "That name is 21 characters long.\nPlease shorten it to 20 characters or less."
    async with db() as session:
        user = await session.get(User, ALICE)
    assert user.name == "Alice"


async def test_name_at_limit_is_accepted(sms, db):
    await sms(ALICE, "name Alice")

    reply = await sms(ALICE, "name " + "y" * 20)

    assert reply == f'Your name has been updated to "{"y" * 20}"'


async def test_help_lists_every_command(sms):
    await sms(ALICE, "name Alice")

    reply = await sms(ALICE, "H")

    assert reply.startswith("Available commands:\n- h\n- name\n")
    for word in CommandWord:
        assert f"- {word}" in reply
    assert reply.endswith(CommandWord.INFO.hint())


async def test_empty_message_from_user_gets_help_hint(sms):
    await sms(ALICE, "name Alice")

    assert await sms(ALICE, "   ") == CommandWord.H.hint()


async def test_unknown_word_from_user(sms):
    await sms(ALICE, "name Alice")

    reply = await sms(ALICE, "hello")

    assert reply == f'We didn\'t recognize that command word: "hello".\n{CommandWord.H.hint()}'


async def test_info(sms):
    await sms(ALICE, "name Alice")

    assert await sms(ALICE, "info group") == CommandWord.GROUP.hint()
    assert await sms(ALICE, "info") == CommandWord.INFO.hint()
    assert await sms(ALICE, "info frobnicate") == 'Command "frobnicate" not recognized'


async def test_stop_removes_user_and_everything_they_own(sms, db, count_rows):
    await sms(ALICE, "name Alice")
    await sms(BOB, "name Bob")
    async with db() as session:
        async with session.begin():
            await save_contact(session, ALICE, "Bob", BOB)
            await save_contact(session, BOB, "Alice", ALICE)
            await set_pending_action(session, ALICE, ActionType.GROUP)

    reply = await sms(ALICE, "stop")

    assert reply == "You've been unsubscribed. Goodbye!"
    assert await count_rows(User, User.number == ALICE) == 0
    assert await count_rows(Contact, Contact.submitter_number == ALICE) == 0
    assert await count_rows(PendingAction) == 0
    assert await count_rows(Contact, Contact.submitter_number == BOB) == 1


async def test_failure_rolls_back_and_returns_generic_reply(sms, count_rows, monkeypatch):
    from app.flow.handlers import account

    await sms(ALICE, "name Alice")

    real_delete_user = account.delete_user

    async def delete_then_fail(session, number):
        await real_delete_user(session, number)
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(account, "delete_user", delete_then_fail)

    assert await sms(ALICE, "stop") == INTERNAL_ERROR_MESSAGE
    assert await count_rows(User) == 1

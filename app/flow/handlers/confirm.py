"""
app/flow/handlers/confirm.py

Handles: confirm <selections>

- Looks up the sender's pending action
- Interprets the selections with the addressing scheme of that action kind:
    deletion          -> "1, 3"  positions in the groups-then-contacts list
    group             -> "1, 2"  positions in the candidate contact list
    deferred_contacts -> "1a, 2b" contact position + number letter
- Commits the result and closes the pending action
- Bad tokens are reported one by one; they never block the valid ones
"""

from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger, LogContext
from app.flow.commands import Command
from app.flow.handlers.vcard_import import SAVE_RESULT_LINES, format_deferred_prompt
from app.flow.states import ActionType
from app.services.contact_service import delete_contacts, save_contact
from app.services.group_service import create_group, delete_groups, list_pending_deletion_groups
from app.services.pending_action_service import (
    clear_pending_action,
    count_deferred_contacts,
    get_pending_action,
    list_deferred_contacts,
    list_pending_deletion_contacts,
    list_pending_group_members,
    remove_deferred_contacts,
)
from utils.constants import (
    DEFERRED_BAD_OPTION_MESSAGE,
    DEFERRED_BAD_POSITION_MESSAGE,
    DEFERRED_BAD_SHAPE_MESSAGE,
    DELETED_CONTACT_LINE,
    DELETED_GROUP_LINE,
    GROUP_CREATED_HEADER,
    INVALID_SELECTIONS_MESSAGE,
    NO_VALID_GROUP_MEMBERS_MESSAGE,
    NOTHING_DELETED_MESSAGE,
    NOTHING_TO_CONFIRM_MESSAGE,
)
from utils.phone_utils import format_contact
from utils.text_utils import format_member_count
from utils.validation_utils import option_letter, parse_deferred_token, parse_index, split_selections

logger = get_logger(__name__)


def _invalid_line(tokens: List[str]) -> str:
    return INVALID_SELECTIONS_MESSAGE.format(tokens=", ".join(tokens))


async def handle_confirm(session: AsyncSession, sender: str, command: Command) -> Dict[str, Any]:
    """
    Resolves the sender's pending action.

    Args:
        session: Database session (the caller owns the transaction)
        sender: Sender phone number
        command: Parsed "confirm" command

    Returns:
        Response dict describing what was done and which selections were invalid
    """
    pending = await get_pending_action(session, sender)
    if pending is None:
        return {"message": NOTHING_TO_CONFIRM_MESSAGE}

    with LogContext(sender=sender, action_type=pending.action_type.value):
        tokens = split_selections(command.text)
        if not tokens:
            return {"message": command.word.hint()}

        logger.info(f"Resolving {len(tokens)} selection(s)")

        if pending.action_type == ActionType.DELETION:
            message = await resolve_deletion(session, sender, tokens)
        elif pending.action_type == ActionType.GROUP:
            message = await resolve_group(session, sender, tokens)
        elif pending.action_type == ActionType.DEFERRED_CONTACTS:
            message = await resolve_deferred_contacts(session, sender, tokens)
        else:
            raise ValueError(f"Unhandled pending action type: {pending.action_type}")

        return {"message": message}


async def resolve_deletion(session: AsyncSession, sender: str, tokens: List[str]) -> str:
    """
    Deletes the selected groups and contacts and clears the pending action.

    Position i (1-based) is groups[i-1] for i <= len(groups), then
    contacts[i-len(groups)-1]; anything else is invalid.
    """
    groups = await list_pending_deletion_groups(session, sender)
    contacts = await list_pending_deletion_contacts(session, sender)

    selected_groups = {}
    selected_contacts = {}
    invalid = []

    for token in tokens:
        index = parse_index(token)
        if index is None or not 1 <= index <= len(groups) + len(contacts):
            invalid.append(token)
        elif index <= len(groups):
            group = groups[index - 1]
            selected_groups[group.id] = group
        else:
            contact = contacts[index - len(groups) - 1]
            selected_contacts[contact.id] = contact

    await delete_groups(session, selected_groups)
    await delete_contacts(session, selected_contacts)
    await clear_pending_action(session, sender)

    logger.info(f"Deleted {len(selected_groups)} group(s), {len(selected_contacts)} contact(s)")

    lines = [
        DELETED_GROUP_LINE.format(name=group.name, members=format_member_count(group.member_count))
        for group in selected_groups.values()
    ]
    lines += [
        DELETED_CONTACT_LINE.format(contact=format_contact(contact.contact_name, contact.contact_user_number))
        for contact in selected_contacts.values()
    ]
    if not lines:
        lines.append(NOTHING_DELETED_MESSAGE)
    if invalid:
        lines.append(_invalid_line(invalid))

    return "\n".join(lines)


async def resolve_group(session: AsyncSession, sender: str, tokens: List[str]) -> str:
    """
    Creates a group from the selected candidates. When nothing valid was
    selected the pending action stays open for another try.
    """
    candidates = await list_pending_group_members(session, sender)

    selected = {}
    invalid = []

    for token in tokens:
        index = parse_index(token)
        if index is None or not 1 <= index <= len(candidates):
            invalid.append(token)
        else:
            contact = candidates[index - 1]
            selected.setdefault(contact.id, contact)

    if not selected:
        return "\n".join([NO_VALID_GROUP_MEMBERS_MESSAGE, _invalid_line(invalid)])

    members = list(selected.values())
    group = await create_group(session, sender, members)

    lines = [GROUP_CREATED_HEADER.format(name=group.name)]
    lines += [format_contact(contact.contact_name, contact.contact_user_number) for contact in members]
    if invalid:
        lines.append(_invalid_line(invalid))

    return "\n".join(lines)


async def resolve_deferred_contacts(session: AsyncSession, sender: str, tokens: List[str]) -> str:
    """
    Saves the chosen number for each selected deferred contact.

    Every deferred row of a resolved name is purged. The pending action is
    only cleared once no deferred rows remain; otherwise the remaining
    choices are listed again.
    """
    deferred = await list_deferred_contacts(session, sender)
    names = list(deferred)

    saved_lines = []
    errors = []
    resolved_names = []

    for token in tokens:
        parsed = parse_deferred_token(token)
        if parsed is None:
            errors.append(DEFERRED_BAD_SHAPE_MESSAGE.format(token=token))
            continue

        position, option = parsed
        if not 1 <= position <= len(names):
            errors.append(DEFERRED_BAD_POSITION_MESSAGE.format(token=token, position=position))
            continue

        name = names[position - 1]
        options = deferred[name]
        if option >= len(options):
            errors.append(DEFERRED_BAD_OPTION_MESSAGE.format(token=token, name=name, letter=option_letter(option)))
            continue

        number = options[option].phone_number
        result = await save_contact(session, sender, name, number)
        saved_lines.append(SAVE_RESULT_LINES[result].format(contact=format_contact(name, number)))
        if name not in resolved_names:
            resolved_names.append(name)

    await remove_deferred_contacts(session, sender, resolved_names)

    lines = saved_lines + errors
    if await count_deferred_contacts(session, sender) == 0:
        await clear_pending_action(session, sender)
        logger.info("All deferred contacts resolved")
    else:
        lines.append(format_deferred_prompt(await list_deferred_contacts(session, sender)))

    return "\n".join(lines)

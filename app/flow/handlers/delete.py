"""
app/flow/handlers/delete.py

Handles: delete <name fragment>

- Finds the sender's groups and contacts matching the fragment
- Records them as deletion candidates under a new pending action
- Lists them with one shared numbering: groups first, then contacts
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger, LogContext
from app.flow.commands import Command
from app.flow.states import ActionType
from app.services.contact_service import find_contacts
from app.services.group_service import find_groups
from app.services.pending_action_service import add_pending_deletions, set_pending_action
from utils.constants import (
    CONTACTS_HEADER,
    DELETE_PROMPT_HEADER,
    GROUPS_HEADER,
    NO_DELETE_MATCHES_MESSAGE,
)
from utils.phone_utils import format_contact
from utils.text_utils import format_group, numbered_lines

logger = get_logger(__name__)


async def handle_delete(session: AsyncSession, sender: str, command: Command) -> Dict[str, Any]:
    """
    Starts a deletion workflow.

    Args:
        session: Database session (the caller owns the transaction)
        sender: Sender phone number
        command: Parsed "delete" command

    Returns:
        Response dict with the numbered candidate list, or a no-match message
    """
    with LogContext(sender=sender, action_type=ActionType.DELETION.value):
        query = command.text
        if not query:
            return {"message": command.word.hint()}

        groups = await find_groups(session, sender, query)
        contacts = await find_contacts(session, sender, query)

        if not groups and not contacts:
            logger.info("Delete request matched nothing")
            return {"message": NO_DELETE_MATCHES_MESSAGE.format(query=query)}

        await set_pending_action(session, sender, ActionType.DELETION)
        await add_pending_deletions(
            session,
            sender,
            group_ids=[group.id for group in groups],
            contact_ids=[contact.id for contact in contacts],
        )
        logger.info(f"Deletion pending: {len(groups)} group(s), {len(contacts)} contact(s)")

        lines = [DELETE_PROMPT_HEADER]
        if groups:
            lines.append(GROUPS_HEADER)
            lines += numbered_lines(format_group(g.name, g.member_count) for g in groups)
        if contacts:
            lines.append(CONTACTS_HEADER)
            lines += numbered_lines(
                (format_contact(c.contact_name, c.contact_user_number) for c in contacts),
                start=len(groups) + 1,
            )

        return {"message": "\n".join(lines)}

"""
app/flow/handlers/group.py

Handles: group <fragment>, <fragment>, ...

- Matches contacts against every comma-separated fragment
- Records the matches as candidates under a new pending action
- Lists them so the sender can pick members with "confirm"
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger, LogContext
from app.flow.commands import Command
from app.flow.states import ActionType
from app.services.contact_service import match_contacts, split_fragments
from app.services.pending_action_service import (
    add_pending_group_members,
    list_pending_group_members,
    set_pending_action,
)
from utils.constants import GROUP_PROMPT_HEADER, NO_GROUP_MATCHES_MESSAGE
from utils.phone_utils import format_contact
from utils.text_utils import numbered_lines

logger = get_logger(__name__)


async def handle_group(session: AsyncSession, sender: str, command: Command) -> Dict[str, Any]:
    """
    Starts a group creation workflow.

    Returns:
        Response dict with the numbered candidate list, or a no-match message
    """
    with LogContext(sender=sender, action_type=ActionType.GROUP.value):
        fragments = split_fragments(command.text)
        if not fragments:
            return {"message": command.word.hint()}

        contacts = await match_contacts(session, sender, fragments)

        if not contacts:
            logger.info("Group request matched nothing")
            return {"message": NO_GROUP_MATCHES_MESSAGE.format(query=command.text)}

        await set_pending_action(session, sender, ActionType.GROUP)
        await add_pending_group_members(session, sender, [contact.id for contact in contacts])
        logger.info(f"Group pending with {len(contacts)} candidate(s)")

        # Numbered from the stored candidates, exactly as "confirm" will read them
        candidates = await list_pending_group_members(session, sender)

        lines = [GROUP_PROMPT_HEADER]
        lines += numbered_lines(format_contact(c.contact_name, c.contact_user_number) for c in candidates)
        return {"message": "\n".join(lines)}

"""
app/flow/handlers/contacts.py

Handles: contacts

- Lists the sender's groups (with member counts) and contacts
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from app.flow.commands import Command
from app.services.contact_service import list_contacts
from app.services.group_service import list_groups
from utils.constants import CONTACTS_HEADER, GROUPS_HEADER, NO_CONTACTS_MESSAGE
from utils.phone_utils import format_contact
from utils.text_utils import format_group


async def handle_contacts(session: AsyncSession, sender: str, command: Command) -> Dict[str, Any]:
    groups = await list_groups(session, sender)
    contacts = await list_contacts(session, sender)

    if not groups and not contacts:
        return {"message": NO_CONTACTS_MESSAGE}

    lines = []
    if groups:
        lines.append(GROUPS_HEADER)
        lines += [f"- {format_group(group.name, group.member_count)}" for group in groups]
    if contacts:
        lines.append(CONTACTS_HEADER)
        lines += [f"- {format_contact(c.contact_name, c.contact_user_number)}" for c in contacts]

    return {"message": "\n".join(lines)}

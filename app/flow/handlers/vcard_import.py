"""
app/flow/handlers/vcard_import.py

Handles: contact card (vCard) attachments

- Saves cards with a single number right away (added / updated / unchanged)
- Defers cards with several numbers until the sender picks one
- Deferred choices accumulate across imports under one pending action
"""

from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.core.logging import get_logger, LogContext
from app.flow.states import ActionType
from app.models.pending_action import DeferredContact
from app.services.contact_service import SaveResult, save_contact
from app.services.pending_action_service import (
    add_deferred_contact,
    list_deferred_contacts,
    set_pending_action,
)
from utils.constants import (
    CONTACT_ADDED_LINE,
    CONTACT_UNCHANGED_LINE,
    CONTACT_UPDATED_LINE,
    DEFERRED_PROMPT_HEADER,
    VCARD_EMPTY_MESSAGE,
)
from utils.phone_utils import format_contact, format_national
from utils.validation_utils import option_letter
from utils.vcard_utils import parse_vcards

logger = get_logger(__name__)

SAVE_RESULT_LINES = {
    SaveResult.ADDED: CONTACT_ADDED_LINE,
    SaveResult.UPDATED: CONTACT_UPDATED_LINE,
    SaveResult.UNCHANGED: CONTACT_UNCHANGED_LINE,
}


def format_deferred_prompt(deferred: Dict[str, List[DeferredContact]]) -> str:
    """
    Lists every outstanding choice:

        1. Alice Jones
          a. (206) 555-0101 cell
          b. (425) 555-0102 work
    """
    lines = [DEFERRED_PROMPT_HEADER]
    for position, (name, options) in enumerate(deferred.items(), 1):
        lines.append(f"{position}. {name}")
        for index, option in enumerate(options):
            label = format_national(option.phone_number)
            if option.phone_description:
                label += f" {option.phone_description}"
            lines.append(f"  {option_letter(index)}. {label}")
    return "\n".join(lines)


async def handle_vcard_import(session: AsyncSession, sender: str, data: str) -> Dict[str, Any]:
    """
    Imports the contacts in a vCard attachment.

    Args:
        session: Database session (the caller owns the transaction)
        sender: Sender phone number
        data: Attachment text

    Returns:
        Response dict summarizing what was saved and what needs a choice
    """
    with LogContext(sender=sender, action_type=ActionType.DEFERRED_CONTACTS.value):
        try:
            records = parse_vcards(data, settings.DEFAULT_REGION)
        except ValidationError as e:
            return {"message": e.message}

        lines = []
        deferred_any = False

        for record in records:
            if not record.phones:
                logger.debug("Skipping card without phone numbers")
                continue

            if len(record.phones) == 1:
                number = record.phones[0].number
                result = await save_contact(session, sender, record.name, number)
                lines.append(SAVE_RESULT_LINES[result].format(contact=format_contact(record.name, number)))
                continue

            if not deferred_any:
                await set_pending_action(session, sender, ActionType.DEFERRED_CONTACTS)
                deferred_any = True

            for phone in record.phones:
                await add_deferred_contact(session, sender, record.name, phone.number, phone.description)
            logger.info(f"Deferred contact with {len(record.phones)} numbers")

        if deferred_any:
            lines.append(format_deferred_prompt(await list_deferred_contacts(session, sender)))

        if not lines:
            return {"message": VCARD_EMPTY_MESSAGE}

        return {"message": "\n".join(lines)}

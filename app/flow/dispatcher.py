"""
app/flow/dispatcher.py

Purpose: Central message dispatcher

- Receives normalized messages from the webhook
- Sends unregistered senders to onboarding
- Downloads contact card attachments, then routes them to the vCard importer
- Routes commands to their handlers
- Runs each message in one database transaction; a failure rolls it
  back and the sender gets a generic error reply
"""

from typing import Dict, Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import UnknownCommandError
from app.core.logging import get_logger, LogContext
from app.db.database import get_session_factory
from app.flow.commands import Command, CommandWord, parse_command
from app.flow.handlers.account import handle_help, handle_info, handle_name, handle_stop
from app.flow.handlers.confirm import handle_confirm
from app.flow.handlers.contacts import handle_contacts
from app.flow.handlers.delete import handle_delete
from app.flow.handlers.group import handle_group
from app.flow.handlers.onboarding import handle_onboarding
from app.flow.handlers.vcard_import import handle_vcard_import
from app.schemas.webhook import InboundMessage
from app.services.twilio_service import twilio_service
from app.services.user_service import get_user
from utils.constants import INTERNAL_ERROR_MESSAGE, UNRECOGNIZED_COMMAND_MESSAGE

logger = get_logger(__name__)


async def dispatch_message(message: InboundMessage) -> str:
    """
    Main dispatcher for incoming SMS messages

    Args:
        message: Normalized message object

    Returns:
        Reply text for the sender
    """
    with LogContext(sender=message.sender):
        logger.info(f"📨 Dispatching message: {message.body[:50]}")

        try:
            session_factory = get_session_factory()
            vcard_data = await download_vcard(session_factory, message)

            async with session_factory() as session:
                async with session.begin():
                    response = await process_message(session, message, vcard_data)

            reply = response.get("message", "")
            logger.debug(f"Reply: {reply[:100]}")
            return reply

        except Exception as e:
            logger.error(f"❌ Dispatcher error: {e}", exc_info=True)
            return INTERNAL_ERROR_MESSAGE


async def download_vcard(
    session_factory: async_sessionmaker[AsyncSession],
    message: InboundMessage,
) -> Optional[str]:
    """
    Fetches a contact card attachment from a registered sender. Runs
    before the message transaction opens.

    Returns:
        Card text, or None if there is nothing to import
    """
    if message.attachment is None or not message.attachment.is_vcard:
        return None

    async with session_factory() as session:
        if await get_user(session, message.sender) is None:
            return None

    logger.info("📇 Contact card received")
    return await twilio_service.fetch_media(message.attachment.url)


async def process_message(
    session: AsyncSession,
    message: InboundMessage,
    vcard_data: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Decides what a message means and hands it to the right handler.
    Runs inside the caller's transaction.

    Args:
        session: Database session
        message: Normalized message
        vcard_data: Downloaded contact card text, if the message carried one

    Returns:
        Handler response dict
    """
    sender = message.sender

    unknown_word = None
    try:
        command = parse_command(message.body)
    except UnknownCommandError as e:
        command = None
        unknown_word = e.word

    user = await get_user(session, sender)
    if user is None:
        return await handle_onboarding(session, sender, command)

    if vcard_data is not None:
        return await handle_vcard_import(session, sender, vcard_data)

    if unknown_word is not None:
        return {
            "message": UNRECOGNIZED_COMMAND_MESSAGE.format(word=unknown_word, hint=CommandWord.H.hint())
        }

    if command is None:
        return {"message": CommandWord.H.hint()}

    return await route_to_handler(session, sender, command)


async def route_to_handler(session: AsyncSession, sender: str, command: Command) -> Dict[str, Any]:
    """
    Routes a command to its handler

    Args:
        session: Database session
        sender: Registered sender's phone number
        command: Parsed command

    Returns:
        Handler response
    """
    with LogContext(command=command.word.value):
        logger.info("🚦 Routing command")
        return await _call_handler(session, sender, command)


async def _call_handler(session: AsyncSession, sender: str, command: Command) -> Dict[str, Any]:
    """Picks the handler for a command word."""
    if command.word == CommandWord.H:
        handler = handle_help
    elif command.word == CommandWord.NAME:
        handler = handle_name
    elif command.word == CommandWord.INFO:
        handler = handle_info
    elif command.word == CommandWord.STOP:
        handler = handle_stop
    elif command.word == CommandWord.CONTACTS:
        handler = handle_contacts
    elif command.word == CommandWord.DELETE:
        handler = handle_delete
    elif command.word == CommandWord.CONFIRM:
        handler = handle_confirm
    elif command.word == CommandWord.GROUP:
        handler = handle_group
    else:
        raise ValueError(f"Unhandled command word: {command.word}")

    return await handler(session, sender, command)

"""
app/flow/handlers/account.py

Handles: h, name, info, stop

- Lists available commands
- Updates the sender's display name
- Explains a single command
- Unsubscribes the sender
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.core.logging import get_logger
from app.flow.commands import Command, CommandWord
from app.services.user_service import delete_user, update_user_name
from utils.constants import (
    AVAILABLE_COMMANDS_HEADER,
    GOODBYE_MESSAGE,
    INFO_UNKNOWN_COMMAND_MESSAGE,
    NAME_UPDATED_MESSAGE,
)
from utils.validation_utils import validate_name

logger = get_logger(__name__)


async def handle_help(session: AsyncSession, sender: str, command: Command) -> Dict[str, Any]:
    lines = [AVAILABLE_COMMANDS_HEADER]
    lines += [f"- {word}" for word in CommandWord]
    return {"message": "\n".join(lines) + f"\n\n{CommandWord.INFO.hint()}"}


async def handle_name(session: AsyncSession, sender: str, command: Command) -> Dict[str, Any]:
    """
    Updates the sender's name. An empty or too long name leaves it as is.
    """
    try:
        name = validate_name(command.text, CommandWord.NAME.usage(), settings.MAX_NAME_LENGTH)
    except ValidationError as e:
        return {"message": e.message}

    await update_user_name(session, sender, name)
    return {"message": NAME_UPDATED_MESSAGE.format(name=name)}


async def handle_info(session: AsyncSession, sender: str, command: Command) -> Dict[str, Any]:
    if not command.args:
        return {"message": command.word.hint()}

    word = CommandWord.lookup(command.args[0])
    if word is None:
        return {"message": INFO_UNKNOWN_COMMAND_MESSAGE.format(word=command.args[0])}

    return {"message": word.hint()}


async def handle_stop(session: AsyncSession, sender: str, command: Command) -> Dict[str, Any]:
    # Twilio handles STOP itself, so the sender rarely sees this reply
    await delete_user(session, sender)
    return {"message": GOODBYE_MESSAGE}

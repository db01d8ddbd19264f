"""
app/flow/handlers/onboarding.py

Handles: messages from numbers that have not registered

- Only "name <your name>" registers a new user
- Anything else gets the welcome banner and the "name" hint
"""

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.core.logging import get_logger, LogContext
from app.flow.commands import Command, CommandWord
from app.services.user_service import create_user
from utils.constants import ONBOARDING_BANNER, WELCOME_NEW_USER_MESSAGE
from utils.validation_utils import validate_name

logger = get_logger(__name__)


async def handle_onboarding(session: AsyncSession, sender: str, command: Optional[Command]) -> Dict[str, Any]:
    """
    Handles a message from an unknown sender.

    Args:
        session: Database session
        sender: Sender phone number
        command: Parsed command, or None if there was no (known) command word

    Returns:
        Response dict with the reply message
    """
    with LogContext(sender=sender):
        if command is None or command.word != CommandWord.NAME:
            logger.info("Unregistered sender, sending onboarding banner")
            return {"message": f"{ONBOARDING_BANNER}\n{CommandWord.NAME.hint()}"}

        try:
            name = validate_name(command.text, CommandWord.NAME.usage(), settings.MAX_NAME_LENGTH)
        except ValidationError as e:
            return {"message": e.message}

        await create_user(session, sender, name)
        return {"message": WELCOME_NEW_USER_MESSAGE.format(name=name, hint=CommandWord.H.hint())}

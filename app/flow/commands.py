"""
app/flow/commands.py

Purpose: Command vocabulary and parsing

- Fixed set of command words, matched case-insensitively
- Per-command description and parameter documentation
- Usage / example / hint text used across replies
- Splits a message body into a command and its arguments
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from app.core.exceptions import UnknownCommandError


@dataclass(frozen=True)
class ParameterDoc:
    example: str
    description: str


class CommandWord(str, Enum):
    """
    Every command a user can send. The value is the word itself.
    """

    # "help" would be nicer, but carriers intercept it
    H = "h"
    NAME = "name"
    INFO = "info"
    STOP = "stop"
    CONTACTS = "contacts"
    DELETE = "delete"
    CONFIRM = "confirm"
    GROUP = "group"

    def __str__(self) -> str:
        return self.value

    @property
    def description(self) -> str:
        return COMMAND_DESCRIPTIONS[self]

    @property
    def parameter_doc(self) -> Optional[ParameterDoc]:
        return COMMAND_PARAMETERS.get(self)

    def usage(self) -> str:
        doc = self.parameter_doc
        if doc:
            return f"Reply \"{self} X\", where X is {doc.description}"
        return f"Reply \"{self}\""

    def example(self) -> str:
        doc = self.parameter_doc
        if doc:
            return f"\nExample: \"{self} {doc.example}\""
        return ""

    def hint(self) -> str:
        return f"{self.usage()}, to {self.description}.{self.example()}"

    @classmethod
    def lookup(cls, word: str) -> Optional["CommandWord"]:
        """
        Case-insensitive lookup; None when the word is not a command.
        """
        try:
            return cls(word.lower())
        except ValueError:
            return None


COMMAND_DESCRIPTIONS = {
    CommandWord.H: "show a list of available commands",
    CommandWord.NAME: "set your preferred name",
    CommandWord.INFO: "see information about a command",
    CommandWord.STOP: "stop receiving messages and remove yourself from the database",
    CommandWord.CONTACTS: "see a list of your groups and contacts",
    CommandWord.DELETE: "delete a group or contact by name",
    CommandWord.CONFIRM: "confirm pending action(s)",
    CommandWord.GROUP: "create a new group from your contacts",
}

COMMAND_PARAMETERS = {
    CommandWord.NAME: ParameterDoc(example="John S.", description="your name"),
    CommandWord.INFO: ParameterDoc(example="name", description="a command"),
    CommandWord.DELETE: ParameterDoc(example="John", description="a group or contact name to delete"),
    CommandWord.CONFIRM: ParameterDoc(example="2,3", description="number(s) from a list of pending actions"),
    CommandWord.GROUP: ParameterDoc(
        example="John, Alice",
        description="a comma-separated list of contact name fragments",
    ),
}


@dataclass
class Command:
    """
    A parsed message: the command word plus what followed it.

    `args` holds the remaining whitespace-separated tokens and `text` the
    same remainder as a single string with inner spacing normalized.
    """
    word: CommandWord
    args: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(self.args)


def parse_command(body: Optional[str]) -> Optional[Command]:
    """
    Parses a message body into a Command.

    Args:
        body: Raw message text

    Returns:
        Command, or None when the body has no words at all

    Raises:
        UnknownCommandError: If the first word is not a command
    """
    words = (body or "").split()
    if not words:
        return None

    word = CommandWord.lookup(words[0])
    if word is None:
        raise UnknownCommandError(words[0])

    return Command(word=word, args=words[1:])

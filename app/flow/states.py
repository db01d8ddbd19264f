"""
app/flow/states.py

Purpose: Defines the pending action kinds

- Enum with one member per kind of workflow awaiting "confirm"
- Single source of truth for what each kind does on re-entry
- Metadata for each kind (accumulate vs replace)

A submitter with no pending action row is in the idle state.
"""

from enum import Enum
from typing import Dict, Optional
from dataclasses import dataclass


class ActionType(str, Enum):
    """
    Kinds of workflow that wait for a "confirm" message.
    Stored as the value in pending_actions.action_type.
    """

    DELETION = "deletion"
    GROUP = "group"
    DEFERRED_CONTACTS = "deferred_contacts"


@dataclass
class ActionMetadata:
    """
    Behaviour of a pending action kind.
    """
    name: ActionType
    accumulates: bool = False  # Re-entering the same kind appends candidates instead of replacing


ACTION_METADATA: Dict[ActionType, ActionMetadata] = {
    ActionType.DELETION: ActionMetadata(name=ActionType.DELETION),
    ActionType.GROUP: ActionMetadata(name=ActionType.GROUP),
    ActionType.DEFERRED_CONTACTS: ActionMetadata(name=ActionType.DEFERRED_CONTACTS, accumulates=True),
}


def get_action_metadata(action_type: ActionType) -> ActionMetadata:
    """
    Retrieves metadata for a pending action kind.
    """
    return ACTION_METADATA[action_type]


def parse_action_type(value: Optional[str]) -> Optional[ActionType]:
    """
    Converts a stored action_type column value back to the enum.

    Returns:
        ActionType, or None when value is None

    Raises:
        ValueError: If the stored value is not a known kind
    """
    if value is None:
        return None
    return ActionType(value)


def keeps_existing(current: Optional[ActionType], requested: ActionType) -> bool:
    """
    Checks whether entering `requested` keeps the current pending action
    (and its candidates) instead of replacing it.
    """
    return current == requested and get_action_metadata(requested).accumulates

"""
utils/constants.py

Purpose: Centralized static content

- All user-facing reply text
- Reusable limits

(Prevents hardcoding across the codebase)
"""

# ============================================================
# ONBOARDING & ACCOUNT
# ============================================================

ONBOARDING_BANNER = """Welcome to GroupText!
To participate:"""

WELCOME_NEW_USER_MESSAGE = "Hello, {name}! {hint}"

NAME_UPDATED_MESSAGE = "Your name has been updated to \"{name}\""

GOODBYE_MESSAGE = "You've been unsubscribed. Goodbye!"

AVAILABLE_COMMANDS_HEADER = "Available commands:"

UNRECOGNIZED_COMMAND_MESSAGE = "We didn't recognize that command word: \"{word}\".\n{hint}"

INFO_UNKNOWN_COMMAND_MESSAGE = "Command \"{word}\" not recognized"

# ============================================================
# CONTACTS & GROUPS
# ============================================================

NO_CONTACTS_MESSAGE = "You don't have any groups or contacts yet. Send a contact card to add one."

GROUPS_HEADER = "Groups:"

CONTACTS_HEADER = "Contacts:"

MEMBER_COUNT = "{count} member"

MEMBER_COUNT_PLURAL = "{count} members"

# ============================================================
# PENDING ACTIONS
# ============================================================

NO_DELETE_MATCHES_MESSAGE = "No groups or contacts match \"{query}\"."

DELETE_PROMPT_HEADER = "Reply \"confirm X\", where X is the number(s) of what you want to delete:"

NO_GROUP_MATCHES_MESSAGE = "No contacts match \"{query}\"."

GROUP_PROMPT_HEADER = "Reply \"confirm X\", where X is the number(s) of the contacts to put in a new group:"

NOTHING_TO_CONFIRM_MESSAGE = "There is nothing to confirm."

DELETED_GROUP_LINE = "Deleted group {name} ({members})"

DELETED_CONTACT_LINE = "Deleted contact {contact}"

NOTHING_DELETED_MESSAGE = "Nothing was deleted."

GROUP_CREATED_HEADER = "Created {name} with:"

NO_VALID_GROUP_MEMBERS_MESSAGE = "No group was created. Reply \"confirm X\" with numbers from the list."

INVALID_SELECTIONS_MESSAGE = "Invalid selection(s): {tokens}"

# ============================================================
# CONTACT CARD IMPORT
# ============================================================

VCARD_EMPTY_MESSAGE = "That contact card didn't have any names with phone numbers."

VCARD_UNREADABLE_MESSAGE = "Sorry, that contact card could not be read."

CONTACT_ADDED_LINE = "Added {contact}"

CONTACT_UPDATED_LINE = "Updated {contact}"

CONTACT_UNCHANGED_LINE = "Unchanged {contact}"

DEFERRED_PROMPT_HEADER = "Some contacts have more than one number. Reply \"confirm X\", where X is a number and letter for each contact, like \"confirm 1a, 2b\":"

DEFERRED_BAD_SHAPE_MESSAGE = "\"{token}\" should be a number followed by a letter, like \"1a\""

DEFERRED_BAD_POSITION_MESSAGE = "\"{token}\": there is no contact number {position}"

DEFERRED_BAD_OPTION_MESSAGE = "\"{token}\": {name} has no option \"{letter}\""

# ============================================================
# ERRORS
# ============================================================

INTERNAL_ERROR_MESSAGE = "Sorry, something went wrong. Please try again later."

STARTUP_NOTIFICATION_MESSAGE = "Server is starting up"

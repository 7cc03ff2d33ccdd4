"""Everything Otto says back to the user."""

from otto_cli.exceptions import (
    FormatError,
    OttoError,
    PersistenceError,
    TaskIndexError,
    UnknownCommandError,
)

# Actions
INTRO = "Otto would rather be napping,\nbut he supposes he can help you with your tasks."
ADD_TASK = "More work? Otto has noted it down, but he'd much rather be sleeping."
NUM_OF_TASKS = "Now you have {count} task(s) in the list."
DELETE_TASK = (
    "Finally, something Otto can get behind: deleting a task. "
    "It's gone now, just like Otto wishes he could be... back to his nap."
)
COMPLETE = "Well, finally. You finished something."
INCOMPLETE = "So you didn't finish that task. Try to get it done so Otto can rest easy."
SHOW_LIST = "Here are the tasks in your list. Otto would rather be asleep than dealing with all this."
SHOW_FIND_RESULTS = (
    "Here are the matching tasks in your list. "
    "Otto would rather be asleep than dealing with all this."
)
EMPTY_LIST = "Your list is empty. Otto approves."
NO_MATCHES = "Nothing matches. Otto looked, briefly."
GOODBYE = "Bye. Otto is going back to sleep."

# Errors
UNKNOWN_COMMAND_ERROR = "Otto doesn't recognize this command. Speak English."
INDEX_ERROR = "You need to give Otto an index that is in the list. Can't you even count?"
DELETE_ERROR = "You need to tell Otto what task you want to delete. Not like Otto cares though."
MARK_ERROR = "You need to tell Otto what task you want to mark. Not like Otto cares though."
FIND_ERROR = "You need to tell Otto what you want to find. Not like Otto cares though."
EVENT_ERROR = "The format for event is wrong. Missing description, start time or end time."
DEADLINE_ERROR = "The format for deadline is wrong. Missing description or deadline."
TODO_ERROR = "Todo must contain a description."
DATE_FORMAT_ERROR = "Otto can't read that time. {detail}"
SAVE_FILE_ERROR = (
    "Great, just what Otto needed: an error while saving your tasks. "
    "Try again by modifying the tasks."
)
LOAD_FILE_ERROR = (
    "Great, just what Otto needed: an error while loading your tasks. "
    "Your previous tasks are gone."
)


def message_for(error: OttoError) -> str:
    """Pick the phrase for an error raised by the core or the command layer."""
    if isinstance(error, TaskIndexError):
        return INDEX_ERROR
    if isinstance(error, FormatError):
        return DATE_FORMAT_ERROR.format(detail=error)
    if isinstance(error, UnknownCommandError):
        return UNKNOWN_COMMAND_ERROR
    if isinstance(error, PersistenceError):
        return SAVE_FILE_ERROR
    return str(error)

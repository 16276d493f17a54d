"""Command interpreter, history and autocomplete."""

from .autocomplete import COMMAND_SUGGESTIONS, Autocompleter, Completion, longest_common_prefix
from .commands import HELP_LINES, CommandInterpreter
from .history import CommandHistory

__all__ = [
    "COMMAND_SUGGESTIONS",
    "HELP_LINES",
    "Autocompleter",
    "CommandHistory",
    "CommandInterpreter",
    "Completion",
    "longest_common_prefix",
]

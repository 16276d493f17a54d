"""Prefix autocomplete over the fixed command list.

Rules, for raw input ``raw``:
- empty input completes to the first known command
- one match completes to it (with a trailing space)
- several matches after a finished token (trailing space) list the options
- otherwise extend to the longest common prefix, never past an ambiguous
  token boundary; if no progress is possible, list the options
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

COMMAND_SUGGESTIONS = (
    "help",
    "status",
    "fabricate",
    "buy autoclipper",
    "buy factory",
    "buy wire",
    "launch marketing",
    "optimize",
    "set price",
    "buttons on",
    "buttons off",
    "buttons enable",
    "buttons disable",
)


@dataclass(frozen=True)
class Completion:
    """Autocomplete outcome: the new buffer text and, if ambiguous, the options."""
    text: str
    options: Optional[List[str]] = None


def _with_space(suggestion: str) -> str:
    return suggestion if suggestion.endswith(" ") else f"{suggestion} "


def longest_common_prefix(candidates: Sequence[str]) -> str:
    if not candidates:
        return ""
    prefix = candidates[0]
    for candidate in candidates[1:]:
        while not candidate.startswith(prefix):
            prefix = prefix[:-1]
        if not prefix:
            break
    return prefix


class Autocompleter:
    """Completes partial commands against a fixed list."""

    def __init__(self, commands: Sequence[str] = COMMAND_SUGGESTIONS):
        self.commands = list(commands)

    def suggestions(self, prefix: str) -> List[str]:
        needle = prefix.lower()
        if not needle:
            return list(self.commands)
        return [c for c in self.commands if c.startswith(needle)]

    def complete(self, raw: str) -> Completion:
        trimmed = raw.strip()
        has_trailing_space = raw.endswith(" ") and bool(trimmed)
        prefix = f"{trimmed} " if has_trailing_space else trimmed
        suggestions = self.suggestions(prefix)

        if not suggestions:
            return Completion(raw)

        if not prefix or len(suggestions) == 1:
            return Completion(_with_space(suggestions[0]))

        if has_trailing_space:
            return Completion(raw, suggestions)

        lcp = longest_common_prefix(suggestions)
        if len(lcp) > len(prefix):
            last_space = lcp.rfind(" ")
            if 0 <= last_space < len(lcp) - 1:
                return Completion(lcp[:last_space + 1])
            return Completion(lcp)

        return Completion(raw, suggestions)

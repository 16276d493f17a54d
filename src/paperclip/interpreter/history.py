"""Command history with a browse cursor."""

from typing import List


class CommandHistory:
    """Submitted lines, newest first.

    ``cursor == -1`` means "not browsing" and maps to an empty input buffer.
    """

    OLDER = "older"
    NEWER = "newer"

    def __init__(self):
        self.entries: List[str] = []
        self.cursor = -1

    def __len__(self) -> int:
        return len(self.entries)

    def push(self, line: str) -> None:
        if not line:
            return
        self.entries.insert(0, line)
        self.cursor = -1

    def reset(self) -> None:
        self.cursor = -1

    def navigate(self, direction: str) -> str:
        """Step the cursor and return the entry under it ("" when not browsing)."""
        if direction not in (self.OLDER, self.NEWER):
            raise ValueError(f"Unknown history direction: {direction!r}")
        if not self.entries:
            return ""

        if direction == self.OLDER:
            self.cursor = min(self.cursor + 1, len(self.entries) - 1)
        else:
            self.cursor = max(self.cursor - 1, -1)

        if self.cursor == -1:
            return ""
        return self.entries[self.cursor]

    def older(self) -> str:
        return self.navigate(self.OLDER)

    def newer(self) -> str:
        return self.navigate(self.NEWER)

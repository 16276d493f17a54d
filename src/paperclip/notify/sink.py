"""Notification sink contract and concrete sinks.

Engine-side code only depends on ``NotificationSink.notify``; where the lines
end up (memory, log, terminal) is up to the sink.
"""

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol, TextIO

from .formatting import format_elapsed

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Notification variant; neutral notifications use ``None``."""
    WARNING = "warning"
    SUCCESS = "success"


@dataclass(frozen=True)
class Notification:
    """One line in the session log."""
    channel: str
    message: str
    severity: Optional[Severity] = None
    force_visible: bool = False


class NotificationSink(Protocol):
    def notify(
        self,
        channel: str,
        message: str,
        severity: Optional[Severity] = None,
        force_visible: bool = False,
    ) -> None: ...


class RecordingSink:
    """Keeps every notification in memory."""

    def __init__(self):
        self.notifications: List[Notification] = []

    def notify(self, channel, message, severity=None, force_visible=False) -> None:
        self.notifications.append(Notification(channel, message, severity, force_visible))

    def channels(self) -> List[str]:
        return [n.channel for n in self.notifications]

    def messages(self, channel: Optional[str] = None) -> List[str]:
        return [n.message for n in self.notifications if channel is None or n.channel == channel]

    @property
    def last(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None

    def clear(self) -> None:
        self.notifications.clear()


class LoggingSink:
    """Forwards notifications to the ``logging`` module."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def notify(self, channel, message, severity=None, force_visible=False) -> None:
        level = logging.WARNING if severity == Severity.WARNING else logging.INFO
        self.log.log(level, "%s %s", channel, message)


class ConsoleSink:
    """Writes ``[hh:mm:ss] CHANNEL message`` lines to a stream.

    Multi-line messages are indented under their prefix.
    """

    MARKERS = {Severity.WARNING: "!", Severity.SUCCESS: "+", None: " "}

    def __init__(self, clock: Optional[Callable[[], float]] = None, stream: Optional[TextIO] = None):
        self.clock = clock or (lambda: 0.0)
        self.stream = stream or sys.stdout

    def format(self, channel: str, message: str, severity: Optional[Severity] = None) -> str:
        prefix = f"[{format_elapsed(self.clock())}]{self.MARKERS.get(severity, ' ')}{channel:<11}"
        lines = message.split("\n")
        pad = " " * (len(prefix) + 1)
        return "\n".join([f"{prefix} {lines[0]}"] + [pad + line for line in lines[1:]])

    def notify(self, channel, message, severity=None, force_visible=False) -> None:
        self.stream.write(self.format(channel, message, severity) + "\n")
        self.stream.flush()


class FanoutSink:
    """Sends each notification to several sinks."""

    def __init__(self, *sinks: NotificationSink):
        self.sinks = list(sinks)

    def notify(self, channel, message, severity=None, force_visible=False) -> None:
        for sink in self.sinks:
            sink.notify(channel, message, severity, force_visible)

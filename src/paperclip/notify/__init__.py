"""Notification sinks and event rendering."""

from .formatting import fmt_decimal, fmt_integer, format_elapsed
from .renderer import EventRenderer, format_panel, format_status, render_event
from .sink import (
    ConsoleSink,
    FanoutSink,
    LoggingSink,
    Notification,
    NotificationSink,
    RecordingSink,
    Severity,
)

__all__ = [
    "ConsoleSink",
    "EventRenderer",
    "FanoutSink",
    "LoggingSink",
    "Notification",
    "NotificationSink",
    "RecordingSink",
    "Severity",
    "fmt_decimal",
    "fmt_integer",
    "format_elapsed",
    "format_panel",
    "format_status",
    "render_event",
]

"""Command interpreter - free text in, one engine action (or one failure) out."""

import logging
import re
from typing import List, Optional

from ..engine.economy import EconomyEngine
from ..engine.events import ActionResult
from ..notify.renderer import EventRenderer
from ..notify.sink import NotificationSink, Severity
from .autocomplete import Autocompleter, Completion
from .history import CommandHistory

logger = logging.getLogger(__name__)

HELP_LINES = [
    "fabricate            -> manually create paperclips",
    "buy autoclipper [n]  -> add automated clippers (optional quantity)",
    "buy factory [n]      -> build factories (optional quantity)",
    "buy wire [n]         -> restock wire spools (optional quantity)",
    "launch marketing     -> boost demand (unlock required)",
    "set price <value>    -> set an exact price",
    "optimize             -> tune systems for better throughput (unlock required)",
    "buttons <on|off>     -> enable or disable quick action buttons",
    "status               -> print current production metrics",
    "help                 -> show this reference",
]

BUY_TARGETS = {
    "autoclipper": "buy_autoclipper",
    "autoclippers": "buy_autoclipper",
    "factory": "buy_factory",
    "factories": "buy_factory",
    "wire": "buy_wire",
    "wires": "buy_wire",
}

BUTTON_STATES = {"on": True, "enable": True, "off": False, "disable": False}

COUNT_PATTERN = re.compile(r"\d+", re.ASCII)
DECIMAL_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)", re.ASCII)


class CommandInterpreter:
    """Parses command lines, dispatches to the engine and reports via the sink."""

    def __init__(
        self,
        engine: EconomyEngine,
        sink: NotificationSink,
        renderer: Optional[EventRenderer] = None,
        autocompleter: Optional[Autocompleter] = None,
    ):
        self.engine = engine
        self.sink = sink
        self.renderer = renderer or EventRenderer(sink, engine.config.pricing)
        self.autocompleter = autocompleter or Autocompleter()
        self.history = CommandHistory()
        self.buttons_enabled = True
        self._in_command = False

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _notify(self, channel: str, message: str, severity: Optional[Severity] = None) -> None:
        self.sink.notify(channel, message, severity, self._in_command)

    def _fail(self, message: str, channel: str = "SYSTEM") -> ActionResult:
        self._notify(channel, message, Severity.WARNING)
        return ActionResult(success=False)

    def _publish(self, result: ActionResult) -> ActionResult:
        self.renderer.publish(result.events, force_visible=self._in_command)
        return result

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self, raw: str) -> Optional[ActionResult]:
        """
        Run one command line.

        Args:
            raw: Text as typed by the operator

        Returns:
            ActionResult, or None for blank input
        """
        trimmed = raw.strip()
        if not trimmed:
            return None

        self._in_command = True
        try:
            self.sink.notify("OPERATOR", trimmed, None, True)
            self.history.push(trimmed)

            tokens = trimmed.lower().split()
            cmd, rest = tokens[0], tokens[1:]
            logger.debug("dispatch %s %s", cmd, rest)
            return self._dispatch(cmd, rest)
        finally:
            self._in_command = False

    def _dispatch(self, cmd: str, rest: List[str]) -> ActionResult:
        if cmd == "help":
            self._notify("HELP", "\n".join(HELP_LINES))
            return ActionResult(success=True)
        if cmd == "fabricate":
            return self._publish(self.engine.manual_fabricate())
        if cmd == "buy":
            return self._handle_buy(rest)
        if cmd == "set":
            return self._handle_set(rest)
        if cmd == "buttons":
            return self._handle_buttons(rest[0] if rest else "")
        if cmd == "launch":
            if rest == ["marketing"]:
                return self._publish(self.engine.launch_marketing())
            return self._fail("Unknown launch target.")
        if cmd == "optimize":
            return self._publish(self.engine.optimize())
        if cmd == "status":
            return self._publish(self.engine.status())
        return self._fail(f"Command '{cmd}' not recognized. Type help for instructions.")

    def _handle_buy(self, args: List[str]) -> ActionResult:
        if not args:
            return self._fail("Usage: buy <autoclipper|factory|wire> [count]")

        target = args[0]
        count = 1
        if len(args) > 1:
            if not COUNT_PATTERN.fullmatch(args[1]):
                return self._fail("Quantity must be a whole number.")
            count = int(args[1])
            if count <= 0:
                return self._fail("Quantity must be positive.")

        action = BUY_TARGETS.get(target)
        if action is None:
            return self._fail("Unknown purchase target.")
        return self._publish(getattr(self.engine, action)(count))

    def _handle_set(self, args: List[str]) -> ActionResult:
        if len(args) < 2 or args[0] != "price":
            return self._fail("Usage: set price <value>")
        if not DECIMAL_PATTERN.fullmatch(args[1]):
            return self._fail("Invalid price input.", channel="MARKET")
        return self._publish(self.engine.set_price(float(args[1])))

    def _handle_buttons(self, arg: str) -> ActionResult:
        value = BUTTON_STATES.get(arg)
        if value is None:
            return self._fail("Usage: buttons <on|off>. Accepts 'on' or 'off'.")
        return self.set_buttons_enabled(value)

    def set_buttons_enabled(self, value: bool) -> ActionResult:
        """Toggle the quick-action buttons (presentation state only)."""
        label = "enabled" if value else "disabled"
        if self.buttons_enabled == value:
            return self._fail(f"Quick actions already {label}.")
        self.buttons_enabled = value
        self._notify(
            "SYSTEM",
            f"Quick action buttons {label}.",
            Severity.SUCCESS if value else None,
        )
        return ActionResult(success=True)

    # ------------------------------------------------------------------
    # Input helpers
    # ------------------------------------------------------------------

    def autocomplete(self, raw: str) -> str:
        """Complete ``raw``; ambiguous input lists the options instead."""
        completion: Completion = self.autocompleter.complete(raw)
        if completion.options:
            self.sink.notify("SYSTEM", f"Options: {', '.join(completion.options)}")
        return completion.text

    def history_older(self) -> str:
        return self.history.older()

    def history_newer(self) -> str:
        return self.history.newer()

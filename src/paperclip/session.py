"""Session facade - one engine, one interpreter, one notification sink."""

import logging
from typing import List, Optional

from .actions import QuickAction, available_actions
from .config.loader import load_config
from .config.schema import Config
from .engine.economy import EconomyEngine
from .engine.events import ActionResult, TickReport
from .engine.randomness import RandomSource
from .engine.state import StateView
from .interpreter.commands import CommandInterpreter
from .notify.renderer import EventRenderer
from .notify.sink import NotificationSink, RecordingSink

logger = logging.getLogger(__name__)

BOOT_MESSAGES = [
    "Boot sequence initiated.",
    "Type `help` for available commands. Manual fabrication recommended to begin revenue stream.",
]


class Session:
    """A single in-memory game session.

    Drivers (the CLI, the headless runner, tests) call ``tick()`` on their own
    cadence and feed text to ``execute()``; both run to completion.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        sink: Optional[NotificationSink] = None,
        rng: Optional[RandomSource] = None,
    ):
        """
        Initialize a session.

        Args:
            config: Session configuration (defaults to the packaged defaults)
            sink: Where notifications go (defaults to an in-memory RecordingSink)
            rng: Noise source for the engine (defaults to a seeded numpy Generator)
        """
        self.config = config or load_config()
        self.sink = sink if sink is not None else RecordingSink()
        self.engine = EconomyEngine(self.config, rng=rng)
        self.renderer = EventRenderer(self.sink, self.config.pricing)
        self.interpreter = CommandInterpreter(self.engine, self.sink, self.renderer)

    def boot(self) -> None:
        for message in BOOT_MESSAGES:
            self.sink.notify("SYSTEM", message)

    def tick(self) -> TickReport:
        report = self.engine.tick()
        self.renderer.publish(report.events)
        return report

    def run_ticks(self, count: int) -> List[TickReport]:
        return [self.tick() for _ in range(count)]

    def execute(self, raw: str) -> Optional[ActionResult]:
        return self.interpreter.execute(raw)

    def autocomplete(self, raw: str) -> str:
        return self.interpreter.autocomplete(raw)

    def history_older(self) -> str:
        return self.interpreter.history_older()

    def history_newer(self) -> str:
        return self.interpreter.history_newer()

    def view(self) -> StateView:
        return self.engine.view()

    def quick_actions(self) -> List[QuickAction]:
        return available_actions(self.engine.view(), self.interpreter.buttons_enabled)

    def elapsed_seconds(self) -> float:
        return self.engine.state.seconds_elapsed

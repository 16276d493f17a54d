"""Simulation runner - drive a session headlessly for a fixed number of ticks.

Key Features:
- Optional command script keyed by tick ({tick: [command, ...]})
- One StateView snapshot per tick, starting with the initial state
- Every notification captured in memory
- Invariant checks on every snapshot and transition
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import yaml

from ..config.schema import Config
from ..engine.events import TickReport
from ..engine.randomness import RandomSource, make_rng
from ..engine.state import StateView
from ..notify.sink import FanoutSink, LoggingSink, Notification, RecordingSink
from ..session import Session
from ..validation.sanity_checks import InvariantChecker

logger = logging.getLogger(__name__)

Script = Mapping[int, Sequence[str]]


@dataclass
class SimulationResult:
    """Complete simulation result."""
    config: Config
    states: List[StateView]
    reports: List[TickReport]
    notifications: List[Notification]
    final_metrics: Dict[str, Any]
    invariant_violations: List[str] = field(default_factory=list)


def load_script(path: Union[str, Path]) -> Dict[int, List[str]]:
    """
    Load a command script from YAML.

    The file maps tick numbers to a command or a list of commands::

        0: [fabricate, fabricate, fabricate]
        5: buy autoclipper
        120: set price 0.30

    Args:
        path: Script file

    Returns:
        Dict of tick -> commands
    """
    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    script: Dict[int, List[str]] = {}
    for tick, commands in data.items():
        if commands is None:
            logger.warning("Script entry for tick %s has no commands", tick)
            commands = []
        elif isinstance(commands, str):
            commands = [commands]
        script[int(tick)] = [str(c) for c in commands]
    return script


class SessionRunner:
    """Run a session for a fixed number of ticks."""

    def __init__(self, config: Config):
        """
        Initialize simulation runner.

        Args:
            config: Session configuration
        """
        self.config = config
        self.checker = InvariantChecker(config)

    def run(
        self,
        ticks: int,
        script: Optional[Script] = None,
        random_seed: Optional[int] = None,
        rng: Optional[RandomSource] = None,
    ) -> SimulationResult:
        """
        Run the simulation.

        Args:
            ticks: Number of ticks to simulate
            script: Commands to execute, keyed by the tick count at which they
                run (0 = before the first tick)
            random_seed: Seed for the default generator (defaults to config value)
            rng: Explicit noise source (overrides ``random_seed``)

        Returns:
            Simulation result
        """
        if ticks < 0:
            raise ValueError(f"ticks must be non-negative, got {ticks}")

        script = dict(script or {})
        late = sorted(t for t in script if t >= ticks or t < 0)
        if late:
            logger.warning("Ignoring script entries outside [0, %d): %s", ticks, late)

        if rng is None:
            seed = random_seed if random_seed is not None else self.config.session.random_seed
            rng = make_rng(seed)

        sink = RecordingSink()
        session = Session(self.config, sink=FanoutSink(sink, LoggingSink()), rng=rng)
        session.boot()

        logger.info("Starting run: %d ticks, config %s", ticks, self.config.compute_hash())

        states = [session.view()]
        reports: List[TickReport] = []
        violations: List[str] = []

        for step in range(ticks):
            for command in script.get(step, []):
                session.execute(command)

            reports.append(session.tick())
            view = session.view()

            warnings = self.checker.check_state(view) + self.checker.check_transition(states[-1], view)
            for warning in warnings:
                logger.warning("Invariant violation: %s", warning.message)
                violations.append(warning.message)
            ok, message = session.engine.state.validate_non_negative()
            if not ok:
                logger.warning("Invariant violation: %s", message)
                violations.append(message)
            states.append(view)

        final = states[-1]
        final_metrics = {
            'ticks': final.tick,
            'clips_made': final.clips_made,
            'total_sold': final.total_sold,
            'inventory': final.inventory,
            'funds': final.funds,
            'wire': final.wire,
            'autoclippers': final.autoclippers,
            'factories': final.factories,
            'marketing_level': final.marketing_level,
            'trust': final.trust,
            'price_per_clip': final.price_per_clip,
            'revenue': sum(r.revenue for r in reports),
        }

        logger.info(
            "Run finished: sold=%d funds=%.2f violations=%d",
            final.total_sold, final.funds, len(violations),
        )

        return SimulationResult(
            config=self.config,
            states=states,
            reports=reports,
            notifications=list(sink.notifications),
            final_metrics=final_metrics,
            invariant_violations=violations,
        )

"""Quick action definitions for presentation layers.

Each definition is plain data: predicates read a StateView snapshot, never the
engine, so a UI can decide what to show without reaching into game rules.
"""

from dataclasses import dataclass
from typing import Callable, List

from .engine.state import StateView

AUTOCLIPPER_ACTION_CLIPS = 5


@dataclass(frozen=True)
class ActionDef:
    """A button a presentation layer may surface."""
    id: str
    label: str
    command: str
    unlock: Callable[[StateView], bool]
    enabled: Callable[[StateView], bool]


@dataclass(frozen=True)
class QuickAction:
    """A visible action with its current enablement."""
    id: str
    label: str
    command: str
    enabled: bool


ACTION_DEFS = (
    ActionDef(
        id="fabricate",
        label="Fabricate Clip",
        command="fabricate",
        unlock=lambda view: True,
        enabled=lambda view: view.can_fabricate,
    ),
    ActionDef(
        id="buy-autoclipper",
        label="Deploy Autoclipper",
        command="buy autoclipper",
        unlock=lambda view: view.clips_made >= AUTOCLIPPER_ACTION_CLIPS,
        enabled=lambda view: view.can_buy_autoclipper,
    ),
    ActionDef(
        id="buy-factory",
        label="Construct Factory",
        command="buy factory",
        unlock=lambda view: view.factory_unlocked,
        enabled=lambda view: view.can_buy_factory,
    ),
    ActionDef(
        id="buy-wire",
        label="Procure Wire",
        command="buy wire",
        unlock=lambda view: True,
        enabled=lambda view: view.can_buy_wire,
    ),
    ActionDef(
        id="launch-marketing",
        label="Launch Marketing",
        command="launch marketing",
        unlock=lambda view: view.marketing_unlocked,
        enabled=lambda view: view.can_launch_marketing,
    ),
    ActionDef(
        id="optimize",
        label="Calibrate Systems",
        command="optimize",
        unlock=lambda view: view.optimization_unlocked,
        enabled=lambda view: view.can_optimize,
    ),
)


def available_actions(view: StateView, buttons_enabled: bool = True, defs=ACTION_DEFS) -> List[QuickAction]:
    """
    Actions unlocked in ``view``, with enablement.

    Args:
        view: State snapshot
        buttons_enabled: Global quick-action switch (``buttons on|off``)
        defs: Action definitions to evaluate

    Returns:
        Unlocked actions in definition order
    """
    return [
        QuickAction(
            id=d.id,
            label=d.label,
            command=d.command,
            enabled=buttons_enabled and d.enabled(view),
        )
        for d in defs
        if d.unlock(view)
    ]

"""Economy engine, state and events."""

from .economy import EconomyEngine
from .events import ActionResult, PurchaseItem, TickReport
from .randomness import MidpointRandom, make_rng
from .state import SimulationState, StateView, UnlockFlag, UnlockFlags

__all__ = [
    "ActionResult",
    "EconomyEngine",
    "MidpointRandom",
    "PurchaseItem",
    "SimulationState",
    "StateView",
    "TickReport",
    "UnlockFlag",
    "UnlockFlags",
    "make_rng",
]

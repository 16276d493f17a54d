"""Typed engine events.

The engine reports what happened as events; turning them into log lines is the
renderer's job (see ``paperclip.notify.renderer``).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from .state import StateView, UnlockFlag


class PurchaseItem(str, Enum):
    """Things bought with ``buy <item> [count]``."""
    AUTOCLIPPER = "autoclipper"
    FACTORY = "factory"
    WIRE = "wire"


class PriceMode(str, Enum):
    ADJUST = "adjust"
    SET = "set"


class PriceRejection(str, Enum):
    INVALID = "invalid"
    OUT_OF_BOUNDS = "out_of_bounds"


@dataclass(frozen=True)
class Event:
    """Base class for engine events."""


@dataclass(frozen=True)
class FabricationCompleted(Event):
    produced: int
    inventory: int


@dataclass(frozen=True)
class FabricationFailed(Event):
    pass


@dataclass(frozen=True)
class PurchaseCompleted(Event):
    """A purchase that bought at least one unit."""
    item: PurchaseItem
    requested: int
    purchased: int
    total_cost: float
    owned: int  # units (or wire) held after the purchase
    wire_added: int = 0

    @property
    def partial(self) -> bool:
        return self.purchased < self.requested


@dataclass(frozen=True)
class PurchaseRejected(Event):
    item: PurchaseItem
    requested: int


@dataclass(frozen=True)
class QuantityRejected(Event):
    """A purchase count that is not a finite number; nothing was bought."""
    item: PurchaseItem
    value: object


@dataclass(frozen=True)
class MarketingLaunched(Event):
    level: int
    cost: float


@dataclass(frozen=True)
class MarketingRejected(Event):
    pass


@dataclass(frozen=True)
class OptimizationApplied(Event):
    manual_efficiency: int
    trust: int
    cost: float


@dataclass(frozen=True)
class OptimizationRejected(Event):
    pass


@dataclass(frozen=True)
class PriceChanged(Event):
    price: float
    mode: PriceMode


@dataclass(frozen=True)
class PriceRejected(Event):
    value: float
    mode: PriceMode
    reason: PriceRejection


@dataclass(frozen=True)
class FeatureUnlocked(Event):
    flag: UnlockFlag
    trust_granted: int = 0


@dataclass(frozen=True)
class WireLow(Event):
    remaining: int


@dataclass(frozen=True)
class Heartbeat(Event):
    inventory: int
    funds: float
    demand: float


@dataclass(frozen=True)
class AutomationSummary(Event):
    produced: int


@dataclass(frozen=True)
class SalesSummary(Event):
    units: int
    price: float
    revenue: float


@dataclass(frozen=True)
class StatusReport(Event):
    snapshot: StateView


@dataclass
class ActionResult:
    """Outcome of one player action."""
    success: bool
    events: List[Event] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        return any(isinstance(e, PurchaseCompleted) and e.partial for e in self.events)


@dataclass
class TickReport:
    """What one tick did."""
    tick: int
    produced: int = 0
    sold: int = 0
    revenue: float = 0.0
    demand: float = 0.0
    events: List[Event] = field(default_factory=list)

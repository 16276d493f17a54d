"""Simulation state - the single mutable aggregate owned by the economy engine."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from ..config.schema import Config


class UnlockFlag(str, Enum):
    """One-way milestone flags."""
    MARKETING = "marketing"
    FACTORY = "factory"
    OPTIMIZATION = "optimization"
    TRUST_MILESTONE = "trust_milestone"


@dataclass
class UnlockFlags:
    """Unlock flags plus the low-wire alert latch.

    The four unlock flags only ever go False -> True. ``wire_warning_shown``
    is a UI latch, reset when wire is purchased.
    """
    marketing_unlocked: bool = False
    factory_unlocked: bool = False
    optimization_unlocked: bool = False
    trust_granted: bool = False
    wire_warning_shown: bool = False

    def is_set(self, flag: UnlockFlag) -> bool:
        return getattr(self, _FLAG_FIELDS[flag])

    def set(self, flag: UnlockFlag) -> None:
        setattr(self, _FLAG_FIELDS[flag], True)


_FLAG_FIELDS = {
    UnlockFlag.MARKETING: "marketing_unlocked",
    UnlockFlag.FACTORY: "factory_unlocked",
    UnlockFlag.OPTIMIZATION: "optimization_unlocked",
    UnlockFlag.TRUST_MILESTONE: "trust_granted",
}


@dataclass
class SimulationState:
    """Simulation state at a point in time.

    Counters:
    - seconds_elapsed, tick_count, clips_made, total_sold only increase
    - inventory and wire never go negative

    Carry accumulators:
    - production_carry: fractional clips left over after flooring automation output
    - sell_carry: fractional (or backlogged) sales left over after flooring demand
    """
    # Counters
    seconds_elapsed: float = 0.0
    tick_count: int = 0
    clips_made: int = 0
    inventory: int = 0
    total_sold: int = 0

    # Economy
    funds: float = 28.0
    price_per_clip: float = 0.25
    demand_index: float = 0.0

    # Resource
    wire: int = 650
    wire_per_purchase: int = 650
    wire_cost: float = 18.0

    # Capacity
    autoclippers: int = 0
    factories: int = 0
    clipper_cost: float = 18.0
    factory_cost: float = 420.0
    clipper_rate: float = 1.8
    factory_rate: float = 55.0

    # Progression
    marketing_level: int = 0
    marketing_cost: float = 140.0
    optimize_cost: float = 160.0
    manual_efficiency: int = 1
    trust: int = 0
    reputation: float = 0.0

    flags: UnlockFlags = field(default_factory=UnlockFlags)

    production_carry: float = 0.0
    sell_carry: float = 0.0

    @classmethod
    def from_config(cls, config: Config) -> 'SimulationState':
        """Build the session's starting state."""
        initial = config.initial
        return cls(
            funds=initial.funds,
            price_per_clip=initial.price,
            wire=initial.wire,
            wire_per_purchase=initial.wire_per_purchase,
            wire_cost=initial.wire_cost,
            clipper_cost=initial.clipper_cost,
            factory_cost=initial.factory_cost,
            marketing_cost=initial.marketing_cost,
            optimize_cost=initial.optimize_cost,
            manual_efficiency=initial.manual_efficiency,
            clipper_rate=initial.clipper_rate,
            factory_rate=initial.factory_rate,
        )

    @property
    def automation_rate(self) -> float:
        """Combined clips per tick from all automation."""
        return self.autoclippers * self.clipper_rate + self.factories * self.factory_rate

    def validate_non_negative(self) -> tuple[bool, Optional[str]]:
        """Validate all stock buckets are non-negative."""
        buckets = [
            ('inventory', self.inventory),
            ('wire', self.wire),
            ('production_carry', self.production_carry),
            ('sell_carry', self.sell_carry),
            ('demand_index', self.demand_index),
        ]
        for name, value in buckets:
            if value < 0:
                return False, f"Negative bucket at tick {self.tick_count}: {name}={value}"
        return True, None


@dataclass(frozen=True)
class StateView:
    """Read-only snapshot of engine state plus affordability.

    Presentation code and analysis tooling read this, never the live state.
    """
    tick: int
    seconds_elapsed: float
    clips_made: int
    inventory: int
    total_sold: int
    funds: float
    price_per_clip: float
    demand_index: float
    wire: int
    wire_per_purchase: int
    wire_cost: float
    autoclippers: int
    factories: int
    clipper_cost: float
    factory_cost: float
    clipper_rate: float
    factory_rate: float
    marketing_level: int
    marketing_cost: float
    optimize_cost: float
    manual_efficiency: int
    trust: int
    reputation: float
    marketing_unlocked: bool
    factory_unlocked: bool
    optimization_unlocked: bool
    trust_granted: bool
    can_fabricate: bool
    can_buy_autoclipper: bool
    can_buy_factory: bool
    can_buy_wire: bool
    can_launch_marketing: bool
    can_optimize: bool

    def to_record(self) -> Dict[str, Any]:
        """Flatten to a plain dict (one row of a trajectory table)."""
        return asdict(self)

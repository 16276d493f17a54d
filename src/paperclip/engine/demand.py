"""Demand model - how many clips the market absorbs per tick.

Key Concepts:
- Demand is recomputed from scratch every tick; it is never accumulated
- Boosts multiply: marketing, trust and (capped) reputation
- Penalties subtract: linear price penalty, extra premium penalty above the
  threshold, and a superlinear inventory glut penalty
- A small uniform noise term is the only randomness in the engine
"""

from dataclasses import dataclass

from ..config.schema import Demand
from .randomness import RandomSource


@dataclass(frozen=True)
class DemandBreakdown:
    """Intermediate terms of one demand computation."""
    marketing_boost: float
    trust_boost: float
    reputation_boost: float
    base: float
    price_penalty: float
    inventory_penalty: float
    noise: float
    demand: float


def compute_demand(
    marketing_level: int,
    trust: int,
    reputation: float,
    price: float,
    inventory: int,
    params: Demand,
    noise: float = 0.0,
) -> DemandBreakdown:
    """
    Evaluate the demand formula.

    Args:
        marketing_level: Campaigns launched
        trust: Trust points
        reputation: Accumulated reputation
        price: Current price per clip
        inventory: Unsold clips
        params: Demand coefficients
        noise: Additive noise already drawn by the caller

    Returns:
        DemandBreakdown with the clamped demand index
    """
    marketing_boost = 1 + marketing_level * params.marketing_boost
    trust_boost = 1 + trust * params.trust_boost
    reputation_boost = 1 + min(reputation / params.reputation_scale, params.reputation_cap)
    base = params.base * marketing_boost * trust_boost * reputation_boost

    price_penalty = (
        (price - params.price_anchor) * params.price_slope +
        max(price - params.premium_threshold, 0.0) * params.premium_slope
    )
    inventory_penalty = (inventory / params.inventory_scale) ** params.inventory_exponent

    demand = max(0.0, base - price_penalty - inventory_penalty + noise)

    return DemandBreakdown(
        marketing_boost=marketing_boost,
        trust_boost=trust_boost,
        reputation_boost=reputation_boost,
        base=base,
        price_penalty=price_penalty,
        inventory_penalty=inventory_penalty,
        noise=noise,
        demand=demand,
    )


class DemandModel:
    """Demand formula bound to its coefficients and a noise source."""

    def __init__(self, params: Demand, rng: RandomSource):
        self.params = params
        self.rng = rng

    def draw_noise(self) -> float:
        amplitude = self.params.noise_amplitude
        if amplitude <= 0:
            return 0.0
        return float(self.rng.uniform(-amplitude, amplitude))

    def compute(self, state) -> DemandBreakdown:
        """Recompute demand for ``state`` (anything with the state's fields)."""
        return compute_demand(
            marketing_level=state.marketing_level,
            trust=state.trust,
            reputation=state.reputation,
            price=state.price_per_clip,
            inventory=state.inventory,
            params=self.params,
            noise=self.draw_noise(),
        )

    def units_demanded(self, demand_index: float) -> float:
        """Clips the market wants this tick (before carry)."""
        return demand_index * self.params.sales_multiplier

"""Pydantic schema for configuration validation."""

import hashlib
import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator


class Session(BaseModel):
    """Tick cadence and notification throttling."""
    tick_seconds: float = Field(default=1.0, gt=0, description="Simulated seconds per tick")
    random_seed: Optional[int] = Field(default=None, description="Seed for the demand/jitter generator")
    heartbeat_every: int = Field(default=15, gt=0, description="Ticks between heartbeat notifications")
    automation_summary_every: int = Field(default=8, gt=0, description="Ticks between automation summaries")
    sales_summary_every: int = Field(default=10, gt=0, description="Ticks between sales summaries")
    low_wire_threshold: int = Field(default=40, ge=0, description="Wire level that triggers the supply warning")
    max_catchup_ticks: int = Field(
        default=60, gt=0,
        description="Maximum ticks the interactive driver runs to catch up after idle time"
    )


class InitialState(BaseModel):
    """Values the simulation starts with."""
    funds: float = Field(default=28.0, description="Starting funds (credits)")
    price: float = Field(default=0.25, gt=0, description="Starting price per clip")
    wire: int = Field(default=650, ge=0, description="Starting wire stock")
    wire_per_purchase: int = Field(default=650, gt=0, description="Wire added per spool purchase")
    wire_cost: float = Field(default=18.0, gt=0, description="Starting cost of a wire spool")
    clipper_cost: float = Field(default=18.0, gt=0, description="Starting autoclipper cost")
    factory_cost: float = Field(default=420.0, gt=0, description="Starting factory cost")
    marketing_cost: float = Field(default=140.0, gt=0, description="Starting marketing campaign cost")
    optimize_cost: float = Field(default=160.0, gt=0, description="Starting optimization cost")
    manual_efficiency: int = Field(default=1, ge=1, description="Clips per manual fabrication")
    clipper_rate: float = Field(default=1.8, ge=0, description="Clips per tick per autoclipper")
    factory_rate: float = Field(default=55.0, ge=0, description="Clips per tick per factory")


class Pricing(BaseModel):
    """Price bounds enforced on every price mutation."""
    min_price: float = Field(default=0.05, gt=0, description="Lowest accepted price")
    max_price: float = Field(default=2.50, gt=0, description="Highest accepted price")

    @model_validator(mode='after')
    def validate_bounds(self):
        """Ensure the bound is a non-empty interval."""
        if self.min_price >= self.max_price:
            raise ValueError(
                f"min_price must be less than max_price, got "
                f"{self.min_price:.2f} >= {self.max_price:.2f}"
            )
        return self


class Costs(BaseModel):
    """Geometric cost growth per purchase."""
    clipper_growth: float = Field(default=0.14, gt=0, description="Autoclipper cost growth per unit")
    factory_growth: float = Field(default=0.18, gt=0, description="Factory cost growth per unit")
    wire_growth: float = Field(default=0.06, gt=0, description="Wire cost growth per spool")
    wire_jitter: float = Field(default=1.4, ge=0, description="Upper bound of random wire cost jitter")
    marketing_growth: float = Field(default=0.42, gt=0, description="Marketing cost growth per campaign")
    optimize_growth: float = Field(default=0.55, gt=0, description="Optimization cost growth per calibration")


class Optimization(BaseModel):
    """Effects of one optimization."""
    efficiency_gain: int = Field(default=1, ge=1, description="Manual efficiency added")
    clipper_rate_multiplier: float = Field(default=1.08, ge=1, description="Autoclipper rate multiplier")
    factory_rate_multiplier: float = Field(default=1.04, ge=1, description="Factory rate multiplier")
    trust_gain: int = Field(default=1, ge=0, description="Trust added")


class Demand(BaseModel):
    """Demand model coefficients.

    demand = max(0, base * boosts - price_penalty - inventory_penalty + noise)
    """
    base: float = Field(default=1.45, ge=0, description="Base demand before boosts")
    marketing_boost: float = Field(default=0.35, ge=0, description="Boost per marketing level")
    trust_boost: float = Field(default=0.12, ge=0, description="Boost per trust point")
    reputation_scale: float = Field(default=1500.0, gt=0, description="Reputation needed for +100% boost")
    reputation_cap: float = Field(default=0.6, ge=0, description="Maximum reputation boost")
    price_anchor: float = Field(default=0.25, description="Price with zero linear penalty")
    price_slope: float = Field(default=6.0, ge=0, description="Linear price penalty slope")
    premium_threshold: float = Field(default=0.5, description="Price above which the premium penalty applies")
    premium_slope: float = Field(default=8.0, ge=0, description="Extra penalty slope above the threshold")
    inventory_scale: float = Field(default=4200.0, gt=0, description="Inventory glut normalizer")
    inventory_exponent: float = Field(default=1.15, gt=0, description="Inventory glut exponent")
    noise_amplitude: float = Field(default=0.06, ge=0, description="Half-width of uniform demand noise")
    sales_multiplier: float = Field(default=8.0, ge=0, description="Units sold per demand point per tick")
    reputation_per_unit: float = Field(default=0.0025, ge=0, description="Reputation gained per clip produced")


class Unlocks(BaseModel):
    """Milestone thresholds for one-way unlocks."""
    marketing_sold: int = Field(default=120, ge=0, description="Clips sold to unlock marketing")
    factory_sold: int = Field(default=360, ge=0, description="Clips sold to unlock factories")
    factory_autoclippers: int = Field(default=4, ge=0, description="Autoclippers owned to unlock factories")
    optimization_sold: int = Field(default=520, ge=0, description="Clips sold to unlock optimization")
    trust_milestone_sold: int = Field(default=1200, ge=0, description="Clips sold for the trust milestone")
    milestone_trust: int = Field(default=1, ge=0, description="Trust granted at the milestone")
    factory_min_autoclippers: int = Field(default=3, ge=0, description="Autoclippers required to buy a factory")


class Config(BaseModel):
    """Complete configuration for a paperclip session."""
    session: Session = Field(default_factory=Session)
    initial: InitialState = Field(default_factory=InitialState)
    pricing: Pricing = Field(default_factory=Pricing)
    costs: Costs = Field(default_factory=Costs)
    optimization: Optimization = Field(default_factory=Optimization)
    demand: Demand = Field(default_factory=Demand)
    unlocks: Unlocks = Field(default_factory=Unlocks)

    @model_validator(mode='after')
    def validate_initial_price(self):
        """Starting price must already respect the price bound."""
        if not self.pricing.min_price <= self.initial.price <= self.pricing.max_price:
            raise ValueError(
                f"initial.price {self.initial.price:.2f} outside "
                f"[{self.pricing.min_price:.2f}, {self.pricing.max_price:.2f}]"
            )
        return self

    def compute_hash(self) -> str:
        """Compute config hash for reproducibility."""
        config_dict = self.model_dump()
        config_str = json.dumps(config_dict, sort_keys=True)
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create config from dictionary."""
        return cls(**(data or {}))

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return self.model_dump()

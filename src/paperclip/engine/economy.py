"""Economy engine - tick-driven production, sales, demand, pricing and unlocks.

Key Concepts:
- One engine instance owns one SimulationState; there is no global game
- tick() runs fixed stages in order: time, automation, sales, demand,
  unlocks, supply warning, periodic summaries
- Every player action validates first and mutates second, so a rejected
  action leaves state untouched
- Actions return ActionResult / TickReport carrying typed events; nothing in
  here formats text or raises on player input
"""

import logging
import math
from typing import Callable, List, Optional

from ..config.schema import Config
from .costs import bump_cost, round_half_up
from .demand import DemandModel
from .events import (
    ActionResult,
    AutomationSummary,
    Event,
    FabricationCompleted,
    FabricationFailed,
    FeatureUnlocked,
    Heartbeat,
    MarketingLaunched,
    MarketingRejected,
    OptimizationApplied,
    OptimizationRejected,
    PriceChanged,
    PriceMode,
    PriceRejected,
    PriceRejection,
    PurchaseCompleted,
    PurchaseItem,
    PurchaseRejected,
    QuantityRejected,
    SalesSummary,
    StatusReport,
    TickReport,
    WireLow,
)
from .randomness import RandomSource, make_rng
from .state import SimulationState, StateView, UnlockFlag

logger = logging.getLogger(__name__)

# Float slack when comparing a computed price against its bounds.
PRICE_EPSILON = 1e-9


class EconomyEngine:
    """Paperclip economy with fractional carry accounting."""

    def __init__(self, config: Config, rng: Optional[RandomSource] = None):
        """
        Initialize the economy engine.

        Args:
            config: Session configuration
            rng: Source of uniform noise (defaults to a numpy Generator seeded
                from ``config.session.random_seed``)
        """
        self.config = config
        self.rng = rng if rng is not None else make_rng(config.session.random_seed)
        self.state = SimulationState.from_config(config)
        self.demand_model = DemandModel(config.demand, self.rng)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self) -> TickReport:
        """Advance the simulation by one fixed step."""
        session = self.config.session
        state = self.state

        state.seconds_elapsed += session.tick_seconds
        state.tick_count += 1
        report = TickReport(tick=state.tick_count)

        self._apply_automation(report)
        self._resolve_sales(report)
        self._update_demand(report)
        report.events.extend(self._check_unlocks())

        if state.wire < session.low_wire_threshold and not state.flags.wire_warning_shown:
            state.flags.wire_warning_shown = True
            report.events.append(WireLow(remaining=state.wire))

        if state.tick_count % session.heartbeat_every == 0:
            report.events.append(Heartbeat(
                inventory=state.inventory,
                funds=state.funds,
                demand=state.demand_index,
            ))

        logger.debug(
            "tick=%d produced=%d sold=%d demand=%.3f funds=%.2f wire=%d",
            report.tick, report.produced, report.sold, report.demand,
            state.funds, state.wire,
        )
        return report

    def _apply_automation(self, report: TickReport) -> None:
        rate = self.state.automation_rate
        if rate <= 0:
            return
        produced = self.produce(rate)
        report.produced = produced
        if produced > 0 and self.state.tick_count % self.config.session.automation_summary_every == 0:
            report.events.append(AutomationSummary(produced=produced))

    def _resolve_sales(self, report: TickReport) -> None:
        state = self.state
        target_units = self.demand_model.units_demanded(state.demand_index) + state.sell_carry
        units = min(state.inventory, math.floor(target_units))
        # Unmet demand stays in the carry when inventory runs short
        state.sell_carry = target_units - units

        if units <= 0:
            return

        revenue = units * state.price_per_clip
        state.inventory -= units
        state.total_sold += units
        state.funds += revenue
        report.sold = units
        report.revenue = revenue

        if state.tick_count % self.config.session.sales_summary_every == 0:
            report.events.append(SalesSummary(
                units=units,
                price=state.price_per_clip,
                revenue=revenue,
            ))

    def _update_demand(self, report: TickReport) -> None:
        breakdown = self.demand_model.compute(self.state)
        self.state.demand_index = breakdown.demand
        report.demand = breakdown.demand

    def _check_unlocks(self) -> List[Event]:
        state = self.state
        unlocks = self.config.unlocks
        events: List[Event] = []

        milestones = [
            (UnlockFlag.MARKETING, state.total_sold >= unlocks.marketing_sold),
            (
                UnlockFlag.FACTORY,
                state.autoclippers >= unlocks.factory_autoclippers and
                state.total_sold >= unlocks.factory_sold,
            ),
            (UnlockFlag.OPTIMIZATION, state.total_sold >= unlocks.optimization_sold),
            (UnlockFlag.TRUST_MILESTONE, state.total_sold >= unlocks.trust_milestone_sold),
        ]

        for flag, reached in milestones:
            if not reached or state.flags.is_set(flag):
                continue
            state.flags.set(flag)
            granted = 0
            if flag is UnlockFlag.TRUST_MILESTONE:
                granted = unlocks.milestone_trust
                state.trust += granted
            logger.info("Unlocked %s at tick %d (sold=%d)", flag.value, state.tick_count, state.total_sold)
            events.append(FeatureUnlocked(flag=flag, trust_granted=granted))

        return events

    # ------------------------------------------------------------------
    # Production
    # ------------------------------------------------------------------

    def produce(self, amount: float) -> int:
        """
        Turn wire into clips, carrying fractional progress between calls.

        Args:
            amount: Clips requested (may be fractional)

        Returns:
            Whole clips produced (0 when wire is exhausted or requested + carry < 1)
        """
        state = self.state
        if state.wire <= 0 or amount <= 0:
            return 0

        target = amount + state.production_carry
        producible = min(target, state.wire)
        produced = math.floor(producible)
        state.production_carry = producible - produced

        if produced <= 0:
            return 0

        state.wire -= produced
        state.inventory += produced
        state.clips_made += produced
        state.reputation += produced * self.config.demand.reputation_per_unit
        return produced

    def manual_fabricate(self) -> ActionResult:
        """Fabricate ``manual_efficiency`` clips by hand."""
        produced = self.produce(max(1, self.state.manual_efficiency))
        if produced <= 0:
            return ActionResult(success=False, events=[FabricationFailed()])
        return ActionResult(success=True, events=[
            FabricationCompleted(produced=produced, inventory=self.state.inventory)
        ])

    # ------------------------------------------------------------------
    # Affordability
    # ------------------------------------------------------------------

    def can_fabricate(self) -> bool:
        return self.state.wire > 0

    def can_buy_autoclipper(self) -> bool:
        return self.state.funds >= self.state.clipper_cost and self.state.wire > 0

    def can_buy_factory(self) -> bool:
        state = self.state
        return (
            state.flags.factory_unlocked and
            state.funds >= state.factory_cost and
            state.autoclippers >= self.config.unlocks.factory_min_autoclippers
        )

    def can_buy_wire(self) -> bool:
        return self.state.funds >= self.state.wire_cost

    def can_launch_marketing(self) -> bool:
        return self.state.flags.marketing_unlocked and self.state.funds >= self.state.marketing_cost

    def can_optimize(self) -> bool:
        return self.state.flags.optimization_unlocked and self.state.funds >= self.state.optimize_cost

    # ------------------------------------------------------------------
    # Purchases
    # ------------------------------------------------------------------

    def _repeat_purchase(
        self,
        item: PurchaseItem,
        count: int,
        can_buy: Callable[[], bool],
        buy_one: Callable[[], float],
        owned: Callable[[], int],
    ) -> ActionResult:
        """Buy up to ``count`` units while ``can_buy`` holds."""
        try:
            value = float(count)
        except (TypeError, ValueError):
            value = math.nan

        if not math.isfinite(value):
            return ActionResult(success=False, events=[QuantityRejected(item=item, value=count)])

        target = max(1, int(value))
        purchased = 0
        total_cost = 0.0
        wire_before = self.state.wire

        while purchased < target and can_buy():
            total_cost += buy_one()
            purchased += 1

        if purchased == 0:
            return ActionResult(success=False, events=[PurchaseRejected(item=item, requested=target)])

        return ActionResult(success=True, events=[PurchaseCompleted(
            item=item,
            requested=target,
            purchased=purchased,
            total_cost=total_cost,
            owned=owned(),
            wire_added=self.state.wire - wire_before if item is PurchaseItem.WIRE else 0,
        )])

    def buy_autoclipper(self, count: int = 1) -> ActionResult:
        """Buy up to ``count`` autoclippers."""
        state = self.state
        growth = self.config.costs.clipper_growth

        def buy_one() -> float:
            cost = state.clipper_cost
            state.funds -= cost
            state.autoclippers += 1
            state.clipper_cost = bump_cost(cost, growth)
            return cost

        return self._repeat_purchase(
            PurchaseItem.AUTOCLIPPER, count, self.can_buy_autoclipper, buy_one,
            lambda: state.autoclippers,
        )

    def buy_factory(self, count: int = 1) -> ActionResult:
        """Buy up to ``count`` factories."""
        state = self.state
        growth = self.config.costs.factory_growth

        def buy_one() -> float:
            cost = state.factory_cost
            state.funds -= cost
            state.factories += 1
            state.factory_cost = bump_cost(cost, growth)
            return cost

        return self._repeat_purchase(
            PurchaseItem.FACTORY, count, self.can_buy_factory, buy_one,
            lambda: state.factories,
        )

    def buy_wire(self, count: int = 1) -> ActionResult:
        """Buy up to ``count`` wire spools; the spool price drifts up with jitter."""
        state = self.state
        costs = self.config.costs

        def buy_one() -> float:
            cost = state.wire_cost
            state.funds -= cost
            state.wire += state.wire_per_purchase
            jitter = float(self.rng.uniform(0.0, costs.wire_jitter)) if costs.wire_jitter > 0 else 0.0
            state.wire_cost = bump_cost(cost + jitter, costs.wire_growth)
            return cost

        result = self._repeat_purchase(
            PurchaseItem.WIRE, count, self.can_buy_wire, buy_one,
            lambda: state.wire,
        )
        if result.success:
            state.flags.wire_warning_shown = False
        return result

    def launch_marketing(self) -> ActionResult:
        """Run one marketing campaign."""
        if not self.can_launch_marketing():
            return ActionResult(success=False, events=[MarketingRejected()])

        state = self.state
        cost = state.marketing_cost
        state.funds -= cost
        state.marketing_level += 1
        state.marketing_cost = bump_cost(cost, self.config.costs.marketing_growth)
        return ActionResult(success=True, events=[MarketingLaunched(level=state.marketing_level, cost=cost)])

    def optimize(self) -> ActionResult:
        """Calibrate systems: better manual efficiency, faster automation, +trust."""
        if not self.can_optimize():
            return ActionResult(success=False, events=[OptimizationRejected()])

        state = self.state
        opt = self.config.optimization
        cost = state.optimize_cost
        state.funds -= cost
        state.manual_efficiency += opt.efficiency_gain
        state.clipper_rate *= opt.clipper_rate_multiplier
        state.factory_rate *= opt.factory_rate_multiplier
        state.optimize_cost = bump_cost(cost, self.config.costs.optimize_growth)
        state.trust += opt.trust_gain
        return ActionResult(success=True, events=[OptimizationApplied(
            manual_efficiency=state.manual_efficiency,
            trust=state.trust,
            cost=cost,
        )])

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    def _apply_price(self, value, mode: PriceMode) -> ActionResult:
        try:
            value = float(value)
        except (TypeError, ValueError):
            value = math.nan

        if not math.isfinite(value):
            return ActionResult(success=False, events=[
                PriceRejected(value=value, mode=mode, reason=PriceRejection.INVALID)
            ])

        pricing = self.config.pricing
        if value < pricing.min_price - PRICE_EPSILON or value > pricing.max_price + PRICE_EPSILON:
            return ActionResult(success=False, events=[
                PriceRejected(value=value, mode=mode, reason=PriceRejection.OUT_OF_BOUNDS)
            ])

        self.state.price_per_clip = round_half_up(value, 2)
        return ActionResult(success=True, events=[PriceChanged(price=self.state.price_per_clip, mode=mode)])

    def adjust_price(self, delta: float) -> ActionResult:
        """Move the price by ``delta``."""
        try:
            target = self.state.price_per_clip + float(delta)
        except (TypeError, ValueError):
            target = math.nan
        return self._apply_price(target, PriceMode.ADJUST)

    def set_price(self, value: float) -> ActionResult:
        """Set an exact price."""
        return self._apply_price(value, PriceMode.SET)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    def status(self) -> ActionResult:
        """Snapshot for the status report; no mutation."""
        return ActionResult(success=True, events=[StatusReport(snapshot=self.view())])

    def view(self) -> StateView:
        """Frozen snapshot of the current state."""
        s = self.state
        return StateView(
            tick=s.tick_count,
            seconds_elapsed=s.seconds_elapsed,
            clips_made=s.clips_made,
            inventory=s.inventory,
            total_sold=s.total_sold,
            funds=s.funds,
            price_per_clip=s.price_per_clip,
            demand_index=s.demand_index,
            wire=s.wire,
            wire_per_purchase=s.wire_per_purchase,
            wire_cost=s.wire_cost,
            autoclippers=s.autoclippers,
            factories=s.factories,
            clipper_cost=s.clipper_cost,
            factory_cost=s.factory_cost,
            clipper_rate=s.clipper_rate,
            factory_rate=s.factory_rate,
            marketing_level=s.marketing_level,
            marketing_cost=s.marketing_cost,
            optimize_cost=s.optimize_cost,
            manual_efficiency=s.manual_efficiency,
            trust=s.trust,
            reputation=s.reputation,
            marketing_unlocked=s.flags.marketing_unlocked,
            factory_unlocked=s.flags.factory_unlocked,
            optimization_unlocked=s.flags.optimization_unlocked,
            trust_granted=s.flags.trust_granted,
            can_fabricate=self.can_fabricate(),
            can_buy_autoclipper=self.can_buy_autoclipper(),
            can_buy_factory=self.can_buy_factory(),
            can_buy_wire=self.can_buy_wire(),
            can_launch_marketing=self.can_launch_marketing(),
            can_optimize=self.can_optimize(),
        )

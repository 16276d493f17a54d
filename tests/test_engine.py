"""Unit tests for the economy engine.

These tests verify:
- Production carry accounting and wire conservation
- Sales carry and revenue
- Demand formula terms and non-negativity
- Step-by-step cost growth and partial purchases
- Price bounds, unlocks and periodic notifications
"""

import math

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from paperclip.config.schema import Config, Demand
from paperclip.engine.costs import bump_cost, round_half_up
from paperclip.engine.demand import DemandModel, compute_demand
from paperclip.engine.economy import EconomyEngine
from paperclip.engine.events import (
    AutomationSummary,
    FabricationCompleted,
    FabricationFailed,
    FeatureUnlocked,
    Heartbeat,
    MarketingLaunched,
    PriceRejected,
    PriceRejection,
    PurchaseCompleted,
    PurchaseItem,
    PurchaseRejected,
    QuantityRejected,
    SalesSummary,
    StatusReport,
    WireLow,
)
from paperclip.engine.randomness import MidpointRandom, make_rng
from paperclip.engine.state import UnlockFlag


@pytest.fixture
def engine():
    """Engine with zero demand noise and fixed wire jitter."""
    return EconomyEngine(Config(), rng=MidpointRandom())


class TestInitialState:
    """Session starts from the configured values."""

    def test_initial_values(self, engine):
        s = engine.state
        assert s.funds == 28
        assert s.price_per_clip == 0.25
        assert s.wire == 650
        assert s.wire_per_purchase == 650
        assert s.clipper_cost == 18
        assert s.factory_cost == 420
        assert s.marketing_cost == 140
        assert s.optimize_cost == 160
        assert s.manual_efficiency == 1
        assert s.clipper_rate == 1.8
        assert s.factory_rate == 55
        assert s.inventory == 0
        assert s.total_sold == 0
        assert not s.flags.marketing_unlocked
        assert not s.flags.trust_granted

    def test_engines_are_independent(self):
        """Two engines never share state."""
        a = EconomyEngine(Config(), rng=MidpointRandom())
        b = EconomyEngine(Config(), rng=MidpointRandom())
        a.manual_fabricate()
        assert a.state.inventory == 1
        assert b.state.inventory == 0

    def test_validate_non_negative(self, engine):
        ok, msg = engine.state.validate_non_negative()
        assert ok and msg is None
        engine.state.inventory = -1
        ok, msg = engine.state.validate_non_negative()
        assert not ok
        assert "inventory" in msg


class TestProduction:
    """Shared production routine and carry."""

    def test_fractional_request_carries(self, engine):
        assert engine.produce(1.8) == 1
        assert engine.state.production_carry == pytest.approx(0.8)
        assert engine.produce(1.8) == 2
        assert engine.state.production_carry == pytest.approx(0.6)

    def test_sub_unit_request_produces_nothing_but_keeps_progress(self, engine):
        assert engine.produce(0.4) == 0
        assert engine.state.production_carry == pytest.approx(0.4)
        assert engine.state.wire == 650
        assert engine.produce(0.7) == 1
        assert engine.state.production_carry == pytest.approx(0.1)

    def test_no_wire_or_no_request(self, engine):
        assert engine.produce(0) == 0
        assert engine.produce(-3) == 0
        engine.state.wire = 0
        assert engine.produce(5) == 0
        assert engine.state.production_carry == 0

    def test_conservation_when_wire_never_binds(self, engine):
        """Produced plus final carry equals the total requested."""
        rate, ticks = 1.8, 37
        start = engine.state.wire
        produced = sum(engine.produce(rate) for _ in range(ticks))
        assert produced == start - engine.state.wire
        assert produced + engine.state.production_carry == pytest.approx(rate * ticks)

    def test_conservation_when_wire_binds(self, engine):
        """Wire is never over-consumed and never lost."""
        engine.state.wire = 7
        produced = sum(engine.produce(1.3) for _ in range(20))
        assert produced == 7
        assert engine.state.wire == 0
        assert engine.state.inventory == 7
        assert engine.state.clips_made == 7

    def test_reputation_grows_with_production(self, engine):
        engine.produce(400)
        assert engine.state.reputation == pytest.approx(1.0)

    def test_manual_fabricate(self, engine):
        result = engine.manual_fabricate()
        assert result.success
        assert isinstance(result.events[0], FabricationCompleted)
        assert result.events[0].produced == 1
        assert engine.state.inventory == 1
        assert engine.state.wire == 649

    def test_manual_fabricate_uses_efficiency(self, engine):
        engine.state.manual_efficiency = 3
        engine.manual_fabricate()
        assert engine.state.inventory == 3

    def test_manual_fabricate_without_wire(self, engine):
        engine.state.wire = 0
        result = engine.manual_fabricate()
        assert not result.success
        assert isinstance(result.events[0], FabricationFailed)
        assert engine.state.inventory == 0


class TestSales:
    """Demand-driven sales with sell carry."""

    def test_sales_floor_and_carry(self, engine):
        engine.state.inventory = 100
        engine.state.demand_index = 1.45
        report = engine.tick()
        assert report.sold == 11
        assert engine.state.sell_carry == pytest.approx(0.6)
        assert engine.state.inventory == 89
        assert engine.state.total_sold == 11
        assert engine.state.funds == pytest.approx(28 + 11 * 0.25)
        assert report.revenue == pytest.approx(2.75)

    def test_sales_limited_by_inventory(self, engine):
        engine.state.inventory = 3
        engine.state.demand_index = 1.45
        report = engine.tick()
        assert report.sold == 3
        assert engine.state.inventory == 0
        assert engine.state.sell_carry == pytest.approx(11.6 - 3)

    def test_carry_feeds_next_tick(self, engine):
        """0.6 left over lifts the next 11.6 target to 12 units."""
        engine.state.inventory = 100
        engine.state.demand_index = 1.45
        first = engine.tick()
        engine.state.demand_index = 1.45
        second = engine.tick()
        assert first.sold == 11
        assert second.sold == 12
        assert engine.state.sell_carry == pytest.approx(0.2)
        assert engine.state.total_sold == 23

    def test_no_sales_without_demand(self, engine):
        engine.state.inventory = 50
        report = engine.tick()
        assert report.sold == 0
        assert engine.state.inventory == 50


class TestDemand:
    """Demand formula."""

    def test_baseline(self):
        d = compute_demand(0, 0, 0.0, 0.25, 0, Demand())
        assert d.demand == pytest.approx(1.45)
        assert d.price_penalty == pytest.approx(0.0)
        assert d.inventory_penalty == pytest.approx(0.0)

    def test_boosts_multiply(self):
        d = compute_demand(2, 1, 0.0, 0.25, 0, Demand())
        assert d.demand == pytest.approx(1.45 * 1.7 * 1.12)

    def test_reputation_boost_is_capped(self):
        d = compute_demand(0, 0, 3000.0, 0.25, 0, Demand())
        assert d.reputation_boost == pytest.approx(1.6)
        assert d.demand == pytest.approx(1.45 * 1.6)

    def test_premium_penalty_above_threshold(self):
        d = compute_demand(0, 0, 0.0, 1.0, 0, Demand())
        assert d.price_penalty == pytest.approx(0.75 * 6 + 0.5 * 8)

    def test_low_price_raises_demand(self):
        d = compute_demand(0, 0, 0.0, 0.10, 0, Demand())
        assert d.demand == pytest.approx(1.45 + 0.15 * 6)

    def test_inventory_penalty(self):
        d = compute_demand(0, 0, 0.0, 0.25, 4200, Demand())
        assert d.inventory_penalty == pytest.approx(1.0)
        assert d.demand == pytest.approx(0.45)

    def test_demand_never_negative(self):
        d = compute_demand(0, 0, 0.0, 2.50, 10000, Demand(), noise=-0.06)
        assert d.demand == 0.0

    def test_noise_stays_in_band(self):
        model = DemandModel(Demand(), make_rng(123))
        draws = [model.draw_noise() for _ in range(2000)]
        assert min(draws) >= -0.06
        assert max(draws) <= 0.06
        assert np.std(draws) > 0

    def test_demand_recomputed_each_tick(self, engine):
        engine.tick()
        assert engine.state.demand_index == pytest.approx(1.45)
        engine.set_price(2.5)
        engine.tick()
        assert engine.state.demand_index == 0.0


class TestCostGrowth:
    """Geometric cost growth with per-step rounding."""

    def test_round_half_up(self):
        assert round_half_up(0.125) == 0.13
        assert round_half_up(20.5199999) == 20.52
        assert bump_cost(18, 0.14) == 20.52

    def test_autoclipper_costs_compound_step_by_step(self, engine):
        engine.state.funds = 10_000
        expected = [18.0]
        for _ in range(5):
            expected.append(round_half_up(expected[-1] * (1 + 0.14), 2))

        result = engine.buy_autoclipper(5)

        assert result.success
        assert engine.state.autoclippers == 5
        assert engine.state.clipper_cost == pytest.approx(expected[5])
        assert result.events[0].total_cost == pytest.approx(sum(expected[:5]))
        assert engine.state.funds == pytest.approx(10_000 - sum(expected[:5]))

    def test_costs_never_decrease(self, engine):
        engine.state.funds = 100_000
        last = engine.state.clipper_cost
        for _ in range(20):
            engine.buy_autoclipper()
            assert engine.state.clipper_cost > last
            last = engine.state.clipper_cost


class TestPurchases:
    """Autoclipper, factory and wire purchases."""

    def test_single_autoclipper(self, engine):
        result = engine.buy_autoclipper()
        assert result.success
        assert not result.partial
        assert engine.state.funds == pytest.approx(10)
        assert engine.state.clipper_cost == pytest.approx(20.52)
        assert engine.state.autoclippers == 1

    def test_partial_purchase(self, engine):
        engine.state.funds = 1.5 * engine.state.clipper_cost
        result = engine.buy_autoclipper(5)
        event = result.events[0]
        assert result.success
        assert result.partial
        assert isinstance(event, PurchaseCompleted)
        assert event.requested == 5
        assert event.purchased == 1
        assert engine.state.funds >= 0

    def test_zero_purchased_is_failure(self, engine):
        engine.state.funds = 10
        result = engine.buy_autoclipper(3)
        assert not result.success
        assert isinstance(result.events[0], PurchaseRejected)
        assert engine.state.funds == 10
        assert engine.state.clipper_cost == 18

    def test_autoclipper_requires_wire(self, engine):
        engine.state.wire = 0
        assert not engine.can_buy_autoclipper()
        assert not engine.buy_autoclipper().success

    def test_count_below_one_buys_one(self, engine):
        engine.state.funds = 1000
        engine.buy_autoclipper(0)
        assert engine.state.autoclippers == 1

    def test_factory_locked(self, engine):
        engine.state.funds = 10_000
        engine.state.autoclippers = 5
        assert not engine.buy_factory().success
        assert engine.state.factories == 0

    def test_factory_needs_three_autoclippers(self, engine):
        engine.state.flags.factory_unlocked = True
        engine.state.funds = 10_000
        engine.state.autoclippers = 2
        assert not engine.can_buy_factory()
        engine.state.autoclippers = 3
        result = engine.buy_factory()
        assert result.success
        assert engine.state.factories == 1
        assert engine.state.factory_cost == pytest.approx(495.6)

    def test_wire_purchase(self, engine):
        engine.state.flags.wire_warning_shown = True
        result = engine.buy_wire()
        event = result.events[0]
        assert result.success
        assert event.item is PurchaseItem.WIRE
        assert event.wire_added == 650
        assert engine.state.wire == 1300
        assert engine.state.funds == pytest.approx(10)
        # midpoint jitter is 0.7
        assert engine.state.wire_cost == pytest.approx(round_half_up((18 + 0.7) * (1 + 0.06)))
        assert not engine.state.flags.wire_warning_shown

    @pytest.mark.parametrize("action", ["buy_autoclipper", "buy_factory", "buy_wire"])
    @pytest.mark.parametrize("count", ["abc", None, math.nan, math.inf, -math.inf, "1e400"])
    def test_invalid_count_is_rejected(self, engine, action, count):
        """Counts that are not finite numbers buy nothing and never raise."""
        engine.state.funds = 10_000
        engine.state.flags.factory_unlocked = True
        engine.state.autoclippers = 3
        before = engine.view()

        result = getattr(engine, action)(count)

        assert not result.success
        assert isinstance(result.events[0], QuantityRejected)
        assert engine.view() == before

    def test_numeric_string_count(self, engine):
        engine.state.funds = 1000
        assert engine.buy_autoclipper("2").success
        assert engine.state.autoclippers == 2

    def test_wire_cost_rises_with_random_jitter(self):
        engine = EconomyEngine(Config(), rng=make_rng(5))
        engine.state.funds = 10_000
        last = engine.state.wire_cost
        for _ in range(10):
            engine.buy_wire()
            assert engine.state.wire_cost > last
            last = engine.state.wire_cost


class TestUpgrades:
    """Marketing and optimization."""

    def test_marketing_locked(self, engine):
        engine.state.funds = 1000
        assert not engine.launch_marketing().success
        assert engine.state.marketing_level == 0

    def test_marketing_launch(self, engine):
        engine.state.flags.marketing_unlocked = True
        engine.state.funds = 200
        result = engine.launch_marketing()
        assert result.success
        assert isinstance(result.events[0], MarketingLaunched)
        assert engine.state.marketing_level == 1
        assert engine.state.funds == pytest.approx(60)
        assert engine.state.marketing_cost == pytest.approx(198.8)

    def test_optimize(self, engine):
        engine.state.flags.optimization_unlocked = True
        engine.state.funds = 200
        result = engine.optimize()
        assert result.success
        assert engine.state.manual_efficiency == 2
        assert engine.state.clipper_rate == pytest.approx(1.8 * 1.08)
        assert engine.state.factory_rate == pytest.approx(55 * 1.04)
        assert engine.state.optimize_cost == pytest.approx(248.0)
        assert engine.state.trust == 1
        assert engine.state.funds == pytest.approx(40)

    def test_optimize_compounds(self, engine):
        engine.state.flags.optimization_unlocked = True
        engine.state.funds = 10_000
        engine.optimize()
        engine.optimize()
        assert engine.state.clipper_rate == pytest.approx(1.8 * 1.08 * 1.08)
        assert engine.state.trust == 2

    def test_optimize_without_funds(self, engine):
        engine.state.flags.optimization_unlocked = True
        assert not engine.optimize().success
        assert engine.state.manual_efficiency == 1


class TestPricing:
    """Price bound is enforced at mutation time."""

    def test_set_price_in_bounds(self, engine):
        assert engine.set_price(1.00).success
        assert engine.state.price_per_clip == 1.00

    def test_set_price_out_of_bounds(self, engine):
        result = engine.set_price(3.00)
        assert not result.success
        assert result.events[0].reason is PriceRejection.OUT_OF_BOUNDS
        assert engine.state.price_per_clip == 0.25
        assert not engine.set_price(0.01).success
        assert engine.state.price_per_clip == 0.25

    def test_set_price_rounds_to_cents(self, engine):
        engine.set_price(0.999)
        assert engine.state.price_per_clip == 1.00
        engine.set_price(0.125)
        assert engine.state.price_per_clip == 0.13

    @pytest.mark.parametrize("value", [math.nan, math.inf, "abc", None])
    def test_set_price_invalid(self, engine, value):
        result = engine.set_price(value)
        assert not result.success
        assert isinstance(result.events[0], PriceRejected)
        assert result.events[0].reason is PriceRejection.INVALID
        assert engine.state.price_per_clip == 0.25

    def test_adjust_price(self, engine):
        assert engine.adjust_price(0.05).success
        assert engine.state.price_per_clip == 0.30
        assert engine.adjust_price(-0.25).success
        assert engine.state.price_per_clip == 0.05

    def test_adjust_price_out_of_bounds(self, engine):
        assert not engine.adjust_price(-0.25).success
        assert not engine.adjust_price(5).success
        assert engine.state.price_per_clip == 0.25


class TestUnlocks:
    """One-way milestone flags."""

    def test_marketing_unlocks_once(self, engine):
        engine.state.total_sold = 120
        report = engine.tick()
        unlocks = [e for e in report.events if isinstance(e, FeatureUnlocked)]
        assert [e.flag for e in unlocks] == [UnlockFlag.MARKETING]
        assert engine.state.flags.marketing_unlocked

        report = engine.tick()
        assert not [e for e in report.events if isinstance(e, FeatureUnlocked)]
        assert engine.state.flags.marketing_unlocked

    def test_factory_needs_autoclippers_and_sales(self, engine):
        engine.state.total_sold = 400
        engine.tick()
        assert not engine.state.flags.factory_unlocked
        engine.state.autoclippers = 4
        engine.state.wire = 0
        engine.tick()
        assert engine.state.flags.factory_unlocked

    def test_trust_milestone_grants_trust_once(self, engine):
        engine.state.total_sold = 1200
        report = engine.tick()
        flags = {e.flag: e for e in report.events if isinstance(e, FeatureUnlocked)}
        assert set(flags) == {UnlockFlag.MARKETING, UnlockFlag.OPTIMIZATION, UnlockFlag.TRUST_MILESTONE}
        assert flags[UnlockFlag.TRUST_MILESTONE].trust_granted == 1
        assert engine.state.trust == 1

        engine.tick()
        assert engine.state.trust == 1


class TestTick:
    """Tick ordering and periodic notifications."""

    def test_time_advances_in_fixed_steps(self, engine):
        for _ in range(3):
            engine.tick()
        assert engine.state.seconds_elapsed == 3.0
        assert engine.state.tick_count == 3

    def test_automation_runs_before_sales(self, engine):
        engine.state.autoclippers = 1
        engine.state.demand_index = 1.0
        report = engine.tick()
        assert report.produced == 1
        assert report.sold == 1
        assert engine.state.inventory == 0

    def test_low_wire_warning_latches(self, engine):
        engine.state.wire = 30
        first = engine.tick()
        second = engine.tick()
        assert any(isinstance(e, WireLow) for e in first.events)
        assert not any(isinstance(e, WireLow) for e in second.events)

        engine.buy_wire()
        engine.state.wire = 10
        third = engine.tick()
        assert any(isinstance(e, WireLow) for e in third.events)

    def test_heartbeat_every_fifteen_ticks(self, engine):
        beats = [
            report.tick
            for report in (engine.tick() for _ in range(45))
            if any(isinstance(e, Heartbeat) for e in report.events)
        ]
        assert beats == [15, 30, 45]

    def test_automation_and_sales_summaries_are_throttled(self, engine):
        engine.state.autoclippers = 1
        engine.state.inventory = 1000
        reports = [engine.tick() for _ in range(20)]
        automation = [r.tick for r in reports if any(isinstance(e, AutomationSummary) for e in r.events)]
        sales = [r.tick for r in reports if any(isinstance(e, SalesSummary) for e in r.events)]
        assert automation == [8, 16]
        assert sales == [10, 20]

    def test_status_does_not_mutate(self, engine):
        before = engine.view()
        result = engine.status()
        assert isinstance(result.events[0], StatusReport)
        assert result.events[0].snapshot == before
        assert engine.view() == before

    def test_monotonic_counters_over_long_run(self):
        engine = EconomyEngine(Config(), rng=make_rng(9))
        engine.state.autoclippers = 6
        last = engine.view()
        for _ in range(300):
            engine.tick()
            view = engine.view()
            assert view.clips_made >= last.clips_made
            assert view.total_sold >= last.total_sold
            assert view.seconds_elapsed > last.seconds_elapsed
            assert view.inventory >= 0
            assert view.wire >= 0
            assert view.demand_index >= 0
            for flag in ("marketing_unlocked", "factory_unlocked", "optimization_unlocked", "trust_granted"):
                assert getattr(view, flag) or not getattr(last, flag)
            last = view

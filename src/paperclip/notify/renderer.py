"""Render engine events as notifications."""

from typing import Iterable, List, Optional, Tuple

from ..engine.events import (
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
    WireLow,
)
from ..engine.state import StateView, UnlockFlag
from .formatting import fmt_decimal, fmt_integer
from .sink import NotificationSink, Severity

Rendered = Tuple[str, str, Optional[Severity]]

UNLOCK_MESSAGES = {
    UnlockFlag.MARKETING: "Market analytics unlocked. Marketing campaigns now available.",
    UnlockFlag.FACTORY: "Macro fabrication authorized. Factories can now be constructed.",
    UnlockFlag.OPTIMIZATION: "Optimization console online. Use `optimize` to enhance efficiency.",
    UnlockFlag.TRUST_MILESTONE: "Global demand satisfied. Trust increased by {trust}. Systems operating nominally.",
}

REJECTED_PURCHASES = {
    PurchaseItem.AUTOCLIPPER: ("SYSTEM", "Unable to deploy autoclipper. Verify funds and wire reserves."),
    PurchaseItem.FACTORY: ("SYSTEM", "Factory construction aborted. Additional capital required."),
    PurchaseItem.WIRE: ("PROCUREMENT", "Wire procurement failed. Insufficient funds."),
}


def format_status(view: StateView) -> str:
    """Multi-line production report."""
    return "\n".join([
        f"Clips fabricated: {fmt_integer(view.clips_made)}",
        f"Inventory: {fmt_integer(view.inventory)}",
        f"Total sold: {fmt_integer(view.total_sold)}",
        f"Funds: {fmt_decimal(view.funds)}",
        f"Price/clip: {fmt_decimal(view.price_per_clip)}",
        f"Demand index: {view.demand_index:.2f}",
        f"Wire: {fmt_integer(view.wire)}",
        f"Autoclippers: {fmt_integer(view.autoclippers)} (rate {view.clipper_rate:.2f}/s each)",
        f"Factories: {fmt_integer(view.factories)} (rate {view.factory_rate:.2f}/s each)",
        f"Marketing level: {fmt_integer(view.marketing_level)}",
        f"Trust: {fmt_integer(view.trust)}",
    ])


def format_panel(view: StateView) -> str:
    """Automation panel: capacity, upgrade prices and supply cost."""
    return "\n".join([
        f"Autoclippers: {fmt_integer(view.autoclippers)} ({view.clipper_rate:.2f}/s each, "
        f"next {fmt_decimal(view.clipper_cost)} cr)",
        f"Factories: {fmt_integer(view.factories)} ({view.factory_rate:.2f}/s each, "
        f"next {fmt_decimal(view.factory_cost)} cr)",
        f"Marketing: Level {fmt_integer(view.marketing_level)} (cost {fmt_decimal(view.marketing_cost)} cr)",
        f"Optimization: cost {fmt_decimal(view.optimize_cost)} cr",
        f"Wire Cost: {fmt_decimal(view.wire_cost)} cr / {fmt_integer(view.wire_per_purchase)} wire",
        f"Manual Efficiency: {fmt_integer(view.manual_efficiency)} clip(s) per command",
        f"Trust: {fmt_integer(view.trust)}",
    ])


def _render_purchase(event: PurchaseCompleted) -> Rendered:
    spent = fmt_decimal(event.total_cost)
    if event.item is PurchaseItem.AUTOCLIPPER:
        channel = "AUTOMATION"
        text = (
            f"Autoclipper deployment complete. Added {fmt_integer(event.purchased)} unit(s). "
            f"Total units: {fmt_integer(event.owned)}. Spent {spent} cr."
        )
        limit = "limited by available funds."
    elif event.item is PurchaseItem.FACTORY:
        channel = "AUTOMATION"
        text = (
            f"Fabrication plant commissioned. Added {fmt_integer(event.purchased)} unit(s). "
            f"Total factories: {fmt_integer(event.owned)}. Spent {spent} cr."
        )
        limit = "limited by available funds or prerequisites."
    else:
        channel = "PROCUREMENT"
        text = (
            f"Procured {fmt_integer(event.purchased)} wire spool(s) (+{fmt_integer(event.wire_added)}). "
            f"Current reserves: {fmt_integer(event.owned)}. Spent {spent} cr."
        )
        limit = "limited by available funds."

    if event.partial:
        text += f" Requested {fmt_integer(event.requested)}; {limit}"
    return channel, text, None


def render_event(event: Event) -> Rendered:
    """Map one event to ``(channel, message, severity)``."""
    if isinstance(event, FabricationCompleted):
        return (
            "FABRICATOR",
            f"Manual fabrication complete: {fmt_integer(event.produced)} clip(s). "
            f"Inventory {fmt_integer(event.inventory)}.",
            Severity.SUCCESS,
        )
    if isinstance(event, FabricationFailed):
        return "FABRICATOR", "Fabrication failed. Wire required for manual operation.", Severity.WARNING
    if isinstance(event, PurchaseCompleted):
        return _render_purchase(event)
    if isinstance(event, PurchaseRejected):
        channel, text = REJECTED_PURCHASES[event.item]
        return channel, text, Severity.WARNING
    if isinstance(event, QuantityRejected):
        return "SYSTEM", "Quantity must be a whole number.", Severity.WARNING
    if isinstance(event, MarketingLaunched):
        return (
            "MARKETING",
            f"Campaign deployed. Reach level {fmt_integer(event.level)}. Demand engines recalibrated.",
            None,
        )
    if isinstance(event, MarketingRejected):
        return "SYSTEM", "Campaign launch denied. Marketing budget unavailable.", Severity.WARNING
    if isinstance(event, OptimizationApplied):
        return (
            "OPTIMIZER",
            "Calibration complete. Manual efficiency +1, automation throughput improved, trust gain +1.",
            None,
        )
    if isinstance(event, OptimizationRejected):
        return (
            "OPTIMIZER",
            "Optimization protocol requires additional capital and throughput data.",
            Severity.WARNING,
        )
    if isinstance(event, PriceChanged):
        verb = "adjusted" if event.mode is PriceMode.ADJUST else "set"
        return "MARKET", f"Clip price {verb} to {fmt_decimal(event.price)}.", None
    if isinstance(event, PriceRejected):
        if event.reason is PriceRejection.INVALID:
            return "MARKET", "Invalid price input.", Severity.WARNING
        if event.mode is PriceMode.ADJUST:
            return "MARKET", "Price adjustment exceeds safe bounds.", Severity.WARNING
        return "MARKET", "Price must remain between 0.05 and 2.50.", Severity.WARNING
    if isinstance(event, FeatureUnlocked):
        return "SYSTEM", UNLOCK_MESSAGES[event.flag].format(trust=event.trust_granted), None
    if isinstance(event, WireLow):
        return "SUPPLY", "Wire reserves critically low. Procure additional spools.", Severity.WARNING
    if isinstance(event, Heartbeat):
        return (
            "HEARTBEAT",
            f"Inventory {fmt_integer(event.inventory)} | Funds {fmt_decimal(event.funds)} | "
            f"Demand {event.demand:.2f}",
            None,
        )
    if isinstance(event, AutomationSummary):
        return (
            "AUTOMATION",
            f"Background fabrication: {fmt_integer(event.produced)} clips added to inventory.",
            None,
        )
    if isinstance(event, SalesSummary):
        return (
            "MARKET",
            f"Sold {fmt_integer(event.units)} clips @ {fmt_decimal(event.price)} each. "
            f"Revenue {fmt_decimal(event.revenue)}.",
            None,
        )
    if isinstance(event, StatusReport):
        return "STATUS", format_status(event.snapshot), None
    raise TypeError(f"No renderer for event {type(event).__name__}")


class EventRenderer:
    """Publishes events to a notification sink."""

    def __init__(self, sink: NotificationSink, pricing=None):
        self.sink = sink
        self.pricing = pricing

    def render(self, event: Event) -> Rendered:
        channel, message, severity = render_event(event)
        if (
            self.pricing is not None and
            isinstance(event, PriceRejected) and
            event.reason is PriceRejection.OUT_OF_BOUNDS and
            event.mode is PriceMode.SET
        ):
            message = (
                f"Price must remain between {fmt_decimal(self.pricing.min_price)} "
                f"and {fmt_decimal(self.pricing.max_price)}."
            )
        return channel, message, severity

    def publish(self, events: Iterable[Event], force_visible: bool = False) -> List[Rendered]:
        rendered = []
        for event in events:
            channel, message, severity = self.render(event)
            self.sink.notify(channel, message, severity, force_visible)
            rendered.append((channel, message, severity))
        return rendered

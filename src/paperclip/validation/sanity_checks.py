"""Sanity checks for simulation state and trajectories."""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..config.schema import Config
from ..engine.state import StateView

MONOTONIC_FIELDS = ("seconds_elapsed", "tick", "clips_made", "total_sold")
ONE_WAY_FLAGS = ("marketing_unlocked", "factory_unlocked", "optimization_unlocked", "trust_granted")
COST_FIELDS = ("clipper_cost", "factory_cost", "wire_cost", "marketing_cost", "optimize_cost")


@dataclass
class ValidationWarning:
    """A validation warning with severity and message."""
    severity: str  # "warning" or "error"
    category: str  # e.g., "bounds", "monotonic", "unlock"
    message: str
    details: Optional[str] = None


class InvariantChecker:
    """Check state snapshots against the engine's invariants."""

    def __init__(self, config: Config):
        """Initialize with configuration."""
        self.config = config

    def check_state(self, view: StateView) -> List[ValidationWarning]:
        """
        Check a single snapshot.

        Returns:
            List of validation warnings
        """
        warnings = []

        for name in ("inventory", "wire", "demand_index"):
            value = getattr(view, name)
            if value < 0:
                warnings.append(ValidationWarning(
                    severity="error",
                    category="bounds",
                    message=f"{name} is negative at tick {view.tick}",
                    details=f"Current value: {value}"
                ))

        pricing = self.config.pricing
        if not pricing.min_price <= view.price_per_clip <= pricing.max_price:
            warnings.append(ValidationWarning(
                severity="error",
                category="bounds",
                message=f"Price outside [{pricing.min_price:.2f}, {pricing.max_price:.2f}] at tick {view.tick}",
                details=f"Current price: {view.price_per_clip:.2f}"
            ))

        return warnings

    def check_transition(self, prev: StateView, curr: StateView) -> List[ValidationWarning]:
        """
        Check that moving from ``prev`` to ``curr`` broke no invariant.

        Returns:
            List of validation warnings
        """
        warnings = []

        for name in MONOTONIC_FIELDS:
            before, after = getattr(prev, name), getattr(curr, name)
            if after < before:
                warnings.append(ValidationWarning(
                    severity="error",
                    category="monotonic",
                    message=f"{name} decreased at tick {curr.tick}",
                    details=f"{before} -> {after}"
                ))

        for name in ONE_WAY_FLAGS:
            if getattr(prev, name) and not getattr(curr, name):
                warnings.append(ValidationWarning(
                    severity="error",
                    category="unlock",
                    message=f"{name} reverted at tick {curr.tick}",
                ))

        for name in COST_FIELDS:
            before, after = getattr(prev, name), getattr(curr, name)
            if after < before:
                warnings.append(ValidationWarning(
                    severity="error",
                    category="cost",
                    message=f"{name} decreased at tick {curr.tick}",
                    details=f"{before:.2f} -> {after:.2f}"
                ))

        return warnings

    def check_trajectory(self, views: Sequence[StateView]) -> List[ValidationWarning]:
        """Check every snapshot and every consecutive pair."""
        warnings = []
        for i, view in enumerate(views):
            warnings.extend(self.check_state(view))
            if i > 0:
                warnings.extend(self.check_transition(views[i - 1], view))
        return warnings


def validate_simulation_results(result) -> List[ValidationWarning]:
    """
    Run invariant checks over a finished run.

    Args:
        result: SimulationResult from SessionRunner

    Returns:
        All warnings found
    """
    return InvariantChecker(result.config).check_trajectory(result.states)

"""Validation and sanity checks for paperclip simulation."""

from .sanity_checks import InvariantChecker, ValidationWarning, validate_simulation_results

__all__ = [
    "InvariantChecker",
    "ValidationWarning",
    "validate_simulation_results"
]

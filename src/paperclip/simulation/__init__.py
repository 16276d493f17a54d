"""Headless simulation drivers."""

from .runner import SessionRunner, SimulationResult, load_script

__all__ = ["SessionRunner", "SimulationResult", "load_script"]

"""Smoke tests for core paperclip modules.

These tests verify basic functionality without deep validation.
Run these first to catch obvious breakage.
"""

import pytest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pydantic import ValidationError

from paperclip import Session, __version__
from paperclip.config.loader import config_from_dict, load_config
from paperclip.config.schema import Config
from paperclip.engine.economy import EconomyEngine
from paperclip.engine.state import SimulationState, UnlockFlag, UnlockFlags
from paperclip.simulation.runner import SessionRunner, SimulationResult


class TestConfigLoading:
    """Smoke tests for configuration loading."""

    def test_load_default_config(self):
        """Config loads without errors."""
        config = load_config()
        assert config is not None
        assert isinstance(config, Config)

    def test_config_has_required_sections(self):
        """Config contains all expected sections."""
        config = load_config()
        for section in ('session', 'initial', 'pricing', 'costs', 'optimization', 'demand', 'unlocks'):
            assert hasattr(config, section)

    def test_defaults_file_matches_schema(self):
        """Packaged YAML and schema defaults describe the same session."""
        assert load_config().compute_hash() == Config().compute_hash()

    def test_config_hash_is_deterministic(self):
        """Same config produces same hash."""
        assert load_config().compute_hash() == load_config().compute_hash()

    def test_config_hash_changes_with_values(self):
        """Different balance values produce different hashes."""
        changed = config_from_dict({'demand': {'base': 2.0}})
        assert changed.compute_hash() != Config().compute_hash()

    def test_empty_dict_gives_defaults(self):
        assert Config.from_dict(None).to_dict() == Config().to_dict()

    def test_load_from_file(self, tmp_path):
        """Partial YAML files fill the rest from defaults."""
        path = tmp_path / "custom.yaml"
        path.write_text("session:\n  random_seed: 7\npricing:\n  max_price: 3.0\n")
        config = load_config(str(path))
        assert config.session.random_seed == 7
        assert config.pricing.max_price == 3.0
        assert config.initial.funds == 28.0

    def test_load_from_path_object(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("demand:\n  base: 2.0\n")
        assert load_config(path).demand.base == 2.0

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path).compute_hash() == Config().compute_hash()


class TestConfigValidation:
    """Invalid configurations are rejected at load time."""

    def test_inverted_price_bounds(self):
        with pytest.raises(ValidationError):
            config_from_dict({'pricing': {'min_price': 3.0, 'max_price': 2.0}})

    def test_initial_price_outside_bounds(self):
        with pytest.raises(ValidationError):
            config_from_dict({'initial': {'price': 5.0}})

    def test_negative_wire(self):
        with pytest.raises(ValidationError):
            config_from_dict({'initial': {'wire': -1}})

    def test_zero_tick_length(self):
        with pytest.raises(ValidationError):
            config_from_dict({'session': {'tick_seconds': 0}})


class TestState:
    """Smoke tests for state containers."""

    def test_state_from_config(self):
        """SimulationState picks up initial values."""
        state = SimulationState.from_config(load_config())
        assert state.funds == 28.0
        assert state.wire == 650
        assert state.automation_rate == 0

    def test_automation_rate(self):
        state = SimulationState.from_config(load_config())
        state.autoclippers = 2
        state.factories = 1
        assert state.automation_rate == pytest.approx(2 * 1.8 + 55)

    def test_flags(self):
        flags = UnlockFlags()
        assert not flags.is_set(UnlockFlag.FACTORY)
        flags.set(UnlockFlag.FACTORY)
        assert flags.is_set(UnlockFlag.FACTORY)
        assert flags.factory_unlocked

    def test_view_record(self):
        """Snapshots flatten to plain dicts."""
        record = EconomyEngine(load_config()).view().to_record()
        assert record['tick'] == 0
        assert record['funds'] == 28.0
        assert record['can_fabricate'] is True


class TestSimulationRunner:
    """Smoke tests for the headless runner."""

    def test_runner_executes(self):
        """Runner completes a short run."""
        result = SessionRunner(load_config()).run(10, random_seed=1)
        assert isinstance(result, SimulationResult)
        assert len(result.states) == 11
        assert len(result.reports) == 10

    def test_session_starts(self):
        session = Session()
        session.boot()
        session.tick()
        assert session.view().tick == 1

    def test_version(self):
        assert __version__ == "1.0.0"

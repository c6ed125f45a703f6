"""Unit tests for TacticsSettings and the decision cadence helper."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from skirmish.config import TacticsSettings, ticks_per_decision

pytestmark = pytest.mark.unit


class TestTicksPerDecision:

    def test_default_budget(self):
        # 300 APM is 5 actions per second; at 15 ticks per second that's every 3 ticks
        assert ticks_per_decision(15, 300) == 3

    def test_rounds_up(self):
        assert ticks_per_decision(25, 360) == 5

    def test_never_below_one(self):
        assert ticks_per_decision(15, 100000) == 1

    def test_non_positive_apm_rejected(self):
        with pytest.raises(ValueError):
            ticks_per_decision(15, 0)


class TestTacticsSettings:

    def test_defaults(self):
        s = TacticsSettings()
        assert s.actions_per_minute == 300
        assert s.mission_update_divisor == 3
        assert s.enable_attack and s.enable_naval and s.enable_scouting
        assert s.debug is False

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SKIRMISH_ACTIONS_PER_MINUTE", "120")
        monkeypatch.setenv("SKIRMISH_ENABLE_NAVAL", "false")
        s = TacticsSettings()
        assert s.actions_per_minute == 120
        assert s.enable_naval is False

    def test_invalid_values_rejected(self):
        with pytest.raises(ValidationError):
            TacticsSettings(actions_per_minute=0)
        with pytest.raises(ValidationError):
            TacticsSettings(mission_update_divisor=0)

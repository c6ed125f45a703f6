"""Tests for the tactical layer wiring and decision cadence."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from skirmish.batcher import move
from skirmish.comms.event_bus import EventBus
from skirmish.config import TacticsSettings
from skirmish.tactics import TacticalLayer, build_controller

pytestmark = pytest.mark.unit


class TestBuildController:

    def test_all_factories_by_default(self):
        c = build_controller(TacticsSettings())
        assert [f.name for f in c.factories] == [
            "AttackMissionFactory", "NavalMissionFactory", "ScoutingMissionFactory",
        ]

    def test_disabled_factories_are_skipped(self):
        c = build_controller(TacticsSettings(enable_naval=False, enable_scouting=False))
        assert [f.name for f in c.factories] == ["AttackMissionFactory"]


class TestTacticalLayer:

    def test_decision_cadence(self, game, awareness, orders):
        layer = TacticalLayer(15, TacticsSettings(actions_per_minute=300, mission_update_divisor=3))
        assert layer.tick_ratio == 3
        layer.controller.on_ai_update = MagicMock()

        decisions = []
        for t in range(12):
            game.current_tick = t
            if layer.on_tick(game, awareness, orders):
                decisions.append(t)
        assert decisions == [0, 3, 6, 9]
        assert layer.controller.on_ai_update.call_count == 2

    def test_orders_flushed_on_decision_ticks(self, game, awareness, orders):
        layer = TacticalLayer(15, TacticsSettings())
        layer.batcher.push(move(1, (5.0, 5.0)))
        game.current_tick = 1
        layer.on_tick(game, awareness, orders)
        assert orders.calls == []
        game.current_tick = 3
        layer.on_tick(game, awareness, orders)
        assert len(orders.calls) == 1

    def test_end_to_end_attack(self, game, awareness, orders):
        bus = EventBus()
        q = bus.subscribe("mission_added")
        game.add("GACNST", (60.0, 60.0), owner="enemy")
        game.add_many("E1", [(20.0 + i, 20.0) for i in range(5)])
        layer = TacticalLayer(15, TacticsSettings(mission_update_divisor=1, debug=True), event_bus=bus)
        for t in range(0, 30, 3):
            game.current_tick = t
            layer.on_tick(game, awareness, orders)
        assert q.get_nowait()["data"]["name"] == "attack_0"
        assert orders.calls
        assert layer.requested_unit_types() == {}

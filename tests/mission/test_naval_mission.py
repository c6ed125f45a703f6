"""Tests for NavalMission and NavalMissionFactory."""
from __future__ import annotations

import pytest

from skirmish.mission import (
    AttackMission,
    Disband,
    DisbandReason,
    MissionController,
    NavalMission,
    NavalMissionFactory,
    NavalState,
    Noop,
    RequestUnits,
)
from skirmish.mission.naval import owns_shipyard

pytestmark = pytest.mark.unit

RALLY = (70.0, 20.0)
TARGET = (100.0, 60.0)


@pytest.fixture
def sea(game):
    game.fill_water(60, 0, 127, 127)
    return game


def _mission(rally=RALLY, composition=None) -> NavalMission:
    return NavalMission("naval", rally, TARGET, composition or {"DEST": 3})


def _fleet(mission, game, positions=((70.0, 20.0), (71.0, 20.0), (70.0, 21.0))):
    ships = game.add_many("DEST", list(positions))
    for s in ships:
        mission.add_unit(s.unit_id)
    return ships


def _active(ctx, game, rally=RALLY, tick=0):
    game.current_tick = tick
    m = _mission(rally)
    _fleet(m, game)
    m.update(ctx)  # pathfinder request
    m.update(ctx)
    assert m.state is NavalState.ATTACKING
    return m


def _defenders(game, count):
    return game.add_many("DEST", [(TARGET[0] + i, TARGET[1]) for i in range(count)], owner="enemy")


class TestPreparing:

    def test_first_request_is_a_pathfinder(self, ctx, sea):
        m = _mission()
        assert m.update(ctx) == RequestUnits({"DEST": 1}, 70.0)

    def test_then_requests_composition(self, ctx, sea):
        m = _mission()
        m.update(ctx)
        action = m.update(ctx)
        assert action == RequestUnits({"DEST": 3}, 60.0)

    def test_small_compositions_padded_with_destroyers(self):
        assert NavalMission("n", RALLY, TARGET, {"DEST": 2}).composition == {"DEST": 3}
        assert NavalMission("n", RALLY, TARGET, {"DEST": 2, "AEGIS": 1}).composition == {"DEST": 2, "AEGIS": 1}

    def test_activates_with_full_fleet(self, ctx, sea):
        m = _active(ctx, sea)
        assert m.is_units_locked() is True
        assert m.squad.target_area == TARGET

    def test_scattered_fleet_regathers(self, ctx, sea):
        m = _mission()
        _fleet(m, sea, [(70.0, 20.0), (95.0, 20.0), (70.0, 60.0)])
        m.update(ctx)
        assert isinstance(m.update(ctx), Noop)
        assert m.state is NavalState.PREPARING
        assert m.squad.gather_point == RALLY


class TestAttacking:

    def test_retreats_from_strong_defence(self, ctx, sea):
        m = _active(ctx, sea)
        _defenders(sea, 7)
        sea.current_tick = 1
        m.update(ctx)
        assert m.state is NavalState.RETREATING
        sea.current_tick = 2
        assert m.update(ctx) == Disband(DisbandReason.DEFENCE_TOO_STRONG)

    def test_even_fight_keeps_attacking(self, ctx, sea):
        m = _active(ctx, sea)
        _defenders(sea, 6)
        sea.current_tick = 1
        m.update(ctx)
        assert m.state is NavalState.ATTACKING

    def test_no_targets_after_quiet_period(self, ctx, sea):
        m = _active(ctx, sea)
        sea.current_tick = 150
        assert isinstance(m.update(ctx), Noop)
        sea.current_tick = 300
        assert m.update(ctx) == Disband(DisbandReason.NO_TARGETS)

    def test_mission_duration_limit(self, ctx, sea):
        m = _active(ctx, sea)
        _defenders(sea, 1)
        sea.current_tick = 3001
        m.update(ctx)
        assert m.state is NavalState.RETREATING
        sea.current_tick = 3002
        assert m.update(ctx) == Disband(None)

    def test_stalled_fleet_withdraws(self, ctx, sea):
        m = _active(ctx, sea, tick=10)
        _defenders(sea, 1)
        for t in (160, 310, 460, 610):
            sea.current_tick = t
            m.update(ctx)
            assert m.state is NavalState.ATTACKING
        sea.current_tick = 760
        m.update(ctx)
        assert m.state is NavalState.RETREATING

    def test_retreat_times_out(self, ctx, sea):
        m = _active(ctx, sea, rally=(120.0, 120.0))
        _defenders(sea, 7)
        sea.current_tick = 1
        m.update(ctx)
        sea.current_tick = 100
        assert isinstance(m.update(ctx), Noop)
        sea.current_tick = 301
        assert m.update(ctx) == Disband(DisbandReason.DEFENCE_TOO_STRONG)


class TestNavalFactory:

    def test_owns_shipyard(self):
        assert owns_shipyard({"GACNST", "GAYARD"})
        assert not owns_shipyard({"GACNST", "GAWEAP"})

    def test_needs_a_shipyard(self, ctx, sea):
        sea.add("DEST", (65.0, 20.0), owner="enemy")
        c = MissionController([NavalMissionFactory()])
        sea.current_tick = 300
        c.on_ai_update(ctx)
        assert c.get_missions() == ()

    def test_targets_water_hostile_near_base(self, ctx, sea):
        sea.add("GAYARD", (50.0, 10.0))
        sea.add("MTNK", (30.0, 10.0), owner="enemy")
        sea.add("DEST", (65.0, 20.0), owner="enemy")
        c = MissionController([NavalMissionFactory()])
        c.on_ai_update(ctx)
        assert c.get_missions() == ()

        sea.current_tick = 300
        c.on_ai_update(ctx)
        missions = c.get_missions()
        assert [m.name for m in missions] == ["naval_300"]
        assert missions[0].target == (65.0, 20.0)

    def test_one_preparing_fleet_at_a_time(self, ctx, sea):
        sea.add("GAYARD", (50.0, 10.0))
        sea.add("DEST", (65.0, 20.0), owner="enemy")
        c = MissionController([NavalMissionFactory()])
        for t in (300, 600, 900):
            sea.current_tick = t
            c.on_ai_update(ctx)
        assert len(c.get_missions()) == 1

    def test_serves_attack_requests(self, ctx, sea):
        sea.add("DEST", (101.0, 100.0), owner="enemy")
        attack = AttackMission("attack", (20.0, 20.0), (100.0, 100.0), {"E1": 10})
        for u in sea.add_many("E1", [(20.0, 20.0), (21.0, 20.0), (20.0, 21.0)]):
            attack.add_unit(u.unit_id)
        c = MissionController([NavalMissionFactory()])
        c.add_mission(attack)
        c.on_ai_update(ctx)
        naval = c.get_mission("naval-for-attack")
        assert isinstance(naval, NavalMission)
        assert naval.target == (100.0, 100.0)
        assert naval.radius == 15.0

    def test_declines_sub_mission_while_preparing(self, ctx, sea):
        factory = NavalMissionFactory()
        c = MissionController([factory])
        c.add_mission(_mission())
        requester = AttackMission("attack", (20.0, 20.0), TARGET, {"E1": 5})
        assert factory.create_sub_mission(ctx, requester, TARGET, 10.0, c) is None

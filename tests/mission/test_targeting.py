"""Unit tests for target scoring and the target lock."""
from __future__ import annotations

import pytest

from skirmish.mission.targeting import TargetSelector, score_target
from skirmish.world import UnitSnapshot

pytestmark = pytest.mark.unit


def _enemy(type_name: str, pos=(50.0, 50.0), uid: int = 1) -> UnitSnapshot:
    return UnitSnapshot(uid, type_name, "enemy", pos)


class TestScoreTarget:

    def test_weights_without_distance(self):
        assert score_target((0.0, 0.0), [_enemy("GAPILE")], None) == 10.0
        assert score_target((0.0, 0.0), [_enemy("GAYARD")], None) == 30.0
        assert score_target((0.0, 0.0), [_enemy("MTNK")], None) == 5.0
        assert score_target((0.0, 0.0), [_enemy("CMIN")], None) == 1.0

    def test_nothing_scores_zero(self):
        assert score_target((0.0, 0.0), [], (10.0, 0.0)) == 0.0

    def test_distance_penalty(self):
        s = score_target((100.0, 0.0), [_enemy("GAPILE")], (0.0, 0.0))
        assert s == pytest.approx(10.0 / 2.0)

    def test_high_value_halves_the_penalty(self):
        s = score_target((100.0, 0.0), [_enemy("GAYARD")], (0.0, 0.0))
        assert s == pytest.approx(30.0 / 1.5)


class TestTargetSelector:

    def _locked(self, point=(10.0, 10.0), tick=0, score=1.0) -> TargetSelector:
        sel = TargetSelector()
        sel.lock(point, tick, score)
        return sel

    def test_first_offer_always_locks(self):
        sel = TargetSelector()
        assert sel.offer((1.0, 1.0), 0.0, 0) is True
        assert sel.target == (1.0, 1.0)

    def test_lock_holds_for_150_ticks(self):
        sel = self._locked()
        assert sel.offer((60.0, 60.0), 100.0, 149) is False
        assert sel.offer((60.0, 60.0), 100.0, 150) is True
        assert sel.target == (60.0, 60.0)
        assert sel.locked_at == 150

    def test_needs_thirty_percent_improvement(self):
        sel = self._locked(score=10.0)
        assert sel.offer((60.0, 60.0), 12.9, 200) is False
        assert sel.offer((60.0, 60.0), 13.5, 200) is True

    def test_switch_remembers_new_score(self):
        sel = self._locked(score=10.0)
        assert sel.offer((60.0, 60.0), 20.0, 200) is True
        assert sel.score == 20.0
        assert sel.offer((90.0, 90.0), 25.0, 400) is False

    def test_recent_targets_are_excluded(self):
        sel = self._locked((10.0, 10.0))
        assert sel.offer((13.0, 14.0), 100.0, 500) is False
        assert sel.offer((16.0, 10.0), 100.0, 500) is True

    def test_memory_forgets_old_targets(self):
        sel = self._locked((0.0, 0.0), 0)
        for i, p in enumerate([(20.0, 0.0), (40.0, 0.0), (60.0, 0.0)], start=1):
            sel.lock(p, i * 200, 1.0)
        assert (0.0, 0.0) not in sel.recent
        assert sel.offer((1.0, 0.0), 100.0, 1000) is True


class TestHostSuppliedFacts:

    def test_host_structure_flag_scores_as_structure(self):
        depot = UnitSnapshot(1, "XDEPOT", "enemy", (0.0, 0.0), is_structure=True)
        assert score_target((0.0, 0.0), [depot], None) == 10.0

    def test_host_armed_unit_scores_as_combatant(self):
        walker = UnitSnapshot(1, "XWALK", "enemy", (0.0, 0.0), weapon_range=6.0)
        assert score_target((0.0, 0.0), [walker], None) == 5.0

    @pytest.mark.parametrize("type_name", ["NAPOWR", "GAPOWR", "NAREFN", "NAHAND"])
    def test_common_buildings_are_structures(self, type_name):
        assert score_target((0.0, 0.0), [_enemy(type_name)], None) == 10.0

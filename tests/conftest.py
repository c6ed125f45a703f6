"""Shared in-memory fakes for the tactical layer tests.

FakeGame        -- GameView over a dict of UnitSnapshots and a sparse terrain map
FakeAwareness   -- Awareness answering from the FakeGame's enemy units
RecordingOrders -- OrderSink that records every order_units call
"""
from __future__ import annotations

import math
from dataclasses import replace

import pytest

from skirmish.batcher import ActionBatcher
from skirmish.mission.base import TickContext
from skirmish.world import ScoutTarget, TerrainType, UnitSnapshot

ME = "me"
ENEMY = "enemy"


class FakeGame:
    """Mutable world: tests add, move and kill units between ticks."""

    def __init__(self, map_size: tuple[int, int] = (128, 128), start: tuple[float, float] = (10.0, 10.0)):
        self.current_tick = 0
        self.player_name = ME
        self.start_location = start
        self.map_size = map_size
        self.units: dict[int, UnitSnapshot] = {}
        self.extra_structures: set[str] = set()
        self.terrain: dict[tuple[int, int], TerrainType] = {}
        self.visible: set[tuple[int, int]] = set()
        self.starts: dict[str, tuple[float, float]] = {ME: start}
        self.alliances: set[frozenset[str]] = set()
        self.rolls: list[int] = []
        self._next_id = 1

    # -- test helpers --

    def add(self, type_name: str, pos: tuple[float, float], owner: str = ME, **kwargs) -> UnitSnapshot:
        unit = UnitSnapshot(self._next_id, type_name, owner, pos, **kwargs)
        self.units[unit.unit_id] = unit
        self._next_id += 1
        return unit

    def add_many(self, type_name: str, positions, owner: str = ME) -> list[UnitSnapshot]:
        return [self.add(type_name, p, owner) for p in positions]

    def move(self, unit_id: int, pos: tuple[float, float]) -> None:
        self.units[unit_id] = replace(self.units[unit_id], position=pos)

    def kill(self, unit_id: int) -> None:
        self.units.pop(unit_id, None)

    def set_terrain(self, cells, terrain: TerrainType) -> None:
        for c in cells:
            self.terrain[c] = terrain

    def fill_water(self, x0: int, y0: int, x1: int, y1: int) -> None:
        self.set_terrain(((x, y) for x in range(x0, x1 + 1) for y in range(y0, y1 + 1)), TerrainType.WATER)

    def add_player(self, name: str, start: tuple[float, float], allied: bool = False) -> None:
        self.starts[name] = start
        if allied:
            self.alliances.add(frozenset((ME, name)))

    # -- GameView --

    def get_unit(self, unit_id):
        return self.units.get(unit_id)

    def own_unit_ids(self):
        return sorted(uid for uid, u in self.units.items() if u.owner == ME)

    def visible_enemy_ids(self):
        return sorted(uid for uid, u in self.units.items() if u.owner == ENEMY)

    def own_structure_types(self):
        found = {u.type_name for u in self.units.values() if u.owner == ME and u.is_structure}
        return found | self.extra_structures

    def terrain_at(self, x, y):
        w, h = self.map_size
        if not (0 <= x < w and 0 <= y < h):
            return None
        return self.terrain.get((x, y), TerrainType.LAND)

    def is_visible(self, x, y):
        return (x, y) in self.visible

    def players(self):
        return list(self.starts)

    def player_start_location(self, player):
        return self.starts.get(player)

    def are_allied(self, player, other):
        return player == other or frozenset((player, other)) in self.alliances

    def random_int(self, lo, hi):
        if self.rolls:
            return self.rolls.pop(0)
        return lo


class FakeAwareness:

    def __init__(self, game: FakeGame, rally: tuple[float, float] = (20.0, 20.0)):
        self.game = game
        self.rally = rally
        self.scout_targets: list[ScoutTarget] = []
        self.visibility: float | None = 0.1

    def hostiles_near(self, point, radius):
        found = []
        for uid, u in self.game.units.items():
            if u.owner != ENEMY:
                continue
            d = math.hypot(u.position[0] - point[0], u.position[1] - point[1])
            if d <= radius:
                found.append((uid, d))
        return sorted(found, key=lambda p: (p[1], p[0]))

    def rally_point(self):
        return self.rally

    def has_scout_targets(self):
        return bool(self.scout_targets)

    def next_scout_target(self):
        if not self.scout_targets:
            return None
        return self.scout_targets.pop(0)

    def overall_visibility(self):
        return self.visibility


class RecordingOrders:

    def __init__(self):
        self.calls: list[tuple[tuple[int, ...], object, object, object]] = []

    def order_units(self, unit_ids, kind, point=None, target_id=None):
        self.calls.append((tuple(unit_ids), kind, point, target_id))

    def for_unit(self, unit_id: int):
        return [c for c in self.calls if unit_id in c[0]]


@pytest.fixture
def game():
    return FakeGame()


@pytest.fixture
def awareness(game):
    return FakeAwareness(game)


@pytest.fixture
def batcher():
    return ActionBatcher()


@pytest.fixture
def orders():
    return RecordingOrders()


@pytest.fixture
def ctx(game, awareness, batcher):
    return TickContext(game, awareness, batcher)

"""ScoutingMission — keep one cheap, fast unit looking at unexplored ground.

Targets come from the awareness layer, or from a local flood search for
unexplored tiles of the same terrain class around the last target reached.
A target is dropped after too many lost scouts or too long without getting
closer; land scouts that stop moving hand the job to a destroyer.
"""

from __future__ import annotations

from collections import deque

from loguru import logger

from skirmish.batcher import attack_move
from skirmish.geometry import Point, clamp_to_map, distance, tile
from skirmish.mission.actions import Disband, MissionAction, MissionKind, Noop, request_units
from skirmish.mission.attack import AttackMission
from skirmish.mission.base import Mission, TickContext
from skirmish.mission.factory import MissionFactory
from skirmish.units import scout_type_ids
from skirmish.world import GameView, ScoutTarget, TerrainType, UnitSnapshot

SCOUT_PRIORITY = 10.0
SCOUT_MISSION_NAME = "globalScout"
SCOUT_MOVE_COOLDOWN = 30
MAX_ATTEMPTS_PER_TARGET = 5
MAX_TICKS_PER_TARGET = 600
STUCK_THRESHOLD = 150
MIN_MOVEMENT = 2.0
LOCAL_SEARCH_RADIUS = 20
VISIBILITY_DONE = 0.9
SCOUT_COOLDOWN = 300

_DIRECTIONS = [(1, 0), (-1, 0), (0, 1), (0, -1), (1, 1), (-1, -1), (1, -1), (-1, 1)]


def _is_water(game: GameView, p: tuple[int, int]) -> bool | None:
    terrain = game.terrain_at(p[0], p[1])
    if terrain is None:
        return None
    return terrain is TerrainType.WATER


class ScoutingMission(Mission):
    kind = MissionKind.SCOUTING

    def __init__(self, name: str = SCOUT_MISSION_NAME, priority: float = SCOUT_PRIORITY) -> None:
        super().__init__(name, priority)
        self.scout_target: tuple[int, int] | None = None
        self.target_is_permanent = False
        self.water = False
        self.attempts = 0
        self._target_refreshed_at = 0
        self._last_move_command: int | None = None
        self._min_distance: float | None = None
        self._had_scout = False
        self._last_positions: dict[int, Point] = {}
        self._stuck_since: dict[int, int] = {}
        self._explored: dict[bool, set[tuple[int, int]]] = {False: set(), True: set()}

    @property
    def scout_types(self) -> list[str]:
        return scout_type_ids(water=self.water)

    def set_scout_target(self, ctx: TickContext, target: ScoutTarget | tuple[int, int] | None) -> None:
        self.attempts = 0
        self._target_refreshed_at = ctx.tick
        self._min_distance = None
        if target is None:
            self.scout_target = None
            self.target_is_permanent = False
            self.water = False
            return
        if isinstance(target, ScoutTarget):
            self.scout_target = tile(target.location)
            self.target_is_permanent = target.permanent
        else:
            self.scout_target = target
            self.target_is_permanent = False
        self.water = bool(_is_water(ctx.game, self.scout_target))
        logger.debug(f"Scout {self.name}: new {'water' if self.water else 'land'} target {self.scout_target}")

    def _update(self, ctx: TickContext, units: list[UnitSnapshot]) -> MissionAction:
        tick = ctx.tick
        visibility = ctx.awareness.overall_visibility() or 0.0
        if visibility > VISIBILITY_DONE:
            logger.info(f"Scout {self.name}: map {visibility:.0%} visible, done")
            return Disband(None)

        scouts = [u for u in units if u.type_name in self.scout_types]
        if not scouts:
            if self.scout_target is not None and self._had_scout:
                self.attempts += 1
                self._had_scout = False
                logger.debug(f"Scout {self.name}: scout lost ({self.attempts}/{MAX_ATTEMPTS_PER_TARGET})")
            return request_units(self.scout_types, self.priority, max_units=1)

        if self.scout_target is None:
            target = ctx.awareness.next_scout_target()
            if target is None:
                logger.info(f"Scout {self.name}: no scout targets left")
                return Disband(None)
            self.set_scout_target(ctx, target)
            return Noop()

        self._had_scout = True
        if not self.target_is_permanent:
            if not self.water and self._all_stuck(scouts, tick):
                logger.info(f"Scout {self.name}: land scouts cannot reach {self.scout_target}, switching to water")
                self.water = True
                self._had_scout = False
                self._clear_stuck_tracking()
                for s in scouts:
                    self.remove_unit(s.unit_id)
                return request_units(self.scout_types, self.priority, max_units=1)
            if self.attempts > MAX_ATTEMPTS_PER_TARGET or tick > self._target_refreshed_at + MAX_TICKS_PER_TARGET:
                logger.debug(f"Scout {self.name}: giving up on {self.scout_target}")
                self.set_scout_target(ctx, None)
                return Noop()

        terrain_water = _is_water(ctx.game, self.scout_target)
        if terrain_water is None or terrain_water != self.water:
            logger.debug(f"Scout {self.name}: target {self.scout_target} terrain mismatch, dropping")
            self.set_scout_target(ctx, None)
            return Noop()

        if self._last_move_command is None or tick > self._last_move_command + SCOUT_MOVE_COOLDOWN:
            self._last_move_command = tick
            point = clamp_to_map((float(self.scout_target[0]), float(self.scout_target[1])), ctx.game.map_size)
            for s in scouts:
                ctx.batcher.push(attack_move(s.unit_id, point))
            nearest = min(distance(s.position, point) for s in scouts)
            if self._min_distance is None or nearest < self._min_distance:
                self._min_distance = nearest
                self._target_refreshed_at = tick
                self.attempts = 0

        if ctx.game.is_visible(*self.scout_target):
            self._explored[self.water].add(self.scout_target)
            nxt = self.find_next_target(ctx.game, self.scout_target, self.water)
            if nxt is not None:
                water = self.water
                self.set_scout_target(ctx, nxt)
                self.water = water
            else:
                self.set_scout_target(ctx, None)
        return Noop()

    def _all_stuck(self, scouts: list[UnitSnapshot], tick: int) -> bool:
        all_stuck = True
        for s in scouts:
            last = self._last_positions.get(s.unit_id)
            if last is not None and distance(last, s.position) < MIN_MOVEMENT:
                self._stuck_since.setdefault(s.unit_id, tick)
            else:
                if last is not None:
                    self._stuck_since.pop(s.unit_id, None)
                all_stuck = False
            # Only compare against the last real movement
            if last is None or distance(last, s.position) >= MIN_MOVEMENT:
                self._last_positions[s.unit_id] = s.position
        if not all_stuck:
            return False
        since = min(self._stuck_since[s.unit_id] for s in scouts)
        return tick - since >= STUCK_THRESHOLD

    def _clear_stuck_tracking(self) -> None:
        self._last_positions.clear()
        self._stuck_since.clear()

    def find_next_target(self, game: GameView, origin: tuple[int, int], water: bool) -> tuple[int, int] | None:
        """Nearest unexplored, unseen tile of the same terrain class near *origin*."""
        width, height = game.map_size
        explored = self._explored[water]
        seen = {origin}
        queue = deque([origin])
        candidates: list[tuple[int, int]] = []
        while queue:
            pos = queue.popleft()
            terrain_water = _is_water(game, pos)
            if terrain_water is None or terrain_water != water:
                continue
            if pos not in explored and not game.is_visible(*pos):
                candidates.append(pos)
            for dx, dy in _DIRECTIONS:
                nxt = (pos[0] + dx, pos[1] + dy)
                if not (0 <= nxt[0] < width and 0 <= nxt[1] < height):
                    continue
                if abs(nxt[0] - origin[0]) > LOCAL_SEARCH_RADIUS or abs(nxt[1] - origin[1]) > LOCAL_SEARCH_RADIUS:
                    continue
                if nxt not in seen:
                    seen.add(nxt)
                    queue.append(nxt)
        if not candidates:
            return None
        return min(candidates, key=lambda p: (p[0] - origin[0]) ** 2 + (p[1] - origin[1]) ** 2)

    def debug_text(self) -> str:
        kind = "water" if self.water else "land"
        return f"{self.name}: scouting {kind} target={self.scout_target} attempts={self.attempts}"


class ScoutingMissionFactory(MissionFactory):

    def __init__(self, last_scout_at: int = -SCOUT_COOLDOWN) -> None:
        self.last_scout_at = last_scout_at

    @property
    def name(self) -> str:
        return "ScoutingMissionFactory"

    def maybe_create_missions(self, ctx: TickContext, controller) -> None:
        if ctx.tick < self.last_scout_at + SCOUT_COOLDOWN:
            return
        if not ctx.awareness.has_scout_targets():
            return
        if controller.add_mission(ScoutingMission(), ctx):
            self.last_scout_at = ctx.tick

    def on_mission_failed(self, ctx: TickContext, mission: Mission, reason, controller) -> None:
        if ctx.tick < self.last_scout_at + SCOUT_COOLDOWN:
            return
        if not ctx.awareness.has_scout_targets():
            return
        if isinstance(mission, AttackMission):
            if controller.add_mission(ScoutingMission(), ctx):
                self.last_scout_at = ctx.tick

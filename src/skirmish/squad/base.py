"""Squad plumbing shared by the combat and naval squads.

A squad turns a mission's unit list into per-unit orders.  It keeps the
last order sent to each unit so it only speaks when something changed, and
a per-unit cache arena that is evicted as soon as a unit leaves.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from skirmish.batcher import ActionBatcher, BatchableAction
from skirmish.geometry import Point, centroid, clamp_to_map, distance, max_spread
from skirmish.squad.micro import formation_offset, move_micro
from skirmish.squad.stuck import StuckDetector, find_recovery_point
from skirmish.units import MovementDomain
from skirmish.world import OrderKind, TerrainType, UnitSnapshot

if TYPE_CHECKING:
    from skirmish.mission.base import TickContext

COMMAND_INTERVAL = 15
GATHER_RATIO = 2.0
MIN_GATHER_RADIUS = 3.0
MAX_GATHER_RADIUS = 6.0

_ARRIVED_DISTANCE = 1.5


class SquadState(Enum):
    GATHERING = "gathering"
    ATTACKING = "attacking"
    RETREATING = "retreating"
    EXPLORING = "exploring"


def gather_radius(unit_count: int, extra: float) -> float:
    """Spread a squad of *unit_count* may have: ``sqrt(n) * ratio + extra``."""
    return math.sqrt(unit_count) * GATHER_RATIO + extra


@dataclass
class UnitCache:
    """Transient per-unit state held by a squad."""
    stuck: StuckDetector = field(default_factory=StuckDetector)
    last_engaged: int | None = None
    idle_since: int | None = None


class UnitCacheArena:
    """Per-unit caches keyed by unit id, with explicit eviction."""

    def __init__(self) -> None:
        self._entries: dict[int, UnitCache] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, unit_id: int) -> bool:
        return unit_id in self._entries

    def get(self, unit_id: int) -> UnitCache:
        entry = self._entries.get(unit_id)
        if entry is None:
            entry = self._entries[unit_id] = UnitCache()
        return entry

    def evict(self, keep: set[int]) -> list[int]:
        gone = [uid for uid in self._entries if uid not in keep]
        for uid in gone:
            del self._entries[uid]
        return gone

    def items(self):
        return self._entries.items()


class Squad(ABC):
    """Base squad: state, order de-duplication, gather maths, stuck recovery."""

    def __init__(self, name: str, target_area: Point | None = None) -> None:
        self.name = name
        self.state = SquadState.GATHERING
        self.target_area = target_area
        self.gather_point: Point | None = None  # overrides the centroid while gathering
        self.cache = UnitCacheArena()
        self._last_order: dict[int, BatchableAction] = {}
        self._last_command: int | None = None
        self.debug_last_target = ""

    # -- state --

    def set_state(self, state: SquadState, detail: str = "") -> None:
        if state is self.state:
            return
        logger.debug(f"Squad {self.name}: {self.state.value} -> {state.value} {detail}".rstrip())
        self.state = state
        if state is not SquadState.GATHERING:
            self.gather_point = None

    def set_target_area(self, point: Point) -> None:
        self.target_area = point

    def retreat(self, rally: Point) -> None:
        self.target_area = rally
        self.set_state(SquadState.RETREATING)

    def force_regather(self, point: Point | None = None) -> None:
        self.set_state(SquadState.GATHERING, "(forced)")
        self.gather_point = point

    # -- bookkeeping --

    def command_due(self, tick: int) -> bool:
        return self._last_command is None or tick - self._last_command >= COMMAND_INTERVAL

    def mark_commanded(self, tick: int) -> None:
        self._last_command = tick

    def last_order(self, unit_id: int) -> BatchableAction | None:
        return self._last_order.get(unit_id)

    def submit_if_new(self, batcher: ActionBatcher, action: BatchableAction) -> bool:
        if self._last_order.get(action.unit_id) == action:
            return False
        batcher.push(action)
        self._last_order[action.unit_id] = action
        return True

    def sync_units(self, units: list[UnitSnapshot], tick: int) -> None:
        """Drop caches of departed units and sample positions of the rest."""
        keep = {u.unit_id for u in units}
        for uid in self.cache.evict(keep):
            self._last_order.pop(uid, None)
        for u in units:
            self.cache.get(u.unit_id).stuck.sample(u.position, tick)

    # -- movement helpers --

    @staticmethod
    def spread(units: list[UnitSnapshot]) -> tuple[Point | None, float]:
        center = centroid(u.position for u in units)
        if center is None:
            return None, 0.0
        return center, max_spread([u.position for u in units], center)

    def gather(self, ctx: TickContext, units: list[UnitSnapshot], center: Point) -> None:
        point = clamp_to_map(self.gather_point or center, ctx.game.map_size)
        for u in units:
            if not self.recover_if_stuck(ctx, u):
                self.submit_if_new(ctx.batcher, move_micro(u, point))

    def hold(self, ctx: TickContext, units: list[UnitSnapshot], point: Point) -> None:
        """Keep *units* in a ring around *point* without changing state."""
        self.sync_units(units, ctx.tick)
        if not units or not self.command_due(ctx.tick):
            return
        self.mark_commanded(ctx.tick)
        n = len(units)
        for i, u in enumerate(units):
            dx, dy = formation_offset(i, n)
            spot = clamp_to_map((point[0] + dx, point[1] + dy), ctx.game.map_size)
            if not self.recover_if_stuck(ctx, u):
                self.submit_if_new(ctx.batcher, move_micro(u, spot))

    def recover_if_stuck(self, ctx: TickContext, unit: UnitSnapshot) -> bool:
        """Issue an escalating recovery move if *unit* has stalled on its way.

        Returns True when a recovery order was submitted.
        """
        if unit.is_air or unit.domain is MovementDomain.STATIONARY:
            return False
        last = self._last_order.get(unit.unit_id)
        if last is None or last.kind not in (OrderKind.MOVE, OrderKind.ATTACK_MOVE) or last.point is None:
            return False
        if distance(unit.position, last.point) <= _ARRIVED_DISTANCE:
            return False
        detector = self.cache.get(unit.unit_id).stuck
        if not detector.is_stuck():
            return False

        attempt = detector.next_attempt()
        goal = self.target_area or last.point
        terrain = TerrainType.WATER if unit.is_naval else TerrainType.LAND
        point = find_recovery_point(
            ctx.game, unit.position, goal, attempt, terrain,
            avoid=[p for p in (last.point, detector.last_recovery_target) if p is not None],
        )
        if point is None or point == last.point:
            return False
        point = clamp_to_map(point, ctx.game.map_size)
        logger.info(f"Squad {self.name}: unit {unit.unit_id} stuck at {unit.position}, attempt {attempt} -> {point}")
        detector.last_recovery_target = point
        detector.reset_history()
        self.submit_if_new(ctx.batcher, move_micro(unit, point))
        return True

    # -- contract --

    @abstractmethod
    def update(self, ctx: TickContext, units: list[UnitSnapshot]) -> None:
        """Issue this tick's orders for *units*."""

    def debug_text(self) -> str:
        return f"{self.state.value}, target: {self.debug_last_target}"

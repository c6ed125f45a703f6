"""CombatSquad — land attack group driven by an attack or retreat mission.

Gathering:  pull everyone to the centroid until the spread is small enough.
Attacking:  each unit picks the best hostile in scan range; idle units
            support engaged allies, search around, or hold formation.
Exploring:  every unit idle for too long near the target; fan out on
            radial search moves until someone sees a hostile.
Retreating: move to the rally point and ignore enemies.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from skirmish.geometry import Point, clamp_to_map, distance
from skirmish.squad.base import (
    MAX_GATHER_RADIUS,
    MIN_GATHER_RADIUS,
    Squad,
    SquadState,
    gather_radius,
)
from skirmish.squad.micro import attack_micro, best_target, formation_offset, move_micro
from skirmish.world import UnitSnapshot

if TYPE_CHECKING:
    from skirmish.mission.base import TickContext

SCAN_RADIUS = 15.0
ALLY_ENGAGE_WINDOW = 90
IDLE_TIMEOUT = 300
EXPLORE_RADIUS = 12.0
EXPLORE_TRIGGER_DISTANCE = 15.0


class CombatSquad(Squad):
    """Gather, then fight around ``target_area``."""

    def __init__(self, name: str, target_area: Point | None = None) -> None:
        super().__init__(name, target_area)
        self.last_engaged_tick: int | None = None
        self.formed_at: int | None = None

    def update(self, ctx: TickContext, units: list[UnitSnapshot]) -> None:
        tick = ctx.tick
        self.sync_units(units, tick)
        if not units or not self.command_due(tick):
            return
        self.mark_commanded(tick)

        center, spread = self.spread(units)
        if center is None:
            return

        if self.state is SquadState.RETREATING:
            self._retreat(ctx, units)
            return

        n = len(units)
        if self.state is SquadState.GATHERING:
            if spread <= gather_radius(n, MIN_GATHER_RADIUS):
                self.set_state(SquadState.ATTACKING, f"(spread {spread:.1f})")
                self.formed_at = tick
            else:
                self.gather(ctx, units, center)
                return
        elif spread > gather_radius(n, MAX_GATHER_RADIUS):
            self.set_state(SquadState.GATHERING, f"(spread {spread:.1f})")
            self.gather(ctx, units, center)
            return

        self._fight(ctx, units, center)

    def _retreat(self, ctx: TickContext, units: list[UnitSnapshot]) -> None:
        if self.target_area is None:
            return
        n = len(units)
        for i, u in enumerate(units):
            dx, dy = formation_offset(i, n)
            point = clamp_to_map((self.target_area[0] + dx, self.target_area[1] + dy), ctx.game.map_size)
            if not self.recover_if_stuck(ctx, u):
                self.submit_if_new(ctx.batcher, move_micro(u, point))
        self.debug_last_target = f"rally @{self.target_area[0]:.0f},{self.target_area[1]:.0f}"

    def _hostiles_near(self, ctx: TickContext, point: Point) -> list[UnitSnapshot]:
        found = []
        for uid, _d in ctx.awareness.hostiles_near(point, SCAN_RADIUS):
            unit = ctx.game.get_unit(uid)
            if unit is not None:
                found.append(unit)
        return found

    def _fight(self, ctx: TickContext, units: list[UnitSnapshot], center: Point) -> None:
        tick = ctx.tick
        target_area = self.target_area or center
        idle: list[tuple[int, UnitSnapshot]] = []
        engaged_any = False

        for i, u in enumerate(units):
            cache = self.cache.get(u.unit_id)
            target = best_target(u, self._hostiles_near(ctx, u.position))
            if target is not None:
                cache.last_engaged = tick
                cache.idle_since = None
                engaged_any = True
                self.last_engaged_tick = tick
                self.submit_if_new(ctx.batcher, attack_micro(u, target))
                self.debug_last_target = f"unit {target.unit_id}"
            else:
                if cache.idle_since is None:
                    cache.idle_since = tick
                idle.append((i, u))

        if engaged_any and self.state is SquadState.EXPLORING:
            self.set_state(SquadState.ATTACKING, "(contact)")
        elif not engaged_any and self._squad_idle(tick) and distance(center, target_area) <= EXPLORE_TRIGGER_DISTANCE:
            self.set_state(SquadState.EXPLORING)

        engaged = [u for u in units if self._engaged_within(u.unit_id, tick)]
        n = len(units)
        for i, u in idle:
            if self.recover_if_stuck(ctx, u):
                continue
            cache = self.cache.get(u.unit_id)
            ally = min(
                (a for a in engaged if a.unit_id != u.unit_id),
                key=lambda a: distance(a.position, u.position),
                default=None,
            )
            if ally is not None:
                point = ally.position
            elif self.state is SquadState.EXPLORING or tick - cache.idle_since >= IDLE_TIMEOUT:
                point = self._search_point(target_area, i, n, tick)
            else:
                dx, dy = formation_offset(i, n)
                point = (target_area[0] + dx, target_area[1] + dy)
            point = clamp_to_map(point, ctx.game.map_size)
            self.submit_if_new(ctx.batcher, move_micro(u, point, engage=True))
        if idle and not engaged_any:
            self.debug_last_target = f"@{target_area[0]:.0f},{target_area[1]:.0f}"

    def _engaged_within(self, unit_id: int, tick: int) -> bool:
        last = self.cache.get(unit_id).last_engaged
        return last is not None and tick - last <= ALLY_ENGAGE_WINDOW

    def _squad_idle(self, tick: int) -> bool:
        since = self.last_engaged_tick if self.last_engaged_tick is not None else self.formed_at
        return since is not None and tick - since >= IDLE_TIMEOUT

    @staticmethod
    def _search_point(center: Point, index: int, count: int, tick: int) -> Point:
        """Radial search spoke for unit *index*, rotating every idle period."""
        turn = (tick // IDLE_TIMEOUT) * (math.pi / 4)
        angle = 2.0 * math.pi * index / max(count, 1) + turn
        return (center[0] + math.cos(angle) * EXPLORE_RADIUS, center[1] + math.sin(angle) * EXPLORE_RADIUS)

    def engaged_recently(self, tick: int, window: int = ALLY_ENGAGE_WINDOW) -> bool:
        return self.last_engaged_tick is not None and tick - self.last_engaged_tick <= window

"""NavalSquad — ships gather, then sweep the target area.

Only ships and amphibious combatants are commanded.  Hostiles are scanned
around the shortest-ranged ship so the fleet engages at the pace of its
weakest gun.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from skirmish.geometry import clamp_to_map, distance
from skirmish.squad.base import MAX_GATHER_RADIUS, MIN_GATHER_RADIUS, Squad, SquadState, gather_radius
from skirmish.squad.micro import attack_micro, best_target, move_micro
from skirmish.world import UnitSnapshot

if TYPE_CHECKING:
    from skirmish.mission.base import TickContext

ATTACK_SCAN_AREA = 15.0
_DEFAULT_RANGE = 5.0


def _range_of(unit: UnitSnapshot) -> float:
    return unit.weapon_range or _DEFAULT_RANGE


class NavalSquad(Squad):

    def update(self, ctx: TickContext, units: list[UnitSnapshot]) -> None:
        tick = ctx.tick
        self.sync_units(units, tick)
        ships = [u for u in units if u.is_naval and u.is_combatant]
        if not ships or not self.command_due(tick):
            return
        self.mark_commanded(tick)

        center, spread = self.spread(ships)
        if center is None:
            return

        if self.state is SquadState.RETREATING:
            point = clamp_to_map(self.target_area or ctx.game.start_location, ctx.game.map_size)
            for u in ships:
                if not self.recover_if_stuck(ctx, u):
                    self.submit_if_new(ctx.batcher, move_micro(u, point))
            return

        n = len(ships)
        if self.state is SquadState.GATHERING:
            limit = gather_radius(n, MIN_GATHER_RADIUS)
            at_point = self.gather_point is None or distance(center, self.gather_point) <= limit
            if spread <= limit and at_point:
                self.set_state(SquadState.ATTACKING, f"(spread {spread:.1f})")
            else:
                self.gather(ctx, ships, center)
                return
        elif spread > gather_radius(n, MAX_GATHER_RADIUS):
            self.set_state(SquadState.GATHERING, f"(spread {spread:.1f})")
            return

        target_point = self.target_area or ctx.game.start_location
        leader = min(ships, key=_range_of)
        hostiles = []
        for uid, _d in ctx.awareness.hostiles_near(leader.position, ATTACK_SCAN_AREA):
            h = ctx.game.get_unit(uid)
            if h is not None:
                hostiles.append(h)

        for u in ships:
            target = best_target(u, hostiles, naval=True)
            if target is not None:
                self.submit_if_new(ctx.batcher, attack_micro(u, target))
                self.debug_last_target = f"unit {target.unit_id}"
            elif not self.recover_if_stuck(ctx, u):
                point = clamp_to_map(target_point, ctx.game.map_size)
                self.submit_if_new(ctx.batcher, move_micro(u, point))
                self.debug_last_target = f"@{point[0]:.0f},{point[1]:.0f}"


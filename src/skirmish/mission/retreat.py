"""RetreatMission — walk a group of survivors back to the rally point."""

from __future__ import annotations

from typing import Iterable

from skirmish.geometry import Point, distance
from skirmish.mission.actions import Disband, MissionAction, MissionKind, Noop
from skirmish.mission.base import Mission, TickContext
from skirmish.squad.combat import CombatSquad
from skirmish.world import UnitSnapshot

RETREAT_PRIORITY = 1000.0
RETREAT_TIMEOUT = 240
ARRIVAL_DISTANCE = 10.0


class RetreatMission(Mission):
    """Locked from the start; never requests units."""

    kind = MissionKind.RETREAT

    def __init__(self, name: str, rally: Point, unit_ids: Iterable[int]) -> None:
        super().__init__(name, RETREAT_PRIORITY, initial_unit_ids=unit_ids)
        self.rally = rally
        self.squad = CombatSquad(name, rally)
        self.squad.retreat(rally)

    @property
    def state(self):
        return self.squad.state

    def is_units_locked(self) -> bool:
        return True

    def _update(self, ctx: TickContext, units: list[UnitSnapshot]) -> MissionAction:
        if not units:
            return Disband(None)
        if self.created_at is not None and ctx.tick - self.created_at >= RETREAT_TIMEOUT:
            return Disband(None)
        center = self.center_of_mass(units)
        if center is not None and distance(center, self.rally) <= ARRIVAL_DISTANCE:
            return Disband(None)
        self.squad.update(ctx, units)
        return Noop()

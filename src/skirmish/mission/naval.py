"""NavalMission — build a fleet, sail it at a water target, pull out if outgunned.

The first thing a naval mission does is ask for a single pathfinder
destroyer at elevated priority.  It then fills its composition (never fewer
than ``MIN_NAVAL_FLEET`` ships) at the rally point and attacks once enough
ships have arrived and they are not scattered.  Retreats end with a
disband carrying the reason that caused them.
"""

from __future__ import annotations

from enum import Enum

from loguru import logger

from skirmish.geometry import Point, distance
from skirmish.mission.actions import (
    Disband,
    DisbandReason,
    MissionAction,
    MissionKind,
    Noop,
    RequestUnits,
    missing_units,
    request_units,
)
from skirmish.mission.base import Mission, TickContext
from skirmish.mission.compositions import naval_composition
from skirmish.mission.factory import MissionFactory
from skirmish.squad.base import SquadState
from skirmish.squad.naval import NavalSquad
from skirmish.units import MovementDomain, get_type
from skirmish.world import UnitSnapshot

NAVAL_CHECK_INTERVAL = 300
NAVAL_MISSION_INITIAL_PRIORITY = 50.0
NAVAL_ATTACK_RADIUS = 15.0
NAVAL_UNIT_REQUEST_PRIORITY = 60.0
PATHFINDER_PRIORITY_BONUS = 10.0
NAVAL_TARGET_SEARCH_RADIUS = 100.0

MIN_NAVAL_FLEET = 3
FORCE_ATTACK_THRESHOLD = 0.8
NAVAL_GATHER_TIMEOUT = 450
MAX_SCATTER_DISTANCE = 20.0
MAX_SCATTER_RATIO = 0.6

MAX_MISSION_DURATION = 3000
PROGRESS_SAMPLE_INTERVAL = 150
PROGRESS_WINDOW = 600
MIN_PROGRESS_DISTANCE = 5.0

RETREAT_ARRIVAL_DISTANCE = 10.0
RETREAT_TIMEOUT = 300


class NavalState(Enum):
    PREPARING = "preparing"
    ATTACKING = "attacking"
    RETREATING = "retreating"


class NavalMission(Mission):
    kind = MissionKind.NAVAL

    def __init__(
        self,
        name: str,
        rally: Point,
        target: Point,
        composition: dict[str, int],
        priority: float = NAVAL_MISSION_INITIAL_PRIORITY,
        radius: float = NAVAL_ATTACK_RADIUS,
    ) -> None:
        super().__init__(name, priority)
        self.rally = rally
        self.target = target
        self.radius = radius
        self.composition = dict(composition)
        shortfall = MIN_NAVAL_FLEET - sum(self.composition.values())
        if shortfall > 0:
            self.composition["DEST"] = self.composition.get("DEST", 0) + shortfall
        self.state = NavalState.PREPARING
        self.squad = NavalSquad(name, target)
        self._requested_pathfinder = False
        self._gather_started: int | None = None
        self._active_since: int | None = None
        self._last_hostile_seen: int | None = None
        self._retreat_started: int | None = None
        self._retreat_reason: DisbandReason | None = None
        self._progress: list[tuple[int, Point]] = []

    def is_units_locked(self) -> bool:
        return self.state is not NavalState.PREPARING

    @property
    def fleet_size(self) -> int:
        return sum(self.composition.values())

    def _update(self, ctx: TickContext, units: list[UnitSnapshot]) -> MissionAction:
        ships = [u for u in units if u.is_naval]
        if not self._requested_pathfinder:
            self._requested_pathfinder = True
            return request_units(["DEST"], NAVAL_UNIT_REQUEST_PRIORITY + PATHFINDER_PRIORITY_BONUS)
        if self.state is NavalState.PREPARING:
            return self._prepare(ctx, ships)
        if self.state is NavalState.ATTACKING:
            return self._attack(ctx, ships)
        return self._retreat(ctx, ships)

    def _scattered(self, ships: list[UnitSnapshot]) -> bool:
        center = self.center_of_mass(ships)
        if center is None:
            return False
        far = sum(1 for s in ships if distance(s.position, center) > MAX_SCATTER_DISTANCE)
        return far / len(ships) > MAX_SCATTER_RATIO

    def _request_missing(self, ships: list[UnitSnapshot]) -> MissionAction:
        missing = missing_units(self.composition, self.type_counts(ships))
        if not missing:
            return Noop()
        return RequestUnits(missing, NAVAL_UNIT_REQUEST_PRIORITY)

    # -- preparing --

    def _prepare(self, ctx: TickContext, ships: list[UnitSnapshot]) -> MissionAction:
        tick = ctx.tick
        if self._gather_started is None:
            self._gather_started = tick
        self.squad.hold(ctx, ships, self.rally)

        n = len(ships)
        ready = n >= self.fleet_size * FORCE_ATTACK_THRESHOLD or tick - self._gather_started > NAVAL_GATHER_TIMEOUT
        if n >= MIN_NAVAL_FLEET and ready:
            if self._scattered(ships):
                logger.debug(f"Naval {self.name}: fleet scattered, regathering at rally")
                self.squad.force_regather(self.rally)
            else:
                self._activate(tick)
                return Noop()
        return self._request_missing(ships)

    def _activate(self, tick: int) -> None:
        logger.info(f"Naval {self.name}: attacking {self.target}")
        self.state = NavalState.ATTACKING
        self._active_since = tick
        self._last_hostile_seen = tick
        self._progress = []
        self.squad.set_target_area(self.target)

    # -- attacking --

    def _attack(self, ctx: TickContext, ships: list[UnitSnapshot]) -> MissionAction:
        tick = ctx.tick
        if ships and self.squad.state is SquadState.ATTACKING and self._scattered(ships):
            self.squad.force_regather()
        self.squad.update(ctx, ships)

        hostiles = []
        for hid, _d in ctx.awareness.hostiles_near(self.target, self.radius):
            hostile = ctx.game.get_unit(hid)
            if hostile is not None:
                hostiles.append(hostile)
        if len(hostiles) > 2 * len(ships):
            return self._start_retreat(tick, DisbandReason.DEFENCE_TOO_STRONG, f"{len(hostiles)} hostiles vs {len(ships)} ships")
        if hostiles:
            self._last_hostile_seen = tick
        elif tick - self._last_hostile_seen >= NAVAL_CHECK_INTERVAL:
            logger.info(f"Naval {self.name}: no targets near {self.target}")
            return Disband(DisbandReason.NO_TARGETS)

        if tick - self._active_since > MAX_MISSION_DURATION:
            return self._start_retreat(tick, None, "mission timed out")
        if self._no_progress(tick, ships):
            return self._start_retreat(tick, None, "fleet is not making progress")

        if len(ships) < MIN_NAVAL_FLEET:
            return self._request_missing(ships)
        return Noop()

    def _no_progress(self, tick: int, ships: list[UnitSnapshot]) -> bool:
        center = self.center_of_mass(ships)
        if center is None or distance(center, self.target) <= self.radius:
            self._progress.clear()
            return False
        if not self._progress or tick - self._progress[-1][0] >= PROGRESS_SAMPLE_INTERVAL:
            self._progress.append((tick, center))
        while len(self._progress) > 1 and tick - self._progress[1][0] >= PROGRESS_WINDOW:
            self._progress.pop(0)
        oldest_tick, oldest = self._progress[0]
        return tick - oldest_tick >= PROGRESS_WINDOW and distance(oldest, center) < MIN_PROGRESS_DISTANCE

    # -- retreating --

    def _start_retreat(self, tick: int, reason: DisbandReason | None, why: str) -> MissionAction:
        logger.info(f"Naval {self.name}: retreating ({why})")
        self.state = NavalState.RETREATING
        self._retreat_started = tick
        self._retreat_reason = reason
        self.squad.retreat(self.rally)
        return Noop()

    def _retreat(self, ctx: TickContext, ships: list[UnitSnapshot]) -> MissionAction:
        if not ships or ctx.tick - self._retreat_started >= RETREAT_TIMEOUT:
            return Disband(self._retreat_reason)
        center = self.center_of_mass(ships)
        if center is not None and distance(center, self.rally) <= RETREAT_ARRIVAL_DISTANCE:
            return Disband(self._retreat_reason)
        self.squad.update(ctx, ships)
        return Noop()

    def debug_text(self) -> str:
        return f"{self.name}: {self.state.name} ships={len(self.unit_ids)} {self.squad.debug_text()}"


def owns_shipyard(structures: set[str]) -> bool:
    for type_id in structures:
        t = get_type(type_id)
        if t is not None and t.is_shipyard:
            return True
    return False


class NavalMissionFactory(MissionFactory):
    handles = MissionKind.NAVAL

    def __init__(self) -> None:
        self.last_check_at = 0

    @property
    def name(self) -> str:
        return "NavalMissionFactory"

    def _preparing(self, controller) -> bool:
        return any(isinstance(m, NavalMission) and m.state is NavalState.PREPARING for m in controller.get_missions())

    def _build(self, ctx: TickContext, name: str, target: Point, radius: float = NAVAL_ATTACK_RADIUS) -> NavalMission:
        composition = naval_composition(ctx.game.own_structure_types())
        return NavalMission(name, ctx.awareness.rally_point(), target, composition, radius=radius)

    def maybe_create_missions(self, ctx: TickContext, controller) -> None:
        tick = ctx.tick
        if tick < self.last_check_at + NAVAL_CHECK_INTERVAL:
            return
        if self._preparing(controller) or not owns_shipyard(ctx.game.own_structure_types()):
            return

        for hid, _d in ctx.awareness.hostiles_near(ctx.game.start_location, NAVAL_TARGET_SEARCH_RADIUS):
            hostile = ctx.game.get_unit(hid)
            if hostile is not None and hostile.domain is MovementDomain.WATER:
                if controller.add_mission(self._build(ctx, f"naval_{tick}", hostile.position), ctx):
                    self.last_check_at = tick
                return

    def create_sub_mission(self, ctx: TickContext, requester: Mission, target: Point, radius: float, controller):
        if self._preparing(controller):
            return None
        return self._build(ctx, f"naval-for-{requester.name}", target, max(radius, NAVAL_ATTACK_RADIUS))

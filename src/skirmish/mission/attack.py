"""AttackMission — gather a land force, then fight around a target point.

Preparing: units hold at the rally point while the mission requests the
rest of its composition, ramping its priority while starved.  The force
commits early when a structure of ours is under attack, when it is already
close to the target, or when it has waited too long.

Attacking: the squad fights.  When nothing hostile is left near the target
the mission searches outwards with a growing radius and gives up
(``NO_TARGETS``) once the radius is exhausted and it has been idle long
enough.  Survivors go to a retreat mission spawned by the factory.
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
    RequestSubMission,
    RequestUnits,
    SearchArea,
    missing_units,
)
from skirmish.mission.base import Mission, PriorityRamp, TickContext
from skirmish.mission.compositions import attack_composition
from skirmish.mission.factory import MissionFactory
from skirmish.mission.retreat import RetreatMission
from skirmish.mission.targeting import ATTACK_RADIUS, TargetSelector, score_target
from skirmish.squad.combat import CombatSquad
from skirmish.world import UnitSnapshot, enemy_players

NO_TARGET_IDLE_TIMEOUT = 450
VISIBLE_TARGET_ATTACK_COOLDOWN = 60
BASE_ATTACK_COOLDOWN = 900

ATTACK_MISSION_INITIAL_PRIORITY = 50.0
ATTACK_MISSION_PRIORITY_RAMP = 1.2
ATTACK_MISSION_MAX_PRIORITY = 100.0

MIN_ATTACK_SQUAD_SIZE = 3
FORCE_ATTACK_THRESHOLD = 0.8
FORCE_ATTACK_DISTANCE = 40.0
MAX_GATHER_TIME = 450
BUILDING_DEFENSE_RADIUS = 30.0

INITIAL_SEARCH_RADIUS = 20.0
MAX_SEARCH_RADIUS = 100.0
SEARCH_RADIUS_INCREMENT = 10.0
SEARCH_EXPAND_INTERVAL = 60
BUILDING_SEARCH_COOLDOWN = 30

NAVAL_TARGET_CHECK_RADIUS = 5.0
NAVAL_REQUEST_COOLDOWN = 300

_HARVESTER_FOCUS_WEIGHT = 100000
_STRUCTURE_WEIGHT_FACTOR = 10


class AttackState(Enum):
    PREPARING = "preparing"
    ATTACKING = "attacking"


class AttackMission(Mission):
    kind = MissionKind.ATTACK

    def __init__(
        self,
        name: str,
        rally: Point,
        target: Point,
        composition: dict[str, int],
        priority: float = ATTACK_MISSION_INITIAL_PRIORITY,
        radius: float = ATTACK_RADIUS,
    ) -> None:
        super().__init__(name, PriorityRamp(priority, ATTACK_MISSION_PRIORITY_RAMP, ATTACK_MISSION_MAX_PRIORITY))
        self.rally = rally
        self.radius = radius
        self.composition = dict(composition)
        self.state = AttackState.PREPARING
        self.squad = CombatSquad(name, target)
        self.selector = TargetSelector()
        self._initial_target = target
        self._gather_started: int | None = None
        self._last_target_seen: int | None = None
        self._search_radius = INITIAL_SEARCH_RADIUS
        self._last_radius_growth: int | None = None
        self._last_search: int | None = None
        self._last_naval_request: int | None = None

    @property
    def target(self) -> Point:
        return self.selector.target or self._initial_target

    @property
    def search_radius(self) -> float:
        return self._search_radius

    def is_units_locked(self) -> bool:
        return self.state is not AttackState.PREPARING

    def _update(self, ctx: TickContext, units: list[UnitSnapshot]) -> MissionAction:
        if self.selector.target is None:
            self.selector.lock(self._initial_target, ctx.tick, self._score(ctx, self._initial_target, units))
        if self.state is AttackState.PREPARING:
            return self._prepare(ctx, units)
        return self._attack(ctx, units)

    # -- preparing --

    def _prepare(self, ctx: TickContext, units: list[UnitSnapshot]) -> MissionAction:
        tick = ctx.tick
        if self._gather_started is None:
            self._gather_started = tick
        self.squad.hold(ctx, units, self.rally)
        n = len(units)

        if n >= MIN_ATTACK_SQUAD_SIZE:
            attacker = self._structure_under_attack(ctx)
            if attacker is not None:
                logger.info(f"Attack {self.name}: defending structure, retargeting to {attacker}")
                self.selector.lock(attacker, tick, self._score(ctx, attacker, units))
                self._activate(tick, "structure under attack")
                return Noop()

            center = self.center_of_mass(units)
            if center is not None and distance(center, self.target) <= FORCE_ATTACK_DISTANCE:
                self._activate(tick, "close to target")
                return Noop()

            sub = self._maybe_request_naval(ctx, units)
            if sub is not None:
                return sub

            if tick - self._gather_started > MAX_GATHER_TIME:
                self._activate(tick, "gather timeout")
                return Noop()

        wanted = sum(self.composition.values())
        if n > 0 and n >= wanted * FORCE_ATTACK_THRESHOLD:
            self._activate(tick, f"{n}/{wanted} units")
            return Noop()

        missing = missing_units(self.composition, self.type_counts(units))
        if missing:
            priority = self.bump_priority()
            return RequestUnits(missing, priority)
        return Noop()

    def _activate(self, tick: int, why: str) -> None:
        logger.info(f"Attack {self.name}: attacking {self.target} ({why})")
        self.state = AttackState.ATTACKING
        self._last_target_seen = tick
        self._last_radius_growth = tick
        self.squad.set_target_area(self.target)

    def _structure_under_attack(self, ctx: TickContext) -> Point | None:
        game = ctx.game
        for uid in game.own_unit_ids():
            unit = game.get_unit(uid)
            if unit is None or not unit.is_structure:
                continue
            for hid, _d in ctx.awareness.hostiles_near(unit.position, BUILDING_DEFENSE_RADIUS):
                hostile = game.get_unit(hid)
                if hostile is not None:
                    return hostile.position
        return None

    def _maybe_request_naval(self, ctx: TickContext, units: list[UnitSnapshot]) -> MissionAction | None:
        tick = ctx.tick
        if self._last_naval_request is not None and tick - self._last_naval_request < NAVAL_REQUEST_COOLDOWN:
            return None
        if any(u.is_naval for u in units):
            return None
        for hid, _d in ctx.awareness.hostiles_near(self.target, NAVAL_TARGET_CHECK_RADIUS):
            hostile = ctx.game.get_unit(hid)
            if hostile is not None and (hostile.is_naval or hostile.is_shipyard):
                self._last_naval_request = tick
                logger.info(f"Attack {self.name}: target {self.target} needs a naval force")
                return RequestSubMission(MissionKind.NAVAL, self.target, self.radius)
        return None

    # -- attacking --

    def _hostiles_at(self, ctx: TickContext, point: Point) -> list[UnitSnapshot]:
        found = []
        for hid, _d in ctx.awareness.hostiles_near(point, self.radius):
            hostile = ctx.game.get_unit(hid)
            if hostile is not None:
                found.append(hostile)
        return found

    def _score(self, ctx: TickContext, point: Point, units: list[UnitSnapshot]) -> float:
        return score_target(point, self._hostiles_at(ctx, point), self.center_of_mass(units))

    def _attack(self, ctx: TickContext, units: list[UnitSnapshot]) -> MissionAction:
        tick = ctx.tick
        self.squad.update(ctx, units)

        if self._hostiles_at(ctx, self.target):
            self._last_target_seen = tick
            self._search_radius = INITIAL_SEARCH_RADIUS
            self._last_radius_growth = tick
            return Noop()

        if tick - self._last_radius_growth >= SEARCH_EXPAND_INTERVAL:
            self._search_radius = min(self._search_radius + SEARCH_RADIUS_INCREMENT, MAX_SEARCH_RADIUS)
            self._last_radius_growth = tick

        if self._search_radius >= MAX_SEARCH_RADIUS and tick - self._last_target_seen >= NO_TARGET_IDLE_TIMEOUT:
            logger.info(f"Attack {self.name}: no targets left near {self.target}")
            return Disband(DisbandReason.NO_TARGETS)

        if self._last_search is None or tick - self._last_search >= BUILDING_SEARCH_COOLDOWN:
            center = self.center_of_mass(units)
            if center is not None:
                self._last_search = tick
                return SearchArea(center, self._search_radius)
        return Noop()

    def on_search_result(self, ctx: TickContext, point: Point | None) -> None:
        if point is None or self.state is not AttackState.ATTACKING:
            return
        candidate = self._score(ctx, point, self.units(ctx))
        if self.selector.offer(point, candidate, ctx.tick):
            self.squad.set_target_area(point)
            self._last_target_seen = ctx.tick
            self._search_radius = INITIAL_SEARCH_RADIUS

    def debug_text(self) -> str:
        x, y = self.target
        return (
            f"{self.name}: {self.state.name} p={self.priority:.0f} units={len(self.unit_ids)} "
            f"target=({x:.0f},{y:.0f}) {self.squad.debug_text()}"
        )


def target_weight(unit: UnitSnapshot, focus_harvester: bool) -> float:
    """How attractive *unit*'s position is as an attack objective."""
    if focus_harvester and unit.is_harvester:
        return _HARVESTER_FOCUS_WEIGHT
    if unit.is_structure:
        return unit.max_health * _STRUCTURE_WEIGHT_FACTOR
    return unit.max_health


def generate_target(ctx: TickContext, include_base_locations: bool = False) -> Point | None:
    game = ctx.game
    focus_harvester = game.random_int(0, 1) == 0
    enemies = [u for u in (game.get_unit(uid) for uid in game.visible_enemy_ids()) if u is not None]
    best = max(enemies, key=lambda u: target_weight(u, focus_harvester), default=None)
    if best is not None:
        return best.position
    if include_base_locations:
        starts = [game.player_start_location(p) for p in enemy_players(game)]
        unexplored = [
            p for p in starts
            if p is not None
            and game.terrain_at(int(p[0]), int(p[1])) is not None
            and not game.is_visible(int(p[0]), int(p[1]))
        ]
        if unexplored:
            return unexplored[game.random_int(0, len(unexplored) - 1)]
    return None


class AttackMissionFactory(MissionFactory):

    def __init__(self, last_attack_at: int = -VISIBLE_TARGET_ATTACK_COOLDOWN) -> None:
        self.last_attack_at = last_attack_at

    @property
    def name(self) -> str:
        return "AttackMissionFactory"

    def maybe_create_missions(self, ctx: TickContext, controller) -> None:
        tick = ctx.tick
        if tick < self.last_attack_at + VISIBLE_TARGET_ATTACK_COOLDOWN:
            return
        if any(isinstance(m, AttackMission) and m.state is AttackState.PREPARING for m in controller.get_missions()):
            return

        include_bases = tick > self.last_attack_at + BASE_ATTACK_COOLDOWN
        target = generate_target(ctx, include_bases)
        if target is None:
            return

        name = f"attack_{tick}"
        composition = attack_composition(ctx.game.own_structure_types())
        mission = AttackMission(name, ctx.awareness.rally_point(), target, composition)

        def spawn_retreat(end_ctx: TickContext, unit_ids: frozenset[int], reason: DisbandReason | None) -> None:
            if not unit_ids:
                return
            controller.add_mission(
                RetreatMission(f"retreat-from-{name}-{end_ctx.tick}", end_ctx.awareness.rally_point(), unit_ids),
                end_ctx,
            )

        if controller.add_mission(mission.then(spawn_retreat), ctx):
            self.last_attack_at = tick

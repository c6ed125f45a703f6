"""Read-only view of the game world and the outbound order channel.

The tactical layer never talks to the game engine directly.  The host
adapts its engine to these protocols once per tick; the core only ever
sees immutable ``UnitSnapshot`` values and plain ids.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Protocol, Sequence

from skirmish.geometry import Point
from skirmish.units import MovementDomain, get_type

_DEFAULT_WEAPON_RANGE = 5.0


class TerrainType(Enum):
    """Coarse terrain class of a single tile."""
    LAND = "land"
    WATER = "water"
    CLIFF = "cliff"
    ROCK = "rock"


class OrderKind(Enum):
    """Orders the tactical layer can issue."""
    MOVE = "move"
    ATTACK_MOVE = "attack_move"
    ATTACK = "attack"
    DEPLOY = "deploy"


@dataclass(frozen=True)
class UnitSnapshot:
    """What the core may know about one unit on one tick.

    The host fills in the combat and movement facts it knows about the
    unit.  Any of those left as ``None`` are completed from the unit type
    registry, and for types the registry does not know, from the defaults
    of a plain ground unit (or of an unarmed building when the host says
    it is a structure).
    """
    unit_id: int
    type_name: str
    owner: str
    position: Point
    health: float = 1.0  # fraction of max hit points
    deployed: bool = False
    weapon_range: float | None = None
    domain: MovementDomain | None = None
    is_structure: bool | None = None
    is_combatant: bool | None = None
    anti_air: bool | None = None
    anti_ground: bool | None = None

    def __post_init__(self) -> None:
        t = get_type(self.type_name)
        if self.is_structure is None:
            if t is not None:
                structure = t.is_structure
            else:
                structure = self.domain is MovementDomain.STATIONARY
            object.__setattr__(self, "is_structure", structure)
        if self.domain is None:
            if t is not None:
                domain = t.domain
            else:
                domain = MovementDomain.STATIONARY if self.is_structure else MovementDomain.GROUND
            object.__setattr__(self, "domain", domain)
        if self.weapon_range is None:
            if t is None:
                rng = 0.0 if self.is_structure else _DEFAULT_WEAPON_RANGE
            elif self.deployed and t.can_deploy():
                rng = t.combat.deployed_range
            else:
                rng = t.combat.weapon_range
            object.__setattr__(self, "weapon_range", rng)
        if self.is_combatant is None:
            armed = t.combat.is_combatant if t is not None else self.weapon_range > 0
            object.__setattr__(self, "is_combatant", armed)
        if self.anti_ground is None:
            hits_ground = t.combat.anti_ground if t is not None else self.weapon_range > 0
            object.__setattr__(self, "anti_ground", hits_ground)
        if self.anti_air is None:
            object.__setattr__(self, "anti_air", bool(t and t.combat.anti_air))

    @property
    def unit_type(self):
        return get_type(self.type_name)

    @property
    def is_naval(self) -> bool:
        return self.domain in (MovementDomain.WATER, MovementDomain.AMPHIBIOUS)

    @property
    def is_air(self) -> bool:
        return self.domain is MovementDomain.AIR

    @property
    def is_harvester(self) -> bool:
        t = self.unit_type
        return bool(t and t.is_harvester)

    @property
    def is_shipyard(self) -> bool:
        t = self.unit_type
        return bool(t and t.is_shipyard)

    @property
    def high_value(self) -> bool:
        t = self.unit_type
        return bool(t and t.high_value)

    @property
    def can_deploy(self) -> bool:
        t = self.unit_type
        return bool(t and t.can_deploy())

    @property
    def max_health(self) -> int:
        t = self.unit_type
        return t.combat.max_health if t is not None else 100


@dataclass(frozen=True)
class ScoutTarget:
    """A location the awareness layer wants looked at."""
    location: Point
    permanent: bool = False


class GameView(Protocol):
    """Per-tick game state queries."""

    current_tick: int
    player_name: str
    start_location: Point
    map_size: tuple[int, int]

    def get_unit(self, unit_id: int) -> UnitSnapshot | None: ...

    def own_unit_ids(self) -> Sequence[int]: ...

    def visible_enemy_ids(self) -> Sequence[int]: ...

    def own_structure_types(self) -> set[str]: ...

    def terrain_at(self, x: int, y: int) -> TerrainType | None: ...

    def is_visible(self, x: int, y: int) -> bool: ...

    def players(self) -> Sequence[str]: ...

    def player_start_location(self, player: str) -> Point | None: ...

    def are_allied(self, player: str, other: str) -> bool: ...

    def random_int(self, lo: int, hi: int) -> int: ...


def enemy_players(game: GameView) -> list[str]:
    """Players in the roster that are not allied with us, in roster order."""
    me = game.player_name
    return [p for p in game.players() if p != me and not game.are_allied(me, p)]


class Awareness(Protocol):
    """Threat and map knowledge computed outside the tactical layer."""

    def hostiles_near(self, point: Point, radius: float) -> list[tuple[int, float]]:
        """Non-neutral hostiles within *radius*, nearest first, as (id, distance)."""
        ...

    def rally_point(self) -> Point: ...

    def has_scout_targets(self) -> bool: ...

    def next_scout_target(self) -> ScoutTarget | None: ...

    def overall_visibility(self) -> float | None: ...


class OrderSink(Protocol):
    """Where batched orders end up."""

    def order_units(
        self,
        unit_ids: Iterable[int],
        kind: OrderKind,
        point: Point | None = None,
        target_id: int | None = None,
    ) -> None: ...

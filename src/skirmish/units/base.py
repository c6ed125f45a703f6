"""Base classes for the unit type system.

MovementDomain -- enum for where a unit can travel
CombatStats    -- frozen dataclass for weapon/health stats
UnitType       -- abstract base every concrete type subclasses
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class MovementDomain(Enum):
    """Which terrain a unit moves through."""
    STATIONARY = "stationary"
    GROUND = "ground"
    FOOT = "foot"
    WATER = "water"
    AMPHIBIOUS = "amphibious"
    AIR = "air"


@dataclass(frozen=True)
class CombatStats:
    """Immutable combat profile for a unit type."""
    max_health: int
    weapon_range: float
    weapon_damage: int
    is_combatant: bool
    anti_ground: bool = True
    anti_air: bool = False
    deployed_range: float = 0.0  # >0 when deploying changes the weapon


class UnitType:
    """Abstract base for every unit type definition.

    Subclasses MUST set the identity, domain and combat fields.  The
    registry discovers concrete subclasses automatically at import time.
    """

    # -- identity --
    type_id: ClassVar[str]
    display_name: ClassVar[str]

    # -- movement --
    domain: ClassVar[MovementDomain]
    speed: ClassVar[float] = 0.0

    # -- combat --
    combat: ClassVar[CombatStats]

    # -- roles --
    is_structure: ClassVar[bool] = False
    is_harvester: ClassVar[bool] = False
    is_shipyard: ClassVar[bool] = False
    is_scout: ClassVar[bool] = False
    high_value: ClassVar[bool] = False  # boosts target score when present

    # -- helpers --

    @classmethod
    def is_mobile(cls) -> bool:
        return cls.domain is not MovementDomain.STATIONARY

    @classmethod
    def is_flying(cls) -> bool:
        return cls.domain is MovementDomain.AIR

    @classmethod
    def is_naval(cls) -> bool:
        return cls.domain in (MovementDomain.WATER, MovementDomain.AMPHIBIOUS)

    @classmethod
    def can_deploy(cls) -> bool:
        return cls.combat.deployed_range > 0

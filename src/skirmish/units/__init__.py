"""Unit type registry.

Concrete ``UnitType`` subclasses in this package register themselves on
import.  Lookups never raise: an unknown type id yields ``None``.
"""

from __future__ import annotations

from skirmish.units.base import CombatStats, MovementDomain, UnitType
from skirmish.units import infantry, naval, structures, vehicles  # noqa: F401

_REGISTRY: dict[str, type[UnitType]] = {}


def _collect(cls: type[UnitType]) -> None:
    for sub in cls.__subclasses__():
        if hasattr(sub, "type_id"):
            if sub.type_id in _REGISTRY:
                raise ValueError(f"Duplicate unit type id: {sub.type_id}")
            _REGISTRY[sub.type_id] = sub
        _collect(sub)


_collect(UnitType)


def get_type(type_id: str) -> type[UnitType] | None:
    return _REGISTRY.get(type_id)


def all_types() -> list[type[UnitType]]:
    return list(_REGISTRY.values())


def naval_type_ids() -> set[str]:
    return {t.type_id for t in _REGISTRY.values() if t.is_naval() and not t.is_structure}


def structure_type_ids() -> set[str]:
    return {t.type_id for t in _REGISTRY.values() if t.is_structure}


def scout_type_ids(water: bool = False) -> list[str]:
    """Types usable as scouts, land or water, in registration order."""
    return [
        t.type_id for t in _REGISTRY.values()
        if t.is_scout and t.is_naval() == water
    ]


__all__ = [
    "CombatStats", "MovementDomain", "UnitType",
    "get_type", "all_types", "naval_type_ids", "structure_type_ids",
    "scout_type_ids",
]

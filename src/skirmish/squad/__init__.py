"""Squads: turn a mission's units into per-unit orders each tick."""

from skirmish.squad.base import Squad, SquadState, UnitCacheArena, gather_radius
from skirmish.squad.combat import CombatSquad
from skirmish.squad.naval import NavalSquad

__all__ = ["Squad", "SquadState", "UnitCacheArena", "gather_radius", "CombatSquad", "NavalSquad"]

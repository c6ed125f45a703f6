"""Per-unit micro: what single order a unit should get this tick."""

from __future__ import annotations

import math

from skirmish.geometry import Point, distance
from skirmish.batcher import BatchableAction, attack, attack_move, deploy, move
from skirmish.units import MovementDomain
from skirmish.world import UnitSnapshot

_STRUCTURE_WEIGHT = 0.6
_NON_COMBATANT_WEIGHT = 0.8
_WATER_TARGET_BONUS = 1.5
_AMPHIBIOUS_TARGET_BONUS = 1.3
_IN_RANGE_BONUS = 1.2
_DECAY_RANGE_FACTOR = 2.5
_NAVAL_DECAY_RANGE_FACTOR = 2.0


def move_micro(unit: UnitSnapshot, point: Point, engage: bool = False) -> BatchableAction:
    """Move (or attack-move) order, undeploying first if the unit is dug in."""
    if unit.can_deploy and unit.deployed:
        return deploy(unit.unit_id)
    if engage:
        return attack_move(unit.unit_id, point)
    return move(unit.unit_id, point)


def attack_micro(unit: UnitSnapshot, target: UnitSnapshot) -> BatchableAction:
    """Attack order, toggling deployment for units whose weapon changes with it."""
    if unit.can_deploy:
        t = unit.unit_type
        deployed_range = t.combat.deployed_range
        d = distance(unit.position, target.position)
        if not unit.deployed and d <= deployed_range:
            return deploy(unit.unit_id)
        if unit.deployed and d > deployed_range:
            return deploy(unit.unit_id)
    return attack(unit.unit_id, target.unit_id)


def can_hit(attacker: UnitSnapshot, target: UnitSnapshot) -> bool:
    if target.is_air:
        return attacker.anti_air
    return attacker.anti_ground


def attack_weight(attacker: UnitSnapshot, target: UnitSnapshot, naval: bool = False) -> float | None:
    """Desirability of *target* for *attacker*, or None if it should be ignored.

    Prefers combatants over structures, hurt targets over healthy ones and
    targets already in range.  The weight decays to zero at
    2.5x (2x for ships) the attacker's weapon range.
    """
    if not can_hit(attacker, target):
        return None
    rng = attacker.weapon_range or 5.0
    d = distance(attacker.position, target.position)

    weight = 1.0
    if target.is_structure:
        weight *= _STRUCTURE_WEIGHT
    elif not target.is_combatant:
        weight *= _NON_COMBATANT_WEIGHT

    if attacker.is_naval or naval:
        if target.domain is MovementDomain.WATER:
            weight *= _WATER_TARGET_BONUS
        elif target.domain is MovementDomain.AMPHIBIOUS:
            weight *= _AMPHIBIOUS_TARGET_BONUS

    if d <= rng:
        weight *= _IN_RANGE_BONUS
    weight *= 2.0 - min(max(target.health, 0.0), 1.0)

    factor = _NAVAL_DECAY_RANGE_FACTOR if naval else _DECAY_RANGE_FACTOR
    decay = 1.0 - d / (factor * rng)
    if decay <= 0:
        return None
    return weight * decay


def best_target(attacker: UnitSnapshot, hostiles: list[UnitSnapshot], naval: bool = False) -> UnitSnapshot | None:
    best: UnitSnapshot | None = None
    best_w = 0.0
    for h in hostiles:
        w = attack_weight(attacker, h, naval=naval)
        if w is not None and w > best_w:
            best, best_w = h, w
    return best


def formation_offset(index: int, count: int) -> Point:
    """Ring offset for the *index*-th of *count* units around a point."""
    if count <= 0:
        return (0.0, 0.0)
    spread = min(max(count / 3.0, 1.0), 3.0)
    angle = 2.0 * math.pi * index / count
    return (math.cos(angle) * spread, math.sin(angle) * spread)

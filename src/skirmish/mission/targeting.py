"""Target scoring and the hysteresis lock that keeps squads from flip-flopping.

Scores value what sits around a point (structures over combatants over
everything else) and discount by how far the force must travel.  A locked
target is only replaced by a clearly better one after the lock has aged,
and never by a point close to one of the last few targets.
"""

from __future__ import annotations

from collections import deque
from typing import Iterable

from loguru import logger

from skirmish.geometry import Point, distance
from skirmish.world import UnitSnapshot

ATTACK_RADIUS = 10.0

_STRUCTURE_SCORE = 10.0
_COMBATANT_SCORE = 5.0
_OTHER_SCORE = 1.0
_HIGH_VALUE_MULTIPLIER = 3.0
_DISTANCE_PENALTY = 0.01
_DISTANCE_PENALTY_HIGH_VALUE = 0.005  # travel further for a shipyard

TARGET_LOCK_DURATION = 150
TARGET_SWITCH_MIN_IMPROVEMENT = 0.3
TARGET_MEMORY_SIZE = 3
TARGET_EXCLUSION_RADIUS = 5.0


def score_target(candidate: Point, hostiles: Iterable[UnitSnapshot], force_center: Point | None) -> float:
    """Value of attacking *candidate* given the *hostiles* around it."""
    base = 0.0
    high_value = False
    for h in hostiles:
        if h.is_structure:
            s = _STRUCTURE_SCORE
            if h.high_value:
                s *= _HIGH_VALUE_MULTIPLIER
                high_value = True
            base += s
        elif h.is_combatant:
            base += _COMBATANT_SCORE
        else:
            base += _OTHER_SCORE
    if force_center is None:
        return base
    k = _DISTANCE_PENALTY_HIGH_VALUE if high_value else _DISTANCE_PENALTY
    return base / (1.0 + k * distance(force_center, candidate))


class TargetSelector:
    """Holds the current target and decides when a candidate may replace it."""

    def __init__(
        self,
        lock_duration: int = TARGET_LOCK_DURATION,
        min_improvement: float = TARGET_SWITCH_MIN_IMPROVEMENT,
        memory: int = TARGET_MEMORY_SIZE,
        exclusion_radius: float = TARGET_EXCLUSION_RADIUS,
    ) -> None:
        self.lock_duration = lock_duration
        self.min_improvement = min_improvement
        self.exclusion_radius = exclusion_radius
        self.target: Point | None = None
        self.locked_at: int | None = None
        self.score = 0.0  # score of the target when it was locked
        self._recent: deque[Point] = deque(maxlen=memory)

    @property
    def recent(self) -> tuple[Point, ...]:
        return tuple(self._recent)

    def lock(self, point: Point, tick: int, score: float = 0.0) -> None:
        self.target = point
        self.locked_at = tick
        self.score = score
        self._recent.append(point)

    def is_excluded(self, candidate: Point) -> bool:
        return any(distance(candidate, p) <= self.exclusion_radius for p in self._recent)

    def can_switch(self, candidate: Point, candidate_score: float, tick: int) -> bool:
        if self.target is None or self.locked_at is None:
            return True
        if tick - self.locked_at < self.lock_duration:
            return False
        if candidate_score <= self.score * (1.0 + self.min_improvement):
            return False
        return not self.is_excluded(candidate)

    def offer(self, candidate: Point, candidate_score: float, tick: int) -> bool:
        """Lock *candidate* if allowed.  Returns True when the target changed."""
        if not self.can_switch(candidate, candidate_score, tick):
            return False
        logger.debug(
            f"Target switch {self.target} -> {candidate} "
            f"(score {self.score:.1f} -> {candidate_score:.1f})"
        )
        self.lock(candidate, tick, candidate_score)
        return True

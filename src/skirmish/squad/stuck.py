"""Stuck detection and escalating recovery for individual units.

A unit is sampled every ``SAMPLE_INTERVAL`` ticks.  When the last
``WINDOW`` samples all lie within ``MIN_DISPLACEMENT`` of each other while
the unit has somewhere to go, it is stuck.  Each recovery attempt searches
further from the blockage, along the line towards the real target.
"""

from __future__ import annotations

import itertools
from collections import deque
from typing import Iterable

from loguru import logger

from skirmish.geometry import Point, distance, offset, unit_vector
from skirmish.world import GameView, TerrainType

SAMPLE_INTERVAL = 60
WINDOW = 3
MIN_DISPLACEMENT = 0.5
MAX_RECOVERY_ATTEMPTS = 5

_NEAR_SEARCH_RADIUS = 3
_PROJECTION_STEP = 4.0
_OPEN_AREA_BASE_RADIUS = 3
_OPEN_AREA_RADIUS_STEP = 2
_TARGET_DISTANCE_WEIGHT = 0.1

_NEIGHBOURS = [(dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if (dx, dy) != (0, 0)]


class StuckDetector:
    """Tick-sampled position history for one unit."""

    def __init__(self) -> None:
        self._history: deque[Point] = deque(maxlen=WINDOW)
        self._last_sample: int | None = None
        self.attempts = 0
        self.last_recovery_target: Point | None = None

    def sample(self, position: Point, tick: int) -> bool:
        """Record *position* if a sample is due.  Returns True when recorded."""
        if self._last_sample is not None and tick - self._last_sample < SAMPLE_INTERVAL:
            return False
        self._history.append(position)
        self._last_sample = tick
        if len(self._history) == WINDOW and not self.is_stuck():
            self.attempts = 0
        return True

    def is_stuck(self) -> bool:
        if len(self._history) < WINDOW:
            return False
        return all(
            distance(a, b) < MIN_DISPLACEMENT
            for a, b in itertools.combinations(self._history, 2)
        )

    def reset_history(self) -> None:
        self._history.clear()

    def next_attempt(self) -> int:
        """Advance the attempt counter, wrapping after the last attempt."""
        self.attempts += 1
        if self.attempts > MAX_RECOVERY_ATTEMPTS:
            self.attempts = 1
        return self.attempts


def _passable(game: GameView, x: int, y: int, terrain: TerrainType) -> bool:
    return game.terrain_at(x, y) is terrain


def _open_score(game: GameView, x: int, y: int, terrain: TerrainType) -> int:
    return sum(1 for dx, dy in _NEIGHBOURS if _passable(game, x + dx, y + dy, terrain))


def find_recovery_point(
    game: GameView,
    blocked: Point,
    target: Point,
    attempt: int,
    terrain: TerrainType,
    avoid: Iterable[Point] = (),
) -> Point | None:
    """Pick a cell to move a stuck unit to.

    Attempt 1 takes the nearest passable cell next to the blockage.  Later
    attempts project the search centre ``attempt * 4`` tiles towards
    *target* and take the most open cell within ``3 + 2 * attempt``.
    The result never lies on a tile of *avoid* or the blocked tile itself.
    """
    bx, by = int(blocked[0]), int(blocked[1])
    excluded = {(bx, by)}
    excluded.update((int(p[0]), int(p[1])) for p in avoid)

    if attempt <= 1:
        best: tuple[float, int, int] | None = None
        for dx in range(-_NEAR_SEARCH_RADIUS, _NEAR_SEARCH_RADIUS + 1):
            for dy in range(-_NEAR_SEARCH_RADIUS, _NEAR_SEARCH_RADIUS + 1):
                x, y = bx + dx, by + dy
                if (x, y) in excluded or not _passable(game, x, y, terrain):
                    continue
                d = distance((x, y), blocked)
                if best is None or d < best[0]:
                    best = (d, x, y)
        if best is not None:
            return (float(best[1]), float(best[2]))
        # Nothing adjacent, fall through to the open-area search

    direction = unit_vector(blocked, target)
    cx, cy = offset(blocked, direction, attempt * _PROJECTION_STEP)
    cx, cy = int(round(cx)), int(round(cy))
    radius = _OPEN_AREA_BASE_RADIUS + _OPEN_AREA_RADIUS_STEP * attempt

    best_open: tuple[float, int, int] | None = None
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            x, y = cx + dx, cy + dy
            if (x, y) in excluded or not _passable(game, x, y, terrain):
                continue
            score = _open_score(game, x, y, terrain) - _TARGET_DISTANCE_WEIGHT * distance((x, y), target)
            if best_open is None or score > best_open[0]:
                best_open = (score, x, y)
    if best_open is None:
        logger.debug(f"No recovery cell near {blocked} (attempt {attempt})")
        return None
    return (float(best_open[1]), float(best_open[2]))

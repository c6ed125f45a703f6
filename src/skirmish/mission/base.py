"""Mission contract shared by every mission variant.

A mission owns a set of unit ids (granted by the controller), runs its own
state machine in ``_update()`` and answers with one ``MissionAction`` per
tick.  Missions never issue orders for units they do not own.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, ClassVar, Iterable

from loguru import logger

from skirmish.batcher import ActionBatcher
from skirmish.geometry import Point, centroid, max_spread
from skirmish.mission.actions import (
    Disband,
    DisbandReason,
    MissionAction,
    MissionKind,
    Noop,
)
from skirmish.world import Awareness, GameView, UnitSnapshot


@dataclass
class TickContext:
    """Everything a mission may consult during one update."""
    game: GameView
    awareness: Awareness
    batcher: ActionBatcher

    @property
    def tick(self) -> int:
        return self.game.current_tick


@dataclass
class PriorityRamp:
    """Priority that multiplies by *factor* on every starved tick, up to *ceiling*."""
    initial: float
    factor: float = 1.0
    ceiling: float = math.inf
    value: float = field(init=False)

    def __post_init__(self) -> None:
        self.value = self.initial

    def bump(self) -> float:
        # never lowers a priority that started above the ceiling
        self.value = max(self.value, min(self.value * self.factor, self.ceiling))
        return self.value


# (ctx, unit ids the mission held, reason) -> None
CompletionCallback = Callable[[TickContext, frozenset[int], DisbandReason | None], None]


class Mission(ABC):
    """Base for every mission.

    Subclasses set ``kind`` and implement ``_update``.  They may override
    ``is_units_locked`` and ``on_search_result``.
    """

    kind: ClassVar[MissionKind]

    def __init__(
        self,
        name: str,
        priority: PriorityRamp | float,
        initial_unit_ids: Iterable[int] = (),
    ) -> None:
        self.name = name
        self._ramp = priority if isinstance(priority, PriorityRamp) else PriorityRamp(priority)
        self._unit_ids: set[int] = set()
        self.initial_unit_ids: tuple[int, ...] = tuple(initial_unit_ids)
        self._had_units = False
        self._callbacks: list[CompletionCallback] = []
        self.created_at: int | None = None
        self.sequence: int = 0  # creation order, assigned by the controller
        self.disbanded = False
        self.disband_reason: DisbandReason | None = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} units={len(self._unit_ids)}>"

    # -- priority --

    @property
    def priority(self) -> float:
        return self._ramp.value

    def bump_priority(self) -> float:
        return self._ramp.bump()

    # -- units --

    @property
    def unit_ids(self) -> frozenset[int]:
        return frozenset(self._unit_ids)

    def add_unit(self, unit_id: int) -> None:
        self._unit_ids.add(unit_id)
        self._had_units = True

    def remove_unit(self, unit_id: int) -> None:
        self._unit_ids.discard(unit_id)

    def is_units_locked(self) -> bool:
        return False

    def units(self, ctx: TickContext) -> list[UnitSnapshot]:
        """Live snapshots of owned units, dropping any that no longer resolve."""
        alive = []
        for uid in sorted(self._unit_ids):
            unit = ctx.game.get_unit(uid)
            if unit is None or unit.owner != ctx.game.player_name:
                self._unit_ids.discard(uid)
                continue
            alive.append(unit)
        return alive

    @staticmethod
    def type_counts(units: Iterable[UnitSnapshot]) -> Counter:
        return Counter(u.type_name for u in units)

    @staticmethod
    def center_of_mass(units: Iterable[UnitSnapshot]) -> Point | None:
        return centroid(u.position for u in units)

    @staticmethod
    def max_distance_to_center(units: list[UnitSnapshot]) -> float:
        c = centroid(u.position for u in units)
        if c is None:
            return 0.0
        return max_spread([u.position for u in units], c)

    # -- lifecycle --

    def then(self, callback: CompletionCallback) -> "Mission":
        """Register *callback* to run when the mission ends.  Chainable."""
        self._callbacks.append(callback)
        return self

    def end_mission(self, ctx: TickContext, reason: DisbandReason | None, unit_ids: frozenset[int]) -> None:
        """Mark disbanded and fire completion callbacks with the released ids."""
        if self.disbanded:
            return
        self.disbanded = True
        self.disband_reason = reason
        self._unit_ids.clear()
        logger.info(f"Mission {self.name} ended ({reason.value if reason else 'done'})")
        for cb in self._callbacks:
            cb(ctx, unit_ids, reason)

    def update(self, ctx: TickContext) -> MissionAction:
        units = self.units(ctx)
        action = self._update(ctx, units)
        if self._had_units and not self._unit_ids and isinstance(action, Noop):
            return Disband(None)
        return action

    @abstractmethod
    def _update(self, ctx: TickContext, units: list[UnitSnapshot]) -> MissionAction:
        """Advance the mission state machine by one tick."""

    def on_search_result(self, ctx: TickContext, point: Point | None) -> None:
        """Receive the answer to a previous ``SearchArea`` action."""

    def state_name(self) -> str:
        state = getattr(self, "state", None)
        return state.name if state is not None else "-"

    def debug_text(self) -> str:
        return f"{self.name}: {self.state_name()} p={self.priority:.0f} units={len(self._unit_ids)}"

"""ActionBatcher — per-tick, per-unit order buffer.

Squads push one ``BatchableAction`` per unit; the controller resolves the
buffer once per tick.  Units receiving an identical order are sent to the
host in a single ``order_units`` call.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from skirmish.geometry import Point
from skirmish.world import OrderKind, OrderSink


@dataclass(frozen=True)
class BatchableAction:
    unit_id: int
    kind: OrderKind
    point: Point | None = None
    target_id: int | None = None

    @property
    def order_key(self) -> tuple:
        """Everything except the unit: actions sharing a key batch together."""
        return (self.kind, self.point, self.target_id)


def move(unit_id: int, point: Point) -> BatchableAction:
    return BatchableAction(unit_id, OrderKind.MOVE, point=point)


def attack_move(unit_id: int, point: Point) -> BatchableAction:
    return BatchableAction(unit_id, OrderKind.ATTACK_MOVE, point=point)


def attack(unit_id: int, target_id: int) -> BatchableAction:
    return BatchableAction(unit_id, OrderKind.ATTACK, target_id=target_id)


def deploy(unit_id: int) -> BatchableAction:
    return BatchableAction(unit_id, OrderKind.DEPLOY)


class ActionBatcher:
    """Collects at most one pending action per unit (last push wins)."""

    def __init__(self) -> None:
        self._pending: dict[int, BatchableAction] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def push(self, action: BatchableAction) -> bool:
        """Queue *action*.  Returns False if it repeats the unit's pending one."""
        if self._pending.get(action.unit_id) == action:
            return False
        self._pending[action.unit_id] = action
        return True

    def pending(self, unit_id: int) -> BatchableAction | None:
        return self._pending.get(unit_id)

    def clear(self) -> None:
        self._pending.clear()

    def resolve(self, sink: OrderSink) -> int:
        """Emit grouped orders to *sink* and clear the buffer.

        Returns the number of ``order_units`` calls made.
        """
        groups: dict[tuple, list[int]] = {}
        for action in self._pending.values():
            groups.setdefault(action.order_key, []).append(action.unit_id)
        self._pending.clear()

        for (kind, point, target_id), unit_ids in groups.items():
            sink.order_units(sorted(unit_ids), kind, point=point, target_id=target_id)
        if groups:
            logger.debug(f"Resolved {sum(len(v) for v in groups.values())} orders in {len(groups)} batches")
        return len(groups)

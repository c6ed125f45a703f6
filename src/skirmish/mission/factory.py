"""Mission factory interface.

Factories watch the world and add missions to the controller when their
trigger holds.  Every factory must implement:
- name                   — unique identifier, used in logs
- maybe_create_missions()

and may override:
- on_mission_failed()    — retry or successor logic after a disband
- create_sub_mission()   — serve ``RequestSubMission`` for ``handles``
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from skirmish.geometry import Point
from skirmish.mission.actions import DisbandReason, MissionKind

if TYPE_CHECKING:
    from skirmish.mission.base import Mission, TickContext
    from skirmish.mission.controller import MissionController


class MissionFactory(ABC):

    # Sub-mission kind this factory builds on request, if any
    handles: ClassVar[MissionKind | None] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique factory name."""

    @abstractmethod
    def maybe_create_missions(self, ctx: TickContext, controller: MissionController) -> None:
        """Add missions to *controller* if this factory's trigger holds."""

    def on_mission_failed(
        self,
        ctx: TickContext,
        mission: Mission,
        reason: DisbandReason | None,
        controller: MissionController,
    ) -> None:
        """Called for every disbanded mission, after its completion callbacks."""

    def create_sub_mission(
        self,
        ctx: TickContext,
        requester: Mission,
        target: Point,
        radius: float,
        controller: MissionController,
    ) -> Mission | None:
        """Build a mission requested by *requester*.  None declines."""
        return None

"""Tactical layer — wires the controller and paces it against the game clock.

The host calls ``TacticalLayer.on_tick()`` on every game tick.  Only every
``tick_ratio``-th tick is a decision tick (keeping the agent under its
actions-per-minute budget); missions run on every ``mission_update_divisor``-th
decision tick, and pending orders are flushed to the host on each decision.
"""

from __future__ import annotations

from loguru import logger

from skirmish.batcher import ActionBatcher
from skirmish.comms.event_bus import EventBus
from skirmish.config import TacticsSettings, settings as default_settings, ticks_per_decision
from skirmish.mission.attack import AttackMissionFactory
from skirmish.mission.base import TickContext
from skirmish.mission.controller import MissionController
from skirmish.mission.naval import NavalMissionFactory
from skirmish.mission.scouting import ScoutingMissionFactory
from skirmish.world import Awareness, GameView, OrderSink


def build_controller(
    settings: TacticsSettings | None = None,
    event_bus: EventBus | None = None,
) -> MissionController:
    """Controller with every factory enabled in *settings*."""
    cfg = settings or default_settings
    controller = MissionController(event_bus=event_bus)
    if cfg.enable_attack:
        controller.register_factory(AttackMissionFactory())
    if cfg.enable_naval:
        controller.register_factory(NavalMissionFactory())
    if cfg.enable_scouting:
        controller.register_factory(ScoutingMissionFactory())
    if not controller.factories:
        logger.warning("No mission factories enabled; the tactical layer will stay idle")
    return controller


class TacticalLayer:
    """Per-tick driver around one ``MissionController`` and ``ActionBatcher``."""

    def __init__(
        self,
        tick_rate: int,
        settings: TacticsSettings | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.tick_ratio = ticks_per_decision(tick_rate, self.settings.actions_per_minute)
        self.controller = build_controller(self.settings, event_bus)
        self.batcher = ActionBatcher()
        self._decisions = 0
        logger.info(
            f"Tactical layer: deciding every {self.tick_ratio} ticks, "
            f"missions every {self.settings.mission_update_divisor} decisions"
        )

    def on_tick(self, game: GameView, awareness: Awareness, sink: OrderSink) -> bool:
        """Advance one game tick.  Returns True if this was a decision tick."""
        if game.current_tick % self.tick_ratio != 0:
            return False
        if self._decisions % self.settings.mission_update_divisor == 0:
            self.controller.on_ai_update(TickContext(game, awareness, self.batcher))
            if self.settings.debug:
                logger.debug(f"Missions at tick {game.current_tick}:\n{self.controller.get_global_debug_text()}")
        self._decisions += 1
        self.batcher.resolve(sink)
        return True

    def requested_unit_types(self) -> dict[str, float]:
        """Unmet unit demand for the production manager."""
        return self.controller.get_requested_unit_types()

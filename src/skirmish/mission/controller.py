"""MissionController — owns missions and factories and arbitrates units.

One ``on_ai_update()`` call is one decision tick:

1. claim initial units of missions added outside a tick, drop stale ids
2. let every factory add missions
3. update every mission in creation order (faults become ``Disband(ERROR)``)
4. end disbanded missions: completion callbacks, factory failure hooks
5. route sub-mission requests and answer area searches
6. run the allocation auction over this tick's unit requests
7. forget disbanded missions

Ownership is derived from the missions' own unit sets, so a unit can never
be counted for two missions at once.
"""

from __future__ import annotations

import itertools
from collections import defaultdict
from typing import Iterable

from loguru import logger

from skirmish.comms.event_bus import EventBus
from skirmish.geometry import distance
from skirmish.mission.actions import (
    Disband,
    DisbandReason,
    MissionAction,
    MissionKind,
    RequestSubMission,
    RequestUnits,
    SearchArea,
)
from skirmish.mission.base import Mission, TickContext
from skirmish.mission.factory import MissionFactory


class MissionController:
    """Runs the mission pipeline once per decision tick."""

    def __init__(self, factories: Iterable[MissionFactory] = (), event_bus: EventBus | None = None) -> None:
        self._missions: list[Mission] = []
        self._factories: list[MissionFactory] = []
        self._sub_factories: dict[MissionKind, MissionFactory] = {}
        self._sequence = itertools.count()
        self._unclaimed: list[Mission] = []
        self._unmet: dict[str, float] = {}
        self._event_bus = event_bus
        for factory in factories:
            self.register_factory(factory)

    # -- registration --

    def register_factory(self, factory: MissionFactory) -> None:
        if any(f.name == factory.name for f in self._factories):
            raise ValueError(f"Mission factory '{factory.name}' is already registered")
        self._factories.append(factory)
        if factory.handles is not None:
            self._sub_factories[factory.handles] = factory
        logger.info(f"Mission factory registered: {factory.name}")

    @property
    def factories(self) -> tuple[MissionFactory, ...]:
        return tuple(self._factories)

    def add_mission(self, mission: Mission, ctx: TickContext | None = None) -> bool:
        """Add *mission* unless an active mission already uses its name.

        Initial unit ids are claimed immediately when *ctx* is given,
        otherwise at the start of the next tick.
        """
        if any(m.name == mission.name and not m.disbanded for m in self._missions):
            logger.debug(f"Mission {mission.name} already exists, not adding")
            return False
        mission.sequence = next(self._sequence)
        if ctx is not None:
            mission.created_at = ctx.tick
        self._missions.append(mission)
        if mission.initial_unit_ids:
            if ctx is not None:
                self._claim_initial(ctx, mission)
            else:
                self._unclaimed.append(mission)
        logger.info(f"Mission added: {mission.name} (priority {mission.priority:.0f})")
        self._publish("mission_added", {"name": mission.name, "kind": mission.kind.value})
        return True

    def get_missions(self) -> tuple[Mission, ...]:
        return tuple(m for m in self._missions if not m.disbanded)

    def get_mission(self, name: str) -> Mission | None:
        for m in self._missions:
            if m.name == name and not m.disbanded:
                return m
        return None

    def owner_of(self, unit_id: int) -> Mission | None:
        for m in self._missions:
            if not m.disbanded and unit_id in m.unit_ids:
                return m
        return None

    # -- tick --

    def on_ai_update(self, ctx: TickContext) -> None:
        for mission in self._unclaimed:
            if not mission.disbanded:
                self._claim_initial(ctx, mission)
        self._unclaimed.clear()
        self._prune_stale(ctx)

        for factory in list(self._factories):
            try:
                factory.maybe_create_missions(ctx, self)
            except Exception:
                logger.exception(f"Mission factory '{factory.name}' failed to create missions")

        actions: list[tuple[Mission, MissionAction]] = []
        for mission in list(self._missions):
            if mission.disbanded:
                continue
            if mission.created_at is None:
                mission.created_at = ctx.tick
            try:
                action = mission.update(ctx)
            except Exception:
                logger.exception(f"Mission {mission.name} raised during update, disbanding")
                action = Disband(DisbandReason.ERROR)
            actions.append((mission, action))

        for mission, action in actions:
            if isinstance(action, Disband):
                self._disband(ctx, mission, action.reason)

        requests: list[tuple[Mission, RequestUnits]] = []
        for mission, action in actions:
            if mission.disbanded:
                continue
            if isinstance(action, RequestUnits):
                requests.append((mission, action))
            elif isinstance(action, RequestSubMission):
                self._route_sub_mission(ctx, mission, action)
            elif isinstance(action, SearchArea):
                self._answer_search(ctx, mission, action)

        self._allocate(ctx, requests)
        self._missions = [m for m in self._missions if not m.disbanded]

    def get_requested_unit_types(self) -> dict[str, float]:
        """Unmet demand from the last auction: type -> sum of count * priority."""
        return dict(self._unmet)

    def get_global_debug_text(self) -> str:
        lines = []
        for m in self.get_missions():
            try:
                lines.append(m.debug_text())
            except Exception as e:
                lines.append(f"{m.name}: <debug failed: {e}>")
        return "\n".join(lines)

    # -- internals --

    def _publish(self, event_type: str, data: dict) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event_type, data)

    def _claim_initial(self, ctx: TickContext, mission: Mission) -> None:
        game = ctx.game
        for uid in mission.initial_unit_ids:
            unit = game.get_unit(uid)
            if unit is None or unit.owner != game.player_name:
                continue
            holder = self.owner_of(uid)
            if holder is mission:
                continue
            if holder is not None:
                if holder.is_units_locked():
                    continue
                holder.remove_unit(uid)
            mission.add_unit(uid)

    def _prune_stale(self, ctx: TickContext) -> None:
        game = ctx.game
        for mission in self._missions:
            for uid in mission.unit_ids:
                unit = game.get_unit(uid)
                if unit is None or unit.owner != game.player_name:
                    mission.remove_unit(uid)

    def _disband(self, ctx: TickContext, mission: Mission, reason: DisbandReason | None) -> None:
        released = mission.unit_ids
        try:
            mission.end_mission(ctx, reason, released)
        except Exception:
            logger.exception(f"Completion callback of mission {mission.name} failed")
            mission.disbanded = True
        for factory in list(self._factories):
            try:
                factory.on_mission_failed(ctx, mission, reason, self)
            except Exception:
                logger.exception(f"Mission factory '{factory.name}' failed handling end of {mission.name}")
        self._publish("mission_disbanded", {
            "name": mission.name,
            "reason": reason.value if reason else None,
            "units": sorted(released),
        })

    def _route_sub_mission(self, ctx: TickContext, requester: Mission, action: RequestSubMission) -> None:
        factory = self._sub_factories.get(action.kind)
        if factory is None:
            logger.warning(f"Mission {requester.name} requested a {action.kind.value} mission but no factory serves it")
            return
        try:
            sub = factory.create_sub_mission(ctx, requester, action.target, action.radius, self)
        except Exception:
            logger.exception(f"Mission factory '{factory.name}' failed to build a sub-mission")
            return
        if sub is not None and self.add_mission(sub, ctx):
            logger.info(f"Mission {requester.name} spawned {sub.name}")

    def _answer_search(self, ctx: TickContext, mission: Mission, action: SearchArea) -> None:
        hits = ctx.awareness.hostiles_near(action.point, action.radius)
        found = None
        for uid, _d in hits:
            unit = ctx.game.get_unit(uid)
            if unit is not None:
                found = unit.position
                break
        mission.on_search_result(ctx, found)

    def _allocate(self, ctx: TickContext, requests: list[tuple[Mission, RequestUnits]]) -> None:
        game = ctx.game
        owner: dict[int, Mission] = {}
        for m in self._missions:
            if not m.disbanded:
                for uid in m.unit_ids:
                    owner[uid] = m

        supply = []
        for uid in game.own_unit_ids():
            unit = game.get_unit(uid)
            if unit is None or unit.is_structure:
                continue
            holder = owner.get(uid)
            if holder is not None and holder.is_units_locked():
                continue
            supply.append(unit)

        unmet: dict[str, float] = defaultdict(float)
        ordered = sorted(requests, key=lambda r: (-r[1].priority, r[0].sequence))
        for mission, request in ordered:
            remaining = {t: n for t, n in request.composition.items() if n > 0}
            cap = request.max_units
            center = mission.center_of_mass(u for u in (game.get_unit(i) for i in mission.unit_ids) if u)

            def available(unit) -> bool:
                if remaining.get(unit.type_name, 0) <= 0:
                    return False
                holder = owner.get(unit.unit_id)
                if holder is None:
                    return True
                return holder is not mission and not holder.is_units_locked() and holder.priority < request.priority

            candidates = [u for u in supply if available(u)]
            if center is not None:
                candidates.sort(key=lambda u: (distance(u.position, center), u.unit_id))
            else:
                candidates.sort(key=lambda u: u.unit_id)

            granted: list[int] = []
            for unit in candidates:
                if cap is not None and len(granted) >= cap:
                    break
                if remaining.get(unit.type_name, 0) <= 0:
                    continue
                holder = owner.get(unit.unit_id)
                if holder is not None:
                    holder.remove_unit(unit.unit_id)
                    logger.debug(f"Unit {unit.unit_id} reassigned {holder.name} -> {mission.name}")
                mission.add_unit(unit.unit_id)
                owner[unit.unit_id] = mission
                remaining[unit.type_name] -= 1
                granted.append(unit.unit_id)

            if cap is None or len(granted) < cap:
                for t, n in remaining.items():
                    if n > 0:
                        unmet[t] += n * request.priority
            if granted:
                self._publish("units_granted", {"mission": mission.name, "units": granted})
        self._unmet = dict(unmet)

"""Missions — unit-owning state machines arbitrated by the controller."""
from .actions import (
    Disband,
    DisbandReason,
    MissionAction,
    MissionKind,
    Noop,
    RequestSubMission,
    RequestUnits,
    SearchArea,
    missing_units,
    request_units,
)
from .base import Mission, PriorityRamp, TickContext
from .factory import MissionFactory
from .controller import MissionController
from .retreat import RetreatMission
from .attack import AttackMission, AttackMissionFactory, AttackState
from .naval import NavalMission, NavalMissionFactory, NavalState
from .scouting import ScoutingMission, ScoutingMissionFactory

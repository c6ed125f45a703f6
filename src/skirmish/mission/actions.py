"""What a mission asks of the controller after each update.

Every ``Mission.update()`` returns exactly one of these.  They are plain
frozen values; the controller pattern-matches on the class.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Union

from skirmish.geometry import Point


class DisbandReason(Enum):
    """Why a mission gave up."""
    NO_TARGETS = "no_targets"
    DEFENCE_TOO_STRONG = "defence_too_strong"
    ERROR = "error"


class MissionKind(Enum):
    """Closed set of mission variants; also keys sub-mission routing."""
    ATTACK = "attack"
    NAVAL = "naval"
    SCOUTING = "scouting"
    RETREAT = "retreat"


@dataclass(frozen=True)
class Noop:
    pass


@dataclass(frozen=True)
class RequestUnits:
    composition: Mapping[str, int] = field(default_factory=dict)
    priority: float = 0.0
    max_units: int | None = None


@dataclass(frozen=True)
class Disband:
    reason: DisbandReason | None = None


@dataclass(frozen=True)
class RequestSubMission:
    kind: MissionKind
    target: Point
    radius: float = 15.0


@dataclass(frozen=True)
class SearchArea:
    point: Point
    radius: float


MissionAction = Union[Noop, RequestUnits, Disband, RequestSubMission, SearchArea]


def request_units(types: Iterable[str], priority: float, max_units: int | None = None) -> RequestUnits:
    """Build a request from a type list; a type listed k times may get k units."""
    return RequestUnits(composition=dict(Counter(types)), priority=priority, max_units=max_units)


def missing_units(wanted: Mapping[str, int], have: Mapping[str, int]) -> dict[str, int]:
    """Per-type shortfall of *have* against *wanted* (only positive entries)."""
    return {t: n - have.get(t, 0) for t, n in wanted.items() if n - have.get(t, 0) > 0}

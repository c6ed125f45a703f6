"""Unit compositions requested by attack and naval missions.

Compositions depend on which tech structures we own.  A player owning any
Soviet construction structure gets the Soviet land composition.
"""

from __future__ import annotations

_SOVIET_MARKERS = {"NACNST", "NAWEAP", "NAYARD", "NAHAND", "NAPOWR", "NAREFN"}
_AIR_FORCE = {"GAAIRC", "AMRADR"}


def is_soviet(structures: set[str]) -> bool:
    return bool(structures & _SOVIET_MARKERS)


def allied_composition(structures: set[str]) -> dict[str, int]:
    battle_lab = "GATECH" in structures
    composition = {"E1": 3 if battle_lab else 5}
    if "GAWEAP" in structures:
        composition["MTNK"] = 2 if battle_lab else 3
        composition["FV"] = 3
    if structures & _AIR_FORCE:
        composition["JUMPJET"] = 6
    if battle_lab:
        composition["SREF"] = 2
        composition["MGTK"] = 3
    return composition


def soviet_composition(structures: set[str]) -> dict[str, int]:
    composition = {"E2": 5}
    if "NAWEAP" in structures:
        composition["HTNK"] = 3
        composition["HTK"] = 2
    return composition


def attack_composition(structures: set[str]) -> dict[str, int]:
    if is_soviet(structures):
        return soviet_composition(structures)
    return allied_composition(structures)


def naval_composition(structures: set[str]) -> dict[str, int]:
    composition = {"DEST": 2}
    if structures & _AIR_FORCE:
        composition["AEGIS"] = 1
    if "GATECH" in structures:
        composition["DLPH"] = 1
        composition["CARRIER"] = 1
    return composition

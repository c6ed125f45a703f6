"""Unit tests for the unit type registry."""
from __future__ import annotations

import pytest

from skirmish.units import (
    MovementDomain,
    all_types,
    get_type,
    naval_type_ids,
    scout_type_ids,
    structure_type_ids,
)
from skirmish.world import UnitSnapshot


@pytest.mark.unit
class TestRegistry:

    def test_lookup(self):
        t = get_type("MTNK")
        assert t is not None
        assert t.domain is MovementDomain.GROUND
        assert t.combat.is_combatant

    def test_unknown_type_is_none(self):
        assert get_type("NOPE") is None

    def test_ids_are_unique(self):
        ids = [t.type_id for t in all_types()]
        assert len(ids) == len(set(ids))

    def test_categories(self):
        assert "DEST" in naval_type_ids()
        assert "LCRF" in naval_type_ids()
        assert "GAYARD" in structure_type_ids()
        assert "GAYARD" not in naval_type_ids()

    def test_scout_types_split_by_water(self):
        land = scout_type_ids()
        water = scout_type_ids(water=True)
        assert "E1" in land and "FV" in land
        assert water == ["DEST"]

    def test_shipyards_are_high_value(self):
        for type_id in ("GAYARD", "NAYARD"):
            t = get_type(type_id)
            assert t.is_shipyard and t.high_value and t.is_structure


@pytest.mark.unit
class TestUnitSnapshot:

    def test_derived_properties(self):
        u = UnitSnapshot(1, "DEST", "me", (0.0, 0.0))
        assert u.is_naval and u.is_combatant
        assert not u.is_structure
        assert u.weapon_range == 9.0

    def test_deployed_range(self):
        gi = UnitSnapshot(1, "E1", "me", (0.0, 0.0))
        dug_in = UnitSnapshot(1, "E1", "me", (0.0, 0.0), deployed=True)
        assert gi.can_deploy
        assert gi.weapon_range == 4.0
        assert dug_in.weapon_range == 5.0

    def test_unknown_type_defaults(self):
        u = UnitSnapshot(1, "???", "me", (0.0, 0.0))
        assert u.unit_type is None
        assert u.domain is MovementDomain.GROUND
        assert u.weapon_range == 5.0
        assert not u.is_structure
        assert u.is_combatant and u.anti_ground and not u.anti_air

    def test_host_facts_override_registry(self):
        u = UnitSnapshot(1, "MTNK", "me", (0.0, 0.0), weapon_range=8.0, domain=MovementDomain.AMPHIBIOUS)
        assert u.weapon_range == 8.0
        assert u.is_naval
        assert u.is_combatant

    def test_host_structure_of_unknown_type(self):
        u = UnitSnapshot(1, "XPOWR", "enemy", (0.0, 0.0), is_structure=True)
        assert u.domain is MovementDomain.STATIONARY
        assert u.weapon_range == 0.0
        assert not u.is_combatant

    def test_common_buildings_registered(self):
        for type_id in ("GAPOWR", "NAPOWR", "GAREFN", "NAREFN", "NAHAND"):
            assert UnitSnapshot(1, type_id, "enemy", (0.0, 0.0)).is_structure

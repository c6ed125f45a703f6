from skirmish.units.base import CombatStats, MovementDomain, UnitType


class GI(UnitType):
    type_id = "E1"
    display_name = "GI"
    domain = MovementDomain.FOOT
    speed = 4.0
    is_scout = True
    combat = CombatStats(
        max_health=125, weapon_range=4.0, weapon_damage=15,
        is_combatant=True, deployed_range=5.0,
    )


class Conscript(UnitType):
    type_id = "E2"
    display_name = "Conscript"
    domain = MovementDomain.FOOT
    speed = 4.0
    is_scout = True
    combat = CombatStats(
        max_health=125, weapon_range=4.0, weapon_damage=10,
        is_combatant=True,
    )


class AlliedDog(UnitType):
    type_id = "ADOG"
    display_name = "Attack Dog"
    domain = MovementDomain.FOOT
    speed = 7.0
    is_scout = True
    combat = CombatStats(
        max_health=100, weapon_range=1.0, weapon_damage=100,
        is_combatant=True,
    )


class SovietDog(UnitType):
    type_id = "DOG"
    display_name = "Attack Dog"
    domain = MovementDomain.FOOT
    speed = 7.0
    is_scout = True
    combat = CombatStats(
        max_health=100, weapon_range=1.0, weapon_damage=100,
        is_combatant=True,
    )


class RocketeerSoldier(UnitType):
    type_id = "JUMPJET"
    display_name = "Rocketeer"
    domain = MovementDomain.AIR
    speed = 8.0
    combat = CombatStats(
        max_health=120, weapon_range=4.5, weapon_damage=20,
        is_combatant=True, anti_air=True,
    )

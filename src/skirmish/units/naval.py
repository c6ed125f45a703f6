from skirmish.units.base import CombatStats, MovementDomain, UnitType


class Destroyer(UnitType):
    type_id = "DEST"
    display_name = "Destroyer"
    domain = MovementDomain.WATER
    speed = 7.0
    is_scout = True
    combat = CombatStats(
        max_health=600, weapon_range=9.0, weapon_damage=50,
        is_combatant=True,
    )


class AegisCruiser(UnitType):
    type_id = "AEGIS"
    display_name = "Aegis Cruiser"
    domain = MovementDomain.WATER
    speed = 6.0
    combat = CombatStats(
        max_health=800, weapon_range=12.0, weapon_damage=40,
        is_combatant=True, anti_ground=False, anti_air=True,
    )


class Dolphin(UnitType):
    type_id = "DLPH"
    display_name = "Dolphin"
    domain = MovementDomain.WATER
    speed = 8.0
    combat = CombatStats(
        max_health=200, weapon_range=4.0, weapon_damage=30,
        is_combatant=True,
    )


class AircraftCarrier(UnitType):
    type_id = "CARRIER"
    display_name = "Aircraft Carrier"
    domain = MovementDomain.WATER
    speed = 4.0
    combat = CombatStats(
        max_health=900, weapon_range=20.0, weapon_damage=60,
        is_combatant=True,
    )


class TyphoonSub(UnitType):
    type_id = "SUB"
    display_name = "Typhoon Attack Sub"
    domain = MovementDomain.WATER
    speed = 6.0
    combat = CombatStats(
        max_health=600, weapon_range=6.0, weapon_damage=70,
        is_combatant=True,
    )


class SeaScorpion(UnitType):
    type_id = "HYD"
    display_name = "Sea Scorpion"
    domain = MovementDomain.WATER
    speed = 8.0
    combat = CombatStats(
        max_health=400, weapon_range=7.0, weapon_damage=30,
        is_combatant=True, anti_air=True,
    )


class AmphibiousTransport(UnitType):
    type_id = "LCRF"
    display_name = "Amphibious Transport"
    domain = MovementDomain.AMPHIBIOUS
    speed = 7.0
    combat = CombatStats(
        max_health=300, weapon_range=0.0, weapon_damage=0,
        is_combatant=False, anti_ground=False,
    )

from skirmish.units.base import CombatStats, MovementDomain, UnitType


class GrizzlyTank(UnitType):
    type_id = "MTNK"
    display_name = "Grizzly Tank"
    domain = MovementDomain.GROUND
    speed = 6.0
    combat = CombatStats(
        max_health=300, weapon_range=5.75, weapon_damage=65,
        is_combatant=True,
    )


class RhinoTank(UnitType):
    type_id = "HTNK"
    display_name = "Rhino Tank"
    domain = MovementDomain.GROUND
    speed = 5.0
    combat = CombatStats(
        max_health=400, weapon_range=5.75, weapon_damage=90,
        is_combatant=True,
    )


class IFV(UnitType):
    type_id = "FV"
    display_name = "IFV"
    domain = MovementDomain.GROUND
    speed = 8.0
    is_scout = True
    combat = CombatStats(
        max_health=200, weapon_range=8.0, weapon_damage=25,
        is_combatant=True, anti_air=True,
    )


class FlakTrack(UnitType):
    type_id = "HTK"
    display_name = "Flak Track"
    domain = MovementDomain.GROUND
    speed = 8.0
    is_scout = True
    combat = CombatStats(
        max_health=180, weapon_range=6.0, weapon_damage=25,
        is_combatant=True, anti_air=True,
    )


class PrismTank(UnitType):
    type_id = "SREF"
    display_name = "Prism Tank"
    domain = MovementDomain.GROUND
    speed = 4.0
    combat = CombatStats(
        max_health=150, weapon_range=8.75, weapon_damage=120,
        is_combatant=True,
    )


class MirageTank(UnitType):
    type_id = "MGTK"
    display_name = "Mirage Tank"
    domain = MovementDomain.GROUND
    speed = 7.0
    combat = CombatStats(
        max_health=200, weapon_range=7.0, weapon_damage=100,
        is_combatant=True,
    )


class ChronoMiner(UnitType):
    type_id = "CMIN"
    display_name = "Chrono Miner"
    domain = MovementDomain.GROUND
    speed = 5.0
    is_harvester = True
    combat = CombatStats(
        max_health=1000, weapon_range=0.0, weapon_damage=0,
        is_combatant=False, anti_ground=False,
    )


class WarMiner(UnitType):
    type_id = "HARV"
    display_name = "War Miner"
    domain = MovementDomain.GROUND
    speed = 4.0
    is_harvester = True
    combat = CombatStats(
        max_health=1000, weapon_range=4.0, weapon_damage=15,
        is_combatant=True,
    )

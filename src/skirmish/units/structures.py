from skirmish.units.base import CombatStats, MovementDomain, UnitType

_PLAIN = CombatStats(
    max_health=1000, weapon_range=0.0, weapon_damage=0,
    is_combatant=False, anti_ground=False,
)


class AlliedConstructionYard(UnitType):
    type_id = "GACNST"
    display_name = "Allied Construction Yard"
    domain = MovementDomain.STATIONARY
    is_structure = True
    combat = _PLAIN


class AlliedBarracks(UnitType):
    type_id = "GAPILE"
    display_name = "Allied Barracks"
    domain = MovementDomain.STATIONARY
    is_structure = True
    combat = _PLAIN


class AlliedWarFactory(UnitType):
    type_id = "GAWEAP"
    display_name = "Allied War Factory"
    domain = MovementDomain.STATIONARY
    is_structure = True
    combat = _PLAIN


class AirForceCommand(UnitType):
    type_id = "GAAIRC"
    display_name = "Air Force Command"
    domain = MovementDomain.STATIONARY
    is_structure = True
    combat = _PLAIN


class AlliedBattleLab(UnitType):
    type_id = "GATECH"
    display_name = "Allied Battle Lab"
    domain = MovementDomain.STATIONARY
    is_structure = True
    combat = _PLAIN


class AlliedNavalYard(UnitType):
    type_id = "GAYARD"
    display_name = "Allied Naval Yard"
    domain = MovementDomain.STATIONARY
    is_structure = True
    is_shipyard = True
    high_value = True
    combat = _PLAIN


class SovietNavalYard(UnitType):
    type_id = "NAYARD"
    display_name = "Soviet Naval Yard"
    domain = MovementDomain.STATIONARY
    is_structure = True
    is_shipyard = True
    high_value = True
    combat = _PLAIN


class AlliedPillbox(UnitType):
    type_id = "GAPILL"
    display_name = "Pillbox"
    domain = MovementDomain.STATIONARY
    is_structure = True
    combat = CombatStats(
        max_health=400, weapon_range=5.0, weapon_damage=20,
        is_combatant=True,
    )


class SovietConstructionYard(UnitType):
    type_id = "NACNST"
    display_name = "Soviet Construction Yard"
    domain = MovementDomain.STATIONARY
    is_structure = True
    combat = _PLAIN


class SovietWarFactory(UnitType):
    type_id = "NAWEAP"
    display_name = "Soviet War Factory"
    domain = MovementDomain.STATIONARY
    is_structure = True
    combat = _PLAIN


class AlliedPowerPlant(UnitType):
    type_id = "GAPOWR"
    display_name = "Allied Power Plant"
    domain = MovementDomain.STATIONARY
    is_structure = True
    combat = _PLAIN


class AlliedRefinery(UnitType):
    type_id = "GAREFN"
    display_name = "Allied Ore Refinery"
    domain = MovementDomain.STATIONARY
    is_structure = True
    combat = _PLAIN


class TeslaReactor(UnitType):
    type_id = "NAPOWR"
    display_name = "Tesla Reactor"
    domain = MovementDomain.STATIONARY
    is_structure = True
    combat = _PLAIN


class SovietRefinery(UnitType):
    type_id = "NAREFN"
    display_name = "Soviet Ore Refinery"
    domain = MovementDomain.STATIONARY
    is_structure = True
    combat = _PLAIN


class SovietBarracks(UnitType):
    type_id = "NAHAND"
    display_name = "Soviet Barracks"
    domain = MovementDomain.STATIONARY
    is_structure = True
    combat = _PLAIN


class SovietRadar(UnitType):
    type_id = "NARADR"
    display_name = "Soviet Radar Tower"
    domain = MovementDomain.STATIONARY
    is_structure = True
    combat = _PLAIN


class SovietBattleLab(UnitType):
    type_id = "NATECH"
    display_name = "Soviet Battle Lab"
    domain = MovementDomain.STATIONARY
    is_structure = True
    combat = _PLAIN

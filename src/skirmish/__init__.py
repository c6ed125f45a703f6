"""skirmish — tactical decision layer for an RTS agent.

Missions own units and run state machines; squads turn a mission's units
into per-unit orders; the controller arbitrates units between missions
with a priority auction; the action batcher merges identical orders.
"""
from .batcher import ActionBatcher, BatchableAction
from .config import TacticsSettings, settings
from .tactics import TacticalLayer, build_controller

__version__ = "0.1.0"

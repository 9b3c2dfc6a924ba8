"""Data models for the battle simulator.

Loadouts and reports are Pydantic V2 schemas (immutable, validated at the
library boundary). Fighters are plain mutable objects that only live for
the duration of one battle.
"""

from __future__ import annotations

from heic_sim.models.enums import (
    BattleOutcome,
    BattlePhase,
    Event,
    StatusKind,
    Tier,
)
from heic_sim.models.fighter import (
    CombatSummary,
    Countdown,
    Fighter,
    StatusGate,
    Statuses,
)
from heic_sim.models.loadout import ItemRef, Loadout
from heic_sim.models.report import BattleReport, FighterReport


__all__ = [
    # Enums
    "BattleOutcome",
    "BattlePhase",
    "Event",
    "StatusKind",
    "Tier",
    # Runtime state
    "CombatSummary",
    "Countdown",
    "Fighter",
    "StatusGate",
    "Statuses",
    # Input / output
    "ItemRef",
    "Loadout",
    "BattleReport",
    "FighterReport",
]

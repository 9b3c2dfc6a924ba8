"""heic-sim - Auto-battler encounter simulator.

Resolves a two-fighter, turn-based battle: scheduled strikes, status
ticks, countdowns and an open catalog of item/weapon behaviours
("capabilities") that react to battle events.

The engine owns the rules; capabilities are supplied by the host through
a ``CapabilityRegistry`` and only ever change fighters through the
mutation helpers on the context they receive.

Example:
    >>> from heic_sim import CapabilityRegistry, Event, simulate
    >>>
    >>> registry = CapabilityRegistry()
    >>>
    >>> @registry.handler("items/spiked_shield", Event.BATTLE_START)
    ... def spikes(ctx):
    ...     ctx.add_thorns(2)
    >>>
    >>> report = simulate(
    ...     {"name": "Knight", "hp": 12, "atk": 2, "items": ["items/spiked_shield"]},
    ...     {"name": "Rogue", "hp": 10, "atk": 3, "speed": 2},
    ...     registry=registry,
    ... )
    >>> report.outcome
    <BattleOutcome.LEFT_WIN: 'LeftWin'>

Modules:
    core: Configuration, logging, and base exceptions.
    models: Loadouts, fighters, enums and reports.
    engine: Dispatch, damage, strikes, ticks, countdowns and the scheduler.
"""

from __future__ import annotations

# Core
from heic_sim.core.config import Settings, SimulationSettings, get_settings
from heic_sim.core.exceptions import HeicSimError
from heic_sim.core.logging import configure_logging, configure_logging_from_settings, get_logger

# Engine
from heic_sim.engine import (
    Battle,
    BattleSimulator,
    Capability,
    CapabilityRegistry,
    EventContext,
    capability,
    default_registry,
    simulate,
)

# Models
from heic_sim.models import (
    BattleOutcome,
    BattleReport,
    Event,
    Fighter,
    FighterReport,
    ItemRef,
    Loadout,
    StatusKind,
    Tier,
)


__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Core
    "Settings",
    "SimulationSettings",
    "get_settings",
    "HeicSimError",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    # Engine
    "Battle",
    "BattleSimulator",
    "Capability",
    "CapabilityRegistry",
    "EventContext",
    "capability",
    "default_registry",
    "simulate",
    # Models
    "BattleOutcome",
    "BattleReport",
    "Event",
    "Fighter",
    "FighterReport",
    "ItemRef",
    "Loadout",
    "StatusKind",
    "Tier",
]

"""Battle engine for the auto-battler simulator.

Submodules:
    registry: Capability registry (slug -> event handlers)
    battle: Battle scope, event dispatch and handler context
    actions: Mutation primitives capabilities call
    damage: Armor-first damage resolution and thresholds
    strike: Single strike resolution
    ticks: Turn-start and turn-end status ticks
    countdowns: Deferred per-fighter actions
    recorder: Transcript and final report
    simulator: Turn scheduler and ``simulate`` entry point

Example:
    >>> from heic_sim.engine import CapabilityRegistry, Event, simulate
    >>>
    >>> registry = CapabilityRegistry()
    >>>
    >>> @registry.handler("items/whetstone", Event.BATTLE_START)
    ... def sharpen(ctx):
    ...     ctx.add_attack(1)
    ...     ctx.log(f"{ctx.owner.name} gains 1 attack")
    >>>
    >>> report = simulate(
    ...     {"name": "A", "atk": 2, "items": ["items/whetstone"]},
    ...     {"name": "B", "atk": 2},
    ...     registry=registry,
    ... )
"""

from __future__ import annotations

# =============================================================================
# Capabilities & Dispatch
# =============================================================================
from heic_sim.engine.battle import Battle, EventContext
from heic_sim.engine.registry import (
    Capability,
    CapabilityDefinition,
    CapabilityRegistry,
    Handler,
    capability,
    default_registry,
    to_event,
)

# =============================================================================
# Combat Resolution
# =============================================================================
from heic_sim.engine.countdowns import (
    add_countdown,
    decrement_countdowns,
    halve_countdowns,
    process_countdowns,
)
from heic_sim.engine.damage import DamageResult, apply_damage, reflect_thorns, soak
from heic_sim.engine.strike import resolve_strike, strike_damage
from heic_sim.engine.ticks import turn_end_ticks, turn_start_ticks

# =============================================================================
# Scheduling & Reporting
# =============================================================================
from heic_sim.engine.recorder import BattleLog, build_report, summarize
from heic_sim.engine.simulator import (
    BattleSimulator,
    determine_outcome,
    pick_order,
    simulate,
)
from heic_sim.models.enums import Event


__all__ = [
    # Capabilities & dispatch
    "Battle",
    "EventContext",
    "Capability",
    "CapabilityDefinition",
    "CapabilityRegistry",
    "Handler",
    "capability",
    "default_registry",
    "to_event",
    "Event",
    # Combat resolution
    "add_countdown",
    "decrement_countdowns",
    "halve_countdowns",
    "process_countdowns",
    "DamageResult",
    "apply_damage",
    "reflect_thorns",
    "soak",
    "resolve_strike",
    "strike_damage",
    "turn_end_ticks",
    "turn_start_ticks",
    # Scheduling & reporting
    "BattleLog",
    "build_report",
    "summarize",
    "BattleSimulator",
    "determine_outcome",
    "pick_order",
    "simulate",
]

"""Enumeration types for the battle simulator.

Defines the event names capabilities hook into, the built-in status
kinds, item tiers, scheduler phases, and battle outcomes.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TypeVar


T = TypeVar("T")


class Event(StrEnum):
    """Events dispatched to capabilities.

    The value doubles as the method name a capability object implements
    to handle the event (e.g. ``def on_hit(self, ctx): ...``).
    """

    # Battle setup
    PRE = "pre"
    """Before the turn order is decided (speed manipulation)."""

    BATTLE_START = "battle_start"
    """Once per fighter, left then right."""

    # Turn lifecycle
    PRE_TURN_START = "pre_turn_start"
    """Before the acting fighter's transient turn fields are reset."""

    TURN_START = "turn_start"
    """After status ticks and countdowns."""

    RECOMPUTE_ATTACK = "recompute_attack"
    """Per-turn attack recompute, right before strikes are counted."""

    TURN_END = "turn_end"
    """After end-of-turn status ticks."""

    # Strikes
    ON_HIT = "on_hit"
    AFTER_STRIKE = "after_strike"
    ON_DAMAGE_DEALT = "on_damage_dealt"

    # Damage thresholds
    ON_DAMAGED = "on_damaged"
    ON_EXPOSED = "on_exposed"
    ON_WOUNDED = "on_wounded"

    # Status ticks
    ON_POISON_TICK = "on_poison_tick"
    ON_RIPTIDE_TICK = "on_riptide_tick"
    ON_ENEMY_RIPTIDE_TICK = "on_enemy_riptide_tick"

    # Countdowns
    ON_COUNTDOWN_TRIGGER = "on_countdown_trigger"
    POST_COUNTDOWN_TRIGGER = "post_countdown_trigger"

    # Mutation notifications
    ON_HEAL = "on_heal"
    ON_GAIN_ARMOR = "on_gain_armor"
    ON_GAIN_STATUS = "on_gain_status"
    ON_THORNS_GAIN = "on_thorns_gain"
    ON_BOMB_DAMAGE = "on_bomb_damage"


class StatusKind(StrEnum):
    """Status kinds the engine itself interprets.

    Capabilities may use any other string key; unknown kinds read as 0
    and otherwise behave like these.
    """

    POISON = "poison"
    ACID = "acid"
    RIPTIDE = "riptide"
    FREEZE = "freeze"
    STUN = "stun"
    THORNS = "thorns"
    REGEN = "regen"
    PURITY = "purity"


class Tier(StrEnum):
    """Item upgrade tiers."""

    BASE = "base"
    GOLD = "gold"
    DIAMOND = "diamond"

    def pick(self, base: T, gold: T, diamond: T) -> T:
        """Select the value matching this tier.

        Args:
            base: Value for the base tier.
            gold: Value for the gold tier.
            diamond: Value for the diamond tier.

        Returns:
            The value for this tier.

        Example:
            >>> Tier.GOLD.pick(1, 2, 4)
            2
        """
        if self is Tier.GOLD:
            return gold
        if self is Tier.DIAMOND:
            return diamond
        return base


class BattlePhase(StrEnum):
    """Scheduler phases, in order."""

    SETUP = "setup"
    PRE_BATTLE = "pre_battle"
    BATTLE_START = "battle_start"
    TURN_LOOP = "turn_loop"
    ENDED = "ended"


class BattleOutcome(StrEnum):
    """Final result of a battle."""

    LEFT_WIN = "LeftWin"
    RIGHT_WIN = "RightWin"
    DRAW = "Draw"


__all__ = [
    "Event",
    "StatusKind",
    "Tier",
    "BattlePhase",
    "BattleOutcome",
]

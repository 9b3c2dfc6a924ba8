"""Mutation primitives exposed to capabilities.

Capabilities should change fighters through these helpers (usually via
the bound versions on ``EventContext``) rather than by assigning fields,
because these enforce caps, keep the summary counters and attribution
right, and emit the follow-on events other capabilities listen for.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from heic_sim.engine.damage import DamageResult, apply_damage
from heic_sim.models.enums import Event, StatusKind


if TYPE_CHECKING:
    from heic_sim.engine.battle import Battle
    from heic_sim.models.fighter import Fighter


def heal(battle: Battle, fighter: Fighter, other: Fighter, amount: float) -> int:
    """Restore health, capped at max health.

    ``fighter.heal_multiplier`` scales the amount first. Emits ON_HEAL with
    the health actually restored.

    Returns:
        Health restored.
    """
    amount = math.floor(amount * fighter.heal_multiplier)
    healed = min(max(0, amount), fighter.hp_max - fighter.hp)
    if healed <= 0:
        return 0
    fighter.hp += healed
    fighter.healed_this_turn += healed
    battle.record(f"{fighter.name} heals {healed}")
    battle.dispatch(Event.ON_HEAL, fighter, other, amount=healed)
    return healed


def add_attack(fighter: Fighter, amount: int) -> None:
    """Change base attack."""
    fighter.atk += amount


def add_temp_attack(fighter: Fighter, amount: int) -> None:
    """Change attack until the fighter's next turn start."""
    fighter.temp_atk += amount


def add_extra_strikes(fighter: Fighter, amount: int) -> None:
    """Grant extra strikes for the current turn."""
    fighter.extra_strikes += amount


def add_armor(battle: Battle, fighter: Fighter, other: Fighter, amount: float) -> int:
    """Change armor (never below 0).

    Emits ON_GAIN_ARMOR with the armor actually gained, if any.

    Returns:
        Armor gained (0 for losses).
    """
    before = fighter.armor
    fighter.armor = before + math.floor(amount)
    gained = max(0, fighter.armor - before)
    if gained > 0:
        battle.dispatch(Event.ON_GAIN_ARMOR, fighter, other, amount=gained)
    return gained


def add_status(
    battle: Battle,
    fighter: Fighter,
    other: Fighter,
    kind: StatusKind | str,
    amount: int,
) -> int:
    """Change a status stack (never below 0).

    Gains are dropped when ``fighter.status_gate`` rejects them. Stacks
    gained are counted in the fighter's summary and, when another fighter
    is the current actor, as inflicted by that fighter. Thorns gains emit
    ON_THORNS_GAIN; every gain emits ON_GAIN_STATUS with ``key``,
    ``is_new``, ``amount`` and ``delta``.

    Args:
        battle: The battle scope.
        fighter: Fighter whose status changes.
        other: The opposing fighter.
        kind: Status kind.
        amount: Stacks to add (negative to remove).

    Returns:
        The actual change in stacks.
    """
    kind = str(kind)
    amount = math.floor(amount)
    if amount > 0 and fighter.status_gate is not None and not fighter.status_gate(fighter, kind, amount):
        return 0

    previous = fighter.statuses[kind]
    fighter.statuses[kind] = previous + amount
    current = fighter.statuses[kind]
    delta = current - previous

    if delta > 0:
        fighter.summary.record_gained(kind, delta)
        actor = battle.current_actor
        if actor is not None and actor is not fighter:
            actor.summary.record_inflicted(kind, delta)

    if amount > 0:
        if kind == StatusKind.THORNS:
            battle.dispatch(Event.ON_THORNS_GAIN, fighter, other, delta=amount)
        battle.dispatch(
            Event.ON_GAIN_STATUS,
            fighter,
            other,
            key=kind,
            is_new=previous == 0 and current > 0,
            amount=amount,
            delta=delta,
        )
    return delta


def spend_armor_to_thorns(fighter: Fighter, amount: int) -> int:
    """Convert up to ``amount`` armor into the same number of thorns.

    Returns:
        Armor converted.
    """
    used = min(fighter.armor, max(0, math.floor(amount)))
    fighter.armor -= used
    fighter.statuses[StatusKind.THORNS] += used
    return used


def damage_other(battle: Battle, fighter: Fighter, other: Fighter, amount: float) -> DamageResult:
    """Deal damage through damage resolution and fire threshold events.

    ON_EXPOSED / ON_WOUNDED are dispatched on the damaged fighter when this
    damage crossed the threshold.
    """
    result = apply_damage(battle, fighter, other, amount)
    if result.exposed_now:
        battle.dispatch(Event.ON_EXPOSED, other, fighter)
    if result.wounded_now:
        battle.dispatch(Event.ON_WOUNDED, other, fighter)
    return result


def bomb_damage(battle: Battle, fighter: Fighter, other: Fighter, base: float) -> int:
    """Deal bomb-tagged damage.

    Repeats ``fighter.bomb_repeat`` times. Each repeat adds
    ``bomb_flat_bonus``; ``bomb_next_bonus`` applies to the first repeat
    only and is then consumed. ON_BOMB_DAMAGE is emitted per repeat with
    the health (``amount``) and armor (``to_armor``) removed.

    Returns:
        Total health removed.
    """
    repeats = max(1, int(fighter.bomb_repeat or 1))
    total_hp = 0
    for _ in range(repeats):
        damage = max(0, math.floor(base + fighter.bomb_flat_bonus + fighter.bomb_next_bonus))
        fighter.bomb_next_bonus = 0
        result = damage_other(battle, fighter, other, damage)
        total_hp += result.to_hp
        fighter.summary.bomb_hp_dealt += result.to_hp
        battle.dispatch(
            Event.ON_BOMB_DAMAGE,
            fighter,
            other,
            amount=result.to_hp,
            to_armor=result.to_armor,
        )
    return total_hp


def add_gold(battle: Battle, fighter: Fighter, amount: int) -> int:
    """Give gold up to the battle's gold cap.

    Fighters with ``gold_locked`` never gain gold.

    Returns:
        Gold actually gained.
    """
    if not amount or fighter.gold_locked:
        return 0
    before = fighter.gold or 0
    after = min(battle.settings.gold_cap, before + max(0, math.floor(amount)))
    gained = max(0, after - before)
    if gained > 0:
        fighter.gold = after
        fighter.summary.gold_gained += gained
    return gained


__all__ = [
    "heal",
    "add_attack",
    "add_temp_attack",
    "add_extra_strikes",
    "add_armor",
    "add_status",
    "spend_armor_to_thorns",
    "damage_other",
    "bomb_damage",
    "add_gold",
]

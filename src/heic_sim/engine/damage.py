"""Damage resolution: armor-first soak and threshold detection.

Exposed: armor reaches exactly 0 from a positive value, at most
``exposed_limit`` times per battle. Wounded: health first drops to half
of max (rounded down) or lower, once per battle.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from heic_sim.models.enums import Event, StatusKind


if TYPE_CHECKING:
    from heic_sim.engine.battle import Battle
    from heic_sim.models.fighter import Fighter


@dataclass(frozen=True)
class DamageResult:
    """Outcome of one ``apply_damage`` call.

    Attributes:
        to_armor: Armor removed.
        to_hp: Health removed.
        exposed_now: The target just became Exposed; caller dispatches ON_EXPOSED.
        wounded_now: The target just became Wounded; caller dispatches ON_WOUNDED.
    """

    to_armor: int = 0
    to_hp: int = 0
    exposed_now: bool = False
    wounded_now: bool = False

    @property
    def total(self) -> int:
        """Armor plus health removed."""
        return self.to_armor + self.to_hp


def soak(target: Fighter, amount: int) -> tuple[int, int]:
    """Remove ``amount`` from armor first, then health.

    Args:
        target: Fighter taking the damage.
        amount: Non-negative damage.

    Returns:
        Tuple of (armor removed, damage past armor). The second value is
        not capped by remaining health; health itself floors at 0.
    """
    to_armor = min(target.armor, amount)
    target.armor -= to_armor
    to_hp = amount - to_armor
    target.hp -= to_hp
    return to_armor, to_hp


def mark_exposed(target: Fighter, armor_before: int) -> bool:
    """Count an Exposed trigger if armor just went from positive to 0.

    Returns:
        True if the trigger was counted (caller dispatches ON_EXPOSED).
    """
    if armor_before > 0 and target.armor == 0 and target.exposed_count < target.exposed_limit:
        target.exposed_count += 1
        return True
    return False


def mark_wounded(target: Fighter) -> bool:
    """Set ``wounded_done`` the first time health is at or below half.

    Returns:
        True if this call set it (caller dispatches ON_WOUNDED).
    """
    if not target.wounded_done and target.is_wounded:
        target.wounded_done = True
        return True
    return False


def apply_damage(battle: Battle, source: Fighter, target: Fighter, amount: float) -> DamageResult:
    """Resolve damage from ``source`` to ``target``.

    Armor soaks first, the remainder comes off health. The target is
    marked as struck this turn, the source is credited in its summary and
    ON_DAMAGED is dispatched on the target before thresholds are checked,
    so damaged handlers that restore armor or health can prevent them.

    Args:
        battle: The battle scope.
        source: Fighter dealing the damage.
        target: Fighter taking it.
        amount: Raw damage; floored and clamped at 0.

    Returns:
        The damage split and threshold flags.
    """
    amount = max(0, math.floor(amount))
    armor_before = target.armor
    to_armor, to_hp = soak(target, amount)
    target.struck_this_turn = True

    if to_armor > 0:
        battle.record(f"{source.name} destroys {to_armor} armor")
        source.summary.armor_destroyed_dealt += to_armor
    if to_hp > 0:
        battle.record(f"{source.name} hits {target.name} for {to_hp}")
        source.summary.hp_damage_dealt += to_hp

    battle.dispatch(Event.ON_DAMAGED, target, source, armor_lost=to_armor, hp_lost=to_hp)

    exposed_now = (to_armor + to_hp) > 0 and mark_exposed(target, armor_before)
    wounded_now = mark_wounded(target)
    return DamageResult(
        to_armor=to_armor,
        to_hp=to_hp,
        exposed_now=exposed_now,
        wounded_now=wounded_now,
    )


def reflect_thorns(battle: Battle, attacker: Fighter, defender: Fighter) -> tuple[int, int]:
    """Reflect the defender's thorns back at the attacker.

    Armor first, then health. Does not go through ``apply_damage``: no
    events fire and the defender's thorns are left as they are.

    Returns:
        Tuple of (armor removed, health removed) from the attacker.
    """
    thorns = defender.statuses[StatusKind.THORNS]
    if thorns <= 0:
        return 0, 0
    to_armor = min(attacker.armor, thorns)
    attacker.armor -= to_armor
    remaining = thorns - to_armor
    if to_armor > 0:
        battle.record(f"{attacker.name} loses {to_armor} armor to thorns")
    if remaining > 0:
        attacker.hp -= remaining
        battle.record(f"{attacker.name} takes {remaining} thorns damage")
    return to_armor, remaining


__all__ = [
    "DamageResult",
    "soak",
    "mark_exposed",
    "mark_wounded",
    "apply_damage",
    "reflect_thorns",
]

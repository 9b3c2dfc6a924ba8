"""Resolution of a single scheduled strike."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from heic_sim.engine.damage import apply_damage, mark_exposed, mark_wounded, reflect_thorns
from heic_sim.models.enums import Event, StatusKind


if TYPE_CHECKING:
    from heic_sim.engine.battle import Battle
    from heic_sim.models.fighter import Fighter


def strike_damage(attacker: Fighter, defender: Fighter) -> int:
    """Damage a strike would deal before armor.

    Effective attack is ``atk + temp_atk`` (at least 0), halved (rounded
    down) while the attacker is frozen. Then exactly one defender modifier
    applies: the armored reduction while the defender has armor, otherwise
    the unarmored increase.

    Returns:
        Non-negative damage.
    """
    damage = max(0, attacker.atk + attacker.temp_atk)
    if attacker.statuses[StatusKind.FREEZE] > 0:
        damage = math.floor(damage / 2)

    if defender.incoming_reduce_while_armored and defender.armor > 0:
        damage = max(0, damage - defender.incoming_reduce_while_armored)
    elif defender.incoming_increase_while_unarmored and defender.armor <= 0:
        damage = max(0, damage + defender.incoming_increase_while_unarmored)
    return damage


def resolve_strike(battle: Battle, attacker: Fighter, defender: Fighter) -> int:
    """Resolve one strike from ``attacker`` against ``defender``.

    A stunned attacker loses one stun stack and the strike does nothing
    else. Otherwise the strike is soaked, ON_HIT and AFTER_STRIKE run on
    the attacker with Exposed/Wounded re-checked after each (those
    handlers may move armor or health), the defender's thorns are
    reflected, and ON_DAMAGE_DEALT reports the strike's total.

    Args:
        battle: The battle scope.
        attacker: Fighter striking.
        defender: Fighter being struck.

    Returns:
        Aggregate damage dealt by the strike.
    """
    attacker.summary.strikes_attempted += 1

    if attacker.statuses[StatusKind.STUN] > 0:
        attacker.statuses[StatusKind.STUN] -= 1
        battle.record(f"{attacker.name} is stunned and misses the strike")
        return 0

    damage = strike_damage(attacker, defender)
    armor_before = defender.armor
    result = apply_damage(battle, attacker, defender, damage)
    total_dealt = result.total
    if total_dealt > 0:
        attacker.summary.strikes_landed += 1

    exposed_fired = result.exposed_now
    wounded_fired = result.wounded_now
    if exposed_fired:
        battle.dispatch(Event.ON_EXPOSED, defender, attacker)
    if wounded_fired:
        battle.dispatch(Event.ON_WOUNDED, defender, attacker)

    hp_before = defender.hp
    battle.dispatch(Event.ON_HIT, attacker, defender)
    exposed_fired, wounded_fired = _recheck_thresholds(
        battle, attacker, defender, armor_before, exposed_fired, wounded_fired
    )
    if defender.hp < hp_before:
        total_dealt += hp_before - defender.hp

    battle.dispatch(Event.AFTER_STRIKE, attacker, defender)
    _recheck_thresholds(battle, attacker, defender, armor_before, exposed_fired, wounded_fired)

    reflect_thorns(battle, attacker, defender)

    if total_dealt > 0:
        battle.dispatch(Event.ON_DAMAGE_DEALT, attacker, defender, amount=total_dealt)
    return total_dealt


def _recheck_thresholds(
    battle: Battle,
    attacker: Fighter,
    defender: Fighter,
    armor_before: int,
    exposed_fired: bool,
    wounded_fired: bool,
) -> tuple[bool, bool]:
    """Fire Exposed/Wounded on the defender if strike handlers crossed them."""
    if not exposed_fired and mark_exposed(defender, armor_before):
        battle.dispatch(Event.ON_EXPOSED, defender, attacker)
        exposed_fired = True
    if not wounded_fired and mark_wounded(defender):
        battle.dispatch(Event.ON_WOUNDED, defender, attacker)
        wounded_fired = True
    return exposed_fired, wounded_fired


__all__ = [
    "strike_damage",
    "resolve_strike",
]

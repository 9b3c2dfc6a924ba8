"""Status ticks at the start and end of a fighter's own turn.

Turn start: PRE_TURN_START, transient reset, acid, poison, countdowns.
Turn end: regen, riptide, thorns cleanup, freeze.

The matching TURN_START / TURN_END dispatches belong to the scheduler and
run after these ticks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from heic_sim.engine.countdowns import process_countdowns
from heic_sim.engine.damage import soak
from heic_sim.models.enums import Event, StatusKind


if TYPE_CHECKING:
    from heic_sim.engine.battle import Battle
    from heic_sim.models.fighter import Fighter


def turn_start_ticks(battle: Battle, fighter: Fighter, other: Fighter) -> None:
    """Run turn-start statuses and countdowns for the acting fighter.

    Acid removes armor equal to its stacks and does not decay. Poison
    deals its stacks as health damage only while armor is 0, then decays
    by 1 either way.

    Args:
        battle: The battle scope.
        fighter: Fighter whose turn is starting.
        other: The opposing fighter.
    """
    battle.dispatch(Event.PRE_TURN_START, fighter, other)
    fighter.reset_turn()

    acid = fighter.statuses[StatusKind.ACID]
    if acid > 0:
        lost = min(fighter.armor, acid)
        fighter.armor -= lost
        if lost > 0:
            battle.record(f"{fighter.name} loses {lost} armor due to Acid")

    poison = fighter.statuses[StatusKind.POISON]
    if poison > 0:
        if fighter.armor == 0:
            fighter.hp -= poison
            battle.record(f"{fighter.name} suffers {poison} poison damage")
            battle.dispatch(Event.ON_POISON_TICK, fighter, other, amount=poison)
        fighter.statuses[StatusKind.POISON] -= 1

    process_countdowns(battle, fighter, other)


def turn_end_ticks(battle: Battle, fighter: Fighter, other: Fighter) -> None:
    """Run turn-end statuses for the acting fighter.

    Args:
        battle: The battle scope.
        fighter: Fighter whose turn is ending.
        other: The opposing fighter.
    """
    regen = fighter.statuses[StatusKind.REGEN]
    if regen > 0:
        healed = min(regen, fighter.hp_max - fighter.hp)
        if healed > 0:
            fighter.hp += healed
            battle.record(f"{fighter.name} regenerates {healed}")
        fighter.statuses[StatusKind.REGEN] -= 1

    _riptide_ticks(battle, fighter, other)

    if fighter.struck_this_turn and fighter.statuses[StatusKind.THORNS] > 0:
        if fighter.preserve_thorns > 0:
            fighter.preserve_thorns -= 1
            battle.record(f"{fighter.name} preserves thorns ({fighter.preserve_thorns} left)")
        else:
            fighter.statuses[StatusKind.THORNS] = 0

    if fighter.statuses[StatusKind.FREEZE] > 0:
        fighter.statuses[StatusKind.FREEZE] -= 1


def _riptide_ticks(battle: Battle, fighter: Fighter, other: Fighter) -> int:
    """Batter the fighter once per riptide stack, up to its per-turn cap.

    Riptide damage is soaked inline, so ON_DAMAGED never fires for it.

    Returns:
        Number of ticks applied.
    """
    cap = max(1, int(fighter.riptide_max_triggers or 1))
    ticks = 0
    while fighter.statuses[StatusKind.RIPTIDE] > 0 and ticks < cap:
        soak(fighter, battle.settings.riptide_damage)
        battle.record(f"{fighter.name} is battered by Riptide")
        battle.dispatch(Event.ON_ENEMY_RIPTIDE_TICK, other, fighter)
        battle.dispatch(Event.ON_RIPTIDE_TICK, fighter, other)
        fighter.statuses[StatusKind.RIPTIDE] -= 1
        ticks += 1
    return ticks


__all__ = [
    "turn_start_ticks",
    "turn_end_ticks",
]

"""Per-fighter countdowns: deferred named actions.

A countdown ticks once per owner turn start and fires when it reaches 1,
after which it is removed. Its action may register a new countdown; the
due set is snapshotted first, so a freshly registered one never fires in
the same pass.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from heic_sim.core.logging import get_logger
from heic_sim.models.enums import Event
from heic_sim.models.fighter import Countdown


if TYPE_CHECKING:
    from heic_sim.engine.battle import Battle
    from heic_sim.models.fighter import Fighter

logger = get_logger(__name__)


def add_countdown(
    fighter: Fighter,
    name: str,
    turns: int,
    *,
    tag: Any = None,
    action: Callable[..., Any] | None = None,
    source: str | None = None,
) -> int:
    """Register a countdown on a fighter.

    Args:
        fighter: Owner of the countdown.
        name: Display name.
        turns: Owner turn-starts until it fires (at least 1).
        tag: Opaque capability data.
        action: Callable ``(owner, enemy, log, countdown)`` run when it fires.
        source: Slug credited in the transcript when the action runs.

    Returns:
        The countdown id.
    """
    turns = max(1, int(turns or 0))
    countdown = Countdown(
        id=fighter.next_countdown_id(),
        name=name,
        turns_left=turns,
        orig_turns=turns,
        tag=tag,
        action=action,
        source=source,
    )
    fighter.countdowns.append(countdown)
    return countdown.id


def decrement_countdowns(fighter: Fighter, amount: int = 1) -> None:
    """Move every countdown closer by ``amount`` (at least 1), never below 1."""
    step = max(1, int(amount or 0))
    for countdown in fighter.countdowns:
        countdown.turns_left = max(1, countdown.turns_left - step)


def halve_countdowns(fighter: Fighter) -> None:
    """Halve every countdown (rounded down), never below 1."""
    for countdown in fighter.countdowns:
        countdown.turns_left = max(1, math.floor(countdown.turns_left / 2))


def process_countdowns(battle: Battle, owner: Fighter, enemy: Fighter) -> list[Countdown]:
    """Tick the owner's countdowns and fire the ones that are due.

    For each due countdown, in registration order: ON_COUNTDOWN_TRIGGER,
    the action, then POST_COUNTDOWN_TRIGGER. The record passed along has
    already been removed from ``owner.countdowns``.

    Args:
        battle: The battle scope.
        owner: Fighter whose turn is starting.
        enemy: The opposing fighter.

    Returns:
        The countdowns that fired.
    """
    for countdown in owner.countdowns:
        countdown.turns_left = max(1, countdown.turns_left - 1)

    due = [countdown for countdown in owner.countdowns if countdown.turns_left == 1]
    if not due:
        return []
    owner.countdowns = [countdown for countdown in owner.countdowns if countdown.turns_left != 1]

    for countdown in due:
        logger.debug("Countdown fired", owner=owner.name, countdown=countdown.name, id=countdown.id)
        battle.dispatch(Event.ON_COUNTDOWN_TRIGGER, owner, enemy, countdown=countdown)
        if callable(countdown.action):
            with battle.acting(owner), battle.sourced(countdown.source):
                battle.run_action(
                    countdown.action,
                    owner,
                    enemy,
                    battle.say,
                    countdown,
                    name=countdown.name,
                )
        battle.dispatch(Event.POST_COUNTDOWN_TRIGGER, owner, enemy, countdown=countdown)
    return due


__all__ = [
    "add_countdown",
    "decrement_countdowns",
    "halve_countdowns",
    "process_countdowns",
]

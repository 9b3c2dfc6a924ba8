"""Turn scheduler: runs one battle from loadouts to report.

The simulator walks a fixed sequence of phases:

    SETUP -> PRE_BATTLE -> BATTLE_START -> TURN_LOOP -> ENDED

PRE and BATTLE_START are dispatched on the left fighter, then the right,
regardless of speed. In the turn loop the fighters alternate; the one
with strictly higher speed acts first and the right fighter wins ties.

Example:
    >>> from heic_sim import simulate
    >>> report = simulate({"name": "A", "atk": 3}, {"name": "B", "atk": 3})
    >>> report.outcome
    <BattleOutcome.RIGHT_WIN: 'RightWin'>
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from heic_sim.core.config import SimulationSettings, get_settings
from heic_sim.core.exceptions import ConfigurationError, SimulationError
from heic_sim.core.logging import get_logger
from heic_sim.engine.battle import Battle
from heic_sim.engine.recorder import build_report
from heic_sim.engine.registry import default_registry
from heic_sim.engine.strike import resolve_strike
from heic_sim.engine.ticks import turn_end_ticks, turn_start_ticks
from heic_sim.models.enums import BattleOutcome, BattlePhase, Event
from heic_sim.models.fighter import Fighter
from heic_sim.models.loadout import Loadout


if TYPE_CHECKING:
    from heic_sim.engine.registry import CapabilityRegistry
    from heic_sim.models.report import BattleReport

logger = get_logger(__name__)

LoadoutInput = Loadout | Mapping[str, Any]


def pick_order(left: Fighter, right: Fighter) -> tuple[Fighter, Fighter]:
    """Return (first actor, first target).

    Strictly higher speed acts first; on a tie the right fighter does.
    """
    if left.speed > right.speed:
        return left, right
    return right, left


def determine_outcome(left: Fighter, right: Fighter) -> BattleOutcome:
    """Decide the outcome from current health.

    A fighter wins only if it is alive and its opponent is not; anything
    else (both down, or both still standing at the round cap) is a draw.
    """
    if left.hp <= 0 and right.hp > 0:
        return BattleOutcome.RIGHT_WIN
    if right.hp <= 0 and left.hp > 0:
        return BattleOutcome.LEFT_WIN
    return BattleOutcome.DRAW


def strike_count(fighter: Fighter) -> int:
    """Strikes the fighter makes this turn."""
    if fighter.cannot_strike or fighter.skip_turn:
        return 0
    return max(0, math.floor((1 + fighter.extra_strikes) * fighter.strike_factor))


def resolve_settings(
    settings: SimulationSettings | None = None,
    *,
    max_turns: int | None = None,
) -> SimulationSettings:
    """Pick the settings for a battle, applying a round-cap override.

    Falls back to built-in defaults when the environment holds invalid
    configuration, so that ``simulate`` can still run.
    An unreadable ``max_turns`` override is ignored.
    """
    if settings is None:
        try:
            settings = get_settings().simulation
        except ConfigurationError as exc:
            logger.warning("Invalid simulator settings, using defaults", error=exc.message)
            settings = SimulationSettings.model_construct()
    if max_turns is not None:
        try:
            cap = max(1, int(max_turns))
        except (TypeError, ValueError, OverflowError):
            logger.warning("Unreadable round cap ignored", max_turns=repr(max_turns))
        else:
            settings = settings.model_copy(update={"max_turns": cap})
    return settings


class BattleSimulator:
    """Runs a single battle between two loadouts.

    A simulator is single-use: build it, call ``run`` once, read the
    report. Fighters are created fresh from the loadouts in ``__init__``.

    Attributes:
        battle: The battle scope (fighters, transcript, registry).
        phase: Phase the battle is in.
    """

    def __init__(
        self,
        left: LoadoutInput,
        right: LoadoutInput,
        *,
        registry: CapabilityRegistry | None = None,
        settings: SimulationSettings | None = None,
        max_turns: int | None = None,
        seed: int | None = None,
    ) -> None:
        """Build both fighters and the battle scope.

        Args:
            left: Left loadout (model or raw mapping).
            right: Right loadout (model or raw mapping).
            registry: Capabilities to consult; the default registry if None.
            settings: Rules settings; loaded from the environment if None.
            max_turns: Round cap override.
            seed: Seed for the battle's RNG.
        """
        self.phase = BattlePhase.SETUP
        self.settings = resolve_settings(settings, max_turns=max_turns)
        self.battle = Battle(
            self._build_fighter(left),
            self._build_fighter(right),
            registry=registry if registry is not None else default_registry,
            settings=self.settings,
            seed=seed,
        )
        self._logger = logger.bind(battle_id=self.battle.id)

    def _build_fighter(self, raw: LoadoutInput) -> Fighter:
        return Fighter.from_loadout(
            Loadout.from_raw(raw),
            exposed_limit=self.settings.exposed_limit,
            riptide_max_triggers=self.settings.riptide_max_triggers,
            gold_cap=self.settings.gold_cap,
        )

    @property
    def left(self) -> Fighter:
        """Left fighter."""
        return self.battle.left

    @property
    def right(self) -> Fighter:
        """Right fighter."""
        return self.battle.right

    def run(self) -> BattleReport:
        """Play the battle to the end and report it.

        Never raises: an unexpected engine fault ends the battle at the
        current round and the outcome is taken from current health.

        Returns:
            The battle report.
        """
        battle = self.battle
        self._logger.info(
            "Battle started",
            left=self.left.name,
            right=self.right.name,
            max_turns=self.settings.max_turns,
        )
        try:
            self._pre_battle()
            self._battle_start()
            self._turn_loop()
        except Exception as exc:
            fault = SimulationError(
                str(exc) or type(exc).__name__,
                fighter=battle.current_actor.name if battle.current_actor else None,
                round_number=battle.round,
            )
            self._logger.error(
                "Battle aborted by engine fault",
                error=fault.message,
                error_type=type(exc).__name__,
                **fault.details,
            )
        self.phase = BattlePhase.ENDED

        outcome = determine_outcome(self.left, self.right)
        self._logger.info("Battle ended", outcome=outcome.value, rounds=battle.round)
        return build_report(
            self.left,
            self.right,
            outcome=outcome,
            rounds=battle.round,
            log=battle.log,
        )

    # -------------------------------------------------------------------------
    # Phases
    # -------------------------------------------------------------------------

    def _pre_battle(self) -> None:
        self.phase = BattlePhase.PRE_BATTLE
        self.battle.dispatch(Event.PRE, self.left, self.right)
        self.battle.dispatch(Event.PRE, self.right, self.left)

    def _battle_start(self) -> None:
        self.phase = BattlePhase.BATTLE_START
        self.battle.dispatch(Event.BATTLE_START, self.left, self.right)
        self.battle.dispatch(Event.BATTLE_START, self.right, self.left)

    def _turn_loop(self) -> None:
        self.phase = BattlePhase.TURN_LOOP
        battle = self.battle
        actor, target = pick_order(self.left, self.right)

        while battle.round < self.settings.max_turns and self.left.is_alive and self.right.is_alive:
            battle.round += 1
            self._play_turn(actor, target)
            actor, target = target, actor

    def _play_turn(self, actor: Fighter, target: Fighter) -> None:
        """Play one round with ``actor`` acting against ``target``."""
        battle = self.battle
        actor.turn_count += 1
        battle.record(f"-- Turn {battle.round} -- {actor.name}")

        turn_start_ticks(battle, actor, target)
        battle.dispatch(Event.TURN_START, actor, target)
        battle.dispatch(Event.RECOMPUTE_ATTACK, actor, target)

        strikes = strike_count(actor)
        while strikes > 0 and actor.is_alive and target.is_alive:
            resolve_strike(battle, actor, target)
            strikes -= 1

        turn_end_ticks(battle, actor, target)
        battle.dispatch(Event.TURN_END, actor, target)

        actor.first_turn = False


def simulate(
    left: LoadoutInput,
    right: LoadoutInput,
    *,
    registry: CapabilityRegistry | None = None,
    settings: SimulationSettings | None = None,
    max_turns: int | None = None,
    seed: int | None = None,
) -> BattleReport:
    """Simulate a battle between two loadouts.

    Args:
        left: Left loadout (model or raw mapping, snake_case or camelCase).
        right: Right loadout.
        registry: Capabilities to consult; the default registry if None.
        settings: Rules settings; loaded from the environment if None.
        max_turns: Round cap override.
        seed: Seed for capability-internal randomness.

    Returns:
        The battle report.
    """
    simulator = BattleSimulator(
        left,
        right,
        registry=registry,
        settings=settings,
        max_turns=max_turns,
        seed=seed,
    )
    return simulator.run()


__all__ = [
    "BattleSimulator",
    "LoadoutInput",
    "pick_order",
    "determine_outcome",
    "strike_count",
    "resolve_settings",
    "simulate",
]

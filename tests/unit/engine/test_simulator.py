"""Tests for the turn scheduler."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from heic_sim.core.config import SimulationSettings
from heic_sim.core.exceptions import ConfigurationError
from heic_sim.engine import simulator as simulator_module
from heic_sim.engine.battle import EventContext
from heic_sim.engine.registry import CapabilityRegistry
from heic_sim.engine.simulator import (
    BattleSimulator,
    determine_outcome,
    pick_order,
    resolve_settings,
    simulate,
    strike_count,
)
from heic_sim.models.enums import BattleOutcome, BattlePhase, Event
from heic_sim.models.fighter import Fighter


class TestPickOrder:
    """Tests for choosing the first actor."""

    def test_faster_left_first(self, make_fighter: Callable[..., Fighter]) -> None:
        """Test strictly higher speed acts first."""
        left, right = make_fighter("L", speed=3), make_fighter("R", speed=2)
        assert pick_order(left, right) == (left, right)

    def test_faster_right_first(self, make_fighter: Callable[..., Fighter]) -> None:
        """Test the right fighter acts first when faster."""
        left, right = make_fighter("L", speed=1), make_fighter("R", speed=2)
        assert pick_order(left, right) == (right, left)

    def test_tie_goes_right(self, make_fighter: Callable[..., Fighter]) -> None:
        """Test ties go to the right fighter."""
        left, right = make_fighter("L", speed=5), make_fighter("R", speed=5)
        assert pick_order(left, right) == (right, left)


class TestDetermineOutcome:
    """Tests for outcome rules."""

    @pytest.mark.parametrize(
        ("left_hp", "right_hp", "expected"),
        [
            (0, 5, BattleOutcome.RIGHT_WIN),
            (5, 0, BattleOutcome.LEFT_WIN),
            (0, 0, BattleOutcome.DRAW),
            (5, 5, BattleOutcome.DRAW),
        ],
    )
    def test_outcome(
        self,
        make_fighter: Callable[..., Fighter],
        left_hp: int,
        right_hp: int,
        expected: BattleOutcome,
    ) -> None:
        """Test the outcome follows who is still standing."""
        left, right = make_fighter("L"), make_fighter("R")
        left.hp, right.hp = left_hp, right_hp
        assert determine_outcome(left, right) is expected


class TestStrikeCount:
    """Tests for per-turn strike counts."""

    def test_default(self, left: Fighter) -> None:
        """Test one strike by default."""
        assert strike_count(left) == 1

    def test_extra_strikes_and_factor(self, left: Fighter) -> None:
        """Test extra strikes scaled by the strike factor, rounded down."""
        left.extra_strikes = 2
        left.strike_factor = 0.5
        assert strike_count(left) == 1

    @pytest.mark.parametrize("flag", ["cannot_strike", "skip_turn"])
    def test_disabled(self, left: Fighter, flag: str) -> None:
        """Test flags that stop striking."""
        left.extra_strikes = 3
        setattr(left, flag, True)
        assert strike_count(left) == 0

    def test_never_negative(self, left: Fighter) -> None:
        """Test negative extra strikes floor at 0."""
        left.extra_strikes = -4
        assert strike_count(left) == 0


class TestResolveSettings:
    """Tests for settings selection."""

    def test_max_turns_override(self) -> None:
        """Test the round cap override leaves other settings intact."""
        base = SimulationSettings(gold_cap=7)
        settings = resolve_settings(base, max_turns=12)

        assert settings.max_turns == 12
        assert settings.gold_cap == 7
        assert base.max_turns == 100

    @pytest.mark.parametrize("max_turns", ["many", None, float("inf"), float("nan"), object()])
    def test_unreadable_max_turns_ignored(self, max_turns: object) -> None:
        """Test a round cap that is not a number leaves the settings value."""
        base = SimulationSettings(max_turns=30)
        assert resolve_settings(base, max_turns=max_turns).max_turns == 30

    def test_simulate_with_unreadable_max_turns(self, registry: CapabilityRegistry) -> None:
        """Test simulate runs to the configured cap when the override is junk."""
        report = simulate(
            {"name": "A"},
            {"name": "B"},
            registry=registry,
            settings=SimulationSettings(max_turns=6),
            max_turns="lots",
        )
        assert report.rounds == 6

    def test_invalid_environment_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test invalid environment configuration falls back to defaults."""

        def broken() -> None:
            raise ConfigurationError("bad", config_key="log_level")

        monkeypatch.setattr(simulator_module, "get_settings", broken)

        settings = resolve_settings()

        assert settings.max_turns == 100
        assert settings.riptide_damage == 5


class TestBattleSimulator:
    """Tests for BattleSimulator."""

    def test_phases(self, registry: CapabilityRegistry) -> None:
        """Test the simulator moves from setup to ended."""
        phases: list[BattlePhase] = []
        sim = BattleSimulator({"name": "A"}, {"name": "B"}, registry=registry, max_turns=2)
        registry.add_global(Event.PRE, lambda ctx: phases.append(sim.phase))
        registry.add_global(Event.BATTLE_START, lambda ctx: phases.append(sim.phase))
        registry.add_global(Event.TURN_START, lambda ctx: phases.append(sim.phase))

        assert sim.phase == BattlePhase.SETUP
        sim.run()

        assert phases == [
            BattlePhase.PRE_BATTLE,
            BattlePhase.PRE_BATTLE,
            BattlePhase.BATTLE_START,
            BattlePhase.BATTLE_START,
            BattlePhase.TURN_LOOP,
            BattlePhase.TURN_LOOP,
        ]
        assert sim.phase == BattlePhase.ENDED

    def test_pre_and_battle_start_left_first(self, registry: CapabilityRegistry) -> None:
        """Test PRE and BATTLE_START go left then right regardless of speed."""
        order: list[tuple[Event, str]] = []
        registry.add_global(Event.PRE, lambda ctx: order.append((ctx.event, ctx.owner.name)))
        registry.add_global(Event.BATTLE_START, lambda ctx: order.append((ctx.event, ctx.owner.name)))

        simulate({"name": "A"}, {"name": "B", "speed": 9}, registry=registry, max_turns=1)

        assert order == [
            (Event.PRE, "A"),
            (Event.PRE, "B"),
            (Event.BATTLE_START, "A"),
            (Event.BATTLE_START, "B"),
        ]

    def test_turn_event_order(self, registry: CapabilityRegistry) -> None:
        """Test the per-round event sequence."""
        order: list[Event] = []
        for event in (
            Event.PRE_TURN_START,
            Event.TURN_START,
            Event.RECOMPUTE_ATTACK,
            Event.ON_HIT,
            Event.TURN_END,
        ):
            registry.add_global(event, lambda ctx: order.append(ctx.event))

        simulate({"name": "A"}, {"name": "B"}, registry=registry, max_turns=1)

        assert order == [
            Event.PRE_TURN_START,
            Event.TURN_START,
            Event.RECOMPUTE_ATTACK,
            Event.ON_HIT,
            Event.TURN_END,
        ]

    def test_recompute_attack_hook(self, registry: CapabilityRegistry) -> None:
        """Test attack recomputed each turn is used for that turn's strikes."""

        @registry.handler("weapons/royal_scepter", Event.RECOMPUTE_ATTACK)
        def attack_equals_gold(ctx: EventContext) -> None:
            ctx.owner.atk = min(10, ctx.owner.gold)

        report = simulate(
            {"name": "A", "speed": 1, "gold": 4, "weapon": "weapons/royal_scepter"},
            {"name": "B"},
            registry=registry,
            max_turns=1,
        )

        assert report.log == ["-- Turn 1 -- A", "A hits B for 4"]

    def test_extra_strikes(self, registry: CapabilityRegistry) -> None:
        """Test extra strikes granted at turn start are used that turn."""
        registry.register("items/twin_blades", {Event.TURN_START: lambda ctx: ctx.add_extra_strikes(1)})

        report = simulate(
            {"name": "A", "atk": 1, "speed": 1, "items": ["items/twin_blades"]},
            {"name": "B"},
            registry=registry,
            max_turns=1,
        )

        assert report.left.strikes_attempted == 2
        assert report.right.hp_remaining == 8

    def test_first_turn_cleared_after_own_turn(self, registry: CapabilityRegistry) -> None:
        """Test first_turn is true only during a fighter's first turn."""
        seen: list[tuple[str, bool]] = []
        registry.add_global(Event.TURN_START, lambda ctx: seen.append((ctx.owner.name, ctx.owner.first_turn)))

        simulate({"name": "A"}, {"name": "B"}, registry=registry, max_turns=4)

        assert seen == [("B", True), ("A", True), ("B", False), ("A", False)]

    def test_strikes_stop_when_target_dies(self, registry: CapabilityRegistry) -> None:
        """Test remaining strikes are skipped once the target is down."""
        registry.register("items/flurry", {Event.TURN_START: lambda ctx: ctx.add_extra_strikes(4)})

        report = simulate(
            {"name": "A", "atk": 5, "speed": 1, "items": ["items/flurry"]},
            {"name": "B", "hp": 10},
            registry=registry,
        )

        assert report.outcome == BattleOutcome.LEFT_WIN
        assert report.rounds == 1
        assert report.left.strikes_attempted == 2

    def test_seed_reaches_battle(self, registry: CapabilityRegistry) -> None:
        """Test equal seeds give equal capability randomness."""
        rolls: list[float] = []
        registry.add_global(Event.BATTLE_START, lambda ctx: rolls.append(ctx.battle.rng.random()))

        simulate({"name": "A"}, {"name": "B"}, registry=registry, max_turns=1, seed=11)
        simulate({"name": "A"}, {"name": "B"}, registry=registry, max_turns=1, seed=11)

        assert rolls[0:2] == rolls[2:4]

    def test_engine_fault_does_not_escape(self, registry: CapabilityRegistry) -> None:
        """Test a fault outside handler boundaries ends the battle cleanly."""
        registry.register(
            "items/cursed",
            {Event.TURN_START: lambda ctx: setattr(ctx.owner, "strike_factor", "fast")},
        )

        report = simulate(
            {"name": "A", "atk": 3, "speed": 1, "items": ["items/cursed"]},
            {"name": "B", "atk": 3},
            registry=registry,
        )

        assert report.rounds == 1
        assert report.outcome == BattleOutcome.DRAW
        assert report.log == ["-- Turn 1 -- A"]

    def test_uses_default_registry(self) -> None:
        """Test simulate works without an explicit registry."""
        report = simulate({"name": "A", "atk": 5}, {"name": "B", "atk": 5}, max_turns=3)
        assert report.rounds == 3

"""Tests for battle report schemas."""

from __future__ import annotations

import pytest

from heic_sim.models.enums import BattleOutcome, Tier
from heic_sim.models.report import BattleReport, FighterReport


def _fighter_report(name: str, **kwargs: int) -> FighterReport:
    return FighterReport(name=name, hp_remaining=kwargs.pop("hp", 5), armor_remaining=0, **kwargs)


class TestFighterReport:
    """Tests for FighterReport."""

    def test_legacy_keys(self) -> None:
        """Test the camelCase rendering."""
        report = FighterReport(
            name="Left",
            hp_remaining=4,
            armor_remaining=1,
            strikes_attempted=3,
            strikes_landed=2,
            hp_damage_dealt=6,
            armor_destroyed_dealt=2,
            bomb_hp_dealt=1,
            statuses_gained={"poison": 2},
            statuses_inflicted={"acid": 1},
            gold=3,
        )

        legacy = report.to_legacy_dict()

        assert legacy == {
            "name": "Left",
            "hpRemaining": 4,
            "armorRemaining": 1,
            "strikesAttempted": 3,
            "strikesLanded": 2,
            "hpDamageDealt": 6,
            "armorDestroyedDealt": 2,
            "bombHpDealt": 1,
            "statusesGained": {"poison": 2},
            "statusesInflicted": {"acid": 1},
            "gold": 3,
        }

    def test_rejects_negative_health(self) -> None:
        """Test reports cannot carry negative vitals."""
        with pytest.raises(ValueError):
            FighterReport(name="Left", hp_remaining=-1, armor_remaining=0)


class TestBattleReport:
    """Tests for BattleReport."""

    @pytest.mark.parametrize(
        ("outcome", "winner"),
        [
            (BattleOutcome.LEFT_WIN, "Left"),
            (BattleOutcome.RIGHT_WIN, "Right"),
            (BattleOutcome.DRAW, None),
        ],
    )
    def test_winner(self, outcome: BattleOutcome, winner: str | None) -> None:
        """Test the winner name follows the outcome."""
        report = BattleReport(
            outcome=outcome,
            rounds=3,
            left=_fighter_report("Left"),
            right=_fighter_report("Right"),
        )
        assert report.winner == winner

    def test_legacy_shape(self) -> None:
        """Test the camelCase result shape."""
        report = BattleReport(
            outcome=BattleOutcome.RIGHT_WIN,
            rounds=7,
            log=["-- Turn 1 -- Right"],
            left=_fighter_report("Left", hp=0),
            right=_fighter_report("Right"),
        )

        legacy = report.to_legacy_dict()

        assert legacy["result"] == "RightWin"
        assert legacy["rounds"] == 7
        assert legacy["log"] == ["-- Turn 1 -- Right"]
        assert legacy["summary"]["left"]["hpRemaining"] == 0
        assert legacy["summary"]["right"]["name"] == "Right"

    def test_serializes_winner(self) -> None:
        """Test the computed winner appears in dumps."""
        report = BattleReport(
            outcome=BattleOutcome.LEFT_WIN,
            rounds=1,
            left=_fighter_report("Left"),
            right=_fighter_report("Right", hp=0),
        )
        assert report.model_dump()["winner"] == "Left"


class TestTier:
    """Tests for tier-dependent value selection."""

    def test_pick(self) -> None:
        """Test each tier picks its own value."""
        assert Tier.BASE.pick(1, 2, 3) == 1
        assert Tier.GOLD.pick(1, 2, 3) == 2
        assert Tier.DIAMOND.pick(1, 2, 3) == 3

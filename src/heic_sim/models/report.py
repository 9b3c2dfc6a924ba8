"""Pydantic V2 schemas for battle results.

The report is the only thing that survives a ``simulate`` call: the
outcome, the round count, the transcript and per-side statistics.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

from heic_sim.models.enums import BattleOutcome


class FighterReport(BaseModel):
    """Final state and statistics for one side.

    Attributes:
        name: Display name.
        hp_remaining: Health at the end of the battle.
        armor_remaining: Armor at the end of the battle.
        strikes_attempted: Strikes started, including stunned ones.
        strikes_landed: Strikes that removed armor or health.
        hp_damage_dealt: Health removed from the opponent through damage resolution.
        armor_destroyed_dealt: Armor removed from the opponent through damage resolution.
        bomb_hp_dealt: Health removed by bomb damage.
        statuses_gained: Stacks received, by kind.
        statuses_inflicted: Stacks put on the opponent, by kind.
        gold: Gold held at the end.
        gold_gained: Gold gained during the battle.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    hp_remaining: int = Field(ge=0)
    armor_remaining: int = Field(ge=0)
    strikes_attempted: int = Field(default=0, ge=0)
    strikes_landed: int = Field(default=0, ge=0)
    hp_damage_dealt: int = Field(default=0, ge=0)
    armor_destroyed_dealt: int = Field(default=0, ge=0)
    bomb_hp_dealt: int = Field(default=0, ge=0)
    statuses_gained: dict[str, int] = Field(default_factory=dict)
    statuses_inflicted: dict[str, int] = Field(default_factory=dict)
    gold: int = Field(default=0, ge=0)
    gold_gained: int = Field(default=0, ge=0)

    def to_legacy_dict(self) -> dict[str, Any]:
        """Render in the camelCase shape consumed by older front ends."""
        return {
            "name": self.name,
            "hpRemaining": self.hp_remaining,
            "armorRemaining": self.armor_remaining,
            "strikesAttempted": self.strikes_attempted,
            "strikesLanded": self.strikes_landed,
            "hpDamageDealt": self.hp_damage_dealt,
            "armorDestroyedDealt": self.armor_destroyed_dealt,
            "bombHpDealt": self.bomb_hp_dealt,
            "statusesGained": dict(self.statuses_gained),
            "statusesInflicted": dict(self.statuses_inflicted),
            "gold": self.gold,
        }


class BattleReport(BaseModel):
    """Result of one simulated battle.

    Attributes:
        outcome: Who won, or a draw.
        rounds: Rounds played (each fighter turn is one round).
        log: Human-readable transcript, in order.
        left: Left side statistics.
        right: Right side statistics.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    outcome: BattleOutcome
    rounds: int = Field(ge=0)
    log: list[str] = Field(default_factory=list)
    left: FighterReport
    right: FighterReport

    @computed_field  # type: ignore[prop-decorator]
    @property
    def winner(self) -> str | None:
        """Name of the winning fighter, or None on a draw."""
        if self.outcome == BattleOutcome.LEFT_WIN:
            return self.left.name
        if self.outcome == BattleOutcome.RIGHT_WIN:
            return self.right.name
        return None

    def to_legacy_dict(self) -> dict[str, Any]:
        """Render in the camelCase shape consumed by older front ends."""
        return {
            "result": self.outcome.value,
            "rounds": self.rounds,
            "log": list(self.log),
            "summary": {
                "left": self.left.to_legacy_dict(),
                "right": self.right.to_legacy_dict(),
            },
        }


__all__ = [
    "FighterReport",
    "BattleReport",
]

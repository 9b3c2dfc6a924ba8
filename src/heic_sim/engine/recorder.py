"""Battle transcript and final report assembly."""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

from heic_sim.models.report import BattleReport, FighterReport


if TYPE_CHECKING:
    from heic_sim.models.enums import BattleOutcome
    from heic_sim.models.fighter import Fighter


class BattleLog:
    """Append-only, ordered transcript of one battle."""

    def __init__(self) -> None:
        self._lines: list[str] = []

    def append(self, line: str) -> None:
        """Add a line to the end of the transcript."""
        self._lines.append(str(line))

    @property
    def lines(self) -> list[str]:
        """A copy of the transcript so far."""
        return list(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._lines))

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, line: object) -> bool:
        return line in self._lines


def _count(value: object) -> int:
    """Read a statistic as a non-negative int; unreadable values count as 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return max(0, int(value))


def _counts(value: object) -> dict[str, int]:
    if not isinstance(value, Mapping):
        return {}
    return {str(kind): _count(stacks) for kind, stacks in value.items()}


def summarize(fighter: Fighter) -> FighterReport:
    """Snapshot a fighter's final state and statistics.

    Capabilities can assign arbitrary values to plain attributes, so every
    statistic is read leniently.

    Args:
        fighter: The fighter to summarize.

    Returns:
        An immutable report for the fighter.
    """
    summary = fighter.summary
    return FighterReport(
        name=str(fighter.name),
        hp_remaining=fighter.hp,
        armor_remaining=fighter.armor,
        strikes_attempted=_count(summary.strikes_attempted),
        strikes_landed=_count(summary.strikes_landed),
        hp_damage_dealt=_count(summary.hp_damage_dealt),
        armor_destroyed_dealt=_count(summary.armor_destroyed_dealt),
        bomb_hp_dealt=_count(summary.bomb_hp_dealt),
        statuses_gained=_counts(summary.statuses_gained),
        statuses_inflicted=_counts(summary.statuses_inflicted),
        gold=_count(fighter.gold),
        gold_gained=_count(summary.gold_gained),
    )


def build_report(
    left: Fighter,
    right: Fighter,
    *,
    outcome: BattleOutcome,
    rounds: int,
    log: BattleLog,
) -> BattleReport:
    """Assemble the final battle report.

    Args:
        left: Left fighter.
        right: Right fighter.
        outcome: Battle outcome.
        rounds: Rounds played.
        log: The battle transcript.

    Returns:
        The immutable battle report.
    """
    return BattleReport(
        outcome=outcome,
        rounds=rounds,
        log=log.lines,
        left=summarize(left),
        right=summarize(right),
    )


__all__ = [
    "BattleLog",
    "summarize",
    "build_report",
]

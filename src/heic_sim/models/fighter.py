"""Mutable combat state for one side of a battle.

A Fighter is built fresh from a Loadout at the start of ``simulate`` and
discarded when it returns. Health, armor and status stacks are clamped on
every assignment, so no handler (however buggy) can leave them negative.

Capabilities tune engine behaviour through plain attributes rather than
the engine knowing about any specific item:

- ``incoming_reduce_while_armored`` / ``incoming_increase_while_unarmored``
  adjust strikes taken.
- ``riptide_max_triggers`` caps riptide ticks per turn end.
- ``preserve_thorns`` is a number of turn ends that keep thorns.
- ``bomb_repeat``, ``bomb_flat_bonus``, ``bomb_next_bonus`` shape bomb damage.
- ``heal_multiplier``, ``gold_locked`` and ``status_gate`` filter gains.
- ``flags`` holds any capability-owned state (reentrancy guards etc.).
"""

from __future__ import annotations

import itertools
import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from heic_sim.core.constants import DEFAULT_EXPOSED_LIMIT, DEFAULT_RIPTIDE_TRIGGERS, GOLD_CAP
from heic_sim.core.exceptions import ValidationError
from heic_sim.models.enums import StatusKind


if TYPE_CHECKING:
    from heic_sim.models.loadout import ItemRef, Loadout


def _floor_int(value: Any, name: str = "value") -> int:
    """Floor a numeric value to an int.

    Raises:
        ValidationError: If the value cannot be read as a finite number.
    """
    try:
        if isinstance(value, float):
            return math.floor(value)
        return int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValidationError(
            f"Cannot read {name} as a number",
            field_name=name,
            invalid_value=value,
        ) from exc


class Statuses(dict[str, int]):
    """Status stacks keyed by kind.

    Unknown kinds read as 0 without being inserted. Every write is floored
    and clamped at 0.
    """

    def __init__(self, initial: Mapping[str, int] | None = None) -> None:
        super().__init__()
        if initial:
            self.update(initial)

    def __missing__(self, key: str) -> int:
        return 0

    def __setitem__(self, key: str, value: int) -> None:
        super().__setitem__(str(key), max(0, _floor_int(value, str(key))))

    def get(self, key: str, default: int = 0) -> int:  # type: ignore[override]
        return super().get(str(key), default)

    def update(self, *args: Any, **kwargs: int) -> None:  # type: ignore[override]
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def setdefault(self, key: str, default: int = 0) -> int:  # type: ignore[override]
        if key not in self:
            self[key] = default
        return self[key]

    def active(self) -> dict[str, int]:
        """Return only the kinds with at least one stack."""
        return {key: value for key, value in self.items() if value > 0}


@dataclass
class Countdown:
    """A deferred action owned by one fighter.

    Attributes:
        id: Opaque identifier, unique per fighter.
        name: Display name.
        turns_left: Owner turn-starts remaining; fires when it reaches 1.
        orig_turns: The value it was registered with.
        tag: Opaque data for capabilities; never read by the engine.
        action: Callable ``(owner, enemy, log, countdown)``.
        source: Slug that registered it; its transcript lines carry that slug.
    """

    id: int
    name: str
    turns_left: int
    orig_turns: int
    tag: Any = None
    action: Callable[..., Any] | None = None
    source: str | None = None


@dataclass
class CombatSummary:
    """Per-fighter statistics accumulated over a battle."""

    strikes_attempted: int = 0
    strikes_landed: int = 0
    hp_damage_dealt: int = 0
    armor_destroyed_dealt: int = 0
    bomb_hp_dealt: int = 0
    statuses_gained: dict[str, int] = field(default_factory=dict)
    statuses_inflicted: dict[str, int] = field(default_factory=dict)
    gold_gained: int = 0

    def record_gained(self, kind: str, amount: int) -> None:
        """Count status stacks this fighter received."""
        self.statuses_gained[kind] = self.statuses_gained.get(kind, 0) + amount

    def record_inflicted(self, kind: str, amount: int) -> None:
        """Count status stacks this fighter put on someone else."""
        self.statuses_inflicted[kind] = self.statuses_inflicted.get(kind, 0) + amount


StatusGate = Callable[["Fighter", str, int], bool]


class Fighter:
    """One side of a battle.

    Attributes:
        name: Display name.
        atk: Base attack.
        temp_atk: Attack bonus that resets every turn start.
        base_armor: Armor the fighter started with.
        speed: Compared once to pick who acts first.
        statuses: Status stacks.
        weapon: Weapon slug, dispatched before items.
        items: Equipped items in dispatch order.
        countdowns: Pending countdowns in registration order.
        summary: Accumulated statistics.
    """

    def __init__(
        self,
        name: str,
        *,
        hp: int,
        atk: int = 0,
        armor: int = 0,
        speed: int = 0,
        gold: int = 0,
        statuses: Mapping[str, int] | None = None,
        weapon: str | None = None,
        items: Iterable[ItemRef] = (),
        exposed_limit: int = DEFAULT_EXPOSED_LIMIT,
        riptide_max_triggers: int = DEFAULT_RIPTIDE_TRIGGERS,
    ) -> None:
        """Initialize a fighter at full health.

        Args:
            name: Display name.
            hp: Starting and maximum health.
            atk: Base attack.
            armor: Starting armor.
            speed: Speed.
            gold: Starting gold.
            statuses: Starting status stacks.
            weapon: Weapon slug.
            items: Equipped items, in order.
            exposed_limit: Exposed triggers allowed this battle.
            riptide_max_triggers: Riptide ticks per turn end.
        """
        self.name = name
        self._hp_max = max(0, _floor_int(hp, "hp"))
        self._hp = self._hp_max
        self._armor = max(0, _floor_int(armor, "armor"))
        self.atk = atk
        self.temp_atk = 0
        self.base_armor = self._armor
        self.speed = speed
        self.gold = gold
        self.statuses = Statuses(statuses)
        self.weapon = weapon
        self.items: list[ItemRef] = list(items)

        # Turn state
        self.first_turn = True
        self.turn_count = 0
        self.struck_this_turn = False
        self.healed_this_turn = 0
        self.extra_strikes = 0
        self.strike_factor: float = 1
        self.cannot_strike = False
        self.skip_turn = False

        # Thresholds
        self.exposed_count = 0
        self.exposed_limit = exposed_limit
        self.wounded_done = False

        # Capability-tunable modifiers
        self.incoming_reduce_while_armored = 0
        self.incoming_increase_while_unarmored = 0
        self.riptide_max_triggers = riptide_max_triggers
        self.preserve_thorns = 0
        self.bomb_repeat = 1
        self.bomb_flat_bonus = 0
        self.bomb_next_bonus = 0
        self.heal_multiplier: float = 1
        self.gold_locked = False
        self.status_gate: StatusGate | None = None
        self.flags: dict[str, Any] = {}

        self.countdowns: list[Countdown] = []
        self._countdown_ids = itertools.count(1)
        self.summary = CombatSummary()

    @classmethod
    def from_loadout(
        cls,
        loadout: Loadout,
        *,
        exposed_limit: int = DEFAULT_EXPOSED_LIMIT,
        riptide_max_triggers: int = DEFAULT_RIPTIDE_TRIGGERS,
        gold_cap: int = GOLD_CAP,
    ) -> Fighter:
        """Build a fresh fighter from a validated loadout.

        Args:
            loadout: The loadout to build from.
            exposed_limit: Default Exposed trigger limit.
            riptide_max_triggers: Default riptide ticks per turn end.
            gold_cap: Most gold the fighter may start with.

        Returns:
            A fighter at full health.
        """
        return cls(
            loadout.name,
            hp=loadout.hp,
            atk=loadout.atk,
            armor=loadout.armor,
            speed=loadout.speed,
            gold=min(loadout.gold, gold_cap),
            statuses=loadout.statuses,
            weapon=loadout.weapon,
            items=loadout.items,
            exposed_limit=exposed_limit,
            riptide_max_triggers=riptide_max_triggers,
        )

    # -------------------------------------------------------------------------
    # Clamped vitals
    # -------------------------------------------------------------------------

    @property
    def hp(self) -> int:
        """Current health, always within ``[0, hp_max]``."""
        return self._hp

    @hp.setter
    def hp(self, value: int) -> None:
        self._hp = max(0, min(_floor_int(value, "hp"), self._hp_max))

    @property
    def hp_max(self) -> int:
        """Maximum health. Lowering it pulls current health down with it."""
        return self._hp_max

    @hp_max.setter
    def hp_max(self, value: int) -> None:
        self._hp_max = max(0, _floor_int(value, "hp_max"))
        if self._hp > self._hp_max:
            self._hp = self._hp_max

    @property
    def armor(self) -> int:
        """Current armor, never negative."""
        return self._armor

    @armor.setter
    def armor(self, value: int) -> None:
        self._armor = max(0, _floor_int(value, "armor"))

    @property
    def is_alive(self) -> bool:
        """Whether the fighter still has health."""
        return self._hp > 0

    @property
    def is_wounded(self) -> bool:
        """Whether health is at or below half of max (rounded down)."""
        return self._hp <= self._hp_max // 2

    # -------------------------------------------------------------------------
    # Loadout queries
    # -------------------------------------------------------------------------

    @property
    def item_slugs(self) -> list[str]:
        """Slugs of equipped items, in order."""
        return [item.slug for item in self.items]

    def has_item(self, slug: str) -> bool:
        """Check whether an item (or the weapon) with this slug is equipped."""
        return slug == self.weapon or any(item.slug == slug for item in self.items)

    def status(self, kind: StatusKind | str) -> int:
        """Read a status stack count."""
        return self.statuses[kind]

    def next_countdown_id(self) -> int:
        """Allocate an identifier for a new countdown."""
        return next(self._countdown_ids)

    def reset_turn(self) -> None:
        """Clear per-turn transient fields at turn start."""
        self.temp_atk = 0
        self.extra_strikes = 0
        self.skip_turn = False
        self.struck_this_turn = False
        self.healed_this_turn = 0

    def __repr__(self) -> str:
        return (
            f"Fighter(name={self.name!r}, hp={self._hp}/{self._hp_max}, "
            f"armor={self._armor}, atk={self.atk}, statuses={self.statuses.active()!r})"
        )


__all__ = [
    "Statuses",
    "Countdown",
    "CombatSummary",
    "StatusGate",
    "Fighter",
]

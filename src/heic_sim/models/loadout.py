"""Pydantic V2 schemas for fighter loadouts.

A loadout is the external description of one side of a battle: base
stats, starting statuses, the weapon slug and the ordered item list.
Loadouts come from selection UIs and saved builds of varying quality, so
validation is lenient: malformed or missing values fall back to
documented defaults instead of failing the battle.

Both snake_case and the camelCase keys used by older saved builds are
accepted (``weaponSlug``, ``itemSlugs``, a nested ``stats`` block).

Example:
    >>> loadout = Loadout.from_raw({
    ...     "name": "Left",
    ...     "stats": {"hp": 20, "atk": 3},
    ...     "weaponSlug": "weapons/basilisk_fang",
    ...     "itemSlugs": ["items/blood_chain", {"slug": "items/emerald_earring", "tier": "gold"}],
    ... })
    >>> loadout.items[1].tier
    <Tier.GOLD: 'gold'>
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError

from heic_sim.core.constants import (
    DEFAULT_ARMOR,
    DEFAULT_ATK,
    DEFAULT_FIGHTER_NAME,
    DEFAULT_HP,
    DEFAULT_SPEED,
)
from heic_sim.core.logging import get_logger
from heic_sim.models.enums import Tier


logger = get_logger(__name__)

_STAT_DEFAULTS = {
    "hp": DEFAULT_HP,
    "atk": DEFAULT_ATK,
    "armor": DEFAULT_ARMOR,
    "speed": DEFAULT_SPEED,
    "gold": 0,
}

_ALIASES = {
    "weaponSlug": "weapon",
    "itemSlugs": "items",
}


def _coerce_int(value: Any, default: int) -> int:
    """Interpret a loosely typed number, falling back to a default."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if isinstance(value, float):
        if not math.isfinite(value):
            return default
        return int(value)
    return default


class ItemRef(BaseModel):
    """A single equipped item: its slug and upgrade tier.

    Attributes:
        slug: Stable capability identifier (e.g. ``items/blood_chain``).
        tier: Upgrade tier, exposed to handlers as ``ctx.tier``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    slug: str = Field(min_length=1, description="Capability slug")
    tier: Tier = Field(default=Tier.BASE, description="Upgrade tier")

    @model_validator(mode="before")
    @classmethod
    def accept_bare_slug(cls, data: Any) -> Any:
        """Allow an item to be given as a plain slug string or with ``key``."""
        if isinstance(data, str):
            return {"slug": data}
        if isinstance(data, Mapping) and "slug" not in data and "key" in data:
            return {**data, "slug": data["key"]}
        return data

    @field_validator("tier", mode="before")
    @classmethod
    def default_unknown_tier(cls, value: Any) -> Any:
        """Treat unknown tiers as base."""
        if isinstance(value, str) and value.lower() in {tier.value for tier in Tier}:
            return value.lower()
        return Tier.BASE


class Loadout(BaseModel):
    """External description of one fighter.

    Attributes:
        name: Display name used in the transcript.
        hp: Starting and maximum health.
        atk: Base attack.
        armor: Starting armor (also recorded as base armor).
        speed: Speed, compared once to pick who acts first.
        gold: Starting gold.
        statuses: Starting status stacks.
        weapon: Weapon slug, if any.
        items: Ordered item list; order is dispatch order.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(default=DEFAULT_FIGHTER_NAME, description="Display name")
    hp: int = Field(default=DEFAULT_HP, description="Starting and max health")
    atk: int = Field(default=DEFAULT_ATK, description="Base attack")
    armor: int = Field(default=DEFAULT_ARMOR, description="Starting armor")
    speed: int = Field(default=DEFAULT_SPEED, description="Speed")
    gold: int = Field(default=0, description="Starting gold")
    statuses: dict[str, int] = Field(default_factory=dict, description="Starting statuses")
    weapon: str | None = Field(default=None, description="Weapon slug")
    items: list[ItemRef] = Field(default_factory=list, description="Equipped items in order")

    @model_validator(mode="before")
    @classmethod
    def flatten_raw(cls, data: Any) -> Any:
        """Normalize aliases and lift a nested ``stats`` block."""
        if not isinstance(data, Mapping):
            return data
        flat = {_ALIASES.get(k, k): v for k, v in data.items()}
        stats = data.get("stats")
        if isinstance(stats, Mapping):
            for key in _STAT_DEFAULTS:
                if key in stats:
                    flat[key] = stats[key]
        flat.pop("stats", None)
        return flat

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, value: Any) -> str:
        """Fall back to the default name for blank or non-string names."""
        if isinstance(value, str) and value.strip():
            return value
        return DEFAULT_FIGHTER_NAME

    @field_validator("hp", "atk", "armor", "speed", "gold", mode="before")
    @classmethod
    def default_numbers(cls, value: Any, info: ValidationInfo) -> int:
        """Coerce stats to ints, defaulting anything unreadable."""
        return _coerce_int(value, _STAT_DEFAULTS[info.field_name])

    @field_validator("hp", "armor", "gold", mode="after")
    @classmethod
    def non_negative(cls, value: int) -> int:
        """Clamp stats that cannot be negative."""
        return max(0, value)

    @field_validator("statuses", mode="before")
    @classmethod
    def clean_statuses(cls, value: Any) -> dict[str, int]:
        """Keep readable, positive status stacks only."""
        if not isinstance(value, Mapping):
            return {}
        cleaned: dict[str, int] = {}
        for key, stacks in value.items():
            count = _coerce_int(stacks, 0)
            if isinstance(key, str) and count > 0:
                cleaned[key] = count
        return cleaned

    @field_validator("weapon", mode="before")
    @classmethod
    def clean_weapon(cls, value: Any) -> str | None:
        """Treat blank or non-string weapons as no weapon."""
        if isinstance(value, str) and value.strip():
            return value
        return None

    @field_validator("items", mode="before")
    @classmethod
    def clean_items(cls, value: Any) -> list[Any]:
        """Drop item entries that carry no usable slug, preserving order."""
        if not isinstance(value, (list, tuple)):
            return []
        kept: list[Any] = []
        for entry in value:
            if isinstance(entry, ItemRef):
                kept.append(entry)
            elif isinstance(entry, str) and entry:
                kept.append(entry)
            elif isinstance(entry, Mapping):
                slug = entry.get("slug", entry.get("key"))
                if isinstance(slug, str) and slug:
                    kept.append(entry)
        return kept

    @classmethod
    def from_raw(cls, raw: Any) -> Self:
        """Build a loadout from arbitrary external input.

        Never raises: input that is not a mapping (or a Loadout) yields a
        default loadout and a warning in the diagnostic log.

        Args:
            raw: A Loadout, a mapping, or anything else.

        Returns:
            The validated loadout.
        """
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, Mapping):
            logger.warning("Unreadable loadout replaced with defaults", raw_type=type(raw).__name__)
            return cls()
        try:
            return cls.model_validate(raw)
        except PydanticValidationError as exc:
            logger.warning("Invalid loadout replaced with defaults", errors=exc.error_count())
            return cls(name=raw.get("name", DEFAULT_FIGHTER_NAME))


__all__ = [
    "ItemRef",
    "Loadout",
]

"""Rules constants for the battle simulator.

Values that are also tunable through settings are the defaults used by
``heic_sim.core.config``.
"""

from __future__ import annotations

# =============================================================================
# Loadout Defaults
# =============================================================================

DEFAULT_FIGHTER_NAME = "Fighter"
"""Name used when a loadout does not provide one."""

DEFAULT_HP = 10
"""Baseline max health when a loadout omits hp."""

DEFAULT_ATK = 0
"""Baseline attack when a loadout omits atk."""

DEFAULT_ARMOR = 0
"""Baseline armor when a loadout omits armor."""

DEFAULT_SPEED = 0
"""Baseline speed when a loadout omits speed."""

# =============================================================================
# Battle Rules
# =============================================================================

DEFAULT_MAX_TURNS = 100
"""Round cap; reaching it ends the battle in a draw."""

GOLD_CAP = 10
"""Maximum gold a fighter can hold."""

RIPTIDE_DAMAGE = 5
"""Flat damage dealt by each riptide tick."""

DEFAULT_RIPTIDE_TRIGGERS = 1
"""Riptide ticks allowed per turn end unless a capability raises it."""

DEFAULT_EXPOSED_LIMIT = 1
"""Times a fighter can become Exposed per battle unless raised."""

# =============================================================================
# Transcript
# =============================================================================

SOURCE_ICON_TEMPLATE = "::icon:{slug}:: "
"""Prefix added to transcript lines emitted while a capability is the source."""


__all__ = [
    "DEFAULT_FIGHTER_NAME",
    "DEFAULT_HP",
    "DEFAULT_ATK",
    "DEFAULT_ARMOR",
    "DEFAULT_SPEED",
    "DEFAULT_MAX_TURNS",
    "GOLD_CAP",
    "RIPTIDE_DAMAGE",
    "DEFAULT_RIPTIDE_TRIGGERS",
    "DEFAULT_EXPOSED_LIMIT",
    "SOURCE_ICON_TEMPLATE",
]

"""Battle scope and event dispatch.

A Battle holds everything that belongs to one ``simulate`` call: both
fighters, the transcript, the registry being used, a seeded RNG for
capability-internal random choices, and the actor/source scoping state
used for attribution.

Scoping state lives on the Battle instance, never in module globals, so
independent simulations can run side by side. Every handler invocation
saves and restores the current actor and source, which keeps attribution
correct through re-entrant dispatch and capabilities that replay other
capabilities' handlers.

Dispatch order for ``dispatch(event, owner, other)``:
    1. owner's weapon handler
    2. each of owner's items' handlers, in equip order
    3. every global handler, in registration order

A handler that raises is logged and treated as a no-op; the battle goes on.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from heic_sim.core.constants import SOURCE_ICON_TEMPLATE
from heic_sim.core.exceptions import CapabilityError
from heic_sim.core.logging import get_logger
from heic_sim.engine import actions, countdowns
from heic_sim.engine.recorder import BattleLog
from heic_sim.models.enums import Event, StatusKind, Tier


if TYPE_CHECKING:
    from heic_sim.core.config import SimulationSettings
    from heic_sim.engine.damage import DamageResult
    from heic_sim.engine.registry import CapabilityRegistry, Handler
    from heic_sim.models.fighter import Fighter
    from heic_sim.models.loadout import ItemRef

logger = get_logger(__name__)


class Battle:
    """Battle-scoped state shared by every engine component.

    Attributes:
        id: Short identifier bound to diagnostic logs.
        left: Left fighter.
        right: Right fighter.
        registry: Capability registry consulted at dispatch time.
        settings: Rules settings for this battle.
        log: Transcript.
        rng: Random source for capability-internal choices.
        round: Round currently being played (0 before the turn loop).
        current_actor: Fighter credited for mutations right now.
        current_source: Slug whose handler is running right now.
    """

    def __init__(
        self,
        left: Fighter,
        right: Fighter,
        *,
        registry: CapabilityRegistry,
        settings: SimulationSettings,
        seed: int | None = None,
    ) -> None:
        """Initialize the battle scope.

        Args:
            left: Left fighter.
            right: Right fighter.
            registry: Capability registry.
            settings: Rules settings.
            seed: Seed for ``rng``; None for a random seed.
        """
        self.id = uuid4().hex[:8]
        self.left = left
        self.right = right
        self.registry = registry
        self.settings = settings
        self.log = BattleLog()
        self.rng = random.Random(seed)
        self.round = 0
        self.current_actor: Fighter | None = None
        self.current_source: str | None = None
        self._logger = logger.bind(battle_id=self.id)

    def opponent_of(self, fighter: Fighter) -> Fighter:
        """Return the other side of the battle."""
        return self.right if fighter is self.left else self.left

    # -------------------------------------------------------------------------
    # Scoping
    # -------------------------------------------------------------------------

    @contextmanager
    def acting(self, actor: Fighter | None) -> Iterator[None]:
        """Make ``actor`` the credited fighter for the duration of the block."""
        previous = self.current_actor
        self.current_actor = actor
        try:
            yield
        finally:
            self.current_actor = previous

    @contextmanager
    def sourced(self, slug: str | None) -> Iterator[None]:
        """Make ``slug`` the transcript source for the duration of the block."""
        previous = self.current_source
        self.current_source = slug
        try:
            yield
        finally:
            self.current_source = previous

    # -------------------------------------------------------------------------
    # Transcript
    # -------------------------------------------------------------------------

    def record(self, line: str) -> None:
        """Append an engine line to the transcript, unannotated."""
        self.log.append(line)

    def say(self, message: str) -> None:
        """Append a capability line, prefixed with the current source slug."""
        if self.current_source and self.settings.annotate_sources:
            message = SOURCE_ICON_TEMPLATE.format(slug=self.current_source) + str(message)
        self.log.append(message)

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def dispatch(self, event: Event, owner: Fighter, other: Fighter, **payload: Any) -> None:
        """Dispatch an event on ``owner``'s weapon, items and global handlers.

        Args:
            event: The event being dispatched.
            owner: Fighter whose capabilities react (``ctx.owner``).
            other: The opposing fighter (``ctx.other``).
            **payload: Event-specific fields, readable as ``ctx.<name>``.
        """
        if owner.weapon:
            self.invoke(owner.weapon, event, owner, other, **payload)

        for item in list(owner.items):
            self._invoke_item(item, event, owner, other, payload)

        for fn in self.registry.global_handlers(event):
            ctx = EventContext(battle=self, event=event, owner=owner, other=other, payload=dict(payload))
            with self.acting(owner), self.sourced(None):
                self._call(fn, ctx, slug=None)

    def invoke(
        self,
        slug: str,
        event: Event,
        owner: Fighter,
        other: Fighter,
        **payload: Any,
    ) -> bool:
        """Run one capability's handler for an event.

        This is the replay primitive: a handler may call it to trigger
        another capability (or itself) for the same or a different event.
        The engine does not guard against endless replay; capabilities
        keep their own guards in ``fighter.flags``.

        Args:
            slug: Capability to invoke.
            event: Event whose handler should run.
            owner: Fighter the handler acts for.
            other: The opposing fighter.
            **payload: Event-specific fields.

        Returns:
            True if a handler was registered and called.
        """
        item = next((ref for ref in owner.items if ref.slug == slug), None)
        if item is not None and slug != owner.weapon:
            return self._invoke_item(item, event, owner, other, payload)

        fn = self.registry.get_handler(slug, event)
        if fn is None:
            return False
        ctx = EventContext(battle=self, event=event, owner=owner, other=other, source=slug, payload=dict(payload))
        with self.acting(owner), self.sourced(slug):
            self._call(fn, ctx, slug=slug)
        return True

    def _invoke_item(
        self,
        item: ItemRef,
        event: Event,
        owner: Fighter,
        other: Fighter,
        payload: dict[str, Any],
    ) -> bool:
        fn = self.registry.get_handler(item.slug, event)
        if fn is None:
            return False
        ctx = EventContext(
            battle=self,
            event=event,
            owner=owner,
            other=other,
            source=item.slug,
            item=item,
            payload=dict(payload),
        )
        with self.acting(owner), self.sourced(item.slug):
            self._call(fn, ctx, slug=item.slug)
        return True

    def _call(self, fn: Handler, ctx: EventContext, *, slug: str | None) -> None:
        """Call a handler, absorbing any fault it raises."""
        try:
            fn(ctx)
        except Exception as exc:
            fault = CapabilityError(str(exc) or type(exc).__name__, slug=slug, event=ctx.event.value)
            self._logger.warning(
                "Capability handler failed",
                error=fault.message,
                error_type=type(exc).__name__,
                round=self.round,
                **fault.details,
            )

    def run_action(self, action: Callable[..., Any], *args: Any, name: str = "") -> None:
        """Call opaque external logic (e.g. a countdown action) with fault isolation."""
        try:
            action(*args)
        except Exception as exc:
            self._logger.warning(
                "Capability action failed",
                action=name,
                error=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
                round=self.round,
            )


@dataclass
class EventContext:
    """What a handler receives for one invocation.

    Payload fields are readable as attributes, e.g. ``ctx.amount`` for
    ``ON_HEAL`` or ``ctx.countdown`` for ``ON_COUNTDOWN_TRIGGER``. Reading
    a field the event does not carry raises AttributeError; use
    ``ctx.get(name, default)`` when unsure.

    Mutation helpers act on ``owner`` against ``other`` unless a
    ``target`` is given.

    Attributes:
        battle: The battle scope.
        event: Event being handled.
        owner: Fighter whose capability is running.
        other: The opposing fighter.
        source: Slug being invoked (None for global handlers).
        item: The equipped item, for item handlers.
        payload: Event-specific fields.
    """

    battle: Battle
    event: Event
    owner: Fighter
    other: Fighter
    source: str | None = None
    item: ItemRef | None = None
    payload: dict[str, Any] = field(default_factory=dict)

    def __getattr__(self, name: str) -> Any:
        if name == "payload" or name.startswith("__"):
            raise AttributeError(name)
        try:
            return self.payload[name]
        except KeyError:
            raise AttributeError(
                f"{self.event.value!r} context has no field {name!r}"
            ) from None

    def get(self, name: str, default: Any = None) -> Any:
        """Read a payload field with a default."""
        return self.payload.get(name, default)

    @property
    def tier(self) -> Tier:
        """Tier of the equipped item (base for weapons and globals)."""
        return self.item.tier if self.item is not None else Tier.BASE

    # -------------------------------------------------------------------------
    # Scoping and replay
    # -------------------------------------------------------------------------

    def log(self, message: str) -> None:
        """Write a transcript line attributed to the current source."""
        self.battle.say(message)

    def with_actor(self, actor: Fighter | None) -> Any:
        """Context manager crediting ``actor`` for mutations in the block."""
        return self.battle.acting(actor)

    def with_source(self, slug: str | None) -> Any:
        """Context manager attributing transcript lines to ``slug``."""
        return self.battle.sourced(slug)

    def invoke(
        self,
        slug: str,
        event: Event | None = None,
        *,
        owner: Fighter | None = None,
        other: Fighter | None = None,
        **payload: Any,
    ) -> bool:
        """Replay another capability's handler.

        Defaults to the current event, fighters and payload.

        Returns:
            True if a handler ran.
        """
        return self.battle.invoke(
            slug,
            event or self.event,
            owner or self.owner,
            other or self.other,
            **(payload or self.payload),
        )

    def dispatch(self, event: Event, **payload: Any) -> None:
        """Dispatch a full event on the owner (weapon, items, globals)."""
        self.battle.dispatch(event, self.owner, self.other, **payload)

    # -------------------------------------------------------------------------
    # Mutation helpers
    # -------------------------------------------------------------------------

    def _pair(self, target: Fighter | None) -> tuple[Fighter, Fighter]:
        fighter = target or self.owner
        return fighter, self.battle.opponent_of(fighter)

    def heal(self, amount: int, *, target: Fighter | None = None) -> int:
        """Heal the owner (or ``target``); returns health restored."""
        fighter, opponent = self._pair(target)
        return actions.heal(self.battle, fighter, opponent, amount)

    def add_attack(self, amount: int, *, target: Fighter | None = None) -> None:
        """Change base attack."""
        actions.add_attack(target or self.owner, amount)

    def add_temp_attack(self, amount: int, *, target: Fighter | None = None) -> None:
        """Change attack until the fighter's next turn start."""
        actions.add_temp_attack(target or self.owner, amount)

    def add_armor(self, amount: int, *, target: Fighter | None = None) -> int:
        """Change armor; returns armor actually gained."""
        fighter, opponent = self._pair(target)
        return actions.add_armor(self.battle, fighter, opponent, amount)

    def add_status(self, kind: StatusKind | str, amount: int, *, target: Fighter | None = None) -> int:
        """Change a status stack; returns the actual change."""
        fighter, opponent = self._pair(target)
        return actions.add_status(self.battle, fighter, opponent, kind, amount)

    def add_thorns(self, amount: int, *, target: Fighter | None = None) -> int:
        """Shortcut for ``add_status("thorns", amount)``."""
        return self.add_status(StatusKind.THORNS, amount, target=target)

    def add_extra_strikes(self, amount: int, *, target: Fighter | None = None) -> None:
        """Grant extra strikes this turn."""
        actions.add_extra_strikes(target or self.owner, amount)

    def damage_other(self, amount: int) -> DamageResult:
        """Deal damage from the owner to the other fighter."""
        return actions.damage_other(self.battle, self.owner, self.other, amount)

    def bomb_damage(self, base: int) -> int:
        """Deal bomb-tagged damage to the other fighter; returns health removed."""
        return actions.bomb_damage(self.battle, self.owner, self.other, base)

    def spend_armor_to_thorns(self, amount: int) -> int:
        """Convert up to ``amount`` of the owner's armor into thorns."""
        return actions.spend_armor_to_thorns(self.owner, amount)

    def add_gold(self, amount: int, *, target: Fighter | None = None) -> int:
        """Give gold (capped); returns gold actually gained."""
        return actions.add_gold(self.battle, target or self.owner, amount)

    def add_countdown(
        self,
        name: str,
        turns: int,
        *,
        tag: Any = None,
        action: Callable[..., Any] | None = None,
        target: Fighter | None = None,
    ) -> int:
        """Register a countdown on the owner; returns its id."""
        return countdowns.add_countdown(
            target or self.owner,
            name,
            turns,
            tag=tag,
            action=action,
            source=self.battle.current_source,
        )

    def decrement_countdowns(self, amount: int = 1, *, target: Fighter | None = None) -> None:
        """Advance every countdown of the owner."""
        countdowns.decrement_countdowns(target or self.owner, amount)

    def halve_countdowns(self, *, target: Fighter | None = None) -> None:
        """Halve every countdown of the owner."""
        countdowns.halve_countdowns(target or self.owner)


__all__ = [
    "Battle",
    "EventContext",
]

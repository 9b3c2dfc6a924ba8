"""Capability registry: slug -> event -> handler.

A capability is the behaviour of one item, weapon, upgrade or set bonus.
The engine knows none of them; content code registers them here and the
dispatcher looks handlers up by slug at dispatch time. An unregistered
slug simply has no behaviour.

Three ways to register:

    >>> registry = CapabilityRegistry()
    >>>
    >>> # 1. An object whose methods are named after events
    >>> @capability("items/blood_sausage", registry=registry)
    ... class BloodSausage(Capability):
    ...     def battle_start(self, ctx):
    ...         for _ in range(5):
    ...             ctx.heal(1)
    >>>
    >>> # 2. One handler at a time
    >>> @registry.handler("items/poisonous_mushroom", Event.TURN_START)
    ... def mushroom(ctx):
    ...     ctx.add_status("poison", 1)
    >>>
    >>> # 3. A mapping (camelCase event names from older content are accepted)
    >>> registry.register("sets/iron_chain", {"battleStart": lambda ctx: ctx.add_armor(5)})

Global handlers run for every fighter after its weapon and items.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from heic_sim.core.exceptions import RegistryError
from heic_sim.core.logging import get_logger
from heic_sim.models.enums import Event


if TYPE_CHECKING:
    from heic_sim.engine.battle import EventContext

logger = get_logger(__name__)

Handler = Callable[["EventContext"], Any]
H = TypeVar("H", bound=Handler)
C = TypeVar("C", bound=type)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_event(name: Event | str) -> Event:
    """Resolve an event from an Event, its value, or a camelCase name.

    Args:
        name: ``Event.ON_HIT``, ``"on_hit"`` or ``"onHit"``.

    Returns:
        The matching Event.

    Raises:
        RegistryError: If no event matches.
    """
    if isinstance(name, Event):
        return name
    if isinstance(name, str):
        for candidate in (name, _CAMEL_BOUNDARY.sub("_", name).lower()):
            try:
                return Event(candidate)
            except ValueError:
                continue
    raise RegistryError(f"Unknown event: {name!r}", event=str(name))


class Capability:
    """Optional base class for capability objects.

    Define a method per handled event, named after the event value and
    taking the event context::

        class BasiliskFang(Capability):
            def on_hit(self, ctx):
                ctx.add_status("poison", 1, target=ctx.other)

    Every method is optional. See ``Event`` for the full list.
    """

    description: str = ""


@dataclass
class CapabilityDefinition:
    """Handlers registered for one slug.

    Attributes:
        slug: Stable identifier (e.g. ``weapons/basilisk_fang``).
        handlers: Handler per event.
        description: Optional human-readable summary.
    """

    slug: str
    handlers: dict[Event, Handler] = field(default_factory=dict)
    description: str = ""

    def get(self, event: Event) -> Handler | None:
        """Return the handler for an event, if any."""
        return self.handlers.get(event)


def _extract_handlers(capability: Any) -> dict[Event, Handler]:
    """Collect handlers from a mapping or from event-named methods."""
    handlers: dict[Event, Handler] = {}
    if isinstance(capability, Mapping):
        for name, fn in capability.items():
            event = to_event(name)
            if not callable(fn):
                raise RegistryError(
                    "Capability handler is not callable",
                    event=event.value,
                    details={"handler_type": type(fn).__name__},
                )
            handlers[event] = fn
        return handlers

    for event in Event:
        fn = getattr(capability, event.value, None)
        if callable(fn):
            handlers[event] = fn
    return handlers


class CapabilityRegistry:
    """Mapping from slug to capability handlers, plus global handlers.

    The registry is populated before battles run and only read during
    them, so one registry can serve many concurrent simulations.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._capabilities: dict[str, CapabilityDefinition] = {}
        self._globals: dict[Event, list[Handler]] = {}

    def register(
        self,
        slug: str,
        capability: Any,
        *,
        description: str = "",
        replace: bool = False,
    ) -> CapabilityDefinition:
        """Register (or extend) the handlers for a slug.

        Args:
            slug: Stable capability identifier.
            capability: An object with event-named methods, or a mapping
                of event (Event, value or camelCase name) to handler.
            description: Optional human-readable summary.
            replace: Overwrite handlers already registered for the same
                slug and event instead of failing.

        Returns:
            The slug's definition after registration.

        Raises:
            RegistryError: If the slug is empty, a handler is not callable,
                an event name is unknown, or a handler already exists and
                ``replace`` is False.
        """
        if not isinstance(slug, str) or not slug:
            raise RegistryError("Capability slug must be a non-empty string")

        handlers = _extract_handlers(capability)
        definition = self._capabilities.get(slug)
        if definition is None:
            definition = CapabilityDefinition(slug=slug)
            self._capabilities[slug] = definition

        for event, fn in handlers.items():
            if event in definition.handlers and not replace:
                raise RegistryError(
                    "Handler already registered",
                    slug=slug,
                    event=event.value,
                )
            definition.handlers[event] = fn

        description = description or getattr(capability, "description", "") or ""
        if description:
            definition.description = description

        logger.debug(
            "Capability registered",
            slug=slug,
            events=[event.value for event in handlers],
        )
        return definition

    def handler(self, slug: str, event: Event | str, *, replace: bool = False) -> Callable[[H], H]:
        """Decorator registering a single handler for a slug and event.

        Args:
            slug: Stable capability identifier.
            event: Event to handle.
            replace: Overwrite an existing handler.

        Returns:
            Decorator returning the function unchanged.
        """
        resolved = to_event(event)

        def decorator(fn: H) -> H:
            self.register(slug, {resolved: fn}, replace=replace)
            return fn

        return decorator

    def add_global(self, event: Event | str, fn: Handler) -> None:
        """Register a capability-independent handler for an event.

        Global handlers run after the weapon and items of whichever fighter
        the event is dispatched on, in registration order.

        Args:
            event: Event to handle.
            fn: Handler to call.

        Raises:
            RegistryError: If the handler is not callable.
        """
        resolved = to_event(event)
        if not callable(fn):
            raise RegistryError("Global handler is not callable", event=resolved.value)
        self._globals.setdefault(resolved, []).append(fn)

    def global_handler(self, event: Event | str) -> Callable[[H], H]:
        """Decorator form of ``add_global``."""

        def decorator(fn: H) -> H:
            self.add_global(event, fn)
            return fn

        return decorator

    def get_handler(self, slug: str | None, event: Event) -> Handler | None:
        """Look up the handler for a slug and event."""
        if not slug:
            return None
        definition = self._capabilities.get(slug)
        if definition is None:
            return None
        return definition.get(event)

    def global_handlers(self, event: Event) -> list[Handler]:
        """Return the global handlers for an event, in registration order."""
        return list(self._globals.get(event, ()))

    def get(self, slug: str) -> CapabilityDefinition | None:
        """Return the definition for a slug, if registered."""
        return self._capabilities.get(slug)

    def unregister(self, slug: str) -> None:
        """Remove every handler for a slug. Unknown slugs are ignored."""
        self._capabilities.pop(slug, None)

    def clear(self) -> None:
        """Remove all capabilities and global handlers."""
        self._capabilities.clear()
        self._globals.clear()

    def __contains__(self, slug: object) -> bool:
        return slug in self._capabilities

    def __iter__(self) -> Iterator[str]:
        return iter(self._capabilities)

    def __len__(self) -> int:
        return len(self._capabilities)


# Registry used by ``simulate`` when none is passed
default_registry = CapabilityRegistry()


def capability(
    slug: str,
    *,
    registry: CapabilityRegistry | None = None,
    description: str = "",
) -> Callable[[C], C]:
    """Class decorator registering an instance of a capability class.

    Args:
        slug: Stable capability identifier.
        registry: Registry to use (defaults to ``default_registry``).
        description: Optional human-readable summary.

    Returns:
        Decorator returning the class unchanged.
    """

    def decorator(cls: C) -> C:
        (registry if registry is not None else default_registry).register(
            slug,
            cls(),
            description=description or (cls.__doc__ or "").strip().split("\n")[0],
        )
        cls.slug = slug  # type: ignore[attr-defined]
        return cls

    return decorator


__all__ = [
    "Handler",
    "Capability",
    "CapabilityDefinition",
    "CapabilityRegistry",
    "capability",
    "default_registry",
    "to_event",
]

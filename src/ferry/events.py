"""EventBus and event types for user-visible notices."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from .exceptions import FerryError

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Kinds of events reported to the editor."""

    UNRECOGNIZED_RESOURCE = "unrecognized_resource"
    ACTION_APPLIED = "action_applied"
    ACTION_FAILED = "action_failed"
    DOCUMENT_REBOUND = "document_rebound"
    REBIND_FAILED = "rebind_failed"


@dataclass(frozen=True, slots=True)
class FerryEvent:
    """Immutable record of something the user should hear about.

    Attributes:
        event_type: The kind of event.
        url: Affected resource (destination for moves and rebinds).
        old_url: Previous name (moves and rebinds only).
        message: Human-readable notice.
        error: The error behind a failure event, None otherwise.
    """

    event_type: EventType
    url: str
    old_url: str | None = None
    message: str | None = None
    error: FerryError | None = None


class EventBus:
    """Dispatches events to registered handlers.

    Handlers are plain callables run synchronously in registration order.
    Exceptions are logged but never propagated; a failing handler loses
    a notice, it does not abort the operation that emitted it.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[Callable[..., Any]]] = {et: [] for et in EventType}

    def register(self, event_type: EventType, handler: Callable[..., Any]) -> None:
        """Append *handler* to the list for *event_type*."""
        self._handlers[event_type].append(handler)

    def unregister(self, event_type: EventType, handler: Callable[..., Any]) -> bool:
        """Remove first occurrence of *handler*. Return True if found."""
        handlers = self._handlers[event_type]
        try:
            handlers.remove(handler)
            return True
        except ValueError:
            return False

    def emit(self, event: FerryEvent) -> None:
        """Dispatch *event* to all registered handlers for its type."""
        for handler in self._handlers[event.event_type]:
            try:
                handler(event)
            except Exception:
                logger.warning(
                    "Handler %r failed for %s on %s",
                    handler,
                    event.event_type.value,
                    event.url,
                    exc_info=True,
                )

    @property
    def handler_count(self) -> int:
        """Total number of registered handlers across all event types."""
        return sum(len(h) for h in self._handlers.values())

    def clear(self) -> None:
        """Remove all registered handlers."""
        for handlers in self._handlers.values():
            handlers.clear()

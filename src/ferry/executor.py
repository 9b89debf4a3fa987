"""ActionExecutor — resolve, perform, then rebind."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .events import EventBus, EventType, FerryEvent
from .exceptions import CapabilityNotSupportedError
from .protocol import SupportsPerformAction
from .rebinder import IdentityRebinder
from .transfer import TransferResolver
from .types import ActionKind, ActionResult, RebindStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .documents import DocumentDirectory
    from .protocol import Adapter
    from .registry import AdapterRegistry
    from .types import Action, RebindOutcome

logger = logging.getLogger(__name__)


class ActionExecutor:
    """Runs planned actions against adapters and keeps documents in step.

    Documents are only rebound after the adapter reports success, never
    speculatively.  Rebinding itself is synchronous.

    Usage::

        executor = ActionExecutor(registry, directory)
        await executor.execute_all(actions)
    """

    def __init__(
        self,
        registry: AdapterRegistry,
        directory: DocumentDirectory,
        *,
        event_bus: EventBus | None = None,
        rebinder: IdentityRebinder | None = None,
    ) -> None:
        self._registry = registry
        self._directory = directory
        self._event_bus = event_bus or EventBus()
        self._resolver = TransferResolver(registry)
        self._rebinder = rebinder or IdentityRebinder(directory, registry.config)

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def resolver(self) -> TransferResolver:
        return self._resolver

    @property
    def rebinder(self) -> IdentityRebinder:
        return self._rebinder

    async def execute(self, action: Action) -> ActionResult:
        """Resolve and run a single action."""
        adapter = self._resolver.resolve(action)
        return await self._apply(action, adapter)

    async def execute_all(self, actions: Iterable[Action]) -> list[ActionResult]:
        """Run *actions* in order.

        Every action is resolved before any adapter is called, so an
        unregistered scheme or incompatible transfer rejects the whole batch
        untouched.  The first adapter failure stops the batch.
        """
        plan = self._resolver.resolve_all(actions)
        for action, adapter in plan:
            _require_perform(adapter)
        return [await self._apply(action, adapter) for action, adapter in plan]

    async def _apply(self, action: Action, adapter: Adapter) -> ActionResult:
        performer = _require_perform(adapter)
        url = str(action.dest_url or action.resource_url)
        try:
            await performer.perform_action(action)
        except Exception as exc:
            logger.warning("Adapter %s failed on %s", adapter.name, action, exc_info=True)
            self._event_bus.emit(
                FerryEvent(
                    event_type=EventType.ACTION_FAILED,
                    url=url,
                    old_url=str(action.src_url) if action.src_url else None,
                    message=f"{action}: {exc}",
                )
            )
            raise

        result = ActionResult(action=action, adapter=adapter.name)
        if action.kind is ActionKind.MOVE and action.src_url and action.dest_url:
            result.outcomes = self._rebinder.update_moved(
                action.entry_type, action.src_url, action.dest_url
            )
            for outcome in result.outcomes:
                self._report(outcome)

        self._event_bus.emit(
            FerryEvent(
                event_type=EventType.ACTION_APPLIED,
                url=url,
                old_url=str(action.src_url) if action.src_url else None,
                message=str(action),
            )
        )
        return result

    def _report(self, outcome: RebindOutcome) -> None:
        if outcome.status is RebindStatus.FAILED:
            event_type = EventType.REBIND_FAILED
            message = str(outcome.error)
        else:
            event_type = EventType.DOCUMENT_REBOUND
            message = f"{outcome.old_name} -> {outcome.new_name} ({outcome.status.value})"
        self._event_bus.emit(
            FerryEvent(
                event_type=event_type,
                url=outcome.new_name,
                old_url=outcome.old_name,
                message=message,
                error=outcome.error,
            )
        )


def _require_perform(adapter: Adapter) -> SupportsPerformAction:
    if not isinstance(adapter, SupportsPerformAction):
        msg = f"Adapter {adapter.name!r} cannot perform actions"
        raise CapabilityNotSupportedError(msg)
    return adapter

"""TransferResolver — pick the adapter that executes an action."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import IncompatibleTransferError, NoAdapterError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .protocol import Adapter
    from .registry import AdapterRegistry
    from .types import Action

logger = logging.getLogger(__name__)


class TransferResolver:
    """Chooses which adapter's routine runs an action.

    Same-adapter actions run on that adapter.  A cross-adapter transfer runs
    on whichever side declares the other in ``supports_xfer``, preferring the
    source.  There is no staging through a third adapter.  Resolution is
    advisory only and performs no I/O.
    """

    def __init__(self, registry: AdapterRegistry) -> None:
        self._registry = registry

    def resolve(self, action: Action) -> Adapter:
        """Return the adapter that should execute *action*.

        Raises:
            NoAdapterError: the action's resource scheme is unregistered.
            IncompatibleTransferError: neither adapter can reach the other.
        """
        resource = action.resource_url
        if resource is None:
            msg = f"Action has no resource URL: {action}"
            raise NoAdapterError("", msg)
        adapter = self._registry.require_adapter(resource)
        if action.dest_url is None:
            return adapter

        dest_adapter = self._registry.require_adapter(action.dest_url)
        if dest_adapter is adapter:
            return adapter
        if self._registry.can_transfer(adapter.name, dest_adapter.name):
            chosen = adapter
        elif self._registry.can_transfer(dest_adapter.name, adapter.name):
            chosen = dest_adapter
        else:
            raise IncompatibleTransferError(
                adapter.name, dest_adapter.name, resource.url, action.dest_url.url
            )
        logger.debug(
            "Transfer %s: %s -> %s handled by %s",
            action.kind.value,
            adapter.name,
            dest_adapter.name,
            chosen.name,
        )
        return chosen

    def resolve_all(self, actions: Iterable[Action]) -> list[tuple[Action, Adapter]]:
        """Resolve every action up front so a bad batch fails before any I/O."""
        return [(action, self.resolve(action)) for action in actions]

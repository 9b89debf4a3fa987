"""AdapterRegistry — scheme lookup and the transfer capability graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import rustworkx

from .config import FerryConfig
from .events import EventType, FerryEvent
from .exceptions import NoAdapterError, RegistryError
from .url import SCHEME_SEPARATOR, ResourceIdentity, parse_url

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .events import EventBus
    from .protocol import Adapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdapterSpec:
    """Declarative adapter with no I/O of its own."""

    name: str
    scheme: str
    supports_xfer: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "supports_xfer", frozenset(self.supports_xfer))


def _normalize_scheme(scheme: str) -> str:
    scheme, _, _ = scheme.partition(SCHEME_SEPARATOR)
    return scheme


class AdapterRegistry:
    """Read-only map from URL schemes to adapters.

    Built once from a list of adapters and a :class:`FerryConfig`; there is
    no way to add or remove adapters afterwards.  Declared transfer
    capabilities are kept in a directed graph where an edge ``A -> B``
    means adapter ``A`` can move resources to and from adapter ``B``.
    """

    def __init__(
        self,
        adapters: Iterable[Adapter],
        *,
        config: FerryConfig | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.config = config or FerryConfig()
        self._event_bus = event_bus
        self._by_name: dict[str, Adapter] = {}
        self._by_scheme: dict[str, Adapter] = {}
        self._notified: set[str] = set()

        for adapter in adapters:
            if adapter.name in self._by_name:
                msg = f"Adapter registered twice: {adapter.name!r}"
                raise RegistryError(msg)
            self._by_name[adapter.name] = adapter
            self._claim_scheme(_normalize_scheme(adapter.scheme), adapter)

        for scheme, name in self.config.adapters.items():
            adapter = self._by_name.get(name)
            if adapter is None:
                logger.debug("Scheme %s:// maps to unregistered adapter %r", scheme, name)
                continue
            self._claim_scheme(scheme, adapter)

        self._graph: rustworkx.PyDiGraph = rustworkx.PyDiGraph()
        self._name_to_idx = {name: self._graph.add_node(name) for name in self._by_name}
        for adapter in self._by_name.values():
            for target in adapter.supports_xfer:
                if target not in self._name_to_idx:
                    logger.debug(
                        "Adapter %r declares transfer to unknown adapter %r", adapter.name, target
                    )
                    continue
                self._graph.add_edge(
                    self._name_to_idx[adapter.name], self._name_to_idx[target], None
                )

    def _claim_scheme(self, scheme: str, adapter: Adapter) -> None:
        existing = self._by_scheme.get(scheme)
        if existing is not None and existing is not adapter:
            msg = f"Scheme {scheme}:// claimed by both {existing.name!r} and {adapter.name!r}"
            raise RegistryError(msg)
        self._by_scheme[scheme] = adapter

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_adapter(self, name: str) -> Adapter | None:
        return self._by_name.get(name)

    def get_adapter_for_scheme(self, scheme: str | None) -> Adapter | None:
        """Return the adapter owning *scheme*.  ``None`` means a raw local path."""
        if scheme is None:
            scheme = self.config.default_scheme
            if scheme is None:
                return None
        return self._by_scheme.get(_normalize_scheme(scheme))

    def get_adapter_for_identity(self, identity: ResourceIdentity) -> Adapter | None:
        return self.get_adapter_for_scheme(identity.scheme)

    def get_adapter_for_url(self, url: str) -> Adapter | None:
        """Return the adapter for *url*, or notify the user once and return None."""
        parsed = parse_url(url)
        scheme = parsed[0] if parsed is not None else None
        adapter = self.get_adapter_for_scheme(scheme)
        if adapter is None:
            key = scheme or ""
            if key not in self._notified:
                self._notified.add(key)
                logger.error("Could not find adapter for resource %r", url)
                if self._event_bus is not None:
                    self._event_bus.emit(
                        FerryEvent(
                            event_type=EventType.UNRECOGNIZED_RESOURCE,
                            url=url,
                            message=f"Could not find adapter for '{key}://'",
                        )
                    )
        return adapter

    def require_adapter(self, identity: ResourceIdentity) -> Adapter:
        """Like :meth:`get_adapter_for_identity` but raises ``NoAdapterError``."""
        adapter = self.get_adapter_for_identity(identity)
        if adapter is None:
            raise NoAdapterError(identity.url)
        return adapter

    def list_adapters(self) -> list[Adapter]:
        """List all registered adapters, sorted by name."""
        return sorted(self._by_name.values(), key=lambda a: a.name)

    def schemes(self) -> list[str]:
        """List every scheme with an adapter, sorted."""
        return sorted(self._by_scheme)

    # ------------------------------------------------------------------
    # Transfer capabilities
    # ------------------------------------------------------------------

    def can_transfer(self, source: str, target: str) -> bool:
        """Return True if adapter *source* declares a transfer to *target*."""
        src_idx = self._name_to_idx.get(source)
        tgt_idx = self._name_to_idx.get(target)
        if src_idx is None or tgt_idx is None:
            return False
        return self._graph.has_edge(src_idx, tgt_idx)

    def transfer_edges(self) -> list[tuple[str, str]]:
        """Return all declared ``(source, target)`` adapter pairs, sorted."""
        return sorted(
            (self._graph[src_idx], self._graph[tgt_idx])
            for src_idx, tgt_idx in self._graph.edge_list()
        )


# ----------------------------------------------------------------------
# Process-wide registry
# ----------------------------------------------------------------------

_registry: AdapterRegistry | None = None


def init(
    adapters: Iterable[Adapter],
    *,
    config: FerryConfig | None = None,
    event_bus: EventBus | None = None,
) -> AdapterRegistry:
    """Build the process-wide registry.  May only be called once."""
    global _registry
    if _registry is not None:
        msg = "Adapter registry already initialized"
        raise RegistryError(msg)
    _registry = AdapterRegistry(adapters, config=config, event_bus=event_bus)
    return _registry


def get_registry() -> AdapterRegistry:
    """Return the process-wide registry built by :func:`init`."""
    if _registry is None:
        msg = "Adapter registry is not initialized; call ferry.registry.init() first"
        raise RegistryError(msg)
    return _registry


def reset() -> None:
    """Forget the process-wide registry.  Intended for tests."""
    global _registry
    _registry = None

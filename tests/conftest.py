"""Shared fixtures for Ferry tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from ferry import registry as registry_module
from ferry.config import FerryConfig
from ferry.documents import DocumentDirectory
from ferry.events import EventBus
from ferry.registry import AdapterRegistry, AdapterSpec

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ferry.types import Action


class RecordingAdapter:
    """Adapter that records the actions it performs."""

    def __init__(
        self,
        name: str,
        scheme: str,
        supports_xfer: frozenset[str] = frozenset(),
        *,
        fail_on: set[str] | None = None,
    ) -> None:
        self.name = name
        self.scheme = scheme
        self.supports_xfer = frozenset(supports_xfer)
        self.performed: list[Action] = []
        self.fail_on = fail_on or set()

    async def perform_action(self, action: Action) -> None:
        if str(action.resource_url) in self.fail_on:
            raise OSError(f"permission denied: {action.resource_url}")
        self.performed.append(action)


@pytest.fixture
def config() -> FerryConfig:
    return FerryConfig()


@pytest.fixture
def adapters() -> dict[str, RecordingAdapter]:
    """files <-> trash are linked from the files side; ssh is an island."""
    return {
        "files": RecordingAdapter("files", "oil", frozenset({"trash"})),
        "trash": RecordingAdapter("trash", "oil-trash"),
        "ssh": RecordingAdapter("ssh", "oil-ssh"),
    }


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def registry(
    adapters: dict[str, RecordingAdapter], config: FerryConfig, event_bus: EventBus
) -> AdapterRegistry:
    return AdapterRegistry(adapters.values(), config=config, event_bus=event_bus)


@pytest.fixture
def directory() -> DocumentDirectory:
    """Fresh document directory rooted at /work for relative names."""
    return DocumentDirectory(cwd="/work")


@pytest.fixture
def spec_registry() -> AdapterRegistry:
    """Registry of declarative adapters A (-> B), B, and C."""
    return AdapterRegistry(
        [
            AdapterSpec("A", "a", frozenset({"B"})),
            AdapterSpec("B", "b"),
            AdapterSpec("C", "c"),
        ],
        config=FerryConfig(adapters={}, remap_schemes={}),
    )


@pytest.fixture(autouse=True)
def _reset_global_registry() -> Iterator[None]:
    registry_module.reset()
    yield
    registry_module.reset()

"""Adapter and editor protocols — runtime-checkable interfaces.

Adapters implement the core ``Adapter`` protocol; the ones that perform
their own I/O additionally implement ``SupportsPerformAction``.  The editor
side is described by ``EditorHost``, which ``DocumentDirectory``
implements in memory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .documents import Document
    from .types import Action


@runtime_checkable
class Adapter(Protocol):
    """Core interface every adapter must expose."""

    @property
    def name(self) -> str:
        """Unique adapter name, e.g. ``"files"``."""
        ...

    @property
    def scheme(self) -> str:
        """URL scheme the adapter owns, without ``://``."""
        ...

    @property
    def supports_xfer(self) -> Iterable[str]:
        """Adapter names this adapter can transfer resources to and from."""
        ...


@runtime_checkable
class SupportsPerformAction(Protocol):
    """Opt-in: the adapter executes actions itself."""

    async def perform_action(self, action: Action) -> None: ...


@runtime_checkable
class EditorHost(Protocol):
    """Document and window operations the rebinder consumes."""

    def list_open_documents(self) -> list[Document]: ...

    def get_document_name(self, doc: Document) -> str: ...

    def set_document_name(self, doc: Document, new_name: str) -> bool: ...

    def list_windows(self) -> list[int]: ...

    def get_window_document(self, win: int) -> Document | None: ...

    def set_window_document(self, win: int, doc: Document) -> None: ...

    def is_absolute_path(self, path: str) -> bool: ...

    def canonicalize(self, path: str) -> str: ...

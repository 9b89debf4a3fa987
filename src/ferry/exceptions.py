"""Custom exception hierarchy for Ferry."""

from __future__ import annotations


class FerryError(Exception):
    """Base exception for all Ferry errors."""


class RegistryError(FerryError):
    """Raised on adapter registry misuse (uninitialized, duplicate names, late mutation)."""


class UnrecognizedResourceError(FerryError):
    """Raised when a URL's scheme has no registered adapter."""

    def __init__(self, url: str, message: str | None = None) -> None:
        self.url = url
        super().__init__(message or f"Could not find adapter for resource: {url}")


class NoAdapterError(UnrecognizedResourceError):
    """Raised when an action's resource resolves to no adapter."""


class IncompatibleTransferError(FerryError):
    """Raised when two adapters share no transfer capability."""

    def __init__(self, src_adapter: str, dest_adapter: str, src_url: str, dest_url: str) -> None:
        self.src_adapter = src_adapter
        self.dest_adapter = dest_adapter
        self.src_url = src_url
        self.dest_url = dest_url
        super().__init__(
            f"Cannot transfer {src_url} ({src_adapter}) -> {dest_url} ({dest_adapter}); "
            "no cross-adapter transfer method found"
        )


class IdentityCollisionError(FerryError):
    """Raised when a rebind would overwrite another document's unsaved content."""

    def __init__(self, doc_name: str, other_name: str) -> None:
        self.doc_name = doc_name
        self.other_name = other_name
        super().__init__(
            f"Cannot rebind {doc_name!r}: {other_name!r} is already open with unsaved changes"
        )


class RenameFailedError(FerryError):
    """Raised when both the rename primitive and the load-copy-delete fallback fail."""

    def __init__(self, old_name: str, new_name: str) -> None:
        self.old_name = old_name
        self.new_name = new_name
        super().__init__(f"Could not rename {old_name!r} to {new_name!r}")


class CapabilityNotSupportedError(FerryError):
    """Raised when an adapter doesn't support a requested capability."""

"""Ferry: resource identity and transfer resolution for editors.

One URL scheme for every adapter, open documents that follow their
resources through moves, and capability negotiation for cross-adapter
transfers.
"""

__version__ = "0.1.0"

from ferry.config import FerryConfig
from ferry.documents import Document, DocumentDirectory, DocumentKind
from ferry.events import EventBus, EventType, FerryEvent
from ferry.exceptions import (
    CapabilityNotSupportedError,
    FerryError,
    IdentityCollisionError,
    IncompatibleTransferError,
    NoAdapterError,
    RegistryError,
    RenameFailedError,
    UnrecognizedResourceError,
)
from ferry.executor import ActionExecutor
from ferry.protocol import Adapter, EditorHost, SupportsPerformAction
from ferry.rebinder import AliasChain, IdentityRebinder, local_names, remapped_names
from ferry.registry import AdapterRegistry, AdapterSpec, get_registry, init
from ferry.transfer import TransferResolver
from ferry.types import (
    Action,
    ActionKind,
    ActionResult,
    EntryType,
    RebindOutcome,
    RebindStatus,
)
from ferry.url import ResourceIdentity, add_trailing_separator, build_url, parse_url

__all__ = [
    "Action",
    "ActionExecutor",
    "ActionKind",
    "ActionResult",
    "Adapter",
    "AdapterRegistry",
    "AdapterSpec",
    "AliasChain",
    "CapabilityNotSupportedError",
    "Document",
    "DocumentDirectory",
    "DocumentKind",
    "EditorHost",
    "EntryType",
    "EventBus",
    "EventType",
    "FerryConfig",
    "FerryError",
    "FerryEvent",
    "IdentityCollisionError",
    "IdentityRebinder",
    "IncompatibleTransferError",
    "NoAdapterError",
    "RebindOutcome",
    "RebindStatus",
    "RegistryError",
    "RenameFailedError",
    "ResourceIdentity",
    "SupportsPerformAction",
    "TransferResolver",
    "UnrecognizedResourceError",
    "__version__",
    "add_trailing_separator",
    "build_url",
    "get_registry",
    "init",
    "local_names",
    "parse_url",
    "remapped_names",
]

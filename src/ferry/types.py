"""Value types: actions, entry types, rebind outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .exceptions import FerryError
    from .url import ResourceIdentity


class ActionKind(str, Enum):
    """Kind of planned mutation."""

    CREATE = "create"
    DELETE = "delete"
    MOVE = "move"
    COPY = "copy"


class EntryType(str, Enum):
    """Type of the resource an action touches."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class Action:
    """A planned mutation produced by a higher-level planner.

    ``create`` and ``delete`` carry ``url``; ``move`` and ``copy`` carry
    ``src_url`` and ``dest_url``.
    """

    kind: ActionKind
    entry_type: EntryType = EntryType.FILE
    url: ResourceIdentity | None = None
    src_url: ResourceIdentity | None = None
    dest_url: ResourceIdentity | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ActionKind(self.kind))
        object.__setattr__(self, "entry_type", EntryType(self.entry_type))

    @property
    def resource_url(self) -> ResourceIdentity | None:
        """The identity whose adapter owns this action."""
        return self.url if self.url is not None else self.src_url

    def __str__(self) -> str:
        if self.dest_url is not None:
            return f"{self.kind.value.upper()} {self.src_url} -> {self.dest_url}"
        return f"{self.kind.value.upper()} {self.resource_url}"


class RebindStatus(str, Enum):
    """How a single document's rebind ended."""

    RENAMED = "renamed"
    """Document renamed in place."""

    MERGED = "merged"
    """Unsaved content copied into the document already bound to the new name."""

    DISCARDED = "discarded"
    """Stale document dropped in favour of the one already bound to the new name."""

    FAILED = "failed"


@dataclass
class RebindOutcome:
    """Result of rebinding one document."""

    old_name: str
    new_name: str
    status: RebindStatus
    error: FerryError | None = None

    @property
    def success(self) -> bool:
        return self.status is not RebindStatus.FAILED


@dataclass
class ActionResult:
    """Result of executing one action."""

    action: Action
    adapter: str
    outcomes: list[RebindOutcome] = field(default_factory=list)

    @property
    def failures(self) -> list[RebindOutcome]:
        """Documents that could not be rebound."""
        return [o for o in self.outcomes if not o.success]

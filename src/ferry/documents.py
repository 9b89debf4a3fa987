"""Document, DocumentKind, and the in-memory DocumentDirectory."""

from __future__ import annotations

import itertools
import logging
from enum import Enum
from typing import TYPE_CHECKING

from . import utils
from .exceptions import FerryError, IdentityCollisionError, RenameFailedError
from .types import RebindOutcome, RebindStatus
from .url import ResourceIdentity

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class DocumentKind(str, Enum):
    """What an open document represents."""

    ORDINARY = "ordinary"
    """A file buffer backed by a resource."""

    LISTING = "listing"
    """The virtual listing view of a directory resource."""

    SPECIAL = "special"
    """Terminals, help pages, scratch buffers.  Never rebound by prefix."""


class Document:
    """An open editor document.

    The name can only change through :meth:`DocumentDirectory.rebind` (or
    the host's ``set_document_name`` primitive), so a document cannot be
    silently re-pointed at an identity another document already holds.
    """

    __slots__ = ("_name", "dirty", "doc_id", "kind", "lines", "listed", "loaded", "windows")

    def __init__(
        self,
        doc_id: int,
        name: str,
        *,
        kind: DocumentKind = DocumentKind.ORDINARY,
        loaded: bool = True,
        dirty: bool = False,
        listed: bool = True,
        lines: list[str] | None = None,
    ) -> None:
        self.doc_id = doc_id
        self._name = name
        self.kind = kind
        self.loaded = loaded
        self.dirty = dirty
        self.listed = listed
        self.lines: list[str] = list(lines) if lines is not None else []
        self.windows: set[int] = set()

    @property
    def name(self) -> str:
        return self._name

    @property
    def identity(self) -> ResourceIdentity:
        return ResourceIdentity.from_url(self._name)

    def __repr__(self) -> str:
        flags = [f for f, on in (("loaded", self.loaded), ("dirty", self.dirty)) if on]
        return f"Document(id={self.doc_id}, name={self._name!r}, kind={self.kind.value}, {flags})"


class DocumentDirectory:
    """Open documents and the windows showing them.

    Implements the ``EditorHost`` protocol in memory.  Construct one per
    editor session (or per test); nothing here is global.

    Args:
        loader: Reads a resource's lines when an unloaded document has to be
            loaded.  Without one, loading copies the content of the document
            being merged away, which is what the moved resource holds on disk.
        cwd: Base directory for canonicalizing relative local names.
    """

    def __init__(
        self,
        *,
        loader: Callable[[str], list[str]] | None = None,
        cwd: str | None = None,
    ) -> None:
        self._loader = loader
        self._cwd = cwd
        self._docs: dict[int, Document] = {}
        self._by_name: dict[str, int] = {}
        self._window_docs: dict[int, int | None] = {}
        self._doc_ids = itertools.count(1)
        self._win_ids = itertools.count(1000)

    # ------------------------------------------------------------------
    # Editor-side lifecycle
    # ------------------------------------------------------------------

    def open_document(
        self,
        name: str,
        *,
        kind: DocumentKind = DocumentKind.ORDINARY,
        loaded: bool = True,
        dirty: bool = False,
        listed: bool = True,
        lines: list[str] | None = None,
    ) -> Document:
        """Open *name*, or return the document already bound to it."""
        existing = self.find_by_name(name) if name else None
        if existing is not None:
            return existing
        doc = Document(
            next(self._doc_ids),
            name,
            kind=kind,
            loaded=loaded,
            dirty=dirty,
            listed=listed,
            lines=lines,
        )
        self._docs[doc.doc_id] = doc
        if name:
            self._by_name[name] = doc.doc_id
        return doc

    def close_document(self, doc: Document) -> None:
        """Close *doc*, leaving any window that showed it empty."""
        for win in list(doc.windows):
            self._window_docs[win] = None
        doc.windows.clear()
        self._docs.pop(doc.doc_id, None)
        if doc.name and self._by_name.get(doc.name) == doc.doc_id:
            del self._by_name[doc.name]

    def open_window(self, doc: Document | None = None) -> int:
        """Create a window, optionally showing *doc*.  Returns its handle."""
        win = next(self._win_ids)
        self._window_docs[win] = None
        if doc is not None:
            self.set_window_document(win, doc)
        return win

    def load_document(self, doc: Document, fallback: list[str] | None = None) -> None:
        """Load *doc*'s content if it isn't loaded yet."""
        if doc.loaded:
            return
        if self._loader is not None:
            doc.lines = list(self._loader(doc.name))
        elif fallback is not None:
            doc.lines = list(fallback)
        doc.loaded = True

    def is_open(self, doc: Document) -> bool:
        return self._docs.get(doc.doc_id) is doc

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_by_name(self, name: str) -> Document | None:
        doc_id = self._by_name.get(name)
        return self._docs.get(doc_id) if doc_id is not None else None

    def find_by_identity(self, identity: ResourceIdentity) -> Document | None:
        return self.find_by_name(identity.url)

    def find_descendants(self, dir_identity: ResourceIdentity) -> list[Document]:
        """All documents whose identity lies inside *dir_identity*."""
        return [
            doc for doc in self._docs.values() if doc.name and dir_identity.contains(doc.identity)
        ]

    # ------------------------------------------------------------------
    # EditorHost
    # ------------------------------------------------------------------

    def list_open_documents(self) -> list[Document]:
        return list(self._docs.values())

    def get_document_name(self, doc: Document) -> str:
        return doc.name

    def can_rename_in_place(self, doc: Document, new_name: str) -> bool:
        """Whether the rename primitive accepts *new_name* for *doc*.

        Subclasses representing stricter editors override this; a refusal
        sends :meth:`rebind` down the load-copy-delete path.
        """
        return True

    def set_document_name(self, doc: Document, new_name: str) -> bool:
        """Rename primitive.  Returns False when the name can't be taken."""
        holder = self._by_name.get(new_name)
        if holder is not None and holder != doc.doc_id:
            return False
        if not self.can_rename_in_place(doc, new_name):
            return False
        if doc.name and self._by_name.get(doc.name) == doc.doc_id:
            del self._by_name[doc.name]
        doc._name = new_name
        if new_name:
            self._by_name[new_name] = doc.doc_id
        return True

    def list_windows(self) -> list[int]:
        return list(self._window_docs)

    def get_window_document(self, win: int) -> Document | None:
        doc_id = self._window_docs.get(win)
        return self._docs.get(doc_id) if doc_id is not None else None

    def set_window_document(self, win: int, doc: Document) -> None:
        if win not in self._window_docs:
            msg = f"Unknown window: {win}"
            raise KeyError(msg)
        previous = self.get_window_document(win)
        if previous is not None:
            previous.windows.discard(win)
        self._window_docs[win] = doc.doc_id
        doc.windows.add(win)

    def is_absolute_path(self, path: str) -> bool:
        return utils.is_absolute_path(path)

    def canonicalize(self, path: str) -> str:
        return utils.canonicalize(path, cwd=self._cwd)

    # ------------------------------------------------------------------
    # Rebind
    # ------------------------------------------------------------------

    def rebind(self, doc: Document, new_name: str) -> RebindOutcome:
        """Bind *doc* to *new_name*, merging with any document already there.

        Raises:
            IdentityCollisionError: both documents hold unsaved changes.
            RenameFailedError: the rename primitive and the fallback both failed.
        """
        old_name = doc.name
        if not self.is_open(doc):
            msg = f"Document {old_name!r} is not open"
            raise FerryError(msg)
        if new_name == old_name:
            return RebindOutcome(old_name, new_name, RebindStatus.RENAMED)

        other = self.find_by_name(new_name)
        created = False
        if other is None:
            if self.set_document_name(doc, new_name):
                logger.debug("Renamed document %r -> %r", old_name, new_name)
                return RebindOutcome(old_name, new_name, RebindStatus.RENAMED)
            logger.debug("Rename of %r refused; falling back to load-copy-delete", old_name)
            other = self.open_document(new_name, kind=doc.kind, loaded=False, listed=False)
            if other is doc or not self.is_open(other):
                raise RenameFailedError(old_name, new_name)
            created = True

        try:
            return self._merge_into(doc, other)
        except RenameFailedError:
            if created:
                self.close_document(other)
            raise

    def _merge_into(self, doc: Document, other: Document) -> RebindOutcome:
        """Replace *doc* with *other*, carrying unsaved content and windows across."""
        if doc.dirty and other.dirty:
            raise IdentityCollisionError(doc.name, other.name)

        try:
            self.load_document(other, fallback=doc.lines)
        except Exception as exc:
            logger.warning(
                "Could not load %r while rebinding %r", other.name, doc.name, exc_info=True
            )
            raise RenameFailedError(doc.name, other.name) from exc
        if doc.dirty:
            other.lines = list(doc.lines)
            other.dirty = True
            status = RebindStatus.MERGED
        else:
            status = RebindStatus.DISCARDED
        if doc.listed:
            other.listed = True

        for win in sorted(doc.windows):
            self.set_window_document(win, other)
        old_name = doc.name
        self.close_document(doc)
        logger.debug("Merged document %r into %r (%s)", old_name, other.name, status.value)
        return RebindOutcome(old_name, other.name, status)

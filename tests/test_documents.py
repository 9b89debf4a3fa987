"""Tests for Document and DocumentDirectory, including rebind collisions."""

from __future__ import annotations

import itertools

import pytest

from ferry.documents import DocumentDirectory, DocumentKind
from ferry.exceptions import FerryError, IdentityCollisionError, RenameFailedError
from ferry.protocol import EditorHost
from ferry.types import RebindStatus
from ferry.url import ResourceIdentity


class StrictDirectory(DocumentDirectory):
    """Refuses in-place renames of local files, like editors that tie buffers to disk."""

    def can_rename_in_place(self, doc, new_name):
        return not doc.identity.is_raw


class NoFallbackDirectory(StrictDirectory):
    """Also refuses to open a destination document."""

    def open_document(self, name, **kwargs):
        existing = self.find_by_name(name)
        if existing is not None or kwargs.get("loaded", True):
            return super().open_document(name, **kwargs)
        return self.list_open_documents()[0]


def _assert_unique_names(directory: DocumentDirectory) -> None:
    names = [d.name for d in directory.list_open_documents() if d.name]
    assert len(names) == len(set(names))


# ---------------------------------------------------------------------------
# Lifecycle & lookup
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_satisfies_editor_host(self, directory):
        assert isinstance(directory, EditorHost)

    def test_open_returns_existing(self, directory):
        doc = directory.open_document("/a.txt")
        assert directory.open_document("/a.txt") is doc
        assert len(directory.list_open_documents()) == 1

    def test_unnamed_documents_are_distinct(self, directory):
        first = directory.open_document("")
        second = directory.open_document("")
        assert first is not second
        assert directory.find_by_name("") is None

    def test_close_clears_windows(self, directory):
        doc = directory.open_document("/a.txt")
        win = directory.open_window(doc)
        directory.close_document(doc)
        assert directory.get_window_document(win) is None
        assert directory.find_by_name("/a.txt") is None
        assert not directory.is_open(doc)

    def test_window_attachment(self, directory):
        a = directory.open_document("/a.txt")
        b = directory.open_document("/b.txt")
        win = directory.open_window(a)
        directory.set_window_document(win, b)
        assert a.windows == set()
        assert b.windows == {win}
        assert directory.list_windows() == [win]

    def test_unknown_window(self, directory):
        doc = directory.open_document("/a.txt")
        with pytest.raises(KeyError):
            directory.set_window_document(42, doc)

    def test_name_is_read_only(self, directory):
        doc = directory.open_document("/a.txt")
        with pytest.raises(AttributeError):
            doc.name = "/b.txt"  # type: ignore[misc]

    def test_load_with_loader(self):
        d = DocumentDirectory(loader=lambda name: [f"content of {name}"])
        doc = d.open_document("/a.txt", loaded=False)
        d.load_document(doc)
        assert doc.loaded
        assert doc.lines == ["content of /a.txt"]

    def test_canonicalize_uses_cwd(self, directory):
        assert directory.canonicalize("src/x.py") == "/work/src/x.py"


class TestLookup:
    def test_find_by_identity(self, directory):
        doc = directory.open_document("oil:///a/")
        assert directory.find_by_identity(ResourceIdentity("oil", "/a/")) is doc
        assert directory.find_by_identity(ResourceIdentity("oil", "/a")) is None

    def test_find_descendants(self, directory):
        x = directory.open_document("oil:///a/x.txt")
        y = directory.open_document("oil:///a/sub/y.txt")
        directory.open_document("oil:///ab/z.txt")
        directory.open_document("oil-ssh:///a/w.txt")
        directory.open_document("oil:///a/", kind=DocumentKind.LISTING)
        found = directory.find_descendants(ResourceIdentity("oil", "/a"))
        assert found == [x, y]


# ---------------------------------------------------------------------------
# Rebind
# ---------------------------------------------------------------------------


class TestRebindInPlace:
    def test_renames_and_keeps_state(self, directory):
        doc = directory.open_document("/a.txt", dirty=True, listed=False, lines=["edit"])
        win = directory.open_window(doc)
        outcome = directory.rebind(doc, "/b.txt")
        assert outcome.status is RebindStatus.RENAMED
        assert outcome.old_name == "/a.txt"
        assert doc.name == "/b.txt"
        assert doc.dirty is True
        assert doc.listed is False
        assert doc.lines == ["edit"]
        assert doc.windows == {win}
        assert directory.find_by_name("/a.txt") is None
        assert directory.find_by_name("/b.txt") is doc

    def test_same_name_is_noop(self, directory):
        doc = directory.open_document("/a.txt")
        assert directory.rebind(doc, "/a.txt").status is RebindStatus.RENAMED

    def test_closed_document(self, directory):
        doc = directory.open_document("/a.txt")
        directory.close_document(doc)
        with pytest.raises(FerryError, match="not open"):
            directory.rebind(doc, "/b.txt")

    def test_set_document_name_refuses_taken_name(self, directory):
        a = directory.open_document("/a.txt")
        directory.open_document("/b.txt")
        assert directory.set_document_name(a, "/b.txt") is False
        assert a.name == "/a.txt"


class TestRebindCollision:
    def test_clean_source_is_discarded(self, directory):
        src = directory.open_document("/a.txt", lines=["old"])
        dest = directory.open_document("/b.txt", lines=["new"])
        win = directory.open_window(src)
        outcome = directory.rebind(src, "/b.txt")
        assert outcome.status is RebindStatus.DISCARDED
        assert not directory.is_open(src)
        assert directory.get_window_document(win) is dest
        assert dest.lines == ["new"]

    def test_dirty_source_into_unloaded_dest(self, directory):
        src = directory.open_document("/a.txt", dirty=True, lines=["unsaved"])
        dest = directory.open_document("/b.txt", loaded=False, listed=False)
        outcome = directory.rebind(src, "/b.txt")
        assert outcome.status is RebindStatus.MERGED
        assert dest.loaded and dest.dirty
        assert dest.lines == ["unsaved"]
        assert dest.listed is True

    def test_dirty_source_into_clean_loaded_dest(self, directory):
        src = directory.open_document("/a.txt", dirty=True, lines=["unsaved"])
        dest = directory.open_document("/b.txt", lines=["on disk"])
        directory.rebind(src, "/b.txt")
        assert dest.lines == ["unsaved"]
        assert dest.dirty

    def test_both_dirty_is_collision(self, directory):
        src = directory.open_document("/a.txt", dirty=True, lines=["mine"])
        dest = directory.open_document("/b.txt", dirty=True, lines=["theirs"])
        win = directory.open_window(src)
        with pytest.raises(IdentityCollisionError) as exc_info:
            directory.rebind(src, "/b.txt")
        assert exc_info.value.doc_name == "/a.txt"
        assert exc_info.value.other_name == "/b.txt"
        assert directory.is_open(src)
        assert src.lines == ["mine"]
        assert dest.lines == ["theirs"]
        assert directory.get_window_document(win) is src

    def test_clean_source_into_dirty_dest_keeps_dest(self, directory):
        src = directory.open_document("/a.txt", lines=["saved"])
        dest = directory.open_document("/b.txt", dirty=True, lines=["theirs"])
        outcome = directory.rebind(src, "/b.txt")
        assert outcome.status is RebindStatus.DISCARDED
        assert dest.lines == ["theirs"]

    def test_windows_all_repointed(self, directory):
        src = directory.open_document("/a.txt")
        dest = directory.open_document("/b.txt")
        wins = [directory.open_window(src) for _ in range(3)]
        directory.rebind(src, "/b.txt")
        assert all(directory.get_window_document(w) is dest for w in wins)
        assert dest.windows == set(wins)


class TestRebindFallback:
    def test_refused_rename_uses_load_copy_delete(self):
        directory = StrictDirectory()
        src = directory.open_document("/a.txt", dirty=True, lines=["unsaved"])
        win = directory.open_window(src)
        outcome = directory.rebind(src, "/b.txt")
        assert outcome.status is RebindStatus.MERGED
        dest = directory.find_by_name("/b.txt")
        assert dest is not None and dest is not src
        assert dest.lines == ["unsaved"]
        assert directory.get_window_document(win) is dest
        assert not directory.is_open(src)

    def test_clean_fallback_carries_content(self):
        directory = StrictDirectory()
        src = directory.open_document("/a.txt", lines=["saved"])
        directory.rebind(src, "/b.txt")
        dest = directory.find_by_name("/b.txt")
        assert dest.lines == ["saved"]
        assert dest.dirty is False

    def test_scheme_documents_rename_in_place(self):
        directory = StrictDirectory()
        doc = directory.open_document("oil:///a/", kind=DocumentKind.LISTING)
        assert directory.rebind(doc, "oil:///b/").status is RebindStatus.RENAMED

    def test_fallback_failure(self):
        directory = NoFallbackDirectory()
        src = directory.open_document("/a.txt")
        with pytest.raises(RenameFailedError):
            directory.rebind(src, "/b.txt")
        assert directory.is_open(src)

    def test_loader_failure_closes_fallback_destination(self):
        def loader(name):
            raise OSError(f"cannot read {name}")

        directory = StrictDirectory(loader=loader)
        src = directory.open_document("/a.txt", dirty=True, lines=["unsaved"])
        win = directory.open_window(src)
        with pytest.raises(RenameFailedError) as exc_info:
            directory.rebind(src, "/b.txt")
        assert isinstance(exc_info.value.__cause__, OSError)
        assert directory.find_by_name("/b.txt") is None
        assert directory.is_open(src)
        assert src.lines == ["unsaved"]
        assert directory.get_window_document(win) is src

    def test_loader_failure_leaves_existing_destination(self):
        def loader(name):
            raise OSError(f"cannot read {name}")

        directory = DocumentDirectory(loader=loader)
        src = directory.open_document("/a.txt", dirty=True, lines=["unsaved"])
        dest = directory.open_document("/b.txt", loaded=False)
        with pytest.raises(RenameFailedError):
            directory.rebind(src, "/b.txt")
        assert directory.find_by_name("/b.txt") is dest
        assert dest.loaded is False
        assert directory.is_open(src)


# ---------------------------------------------------------------------------
# At-most-one binding
# ---------------------------------------------------------------------------


class TestUniqueBinding:
    def test_random_rebind_sequence_keeps_names_unique(self, directory):
        names = ["/a", "/b", "/c", "/d"]
        docs = [
            directory.open_document(n, dirty=i % 2 == 0, lines=[n]) for i, n in enumerate(names)
        ]
        for doc, target in itertools.product(docs, names):
            if directory.is_open(doc):
                try:
                    directory.rebind(doc, target)
                except IdentityCollisionError:
                    pass
            _assert_unique_names(directory)

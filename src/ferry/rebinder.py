"""IdentityRebinder — re-target open documents after a move or rename."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from .documents import DocumentKind
from .exceptions import FerryError
from .types import EntryType, RebindOutcome, RebindStatus
from .url import ResourceIdentity, add_trailing_separator, build_url, parse_url
from .utils import posix_to_os_path

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .config import FerryConfig
    from .documents import Document, DocumentDirectory

    AliasResolver = Callable[[ResourceIdentity, FerryConfig], list[str]]

logger = logging.getLogger(__name__)


# =============================================================================
# Alias resolvers
# =============================================================================


def remapped_names(identity: ResourceIdentity, config: FerryConfig) -> list[str]:
    """Names under every document scheme the remap table points at this scheme.

    ``oil-ssh://host/a.txt`` -> ``["scp://host/a.txt", "sftp://host/a.txt"]``
    """
    if identity.scheme is None:
        return []
    return [build_url(scheme, identity.path) for scheme in config.aliases_for(identity.scheme)]


def local_names(identity: ResourceIdentity, config: FerryConfig) -> list[str]:
    """The raw OS path, for identities owned by the local-files scheme."""
    if identity.scheme is None:
        return [identity.path]
    if identity.scheme == config.default_scheme:
        return [posix_to_os_path(identity.path)]
    return []


DEFAULT_RESOLVERS: tuple[AliasResolver, ...] = (remapped_names, local_names)


class AliasChain:
    """Ordered alias resolvers; the first one that yields any names wins.

    When none applies the identity's own URL is its only name.
    """

    def __init__(
        self,
        config: FerryConfig,
        resolvers: Sequence[AliasResolver] = DEFAULT_RESOLVERS,
    ) -> None:
        self._config = config
        self._resolvers = tuple(resolvers)

    @property
    def resolvers(self) -> tuple[AliasResolver, ...]:
        return self._resolvers

    def names_for(self, identity: ResourceIdentity) -> list[str]:
        """All document names *identity* may be open under, best first."""
        for resolver in self._resolvers:
            names = resolver(identity, self._config)
            if names:
                return names
        return [identity.url]


def _dir_prefix(name: str) -> str:
    sep = "/" if parse_url(name) is not None else os.sep
    return add_trailing_separator(name, sep)


# =============================================================================
# IdentityRebinder
# =============================================================================


class IdentityRebinder:
    """Applies a completed move to every affected open document.

    Each document is rebound independently.  A failure is recorded in the
    returned outcomes and the pass carries on with the remaining documents.
    """

    def __init__(
        self,
        directory: DocumentDirectory,
        config: FerryConfig,
        *,
        aliases: AliasChain | None = None,
    ) -> None:
        self._directory = directory
        self._aliases = aliases or AliasChain(config)

    @property
    def aliases(self) -> AliasChain:
        return self._aliases

    def update_moved(
        self,
        entry_type: EntryType,
        src_url: ResourceIdentity | str,
        dest_url: ResourceIdentity | str,
    ) -> list[RebindOutcome]:
        """Rebind every document affected by moving *src_url* to *dest_url*."""
        src = _as_identity(src_url)
        dest = _as_identity(dest_url)
        if EntryType(entry_type) is EntryType.DIRECTORY:
            outcomes = self._update_directory(src, dest)
        else:
            outcomes = self._update_file(src, dest)
        logger.debug(
            "Rebound %d document(s) for %s move %s -> %s",
            len(outcomes),
            EntryType(entry_type).value,
            src,
            dest,
        )
        return outcomes

    def _update_file(self, src: ResourceIdentity, dest: ResourceIdentity) -> list[RebindOutcome]:
        dest_name = self._aliases.names_for(dest)[0]
        outcomes: list[RebindOutcome] = []
        for name in self._aliases.names_for(src):
            doc = self._directory.find_by_name(name)
            if doc is not None:
                outcomes.append(self._rebind(doc, dest_name))
        return outcomes

    def _update_directory(
        self, src: ResourceIdentity, dest: ResourceIdentity
    ) -> list[RebindOutcome]:
        directory = self._directory
        src_dir = src.as_directory()
        dest_dir = dest.as_directory()
        outcomes: list[RebindOutcome] = []

        # The directory's own listing goes first
        listing = directory.find_by_identity(src_dir)
        if listing is not None:
            outcomes.append(self._rebind(listing, dest_dir.url))

        # Prefix replacement only applies to scheme-qualified names; raw local
        # sources go through the canonicalized alias path below
        src_prefix = src_dir.url if src.scheme is not None else None
        alias_prefixes = [_dir_prefix(name) for name in self._aliases.names_for(src)]
        dest_alias_prefix = _dir_prefix(self._aliases.names_for(dest)[0])

        for doc in directory.list_open_documents():
            if doc is listing or not directory.is_open(doc):
                continue
            name = directory.get_document_name(doc)
            if src_prefix is not None and name.startswith(src_prefix):
                moved = ResourceIdentity.from_url(name).with_prefix_replaced(src_dir, dest_dir)
                outcomes.append(self._rebind(doc, moved.url))
                continue
            if not name or doc.kind is not DocumentKind.ORDINARY:
                continue
            if parse_url(name) is None:
                name = directory.canonicalize(name)
            for prefix in alias_prefixes:
                if name.startswith(prefix):
                    outcomes.append(self._rebind(doc, dest_alias_prefix + name[len(prefix):]))
                    break
        return outcomes

    def _rebind(self, doc: Document, new_name: str) -> RebindOutcome:
        old_name = doc.name
        try:
            return self._directory.rebind(doc, new_name)
        except FerryError as exc:
            logger.warning("Could not rebind %r -> %r: %s", old_name, new_name, exc)
            return RebindOutcome(old_name, new_name, RebindStatus.FAILED, error=exc)


def _as_identity(url: ResourceIdentity | str) -> ResourceIdentity:
    if isinstance(url, ResourceIdentity):
        return url
    return ResourceIdentity.from_url(url)

"""URL model — ``scheme://path`` identities for every adapter."""

from __future__ import annotations

from dataclasses import dataclass

SCHEME_SEPARATOR = "://"


def parse_url(url: str) -> tuple[str, str] | None:
    """Split *url* into ``(scheme, path)`` on the first ``://``.

    Returns ``None`` when there is no separator or the scheme is empty,
    meaning the string is a raw local path.

    Examples:
        parse_url("oil-ssh://host/a.txt") -> ("oil-ssh", "host/a.txt")
        parse_url("/home/me/a.txt") -> None
    """
    scheme, sep, path = url.partition(SCHEME_SEPARATOR)
    if not sep or not scheme:
        return None
    return scheme, path


def build_url(scheme: str | None, path: str) -> str:
    """Inverse of :func:`parse_url`.  A ``None`` scheme yields the bare path."""
    if not scheme:
        return path
    return f"{scheme}{SCHEME_SEPARATOR}{path}"


def add_trailing_separator(path: str, sep: str = "/") -> str:
    """Append *sep* to *path* unless it already ends with it."""
    if path.endswith(sep):
        return path
    return path + sep


@dataclass(frozen=True, slots=True)
class ResourceIdentity:
    """Immutable ``(scheme, path)`` pair naming a resource across adapters.

    Attributes:
        scheme: Adapter scheme without the ``://`` separator, or ``None`` for
            a raw local path.
        path: Provider-specific path.  Opaque except for prefix tests.
    """

    scheme: str | None
    path: str

    @classmethod
    def from_url(cls, url: str) -> ResourceIdentity:
        parsed = parse_url(url)
        if parsed is None:
            return cls(scheme=None, path=url)
        return cls(scheme=parsed[0], path=parsed[1])

    @property
    def url(self) -> str:
        return build_url(self.scheme, self.path)

    @property
    def is_raw(self) -> bool:
        """True when this identity is a bare local path with no scheme."""
        return self.scheme is None

    def as_directory(self) -> ResourceIdentity:
        """Return this identity with an implicit trailing separator made explicit."""
        return ResourceIdentity(self.scheme, add_trailing_separator(self.path))

    def contains(self, other: ResourceIdentity) -> bool:
        """Return True if *other* lies strictly inside this directory identity."""
        if other.scheme != self.scheme:
            return False
        prefix = add_trailing_separator(self.path)
        return other.path.startswith(prefix) and other.path != prefix

    def with_prefix_replaced(self, old: ResourceIdentity, new: ResourceIdentity) -> ResourceIdentity:
        """Re-root this identity from directory *old* onto directory *new*."""
        old_prefix = add_trailing_separator(old.path)
        remainder = self.path[len(old_prefix):]
        return ResourceIdentity(new.scheme, add_trailing_separator(new.path) + remainder)

    def __str__(self) -> str:
        return self.url

"""FerryConfig — scheme tables shared by the registry and the rebinder."""

from __future__ import annotations

from dataclasses import dataclass, field

from .url import SCHEME_SEPARATOR

DEFAULT_REMAP_KEY = "default"


def _strip_scheme(scheme: str) -> str:
    if scheme.endswith(SCHEME_SEPARATOR):
        return scheme[: -len(SCHEME_SEPARATOR)]
    return scheme


def _default_adapters() -> dict[str, str]:
    return {"oil": "files", "oil-ssh": "ssh", "oil-trash": "trash"}


def _default_remap_schemes() -> dict[str, str]:
    return {"scp": "oil-ssh", "sftp": "oil-ssh", DEFAULT_REMAP_KEY: "oil"}


@dataclass
class FerryConfig:
    """Scheme configuration for a Ferry process."""

    adapters: dict[str, str] = field(default_factory=_default_adapters)
    """URL scheme -> adapter name.  An adapter may serve several schemes."""

    remap_schemes: dict[str, str] = field(default_factory=_default_remap_schemes)
    """Document-name scheme -> adapter scheme.

    Lets a resource opened as ``scp://host/a.txt`` be recognised as the
    same resource as ``oil-ssh://host/a.txt``.  The ``default`` key names the
    adapter scheme used for raw local paths.
    """

    path_separator: str = "/"
    """Separator used for descendant tests on adapter paths."""

    def __post_init__(self) -> None:
        self.adapters = {_strip_scheme(k): v for k, v in self.adapters.items()}
        self.remap_schemes = {
            (k if k == DEFAULT_REMAP_KEY else _strip_scheme(k)): _strip_scheme(v)
            for k, v in self.remap_schemes.items()
        }

    @property
    def default_scheme(self) -> str | None:
        """Adapter scheme that raw local paths belong to, if configured."""
        return self.remap_schemes.get(DEFAULT_REMAP_KEY)

    def aliases_for(self, adapter_scheme: str) -> list[str]:
        """Document-name schemes that remap onto *adapter_scheme*, in table order."""
        return [
            doc_scheme
            for doc_scheme, target in self.remap_schemes.items()
            if target == adapter_scheme and doc_scheme != DEFAULT_REMAP_KEY
        ]

"""Local path helpers used when comparing raw filesystem names."""

from __future__ import annotations

import os
import posixpath

IS_WINDOWS = os.name == "nt"


def posix_to_os_path(path: str, *, windows: bool = IS_WINDOWS) -> str:
    """Convert an adapter-style posix path to the native OS form.

    Adapter URLs always carry posix paths; on Windows the drive letter is
    stored as the first segment (``/C/Users/me`` -> ``C:\\Users\\me``).
    """
    if not windows:
        return path
    drive, _, rest = path.lstrip("/").partition("/")
    if len(drive) == 1 and drive.isalpha():
        return f"{drive.upper()}:\\" + rest.replace("/", "\\")
    return path.replace("/", "\\")


def is_absolute_path(path: str) -> bool:
    """Check whether a local path is absolute on this platform."""
    return os.path.isabs(path)


def canonicalize(path: str, cwd: str | None = None) -> str:
    """Make a local path absolute and collapse ``.``/``..`` segments.

    A trailing separator is kept so directory names stay directory names.
    """
    sep = os.sep
    trailing = path.endswith((sep, "/")) and len(path) > 1
    if not os.path.isabs(path):
        path = os.path.join(cwd or os.getcwd(), path)
    result = os.path.normpath(path)
    if not IS_WINDOWS:
        # normpath keeps a leading double slash on POSIX
        result = posixpath.normpath(result.replace("//", "/"))
    if trailing and not result.endswith(sep):
        result += sep
    return result

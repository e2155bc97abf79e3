"""Helpers for store-relative remote paths."""

from __future__ import annotations

DISPLAY_SEPARATOR = "\\"
_SEPARATORS = ("/", "\\")


def to_store_path(path: str, separator: str) -> str:
    """Normalize ``path`` to the store separator, without leading/trailing ones."""
    for sep in _SEPARATORS:
        if sep != separator:
            path = path.replace(sep, separator)
    return path.strip(separator)


def to_display_path(path: str) -> str:
    """Return ``path`` using backslashes, the way users of the share see it."""
    return to_store_path(path, DISPLAY_SEPARATOR)


def remote_basename(path: str) -> str:
    return to_store_path(path, "/").rsplit("/", 1)[-1]


def join_remote(separator: str, *parts: str) -> str:
    cleaned = [to_store_path(part, separator) for part in parts]
    return separator.join(part for part in cleaned if part)

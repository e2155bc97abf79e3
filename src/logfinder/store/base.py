"""Capability interface for the network share holding the log trees."""

from __future__ import annotations

import logging
from typing import BinaryIO, Callable, Iterator, List, Optional, Protocol

from logfinder.errors import ListError
from logfinder.models import RemoteEntry

LOGGER = logging.getLogger(__name__)

WalkErrorHandler = Callable[[str, OSError], None]


class RemoteStore(Protocol):
    """Protocol for remote store adapters.

    All paths are relative to the store (share) root. Adapters normalize
    incoming paths to ``separator`` before touching the store.
    """

    separator: str

    def connect(self) -> None:
        """Open the session. Raises ``ConnectError``."""
        ...

    def walk(self, path: str, onerror: Optional[WalkErrorHandler] = None) -> Iterator[RemoteEntry]:
        """Yield every entry beneath ``path``. Raises ``ListError`` if ``path`` cannot be listed."""
        ...

    def open(self, path: str) -> BinaryIO:
        """Open a file for binary reading. Raises ``OSError``."""
        ...

    def close(self) -> None:
        ...

    def __enter__(self) -> "RemoteStore":
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def walk_tree(
    list_dir: Callable[[str], List[RemoteEntry]],
    top: str,
    onerror: Optional[WalkErrorHandler] = None,
) -> Iterator[RemoteEntry]:
    """Walk a tree using ``list_dir`` for each directory.

    A failure to list ``top`` raises ``ListError``. A failure below it is
    handed to ``onerror`` (or logged) and that branch is skipped.
    """
    try:
        entries = list_dir(top)
    except OSError as exc:
        raise ListError(f"cannot list {top}: {exc}") from exc

    pending = [entries]
    while pending:
        for entry in pending.pop():
            yield entry
            if not entry.is_dir:
                continue
            try:
                pending.append(list_dir(entry.path))
            except OSError as exc:
                if onerror is None:
                    LOGGER.warning("Walk error: %s: %s", entry.path, exc)
                else:
                    onerror(entry.path, exc)

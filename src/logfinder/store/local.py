"""Remote store adapter over a local (or locally mounted) directory."""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional

from logfinder.errors import ConnectError
from logfinder.models import RemoteEntry
from logfinder.store.base import RemoteStore, WalkErrorHandler, walk_tree
from logfinder.utils.paths import join_remote, to_store_path


class LocalStore(RemoteStore):
    """Serve a directory tree through the remote store interface."""

    separator = "/"

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def connect(self) -> None:
        if not self.root.is_dir():
            raise ConnectError(f"Not a directory: {self.root}")
        self.root = self.root.resolve()

    def close(self) -> None:
        pass

    def _resolve(self, path: str) -> Path:
        relative = to_store_path(path, self.separator)
        target = (self.root / relative).resolve()
        if target != self.root and self.root not in target.parents:
            raise PermissionError(f"Path escapes store root: {path}")
        return target

    def _list_dir(self, path: str) -> List[RemoteEntry]:
        with os.scandir(self._resolve(path)) as it:
            return [
                RemoteEntry(
                    path=join_remote(self.separator, path, entry.name),
                    name=entry.name,
                    is_dir=entry.is_dir(follow_symlinks=False),
                )
                for entry in it
            ]

    def walk(self, path: str, onerror: Optional[WalkErrorHandler] = None) -> Iterator[RemoteEntry]:
        return walk_tree(self._list_dir, to_store_path(path, self.separator), onerror)

    def open(self, path: str) -> BinaryIO:
        return self._resolve(path).open("rb")

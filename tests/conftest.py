"""In-memory remote store used across the test suite."""

from __future__ import annotations

import io
from typing import BinaryIO, Dict, Iterable, Iterator, List, Optional

from logfinder.models import RemoteEntry
from logfinder.store.base import RemoteStore, WalkErrorHandler, walk_tree
from logfinder.utils.paths import join_remote, to_store_path


class FailingReader(io.BytesIO):
    """Stream that raises after handing out its first chunk."""

    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.reads = 0

    def read(self, size: int = -1) -> bytes:
        self.reads += 1
        if self.reads > 1:
            raise OSError("connection reset")
        return super().read(size)


class MemoryStore(RemoteStore):
    """Remote store over a dict of backslash paths to file contents."""

    separator = "\\"

    def __init__(
        self,
        files: Dict[str, bytes],
        *,
        unreadable: Iterable[str] = (),
        broken: Iterable[str] = (),
        unlistable: Iterable[str] = (),
    ) -> None:
        self.files = {to_store_path(path, self.separator): data for path, data in files.items()}
        self.unreadable = {to_store_path(path, self.separator) for path in unreadable}
        self.broken = {to_store_path(path, self.separator) for path in broken}
        self.unlistable = {to_store_path(path, self.separator) for path in unlistable}
        self.opened: List[str] = []
        self.connected = False
        self.closed = False

    def connect(self) -> None:
        self.connected = True

    def close(self) -> None:
        self.closed = True

    def _list_dir(self, path: str) -> List[RemoteEntry]:
        if path in self.unlistable:
            raise PermissionError(f"access denied: {path}")
        prefix = path + self.separator if path else ""
        children: Dict[str, bool] = {}
        for file_path in self.files:
            if not file_path.startswith(prefix):
                continue
            head, sep, _ = file_path[len(prefix):].partition(self.separator)
            children[head] = children.get(head, False) or bool(sep)
        if not children and path:
            raise FileNotFoundError(f"no such directory: {path}")
        return [
            RemoteEntry(path=join_remote(self.separator, path, name), name=name, is_dir=is_dir)
            for name, is_dir in children.items()
        ]

    def walk(self, path: str, onerror: Optional[WalkErrorHandler] = None) -> Iterator[RemoteEntry]:
        return walk_tree(self._list_dir, to_store_path(path, self.separator), onerror)

    def open(self, path: str) -> BinaryIO:
        self.opened.append(path)
        if path in self.unreadable or path not in self.files:
            raise FileNotFoundError(f"cannot open {path}")
        if path in self.broken:
            return FailingReader(self.files[path])
        return io.BytesIO(self.files[path])

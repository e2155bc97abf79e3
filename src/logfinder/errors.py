"""Error types raised by LogFinder components."""

from __future__ import annotations

from enum import Enum


class LogFinderError(Exception):
    """Base class for all LogFinder errors."""


class ConnectError(LogFinderError):
    """The remote store could not be reached or mounted."""


class ListError(LogFinderError):
    """A directory listing failed."""


class DiscoveryError(LogFinderError):
    """Discovery failed for a whole search root."""

    def __init__(self, root: str, message: str) -> None:
        super().__init__(f"{root}: {message}")
        self.root = root
        self.reason = message


class ScanFailure(str, Enum):
    OPEN = "open"
    READ = "read"


class FetchFailure(str, Enum):
    OPEN = "open"
    CREATE = "create"
    COPY = "copy"


class ScanError(LogFinderError):
    """Scanning a single remote file failed."""

    def __init__(self, kind: ScanFailure, path: str, message: str) -> None:
        super().__init__(f"{kind.value} failed for {path}: {message}")
        self.kind = kind
        self.path = path


class FetchError(LogFinderError):
    """Copying a remote file to local storage failed."""

    def __init__(self, kind: FetchFailure, path: str, message: str) -> None:
        super().__init__(f"{kind.value} failed for {path}: {message}")
        self.kind = kind
        self.path = path

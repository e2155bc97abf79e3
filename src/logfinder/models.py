"""Core LogFinder data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass(slots=True, frozen=True)
class RemoteEntry:
    """One entry produced by a recursive listing of the remote store."""

    path: str
    name: str
    is_dir: bool


@dataclass(slots=True, frozen=True)
class SearchRoot:
    """A logical server subtree scanned independently of the others."""

    name: str
    base_path: str


@dataclass(slots=True, frozen=True)
class CandidateSet:
    """Files matching the name filter across all search roots."""

    paths: Tuple[str, ...] = ()
    errors: Dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.paths)

    def __iter__(self):
        return iter(self.paths)


@dataclass(slots=True, frozen=True)
class SearchOutcome:
    """Aggregate result of a search run.

    ``matches`` is ordered by scan completion, which differs between runs.
    ``errors`` maps search roots that could not be walked to the reason.
    """

    discovered: int
    matches: Tuple[str, ...] = ()
    failed: Tuple[str, ...] = ()
    timed_out: Tuple[str, ...] = ()
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def matched(self) -> int:
        return len(self.matches)

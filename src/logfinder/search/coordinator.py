"""Fan-out/fan-in coordination of content scans."""

from __future__ import annotations

import logging
from concurrent import futures
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import replace
from typing import Callable, Iterable, List, Optional, Sequence

from logfinder.errors import ScanError
from logfinder.models import CandidateSet, SearchOutcome, SearchRoot
from logfinder.search.discovery import DEFAULT_SUFFIX, discover
from logfinder.search.scanner import scan
from logfinder.store.base import RemoteStore
from logfinder.utils.text import DEFAULT_BUFFER_SIZE

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 16


class SearchCoordinator:
    """Scans candidate files concurrently and collects the matches.

    At most ``max_workers`` files are open on the store at once. Results are
    collected on the calling thread in completion order.
    """

    def __init__(
        self,
        store: RemoteStore,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        open_retries: int = 0,
        timeout: Optional[float] = None,
        stop_after: Optional[int] = None,
        on_match: Optional[Callable[[str], None]] = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if stop_after is not None and stop_after < 1:
            raise ValueError("stop_after must be at least 1")
        self.store = store
        self.max_workers = max_workers
        self.buffer_size = buffer_size
        self.open_retries = open_retries
        self.timeout = timeout
        self.stop_after = stop_after
        self.on_match = on_match

    def _scan(self, path: str, needle: str) -> bool:
        LOGGER.debug("Scanning %s", path)
        return scan(
            self.store,
            path,
            needle,
            buffer_size=self.buffer_size,
            open_retries=self.open_retries,
        )

    def _record(self, future, path: str, matches: List[str], failed: List[str]) -> None:
        try:
            found = future.result()
        except ScanError as exc:
            LOGGER.warning("Error searching in %s: %s", path, exc)
            failed.append(path)
            return
        except Exception as exc:
            LOGGER.warning("Unexpected error searching in %s: %r", path, exc)
            failed.append(path)
            return
        if not found:
            return

        matches.append(path)
        LOGGER.info("Found: %s", path)
        if self.on_match is not None:
            self.on_match(path)

    def coordinate(self, candidates: Iterable[str], needle: str) -> SearchOutcome:
        """Search every candidate for ``needle``.

        Scan failures count as non-matches and are listed in ``failed``.
        """
        paths = tuple(candidates)
        if not paths:
            return SearchOutcome(discovered=0)

        matches: List[str] = []
        failed: List[str] = []
        timed_out: List[str] = []
        abandon = False

        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(paths)), thread_name_prefix="scan"
        )
        try:
            pending = {executor.submit(self._scan, path, needle): path for path in paths}
            collected = set()
            try:
                for future in as_completed(pending, timeout=self.timeout):
                    collected.add(future)
                    self._record(future, pending[future], matches, failed)
                    if self.stop_after is not None and len(matches) >= self.stop_after:
                        LOGGER.info("Reached %d match(es), cancelling remaining scans", len(matches))
                        abandon = True
                        break
            except futures.TimeoutError:
                # scans finishing after the deadline fired still count
                for future, path in pending.items():
                    if future in collected:
                        continue
                    if future.done():
                        self._record(future, path, matches, failed)
                    else:
                        timed_out.append(path)
                LOGGER.warning(
                    "Search timed out after %ss with %d scan(s) unfinished", self.timeout, len(timed_out)
                )
                abandon = True
        finally:
            executor.shutdown(wait=not abandon, cancel_futures=True)

        return SearchOutcome(
            discovered=len(paths),
            matches=tuple(matches),
            failed=tuple(failed),
            timed_out=tuple(timed_out),
        )


def search(
    store: RemoteStore,
    roots: Sequence[SearchRoot],
    needle: str,
    *,
    suffix: str = DEFAULT_SUFFIX,
    discovery_workers: Optional[int] = None,
    on_discovered: Optional[Callable[[CandidateSet], None]] = None,
    **coordinator_options,
) -> SearchOutcome:
    """Discover candidates under ``roots`` and search them for ``needle``.

    ``on_discovered`` sees the complete candidate set before any scan starts.
    """
    candidates = discover(store, roots, suffix=suffix, max_workers=discovery_workers)
    LOGGER.info("Total %d log files discovered. Searching for '%s'...", len(candidates), needle)
    if on_discovered is not None:
        on_discovered(candidates)
    coordinator = SearchCoordinator(store, **coordinator_options)
    return replace(coordinator.coordinate(candidates, needle), errors=candidates.errors)

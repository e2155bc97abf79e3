"""Parallel discovery of candidate log files across search roots."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Sequence

from logfinder.errors import DiscoveryError, ListError
from logfinder.models import CandidateSet, RemoteEntry, SearchRoot
from logfinder.store.base import RemoteStore
from logfinder.utils.paths import to_display_path

LOGGER = logging.getLogger(__name__)

DEFAULT_SUFFIX = ".log"


def is_candidate(entry: RemoteEntry, suffix: str = DEFAULT_SUFFIX) -> bool:
    """Files (never directories) whose name ends with ``suffix``, ignoring case."""
    return not entry.is_dir and entry.name.lower().endswith(suffix.lower())


def find_log_files(store: RemoteStore, root: SearchRoot, *, suffix: str = DEFAULT_SUFFIX) -> List[str]:
    """List candidate files under a single root.

    Unlistable branches below the base path are skipped; an unlistable base
    path raises ``DiscoveryError``.
    """

    def _skip_branch(path: str, exc: OSError) -> None:
        LOGGER.warning("Walk error on %s: %s: %s", root.name, path, exc)

    try:
        return [
            to_display_path(entry.path)
            for entry in store.walk(root.base_path, onerror=_skip_branch)
            if is_candidate(entry, suffix)
        ]
    except ListError as exc:
        raise DiscoveryError(root.name, str(exc)) from exc


def discover(
    store: RemoteStore,
    roots: Sequence[SearchRoot],
    *,
    suffix: str = DEFAULT_SUFFIX,
    max_workers: Optional[int] = None,
) -> CandidateSet:
    """Discover candidate files under every root in parallel.

    Each root is walked by its own worker; the calling thread collects the
    per-root lists as they complete. A failing root is recorded in
    ``CandidateSet.errors`` and does not affect the others.
    """
    roots = list(dict.fromkeys(roots))
    if not roots:
        return CandidateSet()

    paths: List[str] = []
    errors: Dict[str, str] = {}
    workers = max_workers or len(roots)

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="discover") as executor:
        futures = {}
        for root in roots:
            LOGGER.info("Discovering files on %s (path: %s)...", root.name, root.base_path)
            futures[executor.submit(find_log_files, store, root, suffix=suffix)] = root

        for future in as_completed(futures):
            root = futures[future]
            try:
                files = future.result()
            except DiscoveryError as exc:
                LOGGER.warning("Failed to find log files on %s: %s", root.name, exc.reason)
                errors[root.name] = exc.reason
                continue
            paths.extend(files)
            LOGGER.info("Finished discovering %d files on %s.", len(files), root.name)

    return CandidateSet(paths=tuple(paths), errors=errors)

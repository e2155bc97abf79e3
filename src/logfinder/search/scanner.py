"""Streaming substring search inside a single remote file."""

from __future__ import annotations

import logging

from logfinder.errors import ScanError, ScanFailure
from logfinder.store.base import RemoteStore
from logfinder.utils.paths import to_store_path
from logfinder.utils.text import DEFAULT_BUFFER_SIZE, decode_line, iter_lines

LOGGER = logging.getLogger(__name__)


def scan(
    store: RemoteStore,
    path: str,
    needle: str,
    *,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    open_retries: int = 0,
) -> bool:
    """Return True as soon as a line of ``path`` contains ``needle``.

    Raises ``ScanError`` when the file cannot be opened or read.
    """
    store_path = to_store_path(path, store.separator)

    attempt = 0
    while True:
        try:
            handle = store.open(store_path)
            break
        except OSError as exc:
            if attempt >= open_retries:
                raise ScanError(ScanFailure.OPEN, path, str(exc)) from exc
            attempt += 1
            LOGGER.debug("Retrying open of %s (%d/%d): %s", path, attempt, open_retries, exc)

    with handle:
        try:
            for line in iter_lines(handle, buffer_size=buffer_size):
                if needle in decode_line(line):
                    return True
        except OSError as exc:
            raise ScanError(ScanFailure.READ, path, str(exc)) from exc

    return False

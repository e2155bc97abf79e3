"""Copy a remote file to local storage."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from logfinder.errors import FetchError, FetchFailure
from logfinder.store.base import RemoteStore
from logfinder.utils.paths import remote_basename, to_store_path

LOGGER = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1 << 20


def local_destination(remote: str, destination: Optional[Path] = None) -> Path:
    """Resolve where ``remote`` is written locally.

    Defaults to the remote file name in the working directory; an existing
    directory receives the file name inside it.
    """
    if destination is None:
        return Path.cwd() / remote_basename(remote)
    destination = Path(destination)
    if destination.is_dir():
        return destination / remote_basename(remote)
    return destination


def fetch(
    store: RemoteStore,
    remote: str,
    destination: Optional[Path] = None,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """Stream ``remote`` into a local file and return the bytes copied.

    A partially written file is left in place when the copy fails.
    """
    target = local_destination(remote, destination)

    try:
        source = store.open(to_store_path(remote, store.separator))
    except OSError as exc:
        raise FetchError(FetchFailure.OPEN, remote, str(exc)) from exc

    with source:
        try:
            sink = target.open("wb")
        except OSError as exc:
            raise FetchError(FetchFailure.CREATE, str(target), str(exc)) from exc

        copied = 0
        with sink:
            try:
                for chunk in iter(lambda: source.read(chunk_size), b""):
                    sink.write(chunk)
                    copied += len(chunk)
            except OSError as exc:
                raise FetchError(FetchFailure.COPY, remote, str(exc)) from exc

    LOGGER.info("Copied %d bytes from %s to %s.", copied, remote, target)
    return copied

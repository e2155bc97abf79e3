"""SMB2/3 remote store adapter built on smbprotocol's ``smbclient``."""

from __future__ import annotations

import io
import logging
from typing import BinaryIO, Iterator, List, Optional

import smbclient
from smbprotocol.exceptions import SMBException

from logfinder.errors import ConnectError
from logfinder.models import RemoteEntry
from logfinder.store.base import RemoteStore, WalkErrorHandler, walk_tree
from logfinder.utils.paths import join_remote, to_store_path

LOGGER = logging.getLogger(__name__)

DEFAULT_PORT = 445


class SMBReader(io.RawIOBase):
    """Read-only stream reporting smbprotocol failures as ``OSError``."""

    def __init__(self, raw: BinaryIO) -> None:
        self._raw = raw

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        try:
            return self._raw.readinto(buffer)
        except SMBException as exc:
            raise OSError(str(exc)) from exc

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._raw.close()
        except SMBException as exc:
            raise OSError(str(exc)) from exc
        finally:
            super().close()


class SMBStore(RemoteStore):
    """Access one share on an SMB server."""

    separator = "\\"

    def __init__(
        self,
        server: str,
        share: str,
        username: str,
        password: str,
        *,
        port: int = DEFAULT_PORT,
        connection_timeout: float = 60.0,
    ) -> None:
        self.server = server
        self.share = share
        self.username = username
        self.password = password
        self.port = port
        self.connection_timeout = connection_timeout
        self._connected = False

    def _unc(self, path: str) -> str:
        return "\\\\" + join_remote(self.separator, self.server, self.share, path)

    def connect(self) -> None:
        LOGGER.debug("Registering SMB session with %s:%s", self.server, self.port)
        try:
            smbclient.register_session(
                self.server,
                username=self.username,
                password=self.password,
                port=self.port,
                connection_timeout=self.connection_timeout,
            )
            self._connected = True
            smbclient.stat(self._unc(""), port=self.port)
        except (OSError, SMBException, ValueError) as exc:
            self.close()
            raise ConnectError(f"Failed to mount {self.share} on {self.server}: {exc}") from exc

    def close(self) -> None:
        if not self._connected:
            return
        self._connected = False
        try:
            smbclient.delete_session(self.server, port=self.port)
        except (OSError, SMBException) as exc:
            LOGGER.debug("Error closing SMB session to %s: %s", self.server, exc)

    def _list_dir(self, path: str) -> List[RemoteEntry]:
        try:
            return [
                RemoteEntry(
                    path=join_remote(self.separator, path, entry.name),
                    name=entry.name,
                    is_dir=entry.is_dir(),
                )
                for entry in smbclient.scandir(self._unc(path), port=self.port)
            ]
        except SMBException as exc:
            raise OSError(str(exc)) from exc

    def walk(self, path: str, onerror: Optional[WalkErrorHandler] = None) -> Iterator[RemoteEntry]:
        return walk_tree(self._list_dir, to_store_path(path, self.separator), onerror)

    def open(self, path: str) -> BinaryIO:
        try:
            raw = smbclient.open_file(self._unc(path), mode="rb", port=self.port)
        except SMBException as exc:
            raise OSError(str(exc)) from exc
        return SMBReader(raw)

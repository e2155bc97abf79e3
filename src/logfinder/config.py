"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from logfinder.models import SearchRoot
from logfinder.search.coordinator import DEFAULT_MAX_WORKERS
from logfinder.search.discovery import DEFAULT_SUFFIX
from logfinder.store.smb import DEFAULT_PORT
from logfinder.utils.text import DEFAULT_BUFFER_SIZE

ROOT_PLACEHOLDER = "{root}"

DEFAULT_ROOTS: Tuple[str, ...] = tuple(f"server{n}.igroup.io" for n in range(1, 7))


@dataclass(slots=True)
class AppConfig:
    server: str = "smb.server"
    share: str = ""
    port: int = DEFAULT_PORT
    roots: Tuple[str, ...] = DEFAULT_ROOTS
    path_template: str = ROOT_PLACEHOLDER + "\\path-to-file"
    suffix: str = DEFAULT_SUFFIX
    max_workers: int = DEFAULT_MAX_WORKERS
    discovery_workers: Optional[int] = None
    buffer_size: int = DEFAULT_BUFFER_SIZE
    open_retries: int = 0
    timeout: Optional[float] = None
    connection_timeout: float = 60.0

    def search_roots(self) -> List[SearchRoot]:
        """Expand the path template once per distinct configured root."""
        if self.path_template.count(ROOT_PLACEHOLDER) != 1:
            raise ValueError(
                f"path_template must contain {ROOT_PLACEHOLDER} exactly once: {self.path_template!r}"
            )
        return [
            SearchRoot(name=root, base_path=self.path_template.replace(ROOT_PLACEHOLDER, root))
            for root in dict.fromkeys(self.roots)
        ]

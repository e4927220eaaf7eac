from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from clinkstore.storage.base import Storage
from clinkstore.storage.clink import (
    clink_to_path,
    end_slash,
    internal_path_to_path,
    path_to_clink,
    path_to_internal_path,
    quote_path,
    trim_slashes,
)
from clinkstore.storage.errors import StorageIOError, StorageKeyNotMatchError

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "file"
DEFAULT_ENDPOINT = "http://localhost:8080/"
DEFAULT_BUFFER_SIZE = 32 * 1024


class LocalStorage(Storage):
    """Keeps files under a local root directory served from ``endpoint``."""

    def __init__(
        self,
        storage_key: str = DEFAULT_STORAGE_KEY,
        endpoint: str = DEFAULT_ENDPOINT,
        root: str = "",
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self.storage_key = storage_key
        self.endpoint = endpoint
        self.root = root
        self.buffer_size = buffer_size

    def get_clink(self, path: str) -> str:
        return path_to_clink(self.storage_key, path)

    def _path_from_clink(self, clink: str) -> str:
        path = clink_to_path(self.storage_key, clink)
        if not path:
            raise StorageKeyNotMatchError(f"cLink {clink!r} does not belong to storage {self.storage_key!r}")
        return path

    def store(self, file_path: str, path: str) -> str:
        internal_path = path_to_internal_path(self.root, path)
        try:
            copy_file(file_path, internal_path, self.buffer_size)
        except OSError as exc:
            raise StorageIOError(f"failed to store {path}: {exc}") from exc
        logger.info("Stored %s as %s", file_path, internal_path)
        return self.get_clink(internal_path_to_path(self.root, internal_path))

    def store_by_clink(self, file_path: str, clink: str) -> None:
        self.store(file_path, self._path_from_clink(clink))

    def get_url(self, clink: str, *options: object) -> str:
        path = clink_to_path(self.storage_key, clink)
        if not path:
            logger.debug("Storage key %r did not match cLink %r", self.storage_key, clink)
            return ""
        return end_slash(self.endpoint) + quote_path(trim_slashes(path))

    def remove(self, clink: str) -> None:
        path = self._path_from_clink(clink)
        internal_path = path_to_internal_path(self.root, path)
        try:
            os.remove(internal_path)
        except OSError as exc:
            raise StorageIOError(f"failed to remove {path}: {exc}") from exc
        logger.info("Removed %s", internal_path)


def copy_file(src: str, dst: str, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
    """Copy ``src`` over ``dst``, creating parent directories as needed."""
    source = Path(src)
    if not source.is_file():
        if not source.exists():
            raise FileNotFoundError(f"{src}: no such file")
        raise OSError(f"{src}: not a regular file")

    destination = Path(dst)
    destination.parent.mkdir(parents=True, exist_ok=True)
    with source.open("rb") as fsrc, destination.open("wb") as fdst:
        shutil.copyfileobj(fsrc, fdst, buffer_size)
    logger.debug("Copied %s to %s (%d bytes)", src, dst, destination.stat().st_size)

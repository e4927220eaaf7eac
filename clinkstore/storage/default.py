"""Process-wide registry for callers that do not pass one around.

The registry is built lazily from settings on first use. Prefer creating a
:class:`StorageRegistry` and injecting it; these wrappers exist for scripts
and small programs.
"""

from __future__ import annotations

import threading

from clinkstore.storage.base import Storage
from clinkstore.storage.factory import get_registry
from clinkstore.storage.registry import StorageRegistry

_default_registry: StorageRegistry | None = None
_default_registry_lock = threading.Lock()


def get_default_registry() -> StorageRegistry:
    global _default_registry
    if _default_registry is None:
        with _default_registry_lock:
            if _default_registry is None:
                _default_registry = get_registry()
    return _default_registry


def set_default_registry(registry: StorageRegistry | None) -> None:
    global _default_registry
    with _default_registry_lock:
        _default_registry = registry


def reset_default_registry() -> None:
    set_default_registry(None)


def add_storage(storage_key: str, storage: Storage | None) -> None:
    get_default_registry().add_storage(storage_key, storage)


def get_storage(storage_key: str) -> Storage:
    return get_default_registry().get_storage(storage_key)


def set_default_storage(storage_key: str) -> None:
    get_default_registry().set_default_storage(storage_key)


def create_clink_in_storage(file_path: str, path: str, storage_key: str) -> str:
    return get_default_registry().create_clink_in_storage(file_path, path, storage_key)


def create_clink(file_path: str, path: str) -> str:
    return get_default_registry().create_clink(file_path, path)


def prepare_clink_in_storage(path: str, storage_key: str) -> str:
    return get_default_registry().prepare_clink_in_storage(path, storage_key)


def prepare_clink(path: str) -> str:
    return get_default_registry().prepare_clink(path)


def get_url(clink: str, *options: object) -> str:
    return get_default_registry().get_url(clink, *options)


def delete(clink: str) -> None:
    get_default_registry().delete(clink)


def upload_by_clink(file_path: str, clink: str) -> None:
    get_default_registry().upload_by_clink(file_path, clink)

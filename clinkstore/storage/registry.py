from __future__ import annotations

import logging

from clinkstore.storage.base import Storage
from clinkstore.storage.clink import is_valid_storage_key, split_clink
from clinkstore.storage.errors import (
    CLinkError,
    InvalidStorageKeyError,
    NoDefaultStorageError,
    StorageKeyEmptyError,
    StorageNilError,
    StorageNotFoundError,
)

logger = logging.getLogger(__name__)


def normalize_key(storage_key: str) -> str:
    return storage_key.lower()


class StorageRegistry:
    """Maps storage keys to backends and routes cLinks to the right one.

    Register every backend and pick the default before serving requests:
    the registry does no locking, so concurrent ``add_storage`` or
    ``set_default_storage`` calls during live traffic are unsupported.
    """

    def __init__(self) -> None:
        self._storages: dict[str, Storage] = {}
        self._default_key: str | None = None

    @property
    def default_key(self) -> str | None:
        return self._default_key

    @property
    def storages(self) -> dict[str, Storage]:
        return dict(self._storages)

    def keys(self) -> list[str]:
        return sorted(self._storages)

    def add_storage(self, storage_key: str, storage: Storage | None) -> None:
        """Register ``storage`` under ``storage_key``, replacing any previous one."""
        if not storage_key:
            raise StorageKeyEmptyError()
        if storage is None:
            raise StorageNilError()
        if not is_valid_storage_key(storage_key):
            raise InvalidStorageKeyError(f"Invalid storage key: {storage_key!r}")

        key = normalize_key(storage_key)
        if key in self._storages:
            logger.debug("Replacing storage %s", key)
        self._storages[key] = storage
        logger.debug("Registered storage %s (%s)", key, type(storage).__name__)

    def get_storage(self, storage_key: str) -> Storage:
        try:
            return self._storages[normalize_key(storage_key)]
        except KeyError:
            raise StorageNotFoundError(f"Storage not found: {storage_key!r}") from None

    def _get_storage_by_clink(self, clink: str) -> Storage:
        scheme, _ = split_clink(clink)
        return self.get_storage(scheme)

    def set_default_storage(self, storage_key: str) -> None:
        key = normalize_key(storage_key)
        if key not in self._storages:
            raise StorageNotFoundError(f"Storage not found: {storage_key!r}")
        self._default_key = key
        logger.info("Default storage set to %s", key)

    def _require_default(self) -> str:
        if self._default_key is None:
            raise NoDefaultStorageError()
        return self._default_key

    def create_clink_in_storage(self, file_path: str, path: str, storage_key: str) -> str:
        """Store the file in the storage registered as ``storage_key``."""
        return self.get_storage(storage_key).store(file_path, path)

    def create_clink(self, file_path: str, path: str) -> str:
        """Store the file in the default storage."""
        return self.create_clink_in_storage(file_path, path, self._require_default())

    def prepare_clink_in_storage(self, path: str, storage_key: str) -> str:
        """Predict the cLink for ``path`` without storing anything."""
        return self.get_storage(storage_key).get_clink(path)

    def prepare_clink(self, path: str) -> str:
        return self.prepare_clink_in_storage(path, self._require_default())

    def get_url(self, clink: str, *options: object) -> str:
        """Resolve ``clink`` to a URL.

        Never raises: an unknown scheme or a malformed cLink yields ``""``,
        the same value backends return on their own failures. Callers must
        treat it as "no URL available".
        """
        try:
            storage = self._get_storage_by_clink(clink)
        except (CLinkError, StorageNotFoundError) as exc:
            logger.debug("No storage for cLink %r: %s", clink, exc)
            return ""
        return storage.get_url(clink, *options)

    def delete(self, clink: str) -> None:
        self._get_storage_by_clink(clink).remove(clink)

    def upload_by_clink(self, file_path: str, clink: str) -> None:
        """Store the file at the location an existing cLink refers to."""
        try:
            storage = self._get_storage_by_clink(clink)
        except (CLinkError, StorageNotFoundError) as exc:
            raise type(exc)(f"failed to get storage by cLink {clink!r}: {exc}") from exc
        storage.store_by_clink(file_path, clink)

    def get_path_by_clink(self, clink: str) -> str:
        """Return the backend part of ``clink`` (everything after the scheme)."""
        _, rest = split_clink(clink)
        return rest

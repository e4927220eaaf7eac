from __future__ import annotations


class StorageError(Exception):
    """Base class for every error raised by the storage layer."""

    default_message = "Storage error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class StorageKeyEmptyError(StorageError, ValueError):
    default_message = "Storage key is empty"


class StorageNilError(StorageError, ValueError):
    default_message = "Storage is None"


class InvalidStorageKeyError(StorageError, ValueError):
    default_message = "Storage key must not contain ':', '/' or control characters"


class StorageNotFoundError(StorageError, LookupError):
    default_message = "Storage not found"


class NoDefaultStorageError(StorageError, LookupError):
    default_message = "Default storage not specified"


class CLinkError(StorageError, ValueError):
    default_message = "CLink error"


class StorageKeyNotMatchError(CLinkError):
    default_message = "Storage key did not match"


class MethodNotImplementedError(StorageError, NotImplementedError):
    default_message = "Method is not implemented"


class StorageIOError(StorageError):
    default_message = "Storage I/O failed"

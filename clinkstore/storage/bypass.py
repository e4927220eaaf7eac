from clinkstore.storage.base import Storage
from clinkstore.storage.errors import MethodNotImplementedError


class BypassStorage(Storage):
    """Pass-through backend for cLinks that already are absolute URLs.

    Registered under ``http`` and ``https`` so an external URL can be kept
    wherever a cLink is expected.
    """

    def store(self, file_path: str, path: str) -> str:
        raise MethodNotImplementedError()

    def store_by_clink(self, file_path: str, clink: str) -> None:
        raise MethodNotImplementedError()

    def get_clink(self, path: str) -> str:
        return path

    def get_url(self, clink: str, *options: object) -> str:
        return clink

    def remove(self, clink: str) -> None:
        raise MethodNotImplementedError()

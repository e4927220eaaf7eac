from abc import ABC, abstractmethod


class Storage(ABC):
    """Operations every storage backend provides.

    ``get_url`` reports failure by returning an empty string; every other
    operation raises a :class:`~clinkstore.storage.errors.StorageError`.
    """

    @abstractmethod
    def store(self, file_path: str, path: str) -> str:
        """Copy the local file at ``file_path`` to ``path`` and return its cLink."""
        ...

    @abstractmethod
    def store_by_clink(self, file_path: str, clink: str) -> None:
        """Copy the local file to the location ``clink`` refers to."""
        ...

    @abstractmethod
    def get_clink(self, path: str) -> str:
        """Return the cLink ``store`` would produce for ``path``, without storing."""
        ...

    @abstractmethod
    def get_url(self, clink: str, *options: object) -> str:
        """Return a retrieval URL for ``clink``, or ``""`` when unavailable."""
        ...

    @abstractmethod
    def remove(self, clink: str) -> None: ...

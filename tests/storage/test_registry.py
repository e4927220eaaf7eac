from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from clinkstore.storage.base import Storage
from clinkstore.storage.bypass import BypassStorage
from clinkstore.storage.errors import (
    CLinkError,
    InvalidStorageKeyError,
    MethodNotImplementedError,
    NoDefaultStorageError,
    StorageKeyEmptyError,
    StorageNilError,
    StorageNotFoundError,
)
from clinkstore.storage.local import LocalStorage
from clinkstore.storage.options import ExpiresIn, LinkIntent
from clinkstore.storage.registry import StorageRegistry


class TestAddStorage:
    def setup_method(self):
        self.registry = StorageRegistry()

    def test_empty_key(self):
        with pytest.raises(StorageKeyEmptyError):
            self.registry.add_storage("", MagicMock(spec=Storage))

    def test_none_storage(self):
        with pytest.raises(StorageNilError):
            self.registry.add_storage("s3", None)

    def test_key_with_colon(self):
        with pytest.raises(InvalidStorageKeyError):
            self.registry.add_storage("s3:x", MagicMock(spec=Storage))

    @pytest.mark.parametrize("key", ["folder/s3", "s3\n"])
    def test_key_that_cannot_be_routed(self, key):
        with pytest.raises(InvalidStorageKeyError):
            self.registry.add_storage(key, MagicMock(spec=Storage))

    def test_last_writer_wins(self):
        first, second = MagicMock(spec=Storage), MagicMock(spec=Storage)
        self.registry.add_storage("s3", first)
        self.registry.add_storage("s3", second)
        assert self.registry.get_storage("s3") is second

    def test_key_is_case_normalized(self):
        storage = MagicMock(spec=Storage)
        self.registry.add_storage("LocalFile", storage)
        assert self.registry.keys() == ["localfile"]
        assert self.registry.get_storage("LOCALFILE") is storage

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            self.registry.add_storage("", None)


class TestGetStorage:
    def test_not_found(self):
        with pytest.raises(StorageNotFoundError):
            StorageRegistry().get_storage("missing")

    def test_not_found_is_lookup_error(self):
        with pytest.raises(LookupError):
            StorageRegistry().get_storage("missing")

    def test_storages_returns_copy(self, mock_storage):
        registry = StorageRegistry()
        registry.add_storage("a", mock_storage())
        registry.storages.clear()
        assert registry.keys() == ["a"]


class TestDefaultStorage:
    def setup_method(self):
        self.registry = StorageRegistry()
        self.storage = MagicMock(spec=Storage)
        self.storage.store.return_value = "local:folder/file.jpg"
        self.storage.get_clink.return_value = "local:folder/file.jpg"
        self.registry.add_storage("local", self.storage)

    def test_unregistered_default(self):
        with pytest.raises(StorageNotFoundError):
            self.registry.set_default_storage("s3")
        assert self.registry.default_key is None

    def test_create_clink_without_default(self):
        with pytest.raises(NoDefaultStorageError):
            self.registry.create_clink("/tmp/file.jpg", "folder/file.jpg")
        self.storage.store.assert_not_called()

    def test_prepare_clink_without_default(self):
        with pytest.raises(NoDefaultStorageError):
            self.registry.prepare_clink("folder/file.jpg")

    def test_create_clink_uses_default(self):
        self.registry.set_default_storage("Local")
        clink = self.registry.create_clink("/tmp/file.jpg", "/folder/file.jpg")
        self.storage.store.assert_called_once_with("/tmp/file.jpg", "/folder/file.jpg")
        assert clink == "local:folder/file.jpg"
        assert self.registry.default_key == "local"

    def test_prepare_clink_does_not_store(self):
        self.registry.set_default_storage("local")
        assert self.registry.prepare_clink("/folder/file.jpg") == "local:folder/file.jpg"
        self.storage.get_clink.assert_called_once_with("/folder/file.jpg")
        self.storage.store.assert_not_called()


class TestExplicitStorage:
    def setup_method(self):
        self.registry = StorageRegistry()
        self.storage = MagicMock(spec=Storage)
        self.registry.add_storage("s3", self.storage)

    def test_create_clink_in_storage(self):
        self.storage.store.return_value = "s3:a.jpg"
        assert self.registry.create_clink_in_storage("/tmp/a.jpg", "a.jpg", "s3") == "s3:a.jpg"

    def test_create_clink_in_unknown_storage(self):
        with pytest.raises(StorageNotFoundError):
            self.registry.create_clink_in_storage("/tmp/a.jpg", "a.jpg", "gcs")

    def test_prepare_clink_in_storage(self):
        self.storage.get_clink.return_value = "s3:a.jpg"
        assert self.registry.prepare_clink_in_storage("a.jpg", "s3") == "s3:a.jpg"

    def test_store_errors_propagate(self):
        self.storage.store.side_effect = MethodNotImplementedError()
        with pytest.raises(MethodNotImplementedError):
            self.registry.create_clink_in_storage("/tmp/a.jpg", "a.jpg", "s3")


class TestDispatch:
    def setup_method(self):
        self.registry = StorageRegistry()
        self.s3 = MagicMock(spec=Storage)
        self.s3.get_url.return_value = "https://bucket.s3.amazonaws.com/a/b.jpg"
        self.local = MagicMock(spec=Storage)
        self.local.get_url.return_value = "http://host/files/a/b.jpg"
        self.registry.add_storage("s3", self.s3)
        self.registry.add_storage("local", self.local)

    def test_get_url_routes_by_scheme(self):
        assert self.registry.get_url("s3:a/b.jpg") == "https://bucket.s3.amazonaws.com/a/b.jpg"
        self.s3.get_url.assert_called_once_with("s3:a/b.jpg")
        self.local.get_url.assert_not_called()

    def test_get_url_passes_options(self):
        expiration = ExpiresIn(timedelta(minutes=5))
        self.registry.get_url("s3:a/b.jpg", LinkIntent.UPLOAD, expiration)
        self.s3.get_url.assert_called_once_with("s3:a/b.jpg", LinkIntent.UPLOAD, expiration)

    def test_get_url_scheme_is_case_insensitive(self):
        self.registry.get_url("S3:a/b.jpg")
        self.s3.get_url.assert_called_once_with("S3:a/b.jpg")

    def test_delete_routes_by_scheme(self):
        self.registry.delete("s3:a/b.jpg")
        self.s3.remove.assert_called_once_with("s3:a/b.jpg")
        self.local.remove.assert_not_called()

    def test_path_with_other_key_is_not_misrouted(self):
        self.registry.delete("s3:backup/local:b.jpg")
        self.s3.remove.assert_called_once_with("s3:backup/local:b.jpg")
        self.local.remove.assert_not_called()

    def test_get_url_unknown_scheme_returns_empty(self):
        assert self.registry.get_url("gcs:a/b.jpg") == ""

    @pytest.mark.parametrize("clink", ["", "a/b.jpg", ":a/b.jpg", "a/b:c.jpg"])
    def test_get_url_malformed_returns_empty(self, clink):
        assert self.registry.get_url(clink) == ""
        self.s3.get_url.assert_not_called()
        self.local.get_url.assert_not_called()

    def test_delete_unknown_scheme_raises(self):
        with pytest.raises(StorageNotFoundError):
            self.registry.delete("gcs:a/b.jpg")

    def test_delete_malformed_raises(self):
        with pytest.raises(CLinkError):
            self.registry.delete("a/b.jpg")

    def test_delete_propagates_backend_error(self):
        self.s3.remove.side_effect = MethodNotImplementedError()
        with pytest.raises(MethodNotImplementedError):
            self.registry.delete("s3:a/b.jpg")

    def test_upload_by_clink(self):
        self.registry.upload_by_clink("/tmp/b.jpg", "local:a/b.jpg")
        self.local.store_by_clink.assert_called_once_with("/tmp/b.jpg", "local:a/b.jpg")
        self.s3.store_by_clink.assert_not_called()

    def test_upload_by_clink_wraps_lookup_error(self):
        with pytest.raises(StorageNotFoundError, match="failed to get storage by cLink") as exc_info:
            self.registry.upload_by_clink("/tmp/b.jpg", "gcs:a/b.jpg")
        assert isinstance(exc_info.value.__cause__, StorageNotFoundError)

    def test_upload_by_clink_wraps_parse_error(self):
        with pytest.raises(CLinkError, match="failed to get storage by cLink") as exc_info:
            self.registry.upload_by_clink("/tmp/b.jpg", "not a clink")
        assert isinstance(exc_info.value.__cause__, CLinkError)

    def test_get_path_by_clink(self):
        assert self.registry.get_path_by_clink("s3:a:b/c.jpg") == "a:b/c.jpg"


class TestBypassRegistration:
    def setup_method(self):
        self.registry = StorageRegistry()
        self.registry.add_storage("http", BypassStorage())
        self.registry.add_storage("https", BypassStorage())

    def test_url_passes_through(self):
        assert self.registry.get_url("http://example.com/x.png") == "http://example.com/x.png"
        assert self.registry.get_url("https://example.com/x.png") == "https://example.com/x.png"

    def test_delete_not_implemented(self):
        with pytest.raises(MethodNotImplementedError):
            self.registry.delete("http://example.com/x.png")

    def test_upload_not_implemented(self):
        with pytest.raises(MethodNotImplementedError):
            self.registry.upload_by_clink("/tmp/x.png", "https://example.com/x.png")


class TestNonSchemeKeys:
    @pytest.mark.parametrize("key", ["local_files", "1drive", "my files"])
    def test_store_resolve_delete(self, tmp_path, source_file, key):
        registry = StorageRegistry()
        storage = LocalStorage(storage_key=key, endpoint="http://host/files", root=str(tmp_path / "root"))
        registry.add_storage(key, storage)

        clink = registry.create_clink_in_storage(str(source_file), "a.txt", key)
        assert clink == f"{key}:a.txt"
        assert registry.get_url(clink) == "http://host/files/a.txt"
        assert (tmp_path / "root" / "a.txt").exists()

        registry.delete(clink)
        assert not (tmp_path / "root" / "a.txt").exists()

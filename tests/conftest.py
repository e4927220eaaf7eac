"""Root conftest: shared storage fixtures."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from clinkstore.storage.base import Storage


@pytest.fixture(scope="session")
def rsa_private_key_pem() -> str:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


def _mock_storage(**overrides) -> MagicMock:
    storage = MagicMock(spec=Storage)
    for name, value in overrides.items():
        getattr(storage, name).return_value = value
    return storage


@pytest.fixture()
def mock_storage():
    return _mock_storage


@pytest.fixture()
def source_file(tmp_path):
    path = tmp_path / "source.txt"
    path.write_bytes(b"hello\nclink\n")
    return path

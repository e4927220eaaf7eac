from __future__ import annotations

import logging
from datetime import datetime

from botocore.exceptions import BotoCoreError
from botocore.signers import CloudFrontSigner
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from clinkstore.storage.base import Storage
from clinkstore.storage.clink import check_storage_key, clink_to_path, path_to_internal_path, quote_path
from clinkstore.storage.errors import StorageKeyNotMatchError
from clinkstore.storage.options import find_expiration

logger = logging.getLogger(__name__)


class CloudFrontStorage(Storage):
    """CDN-fronted storage.

    Files are written and removed through ``storage_ctl`` (usually an
    :class:`~clinkstore.storage.s3.S3Storage` with the same key); URLs point
    at the distribution domain. With ``sign_urls`` every URL is signed with
    the distribution key pair and needs an expiration option; without one,
    or when signing fails, ``get_url`` returns ``""`` rather than an
    unsigned URL.
    """

    def __init__(
        self,
        storage_key: str,
        domain_name: str,
        storage_ctl: Storage,
        cf_prefix: str = "",
        no_ssl: bool = False,
        sign_urls: bool = False,
        private_key_id: str = "",
        private_key: str = "",
    ) -> None:
        self.storage_key = storage_key
        self.domain_name = domain_name
        self.storage_ctl = storage_ctl
        self.cf_prefix = cf_prefix.strip("/")
        self.scheme = "http" if no_ssl else "https"
        self.sign_urls = sign_urls
        self.private_key_id = private_key_id
        self.private_key = private_key

    def get_clink(self, path: str) -> str:
        return self.storage_ctl.get_clink(path)

    def store(self, file_path: str, path: str) -> str:
        return self.storage_ctl.store(file_path, path)

    def store_by_clink(self, file_path: str, clink: str) -> None:
        path = clink_to_path(self.storage_key, clink)
        if not path:
            raise StorageKeyNotMatchError(f"cLink {clink!r} does not belong to storage {self.storage_key!r}")
        self.store(file_path, path)

    def remove(self, clink: str) -> None:
        self.storage_ctl.remove(clink)

    def compose_url(self, clink: str) -> str:
        """Build the unsigned distribution URL for ``clink``, or ``""``."""
        if not check_storage_key(clink, self.storage_key):
            return ""
        path = path_to_internal_path(self.cf_prefix, clink_to_path(self.storage_key, clink))
        return f"{self.scheme}://{self.domain_name}/{quote_path(path)}"

    def get_url(self, clink: str, *options: object) -> str:
        url = self.compose_url(clink)
        if not url:
            logger.debug("Storage key %r did not match cLink %r", self.storage_key, clink)
            return ""

        if not self.sign_urls:
            return url

        expires_at = find_expiration(url, options)
        if expires_at is None:
            logger.debug("No expiration option for signed URL of %r", clink)
            return ""
        return self.sign(url, expires_at)

    def sign(self, url: str, expires_at: datetime) -> str:
        """Sign ``url`` with a canned policy, returning ``""`` on any failure."""
        key = load_private_key(self.private_key)
        if key is None:
            logger.warning("Cannot sign URL for storage %s: invalid private key", self.storage_key)
            return ""

        signer = CloudFrontSigner(self.private_key_id, rsa_signer(key))
        try:
            return signer.generate_presigned_url(url, date_less_than=expires_at)
        except (BotoCoreError, ValueError, TypeError) as exc:
            logger.warning("Failed to sign URL for storage %s: %s", self.storage_key, exc)
            return ""


def load_private_key(pem: str) -> rsa.RSAPrivateKey | None:
    """Load an RSA private key from PEM text, or ``None`` when it is unusable."""
    if not pem:
        return None
    data = pem.replace("\\n", "\n").encode()
    try:
        key = serialization.load_pem_private_key(data, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        logger.debug("Failed to load private key: %s", exc)
        return None
    if not isinstance(key, rsa.RSAPrivateKey):
        return None
    return key


def rsa_signer(key: rsa.RSAPrivateKey):
    def sign(message: bytes) -> bytes:
        # CloudFront only accepts SHA-1 RSA signatures.
        return key.sign(message, padding.PKCS1v15(), hashes.SHA1())

    return sign

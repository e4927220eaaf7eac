from __future__ import annotations

import logging
import mimetypes

import boto3
from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError

from clinkstore.storage.base import Storage
from clinkstore.storage.clink import clink_to_path, path_to_clink, path_to_internal_path, quote_path
from clinkstore.storage.errors import StorageIOError, StorageKeyNotMatchError
from clinkstore.storage.options import LinkIntent, find_expiration, find_link_intent, seconds_until

logger = logging.getLogger(__name__)

S3_HOST_TEMPLATE = "{bucket}.s3.amazonaws.com"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class S3Storage(Storage):
    """Object storage backend for AWS S3 and S3-compatible services.

    ``get_url`` returns the plain object URL unless a :class:`LinkIntent`
    asks for a presigned download or upload link. An expiration option, if
    given, sets the lifetime of presigned links.
    """

    default_intent = LinkIntent.PUBLIC
    check_exists = False

    def __init__(
        self,
        storage_key: str,
        bucket: str,
        region: str = "",
        access_key_id: str = "",
        secret_access_key: str = "",
        prefix: str = "",
        no_ssl: bool = False,
        endpoint_url: str = "",
        presigned_expiry: int = 604800,  # 7 days in seconds
        upload_expiry: int = 1800,
    ) -> None:
        self.storage_key = storage_key
        self.bucket = bucket
        self.prefix = prefix
        self.scheme = "http" if no_ssl else "https"
        self.endpoint_url = endpoint_url
        self.presigned_expiry = presigned_expiry
        self.upload_expiry = upload_expiry

        client_kwargs: dict = {"service_name": "s3"}
        if region:
            client_kwargs["region_name"] = region
        if access_key_id:
            client_kwargs["aws_access_key_id"] = access_key_id
        if secret_access_key:
            client_kwargs["aws_secret_access_key"] = secret_access_key
        if endpoint_url:
            client_kwargs["endpoint_url"] = endpoint_url

        self.client = boto3.client(**client_kwargs)

    def get_clink(self, path: str) -> str:
        return path_to_clink(self.storage_key, path)

    def _internal_path(self, path: str) -> str:
        return path_to_internal_path(self.prefix, path)

    def _path_from_clink(self, clink: str) -> str:
        path = clink_to_path(self.storage_key, clink)
        if not path:
            raise StorageKeyNotMatchError(f"cLink {clink!r} does not belong to storage {self.storage_key!r}")
        return path

    def store(self, file_path: str, path: str) -> str:
        self._upload(file_path, path)
        return self.get_clink(path)

    def store_by_clink(self, file_path: str, clink: str) -> None:
        self._upload(file_path, self._path_from_clink(clink))

    def _upload(self, file_path: str, path: str) -> None:
        key = self._internal_path(path)
        content_type = guess_content_type(file_path, path)
        try:
            self.client.upload_file(file_path, self.bucket, key, ExtraArgs={"ContentType": content_type})
        except (Boto3Error, BotoCoreError, ClientError, OSError) as exc:
            raise StorageIOError(f"failed to store {path}: {exc}") from exc
        logger.info("Uploaded %s to s3://%s/%s", file_path, self.bucket, key)

    def remove(self, clink: str) -> None:
        path = self._path_from_clink(clink)
        key = self._internal_path(path)
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise StorageIOError(f"failed to remove {path}: {exc}") from exc
        logger.info("Removed s3://%s/%s", self.bucket, key)

    def public_url(self, key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{quote_path(key)}"
        host = S3_HOST_TEMPLATE.format(bucket=self.bucket)
        return f"{self.scheme}://{host}/{quote_path(key)}"

    def get_url(self, clink: str, *options: object) -> str:
        path = clink_to_path(self.storage_key, clink)
        if not path:
            logger.debug("Storage key %r did not match cLink %r", self.storage_key, clink)
            return ""
        key = self._internal_path(path)

        intent = find_link_intent(options) or self.default_intent
        if intent is LinkIntent.PUBLIC:
            return self.public_url(key)

        if intent is LinkIntent.UPLOAD:
            method, expires_in = "put_object", self.upload_expiry
        else:
            if self.check_exists and not self.object_exists(key):
                return ""
            method, expires_in = "get_object", self.presigned_expiry

        expires_at = find_expiration(self.public_url(key), options)
        if expires_at is not None:
            expires_in = seconds_until(expires_at)
        return self._presign(method, key, expires_in)

    def object_exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            logger.debug("Object %s not found in %s: %s", key, self.bucket, exc)
            return False
        except BotoCoreError as exc:
            logger.warning("Failed to check %s in %s: %s", key, self.bucket, exc)
            return False
        return True

    def _presign(self, method: str, key: str, expires_in: int) -> str:
        try:
            url = self.client.generate_presigned_url(
                method,
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.warning("Failed to presign %s for %s: %s", method, key, exc)
            return ""
        logger.debug("Generated presigned %s URL for %s", method, key)
        return url


def guess_content_type(*names: str) -> str:
    for name in names:
        content_type, _ = mimetypes.guess_type(name)
        if content_type:
            return content_type
    return DEFAULT_CONTENT_TYPE

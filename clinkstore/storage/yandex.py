from __future__ import annotations

from clinkstore.storage.options import LinkIntent
from clinkstore.storage.s3 import S3Storage

YANDEX_HOST = "storage.yandexcloud.net"
YANDEX_REGION = "ru-central1"

GET_OBJECT_LINK_LIFETIME = 24 * 60 * 60
PUT_OBJECT_LINK_LIFETIME = 30 * 60


class YandexStorage(S3Storage):
    """Yandex Object Storage, reached through its S3-compatible API.

    Unlike plain S3, ``get_url`` hands out presigned download links by
    default, and only for objects that exist. Pass ``LinkIntent.PUBLIC``
    for the bucket URL or ``LinkIntent.UPLOAD`` for a presigned PUT.
    """

    default_intent = LinkIntent.DOWNLOAD
    check_exists = True

    def __init__(
        self,
        storage_key: str,
        bucket: str,
        region: str = "",
        access_key_id: str = "",
        secret_access_key: str = "",
        prefix: str = "",
        no_ssl: bool = False,
    ) -> None:
        scheme = "http" if no_ssl else "https"
        super().__init__(
            storage_key=storage_key,
            bucket=bucket,
            region=region or YANDEX_REGION,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            prefix=prefix,
            no_ssl=no_ssl,
            endpoint_url=f"{scheme}://{YANDEX_HOST}",
            presigned_expiry=GET_OBJECT_LINK_LIFETIME,
            upload_expiry=PUT_OBJECT_LINK_LIFETIME,
        )

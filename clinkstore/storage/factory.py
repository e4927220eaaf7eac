from __future__ import annotations

import logging

from clinkstore.models.config import StorageConfig, StoragesConfig
from clinkstore.settings import settings
from clinkstore.storage.base import Storage
from clinkstore.storage.bypass import BypassStorage
from clinkstore.storage.errors import StorageError
from clinkstore.storage.registry import StorageRegistry

logger = logging.getLogger(__name__)

TYPE_BYPASS = "bypass"
TYPE_LOCAL = "local"
TYPE_S3 = "s3"
TYPE_CLOUDFRONT = "cf"
TYPE_CLOUDFRONT_SIGNED = "cfs"
TYPE_YOS = "yos"

BYPASS_SCHEMES = ("http", "https")


def _int_setting(instance: StorageConfig, name: str, default: int) -> int:
    value = instance.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise StorageError(f"{name} must be an integer, got {value!r}") from None


def _build_s3(instance: StorageConfig):
    from clinkstore.storage.s3 import S3Storage

    return S3Storage(
        storage_key=instance.key,
        bucket=instance.get("bucket_name"),
        region=instance.get("region"),
        access_key_id=instance.get("access_key_id"),
        secret_access_key=instance.get("secret_access_key"),
        prefix=instance.get("prefix"),
        no_ssl=instance.get_flag("no_ssl"),
        endpoint_url=instance.get("endpoint_url"),
    )


def _build_cloudfront(instance: StorageConfig, signed: bool):
    from clinkstore.storage.cloudfront import CloudFrontStorage

    return CloudFrontStorage(
        storage_key=instance.key,
        domain_name=instance.get("domain_name"),
        cf_prefix=instance.get("cf_prefix"),
        no_ssl=instance.get_flag("no_ssl"),
        sign_urls=signed,
        private_key_id=instance.get("private_key_id") if signed else "",
        private_key=instance.get("private_key") if signed else "",
        storage_ctl=_build_s3(instance),
    )


def build_storage(instance: StorageConfig) -> Storage | None:
    """Build the backend described by ``instance``, or ``None`` for an unknown type."""
    if instance.type == TYPE_BYPASS:
        return BypassStorage()

    if instance.type == TYPE_LOCAL:
        from clinkstore.storage.local import DEFAULT_BUFFER_SIZE, LocalStorage

        return LocalStorage(
            storage_key=instance.key,
            endpoint=instance.get("endpoint"),
            root=instance.get("root"),
            buffer_size=_int_setting(instance, "buffer_size", DEFAULT_BUFFER_SIZE),
        )

    if instance.type == TYPE_S3:
        return _build_s3(instance)

    if instance.type == TYPE_CLOUDFRONT:
        return _build_cloudfront(instance, signed=False)

    if instance.type == TYPE_CLOUDFRONT_SIGNED:
        return _build_cloudfront(instance, signed=True)

    if instance.type == TYPE_YOS:
        from clinkstore.storage.yandex import YandexStorage

        return YandexStorage(
            storage_key=instance.key,
            bucket=instance.get("bucket_name"),
            region=instance.get("region"),
            access_key_id=instance.get("access_key_id"),
            secret_access_key=instance.get("secret_access_key"),
            prefix=instance.get("prefix"),
            no_ssl=instance.get_flag("no_ssl"),
        )

    return None


def new_with_config(config: StoragesConfig | None = None) -> StorageRegistry:
    """Build a registry from configuration.

    ``http`` and ``https`` are always registered with a pass-through backend
    so plain URLs work as cLinks. Unknown backend types are skipped.
    """
    registry = StorageRegistry()
    for scheme in BYPASS_SCHEMES:
        registry.add_storage(scheme, BypassStorage())

    if config is None:
        return registry

    for instance in config.instances:
        try:
            storage = build_storage(instance)
        except StorageError as exc:
            logger.error("Cannot build storage %r: %s", instance.key, exc)
            continue
        if storage is None:
            logger.warning("Storage type %r not supported, skipping %s", instance.type, instance.key)
            continue
        try:
            registry.add_storage(instance.key, storage)
        except StorageError as exc:
            logger.error("Cannot register storage %r: %s", instance.key, exc)
            continue
        logger.info("Using storage %s: %s", instance.key, instance.type)

    if config.default:
        try:
            registry.set_default_storage(config.default)
        except StorageError as exc:
            logger.error("Cannot use %r as default storage: %s", config.default, exc)

    return registry


def get_registry() -> StorageRegistry:
    return new_with_config(settings.get_storages_config())

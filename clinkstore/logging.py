import logging
import sys

from clinkstore.settings import settings

TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

NOISY_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3")


def build_formatter(json_output: bool) -> logging.Formatter:
    if not json_output:
        return logging.Formatter(TEXT_FORMAT)

    from pythonjsonlogger.json import JsonFormatter

    return JsonFormatter(fmt=JSON_FORMAT, rename_fields={"asctime": "timestamp", "levelname": "level"})


def configure_logging() -> None:
    """Send every clinkstore log record to stderr, as text or JSON.

    Call once at startup, before building the storage registry, so backend
    registration is logged too.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(build_formatter(settings.log_json))

    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)

    # Uploads and presigns stay visible; per-request SDK chatter does not.
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

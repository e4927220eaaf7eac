"""Options accepted by ``Storage.get_url``.

Callers may pass any values; a backend picks out the ones it understands and
ignores the rest.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterable, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ExpirationProvider(Protocol):
    def get_access_expire_time(self, url: str) -> datetime:
        """Return the instant after which ``url`` must stop working."""
        ...


class LinkIntent(str, Enum):
    PUBLIC = "public"
    DOWNLOAD = "download"
    UPLOAD = "upload"


@dataclass(frozen=True)
class ExpiresIn:
    ttl: timedelta

    def get_access_expire_time(self, url: str) -> datetime:
        return datetime.now(timezone.utc) + self.ttl


@dataclass(frozen=True)
class ExpiresAt:
    moment: datetime

    def get_access_expire_time(self, url: str) -> datetime:
        if self.moment.tzinfo is None:
            return self.moment.replace(tzinfo=timezone.utc)
        return self.moment


def find_expiration(url: str, options: Iterable[object]) -> datetime | None:
    """Ask the first expiration-capable option for the expiry of ``url``.

    A provider that does not answer with a ``datetime`` counts as no expiration.
    """
    for option in options:
        if isinstance(option, ExpirationProvider):
            moment = option.get_access_expire_time(url)
            if not isinstance(moment, datetime):
                logger.warning("Ignoring expiration %r from %s: not a datetime", moment, type(option).__name__)
                return None
            return moment
    return None


def find_link_intent(options: Iterable[object]) -> LinkIntent | None:
    for option in options:
        if isinstance(option, LinkIntent):
            return option
    return None


def seconds_until(moment: datetime, minimum: int = 1) -> int:
    """Whole seconds from now until ``moment``, never below ``minimum``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    delta = moment - datetime.now(timezone.utc)
    return max(int(delta.total_seconds()), minimum)

"""Conversions between logical paths, internal paths and content links.

Glossary:
    path - the name under which the caller wants to keep the file
    internal path - the path inside the backend (configured prefix + path)
    cLink - storage key + ':' + path
"""

from __future__ import annotations

import re
from urllib.parse import quote

from clinkstore.storage.errors import CLinkError

SEPARATOR = "/"

CLINK_SEPARATOR = ":"

_REPEATED_SLASHES = re.compile(r"/{2,}")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

# Sub-delims kept literal in URL paths; everything else outside the
# unreserved set is percent-encoded.
URL_PATH_SAFE = "/$&+,:;=@"


def trim_slashes(path: str) -> str:
    """Collapse repeated slashes and drop leading/trailing ones."""
    return _REPEATED_SLASHES.sub(SEPARATOR, path).strip(SEPARATOR)


def end_slash(s: str) -> str:
    """Return ``s`` ending with exactly one slash."""
    return s.rstrip(SEPARATOR) + SEPARATOR


def _normalized_prefix(prefix: str) -> str:
    # An empty prefix stays empty so object keys never start with "/".
    if not prefix:
        return ""
    return end_slash(prefix)


def path_to_internal_path(prefix: str, path: str) -> str:
    """path -> internal path.

    For the backward conversion use :func:`internal_path_to_path`.
    """
    return _normalized_prefix(prefix) + trim_slashes(path)


def internal_path_to_path(prefix: str, internal_path: str) -> str:
    """internal path -> path.

    Returns an empty string when ``internal_path`` was not built with ``prefix``.
    """
    normalized = _normalized_prefix(prefix)
    if not internal_path.startswith(normalized):
        return ""
    return internal_path[len(normalized):]


def path_to_clink(storage_key: str, path: str) -> str:
    """path -> cLink.

    For the backward conversion use :func:`clink_to_path`.
    """
    return f"{storage_key}:{trim_slashes(path)}"


def clink_to_path(storage_key: str, clink: str) -> str:
    """cLink -> path, or an empty string when the key does not match."""
    if not check_storage_key(clink, storage_key):
        return ""
    return clink[len(storage_key) + 1:]


def check_storage_key(clink: str, storage_key: str) -> bool:
    """Check that ``storage_key`` is the leading scheme of ``clink``."""
    return bool(storage_key) and clink.startswith(storage_key + CLINK_SEPARATOR)


def is_valid_storage_key(storage_key: str) -> bool:
    """Check that cLinks built with ``storage_key`` split back to it."""
    return bool(storage_key) and not (
        CLINK_SEPARATOR in storage_key or SEPARATOR in storage_key or _CONTROL_CHARS.search(storage_key)
    )


def split_clink(clink: str) -> tuple[str, str]:
    """Split a cLink into ``(scheme, rest)`` at the first ``:``.

    Raises :class:`CLinkError` when there is no separator, the scheme is
    empty or contains ``/``, or the cLink contains control characters.
    """
    if _CONTROL_CHARS.search(clink):
        raise CLinkError(f"CLink contains control characters: {clink!r}")
    scheme, sep, rest = clink.partition(CLINK_SEPARATOR)
    if not sep or not scheme or SEPARATOR in scheme:
        raise CLinkError(f"CLink has no scheme: {clink!r}")
    return scheme, rest


def quote_path(path: str) -> str:
    """Percent-encode a path for use inside a URL (a space becomes ``%20``)."""
    return quote(path, safe=URL_PATH_SAFE)

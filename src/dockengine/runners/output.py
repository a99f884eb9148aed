"""Sanitization of output captured from exec sessions.

Exec sessions run with a TTY, so the remote shell may interleave control
sequences with the command's output. Only printable ASCII and line breaks
are kept.
"""

from __future__ import annotations

import codecs
import logging
import re
from collections.abc import Iterable

from dockengine.core.constants import DEFAULT_CHARSET

logger = logging.getLogger(__name__)

_DISALLOWED = re.compile(r"[^\x20-\x7E\n\r]")


def _decode(raw: bytes | str | Iterable[bytes], charset: str) -> str:
    if isinstance(raw, str):
        return raw
    if not isinstance(raw, (bytes, bytearray)):
        raw = b"".join(raw)

    try:
        codecs.lookup(charset)
    except LookupError:
        logger.debug(f"Unknown charset {charset!r}, decoding exec output as {DEFAULT_CHARSET}")
        charset = DEFAULT_CHARSET
    return bytes(raw).decode(charset, errors="ignore")


def sanitize(raw: bytes | str | Iterable[bytes] | None, charset: str = DEFAULT_CHARSET) -> str:
    """Filter raw exec output down to printable ASCII plus newlines.

    Undecodable bytes are dropped and character order is preserved. This
    never raises: any failure yields an empty string.

    Args:
        raw: Captured output as bytes, text or an iterable of byte chunks
        charset: Charset to decode bytes with

    Returns:
        Sanitized text, empty if there was no output
    """
    if not raw:
        return ""
    try:
        return _DISALLOWED.sub("", _decode(raw, charset))
    except Exception as e:
        logger.debug(f"Discarding exec output that could not be sanitized: {e}")
        return ""

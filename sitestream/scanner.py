"""Incremental detection of ``<package>NAME</package>`` tags in a text stream.

The model announces the npm packages a generated site needs with package
tags embedded in its output. Tags arrive split across arbitrary fragment
boundaries, so the scanner keeps a short trailing window of the stream and
rescans only that, reporting each name the first time it is seen.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Collection

logger = logging.getLogger(__name__)

PACKAGE_TAG_RE = re.compile(r"<package>([^<]+)</package>")

# Must exceed the longest tag we expect to straddle two fragments
DEFAULT_WINDOW = 500


def observe(
    buffer: str,
    chunk: str,
    seen: Collection[str] = (),
    *,
    window: int = DEFAULT_WINDOW,
) -> tuple[str, list[str]]:
    """Scan ``buffer + chunk`` for package tags not already in ``seen``.

    Args:
        buffer: Retained tail from the previous call ('' on the first call).
        chunk: The next fragment of the stream.
        seen: Names already reported for this stream.
        window: Characters of trailing text to retain after the scan.

    Returns:
        The updated buffer and the newly found names in encounter order.
        Unterminated or malformed tags simply don't match.
    """
    text = buffer + chunk
    found: list[str] = []
    for match in PACKAGE_TAG_RE.finditer(text):
        name = match.group(1).strip()
        if name and name not in seen and name not in found:
            found.append(name)

    # Truncate only after scanning so a tag completed by this chunk is never cut
    if len(text) > window:
        text = text[-window:]
    return text, found


class PackageScanner:
    """Stateful wrapper around :func:`observe` for one stream.

    Owns the scan buffer and the ordered set of reported names. Create one
    per request; it is not shared.
    """

    def __init__(self, window: int = DEFAULT_WINDOW) -> None:
        if window <= 0:
            raise ValueError(f"window must be positive, got {window}")
        self._window = window
        self._buffer = ""
        self._seen: dict[str, None] = {}

    @property
    def window(self) -> int:
        return self._window

    @property
    def buffer(self) -> str:
        """The retained tail of the stream."""
        return self._buffer

    @property
    def packages(self) -> list[str]:
        """All names reported so far, in discovery order."""
        return list(self._seen)

    def observe(self, chunk: str) -> list[str]:
        """Feed the next fragment and return names seen for the first time."""
        self._buffer, found = observe(
            self._buffer, chunk, self._seen, window=self._window
        )
        for name in found:
            self._seen[name] = None
            logger.debug("Package detected: %s", name)
        return found

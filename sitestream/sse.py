"""Server-Sent Events framing.

Only the ``data:`` field is used in either direction: each frame carries
one JSON object and is terminated by a blank line.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from sitestream.schemas.events import ProgressEvent

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def sse_event(event: ProgressEvent) -> str:
    """Format a progress event as a Server-Sent Event frame."""
    return f"{DATA_PREFIX}{json.dumps(event.to_wire(), ensure_ascii=False)}\n\n"


def parse_data_line(line: str) -> dict[str, Any] | None:
    """Decode one ``data: {...}`` line into a dict.

    Returns None for lines that are not data lines or whose payload is not
    a JSON object.
    """
    if not line.startswith(DATA_PREFIX):
        return None
    try:
        data = json.loads(line[len(DATA_PREFIX):])
    except json.JSONDecodeError:
        logger.debug("Skipping malformed SSE frame: %.80s", line)
        return None
    if not isinstance(data, dict):
        logger.debug("Skipping non-object SSE frame: %.80s", line)
        return None
    return data

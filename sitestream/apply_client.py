"""HTTP client for the apply service.

The apply service takes the full generated text plus the detected package
list, writes files into a preview sandbox, and reports progress as its own
Server-Sent Events stream. This client posts the job and yields each
decoded ``data:`` message in order.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from sitestream.errors import ApplyServiceError
from sitestream.sse import parse_data_line

logger = logging.getLogger(__name__)


class ApplyServiceClient:
    """Streams progress messages from one apply-service call.

    Args:
        url: Absolute URL of the apply endpoint.
        timeout: Seconds for connect and each read; None waits indefinitely.
        client: Optional shared httpx.AsyncClient. When omitted a client is
                created for each call and closed with it.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._client = client

    @property
    def url(self) -> str:
        return self._url

    async def stream(
        self,
        response: str,
        packages: list[str],
        sandbox_id: str | None,
    ) -> AsyncIterator[dict[str, Any]]:
        """POST the generated text and yield each message of the reply stream.

        Malformed frames are skipped. Frames split across network reads are
        reassembled before decoding.

        Raises:
            ApplyServiceError: If the service is unreachable, answers with a
                non-success status, or drops the connection mid-stream.
        """
        body: dict[str, Any] = {"response": response, "packages": packages}
        if sandbox_id is not None:
            body["sandboxId"] = sandbox_id

        # Overrides any default on an injected client
        timeout = httpx.Timeout(self._timeout)
        client = self._client or httpx.AsyncClient(timeout=timeout)
        try:
            async with client.stream("POST", self._url, json=body, timeout=timeout) as reply:
                if not reply.is_success:
                    logger.warning(
                        "Apply service at %s answered %d", self._url, reply.status_code
                    )
                    raise ApplyServiceError(f"HTTP {reply.status_code}")

                async for line in reply.aiter_lines():
                    message = parse_data_line(line)
                    if message is not None:
                        yield message
        except httpx.HTTPError as e:
            logger.warning("Apply service at %s failed: %s", self._url, e)
            raise ApplyServiceError(str(e)) from e
        finally:
            if self._client is None:
                await client.aclose()

"""Universal LiteLLM adapter implementing the ModelProvider interface.

Routes streaming completion requests to any LLM provider via LiteLLM's
unified API. Failures are mapped to ModelStreamError with a short reason.
Nothing is retried: a failed generation is reported to the caller.
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator

import litellm

# Suppress LiteLLM's "Give Feedback / Get Help" and "Provider List" banners
litellm.suppress_debug_info = True

from sitestream.errors import ModelStreamError
from sitestream.providers.base import ModelProvider
from sitestream.schemas.config import ProviderConfig

logger = logging.getLogger(__name__)

# Failures LiteLLM may raise while a stream is already being consumed
_STREAM_ERRORS = (
    litellm.APIError,
    litellm.APIConnectionError,
    litellm.RateLimitError,
    litellm.ServiceUnavailableError,
    litellm.InternalServerError,
    litellm.Timeout,
)


def _short_error_reason(error: Exception) -> str:
    """Extract a short, user-friendly reason from a LiteLLM error.

    Maps error types and status codes to concise descriptions instead
    of dumping full JSON error payloads.
    """
    error_str = str(error).lower()
    if "rate" in error_str or "429" in error_str:
        return "rate limit"
    if "overloaded" in error_str or "529" in error_str:
        return "overloaded"
    if "timeout" in error_str or isinstance(error, TimeoutError):
        return "timeout"
    if "503" in error_str or "unavailable" in error_str:
        return "service unavailable"
    if "500" in error_str or "internal" in error_str:
        return "server error"
    if "connection" in error_str:
        return "connection error"
    return str(error)[:80]


class LiteLLMProvider(ModelProvider):
    """LLM adapter powered by LiteLLM.

    Routes calls to any provider (Anthropic, OpenAI, Google, Groq, ...)
    through litellm.acompletion(stream=True). This is the ONLY place models
    are called.
    """

    def __init__(self, config: ProviderConfig, model_name: str) -> None:
        super().__init__(config, model_name)
        self._api_key = os.environ.get(config.api_key_env, "")

    async def stream_text(
        self,
        messages: list[dict[str, str]],
        system: str,
        *,
        temperature: float,
        max_tokens: int,
        timeout: int = 600,
    ) -> AsyncIterator[str]:
        full_messages = [{"role": "system", "content": system}, *messages]
        kwargs = self._build_completion_kwargs(
            full_messages, temperature, max_tokens, timeout
        )

        response = await self._open_stream(kwargs)

        try:
            async for chunk in response:
                delta = ""
                if chunk.choices and chunk.choices[0].delta:
                    delta = chunk.choices[0].delta.content or ""
                if delta:
                    yield delta
        except _STREAM_ERRORS as e:
            raise ModelStreamError(
                f"Stream from {self.model_id} broke: {_short_error_reason(e)}"
            ) from e

    async def _open_stream(self, kwargs: dict):
        """Call litellm.acompletion with stream=True, mapping failures."""
        try:
            return await litellm.acompletion(**kwargs)
        except (TimeoutError, litellm.Timeout) as e:
            raise ModelStreamError(
                f"Model call to {self.model_id} timed out after {kwargs.get('timeout')}s"
            ) from e
        except litellm.AuthenticationError:
            raise ModelStreamError(
                f"Authentication failed for {self.model_id}. "
                f"Check that {self._config.api_key_env} is set correctly."
            ) from None
        except litellm.BadRequestError as e:
            raise ModelStreamError(f"Bad request to {self.model_id}: {e}") from e
        except (
            litellm.RateLimitError,
            litellm.ServiceUnavailableError,
            litellm.InternalServerError,
            litellm.APIConnectionError,
        ) as e:
            reason = _short_error_reason(e)
            logger.warning("Model call to %s failed (%s)", self.display_name, reason)
            raise ModelStreamError(
                f"Model call to {self.model_id} failed: {reason}"
            ) from e

    def _build_completion_kwargs(
        self,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
        timeout: int,
    ) -> dict:
        """Build the kwargs dict for litellm.acompletion."""
        kwargs: dict = {
            "model": self.model_id,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "timeout": float(timeout),
            "stream": True,
        }

        if self._api_key:
            kwargs["api_key"] = self._api_key

        if self._config.api_base:
            kwargs["api_base"] = self._config.api_base

        return kwargs

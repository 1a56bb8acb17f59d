"""Abstract base class for all model providers.

Defines the ModelProvider interface that every LLM adapter must implement.
The relay interacts exclusively through this interface and never calls
provider SDKs directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from sitestream.schemas.config import ProviderConfig


class ModelProvider(ABC):
    """A model that can produce a text stream for one request.

    Built from the ProviderConfig that matched the requested model id and
    the provider-local model name (the id with its namespace prefix removed).
    """

    def __init__(self, config: ProviderConfig, model_name: str) -> None:
        self._config = config
        self._model_name = model_name

    # ── Identity ──────────────────────────────────────────────

    @property
    def provider_id(self) -> str:
        """Registry key of the provider (e.g. 'anthropic', 'groq')."""
        return self._config.name

    @property
    def model_name(self) -> str:
        """Model name as the provider knows it."""
        return self._model_name

    @property
    def model_id(self) -> str:
        """LiteLLM model identifier used for routing."""
        return f"{self._config.litellm_prefix}{self._model_name}"

    @property
    def display_name(self) -> str:
        return f"{self._config.display_name} {self._model_name}"

    @property
    def config(self) -> ProviderConfig:
        return self._config

    # ── Core interface ────────────────────────────────────────

    @abstractmethod
    def stream_text(
        self,
        messages: list[dict[str, str]],
        system: str,
        *,
        temperature: float,
        max_tokens: int,
        timeout: int = 600,
    ) -> AsyncIterator[str]:
        """Stream the completion as text fragments.

        Implementations are async generators: nothing is sent to the
        provider until iteration starts, and the sequence can be iterated
        only once.

        Args:
            messages: Conversation messages in OpenAI format
                      (list of {"role": ..., "content": ...} dicts).
            system: System prompt for this call.
            temperature: Sampling temperature.
            max_tokens: Maximum output tokens.
            timeout: Timeout in seconds for the model call.

        Yields:
            Non-empty text fragments in the order the provider produced them.

        Raises:
            ModelStreamError: If the stream cannot be opened or breaks.
        """

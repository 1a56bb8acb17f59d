"""sitestream provider layer.

The provider layer is the only way models are called. All LLM
interactions go through LiteLLMProvider via the ModelProvider interface.
"""

from sitestream.providers.base import ModelProvider
from sitestream.providers.litellm_provider import LiteLLMProvider
from sitestream.providers.registry import (
    create_provider,
    load_settings,
    resolve_provider,
)

__all__ = [
    "LiteLLMProvider",
    "ModelProvider",
    "create_provider",
    "load_settings",
    "resolve_provider",
]

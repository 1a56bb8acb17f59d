"""Configuration schemas.

Loaded once at process start from defaults.toml (see
sitestream.providers.registry) and never mutated per request.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from sitestream.schemas.request import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
)


class ProviderConfig(BaseModel):
    """One model provider, selected by a namespace prefix on the model id.

    A request for ``anthropic/claude-x`` matches the provider whose
    ``prefix`` is ``anthropic/``; the remainder is handed to LiteLLM as
    ``<litellm_prefix>claude-x``.
    """

    name: str = Field(default="", description="Registry key, filled in by the loader")
    prefix: str = Field(default="", description="Namespace prefix on the model id ('' = none)")
    litellm_prefix: str = Field(description="LiteLLM routing prefix (e.g. 'gemini/')")
    api_key_env: str = Field(description="Environment variable holding the API key")
    api_base: str = Field(default="", description="Custom API base URL (empty = provider default)")
    display_name: str = Field(description="Human-friendly provider name")
    default: bool = Field(default=False, description="Used when no prefix matches")


class RelayConfig(BaseModel):
    default_model: str = DEFAULT_MODEL
    default_temperature: float = DEFAULT_TEMPERATURE
    default_max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)
    model_timeout: int = Field(default=600, gt=0, description="Seconds per model call")


class ScannerConfig(BaseModel):
    window: int = Field(
        default=500,
        gt=0,
        description="Characters of trailing text kept between scans",
    )


class ApplyConfig(BaseModel):
    """Where and how to reach the apply service."""

    url: str = Field(default="", description="Absolute URL ('' = derive from request origin)")
    path: str = Field(default="/api/apply-ai-code-stream")
    timeout: float = Field(default=0.0, ge=0.0, description="Seconds; 0 disables the timeout")


class PromptConfig(BaseModel):
    """Variables for the ``website`` system prompt."""

    stack: str = Field(default="", description="Target stack ('' = React + Vite + Tailwind CSS)")
    extra_rules: str = Field(default="", description="Markdown appended as Additional Rules")


class Settings(BaseModel):
    relay: RelayConfig = Field(default_factory=RelayConfig)
    prompt: PromptConfig = Field(default_factory=PromptConfig)
    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    apply: ApplyConfig = Field(default_factory=ApplyConfig)
    providers: dict[str, ProviderConfig] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _single_default_provider(self) -> Settings:
        defaults = [key for key, p in self.providers.items() if p.default]
        if len(defaults) > 1:
            raise ValueError(f"Only one default provider allowed, got {defaults}")
        return self

"""Inbound generation request schema."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MODEL = "moonshotai/kimi-k2-instruct"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 4000


class GenerationRequest(BaseModel):
    """A single website generation request.

    Field names follow Python conventions; the camelCase wire names used by
    the browser client (``maxTokens``, ``sandboxId``) are accepted as aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    prompt: str = Field(description="What the user wants built")
    model: str = Field(
        default=DEFAULT_MODEL,
        min_length=1,
        description="Namespaced model id, e.g. 'anthropic/claude-sonnet-4-5'",
    )
    temperature: float = Field(
        default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0, description="Sampling temperature"
    )
    max_tokens: int = Field(
        default=DEFAULT_MAX_TOKENS, gt=0, alias="maxTokens", description="Output token cap"
    )
    sandbox_id: str | None = Field(
        default=None, alias="sandboxId", description="Target preview sandbox"
    )

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Prompt is required")
        return value

"""FastAPI server exposing the generation stream.

POST /api/generate-ai-code-stream validates the request, then answers with
a Server-Sent Events stream produced by GenerationRelay. Also provides
health and provider-status endpoints.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError

from sitestream import __version__
from sitestream.apply_client import ApplyServiceClient
from sitestream.keys import key_status
from sitestream.providers.registry import create_provider, load_settings
from sitestream.relay import GenerationRelay, ProviderFactory
from sitestream.schemas.config import RelayConfig, Settings
from sitestream.schemas.request import GenerationRequest
from sitestream.sse import SSE_HEADERS, sse_event

logger = logging.getLogger(__name__)

PROMPT_REQUIRED = "Prompt is required"


def _with_defaults(body: dict[str, Any], relay: RelayConfig) -> dict[str, Any]:
    """Fill in configured defaults for fields the client left out."""
    merged = dict(body)
    merged.setdefault("model", relay.default_model)
    merged.setdefault("temperature", relay.default_temperature)
    if "maxTokens" not in merged and "max_tokens" not in merged:
        merged["maxTokens"] = relay.default_max_tokens
    return merged


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


def apply_url(settings: Settings, request: Request) -> str:
    """The apply endpoint: configured URL, else the caller's own origin."""
    if settings.apply.url:
        return settings.apply.url
    return str(request.base_url).rstrip("/") + settings.apply.path


async def _frames(
    relay: GenerationRelay, generation: GenerationRequest
) -> AsyncIterator[str]:
    async for event in relay.run(generation):
        yield sse_event(event)


def create_app(
    settings: Settings | None = None,
    *,
    provider_factory: ProviderFactory = create_provider,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to serve with. Defaults to defaults.toml.
        provider_factory: Builds model providers; swapped out in tests.
        http_client: Shared client for apply-service calls. When omitted,
                     each request opens and closes its own.
    """
    settings = settings or load_settings()

    app = FastAPI(
        title="sitestream",
        description="Streams LLM-generated websites into a preview sandbox",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.get("/api/models")
    async def list_providers() -> list[dict]:
        """List configured providers and whether their key is set."""
        status = key_status(settings)
        return [
            {
                "name": name,
                "display_name": provider.display_name,
                "prefix": provider.prefix,
                "default": provider.default,
                "key_configured": status[name],
            }
            for name, provider in settings.providers.items()
        ]

    @app.post("/api/generate-ai-code-stream")
    async def generate(request: Request):
        """Stream a website generation as Server-Sent Events."""
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return JSONResponse({"error": "Request body must be JSON"}, status_code=400)

        prompt = body.get("prompt") if isinstance(body, dict) else None
        if not isinstance(prompt, str) or not prompt.strip():
            return JSONResponse({"error": PROMPT_REQUIRED}, status_code=400)

        try:
            generation = GenerationRequest.model_validate(
                _with_defaults(body, settings.relay)
            )
        except ValidationError as e:
            return JSONResponse({"error": _validation_message(e)}, status_code=400)

        apply_client = ApplyServiceClient(
            apply_url(settings, request),
            timeout=settings.apply.timeout or None,
            client=http_client,
        )
        relay = GenerationRelay(
            settings, apply_client, provider_factory=provider_factory
        )
        return StreamingResponse(
            _frames(relay, generation),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    return app

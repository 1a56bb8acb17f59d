"""Two-phase generation relay.

Phase one drives the model's text stream, forwarding every fragment as a
``content`` event and every newly detected package as a ``package`` event.
Phase two starts only once phase one has finished: it hands the full text
and package list to the apply service and re-emits that service's messages
as ``application-*`` events.

The relay is an async generator of ProgressEvents. Exactly one generator
runs per request and it ends exactly once, after at most one ``error``
event. Cancellation (client disconnect) propagates and closes the upstream
streams without emitting anything further.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from dataclasses import dataclass, field

from sitestream.apply_client import ApplyServiceClient
from sitestream.prompts import website_prompt
from sitestream.providers.base import ModelProvider
from sitestream.providers.registry import create_provider
from sitestream.scanner import PackageScanner
from sitestream.schemas.config import Settings
from sitestream.schemas.events import (
    ApplicationCompleteEvent,
    ApplicationProgressEvent,
    ApplicationStartEvent,
    ContentEvent,
    ErrorEvent,
    PackageEvent,
    ProgressEvent,
)
from sitestream.schemas.request import GenerationRequest

logger = logging.getLogger(__name__)

COMPLETE_STAGE = "complete"

ProviderFactory = Callable[[Settings, str], ModelProvider]


@dataclass
class GenerationResult:
    """What phase one hands to phase two."""

    fragments: list[str] = field(default_factory=list)
    packages: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        """The full response: every content fragment, in emission order."""
        return "".join(self.fragments)


class GenerationRelay:
    """Runs one generation request end to end.

    Args:
        settings: Process-wide settings.
        apply_client: Client for the apply service this request reports to.
        provider_factory: Builds the model provider for a model id.
        system_prompt: Overrides the rendered ``website`` prompt.
    """

    def __init__(
        self,
        settings: Settings,
        apply_client: ApplyServiceClient,
        *,
        provider_factory: ProviderFactory = create_provider,
        system_prompt: str | None = None,
    ) -> None:
        self._settings = settings
        self._apply_client = apply_client
        self._provider_factory = provider_factory
        self._system_prompt = system_prompt

    async def run(self, request: GenerationRequest) -> AsyncIterator[ProgressEvent]:
        """Yield the progress events for ``request`` until the stream closes."""
        logger.info(
            "Generating website (model=%s, prompt=%d chars)",
            request.model, len(request.prompt),
        )
        try:
            result = GenerationResult()
            async with aclosing(self._generate(request, result)) as events:
                async for event in events:
                    yield event

            logger.info(
                "Generation complete (%d chars, %d packages), applying code",
                len(result.text), len(result.packages),
            )
            async with aclosing(self._apply(result, request.sandbox_id)) as events:
                async for event in events:
                    yield event
        except Exception as e:
            logger.exception("Generation relay failed")
            yield ErrorEvent(error=str(e) or type(e).__name__)
        finally:
            logger.debug("Event stream closed")

    # ── Phase one: model stream ───────────────────────────────

    async def _generate(
        self, request: GenerationRequest, result: GenerationResult
    ) -> AsyncIterator[ProgressEvent]:
        provider = self._provider_factory(self._settings, request.model)
        system = self._system_prompt or website_prompt(self._settings.prompt)
        scanner = PackageScanner(self._settings.scanner.window)

        logger.debug("Streaming from %s", provider.display_name)
        fragments = provider.stream_text(
            [{"role": "user", "content": request.prompt}],
            system,
            temperature=request.temperature,
            max_tokens=request.max_tokens,
            timeout=self._settings.relay.model_timeout,
        )
        async with aclosing(fragments):
            async for fragment in fragments:
                if not fragment:
                    continue
                result.fragments.append(fragment)
                yield ContentEvent(content=fragment)

                for name in scanner.observe(fragment):
                    yield PackageEvent.detected(name)

        result.packages = scanner.packages

    # ── Phase two: apply service ──────────────────────────────

    async def _apply(
        self, result: GenerationResult, sandbox_id: str | None
    ) -> AsyncIterator[ProgressEvent]:
        yield ApplicationStartEvent()

        envelope = {"sandboxId": sandbox_id} if sandbox_id else {}
        messages = self._apply_client.stream(result.text, result.packages, sandbox_id)
        async with aclosing(messages):
            async for message in messages:
                yield ApplicationProgressEvent(payload={**envelope, **message})

                if message.get("type") == COMPLETE_STAGE:
                    yield ApplicationCompleteEvent(results=message.get("results"))

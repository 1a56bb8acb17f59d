"""sitestream schema definitions.

Pydantic v2 models for requests, progress events, and configuration.
"""

from sitestream.schemas.config import (
    ApplyConfig,
    PromptConfig,
    ProviderConfig,
    RelayConfig,
    ScannerConfig,
    Settings,
)
from sitestream.schemas.events import (
    ApplicationCompleteEvent,
    ApplicationProgressEvent,
    ApplicationStartEvent,
    ContentEvent,
    ErrorEvent,
    EventType,
    PackageEvent,
    ProgressEvent,
)
from sitestream.schemas.request import GenerationRequest

__all__ = [
    "ApplicationCompleteEvent",
    "ApplicationProgressEvent",
    "ApplicationStartEvent",
    "ApplyConfig",
    "ContentEvent",
    "ErrorEvent",
    "EventType",
    "GenerationRequest",
    "PackageEvent",
    "ProgressEvent",
    "PromptConfig",
    "ProviderConfig",
    "RelayConfig",
    "ScannerConfig",
    "Settings",
]

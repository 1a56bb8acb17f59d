"""Progress event schemas for the generation stream.

Every message sent to the caller over Server-Sent Events is one of the
ProgressEvent variants below. Each serializes to a flat JSON object whose
``type`` field names the variant, which is what the browser UI dispatches on.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, Field

PACKAGE_DETECTED_MESSAGE = "Package detected: {name}"
APPLICATION_START_MESSAGE = "Applying generated code..."
APPLICATION_COMPLETE_MESSAGE = "Website created successfully!"


class EventType(StrEnum):
    """Discriminator values for progress events."""

    CONTENT = "content"
    PACKAGE = "package"
    APPLICATION_START = "application-start"
    APPLICATION_PROGRESS = "application-progress"
    APPLICATION_COMPLETE = "application-complete"
    ERROR = "error"


class ProgressEvent(BaseModel):
    """Base class for every event in the outbound stream."""

    type: EventType = Field(description="Event discriminator")

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready dict sent to the client."""
        return self.model_dump(mode="json")


class ContentEvent(ProgressEvent):
    """One text fragment exactly as produced by the model."""

    type: Literal[EventType.CONTENT] = EventType.CONTENT
    content: str = Field(description="Raw fragment text")


class PackageEvent(ProgressEvent):
    """A package name seen for the first time in this request."""

    type: Literal[EventType.PACKAGE] = EventType.PACKAGE
    name: str = Field(min_length=1, description="Package name")
    message: str = Field(default="", description="Human-readable notice")

    @classmethod
    def detected(cls, name: str) -> PackageEvent:
        return cls(name=name, message=PACKAGE_DETECTED_MESSAGE.format(name=name))


class ApplicationStartEvent(ProgressEvent):
    type: Literal[EventType.APPLICATION_START] = EventType.APPLICATION_START
    message: str = Field(default=APPLICATION_START_MESSAGE)


class ApplicationProgressEvent(ProgressEvent):
    """A message from the apply service, re-wrapped for the caller.

    The payload is flattened into the wire object. The inner message's own
    ``type`` is reported as ``stage`` since ``type`` is reserved for the
    event discriminator.
    """

    type: Literal[EventType.APPLICATION_PROGRESS] = EventType.APPLICATION_PROGRESS
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Envelope fields merged with the inner message (inner wins)",
    )

    @property
    def stage(self) -> str | None:
        stage = self.payload.get("type")
        return stage if isinstance(stage, str) else None

    def to_wire(self) -> dict[str, Any]:
        body = {k: v for k, v in self.payload.items() if k != "type"}
        if "type" in self.payload:
            body["stage"] = self.payload["type"]
        return {"type": self.type.value, **body}


class ApplicationCompleteEvent(ProgressEvent):
    type: Literal[EventType.APPLICATION_COMPLETE] = EventType.APPLICATION_COMPLETE
    results: Any = Field(default=None, description="Results reported by the apply service")
    message: str = Field(default=APPLICATION_COMPLETE_MESSAGE)


class ErrorEvent(ProgressEvent):
    """Terminal failure. At most one is emitted per request."""

    type: Literal[EventType.ERROR] = EventType.ERROR
    error: str = Field(description="Failure message")

"""Exceptions raised inside the generation relay."""


class SitestreamError(RuntimeError):
    """Base exception for all application-specific errors."""


class ModelStreamError(SitestreamError):
    """The model provider failed to open or continue its text stream."""


class ApplyServiceError(SitestreamError):
    """The apply service was unreachable or answered with a failure status."""

    MESSAGE = "Failed to apply generated code"

    def __init__(self, detail: str = "") -> None:
        super().__init__(self.MESSAGE)
        self.detail = detail

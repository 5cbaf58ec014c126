"""Error kinds raised by SnapAI clients and the session controller."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    REQUEST_FAILURE = "request_failure"
    MALFORMED_RESPONSE = "malformed_response"
    DOWNLOAD_FAILURE = "download_failure"


class SnapAIError(Exception):
    """Base class for failures that end up as a user notification."""

    kind: ErrorKind = ErrorKind.REQUEST_FAILURE


class InputValidationError(SnapAIError):
    """Raised when a required session field is empty."""

    kind = ErrorKind.VALIDATION

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} is required")


class GenerationFailedError(SnapAIError):
    """Raised when the image service rejects a generation request."""

    kind = ErrorKind.REQUEST_FAILURE

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class MalformedResponseError(GenerationFailedError):
    """Raised when a successful response carries no usable image URL."""

    kind = ErrorKind.MALFORMED_RESPONSE


class DownloadFailedError(SnapAIError):
    """Raised when image bytes cannot be fetched."""

    kind = ErrorKind.DOWNLOAD_FAILURE


class SessionBusyError(Exception):
    """Raised when the prompt is edited while a generation is in flight."""

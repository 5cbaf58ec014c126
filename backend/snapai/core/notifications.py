"""Transient user-facing notifications and the error-kind → message mapping."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from snapai.core.errors import ErrorKind, InputValidationError, SnapAIError

GENERATED_MESSAGE = "Image generated successfully!"
DOWNLOADED_MESSAGE = "Image downloaded!"

# Validation messages name the missing field
VALIDATION_MESSAGES = {
    "prompt": "Please enter a description for your image",
    "credential": "Please enter your OpenAI API key",
}

ERROR_MESSAGES = {
    ErrorKind.VALIDATION: "Please fill in all required fields",
    ErrorKind.REQUEST_FAILURE: "Failed to generate image. Please check your API key and try again.",
    ErrorKind.MALFORMED_RESPONSE: "Failed to generate image. Please check your API key and try again.",
    ErrorKind.DOWNLOAD_FAILURE: "Failed to download image",
}


def user_message(error: SnapAIError) -> str:
    """Map an error to the message shown to the user.

    Detail from the image service is never shown; it only goes to the log.
    """
    if isinstance(error, InputValidationError):
        return VALIDATION_MESSAGES.get(error.field, ERROR_MESSAGES[ErrorKind.VALIDATION])
    return ERROR_MESSAGES[error.kind]


@dataclass(frozen=True)
class Notification:
    level: str  # "success" | "error"
    message: str
    kind: ErrorKind | None = None
    created_at: float = 0.0

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "message": self.message,
            "kind": self.kind.value if self.kind else None,
        }


class NotificationFeed:
    """Auto-dismissing notifications, newest last."""

    def __init__(self, ttl_s: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_s = ttl_s
        self._clock = clock
        self._items: list[Notification] = []

    def success(self, message: str) -> Notification:
        return self._push(Notification(level="success", message=message, created_at=self._clock()))

    def error(self, error: SnapAIError) -> Notification:
        return self._push(
            Notification(
                level="error",
                message=user_message(error),
                kind=error.kind,
                created_at=self._clock(),
            )
        )

    def active(self) -> list[Notification]:
        self._prune()
        return list(self._items)

    def _push(self, notification: Notification) -> Notification:
        self._prune()
        self._items.append(notification)
        return notification

    def _prune(self) -> None:
        cutoff = self._clock() - self.ttl_s
        self._items = [n for n in self._items if n.created_at > cutoff]

"""
Tracking errors.
"""

from typing import Any


class TrackingError(Exception):
    """Base error for the tracking relay."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class PublishError(TrackingError):
    """The broker rejected or could not accept a published message."""

    def __init__(
        self,
        message: str,
        topic: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code="publish_failed", details=details)
        self.topic = topic


class MessageParseError(TrackingError):
    """A stream entry could not be decoded."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code="parse_failed", details=details)


class UnsupportedEventError(TrackingError):
    """The event type has no tracking mapping."""

    def __init__(self, event_type: str):
        super().__init__(
            f"Unsupported event type: {event_type}",
            code="unsupported_event",
            details={"event_type": event_type},
        )
        self.event_type = event_type

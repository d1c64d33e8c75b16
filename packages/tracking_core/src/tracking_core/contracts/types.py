"""
Event Types - message types on the tracking streams.

The event type travels in the envelope and selects the payload model.
"""

from enum import Enum


class EventType(str, Enum):
    """
    Known event types.

    CONSUMED from ``dispatch.tracking``:
    - DISPATCH_PREPARING: the order entered preparation
    - DISPATCH_COMPLETED: the order finished dispatch

    PUBLISHED to ``tracking.status``:
    - TRACKING_STATUS_UPDATED: outward-facing tracking state
    """

    DISPATCH_PREPARING = "dispatch_preparing"
    DISPATCH_COMPLETED = "dispatch_completed"
    TRACKING_STATUS_UPDATED = "tracking_status_updated"

    def __str__(self) -> str:
        return self.value


class TrackingStatus(str, Enum):
    """Tracking status derived one-to-one from a dispatch event."""

    PREPARING = "PREPARING"
    COMPLETED = "COMPLETED"

    def __str__(self) -> str:
        return self.value

"""
Tracking Service

Maps dispatch lifecycle events to tracking status updates and publishes
them to ``tracking.status``.

The service is stateless: it holds only the publisher it was built with.
It does not log, retry or wrap errors; a failed publish propagates to the
caller as raised by the publisher.
"""

from tracking_core.contracts.messages import (
    DispatchCompleted,
    DispatchEvent,
    DispatchPreparing,
    TrackingStatusUpdated,
)
from tracking_core.contracts.types import TrackingStatus
from tracking_core.errors import UnsupportedEventError
from tracking_core.streams.groups import TRACKING_STATUS_STREAM
from tracking_core.streams.publisher import MessagePublisher


class TrackingService:
    """Relays dispatch events as tracking status updates."""

    def __init__(self, publisher: MessagePublisher):
        self._publisher = publisher

    def process(self, event: DispatchEvent) -> None:
        """
        Publish the tracking status for a dispatch event.

        Args:
            event: DispatchPreparing or DispatchCompleted

        Raises:
            UnsupportedEventError: event is not a dispatch lifecycle event
            PublishError: propagated unchanged from the publisher
        """
        self._publisher.send(TRACKING_STATUS_STREAM, self.to_status(event))

    @staticmethod
    def to_status(event: DispatchEvent) -> TrackingStatusUpdated:
        """Build the tracking update for an event without publishing it."""
        if isinstance(event, DispatchPreparing):
            return TrackingStatusUpdated(order_id=event.order_id, status=TrackingStatus.PREPARING)

        if isinstance(event, DispatchCompleted):
            return TrackingStatusUpdated(
                order_id=event.order_id,
                status=TrackingStatus.COMPLETED,
                date=event.date,
            )

        raise UnsupportedEventError(type(event).__name__)

"""
Tracking Redis Streams

Producer and consumer for the tracking streams.
"""

from tracking_core.streams.consumer import TrackingStreamConsumer
from tracking_core.streams.groups import (
    DISPATCH_TRACKING_STREAM,
    TRACKING_GROUP,
    TRACKING_STATUS_STREAM,
    StreamConfig,
    ensure_tracking_streams,
)
from tracking_core.streams.producer import TrackingStreamProducer
from tracking_core.streams.publisher import MessagePublisher

__all__ = [
    "MessagePublisher",
    "TrackingStreamProducer",
    "TrackingStreamConsumer",
    "ensure_tracking_streams",
    "StreamConfig",
    "DISPATCH_TRACKING_STREAM",
    "TRACKING_STATUS_STREAM",
    "TRACKING_GROUP",
]

"""Tracking contracts - envelope, event types and payload models."""

from tracking_core.contracts.envelope import MessageEnvelope, parse_timestamp
from tracking_core.contracts.messages import (
    DispatchCompleted,
    DispatchEvent,
    DispatchPreparing,
    TrackingMessage,
    TrackingStatusUpdated,
    event_type_for,
    parse_dispatch_event,
    parse_tracking_status,
)
from tracking_core.contracts.types import EventType, TrackingStatus

__all__ = [
    "MessageEnvelope",
    "EventType",
    "TrackingStatus",
    "TrackingMessage",
    "DispatchPreparing",
    "DispatchCompleted",
    "DispatchEvent",
    "TrackingStatusUpdated",
    "event_type_for",
    "parse_dispatch_event",
    "parse_tracking_status",
    "parse_timestamp",
]

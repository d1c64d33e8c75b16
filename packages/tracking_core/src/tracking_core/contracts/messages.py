"""
Dispatch Tracking Messages

Pydantic models for the payloads carried on the tracking streams.
Attributes are snake_case in Python and camelCase on the wire.
"""

from typing import TYPE_CHECKING, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from tracking_core.contracts.types import EventType, TrackingStatus
from tracking_core.errors import MessageParseError, UnsupportedEventError

if TYPE_CHECKING:
    from tracking_core.contracts.envelope import MessageEnvelope


class TrackingMessage(BaseModel):
    """Base for immutable tracking messages."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_payload(self) -> dict:
        """Wire representation (camelCase, absent fields omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DispatchPreparing(TrackingMessage):
    """An order has entered preparation."""

    order_id: UUID = Field(..., description="Order identifier")


class DispatchCompleted(TrackingMessage):
    """An order has finished dispatch."""

    order_id: UUID = Field(..., description="Order identifier")
    date: str = Field(..., description="Completion timestamp (ISO-8601)")


class TrackingStatusUpdated(TrackingMessage):
    """Tracking state published for an order."""

    order_id: UUID = Field(..., description="Order identifier of the triggering event")
    status: TrackingStatus = Field(..., description="Tracking status")
    date: str | None = Field(None, description="Status timestamp (ISO-8601), if known")


DispatchEvent = Union[DispatchPreparing, DispatchCompleted]

MESSAGE_TYPES: dict[type[TrackingMessage], EventType] = {
    DispatchPreparing: EventType.DISPATCH_PREPARING,
    DispatchCompleted: EventType.DISPATCH_COMPLETED,
    TrackingStatusUpdated: EventType.TRACKING_STATUS_UPDATED,
}

DISPATCH_EVENT_MODELS: dict[str, type[TrackingMessage]] = {
    EventType.DISPATCH_PREPARING.value: DispatchPreparing,
    EventType.DISPATCH_COMPLETED.value: DispatchCompleted,
}


def event_type_for(message: TrackingMessage) -> EventType:
    """Get the registered event type of a message."""
    try:
        return MESSAGE_TYPES[type(message)]
    except KeyError:
        raise UnsupportedEventError(type(message).__name__) from None


def parse_dispatch_event(envelope: "MessageEnvelope") -> DispatchEvent:
    """
    Decode an inbound envelope into a typed dispatch event.

    Raises:
        UnsupportedEventError: event type is not a dispatch lifecycle event
        MessageParseError: payload does not match the model
    """
    model = DISPATCH_EVENT_MODELS.get(envelope.event_type)
    if model is None:
        raise UnsupportedEventError(envelope.event_type)

    try:
        return model.model_validate(envelope.payload)
    except ValidationError as e:
        raise MessageParseError(
            f"Invalid {envelope.event_type} payload",
            details={"event_id": str(envelope.event_id), "errors": e.errors(include_url=False)},
        ) from e


def parse_tracking_status(envelope: "MessageEnvelope") -> TrackingStatusUpdated:
    """Decode an outbound envelope into a TrackingStatusUpdated."""
    if envelope.event_type != EventType.TRACKING_STATUS_UPDATED.value:
        raise UnsupportedEventError(envelope.event_type)

    try:
        return TrackingStatusUpdated.model_validate(envelope.payload)
    except ValidationError as e:
        raise MessageParseError(
            "Invalid tracking_status_updated payload",
            details={"event_id": str(envelope.event_id), "errors": e.errors(include_url=False)},
        ) from e

"""
Message Envelope - standard wrapper for tracking stream messages.

The producer wraps every payload model in this envelope before XADD and the
consumer rebuilds it from the stream entry. The event type selects the
payload model on the way back in.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from pydantic import TypeAdapter

from tracking_core.contracts.messages import TrackingMessage, event_type_for
from tracking_core.errors import MessageParseError

_timestamp_adapter = TypeAdapter(datetime)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp, including the UTC "Z" suffix.

    Raises:
        ValueError: value is not a timestamp
    """
    return _timestamp_adapter.validate_python(value)


@dataclass
class MessageEnvelope:
    """
    Envelope for messages on the tracking streams.

    Attributes:
        event_id: Unique identifier for this message instance
        event_type: Type of payload (EventType value)
        occurred_at: When the message was created (UTC)
        payload: Wire representation of the payload model
        version: Message contract version
        correlation_id: Optional correlation ID for tracing
        metadata: Additional metadata (stream message id, source, etc.)
    """

    event_id: UUID
    event_type: str
    occurred_at: datetime
    payload: dict[str, Any]
    version: int = 1
    correlation_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        event_type: str,
        payload: dict[str, Any],
        correlation_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> "MessageEnvelope":
        """Create a new envelope with auto-generated event_id and timestamp."""
        return cls(
            event_id=uuid4(),
            event_type=event_type,
            occurred_at=datetime.now(timezone.utc),
            payload=payload,
            correlation_id=correlation_id,
            metadata=metadata or {},
        )

    @classmethod
    def for_message(
        cls,
        message: TrackingMessage,
        correlation_id: str | None = None,
    ) -> "MessageEnvelope":
        """Wrap a payload model, taking the event type from its registration."""
        return cls.create(
            event_type=event_type_for(message).value,
            payload=message.to_payload(),
            correlation_id=correlation_id,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MessageEnvelope":
        """Create an envelope from a dictionary."""
        return cls(
            event_id=UUID(data["event_id"]) if isinstance(data["event_id"], str) else data["event_id"],
            event_type=data["event_type"],
            occurred_at=(
                parse_timestamp(data["occurred_at"])
                if isinstance(data["occurred_at"], str)
                else data["occurred_at"]
            ),
            version=int(data.get("version", 1)),
            payload=data.get("payload", {}),
            correlation_id=data.get("correlation_id"),
            metadata=data.get("metadata", {}),
        )

    @classmethod
    def from_stream_message(cls, msg_id: str, data: dict[str, str]) -> "MessageEnvelope":
        """
        Parse a Redis Stream entry into an envelope.

        Raises:
            MessageParseError: required fields missing or malformed
        """
        try:
            payload = json.loads(data.get("payload") or "{}")
            metadata = json.loads(data.get("metadata") or "{}")
            metadata["stream_msg_id"] = msg_id

            return cls(
                event_id=UUID(data["event_id"]),
                event_type=data["event_type"],
                occurred_at=(
                    parse_timestamp(data["occurred_at"])
                    if data.get("occurred_at")
                    else datetime.now(timezone.utc)
                ),
                version=int(data.get("version") or "1"),
                payload=payload,
                correlation_id=data.get("correlation_id") or None,
                metadata=metadata,
            )
        except (KeyError, ValueError, TypeError) as e:
            raise MessageParseError(
                f"Malformed stream message {msg_id}: {e}",
                details={"msg_id": msg_id},
            ) from e

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "payload": self.payload,
            "correlation_id": self.correlation_id,
            "metadata": self.metadata,
        }

    def to_stream_data(self) -> dict[str, str]:
        """Convert to a field map for XADD (all string values)."""
        return {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": str(self.version),
            "payload": json.dumps(self.payload),
            "correlation_id": self.correlation_id or "",
            "metadata": json.dumps(self.metadata),
        }

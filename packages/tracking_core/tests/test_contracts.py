"""
Tests for message contracts and the stream envelope.
"""

import json
from datetime import datetime, timezone
from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from tracking_core.contracts.envelope import MessageEnvelope
from tracking_core.contracts.messages import (
    DispatchCompleted,
    DispatchPreparing,
    TrackingStatusUpdated,
    event_type_for,
    parse_dispatch_event,
    parse_tracking_status,
)
from tracking_core.contracts.types import EventType, TrackingStatus
from tracking_core.errors import MessageParseError, UnsupportedEventError


class TestMessages:
    """Tests for payload models."""

    def test_payload_uses_camel_case(self, sample_order_id, sample_date):
        """Test wire names are camelCase."""
        payload = DispatchCompleted(order_id=sample_order_id, date=sample_date).to_payload()

        assert payload == {"orderId": str(sample_order_id), "date": sample_date}

    def test_accepts_wire_names(self, sample_order_id):
        """Test models validate from camelCase payloads."""
        event = DispatchPreparing.model_validate({"orderId": str(sample_order_id)})
        assert event.order_id == sample_order_id

    def test_tracking_payload_omits_absent_date(self, sample_order_id):
        """Test an absent date is left out of the payload."""
        payload = TrackingStatusUpdated(
            order_id=sample_order_id,
            status=TrackingStatus.PREPARING,
        ).to_payload()

        assert payload == {"orderId": str(sample_order_id), "status": "PREPARING"}

    def test_messages_are_immutable(self, sample_order_id):
        """Test messages cannot be modified after construction."""
        event = DispatchPreparing(order_id=sample_order_id)

        with pytest.raises(ValidationError):
            event.order_id = uuid4()

    def test_equality_is_by_fields(self, sample_order_id):
        assert DispatchPreparing(order_id=sample_order_id) == DispatchPreparing(order_id=sample_order_id)

    def test_completed_requires_date(self, sample_order_id):
        with pytest.raises(ValidationError):
            DispatchCompleted(order_id=sample_order_id)

    def test_invalid_order_id(self):
        with pytest.raises(ValidationError):
            DispatchPreparing(order_id="not-a-uuid")

    def test_event_type_for(self, sample_order_id, sample_date):
        assert event_type_for(DispatchPreparing(order_id=sample_order_id)) == EventType.DISPATCH_PREPARING
        assert (
            event_type_for(DispatchCompleted(order_id=sample_order_id, date=sample_date))
            == EventType.DISPATCH_COMPLETED
        )


class TestParsing:
    """Tests for typed decoding of envelopes."""

    def test_parse_preparing(self, sample_order_id):
        envelope = MessageEnvelope.create(
            event_type="dispatch_preparing",
            payload={"orderId": str(sample_order_id)},
        )

        event = parse_dispatch_event(envelope)

        assert event == DispatchPreparing(order_id=sample_order_id)

    def test_parse_completed(self, sample_order_id, sample_date):
        envelope = MessageEnvelope.create(
            event_type="dispatch_completed",
            payload={"orderId": str(sample_order_id), "date": sample_date},
        )

        event = parse_dispatch_event(envelope)

        assert isinstance(event, DispatchCompleted)
        assert event.date == sample_date

    def test_parse_unknown_type(self, sample_order_id):
        """Test unknown event types are reported as unsupported."""
        envelope = MessageEnvelope.create(
            event_type="dispatch_cancelled",
            payload={"orderId": str(sample_order_id)},
        )

        with pytest.raises(UnsupportedEventError) as exc_info:
            parse_dispatch_event(envelope)

        assert exc_info.value.event_type == "dispatch_cancelled"

    def test_parse_invalid_payload(self):
        """Test payloads failing validation raise MessageParseError."""
        envelope = MessageEnvelope.create(
            event_type="dispatch_completed",
            payload={"orderId": "nope"},
        )

        with pytest.raises(MessageParseError) as exc_info:
            parse_dispatch_event(envelope)

        assert exc_info.value.details["event_id"] == str(envelope.event_id)

    def test_parse_tracking_status(self, sample_order_id):
        update = TrackingStatusUpdated(order_id=sample_order_id, status=TrackingStatus.COMPLETED, date="d")
        envelope = MessageEnvelope.for_message(update)

        assert parse_tracking_status(envelope) == update

    def test_parse_tracking_status_wrong_type(self, sample_order_id):
        envelope = MessageEnvelope.for_message(DispatchPreparing(order_id=sample_order_id))

        with pytest.raises(UnsupportedEventError):
            parse_tracking_status(envelope)


class TestMessageEnvelope:
    """Tests for MessageEnvelope."""

    def test_for_message(self, sample_order_id):
        envelope = MessageEnvelope.for_message(
            DispatchPreparing(order_id=sample_order_id),
            correlation_id="corr-1",
        )

        assert isinstance(envelope.event_id, UUID)
        assert envelope.event_type == "dispatch_preparing"
        assert envelope.payload == {"orderId": str(sample_order_id)}
        assert envelope.correlation_id == "corr-1"
        assert envelope.occurred_at.tzinfo is not None

    def test_to_stream_data_is_all_strings(self, sample_order_id):
        envelope = MessageEnvelope.for_message(DispatchPreparing(order_id=sample_order_id))

        data = envelope.to_stream_data()

        assert all(isinstance(v, str) for v in data.values())
        assert json.loads(data["payload"]) == {"orderId": str(sample_order_id)}
        assert data["correlation_id"] == ""
        assert data["version"] == "1"

    def test_from_stream_message(self, sample_order_id):
        event_id = uuid4()
        data = {
            "event_id": str(event_id),
            "event_type": "dispatch_preparing",
            "occurred_at": "2024-01-01T00:00:00+00:00",
            "version": "1",
            "payload": json.dumps({"orderId": str(sample_order_id)}),
            "correlation_id": "",
            "metadata": json.dumps({"source": "dispatch"}),
        }

        envelope = MessageEnvelope.from_stream_message("1-0", data)

        assert envelope.event_id == event_id
        assert envelope.occurred_at == datetime.fromisoformat("2024-01-01T00:00:00+00:00")
        assert envelope.correlation_id is None
        assert envelope.metadata == {"source": "dispatch", "stream_msg_id": "1-0"}

    def test_from_stream_message_utc_suffix(self, sample_order_id):
        """Test timestamps written with a trailing Z are accepted."""
        data = {
            "event_id": str(uuid4()),
            "event_type": "dispatch_preparing",
            "occurred_at": "2024-01-01T12:30:00Z",
            "payload": json.dumps({"orderId": str(sample_order_id)}),
        }

        envelope = MessageEnvelope.from_stream_message("1-0", data)

        assert envelope.occurred_at == datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc)
        assert parse_dispatch_event(envelope) == DispatchPreparing(order_id=sample_order_id)

    def test_from_dict_utc_suffix(self, sample_order_id):
        envelope = MessageEnvelope.from_dict(
            {
                "event_id": str(uuid4()),
                "event_type": "dispatch_preparing",
                "occurred_at": "2024-01-01T12:30:00.123Z",
                "payload": {"orderId": str(sample_order_id)},
            }
        )

        assert envelope.occurred_at == datetime(2024, 1, 1, 12, 30, 0, 123000, tzinfo=timezone.utc)

    def test_from_stream_message_defaults(self):
        """Test optional fields fall back to defaults."""
        envelope = MessageEnvelope.from_stream_message(
            "2-0",
            {"event_id": str(uuid4()), "event_type": "dispatch_preparing"},
        )

        assert envelope.payload == {}
        assert envelope.version == 1
        assert envelope.metadata == {"stream_msg_id": "2-0"}

    @pytest.mark.parametrize(
        "data",
        [
            {"event_type": "dispatch_preparing"},
            {"event_id": "not-a-uuid", "event_type": "dispatch_preparing"},
            {"event_id": "7f9c0e62-5d3e-4a59-9d6e-0d1f3f5b9b11", "event_type": "x", "payload": "{bad json"},
            {"event_id": "7f9c0e62-5d3e-4a59-9d6e-0d1f3f5b9b11", "event_type": "x", "occurred_at": "yesterday"},
        ],
    )
    def test_from_stream_message_malformed(self, data):
        with pytest.raises(MessageParseError):
            MessageEnvelope.from_stream_message("3-0", data)

    def test_dict_round_trip(self, sample_order_id):
        envelope = MessageEnvelope.for_message(DispatchPreparing(order_id=sample_order_id))

        assert MessageEnvelope.from_dict(envelope.to_dict()) == envelope

"""
Dispatch Tracking Listener

Reads dispatch lifecycle events from ``dispatch.tracking`` and hands each
one to TrackingService.

Delivery rules:
- ACK after the tracking update was published
- ACK (and log) unknown or malformed events, so they never block the group
- Leave failed messages unacked; they are redelivered through PEL reclaim
"""

import logging
from typing import Any

from tracking_core.contracts.envelope import MessageEnvelope
from tracking_core.contracts.messages import parse_dispatch_event
from tracking_core.errors import MessageParseError, UnsupportedEventError
from tracking_core.service.tracking import TrackingService
from tracking_core.streams.consumer import TrackingStreamConsumer
from tracking_core.streams.groups import DISPATCH_TRACKING_STREAM

logger = logging.getLogger(__name__)

ACKABLE_STATUSES = ("processed", "ignored", "rejected")


class DispatchTrackingListener:
    """Routes inbound stream messages to the tracking service."""

    def __init__(
        self,
        service: TrackingService,
        consumer: TrackingStreamConsumer,
        stream_name: str = DISPATCH_TRACKING_STREAM,
    ):
        self.service = service
        self.consumer = consumer
        self.stream_name = stream_name

    def handle(self, envelope: MessageEnvelope) -> dict[str, Any]:
        """
        Handle a single envelope.

        Returns:
            Result dict with event_id, event_type and status
            ("processed", "ignored" or "rejected")
        """
        result: dict[str, Any] = {
            "event_id": str(envelope.event_id),
            "event_type": envelope.event_type,
        }

        try:
            event = parse_dispatch_event(envelope)
        except UnsupportedEventError:
            logger.warning(
                f"No tracking mapping for event type: {envelope.event_type}",
                extra={"event_id": str(envelope.event_id), "event_type": envelope.event_type},
            )
            result["status"] = "ignored"
            return result
        except MessageParseError as e:
            logger.error(
                f"Rejected malformed {envelope.event_type} event: {e}",
                extra={"event_id": str(envelope.event_id), "details": e.details},
            )
            result["status"] = "rejected"
            return result

        self.service.process(event)

        logger.info(
            f"Tracking status published for order {event.order_id}",
            extra={
                "event_id": str(envelope.event_id),
                "event_type": envelope.event_type,
                "order_id": str(event.order_id),
            },
        )

        result["status"] = "processed"
        return result

    def consume(self, count: int = 10, block_ms: int = 5000) -> int:
        """
        Read and process one batch from the inbound stream.

        Returns:
            Number of messages acknowledged
        """
        messages = self.consumer.read_messages(
            self.stream_name,
            count=count,
            block_ms=block_ms,
        )
        return self._process_batch(messages)

    def reclaim(self, min_idle_ms: int = 60000, count: int = 100) -> int:
        """
        Claim idle pending messages and process them.

        Covers messages from crashed consumers and earlier failures.

        Returns:
            Number of messages acknowledged
        """
        claimed = self.consumer.reclaim_pending(
            self.stream_name,
            min_idle_ms=min_idle_ms,
            count=count,
        )
        if not claimed:
            return 0

        logger.info(f"Reclaimed {len(claimed)} pending messages from {self.stream_name}")
        return self._process_batch(claimed)

    def _process_batch(self, messages: list[tuple[str, MessageEnvelope]]) -> int:
        acked = 0

        for msg_id, envelope in messages:
            try:
                result = self.handle(envelope)
            except Exception as e:
                # Don't ACK - message will be reclaimed
                logger.error(
                    f"Failed to process message {msg_id}: {e}",
                    extra={
                        "msg_id": msg_id,
                        "event_id": str(envelope.event_id),
                        "event_type": envelope.event_type,
                    },
                    exc_info=True,
                )
                continue

            if result["status"] in ACKABLE_STATUSES:
                self.consumer.ack(self.stream_name, msg_id)
                acked += 1

            logger.debug(
                f"ACKed message {msg_id}",
                extra={"msg_id": msg_id, "result": result},
            )

        return acked

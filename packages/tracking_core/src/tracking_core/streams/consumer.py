"""
Tracking Stream Consumer

Consumes messages from Redis Streams using XREADGROUP.
"""

import logging
from typing import Any

import redis

from tracking_core.contracts.envelope import MessageEnvelope
from tracking_core.errors import MessageParseError
from tracking_core.streams.groups import TRACKING_GROUP

logger = logging.getLogger(__name__)


class TrackingStreamConsumer:
    """
    Consumer for reading tracking messages from Redis Streams.

    Uses XREADGROUP for consumer group support. Messages stay in the
    group's pending entries list until acked, so a crashed consumer's
    messages can be claimed by another one.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        consumer_name: str,
        group_name: str = TRACKING_GROUP,
    ):
        self.redis = redis_client
        self.consumer_name = consumer_name
        self.group_name = group_name

    def read_messages(
        self,
        stream_name: str,
        count: int = 10,
        block_ms: int = 5000,
    ) -> list[tuple[str, MessageEnvelope]]:
        """
        Read new messages from a stream.

        Entries that cannot be parsed are acked and dropped.

        Returns:
            List of (message_id, envelope) tuples
        """
        try:
            result = self.redis.xreadgroup(
                self.group_name,
                self.consumer_name,
                {stream_name: ">"},
                count=count,
                block=block_ms,
            )
        except redis.ResponseError as e:
            if "NOGROUP" in str(e):
                logger.error(f"Consumer group {self.group_name} does not exist for {stream_name}")
            raise

        if not result:
            return []

        messages = []
        for _stream, entries in result:
            messages.extend(self._parse_entries(stream_name, entries))

        return messages

    def ack(self, stream_name: str, message_id: str) -> int:
        """
        Acknowledge a message as processed.

        Returns:
            Number of messages acknowledged (0 or 1)
        """
        return self.redis.xack(stream_name, self.group_name, message_id)

    def get_pending(
        self,
        stream_name: str,
        min_idle_ms: int = 60000,
        count: int = 100,
    ) -> list[dict[str, Any]]:
        """
        Get pending messages that have been idle too long.

        Returns:
            List of pending message info dicts
        """
        try:
            pending_info = self.redis.xpending(stream_name, self.group_name)
            if not pending_info or pending_info.get("pending", 0) == 0:
                return []

            pending_range = self.redis.xpending_range(
                stream_name,
                self.group_name,
                min="-",
                max="+",
                count=count,
            )
        except redis.ResponseError as e:
            logger.warning(f"Could not read pending entries for {stream_name}: {e}")
            return []

        return [
            {
                "message_id": entry["message_id"],
                "consumer": entry["consumer"],
                "idle_ms": entry["time_since_delivered"],
                "delivery_count": entry["times_delivered"],
            }
            for entry in pending_range
            if entry.get("time_since_delivered", 0) >= min_idle_ms
        ]

    def claim_messages(
        self,
        stream_name: str,
        message_ids: list[str],
        min_idle_ms: int = 60000,
    ) -> list[tuple[str, MessageEnvelope]]:
        """
        Claim pending messages from other consumers.

        Returns:
            List of (message_id, envelope) tuples for claimed messages
        """
        if not message_ids:
            return []

        try:
            result = self.redis.xclaim(
                stream_name,
                self.group_name,
                self.consumer_name,
                min_idle_ms,
                message_ids,
            )
        except redis.ResponseError as e:
            logger.error(f"Failed to claim messages: {e}")
            return []

        return self._parse_entries(stream_name, result)

    def reclaim_pending(
        self,
        stream_name: str,
        min_idle_ms: int = 60000,
        count: int = 100,
    ) -> list[tuple[str, MessageEnvelope]]:
        """Claim and return pending messages that have been idle."""
        pending = self.get_pending(stream_name, min_idle_ms, count)
        if not pending:
            return []

        message_ids = [p["message_id"] for p in pending]
        return self.claim_messages(stream_name, message_ids, min_idle_ms)

    def _parse_entries(
        self,
        stream_name: str,
        entries: list[tuple[str, dict[str, str]]],
    ) -> list[tuple[str, MessageEnvelope]]:
        messages = []
        for msg_id, data in entries:
            # XCLAIM returns (id, None) for entries deleted since delivery
            if not data:
                self.ack(stream_name, msg_id)
                continue

            try:
                envelope = MessageEnvelope.from_stream_message(msg_id, data)
            except MessageParseError as e:
                logger.error(
                    f"Failed to parse message {msg_id}: {e}",
                    extra={"stream": stream_name, "msg_id": msg_id},
                )
                # ACK invalid messages to prevent blocking
                self.ack(stream_name, msg_id)
                continue

            messages.append((msg_id, envelope))

        return messages

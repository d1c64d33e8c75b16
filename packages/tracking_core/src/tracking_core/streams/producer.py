"""
Tracking Stream Producer

Publishes tracking messages to Redis Streams.
"""

import logging

import redis

from tracking_core.contracts.envelope import MessageEnvelope
from tracking_core.contracts.messages import TrackingMessage
from tracking_core.errors import PublishError
from tracking_core.streams.publisher import MessagePublisher

logger = logging.getLogger(__name__)


class TrackingStreamProducer(MessagePublisher):
    """
    Producer for publishing tracking messages to Redis Streams.

    Each message is wrapped in a MessageEnvelope and appended with XADD.
    Streams are trimmed approximately to ``max_len`` entries.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        max_len: int = 100000,
    ):
        self.redis = redis_client
        self.max_len = max_len

    def send(
        self,
        topic: str,
        message: TrackingMessage,
        correlation_id: str | None = None,
    ) -> str:
        """
        Publish a message to a stream.

        Returns:
            Stream message ID

        Raises:
            PublishError: serialization failed or Redis rejected the write
        """
        try:
            envelope = MessageEnvelope.for_message(message, correlation_id=correlation_id)
            data = envelope.to_stream_data()
        except (TypeError, ValueError) as e:
            raise PublishError(
                f"Failed to serialize {type(message).__name__} for {topic}: {e}",
                topic=topic,
            ) from e

        return self._publish(topic, envelope, data)

    def _publish(self, stream_name: str, envelope: MessageEnvelope, data: dict[str, str]) -> str:
        try:
            msg_id = self.redis.xadd(
                stream_name,
                data,
                maxlen=self.max_len,
                approximate=True,
            )
        except redis.RedisError as e:
            raise PublishError(
                f"Failed to publish to {stream_name}: {e}",
                topic=stream_name,
                details={"event_id": str(envelope.event_id), "event_type": envelope.event_type},
            ) from e

        logger.debug(
            f"Published to {stream_name}",
            extra={
                "stream": stream_name,
                "event_type": envelope.event_type,
                "event_id": str(envelope.event_id),
                "msg_id": msg_id,
            },
        )

        return msg_id

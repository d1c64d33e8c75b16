"""
Message Publisher

Abstract publish capability handed to TrackingService.
Implementations: TrackingStreamProducer (Redis Streams).
"""

from abc import ABC, abstractmethod

from tracking_core.contracts.messages import TrackingMessage


class MessagePublisher(ABC):
    """Sends a message to a named destination."""

    @abstractmethod
    def send(self, topic: str, message: TrackingMessage) -> str:
        """
        Publish a message synchronously.

        Args:
            topic: Destination stream name
            message: Payload model

        Returns:
            Broker-assigned message ID

        Raises:
            PublishError: the message could not be published
        """
        ...

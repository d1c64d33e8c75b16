"""
Tracking Worker - Redis Streams Consumer

Consumes dispatch lifecycle events from ``dispatch.tracking`` and publishes
tracking status updates to ``tracking.status``.

This worker uses ONLY:
- basecore (settings, logging, redis)
- tracking_core (contracts, service, streams, listener)

Features:
- XREADGROUP consumer for horizontal scaling
- PEL reclaim for stuck messages
- Graceful shutdown
"""

import logging
import signal
import sys
import threading
import time

from basecore.logging import setup_logging
from basecore.redis import get_redis_client
from basecore.settings import Settings, get_settings
from tracking_core.handlers.listener import DispatchTrackingListener
from tracking_core.service.tracking import TrackingService
from tracking_core.streams.consumer import TrackingStreamConsumer
from tracking_core.streams.groups import StreamConfig, ensure_tracking_streams
from tracking_core.streams.producer import TrackingStreamProducer

logger = logging.getLogger(__name__)

# Graceful shutdown
shutdown_requested = threading.Event()


def signal_handler(signum, frame):
    logger.info(f"Received signal {signum}, requesting shutdown...")
    shutdown_requested.set()


def build_listener(settings: Settings, redis_client) -> DispatchTrackingListener:
    """Wire producer, service, consumer and listener together."""
    producer = TrackingStreamProducer(redis_client, max_len=settings.TRACKING_STREAM_MAX_LEN)
    consumer = TrackingStreamConsumer(
        redis_client,
        settings.TRACKING_CONSUMER_NAME,
        group_name=settings.TRACKING_GROUP_NAME,
    )
    return DispatchTrackingListener(
        TrackingService(producer),
        consumer,
        stream_name=settings.TRACKING_INBOUND_STREAM,
    )


def ensure_consumer_group(settings: Settings, redis_client) -> bool:
    """Ensure the consumer group exists for the inbound stream."""
    try:
        ensure_tracking_streams(
            redis_client,
            [StreamConfig(settings.TRACKING_INBOUND_STREAM, settings.TRACKING_GROUP_NAME)],
        )
        return True
    except Exception as e:
        logger.error(f"Failed to ensure consumer group: {e}", exc_info=True)
        return False


def run_reclaim_loop(listener: DispatchTrackingListener, settings: Settings):
    """
    Background thread for reclaiming pending messages.

    Runs every TRACKING_RECLAIM_INTERVAL seconds.
    """
    logger.info(
        f"Starting PEL reclaim loop "
        f"(interval={settings.TRACKING_RECLAIM_INTERVAL}s, "
        f"idle_threshold={settings.TRACKING_RECLAIM_IDLE_MS}ms)"
    )

    # Event.wait returns True once shutdown is requested
    while not shutdown_requested.wait(settings.TRACKING_RECLAIM_INTERVAL):
        try:
            reclaimed = listener.reclaim(min_idle_ms=settings.TRACKING_RECLAIM_IDLE_MS)
            if reclaimed > 0:
                logger.info(f"Reclaimed and processed {reclaimed} pending messages")
        except Exception as e:
            logger.error(f"Error in reclaim loop: {e}", exc_info=True)


def run_consume_loop(listener: DispatchTrackingListener, settings: Settings):
    """Consume batches until shutdown is requested."""
    while not shutdown_requested.is_set():
        try:
            count = listener.consume(
                count=settings.TRACKING_BATCH_SIZE,
                block_ms=settings.TRACKING_BLOCK_MS,
            )
            if count > 0:
                logger.info(f"Processed {count} events from stream")

        except KeyboardInterrupt:
            break
        except Exception as e:
            logger.error(f"Error in consume loop: {e}", exc_info=True)
            time.sleep(1)  # Brief pause on error


def main():
    """Main worker loop."""
    setup_logging()
    settings = get_settings()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    logger.info(
        f"Starting tracking worker (stream={settings.TRACKING_INBOUND_STREAM}, "
        f"group={settings.TRACKING_GROUP_NAME}, consumer={settings.TRACKING_CONSUMER_NAME}, "
        f"batch={settings.TRACKING_BATCH_SIZE})"
    )

    redis_client = get_redis_client()

    if not ensure_consumer_group(settings, redis_client):
        logger.error("Failed to initialize consumer group, exiting")
        sys.exit(1)

    listener = build_listener(settings, redis_client)

    # Initial reclaim on startup to pick up orphaned messages
    logger.info("Running initial PEL reclaim on startup...")
    try:
        initial_reclaimed = listener.reclaim(min_idle_ms=settings.TRACKING_RECLAIM_IDLE_MS)
        if initial_reclaimed > 0:
            logger.info(f"Initial reclaim: processed {initial_reclaimed} orphaned messages")
    except Exception as e:
        logger.warning(f"Initial reclaim failed: {e}")

    reclaim_thread = threading.Thread(
        target=run_reclaim_loop,
        args=(listener, settings),
        daemon=True,
    )
    reclaim_thread.start()

    run_consume_loop(listener, settings)

    logger.info("Tracking worker shutting down gracefully")


if __name__ == "__main__":
    main()

"""
Redis Stream Configuration

Stream names, consumer groups, and setup utilities.
"""

import logging
from dataclasses import dataclass

import redis

logger = logging.getLogger(__name__)

# Stream names
DISPATCH_TRACKING_STREAM = "dispatch.tracking"
TRACKING_STATUS_STREAM = "tracking.status"

# Consumer group
TRACKING_GROUP = "tracking.dispatch.consumer"


@dataclass
class StreamConfig:
    """Configuration for a stream and its consumer group."""

    stream_name: str
    group_name: str
    max_len: int = 100000
    start_id: str = "0"  # "0" = all history, "$" = new only


STREAM_CONFIGS = [
    StreamConfig(DISPATCH_TRACKING_STREAM, TRACKING_GROUP),
]


def ensure_stream_group(
    client: redis.Redis,
    stream_name: str,
    group_name: str,
    start_id: str = "0",
) -> bool:
    """
    Ensure a consumer group exists for a stream.

    Creates the group if it doesn't exist. Safe to call multiple times.

    Returns:
        True if group was created, False if it already existed
    """
    try:
        client.xgroup_create(stream_name, group_name, id=start_id, mkstream=True)
        logger.info(f"Created consumer group '{group_name}' for stream '{stream_name}'")
        return True
    except redis.ResponseError as e:
        if "BUSYGROUP" in str(e):
            logger.debug(f"Consumer group '{group_name}' already exists for '{stream_name}'")
            return False
        raise


def ensure_tracking_streams(
    client: redis.Redis,
    configs: list[StreamConfig] | None = None,
) -> None:
    """
    Ensure the tracking streams and consumer groups exist.

    Called on startup by the worker and by ``tracking-cli ensure-streams``.
    """
    for config in configs or STREAM_CONFIGS:
        ensure_stream_group(
            client,
            config.stream_name,
            config.group_name,
            config.start_id,
        )


def get_stream_info(client: redis.Redis, stream_name: str) -> dict:
    """Get information about a stream."""
    try:
        info = client.xinfo_stream(stream_name)
        return {
            "length": info.get("length", 0),
            "first_entry": info.get("first-entry"),
            "last_entry": info.get("last-entry"),
            "groups": client.xinfo_groups(stream_name),
        }
    except redis.ResponseError:
        return {"length": 0, "error": "Stream does not exist"}


def get_pending_count(
    client: redis.Redis,
    stream_name: str,
    group_name: str,
) -> int:
    """Get count of pending (unacknowledged) messages in a group."""
    try:
        info = client.xpending(stream_name, group_name)
        return info.get("pending", 0) if info else 0
    except redis.ResponseError:
        return 0

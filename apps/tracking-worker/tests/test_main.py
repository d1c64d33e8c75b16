"""
Tests for the tracking worker loops.
"""

import logging
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from tracking_core.errors import PublishError
from tracking_core.handlers.listener import DispatchTrackingListener
from tracking_worker import main as worker


@pytest.fixture(autouse=True)
def reset_shutdown():
    worker.shutdown_requested.clear()
    yield
    worker.shutdown_requested.clear()


@pytest.fixture
def settings():
    return SimpleNamespace(
        TRACKING_BATCH_SIZE=5,
        TRACKING_BLOCK_MS=100,
        TRACKING_RECLAIM_INTERVAL=0,
        TRACKING_RECLAIM_IDLE_MS=1000,
    )


@pytest.fixture
def listener():
    return MagicMock(spec=DispatchTrackingListener)


class TestConsumeLoop:
    """Tests for the main consume loop."""

    def test_consumes_until_shutdown(self, listener, settings):
        def consume(count, block_ms):
            worker.shutdown_requested.set()
            return 3

        listener.consume.side_effect = consume

        worker.run_consume_loop(listener, settings)

        listener.consume.assert_called_once_with(count=5, block_ms=100)

    def test_does_not_start_after_shutdown(self, listener, settings):
        worker.shutdown_requested.set()

        worker.run_consume_loop(listener, settings)

        listener.consume.assert_not_called()

    def test_keeps_running_after_error(self, listener, settings, monkeypatch, caplog):
        """Test a failed batch is logged and the loop carries on."""
        sleeps = []
        monkeypatch.setattr(worker.time, "sleep", sleeps.append)
        calls = []

        def consume(count, block_ms):
            calls.append(count)
            if len(calls) == 1:
                raise PublishError("down", topic="tracking.status")
            worker.shutdown_requested.set()
            return 0

        listener.consume.side_effect = consume

        with caplog.at_level(logging.ERROR):
            worker.run_consume_loop(listener, settings)

        assert len(calls) == 2
        assert sleeps == [1]
        assert "Error in consume loop" in caplog.text


class TestReclaimLoop:
    """Tests for the PEL reclaim thread body."""

    def test_reclaims_until_shutdown(self, listener, settings):
        def reclaim(min_idle_ms):
            worker.shutdown_requested.set()
            return 2

        listener.reclaim.side_effect = reclaim

        worker.run_reclaim_loop(listener, settings)

        listener.reclaim.assert_called_once_with(min_idle_ms=1000)

    def test_exits_immediately_on_shutdown(self, listener, settings):
        worker.shutdown_requested.set()

        worker.run_reclaim_loop(listener, settings)

        listener.reclaim.assert_not_called()

    def test_survives_reclaim_error(self, listener, settings, caplog):
        calls = []

        def reclaim(min_idle_ms):
            calls.append(min_idle_ms)
            if len(calls) == 1:
                raise RuntimeError("redis gone")
            worker.shutdown_requested.set()
            return 0

        listener.reclaim.side_effect = reclaim

        with caplog.at_level(logging.ERROR):
            worker.run_reclaim_loop(listener, settings)

        assert len(calls) == 2
        assert "Error in reclaim loop" in caplog.text


class TestBuildListener:
    """Tests for wiring the listener from settings."""

    def test_uses_configured_stream_and_group(self):
        settings = SimpleNamespace(
            TRACKING_STREAM_MAX_LEN=500,
            TRACKING_CONSUMER_NAME="tracking-test-1",
            TRACKING_GROUP_NAME="tracking.test.group",
            TRACKING_INBOUND_STREAM="dispatch.tracking.test",
        )

        listener = worker.build_listener(settings, MagicMock())

        assert listener.stream_name == "dispatch.tracking.test"
        assert listener.consumer.group_name == "tracking.test.group"
        assert listener.consumer.consumer_name == "tracking-test-1"

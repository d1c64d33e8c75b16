"""
Stream handlers - feeding inbound messages to the tracking service.
"""

from tracking_core.handlers.listener import DispatchTrackingListener

__all__ = ["DispatchTrackingListener"]

"""Tracking service layer."""

from tracking_core.service.tracking import TrackingService

__all__ = ["TrackingService"]

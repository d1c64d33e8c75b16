"""Tracking worker service."""

"""Logging helpers."""

from .logging import ParkHubLogger

__all__ = ["ParkHubLogger"]

"""Configuration for the ParkHub pass client."""

from .settings import ClientConfig
from .constants import API_BASE_URL, LANDMARK_ID

__all__ = ["ClientConfig", "API_BASE_URL", "LANDMARK_ID"]

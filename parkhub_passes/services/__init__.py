"""Typed bindings for the ParkHub endpoints."""

from .events import EventsApi
from .passes import PassesApi

__all__ = ["EventsApi", "PassesApi"]

"""HTTP transport layer for the ParkHub API."""

from .client import AuthenticatedClient
from .interceptors import REQUEST, RESPONSE, InterceptorRegistry

__all__ = ["AuthenticatedClient", "InterceptorRegistry", "REQUEST", "RESPONSE"]

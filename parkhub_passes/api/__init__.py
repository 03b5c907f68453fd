from .client import ParkHubPassClient

__all__ = ["ParkHubPassClient"]

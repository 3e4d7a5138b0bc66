"""Clients for external providers used by the scheduling core."""

from .livekit_client import FakeLiveKitClient, LiveKitClient, LiveKitError

__all__ = ["FakeLiveKitClient", "LiveKitClient", "LiveKitError"]

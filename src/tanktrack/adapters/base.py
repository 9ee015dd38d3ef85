"""
Abstract base class for front-end platform adapters.

Every front-end platform must implement this interface. Core tracker
logic never imports platform-specific libraries; adapters translate
between the platform and the core services and reply through the
platform's own API.
"""

from abc import ABC, abstractmethod


class PlatformAdapter(ABC):
    """Lifecycle every platform adapter must implement."""

    @abstractmethod
    async def start(self) -> None:
        """Start listening for incoming updates (polling, webhook, etc.)."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Gracefully shut down the adapter."""
        ...

"""Base classes for replay alerting in PathWatch."""

from abc import ABC, abstractmethod


class ConfigurationError(Exception):
    """Raised when an alert transport is missing or rejects its settings."""


class BaseAlertReporter(ABC):
    """An outbound channel for replay failure alerts."""

    platform_name: str = "base"

    def is_configured(self) -> bool:
        return True

    @abstractmethod
    async def send(self, subject: str, body_html: str) -> bool:
        """Deliver an alert. Returns True on success."""

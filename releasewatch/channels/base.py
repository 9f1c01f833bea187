"""Base channel interface for Release Watch."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..core.release import NotificationMessage, ReleaseSeverity
from ..utils.logging import channel_logger


class ChannelDeliveryError(Exception):
    """A channel failed to deliver a message."""


@dataclass
class DeliveryResult:
    """Outcome of one delivery attempt on one channel."""

    channel: str
    success: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls, channel: str) -> "DeliveryResult":
        return cls(channel=channel, success=True)

    @classmethod
    def failed(cls, channel: str, error: str) -> "DeliveryResult":
        return cls(channel=channel, success=False, error=error)


class BaseChannel(ABC):
    """Abstract base class for notification channels."""

    def __init__(self, dry_run: bool = False):
        """
        Initialize the channel.

        Args:
            dry_run: Log messages instead of delivering them.
        """
        self.dry_run = dry_run

    @property
    @abstractmethod
    def name(self) -> str:
        """Return channel name for logging."""
        pass

    @property
    def log(self) -> logging.LoggerAdapter:
        """Logger tagged with this channel's name."""
        return channel_logger(logging.getLogger(type(self).__module__), self.name)

    @abstractmethod
    def is_configured(self) -> bool:
        """Return True if the channel has what it needs to deliver."""
        pass

    @abstractmethod
    def _deliver(self, message: NotificationMessage) -> None:
        """
        Deliver the message.

        Raises:
            ChannelDeliveryError: If the transport rejects the message.
        """
        pass

    def describe(self, message: NotificationMessage) -> str:
        """Short description of what would be sent, for dry runs."""
        return str(message)

    def send(self, message: NotificationMessage) -> DeliveryResult:
        """
        Send a message and report the outcome instead of raising.

        Args:
            message: Composed notification.

        Returns:
            DeliveryResult for this channel.
        """
        if not self.is_configured():
            return DeliveryResult.failed(self.name, "not configured")

        if self.dry_run:
            self.log.info(f"Dry run, would send: {self.describe(message)}")
            return DeliveryResult.ok(self.name)

        try:
            self._deliver(message)
        except ChannelDeliveryError as e:
            return DeliveryResult.failed(self.name, str(e))
        except Exception as e:
            return DeliveryResult.failed(self.name, f"{type(e).__name__}: {e}")

        self.log.info(f"Notification sent: {message}")
        return DeliveryResult.ok(self.name)

    def send_test(self) -> DeliveryResult:
        """Send a test message through this channel."""
        return self.send(build_test_message())


def build_test_message() -> NotificationMessage:
    """Message used by ``--test-channels``."""
    return NotificationMessage(
        version="test",
        latest="test",
        severity=ReleaseSeverity.NONE,
        short_version="test",
        email_vars={
            "version": "test",
            "latest": "test",
            "short_version": "test",
            "severity": "none",
            "release_notice": "Release Watch test message - email notifications are working!",
            "release_notes_url": "",
            "email": "",
            "website": "",
        },
        chat_text="Release Watch test message - Slack notifications are working!",
        subject="Release Watch test message",
    )

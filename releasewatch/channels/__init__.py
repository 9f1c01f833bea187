"""Notification channels for Release Watch."""

from .base import BaseChannel, ChannelDeliveryError, DeliveryResult
from .mail import EmailChannel, build_recipients, route_recipients
from .slack import SlackChannel

__all__ = [
    "BaseChannel",
    "ChannelDeliveryError",
    "DeliveryResult",
    "EmailChannel",
    "SlackChannel",
    "build_recipients",
    "route_recipients",
]

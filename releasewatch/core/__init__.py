"""Core version comparison and notification logic for Release Watch."""

from .release import UNKNOWN_VERSION, FeedEntry, NotificationMessage, ReleaseSeverity
from .policy import NotificationPolicy
from .composer import MessageComposer

__all__ = [
    "UNKNOWN_VERSION",
    "FeedEntry",
    "NotificationMessage",
    "ReleaseSeverity",
    "NotificationPolicy",
    "MessageComposer",
]

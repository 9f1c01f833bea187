"""Release data structures."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

# Sentinel returned when the latest release cannot be determined
UNKNOWN_VERSION = "unknown"


class ReleaseSeverity(Enum):
    """How far the deployed version lags behind the latest release."""

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other: "ReleaseSeverity") -> bool:
        if not isinstance(other, ReleaseSeverity):
            return NotImplemented
        return self.rank < other.rank

    def __bool__(self) -> bool:
        return self is not ReleaseSeverity.NONE


_RANKS = {
    ReleaseSeverity.NONE: 0,
    ReleaseSeverity.PATCH: 1,
    ReleaseSeverity.MINOR: 2,
    ReleaseSeverity.MAJOR: 3,
}


@dataclass
class FeedEntry:
    """A single release from the upstream feed."""

    tag_name: str
    is_stable: bool


@dataclass
class NotificationMessage:
    """Composed notification, ready for delivery on any channel."""

    version: str
    latest: str
    severity: ReleaseSeverity
    short_version: str
    email_vars: Dict[str, Any] = field(default_factory=dict)
    chat_text: str = ""
    subject: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.version} -> {self.latest} ({self.severity.value})"

"""Notification policy: which severity, if any, triggers a notification."""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Tuple

from .release import UNKNOWN_VERSION, ReleaseSeverity
from .version import is_major_difference, is_minor_difference, is_patch_difference

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeverityRule:
    """Fires ``severity`` when ``matches`` holds and its toggle is on."""

    severity: ReleaseSeverity
    matches: Callable[[str, str], bool]


# Evaluated top to bottom, first match wins. Patch (any inequality) must stay
# first, ahead of minor and major.
RULES: Tuple[SeverityRule, ...] = (
    SeverityRule(ReleaseSeverity.PATCH, is_patch_difference),
    SeverityRule(ReleaseSeverity.MINOR, is_minor_difference),
    SeverityRule(ReleaseSeverity.MAJOR, is_major_difference),
)


class NotificationPolicy:
    """Decide the severity to notify about for one cycle."""

    def __init__(self, rules: Tuple[SeverityRule, ...] = RULES):
        self.rules = rules

    def decide(
        self,
        enabled_globally: bool,
        version: str,
        latest: str,
        toggles: Mapping[ReleaseSeverity, bool],
    ) -> ReleaseSeverity:
        """
        Apply the rules in order and return the first severity that fires.

        Args:
            enabled_globally: Module-wide notification switch.
            version: Deployed version.
            latest: Latest upstream version, or ``"unknown"``.
            toggles: Per-severity notify flags; missing entries count as off.

        Returns:
            The severity whose rule matched, or NONE.
        """
        if not enabled_globally:
            logger.debug("Notifications disabled globally")
            return ReleaseSeverity.NONE

        if latest == UNKNOWN_VERSION:
            logger.debug("Latest version unknown, skipping comparison")
            return ReleaseSeverity.NONE

        rule = self.first_match(version, latest, toggles)
        if rule is None:
            return ReleaseSeverity.NONE

        logger.debug(f"Rule {rule.severity.value} fired for {version} -> {latest}")
        return rule.severity

    def first_match(
        self,
        version: str,
        latest: str,
        toggles: Mapping[ReleaseSeverity, bool],
    ) -> Optional[SeverityRule]:
        """Return the first rule whose condition and toggle both hold."""
        for rule in self.rules:
            if rule.matches(version, latest) and toggles.get(rule.severity, False):
                return rule
        return None


def toggles_from_flags(major: bool, minor: bool, patch: bool) -> Dict[ReleaseSeverity, bool]:
    """Build the toggle mapping from three config flags."""
    return {
        ReleaseSeverity.MAJOR: bool(major),
        ReleaseSeverity.MINOR: bool(minor),
        ReleaseSeverity.PATCH: bool(patch),
    }

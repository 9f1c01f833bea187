"""Message composition for email and chat channels."""

from typing import Any, Dict

from .release import NotificationMessage, ReleaseSeverity
from .version import short_version

DEFAULT_DOC_HOST = "devdocs.magento.com"

MAJOR_RELEASE_NOTICE = (
    "A new major release is available. Major releases can contain breaking "
    "changes, so plan the upgrade with your developer."
)
MINOR_RELEASE_NOTICE = (
    "A new release is available. It contains fixes and improvements and "
    "should be installed soon."
)

CHAT_PROMPT = "A new release is available for your shop. Please consider updating."


class MessageComposer:
    """Build channel payloads from version and severity data."""

    def __init__(self, doc_host: str = DEFAULT_DOC_HOST):
        self.doc_host = doc_host

    def release_notes_url(self, version: str) -> str:
        """Documentation link for the release notes of ``version``."""
        return (
            f"https://{self.doc_host}/guides/v{short_version(version)}"
            "/release-notes/bk-release-notes.html"
        )

    @staticmethod
    def release_notice(severity: ReleaseSeverity) -> str:
        if severity is ReleaseSeverity.MAJOR:
            return MAJOR_RELEASE_NOTICE
        return MINOR_RELEASE_NOTICE

    def compose_email_vars(
        self,
        version: str,
        latest: str,
        severity: ReleaseSeverity,
        contact_email: str = "",
        contact_website: str = "",
    ) -> Dict[str, Any]:
        """
        Build template variables for the email body.

        Args:
            version: Deployed version.
            latest: Latest upstream version.
            severity: Severity label the policy attached.
            contact_email: Support contact shown in the footer.
            contact_website: Support website shown in the footer.

        Returns:
            Mapping of template variable names to values.
        """
        return {
            "version": version,
            "latest": latest,
            "short_version": short_version(latest),
            "severity": severity.value,
            "release_notice": self.release_notice(severity),
            "release_notes_url": self.release_notes_url(latest),
            "email": contact_email,
            "website": contact_website,
        }

    def compose_chat_text(
        self,
        version: str,
        latest: str,
        severity: ReleaseSeverity,
    ) -> str:
        """Build the plain-text chat message."""
        return "\n".join(
            [
                CHAT_PROMPT,
                f"Current version: {version}",
                f"Latest version: {latest}",
                self.release_notes_url(latest),
            ]
        )

    def compose(
        self,
        version: str,
        latest: str,
        severity: ReleaseSeverity,
        contact_email: str = "",
        contact_website: str = "",
    ) -> NotificationMessage:
        """Build a NotificationMessage carrying both payloads."""
        return NotificationMessage(
            version=version,
            latest=latest,
            severity=severity,
            short_version=short_version(latest),
            email_vars=self.compose_email_vars(
                version, latest, severity, contact_email, contact_website
            ),
            chat_text=self.compose_chat_text(version, latest, severity),
            subject=f"New {severity.value} release available: {latest}",
        )

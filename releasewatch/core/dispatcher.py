"""Notification cycle orchestration."""

import logging
from typing import Callable, List, Optional, Tuple

from ..channels.base import BaseChannel, DeliveryResult
from ..channels.mail import EmailChannel
from ..channels.slack import SlackChannel
from ..config import Config
from ..feed.client import ReleaseFeedClient
from .composer import MessageComposer
from .policy import NotificationPolicy, toggles_from_flags
from .release import UNKNOWN_VERSION, NotificationMessage, ReleaseSeverity
from .version import classify_difference

logger = logging.getLogger(__name__)


def build_feed_client(config: Config) -> ReleaseFeedClient:
    """Create the feed client described by ``config.feed``."""
    return ReleaseFeedClient(
        url=config.feed.url,
        timeout=config.feed.timeout,
        user_agent=config.feed.user_agent,
        unstable_marker=config.feed.unstable_marker,
        max_tag_length=config.feed.max_tag_length,
        github_token=config.feed.github_token,
    )


def build_channels(config: Config, dry_run: bool = False) -> List[BaseChannel]:
    """Create the enabled channels, email first."""
    channels: List[BaseChannel] = []

    if config.email.enabled:
        channels.append(
            EmailChannel(
                sender_email=config.email.sender_email,
                sender_name=config.email.sender_name,
                customer_email=config.email.customer_email,
                developer_email=config.email.developer_email,
                template=config.email.template,
                smtp_host=config.email.smtp_host,
                smtp_port=config.email.smtp_port,
                smtp_username=config.email.smtp_username,
                smtp_password=config.email.smtp_password,
                use_tls=config.email.use_tls,
                dry_run=dry_run,
            )
        )

    if config.slack.enabled:
        channels.append(
            SlackChannel(
                token=config.slack.token,
                channel=config.slack.channel,
                username=config.slack.username,
                dry_run=dry_run,
            )
        )

    return channels


class NotificationDispatcher:
    """
    Run one notification cycle.

    Fetches the latest release, applies the notification policy, composes
    the message and delivers it on every enabled channel. A failing channel
    never stops the others and nothing is raised to the caller.
    """

    def __init__(
        self,
        dry_run: bool = False,
        policy: Optional[NotificationPolicy] = None,
        feed_factory: Callable[[Config], ReleaseFeedClient] = build_feed_client,
        channel_factory: Callable[[Config, bool], List[BaseChannel]] = build_channels,
    ):
        """
        Initialize the dispatcher.

        Args:
            dry_run: Compose and log messages without delivering them.
            policy: Notification policy (defaults to the standard rule order).
            feed_factory: Builds the feed client from the config.
            channel_factory: Builds the enabled channels from the config.
        """
        self.dry_run = dry_run
        self.policy = policy or NotificationPolicy()
        self._feed_factory = feed_factory
        self._channel_factory = channel_factory

    def evaluate(self, config: Config, current_version: str) -> Tuple[str, ReleaseSeverity]:
        """Fetch the latest tag and decide the severity to notify about."""
        latest = self._feed_factory(config).fetch_latest_release_tag()

        severity = self.policy.decide(
            config.notify.enabled,
            current_version,
            latest,
            toggles_from_flags(
                major=config.notify.major,
                minor=config.notify.minor,
                patch=config.notify.patch,
            ),
        )
        return latest, severity

    def run(self, config: Config, current_version: str) -> List[DeliveryResult]:
        """
        Run a full cycle.

        Args:
            config: Configuration for this cycle.
            current_version: Version of the deployed application.

        Returns:
            One DeliveryResult per enabled channel; empty if nothing was sent.
        """
        latest, severity = self.evaluate(config, current_version)
        if latest != UNKNOWN_VERSION:
            difference = classify_difference(current_version, latest).value
            logger.info(f"Installed {current_version}, latest {latest} ({difference} difference)")

        if severity is ReleaseSeverity.NONE:
            logger.info("No notification required")
            return []

        composer = MessageComposer(doc_host=config.messages.doc_host)
        message = composer.compose(
            current_version,
            latest,
            severity,
            contact_email=config.email.contact_email,
            contact_website=config.email.contact_website,
        )

        channels = self._channel_factory(config, self.dry_run)
        if not channels:
            logger.warning(f"Release {latest} is {severity.value}-level but no channel is enabled")
            return []

        results = [self._send(channel, message) for channel in channels]

        sent = sum(1 for r in results if r.success)
        logger.info(f"Notified {sent}/{len(results)} channel(s) about {message}")
        return results

    @staticmethod
    def _send(channel: BaseChannel, message: NotificationMessage) -> DeliveryResult:
        try:
            result = channel.send(message)
        except Exception as e:
            result = DeliveryResult.failed(channel.name, f"{type(e).__name__}: {e}")

        if not result.success:
            logger.error(f"Delivery failed: {result.error}", extra={"channel": result.channel})
        return result

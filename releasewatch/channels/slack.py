"""Slack chat channel using the Slack Web API."""

from typing import Optional

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from ..core.release import NotificationMessage
from .base import BaseChannel, ChannelDeliveryError


class SlackChannel(BaseChannel):
    """
    Post notifications to a Slack channel.

    Uses ``chat.postMessage`` with a bot token.
    """

    def __init__(
        self,
        token: str = "",
        channel: str = "",
        username: str = "Release Watch",
        dry_run: bool = False,
        client: Optional[WebClient] = None,
    ):
        """
        Initialize the Slack channel.

        Args:
            token: Slack bot token.
            channel: Channel name or ID to post to.
            username: Display name for the posted message.
            dry_run: Log instead of posting.
            client: Optional preconfigured WebClient.
        """
        super().__init__(dry_run=dry_run)
        self.token = token
        self.channel = channel
        self.username = username
        self._client = client

    @property
    def name(self) -> str:
        return "slack"

    def is_configured(self) -> bool:
        return bool(self.token and self.channel)

    def _get_client(self) -> WebClient:
        if self._client is None:
            self._client = WebClient(token=self.token)
        return self._client

    def describe(self, message: NotificationMessage) -> str:
        return f"{self.channel}: {message.chat_text!r}"

    def _deliver(self, message: NotificationMessage) -> None:
        try:
            response = self._get_client().chat_postMessage(
                channel=self.channel,
                text=message.chat_text,
                username=self.username,
            )
        except SlackApiError as e:
            error = e.response.get("error", str(e)) if e.response is not None else str(e)
            raise ChannelDeliveryError(f"Slack API error: {error}") from e

        self.log.debug(f"Slack message posted: ts={response.get('ts')}")


"""Upstream release feed client using the GitHub releases API."""

import logging
from typing import Any, List, Optional

import requests

from ..core.release import UNKNOWN_VERSION, FeedEntry

logger = logging.getLogger(__name__)

DEFAULT_FEED_URL = "https://api.github.com/repos/magento/magento2/releases"
DEFAULT_USER_AGENT = "releasewatch-version-checker"


class FeedUnavailable(Exception):
    """The release feed could not be fetched or parsed."""


def is_stable_tag(tag_name: str, unstable_marker: str = "develop", max_length: int = 0) -> bool:
    """
    Check whether a tag names a stable release.

    Args:
        tag_name: Release tag from the feed.
        unstable_marker: Substring that marks a pre-release tag.
        max_length: Reject tags longer than this; 0 disables the check.

    Returns:
        True if the tag is stable.
    """
    if unstable_marker and unstable_marker in tag_name:
        return False
    if max_length and len(tag_name) > max_length:
        return False
    return True


def parse_feed(payload: Any, unstable_marker: str = "develop", max_length: int = 0) -> List[FeedEntry]:
    """
    Turn a decoded feed payload into FeedEntry objects, keeping feed order.

    Entries that are not objects or lack a string ``tag_name`` are skipped.

    Raises:
        FeedUnavailable: If the payload is not a list.
    """
    if not isinstance(payload, list):
        raise FeedUnavailable(f"Expected a list of releases, got {type(payload).__name__}")

    entries = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        tag_name = item.get("tag_name")
        if not isinstance(tag_name, str) or not tag_name:
            continue
        entries.append(
            FeedEntry(
                tag_name=tag_name,
                is_stable=is_stable_tag(tag_name, unstable_marker, max_length),
            )
        )
    return entries


def select_latest_tag(entries: List[FeedEntry]) -> str:
    """Return the first stable tag in feed order, or ``"unknown"``."""
    for entry in entries:
        if entry.is_stable:
            return entry.tag_name
    return UNKNOWN_VERSION


class ReleaseFeedClient:
    """
    Fetch the latest stable release tag.

    Makes one request per call, with no retry and no caching.
    """

    def __init__(
        self,
        url: str = DEFAULT_FEED_URL,
        timeout: float = 5.0,
        user_agent: str = DEFAULT_USER_AGENT,
        unstable_marker: str = "develop",
        max_tag_length: int = 0,
        github_token: str = "",
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the feed client.

        Args:
            url: Releases endpoint returning a JSON array, newest first.
            timeout: Request timeout in seconds.
            user_agent: User-Agent header (GitHub rejects requests without one).
            unstable_marker: Substring that marks a pre-release tag.
            max_tag_length: Reject longer tags; 0 disables the check.
            github_token: Optional token to raise the API rate limit.
            session: Optional requests session to reuse; the caller owns it.
                A private session is opened and closed per fetch otherwise.
        """
        self.url = url
        self.timeout = timeout
        self.user_agent = user_agent
        self.unstable_marker = unstable_marker
        self.max_tag_length = max_tag_length
        self.github_token = github_token
        self._session = session

    def _headers(self) -> dict:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/vnd.github+json",
        }
        if self.github_token:
            headers["Authorization"] = f"Bearer {self.github_token}"
        return headers

    def fetch_entries(self) -> List[FeedEntry]:
        """
        Fetch and parse the feed.

        Raises:
            FeedUnavailable: On transport errors, timeouts, bad status or bad JSON.
        """
        if self._session is not None:
            return self._fetch(self._session)

        with requests.Session() as session:
            return self._fetch(session)

    def _fetch(self, session: requests.Session) -> List[FeedEntry]:
        try:
            response = session.get(self.url, headers=self._headers(), timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise FeedUnavailable(f"Request to {self.url} failed: {e}") from e
        except ValueError as e:
            raise FeedUnavailable(f"Invalid JSON from {self.url}: {e}") from e

        return parse_feed(payload, self.unstable_marker, self.max_tag_length)

    def fetch_latest_release_tag(self) -> str:
        """
        Return the newest stable tag, or ``"unknown"`` if it can't be determined.

        Never raises for feed problems.
        """
        try:
            entries = self.fetch_entries()
        except FeedUnavailable as e:
            logger.warning(f"Release feed unavailable: {e}")
            return UNKNOWN_VERSION

        latest = select_latest_tag(entries)
        if latest == UNKNOWN_VERSION:
            logger.warning(f"No stable release found among {len(entries)} feed entries")
        else:
            logger.debug(f"Latest stable release: {latest}")
        return latest

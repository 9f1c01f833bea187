"""Upstream release feed."""

from .client import FeedUnavailable, ReleaseFeedClient, parse_feed, select_latest_tag

__all__ = ["FeedUnavailable", "ReleaseFeedClient", "parse_feed", "select_latest_tag"]

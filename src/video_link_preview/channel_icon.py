"""Channel icon lookup via the YouTube Data API v3."""

import logging
from typing import Any

import httpx

from .config import Settings, get_settings
from .exceptions import ChannelIconUnavailableError

logger = logging.getLogger(__name__)


class YouTubeChannelIconProvider:
    """Resolves a channel's default profile image in two steps.

    First the channel directory is searched for the author reference to get a
    channel ID, then the channel details are fetched for that ID.
    """

    def __init__(
        self,
        api_key: str,
        search_endpoint: str,
        channels_endpoint: str,
        timeout: float = 10.0,
    ):
        """Initialize with YouTube API key and endpoints."""
        self.api_key = api_key
        self.search_endpoint = search_endpoint
        self.channels_endpoint = channels_endpoint
        self.timeout = timeout

    @classmethod
    def from_settings(cls, api_key: str, settings: Settings) -> "YouTubeChannelIconProvider":
        return cls(
            api_key,
            search_endpoint=settings.youtube_search_endpoint,
            channels_endpoint=settings.youtube_channels_endpoint,
            timeout=settings.request_timeout_seconds,
        )

    def _get_items(self, endpoint: str, params: dict[str, Any]) -> list[Any]:
        """Issue a GET request and return the response's items list."""
        try:
            response = httpx.get(
                endpoint,
                params={**params, "key": self.api_key},
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise ChannelIconUnavailableError(
                f"YouTube API error from {endpoint}: {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise ChannelIconUnavailableError(f"YouTube API request failed: {e}") from e
        except ValueError as e:
            raise ChannelIconUnavailableError(f"YouTube API returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ChannelIconUnavailableError("YouTube API returned an unexpected body")

        items = data.get("items") or []
        if not isinstance(items, list):
            raise ChannelIconUnavailableError("YouTube API 'items' is not a list")
        return items

    def find_channel_id(self, author_ref: str) -> str:
        """Search the channel directory and return the first channel ID.

        Raises:
            ChannelIconUnavailableError: If the search fails or finds nothing
        """
        items = self._get_items(
            self.search_endpoint,
            {"part": "snippet", "q": author_ref, "type": "channel", "maxResults": 1},
        )
        if not items:
            raise ChannelIconUnavailableError(f"No channel found for '{author_ref}'")

        first = items[0] if isinstance(items[0], dict) else {}
        # Search results carry the ID in snippet.channelId and id.channelId
        channel_id = None
        for block in (first.get("snippet"), first.get("id")):
            if isinstance(block, dict) and block.get("channelId"):
                channel_id = block["channelId"]
                break
        if not channel_id or not isinstance(channel_id, str):
            raise ChannelIconUnavailableError(f"Search result for '{author_ref}' has no channel ID")

        return channel_id

    def fetch_channel_thumbnail(self, channel_id: str) -> str:
        """Fetch channel details and return the default thumbnail URL.

        Raises:
            ChannelIconUnavailableError: If the fetch fails or has no thumbnail
        """
        items = self._get_items(self.channels_endpoint, {"part": "snippet", "id": channel_id})
        if not items:
            raise ChannelIconUnavailableError(f"Channel {channel_id} not found")

        try:
            url = items[0]["snippet"]["thumbnails"]["default"]["url"]
        except (KeyError, TypeError) as e:
            raise ChannelIconUnavailableError(
                f"Channel {channel_id} has no default thumbnail"
            ) from e

        if not url or not isinstance(url, str):
            raise ChannelIconUnavailableError(f"Channel {channel_id} has an empty thumbnail")

        return url

    def fetch_icon(self, author_ref: str) -> str:
        """Resolve the icon URL for an author reference."""
        channel_id = self.find_channel_id(author_ref)
        return self.fetch_channel_thumbnail(channel_id)


def resolve_channel_icon(
    author_ref: str, api_key: str, settings: Settings | None = None
) -> str | None:
    """Resolve a channel icon URL, degrading to None on any failure.

    Args:
        author_ref: Author/channel reference used for the directory search
        api_key: YouTube Data API key
        settings: Settings for endpoints and timeout (uses default if None)

    Returns:
        Icon URL, or None if it could not be resolved
    """
    if not api_key:
        logger.warning("YouTube API key not configured - skipping channel icon lookup")
        return None
    if not author_ref:
        logger.warning("No author reference available - skipping channel icon lookup")
        return None

    settings = settings or get_settings()
    provider = YouTubeChannelIconProvider.from_settings(api_key, settings)

    try:
        icon_url = provider.fetch_icon(author_ref)
    except ChannelIconUnavailableError as e:
        logger.warning(f"Channel icon unavailable for '{author_ref}': {e}")
        return None

    logger.debug(f"Resolved channel icon for '{author_ref}'")
    return icon_url

"""Video metadata lookup through an oEmbed-style service."""

import logging
from typing import Any

import httpx

from .channel_icon import resolve_channel_icon
from .config import Settings
from .exceptions import MetadataUnavailableError
from .models import VideoMetadata

logger = logging.getLogger(__name__)


class OEmbedMetadataProvider:
    """Metadata provider using an oEmbed-compatible lookup (noembed by default)."""

    def __init__(self, endpoint: str, timeout: float = 10.0):
        """Initialize with lookup endpoint."""
        self.endpoint = endpoint
        self.timeout = timeout

    def fetch(self, url: str) -> dict[str, Any]:
        """Fetch embed info for a video URL.

        Args:
            url: Video URL

        Returns:
            Dictionary with title, author_name, thumbnail_url and author_url

        Raises:
            MetadataUnavailableError: If the lookup fails or required fields are missing
        """
        try:
            response = httpx.get(
                self.endpoint,
                params={"url": url},
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise MetadataUnavailableError(
                f"Embed lookup error for {url}: {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise MetadataUnavailableError(f"Embed lookup request failed for {url}: {e}") from e
        except ValueError as e:
            raise MetadataUnavailableError(f"Embed lookup returned invalid JSON for {url}") from e

        if not isinstance(data, dict):
            raise MetadataUnavailableError(f"Unexpected embed response for {url}")

        # noembed answers unsupported or private videos with 200 and an error field
        if data.get("error"):
            raise MetadataUnavailableError(f"Embed lookup rejected {url}: {data['error']}")

        title = data.get("title")
        author_name = data.get("author_name")
        if not isinstance(title, str) or not title.strip():
            raise MetadataUnavailableError(f"Embed response for {url} has no title")
        if not isinstance(author_name, str) or not author_name.strip():
            raise MetadataUnavailableError(f"Embed response for {url} has no author name")

        thumbnail_url = data.get("thumbnail_url")
        author_url = data.get("author_url")

        return {
            "title": title.strip(),
            "author_name": author_name.strip(),
            "thumbnail_url": thumbnail_url if isinstance(thumbnail_url, str) else "",
            "author_url": author_url if isinstance(author_url, str) else None,
        }


def resolve_metadata(url: str, settings: Settings) -> VideoMetadata | None:
    """Resolve a video URL into a metadata record.

    The channel icon is only looked up when settings.show_channel_icon is
    enabled; a failed icon lookup leaves channel_icon_url unset.

    Args:
        url: Recognized video URL
        settings: Current settings

    Returns:
        VideoMetadata, or None if the lookup failed at any step
    """
    provider = OEmbedMetadataProvider(settings.oembed_endpoint, settings.request_timeout_seconds)

    try:
        embed = provider.fetch(url)
    except MetadataUnavailableError as e:
        logger.warning(f"Metadata unavailable, leaving link untouched: {e}")
        return None

    channel_icon_url = None
    if settings.show_channel_icon:
        channel_icon_url = resolve_channel_icon(
            embed["author_name"], settings.youtube_api_key, settings
        )

    logger.info(f"Resolved metadata for {url}: {embed['title']!r}")

    return VideoMetadata(
        title=embed["title"],
        author_name=embed["author_name"],
        thumbnail_url=embed["thumbnail_url"],
        source_url=url,
        author_url=embed["author_url"],
        channel_icon_url=channel_icon_url,
    )

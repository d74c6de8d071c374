"""Pytest configuration and fixtures."""

import os
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any
from unittest.mock import Mock, patch

import httpx
import pytest

from video_link_preview.config import Settings, get_settings

OEMBED_ENDPOINT = "https://noembed.test/embed"
SEARCH_ENDPOINT = "https://youtube.test/v3/search"
CHANNELS_ENDPOINT = "https://youtube.test/v3/channels"


@pytest.fixture(autouse=True)
def mock_settings_env() -> Iterator[Path]:
    """Run every test from a temporary directory holding a test .env file.

    Keeps tests independent of a developer's own .env and of ~/.vlp.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        env_file = Path(tmpdir) / ".env"

        env_content = f"""
SHOW_THUMBNAIL=true
SHOW_CHANNEL_ICON=true
OEMBED_ENDPOINT={OEMBED_ENDPOINT}
YOUTUBE_SEARCH_ENDPOINT={SEARCH_ENDPOINT}
YOUTUBE_CHANNELS_ENDPOINT={CHANNELS_ENDPOINT}
REQUEST_TIMEOUT_SECONDS=5
LOG_FILE={tmpdir}/logs/enrich.log
"""
        env_file.write_text(env_content.strip())

        original_cwd = os.getcwd()
        os.chdir(tmpdir)
        get_settings.cache_clear()

        settings_file = Path(tmpdir) / ".vlp" / "settings.json"
        with patch("video_link_preview.config.DEFAULT_SETTINGS_FILE", settings_file):
            yield Path(tmpdir)

        get_settings.cache_clear()
        os.chdir(original_cwd)


@pytest.fixture
def settings() -> Settings:
    """Settings with thumbnails, channel icons and an API key."""
    return Settings(
        show_thumbnail=True,
        show_channel_icon=True,
        youtube_api_key="test-yt-key",
        oembed_endpoint=OEMBED_ENDPOINT,
        youtube_search_endpoint=SEARCH_ENDPOINT,
        youtube_channels_endpoint=CHANNELS_ENDPOINT,
    )


@pytest.fixture
def make_response() -> Callable[..., Mock]:
    """Build mock httpx responses.

    Usage:
        make_response({"title": "..."})
        make_response(status_code=500)
        make_response(invalid_json=True)
    """

    def _make(
        json_data: Any = None, status_code: int = 200, invalid_json: bool = False
    ) -> Mock:
        response = Mock()
        response.status_code = status_code

        if status_code >= 400:
            response.raise_for_status.side_effect = httpx.HTTPStatusError(
                f"HTTP {status_code}", request=Mock(), response=response
            )
        else:
            response.raise_for_status = Mock()

        if invalid_json:
            response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        else:
            response.json.return_value = json_data

        return response

    return _make


@pytest.fixture
def oembed_body() -> dict[str, str]:
    """Typical noembed response for a YouTube video."""
    return {
        "title": "Never Gonna Give You Up",
        "author_name": "Rick Astley",
        "author_url": "https://www.youtube.com/@RickAstleyYT",
        "thumbnail_url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
        "provider_name": "YouTube",
        "type": "video",
    }


@pytest.fixture
def search_body() -> dict[str, Any]:
    """YouTube Data API search response with one channel."""
    return {
        "items": [
            {
                "id": {"kind": "youtube#channel", "channelId": "UCuAXFkgsw1L7xaCfnd5JJOw"},
                "snippet": {"channelId": "UCuAXFkgsw1L7xaCfnd5JJOw", "title": "Rick Astley"},
            }
        ]
    }


@pytest.fixture
def channels_body() -> dict[str, Any]:
    """YouTube Data API channels response with profile thumbnails."""
    return {
        "items": [
            {
                "id": "UCuAXFkgsw1L7xaCfnd5JJOw",
                "snippet": {
                    "title": "Rick Astley",
                    "thumbnails": {
                        "default": {"url": "https://yt3.ggpht.com/rick=s88"},
                        "medium": {"url": "https://yt3.ggpht.com/rick=s240"},
                    },
                },
            }
        ]
    }


@pytest.fixture
def routed_get(
    make_response: Callable[..., Mock],
    oembed_body: dict[str, str],
    search_body: dict[str, Any],
    channels_body: dict[str, Any],
) -> Callable[..., Mock]:
    """Side effect for httpx.get that answers all three services successfully."""
    bodies = {
        OEMBED_ENDPOINT: oembed_body,
        SEARCH_ENDPOINT: search_body,
        CHANNELS_ENDPOINT: channels_body,
    }

    def _get(url: str, **kwargs: Any) -> Mock:
        if url not in bodies:
            raise RuntimeError(f"Unexpected request to {url}")
        return make_response(bodies[url])

    return _get


@pytest.fixture(autouse=False)
def disable_network_calls(monkeypatch: pytest.MonkeyPatch) -> None:
    """Fail loudly if code under test tries a real HTTP request."""

    def mock_get(*args: Any, **kwargs: Any) -> None:
        raise RuntimeError(
            f"Attempted real network call to GET {args[0] if args else 'unknown'}. "
            "Use mocked responses in tests."
        )

    monkeypatch.setattr("httpx.get", mock_get)

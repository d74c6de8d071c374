"""Construction of the replacement element for an enriched video link."""

from bs4 import BeautifulSoup, Tag

from .config import Settings
from .models import VideoMetadata

# Class on the outer element; the pipeline skips anything inside it
CONTAINER_CLASS = "video-metadata-container"


def build_replacement(metadata: VideoMetadata, settings: Settings) -> Tag:
    """Build the replacement element for a resolved video link.

    Layout:
        <a class="video-metadata-container" href=... target="_blank" rel=...>
          <img class="video-thumbnail">            (optional)
          <div class="video-details">
            <img class="video-channel-icon">       (optional)
            <div class="video-info">
              <div class="video-title">...</div>
              <div class="video-author">by ...</div>
            </div>
          </div>
        </a>

    Args:
        metadata: Resolved metadata record
        settings: Current settings (show_thumbnail is honored here)

    Returns:
        Detached BeautifulSoup Tag
    """
    soup = BeautifulSoup("", "html.parser")

    container = soup.new_tag(
        "a",
        attrs={
            "class": CONTAINER_CLASS,
            "href": metadata.source_url,
            "target": "_blank",
            "rel": "noopener noreferrer",
        },
    )

    if settings.show_thumbnail and metadata.thumbnail_url:
        container.append(
            soup.new_tag(
                "img",
                attrs={
                    "class": "video-thumbnail",
                    "src": metadata.thumbnail_url,
                    "alt": metadata.title,
                },
            )
        )

    details = soup.new_tag("div", attrs={"class": "video-details"})

    if metadata.channel_icon_url:
        details.append(
            soup.new_tag(
                "img",
                attrs={
                    "class": "video-channel-icon",
                    "src": metadata.channel_icon_url,
                    "alt": metadata.author_name,
                },
            )
        )

    info = soup.new_tag("div", attrs={"class": "video-info"})

    title = soup.new_tag("div", attrs={"class": "video-title"})
    title.string = metadata.title
    info.append(title)

    author = soup.new_tag("div", attrs={"class": "video-author"})
    author.string = f"by {metadata.author_name}"
    info.append(author)

    details.append(info)
    container.append(details)

    return container


def render_replacement_html(metadata: VideoMetadata, settings: Settings) -> str:
    """Render the replacement element as an HTML string."""
    return str(build_replacement(metadata, settings))

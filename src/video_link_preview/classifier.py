"""Recognition of video hosting URLs."""

import re

# Canonical host and its short-link domain, with an optional www. prefix
_HOST = r"(?:www\.)?(?:youtube\.com|youtu\.be)"

VIDEO_URL_RE = re.compile(rf"https?://{_HOST}/\S+", re.IGNORECASE)

# Used when scanning raw markup: a URL ends at whitespace, quotes or tag brackets
VIDEO_URL_PATTERN = re.compile(rf"(?<![\w./-])https?://{_HOST}/[^\s\"'<>]+", re.IGNORECASE)


def is_video_url(url: str) -> bool:
    """Check whether a string is a recognized video URL.

    Supports:
    - https://www.youtube.com/watch?v=VIDEO_ID
    - https://youtube.com/shorts/VIDEO_ID
    - https://youtu.be/VIDEO_ID
    - http:// variants of the above

    Hosts that merely contain the domain (notyoutube.com,
    youtube.com.example.net) are rejected.

    Args:
        url: Candidate URL

    Returns:
        True if the whole string is a video URL, False otherwise
    """
    if not isinstance(url, str):
        return False
    return VIDEO_URL_RE.fullmatch(url) is not None

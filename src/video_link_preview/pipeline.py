"""Enrichment pipeline: find video links in rendered content and replace them.

Two integration styles are supported:

- ``anchors``: parse the markup and treat every ``<a href>`` element as a
  candidate. The element's exact source span (open tag through close tag)
  is located in the original string.
- ``text``: scan raw markup for bare URLs in text outside tags and outside
  existing ``<a>`` elements, recording each URL's exact character offsets.

Either way, replacements are spliced into the original string back to front,
so everything outside a replaced span is kept byte for byte and repeated URL
strings are each replaced at their own position.

Candidates are processed one at a time in document order. Elements produced
by a previous pass are never treated as candidates again.
"""

import html
import logging
import re
from collections.abc import Callable
from typing import Literal

from bs4 import BeautifulSoup, Tag

from .classifier import VIDEO_URL_PATTERN, is_video_url
from .config import Settings, SettingsStore
from .metadata import resolve_metadata
from .models import CandidateLink, EnrichmentResult, VideoMetadata
from .render import CONTAINER_CLASS, render_replacement_html

logger = logging.getLogger(__name__)

EnrichmentMode = Literal["anchors", "text"]
MetadataResolver = Callable[[str, Settings], VideoMetadata | None]

# Markup tokens (comments and tags) separating text runs
_TOKEN_RE = re.compile(r"<!--.*?-->|<[^>]*>", re.DOTALL)
_ANCHOR_OPEN_RE = re.compile(r"<a[\s>]", re.IGNORECASE)
_ANCHOR_CLOSE_RE = re.compile(r"</a\s*>", re.IGNORECASE)

# Sentence punctuation directly after a bare URL is not part of it
_TRAILING_PUNCTUATION = ".,;:!?)"


# =============================================================================
# Candidate discovery
# =============================================================================


def _is_generated(tag: Tag) -> bool:
    """Check whether an element was produced by a previous enrichment pass."""
    if CONTAINER_CLASS in (tag.get("class") or []):
        return True
    return tag.find_parent(class_=CONTAINER_CLASS) is not None


def _line_offsets(content: str) -> list[int]:
    """Character offset at which each source line starts."""
    offsets = [0]
    offsets.extend(match.end() for match in re.finditer("\n", content))
    return offsets


def _anchor_span(content: str, anchor: Tag, line_offsets: list[int]) -> tuple[int, int] | None:
    """Locate an anchor element's exact markup, from ``<a`` through ``</a>``.

    The start comes from the parser's recorded source position; the end is
    the matching close tag. Returns None when either cannot be found.
    """
    if anchor.sourceline is None or anchor.sourcepos is None:
        return None
    start = line_offsets[anchor.sourceline - 1] + anchor.sourcepos
    if not _ANCHOR_OPEN_RE.match(content, start):
        return None

    depth = 0
    for token in _TOKEN_RE.finditer(content, start):
        markup = token.group(0)
        if _ANCHOR_OPEN_RE.match(markup):
            depth += 1
        elif _ANCHOR_CLOSE_RE.match(markup):
            depth -= 1
            if depth == 0:
                return start, token.end()
    return None


def _anchor_candidates(content: str) -> list[CandidateLink]:
    """Collect hyperlink elements in document order, with their source spans."""
    soup = BeautifulSoup(content, "html.parser")
    line_offsets = _line_offsets(content)
    found: list[CandidateLink] = []

    for anchor in soup.find_all("a", href=True):
        if _is_generated(anchor):
            continue
        href = anchor.get("href")
        if not isinstance(href, str):
            continue
        span = _anchor_span(content, anchor, line_offsets)
        start, end = span if span else (None, None)
        found.append(CandidateLink(url=href.strip(), position=len(found), start=start, end=end))
    return found


def _scan_text_run(content: str, start: int, end: int, found: list[CandidateLink]) -> None:
    for match in VIDEO_URL_PATTERN.finditer(content, start, end):
        raw = match.group(0).rstrip(_TRAILING_PUNCTUATION)
        found.append(
            CandidateLink(
                url=html.unescape(raw),
                position=len(found),
                start=match.start(),
                end=match.start() + len(raw),
            )
        )


def _text_candidates(content: str) -> list[CandidateLink]:
    """Collect bare URLs from text runs outside tags and anchors."""
    found: list[CandidateLink] = []
    anchor_depth = 0
    cursor = 0

    for token in _TOKEN_RE.finditer(content):
        if anchor_depth == 0:
            _scan_text_run(content, cursor, token.start(), found)

        markup = token.group(0)
        if _ANCHOR_OPEN_RE.match(markup):
            anchor_depth += 1
        elif _ANCHOR_CLOSE_RE.match(markup):
            anchor_depth = max(0, anchor_depth - 1)
        cursor = token.end()

    if anchor_depth == 0:
        _scan_text_run(content, cursor, len(content), found)

    return found


def find_candidates(content: str, mode: EnrichmentMode = "anchors") -> list[CandidateLink]:
    """Find candidate links in rendered content, in document order.

    Args:
        content: Rendered HTML fragment
        mode: "anchors" (hyperlink elements) or "text" (bare URLs in markup)

    Returns:
        Candidate links; not yet classified

    Raises:
        ValueError: If mode is not recognized
    """
    if mode == "anchors":
        return _anchor_candidates(content)
    if mode == "text":
        return _text_candidates(content)
    raise ValueError(f"Unknown enrichment mode: {mode}")


# =============================================================================
# Pipeline
# =============================================================================


class EnrichmentPipeline:
    """Replaces recognized video links with enriched preview elements."""

    def __init__(
        self,
        settings: Settings | None = None,
        resolver: MetadataResolver | None = None,
        mode: EnrichmentMode = "anchors",
    ):
        """Initialize pipeline.

        Args:
            settings: Settings read during each pass (loads the saved
                settings file if None)
            resolver: Metadata resolver (default: resolve_metadata)
            mode: Candidate discovery mode, "anchors" or "text"
        """
        if mode not in ("anchors", "text"):
            raise ValueError(f"Unknown enrichment mode: {mode}")

        self.settings = settings or SettingsStore().load()
        self.resolver = resolver or resolve_metadata
        self.mode = mode

    def _resolve(self, candidate: CandidateLink) -> VideoMetadata | None:
        """Resolve one recognized candidate, degrading to None."""
        try:
            return self.resolver(candidate.url, self.settings)
        except Exception as e:
            # Resolution failures never abort the pass
            logger.error(f"Unexpected error resolving {candidate.url}: {e}")
            return None

    def enrich(self, content: str) -> EnrichmentResult:
        """Run one enrichment pass over a rendered fragment.

        The input string is not modified; the transformed markup is returned
        in the result. Links whose metadata cannot be resolved are left
        exactly as they were.

        Args:
            content: Rendered HTML fragment

        Returns:
            EnrichmentResult with new content and counts
        """
        found = find_candidates(content, self.mode)
        edits: list[tuple[int, int, str]] = []
        recognized = 0
        covered_until = 0

        for candidate in found:
            if not is_video_url(candidate.url):
                continue
            recognized += 1

            if candidate.start is None or candidate.end is None:
                logger.debug(f"No source span for {candidate.url}; leaving it as is")
                continue
            # Anchors nested inside an already replaced anchor go with it
            if candidate.start < covered_until:
                continue

            metadata = self._resolve(candidate)
            if metadata is None:
                continue

            edits.append(
                (candidate.start, candidate.end, render_replacement_html(metadata, self.settings))
            )
            covered_until = candidate.end

        # Apply back to front so earlier offsets stay valid
        result = content
        for start, end, replacement in reversed(edits):
            result = result[:start] + replacement + result[end:]

        logger.info(
            f"Enrichment pass ({self.mode}): {len(found)} candidate(s), "
            f"{recognized} video link(s), {len(edits)} replaced"
        )
        return EnrichmentResult(
            content=result,
            candidates=len(found),
            recognized=recognized,
            replaced=len(edits),
        )


def enrich(
    content: str,
    settings: Settings | None = None,
    mode: EnrichmentMode = "anchors",
) -> EnrichmentResult:
    """Enrich rendered content using the default metadata resolver.

    Args:
        content: Rendered HTML fragment
        settings: Settings (loads the saved settings file if None)
        mode: "anchors" or "text"

    Returns:
        EnrichmentResult
    """
    return EnrichmentPipeline(settings, mode=mode).enrich(content)

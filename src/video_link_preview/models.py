"""Data models for the enrichment pipeline."""

from pydantic import BaseModel, Field


class VideoMetadata(BaseModel):
    """Embed metadata for a single recognized video link."""

    title: str = Field(..., description="Video title")
    author_name: str = Field(..., description="Channel/author display name")
    thumbnail_url: str = Field(default="", description="Thumbnail image URL (may be empty)")
    source_url: str = Field(..., description="Original matched link")
    author_url: str | None = Field(default=None, description="Author reference from the lookup")
    channel_icon_url: str | None = Field(
        default=None, description="Channel icon URL, only set when resolution succeeded"
    )


class CandidateLink(BaseModel):
    """An occurrence of a URL-bearing reference within rendered content."""

    url: str = Field(..., description="Link target (HTML entities unescaped)")
    position: int = Field(..., description="Document-order index among candidates")
    start: int | None = Field(default=None, description="Raw span start (text mode only)")
    end: int | None = Field(default=None, description="Raw span end (text mode only)")


class EnrichmentResult(BaseModel):
    """Outcome of one enrichment pass."""

    content: str = Field(..., description="Transformed markup")
    candidates: int = Field(default=0, description="Candidate links found")
    recognized: int = Field(default=0, description="Candidates classified as video links")
    replaced: int = Field(default=0, description="Candidates substituted with a replacement")

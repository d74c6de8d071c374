"""Exception classes for link enrichment."""


class VideoLinkPreviewError(Exception):
    """Base exception for video link enrichment errors."""

    pass


class MetadataUnavailableError(VideoLinkPreviewError):
    """Raised when embed metadata cannot be fetched or is incomplete."""

    pass


class ChannelIconUnavailableError(VideoLinkPreviewError):
    """Raised when a channel icon cannot be resolved."""

    pass


class SettingsValidationError(VideoLinkPreviewError):
    """Raised when settings cannot be persisted in their current state."""

    pass

class MediaUploadError(Exception):
    """Raised when the image host rejects or fails an upload."""

    pass

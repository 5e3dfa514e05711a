# audio/exceptions.py
"""Errors raised by the audio downloader. All inherit from AudioDownloaderError."""


class AudioDownloaderError(Exception):
    """Base exception for the audio downloader."""
    pass


class InvalidInput(AudioDownloaderError):
    """Missing or malformed URL in a request."""
    pass


class ExtractionError(AudioDownloaderError):
    """yt-dlp failed, could not be started, or produced unusable output."""
    pass


class ExtractionTimedOut(ExtractionError):
    """yt-dlp did not finish within its timeout and was killed."""

    def __init__(self, timeout, message=None):
        self.timeout = timeout
        super().__init__(message or f"yt-dlp timed out after {timeout} seconds")


class StoredFileNotFound(AudioDownloaderError):
    """Requested download is not (or no longer) on disk."""
    pass

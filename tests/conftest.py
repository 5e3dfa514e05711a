"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

import os
import threading
import time
from pathlib import Path

import pytest

from audio.exceptions import ExtractionError
from audio.extraction import VideoMetadata


class FakeExtractionClient:
    """Stands in for YtDlpClient; records calls and writes a small file on download."""

    def __init__(self, metadata: VideoMetadata | None = None) -> None:
        self.metadata = metadata or VideoMetadata(
            title="Song Name",
            duration=215,
            thumbnail_url="https://i.ytimg.com/vi/abc123/hqdefault.jpg",
        )
        self.metadata_error: Exception | None = None
        self.download_error: Exception | None = None
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def fetch_metadata(self, url: str) -> VideoMetadata:
        with self._lock:
            self.calls.append(("fetch_metadata", url))
        if self.metadata_error:
            raise self.metadata_error
        return self.metadata

    def download_audio(self, url: str, output_path) -> Path:
        with self._lock:
            self.calls.append(("download_audio", url))
        if self.download_error:
            raise self.download_error
        output_path = Path(output_path)
        output_path.write_bytes(b"fake m4a data")
        return output_path


@pytest.fixture
def downloads_dir(tmp_path: Path, settings) -> Path:
    """Point DOWNLOADS_DIR at a fresh temporary directory."""
    path = tmp_path / "downloads"
    settings.DOWNLOADS_DIR = path
    return path


@pytest.fixture
def fake_client(monkeypatch, downloads_dir) -> FakeExtractionClient:
    """Replace the yt-dlp client used by the views."""
    client = FakeExtractionClient()
    monkeypatch.setattr("audio.extraction.get_extraction_client", lambda: client)
    return client


@pytest.fixture
def failing_client(fake_client) -> FakeExtractionClient:
    fake_client.metadata_error = ExtractionError("Video unavailable")
    fake_client.download_error = ExtractionError("Video unavailable")
    return fake_client


def make_aged_file(path: Path, age_seconds: float, now: float | None = None) -> Path:
    """Create a file whose mtime lies age_seconds in the past."""
    now = time.time() if now is None else now
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x")
    os.utime(path, (now - age_seconds, now - age_seconds))
    return path


@pytest.fixture
def aged_file():
    return make_aged_file

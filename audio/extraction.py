# audio/extraction.py
"""
Thin wrapper around the yt-dlp command line.

yt-dlp runs as a child process with a timeout on every call. When the
timeout expires the child is killed and ExtractionTimedOut is raised. Nothing
is retried here; callers see the first failure.
"""
import glob
import json
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from django.conf import settings

from .exceptions import ExtractionError, ExtractionTimedOut

logger = logging.getLogger(__name__)

# Headers sent with every request to get past basic bot blocking
SPOOFED_HEADERS = ['referer:youtube.com', 'user-agent:googlebot']

COMMON_OPTIONS = [
    '--no-check-certificates',
    '--no-warnings',
    '--prefer-free-formats',
    '--no-playlist',
]


@dataclass(frozen=True)
class VideoMetadata:
    title: str
    duration: int
    thumbnail_url: str

    def as_payload(self):
        return {
            'title': self.title,
            'duration': self.duration,
            'thumbnail': self.thumbnail_url,
        }


def parse_metadata(raw):
    """Build VideoMetadata from yt-dlp's --dump-single-json output"""
    try:
        info = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ExtractionError(f"yt-dlp returned malformed metadata: {e}") from e
    if not isinstance(info, dict):
        raise ExtractionError("yt-dlp returned malformed metadata: expected a JSON object")
    # Single-video URLs occasionally come back wrapped like a playlist
    if info.get('_type') == 'playlist' and info.get('entries'):
        info = info['entries'][0] or {}

    title = info.get('title')
    if not title:
        raise ExtractionError("yt-dlp metadata has no title")
    try:
        duration = int(round(float(info.get('duration') or 0)))
    except (TypeError, ValueError):
        duration = 0
    return VideoMetadata(title=str(title), duration=duration, thumbnail_url=info.get('thumbnail') or '')


class YtDlpClient:
    """Runs yt-dlp for metadata lookups and audio downloads."""

    def __init__(self, command=None, metadata_timeout=None, download_timeout=None,
                 audio_format='m4a'):
        self.command = list(command or settings.YTDLP_COMMAND)
        self.metadata_timeout = metadata_timeout or settings.YTDLP_METADATA_TIMEOUT
        self.download_timeout = download_timeout or settings.YTDLP_DOWNLOAD_TIMEOUT
        self.audio_format = audio_format

    def _header_options(self):
        options = []
        for header in SPOOFED_HEADERS:
            options += ['--add-header', header]
        return options

    def metadata_args(self, url):
        return self.command + ['--dump-single-json'] + COMMON_OPTIONS + self._header_options() + [url]

    def download_args(self, url, output_path):
        # yt-dlp picks the intermediate extension itself and renames to the
        # audio format once the post-processor has run
        template = f"{Path(output_path).with_suffix('')}.%(ext)s"
        # --no-mtime: the retention sweeper ages files by their mtime
        return (
            self.command
            + ['--extract-audio', '--audio-format', self.audio_format, '--audio-quality', '0',
               '--no-progress', '--no-mtime', '--output', template]
            + COMMON_OPTIONS
            + self._header_options()
            + [url]
        )

    def _run(self, args, timeout):
        logger.debug(f"Running yt-dlp: {' '.join(args)}")
        try:
            proc = subprocess.run(args, capture_output=True, text=True, timeout=timeout)
        except subprocess.TimeoutExpired as e:
            logger.error(f"yt-dlp timed out after {timeout}s")
            raise ExtractionTimedOut(timeout) from e
        except OSError as e:
            raise ExtractionError(f"Could not start yt-dlp: {e}") from e

        if proc.returncode != 0:
            stderr = (proc.stderr or '').strip()
            message = stderr.splitlines()[-1] if stderr else f"yt-dlp exited with code {proc.returncode}"
            raise ExtractionError(message)
        return proc.stdout

    def fetch_metadata(self, url):
        """Resolve title, duration and thumbnail without downloading anything"""
        stdout = self._run(self.metadata_args(url), self.metadata_timeout)
        metadata = parse_metadata(stdout)
        logger.info(f"Fetched metadata for {url}: {metadata.title!r} ({metadata.duration}s)")
        return metadata

    def download_audio(self, url, output_path):
        """Download the best audio stream for url into output_path"""
        output_path = Path(output_path)
        try:
            self._run(self.download_args(url, output_path), self.download_timeout)
            if not output_path.is_file():
                raise ExtractionError(
                    f"yt-dlp finished but {output_path.name} was not created"
                )
        except ExtractionError:
            remove_partial_files(output_path)
            raise
        logger.info(f"Download completed: {output_path.name}")
        return output_path


def remove_partial_files(output_path):
    """Delete anything yt-dlp left behind for this target (fragments, .part files)"""
    output_path = Path(output_path)
    stem = output_path.with_suffix('').name
    if not output_path.parent.is_dir():
        return
    for leftover in output_path.parent.glob(f"{glob.escape(stem)}.*"):
        try:
            leftover.unlink()
            logger.info(f"Removed partial download: {leftover.name}")
        except OSError as e:
            logger.warning(f"Could not remove partial download {leftover.name}: {e}")


def get_extraction_client():
    return YtDlpClient()

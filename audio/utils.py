# audio/utils.py
import os
import re
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from django.conf import settings

from .exceptions import InvalidInput, StoredFileNotFound

AUDIO_EXTENSION = 'm4a'
NAME_SEPARATOR = '_'
FALLBACK_TITLE = 'audio'
MAX_TITLE_BYTES = 180

YOUTUBE_URL_RE = re.compile(r'^(https?://)?(www\.)?(youtube\.com|youtu\.be)/.+$')
# <uuid4>_<title>.<ext>; a uuid never contains the separator
STORED_NAME_RE = re.compile(
    r'^(?P<id>[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})'
    + re.escape(NAME_SEPARATOR)
    + r'(?P<display>[^/\\]+)$'
)


@dataclass(frozen=True)
class StoredFile:
    generated_id: uuid.UUID
    display_name: str
    physical_path: Path

    @property
    def file_name(self):
        return self.physical_path.name

    @property
    def creation_time(self):
        return datetime.fromtimestamp(self.physical_path.stat().st_mtime)


def validate_youtube_url(url):
    return bool(url) and YOUTUBE_URL_RE.match(url) is not None


def clean_url(url):
    """Return the stripped URL or raise InvalidInput with the client-facing message"""
    url = (url or '').strip() if isinstance(url, str) else ''
    if not url:
        raise InvalidInput('URL is required')
    if not validate_youtube_url(url):
        raise InvalidInput('Invalid YouTube URL')
    return url


def sanitize_title(title):
    """Reduce a video title to a filesystem-safe token.

    Drops everything but word characters, whitespace and hyphens, then
    collapses whitespace runs into a single underscore. Applying it twice
    gives the same result as applying it once.
    """
    cleaned = re.sub(r'[^\w\s-]', '', title or '').strip()
    cleaned = re.sub(r'\s+', '_', cleaned)
    while len(cleaned.encode('utf-8')) > MAX_TITLE_BYTES:
        cleaned = cleaned[:-1]
    return cleaned or FALLBACK_TITLE


def get_storage_root():
    """Get the downloads directory, creating it if needed"""
    root = Path(settings.DOWNLOADS_DIR)
    root.mkdir(parents=True, exist_ok=True)
    return root


def new_stored_file(title, extension=AUDIO_EXTENSION):
    """Allocate a unique stored file for a title. Nothing is written to disk."""
    display_name = f"{sanitize_title(title)}.{extension}"
    generated_id = uuid.uuid4()
    path = get_storage_root() / f"{generated_id}{NAME_SEPARATOR}{display_name}"
    return StoredFile(generated_id=generated_id, display_name=display_name, physical_path=path)


def display_name_for(file_name):
    """Strip the generated id prefix from a stored file name"""
    match = STORED_NAME_RE.match(file_name or '')
    if not match:
        return None
    return match.group('display')


def resolve_stored_file(file_name):
    """Look up an existing download by its generated file name"""
    display_name = display_name_for(file_name)
    if display_name is None:
        raise StoredFileNotFound(file_name)
    path = get_storage_root() / file_name
    if not os.path.isfile(path):
        raise StoredFileNotFound(file_name)
    generated_id = uuid.UUID(file_name.split(NAME_SEPARATOR, 1)[0])
    return StoredFile(generated_id=generated_id, display_name=display_name, physical_path=path)


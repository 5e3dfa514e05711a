"""Tests for the audio management commands."""

from __future__ import annotations

import threading
from io import StringIO
from pathlib import Path

import pytest
from django.conf import settings
from django.core.management import call_command, get_commands

from audio.retention import get_retention_manager


def sweeper_threads() -> list[threading.Thread]:
    return [t for t in threading.enumerate() if t.name == "retention-sweeper" and t.is_alive()]


@pytest.fixture
def fresh_sweeper(downloads_dir: Path, monkeypatch):
    """Start every test from an unstarted process-wide sweeper."""
    monkeypatch.setattr("audio.retention._manager", None)
    yield
    get_retention_manager().stop(timeout=5)


class TestCleanupDownloads:
    def test_removes_expired_files(self, downloads_dir: Path, aged_file) -> None:
        old = aged_file(downloads_dir / "old.m4a", 600)
        young = aged_file(downloads_dir / "young.m4a", 10)
        out = StringIO()

        call_command("cleanup_downloads", stdout=out)

        assert not old.exists()
        assert young.exists()
        assert "Successfully cleaned up 1 expired downloads" in out.getvalue()

    def test_max_age_override(self, downloads_dir: Path, aged_file) -> None:
        young = aged_file(downloads_dir / "young.m4a", 60)
        out = StringIO()

        call_command("cleanup_downloads", "--max-age", "30", stdout=out)

        assert not young.exists()
        assert "Successfully cleaned up 1 expired downloads" in out.getvalue()

    def test_empty_directory(self, downloads_dir: Path) -> None:
        out = StringIO()

        call_command("cleanup_downloads", stdout=out)

        assert "Successfully cleaned up 0 expired downloads" in out.getvalue()


class TestRunserver:
    def test_overrides_django_runserver(self) -> None:
        assert get_commands()["runserver"] == "audio"

    def test_default_port_from_settings(self) -> None:
        from audio.management.commands.runserver import Command

        assert Command.default_port == str(settings.PORT)

    def test_one_sweeper_while_serving(self, fresh_sweeper, monkeypatch) -> None:
        seen = []

        def fake_run(*args, **kwargs):
            seen.append(len(sweeper_threads()))

        monkeypatch.setattr("django.core.management.commands.runserver.run", fake_run)

        call_command("runserver", "--noreload", "--skip-checks", stdout=StringIO())

        assert seen == [1]
        assert sweeper_threads() == []
        assert not get_retention_manager().running

    def test_wsgi_uses_shared_sweeper(self, fresh_sweeper) -> None:
        import importlib

        import tubeaudio.wsgi

        importlib.reload(tubeaudio.wsgi)

        assert tubeaudio.wsgi.sweeper is get_retention_manager()
        assert len(sweeper_threads()) == 1

        get_retention_manager().start()
        assert len(sweeper_threads()) == 1

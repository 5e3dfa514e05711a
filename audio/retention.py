# audio/retention.py
import logging
import os
import shutil
import threading
import time
from pathlib import Path

from django.conf import settings

logger = logging.getLogger(__name__)


class RetentionManager:
    """Deletes downloads older than a fixed age, on a fixed schedule.

    start() launches a daemon thread that sweeps every ``interval`` seconds
    until stop() is called. sweep() can also be called directly (the
    cleanup_downloads command does). Only one sweep runs at a time; a call
    made while another sweep is in progress returns None without touching
    the directory.
    """

    def __init__(self, root=None, max_age=None, interval=None):
        self.root = Path(root or settings.DOWNLOADS_DIR)
        self.max_age = max_age if max_age is not None else settings.RETENTION_SECONDS
        self.interval = interval if interval is not None else settings.SWEEP_INTERVAL_SECONDS
        self._sweeping = threading.Lock()
        self._stopped = threading.Event()
        self._thread = None

    @property
    def running(self):
        return self._thread is not None and self._thread.is_alive()

    def sweep(self, now=None):
        """Delete expired entries; returns the names removed, or None if skipped"""
        if not self._sweeping.acquire(blocking=False):
            logger.warning("Previous cleanup sweep still running, skipping this one")
            return None
        try:
            return self._sweep(time.time() if now is None else now)
        finally:
            self._sweeping.release()

    def _sweep(self, now):
        deleted = []
        try:
            entries = list(os.scandir(self.root))
        except FileNotFoundError:
            return deleted

        for entry in entries:
            try:
                age = now - entry.stat(follow_symlinks=False).st_mtime
                if age <= self.max_age:
                    continue
                if entry.is_dir(follow_symlinks=False):
                    shutil.rmtree(entry.path)
                else:
                    os.remove(entry.path)
            except FileNotFoundError:
                logger.debug(f"{entry.name} already gone")
                continue
            except OSError as e:
                logger.error(f"Error checking/removing file {entry.name}: {e}")
                continue
            deleted.append(entry.name)
            logger.info(f"Deleted old file: {entry.name}")
        return deleted

    def _run(self):
        while not self._stopped.wait(self.interval):
            try:
                self.sweep()
            except Exception:
                logger.exception("Cleanup sweep failed")

    def start(self):
        if self.running:
            return
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, name='retention-sweeper', daemon=True)
        self._thread.start()
        logger.info(
            f"Retention sweeper started for {self.root} "
            f"(max age {self.max_age}s, every {self.interval}s)"
        )

    def stop(self, timeout=None):
        self._stopped.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
            logger.info("Retention sweeper stopped")


_manager = None
_manager_lock = threading.Lock()


def get_retention_manager():
    """The process-wide sweeper shared by runserver and the WSGI entry point"""
    global _manager
    with _manager_lock:
        if _manager is None:
            _manager = RetentionManager()
        return _manager

# audio/management/commands/runserver.py
from django.conf import settings
from django.core.management.commands.runserver import Command as RunserverCommand

from audio.retention import get_retention_manager


class Command(RunserverCommand):
    """Django's runserver, listening on $PORT and sweeping old downloads while it runs."""

    default_port = str(settings.PORT)

    def inner_run(self, *args, **options):
        # inner_run only executes in the serving process, not the autoreloader parent.
        # Loading tubeaudio.wsgi for the handler starts the same shared sweeper, which is a no-op here.
        sweeper = get_retention_manager()
        sweeper.start()
        try:
            super().inner_run(*args, **options)
        finally:
            sweeper.stop(timeout=5)

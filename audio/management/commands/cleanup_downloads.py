# audio/management/commands/cleanup_downloads.py
from django.conf import settings
from django.core.management.base import BaseCommand

from audio.retention import RetentionManager


class Command(BaseCommand):
    help = 'Deletes downloaded audio files older than the retention window'

    def add_arguments(self, parser):
        parser.add_argument(
            '--max-age', type=int, default=None,
            help=f'Age in seconds after which files are deleted (default: {settings.RETENTION_SECONDS})',
        )

    def handle(self, *args, **options):
        manager = RetentionManager(max_age=options['max_age'])
        deleted = manager.sweep()
        if deleted is None:
            self.stdout.write(self.style.WARNING('Another cleanup is already running'))
            return
        self.stdout.write(self.style.SUCCESS(f'Successfully cleaned up {len(deleted)} expired downloads'))

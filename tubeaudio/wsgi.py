# tubeaudio/wsgi.py
"""
WSGI entry point. The retention sweeper lives as long as the worker process.
"""
import atexit
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'tubeaudio.settings')

application = get_wsgi_application()

from audio.retention import get_retention_manager  # noqa: E402  needs configured settings

sweeper = get_retention_manager()
sweeper.start()
atexit.register(sweeper.stop)

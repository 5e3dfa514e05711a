# audio/apps.py
from django.apps import AppConfig


class AudioConfig(AppConfig):
    name = 'audio'
    verbose_name = 'YouTube audio downloader'

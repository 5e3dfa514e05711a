# tubeaudio/settings.py
"""
Django settings for tubeaudio.

Everything deployment-specific comes from environment variables.
"""
import os
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_int(name, default):
    return int(os.environ.get(name, default))


def env_bool(name, default=False):
    return os.environ.get(name, str(default)).lower() in ('1', 'true', 'yes', 'on')


SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'insecure-dev-key-change-me')
DEBUG = env_bool('DJANGO_DEBUG', False)
ALLOWED_HOSTS = [h.strip() for h in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,[::1]').split(',') if h.strip()]

INSTALLED_APPS = [
    'audio',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'tubeaudio.urls'
WSGI_APPLICATION = 'tubeaudio.wsgi.application'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
            ],
        },
    },
]

# Downloads live on local disk only
DATABASES = {}

USE_TZ = True
TIME_ZONE = 'UTC'

# Port used by `manage.py runserver` when none is given
PORT = env_int('PORT', 3001)

DOWNLOADS_DIR = Path(os.environ.get('DOWNLOADS_DIR', BASE_DIR / 'downloads'))
RETENTION_SECONDS = env_int('RETENTION_SECONDS', 5 * 60)
SWEEP_INTERVAL_SECONDS = env_int('SWEEP_INTERVAL_SECONDS', 60)

YTDLP_COMMAND = os.environ.get('YTDLP_COMMAND', '').split() or [sys.executable, '-m', 'yt_dlp']
YTDLP_METADATA_TIMEOUT = env_int('YTDLP_METADATA_TIMEOUT', 120)
YTDLP_DOWNLOAD_TIMEOUT = env_int('YTDLP_DOWNLOAD_TIMEOUT', 900)

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'audio': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': True,
        },
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
        },
    },
}

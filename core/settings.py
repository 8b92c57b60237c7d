import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from the project root (same directory as manage.py)
load_dotenv(BASE_DIR / '.env', override=True)

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'flycast-insecure-dev-key')
DEBUG = os.environ.get('DJANGO_DEBUG', 'false').lower() == 'true'
ALLOWED_HOSTS = [host.strip() for host in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if host.strip()]

INSTALLED_APPS = [
    'apps.flycast',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'core.urls'
WSGI_APPLICATION = 'core.wsgi.application'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'flycast',
    }
}

# Weather providers
WEATHERAPI_KEY = os.environ.get('WEATHERAPI_KEY', '')
CHECKWX_API_KEY = os.environ.get('CHECKWX_API_KEY', '')
WEATHER_FORECAST_DAYS = int(os.environ.get('WEATHER_FORECAST_DAYS', 2))
WEATHER_FORECAST_CACHE_TTL = int(os.environ.get('WEATHER_FORECAST_CACHE_TTL', 1800))  # 30 min
WEATHER_METAR_CACHE_TTL = int(os.environ.get('WEATHER_METAR_CACHE_TTL', 1800))  # 30 min
WEATHER_REQUEST_TIMEOUT = float(os.environ.get('WEATHER_REQUEST_TIMEOUT', 10))
WEATHER_MAX_RETRIES = int(os.environ.get('WEATHER_MAX_RETRIES', 3))
WEATHER_METAR_MAX_WORKERS = int(os.environ.get('WEATHER_METAR_MAX_WORKERS', 5))
FLYCAST_NEARBY_RADIUS_MILES = float(os.environ.get('FLYCAST_NEARBY_RADIUS_MILES', 100))

# Optional LLM commentary webhook
FLYCAST_ENRICHMENT_WEBHOOK_URL = os.environ.get('FLYCAST_ENRICHMENT_WEBHOOK_URL', '')
FLYCAST_ENRICHMENT_TIMEOUT = float(os.environ.get('FLYCAST_ENRICHMENT_TIMEOUT', 15))

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '{asctime} {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'apps': {
            'handlers': ['console'],
            'level': os.environ.get('FLYCAST_LOG_LEVEL', 'INFO'),
        },
    },
}

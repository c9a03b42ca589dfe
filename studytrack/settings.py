import os
from pathlib import Path

from .logs import configure_logging

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("STUDYTRACK_SECRET_KEY", "dev-only-insecure-key")
DEBUG = os.getenv("STUDYTRACK_DEBUG", "1") == "1"
ALLOWED_HOSTS = os.getenv("STUDYTRACK_ALLOWED_HOSTS", "*").split(",")

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "rest_framework",
    "accounts",
    "scheduler",
    "scoring",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "accounts.middleware.HeaderLoginMiddleware",
]

ROOT_URLCONF = "studytrack.urls"
WSGI_APPLICATION = "studytrack.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("STUDYTRACK_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

AUTH_USER_MODEL = "accounts.User"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

USE_TZ = True
TIME_ZONE = os.getenv("STUDYTRACK_TIME_ZONE", "UTC")
LANGUAGE_CODE = "en-us"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": ["accounts.authentication.HeaderUserAuthentication"],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "EXCEPTION_HANDLER": "studytrack.errors.exception_handler",
}

# XP granted for a second session that starts on the same day as the last one.
STUDYTRACK_SAME_DAY_XP = int(os.getenv("STUDYTRACK_SAME_DAY_XP", "40"))

LOG_LEVEL = os.getenv("STUDYTRACK_LOG_LEVEL", "INFO")
LOGGING = configure_logging(LOG_LEVEL, json_output=not DEBUG)

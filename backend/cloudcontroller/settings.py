import json
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-insecure-change-me")
DEBUG = os.environ.get("DJANGO_DEBUG", "false").lower() == "true"

ALLOWED_HOSTS = [host.strip() for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",") if host.strip()]

# Respect proxy headers from the router so generated links use https.
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
USE_X_FORWARDED_HOST = True

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "corsheaders",
    "cc_core.apps.CloudControllerCoreConfig",
]

MIDDLEWARE = [
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "cloudcontroller.middleware.BearerTokenAuthMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "cloudcontroller.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    }
]

WSGI_APPLICATION = "cloudcontroller.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("POSTGRES_DB", "cloud_controller"),
        "USER": os.environ.get("POSTGRES_USER", "cloud_controller"),
        "PASSWORD": os.environ.get("POSTGRES_PASSWORD", "cloud_controller"),
        "HOST": os.environ.get("POSTGRES_HOST", "db"),
        "PORT": os.environ.get("POSTGRES_PORT", "5432"),
    }
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("DJANGO_TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ALLOWED_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "cc_core": {
            "handlers": ["console"],
            "level": os.environ.get("CC_LOG_LEVEL", "INFO").upper(),
            "propagate": False,
        },
    },
}

# Deferred jobs
CC_ASYNC_JOBS_MODE = os.environ.get("CC_ASYNC_JOBS_MODE", "").strip().lower() or ("inprocess" if DEBUG else "redis")
CC_JOBS_REDIS_URL = os.environ.get("CC_JOBS_REDIS_URL", "redis://redis:6379/0")
CC_JOB_TIMEOUT = int(os.environ.get("CC_JOB_TIMEOUT", "900"))
CC_GENERIC_QUEUE = os.environ.get("CC_GENERIC_QUEUE", "cc-generic")
CC_CONFIG = {
    "name": os.environ.get("CC_DEPLOYMENT_NAME", "api"),
    "index": int(os.environ.get("CC_INDEX", "0")),
}

# Bulk API credential (syslog drain urls)
CC_BULK_API_USER = os.environ.get("CC_BULK_API_USER", "bulk_api")
CC_BULK_API_PASSWORD = os.environ.get("CC_BULK_API_PASSWORD", "")
CC_MAX_BATCH_SIZE = int(os.environ.get("CC_MAX_BATCH_SIZE", "500"))
CC_DEFAULT_BATCH_SIZE = int(os.environ.get("CC_DEFAULT_BATCH_SIZE", "50"))
CC_DEFAULT_PAGE_SIZE = int(os.environ.get("CC_DEFAULT_PAGE_SIZE", "50"))

# Bearer tokens
CC_TOKEN_SECRET = os.environ.get("CC_TOKEN_SECRET", "").strip()
CC_TOKEN_AUDIENCE = os.environ.get("CC_TOKEN_AUDIENCE", "cloud_controller").strip()

# Blobstores
CC_UPLOAD_DIR = os.environ.get("CC_UPLOAD_DIR", "/tmp/cc-uploads")
CC_BLOBSTORES = json.loads(os.environ.get("CC_BLOBSTORES", "") or "{}")

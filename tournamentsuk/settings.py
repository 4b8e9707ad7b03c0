"""
Django settings for tournamentsuk project.
"""

from datetime import timedelta
from pathlib import Path

from decouple import config
import dj_database_url

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent

# Create logs directory if it doesn't exist
(BASE_DIR / "logs").mkdir(exist_ok=True)

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = config("SECRET_KEY", default="django-insecure-change-this-in-production")

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = config("DEBUG", default=True, cast=bool)

ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="localhost,127.0.0.1").split(",")

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "django.contrib.sitemaps",
    # Third party apps
    "rest_framework",
    "rest_framework_simplejwt",
    "corsheaders",
    "django_redis",
    "storages",  # AWS S3 storage
    # Local apps
    "accounts",
    "tournaments",
    "alerts",
    "blog",
    "analytics",
    "support",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "tournamentsuk.middleware.CacheControlMiddleware",
]

ROOT_URLCONF = "tournamentsuk.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "tournamentsuk.wsgi.application"

# Database
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": config("DB_NAME", default="tournamentsuk_db"),
        "USER": config("DB_USER", default="postgres"),
        "PASSWORD": config("DB_PASSWORD", default=""),
        "HOST": config("DB_HOST", default="localhost"),
        "PORT": config("DB_PORT", default="5432"),
    }
}

# Hosted database configuration
if config("DATABASE_URL", default=None):
    DATABASES["default"] = dj_database_url.config(
        default=config("DATABASE_URL"),
        conn_max_age=600,
        conn_health_checks=True,
    )

# Custom User Model
AUTH_USER_MODEL = "accounts.User"

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.CommonPasswordValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.NumericPasswordValidator",
    },
]

# Internationalization
LANGUAGE_CODE = "en-gb"
TIME_ZONE = "Europe/London"
USE_I18N = True
USE_TZ = True

# ==================== STATIC & MEDIA FILES CONFIGURATION ====================

# AWS S3 Settings
USE_S3 = config("USE_S3", default=False, cast=bool)

if USE_S3:
    AWS_ACCESS_KEY_ID = config("AWS_ACCESS_KEY_ID")
    AWS_SECRET_ACCESS_KEY = config("AWS_SECRET_ACCESS_KEY")
    AWS_STORAGE_BUCKET_NAME = config("AWS_STORAGE_BUCKET_NAME")
    AWS_S3_REGION_NAME = config("AWS_S3_REGION_NAME", default="eu-west-2")
    AWS_S3_CUSTOM_DOMAIN = f"{AWS_STORAGE_BUCKET_NAME}.s3.{AWS_S3_REGION_NAME}.amazonaws.com"

    AWS_S3_OBJECT_PARAMETERS = {
        "CacheControl": "max-age=86400",  # 1 day cache
    }

    # Banner URLs are embedded in emails and feeds, so no signed query params
    AWS_QUERYSTRING_AUTH = False

    STORAGES = {
        "default": {"BACKEND": "tournamentsuk.storage_backends.MediaStorage"},
        "staticfiles": {"BACKEND": "tournamentsuk.storage_backends.StaticStorage"},
    }
    STATIC_URL = f"https://{AWS_S3_CUSTOM_DOMAIN}/static/"
    MEDIA_URL = f"https://{AWS_S3_CUSTOM_DOMAIN}/media/"

else:
    STATIC_URL = "static/"
    STATIC_ROOT = BASE_DIR / "staticfiles"
    MEDIA_URL = "media/"
    MEDIA_ROOT = BASE_DIR / "media"

    STORAGES = {
        "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
        "staticfiles": {
            "BACKEND": (
                "django.contrib.staticfiles.storage.StaticFilesStorage"
                if DEBUG
                else "whitenoise.storage.CompressedManifestStaticFilesStorage"
            )
        },
    }


# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST Framework settings
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": ("rest_framework_simplejwt.authentication.JWTAuthentication",),
    "DEFAULT_PERMISSION_CLASSES": ("rest_framework.permissions.IsAuthenticated",),
    "DEFAULT_PAGINATION_CLASS": "rest_framework.pagination.PageNumberPagination",
    "PAGE_SIZE": 20,
    # Scopes used by tournamentsuk.throttling, "5/15m" means five per fifteen minutes
    "DEFAULT_THROTTLE_RATES": {
        "contact_organizer": "5/15m",
        "blog_like": "1/m",
        "analytics_events": "120/m",
        "support_requests": "5/h",
    },
}

# ==================== SESSION / JWT CONFIGURATION ====================

# Default session is one day, "remember me" stretches the refresh token to 30 days
SESSION_TIMEOUT_HOURS = config("SESSION_TIMEOUT_HOURS", default=24, cast=int)
SESSION_REMEMBER_ME_DAYS = config("SESSION_REMEMBER_ME_DAYS", default=30, cast=int)
SESSION_WARNING_MINUTES = config("SESSION_WARNING_MINUTES", default=5, cast=int)

SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(minutes=config("ACCESS_TOKEN_LIFETIME_MINUTES", default=60, cast=int)),
    "REFRESH_TOKEN_LIFETIME": timedelta(hours=SESSION_TIMEOUT_HOURS),
    "ROTATE_REFRESH_TOKENS": False,
    "UPDATE_LAST_LOGIN": True,
    "ALGORITHM": "HS256",
    "SIGNING_KEY": config("JWT_SECRET_KEY", default=SECRET_KEY),
    "AUTH_HEADER_TYPES": ("Bearer",),
}

# Failed logins allowed per email inside the window before 429
LOGIN_ATTEMPT_LIMIT = config("LOGIN_ATTEMPT_LIMIT", default=5, cast=int)
LOGIN_ATTEMPT_WINDOW_SECONDS = config("LOGIN_ATTEMPT_WINDOW_SECONDS", default=15 * 60, cast=int)

# CORS Settings
CORS_ALLOWED_ORIGINS = [
    o for o in config("CORS_ALLOWED_ORIGINS", default="http://localhost:5173,http://127.0.0.1:5173").split(",") if o
]

CORS_ALLOW_CREDENTIALS = True

# CSRF Settings
CSRF_TRUSTED_ORIGINS = [
    o for o in config("CSRF_TRUSTED_ORIGINS", default="http://localhost:5173,http://127.0.0.1:5173").split(",") if o
]

# Public site, used for links in emails, feeds and sitemaps
SITE_URL = config("SITE_URL", default="https://footballtournamentsuk.co.uk").rstrip("/")
SITE_NAME = config("SITE_NAME", default="Football Tournaments UK")

# ==================== REDIS CACHE CONFIGURATION ====================

REDIS_URL = config("REDIS_URL", default=None)

if not REDIS_URL:
    REDIS_HOST = config("REDIS_HOST", default="localhost")
    REDIS_PORT = config("REDIS_PORT", default=6379, cast=int)
    REDIS_DB = config("REDIS_DB", default=0, cast=int)
    REDIS_PASSWORD = config("REDIS_PASSWORD", default="")

    REDIS_URL = f"redis://{':' + REDIS_PASSWORD + '@' if REDIS_PASSWORD else ''}{REDIS_HOST}:{REDIS_PORT}"
else:
    REDIS_DB = config("REDIS_DB", default=0, cast=int)

REDIS_CACHE_TTL = config("REDIS_CACHE_TTL", default=300, cast=int)

CACHES = {
    "default": {
        "BACKEND": "django_redis.cache.RedisCache",
        "LOCATION": f"{REDIS_URL}/{REDIS_DB}",
        "OPTIONS": {
            "CLIENT_CLASS": "django_redis.client.DefaultClient",
            "CONNECTION_POOL_KWARGS": {
                "max_connections": 50,
                "retry_on_timeout": True,
            },
            "SOCKET_CONNECT_TIMEOUT": 5,
            "SOCKET_TIMEOUT": 5,
            "IGNORE_EXCEPTIONS": True,  # Don't crash if Redis is down
        },
        "KEY_PREFIX": "tournamentsuk",
        "TIMEOUT": REDIS_CACHE_TTL,
    }
}

SESSION_ENGINE = "django.contrib.sessions.backends.cache"
SESSION_CACHE_ALIAS = "default"

# ==================== CELERY CONFIGURATION ====================

CELERY_BROKER_URL = REDIS_URL
CELERY_RESULT_BACKEND = REDIS_URL
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_TRACK_STARTED = True
CELERY_TASK_TIME_LIMIT = 30 * 60  # 30 minutes
CELERY_TASK_SOFT_TIME_LIMIT = 25 * 60  # 25 minutes
CELERY_WORKER_SEND_TASK_EVENTS = True
CELERY_BROKER_CONNECTION_RETRY_ON_STARTUP = True

# Execute tasks locally if in DEBUG mode (no worker needed)
if DEBUG:
    CELERY_TASK_ALWAYS_EAGER = True
    CELERY_TASK_EAGER_PROPAGATES = True

# ==================== GEOCODING ====================

MAPBOX_ACCESS_TOKEN = config("MAPBOX_ACCESS_TOKEN", default="")
GEOCODING_COUNTRY = config("GEOCODING_COUNTRY", default="gb")
GEOCODING_TIMEOUT = config("GEOCODING_TIMEOUT", default=10, cast=int)
GEOCODING_CACHE_TTL = config("GEOCODING_CACHE_TTL", default=60 * 60 * 24 * 30, cast=int)  # 30 days

# ==================== LOGGING CONFIGURATION ====================

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "[{levelname}] {asctime} {name} {module}.{funcName}:{lineno} - {message}",
            "style": "{",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "simple": {
            "format": "[{levelname}] {asctime} - {message}",
            "style": "{",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "filters": {
        "require_debug_false": {
            "()": "django.utils.log.RequireDebugFalse",
        },
        "require_debug_true": {
            "()": "django.utils.log.RequireDebugTrue",
        },
    },
    "handlers": {
        "console": {
            "level": "INFO",
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
        "file_general": {
            "level": "INFO",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": BASE_DIR / "logs" / "django.log",
            "maxBytes": 1024 * 1024 * 10,  # 10 MB
            "backupCount": 5,
            "formatter": "verbose",
        },
        "file_error": {
            "level": "ERROR",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": BASE_DIR / "logs" / "django_error.log",
            "maxBytes": 1024 * 1024 * 10,  # 10 MB
            "backupCount": 5,
            "formatter": "verbose",
        },
        "file_api": {
            "level": "DEBUG",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": BASE_DIR / "logs" / "api.log",
            "maxBytes": 1024 * 1024 * 10,  # 10 MB
            "backupCount": 5,
            "formatter": "verbose",
        },
        "file_celery": {
            "level": "INFO",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": BASE_DIR / "logs" / "celery.log",
            "maxBytes": 1024 * 1024 * 10,  # 10 MB
            "backupCount": 5,
            "formatter": "verbose",
        },
    },
    "loggers": {
        "django": {
            "handlers": ["console", "file_general"],
            "level": "INFO",
            "propagate": False,
        },
        "django.request": {
            "handlers": ["console", "file_error"],
            "level": "ERROR",
            "propagate": False,
        },
        "django.db.backends": {
            "handlers": ["console"],
            "level": "WARNING",  # Set to DEBUG to see SQL queries
            "propagate": False,
        },
        "tournamentsuk": {
            "handlers": ["console", "file_api", "file_error"],
            "level": "DEBUG",
            "propagate": False,
        },
        "accounts": {
            "handlers": ["console", "file_api"],
            "level": "DEBUG",
            "propagate": False,
        },
        "tournaments": {
            "handlers": ["console", "file_api"],
            "level": "DEBUG",
            "propagate": False,
        },
        "alerts": {
            "handlers": ["console", "file_api"],
            "level": "DEBUG",
            "propagate": False,
        },
        "blog": {
            "handlers": ["console", "file_api"],
            "level": "DEBUG",
            "propagate": False,
        },
        "analytics": {
            "handlers": ["console", "file_api"],
            "level": "DEBUG",
            "propagate": False,
        },
        "support": {
            "handlers": ["console", "file_api"],
            "level": "DEBUG",
            "propagate": False,
        },
        "celery": {
            "handlers": ["console", "file_celery"],
            "level": "INFO",
            "propagate": False,
        },
    },
    "root": {
        "handlers": ["console", "file_general"],
        "level": "INFO",
    },
}

# ==================== EMAIL CONFIGURATION ====================

# Resend HTTP API in production, console locally
EMAIL_BACKEND = config("EMAIL_BACKEND", default="django.core.mail.backends.console.EmailBackend")
RESEND_API_KEY = config("RESEND_API_KEY", default="")
RESEND_API_URL = config("RESEND_API_URL", default="https://api.resend.com/emails")

# Outbound retry policy: 1s, 2s, 4s ... for up to EMAIL_MAX_ATTEMPTS attempts
EMAIL_MAX_ATTEMPTS = config("EMAIL_MAX_ATTEMPTS", default=3, cast=int)
EMAIL_RETRY_BASE_DELAY = config("EMAIL_RETRY_BASE_DELAY", default=1.0, cast=float)

# Email Addresses
DEFAULT_FROM_EMAIL = config(
    "DEFAULT_FROM_EMAIL", default="Football Tournaments UK <noreply@footballtournamentsuk.co.uk>"
)
ALERTS_FROM_EMAIL = config("ALERTS_FROM_EMAIL", default="Tournament Alerts <alerts@footballtournamentsuk.co.uk>")
SUPPORT_EMAIL = config("SUPPORT_EMAIL", default="support@footballtournamentsuk.co.uk")
ADMIN_EMAIL = config("ADMIN_EMAIL", default="admin@footballtournamentsuk.co.uk")
FEEDBACK_EMAIL = config("FEEDBACK_EMAIL", default="info@footballtournamentsuk.co.uk")

# Email Settings
EMAIL_TIMEOUT = 10  # seconds
EMAIL_USE_LOCALTIME = True

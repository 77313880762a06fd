"""
Django settings for the teeny-orchestrator project.

Orchestrator values are read from the environment so the same settings module
serves local runs, scheduled jobs and tests.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str) -> list[str]:
    raw = os.environ.get(name, "")
    return [p.strip() for p in raw.split(os.pathsep) if p.strip()]


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "insecure-dev-key-change-me")
DEBUG = _env_bool("DJANGO_DEBUG", False)
ALLOWED_HOSTS = [h for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost").split(",") if h]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "orchestrator.apps.OrchestratorConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("ORCHESTRATOR_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
USE_TZ = True
TIME_ZONE = "UTC"

# Orchestrator
ORCHESTRATOR_PROVIDER = os.environ.get("ORCHESTRATOR_PROVIDER", "anthropic")
ORCHESTRATOR_MODEL = os.environ.get("ORCHESTRATOR_MODEL", "")
ORCHESTRATOR_API_KEY = os.environ.get("ORCHESTRATOR_API_KEY", "")
ORCHESTRATOR_BASE_URL = os.environ.get("ORCHESTRATOR_BASE_URL", "")
ORCHESTRATOR_MAX_TOKENS = int(os.environ.get("ORCHESTRATOR_MAX_TOKENS", "4096"))
ORCHESTRATOR_REQUEST_TIMEOUT = float(os.environ.get("ORCHESTRATOR_REQUEST_TIMEOUT", "120"))
ORCHESTRATOR_MAX_ITERATIONS = int(os.environ.get("ORCHESTRATOR_MAX_ITERATIONS", "20"))
ORCHESTRATOR_SESSION_KEY = os.environ.get("ORCHESTRATOR_SESSION_KEY", "main")
ORCHESTRATOR_SESSION_DIR = Path(
    os.environ.get("ORCHESTRATOR_SESSION_DIR", Path.home() / ".teeny-orchestrator" / "sessions")
)
ORCHESTRATOR_WORKSPACE = Path(os.environ.get("ORCHESTRATOR_WORKSPACE", Path.cwd()))
ORCHESTRATOR_TOOL_DIRS = _env_list("ORCHESTRATOR_TOOL_DIRS")
ORCHESTRATOR_TOOL_TIMEOUT = float(os.environ.get("ORCHESTRATOR_TOOL_TIMEOUT", "30"))
ORCHESTRATOR_AUTO_CAPTURE = _env_bool("ORCHESTRATOR_AUTO_CAPTURE", True)
ORCHESTRATOR_CAPTURE_BACKEND = os.environ.get("ORCHESTRATOR_CAPTURE_BACKEND", "token-eval")
ORCHESTRATOR_EVAL_BINARY = os.environ.get("ORCHESTRATOR_EVAL_BINARY", "token-eval")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "orchestrator": {
            "handlers": ["console"],
            "level": os.environ.get("ORCHESTRATOR_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}

from .base import *

# Local development: debug pages and verbose ledger logs.
DEBUG = True

SECRET_KEY = get_env("SECRET_KEY", "local-dev-secret-key")

ALLOWED_HOSTS = ALLOWED_HOSTS or ["localhost", "127.0.0.1"]

INSTALLED_APPS += ["django_extensions"] if "django_extensions" not in INSTALLED_APPS else []  # type: ignore

INTERNAL_IPS = ["127.0.0.1"]

LOGGING["loggers"]["ledger"]["level"] = get_env("LOG_LEVEL", "DEBUG")  # type: ignore

# coding: utf8
import os


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config(object):
    SECRET_KEY = os.environ.get("SECRET_KEY") or "<your secret key>"
    API_URL = os.environ.get("API_URL") or "<your api url>"
    FRONTEND_URL = os.environ.get("FRONTEND_URL") or "http://localhost:3000"

    MONGODB_DB = os.environ.get("MONGODB_DB") or "storefront"
    MONGODB_HOST = os.environ.get("MONGODB_HOST") or "localhost"
    MONGODB_PORT = int(os.environ.get("MONGODB_PORT") or "27017")
    MONGODB_USERNAME = os.environ.get("MONGODB_USERNAME") or ""
    MONGODB_PASSWORD = os.environ.get("MONGODB_PASSWORD") or ""
    MONGODB_MOCK = False

    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY") or "secret"
    JWT_ACCESS_TOKEN_EXPIRES = False

    BASE_CURRENCY = (os.environ.get("BASE_CURRENCY") or "INR").upper()
    EXCHANGE_RATE_API_URL = os.environ.get("EXCHANGE_RATE_API_URL") or ""
    EXCHANGE_RATE_REFRESH_ON_START = _env_bool("EXCHANGE_RATE_REFRESH_ON_START", True)

    STRIPE_SECRET_KEY = os.environ.get("STRIPE_SECRET_KEY") or ""
    STRIPE_WEBHOOK_SECRET = os.environ.get("STRIPE_WEBHOOK_SECRET") or ""

    EMAIL_HOST = os.environ.get("EMAIL_HOST") or "smtp.gmail.com"
    EMAIL_PORT = int(os.environ.get("EMAIL_PORT") or 587)
    EMAIL_HOST_USER = os.environ.get("EMAIL_HOST_USER") or ""
    EMAIL_HOST_PASSWORD = os.environ.get("EMAIL_HOST_PASSWORD") or ""
    EMAIL_FROM_NAME = os.environ.get("EMAIL_FROM_NAME") or "Storefront"
    EMAIL_ENCRYPTION = (os.environ.get("EMAIL_ENCRYPTION") or "tls").lower()
    ADMIN_EMAILS = [
        email.strip()
        for email in (os.environ.get("ADMIN_EMAILS") or "").split(",")
        if email.strip()
    ]

    CELERY_BROKER_URL = (
        os.environ.get("CELERY_BROKER_URL") or "redis://localhost:6379/0"
    )
    CELERY_RESULT_BACKEND = (
        os.environ.get("CELERY_RESULT_BACKEND") or "redis://localhost:6379/0"
    )
    CELERY_TASK_ALWAYS_EAGER = _env_bool("CELERY_TASK_ALWAYS_EAGER", False)

    # flask-restx swallows flask-jwt-extended errors otherwise
    PROPAGATE_EXCEPTIONS = True
    # keep 404 messages as raised
    RESTX_ERROR_404_HELP = False


class TestingConfig(Config):
    TESTING = True
    MONGODB_DB = "storefront_test"
    MONGODB_MOCK = True
    JWT_SECRET_KEY = "testing-secret-key-with-enough-length"
    BASE_CURRENCY = "INR"
    EXCHANGE_RATE_REFRESH_ON_START = False
    STRIPE_SECRET_KEY = ""
    STRIPE_WEBHOOK_SECRET = ""
    EMAIL_HOST_USER = ""
    EMAIL_HOST_PASSWORD = ""
    ADMIN_EMAILS = []
    CELERY_BROKER_URL = "memory://"
    CELERY_RESULT_BACKEND = "cache+memory://"
    CELERY_TASK_ALWAYS_EAGER = True


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False
    TESTING = False


configs = {
    "develop": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}

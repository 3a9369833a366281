import os
from datetime import timedelta

DEFAULT_SECRET_KEY = "change-me-in-prod"


class Config:
    # Secret key for sessions / JWT
    SECRET_KEY = os.environ.get("SECRET_KEY", DEFAULT_SECRET_KEY)

    # Database connection
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///propertypro.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT Configuration
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=int(os.environ.get("JWT_ACCESS_MINUTES", 60)))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    CORS_ALLOWED_ORIGINS = os.environ.get("CORS_ALLOWED_ORIGINS", "")
    API_PREFIX = "/api"
    JSON_SORT_KEYS = False


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "testing-secret"
    JWT_SECRET_KEY = "testing-jwt-secret-with-enough-length"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "WARNING"


class ProductionConfig(Config):
    DEBUG = False

import os
from datetime import timedelta
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent  # project root (where wsgi.py is)
PACKAGE_DATA_DIR = Path(__file__).resolve().parent / "data"
load_dotenv(BASE_DIR / ".env")


def normalize_database_url(url: str | None) -> str | None:
    # SQLAlchemy dropped the "postgres://" alias that hosted providers still hand out
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def engine_options(url: str | None, app_env: str) -> dict:
    """
    Pool and TLS settings for the voter store.
    Certificate verification is only enforced in production.
    """
    if not url or not url.startswith("postgresql"):
        return {}

    return {
        "pool_size": int(os.getenv("DB_POOL_SIZE", "10")),
        "pool_recycle": int(os.getenv("DB_POOL_RECYCLE_SECONDS", "30")),
        "pool_pre_ping": True,
        "connect_args": {
            "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT_SECONDS", "10")),
            "sslmode": "verify-full" if app_env == "production" else "require",
        },
    }


class Config:
    APP_ENV = os.getenv("APP_ENV", "development")
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    SQLALCHEMY_DATABASE_URI = normalize_database_url(os.getenv("DATABASE_URL"))
    SQLALCHEMY_ENGINE_OPTIONS = engine_options(SQLALCHEMY_DATABASE_URI, APP_ENV)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Access-code sessions
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "jwt-dev-secret")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(
        hours=int(os.getenv("ACCESS_TOKEN_EXPIRES_HOURS", "24"))
    )

    # Static reference data, regenerated offline
    SURNAME_MAPPING_PATH = os.getenv(
        "SURNAME_MAPPING_PATH", str(PACKAGE_DATA_DIR / "surname-mapping.json")
    )
    RESERVATIONS_PATH = os.getenv(
        "RESERVATIONS_PATH", str(PACKAGE_DATA_DIR / "reservations.json")
    )
    WARD_COMPOSITION_PATH = os.getenv(
        "WARD_COMPOSITION_PATH", str(PACKAGE_DATA_DIR / "ward-composition.json")
    )

    SWAGGER = {"title": "Voter Information API", "uiversion": 3}


class TestingConfig(Config):
    TESTING = True
    APP_ENV = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"

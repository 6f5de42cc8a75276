"""
Flask configuration for the TOTP API server.

Values come from environment variables; a `.env` file in the working
directory is loaded first (python-dotenv), so local runs do not need
exported variables.
"""
import os

from dotenv import load_dotenv

load_dotenv()

_BOOL_TRUE = {"1", "true", "yes", "on"}


def _env_bool(key: str, default: bool = False) -> bool:
    raw = os.environ.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in _BOOL_TRUE


class Config:
    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", "3000"))
    DEBUG = _env_bool("DEBUG")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Comma-separated list, "*" allows every origin
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    CORS_ALLOW_HEADERS = ["Origin", "X-Requested-With", "Content-Type", "Accept"]

    API_VERSION = "1.0.0"


class TestConfig(Config):
    TESTING = True
    DEBUG = False
    LOG_LEVEL = "DEBUG"

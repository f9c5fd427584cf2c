"""
Application settings, read once from the environment.
"""
import os


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./travelbuddy.db")

# Tokens
JWT_SECRET = os.getenv("JWT_SECRET", "travelbuddy-dev-secret-change-me-in-production")
JWT_ALGORITHM = "HS256"
TOKEN_EXPIRE_DAYS = int(os.getenv("TOKEN_EXPIRE_DAYS", "7"))

# bcrypt cost factor
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# "development" exposes exception text in 500 responses
APP_ENV = os.getenv("APP_ENV", "production")

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
API_PREFIX = os.getenv("API_PREFIX", "")

API_LOG_PATH = os.getenv("API_LOG_PATH")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Fill in missing trip coordinates from city/country
GEOCODING_ENABLED = _as_bool(os.getenv("GEOCODING_ENABLED", "false"))
NOMINATIM_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org/search")


def is_development() -> bool:
    return APP_ENV == "development"

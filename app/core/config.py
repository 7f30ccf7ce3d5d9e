"""
Configuration constants for the application.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).resolve().parent.parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

# "production" makes SECRET_KEY mandatory (see app.core.security)
ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Comma separated list of origins allowed to call the API from a browser.
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]


def _database_url() -> str:
    """DATABASE_URL from the environment, else a local SQLite file.

    Legacy postgres:// URLs are rewritten to the psycopg2 driver form
    SQLAlchemy 2.x expects.
    """
    url = os.getenv("DATABASE_URL", "sqlite:///./taskstreak.db").strip()
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)
    return url


DATABASE_URL = _database_url()

# JWT lifetime; clients sign in again once it lapses.
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

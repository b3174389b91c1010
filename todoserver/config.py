# todoserver/config.py

import os
import logging
from dotenv import load_dotenv


load_dotenv()

logger = logging.getLogger(__name__)


# -------------------------------
# Database
# -------------------------------

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./todoapp.db")


# -------------------------------
# Authentication
# -------------------------------

_DEV_SECRET_KEY = "dev-secret-key-change-this-in-production"

SECRET_KEY = os.getenv("JWT_SECRET_KEY") or _DEV_SECRET_KEY
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(24 * 60)))

if SECRET_KEY == _DEV_SECRET_KEY:
    logger.warning("JWT_SECRET_KEY is not set; using the development key")


# -------------------------------
# HTTP
# -------------------------------

def _get_allowed_origins() -> list[str]:
    configured = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in configured.split(",") if origin.strip()]


CORS_ORIGINS = _get_allowed_origins()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

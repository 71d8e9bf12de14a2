import logging
import os
from typing import List
from dotenv import load_dotenv

# Pick up a local .env when present; real env vars still win
load_dotenv()

logger = logging.getLogger(__name__)

SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY: str = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")

# Comma separated; "*" keeps CORS open for local development
CORS_ORIGINS: List[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
]

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# app_metadata.role that unlocks back-office routes (order status changes)
ADMIN_ROLE: str = os.getenv("ADMIN_ROLE", "admin")

# Largest fit-wizard photo we read into memory
MAX_PHOTO_BYTES: int = int(os.getenv("MAX_PHOTO_BYTES", str(10 * 1024 * 1024)))

SIZE_LABELS = ("XS", "S", "M", "L", "XL", "XXL")
FALLBACK_SIZE = "M"


def _size_from_env(raw: str) -> str:
    size = raw.strip().upper()
    if size not in SIZE_LABELS:
        logger.warning("DEFAULT_SIZE=%r is not one of %s; using %s", raw, ", ".join(SIZE_LABELS), FALLBACK_SIZE)
        return FALLBACK_SIZE
    return size


# Size handed back by the fit calculator when no measurement was supplied
DEFAULT_SIZE: str = _size_from_env(os.getenv("DEFAULT_SIZE", FALLBACK_SIZE))

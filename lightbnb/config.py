# lightbnb/config.py
# Environment-aware configuration for the LightBnB listings backend

import os
from typing import Literal

# Environment detection
ENV: Literal["dev", "staging", "prod"] = os.environ.get("ENV", "dev")  # type: ignore
IS_DEV = (ENV == "dev")
IS_STAGING = (ENV == "staging")
IS_PROD = (ENV == "prod")

# Database configuration
# DATABASE_URL takes precedence (managed Postgres in staging/prod)
# Falls back to a local SQLite file for development
DATABASE_PATH = os.environ.get("DATABASE_PATH", "lightbnb.db")
DATABASE_URL = os.environ.get("DATABASE_URL", "").strip() or f"sqlite:///{DATABASE_PATH}"

# Property search
DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = int(os.environ.get("MAX_SEARCH_LIMIT", "50"))
# Escape % and _ in the city filter; set to 0 for the legacy raw-wrap behaviour
SEARCH_ESCAPE_LIKE = os.environ.get("SEARCH_ESCAPE_LIKE", "1").strip().lower() not in ("0", "false", "no")

# CORS origins (expand for staging/prod)
CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

if IS_STAGING or IS_PROD:
    extra_origins = os.environ.get("CORS_ORIGINS", "")
    if extra_origins:
        CORS_ORIGINS.extend(o.strip() for o in extra_origins.split(",") if o.strip())

# Database type detection
IS_POSTGRES = DATABASE_URL.startswith(("postgres://", "postgresql://", "postgresql+asyncpg://"))
IS_SQLITE = not IS_POSTGRES

print(f"[CONFIG] Environment: {ENV}")
print(f"[CONFIG] Database: {'PostgreSQL' if IS_POSTGRES else 'SQLite (local dev)'}")
print(f"[CONFIG] Search limit: default {DEFAULT_SEARCH_LIMIT}, max {MAX_SEARCH_LIMIT}")

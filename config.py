"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "vikebot")
DB_USER: str = os.getenv("DB_USER", "vikebot")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = (
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

DB_POOL_MIN: int = int(os.getenv("DB_POOL_MIN", "1"))
DB_POOL_MAX: int = int(os.getenv("DB_POOL_MAX", "5"))

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ── Round entry secrets (sizes in random bytes) ───────────
AUTH_TOKEN_BYTES: int = int(os.getenv("AUTH_TOKEN_BYTES", "18"))
ROUND_TICKET_BYTES: int = int(os.getenv("ROUND_TICKET_BYTES", "16"))
WATCH_TOKEN_BYTES: int = int(os.getenv("WATCH_TOKEN_BYTES", "12"))
AES_KEY_BYTES: int = int(os.getenv("AES_KEY_BYTES", "32"))

"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import pooled_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Round lifecycle states
CREATE TABLE IF NOT EXISTS roundstatus (
    id              INT PRIMARY KEY,
    name            VARCHAR(20) UNIQUE NOT NULL
);

INSERT INTO roundstatus (id, name) VALUES
    (1, 'open'), (2, 'closed'), (3, 'running'), (4, 'finished')
ON CONFLICT (id) DO NOTHING;

-- Capacity presets a round can use
CREATE TABLE IF NOT EXISTS roundsize (
    id              SERIAL PRIMARY KEY,
    min             INT NOT NULL,
    max             INT NOT NULL,
    CHECK (min > 0 AND min <= max)
);

CREATE TABLE IF NOT EXISTS round (
    id              SERIAL PRIMARY KEY,
    name            VARCHAR(100) NOT NULL,
    wallpaper       VARCHAR(255) NOT NULL DEFAULT '',
    roundsize_id    INT NOT NULL REFERENCES roundsize(id),
    starttime       TIMESTAMPTZ,
    roundstatus_id  INT NOT NULL REFERENCES roundstatus(id) DEFAULT 1
);

CREATE TABLE IF NOT EXISTS "user" (
    id              SERIAL PRIMARY KEY,
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS user_username (
    user_id         INT PRIMARY KEY REFERENCES "user"(id) ON DELETE CASCADE,
    username        VARCHAR(64) UNIQUE NOT NULL
);

-- Membership of a user in a round, with the secrets issued on join.
-- The unique pair makes joining idempotent at the storage level.
CREATE TABLE IF NOT EXISTS roundentry (
    id              SERIAL PRIMARY KEY,
    user_id         INT NOT NULL REFERENCES "user"(id) ON DELETE CASCADE,
    round_id        INT NOT NULL REFERENCES round(id) ON DELETE CASCADE,
    authtoken       VARCHAR(64) NOT NULL,
    roundticket     VARCHAR(64) NOT NULL,
    watchtoken      VARCHAR(64) NOT NULL,
    aeskey          BYTEA NOT NULL,
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    CONSTRAINT uq_roundentry_user_round UNIQUE (user_id, round_id)
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_round_status ON round(roundstatus_id);
CREATE INDEX IF NOT EXISTS idx_roundentry_round ON roundentry(round_id);
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    with pooled_connection() as conn:
        try:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to initialize schema: {e}")
            raise
    logger.info("Database schema initialized successfully.")


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")

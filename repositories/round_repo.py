"""
repositories/round_repo.py
---------------------------
Data access layer for rounds (lobbies) and their memberships.
All SQL queries touching `round`, `roundsize` and `roundentry` live here.

Every operation takes an optional `log` logger; when omitted the module
logger is used. Failures are logged once and returned inside a
`Result`, never raised.
"""

import logging
from typing import Optional

import config
from db import query
from models.round import Player, Round, RoundEntry, RoundStatus
from repositories.errors import Result, classify
from utils import crypto
from utils.logger import get_logger

logger = get_logger(__name__)

# Secrets issued per round entry, generated in this order.
_SECRETS = (
    ("authtoken", lambda: crypto.gen_string(config.AUTH_TOKEN_BYTES)),
    ("roundticket", lambda: crypto.gen_string(config.ROUND_TICKET_BYTES)),
    ("watchtoken", lambda: crypto.gen_string(config.WATCH_TOKEN_BYTES)),
    ("aeskey", lambda: crypto.gen_key(config.AES_KEY_BYTES)),
)


class RoundRepository:
    """Repository for rounds and the users who joined them."""

    # ── READ ──────────────────────────────────────────────

    def active_rounds(self, log: Optional[logging.Logger] = None) -> Result[list[Round]]:
        """
        Load every round that is not finished, ordered by id.

        Returns:
            Result holding a (possibly empty) list of Round objects.
        """
        log = logger if log is None else log
        sql = """
            SELECT r.id,
                   r.name,
                   r.wallpaper,
                   (SELECT COUNT(re.id) FROM roundentry re WHERE re.round_id = r.id) AS joined,
                   rs.min,
                   rs.max,
                   r.starttime,
                   r.roundstatus_id
            FROM round r
            JOIN roundsize rs ON r.roundsize_id = rs.id
            WHERE r.roundstatus_id IN (%s, %s, %s)
            ORDER BY r.id ASC;
        """
        try:
            rounds = query.select_range(
                sql, [int(s) for s in RoundStatus.active()], self._row_to_round,
            )
        except Exception as e:
            err = classify(e)
            log.error(
                f"Failed to load active rounds: {e}",
                extra={"error_kind": err.kind},
            )
            return Result.failure(err)
        return Result.success(rounds)

    def round_players(self, round_id: int, log: Optional[logging.Logger] = None) -> Result[list[Player]]:
        """
        Load the players (user id + username) that joined a round.

        Args:
            round_id: Round primary key.

        Returns:
            Result holding a (possibly empty) list of Player objects.
        """
        log = logger if log is None else log
        sql = """
            SELECT re.user_id, uu.username
            FROM roundentry re
            JOIN "user" u ON re.user_id = u.id
            JOIN user_username uu ON u.id = uu.user_id
            WHERE re.round_id = %s;
        """
        try:
            players = query.select_range(
                sql, [round_id], lambda r: Player(user_id=str(r[0]), username=r[1]),
            )
        except Exception as e:
            err = classify(e)
            log.error(
                f"Failed to load players of round {round_id}: {e}",
                extra={"round_id": round_id, "error_kind": err.kind},
            )
            return Result.failure(err)
        return Result.success(players)

    def joined_users(self, round_id: int, log: Optional[logging.Logger] = None) -> Result[list[int]]:
        """Return the ids of all users that joined `round_id`."""
        log = logger if log is None else log
        sql = "SELECT user_id FROM roundentry WHERE round_id = %s;"
        try:
            user_ids = query.select_range(sql, [round_id], lambda r: int(r[0]))
        except Exception as e:
            err = classify(e)
            log.error(
                f"Failed to load joined users of round {round_id}: {e}",
                extra={"round_id": round_id, "error_kind": err.kind},
            )
            return Result.failure(err)
        return Result.success(user_ids)

    def round_exists(self, round_id: int, log: Optional[logging.Logger] = None) -> Result[bool]:
        """Check whether a round with this id exists."""
        log = logger if log is None else log
        sql = "SELECT id FROM round WHERE id = %s;"
        try:
            found = query.exists(sql, [round_id])
        except Exception as e:
            err = classify(e)
            log.error(
                f"Failed to check existence of round {round_id}: {e}",
                extra={"round_id": round_id, "error_kind": err.kind},
            )
            return Result.failure(err, value=False)
        return Result.success(found)

    # ── CREATE ────────────────────────────────────────────

    def join_round(self, user_id: int, round_id: int, log: Optional[logging.Logger] = None) -> Result[bool]:
        """
        Let a user join a round. Joining twice is not an error.

        Fresh secrets are issued for the entry. The (user_id, round_id)
        pair is unique in `roundentry`, so a repeated join inserts
        nothing and the freshly generated secrets are dropped. Secrets
        are generated before the insert, so a generator failure fails
        the call even when the user had already joined.

        Args:
            user_id: Joining user.
            round_id: Round to join.

        Returns:
            Result whose value is `already_joined`: False for a new
            membership, True if the user was already in the round.
        """
        log = logger if log is None else log
        fields = {"user_id": user_id, "round_id": round_id}

        issued = {}
        for name, generate in _SECRETS:
            try:
                issued[name] = generate()
            except Exception as e:
                err = classify(e)
                log.error(
                    f"Failed to generate {name} for user {user_id} joining round {round_id}: {e}",
                    extra={**fields, "error_kind": err.kind},
                )
                return Result.failure(err, value=False)
        entry = RoundEntry(user_id=user_id, round_id=round_id, **issued)

        sql = """
            INSERT INTO roundentry (authtoken, roundticket, watchtoken, user_id, round_id, aeskey)
            VALUES (%s, %s, %s, %s, %s, %s)
            ON CONFLICT (user_id, round_id) DO NOTHING
            RETURNING id;
        """
        try:
            row = query.execute_returning(sql, (
                entry.authtoken, entry.roundticket, entry.watchtoken,
                entry.user_id, entry.round_id, entry.aeskey,
            ))
        except Exception as e:
            err = classify(e)
            log.error(
                f"Failed to insert round entry for user {user_id} in round {round_id}: {e}",
                extra={**fields, "error_kind": err.kind},
            )
            return Result.failure(err, value=False)

        if row is None:
            log.debug(f"User {user_id} already joined round {round_id}")
            return Result.success(True)

        entry.id = row[0]
        log.info(f"User {user_id} joined round {round_id} (entry #{entry.id})")
        return Result.success(False)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_round(row: tuple) -> Round:
        """Convert a database row to a Round object."""
        return Round(
            id=row[0],
            name=row[1],
            wallpaper=row[2],
            joined=int(row[3]),
            min=row[4],
            max=row[5],
            starttime=row[6],
            roundstatus=row[7],
        )

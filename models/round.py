"""
models/round.py
---------------
Domain models for rounds (lobbies) and the players who joined them.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Optional


class RoundStatus(IntEnum):
    """Lifecycle state of a round; values match the `roundstatus` table."""
    OPEN = 1
    CLOSED = 2
    RUNNING = 3
    FINISHED = 4

    @classmethod
    def active(cls) -> tuple["RoundStatus", ...]:
        """Every status except FINISHED."""
        return (cls.OPEN, cls.CLOSED, cls.RUNNING)


@dataclass
class Round:
    """
    A bounded game session with capacity limits and a roster of users.

    Attributes:
        id: Database primary key.
        name: Display name of the round.
        wallpaper: Image reference shown in the lobby.
        joined: Number of users that joined (counted from roundentry).
        min: Minimum number of players required to start.
        max: Maximum number of players allowed.
        starttime: Scheduled start, None if not yet scheduled.
        roundstatus: Current RoundStatus value.
    """
    id: int
    name: str
    wallpaper: str
    joined: int
    min: int
    max: int
    starttime: Optional[datetime]
    roundstatus: int

    @property
    def status(self) -> RoundStatus:
        """The `roundstatus` id as a RoundStatus member."""
        return RoundStatus(self.roundstatus)

    def is_full(self) -> bool:
        """Returns True if no further player can join."""
        return self.joined >= self.max

    def __str__(self) -> str:
        return f"#{self.id} {self.name} ({self.joined}/{self.max}) - {self.status.name.lower()}"


@dataclass
class Player:
    """A user who joined a round. `user_id` is the user key as a string."""
    user_id: str
    username: str


@dataclass
class RoundEntry:
    """
    Membership of one user in one round with the secrets issued on join.

    Attributes:
        user_id: Joined user.
        round_id: Joined round.
        authtoken: Token the player authenticates with.
        roundticket: Ticket identifying the player inside the round.
        watchtoken: Read-only token for spectating the round.
        aeskey: Symmetric key for the player's encrypted channel.
        id: Database primary key (None for new records).
    """
    user_id: int
    round_id: int
    authtoken: str
    roundticket: str
    watchtoken: str
    aeskey: bytes
    id: Optional[int] = None

    def __repr__(self) -> str:
        # keep secrets out of logs and tracebacks
        return f"RoundEntry(id={self.id}, user_id={self.user_id}, round_id={self.round_id})"

"""Domain models for a single guessing game."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum

MAX_ATTEMPTS = 6
SESSION_VERSION = 1
SESSION_TTL = timedelta(hours=24)


class GameState(StrEnum):
    """Lifecycle of a game; only PLAYING may transition."""

    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class GameSession:
    """Client-held, server-signed record of one game."""

    target_id: int
    attempts: int
    state: GameState
    created_at: datetime
    version: int = SESSION_VERSION

    @property
    def is_finished(self) -> bool:
        return self.state is not GameState.PLAYING

    @property
    def expires_at(self) -> datetime:
        return self.created_at + SESSION_TTL

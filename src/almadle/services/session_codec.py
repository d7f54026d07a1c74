"""HMAC-SHA256 signed game session tokens.

The whole game state lives in the token the client carries; the server only
keeps the secret. Token format: base64url(json_payload).base64url(hmac_sha256),
both without padding. The MAC covers the payload segment exactly as sent.

Any decode, signature, schema or expiry failure yields ``None`` so callers
cannot learn why a token was rejected.
"""

import base64
import hashlib
import hmac
import json
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta

from almadle.domain.game import (
    MAX_ATTEMPTS,
    SESSION_TTL,
    SESSION_VERSION,
    GameSession,
    GameState,
)

logger = logging.getLogger(__name__)

MAX_TOKEN_LENGTH = 1024
CLOCK_SKEW = timedelta(seconds=60)

_TOKEN_PARTS = 2  # payload.signature
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SessionCodec:
    """Signs, verifies and advances game sessions."""

    secret: str
    ttl: timedelta = SESSION_TTL
    clock: Callable[[], datetime] = _utc_now

    def issue(self, target_id: int) -> GameSession:
        """Return a fresh session for a newly selected target."""
        return GameSession(
            target_id=target_id,
            attempts=0,
            state=GameState.PLAYING,
            created_at=_truncate_to_ms(self.clock()),
        )

    def encode(self, session: GameSession) -> str:
        """Serialize and sign a session, returning the token string."""
        payload = _b64encode(_canonical_bytes(session))
        return f"{payload}.{self._sign(payload)}"

    def decode(self, token: str | None) -> GameSession | None:
        """Verify a token and return its session, or None when it is unusable."""
        if not token or len(token) > MAX_TOKEN_LENGTH:
            return None
        parts = token.split(".")
        if len(parts) != _TOKEN_PARTS or not all(parts):
            return None
        payload, signature = parts

        provided = signature.encode("utf-8")
        expected = self._sign(payload).encode("ascii")
        if len(provided) != len(expected):
            logger.debug("session token signature length mismatch")
            return None
        if not hmac.compare_digest(provided, expected):
            logger.debug("session token signature mismatch")
            return None

        try:
            data = json.loads(_b64decode(payload))
        except ValueError:
            logger.debug("session token malformed payload")
            return None
        if not isinstance(data, dict):
            return None

        session = _session_from_payload(data)
        if session is None:
            logger.debug("session token failed schema validation")
            return None
        if not self._is_fresh(session):
            return None
        return session

    def advance(
        self, session: GameSession, attempts: int, state: GameState
    ) -> GameSession:
        """Return a copy of the session with new progress, keeping its identity."""
        if session.is_finished:
            raise ValueError("Finished sessions cannot change")
        if attempts < session.attempts:
            raise ValueError("Attempts cannot decrease")
        return replace(session, attempts=attempts, state=state)

    def _sign(self, payload: str) -> str:
        digest = hmac.new(
            self.secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256
        ).digest()
        return _b64encode(digest)

    def _is_fresh(self, session: GameSession) -> bool:
        now = self.clock()
        if session.created_at > now + CLOCK_SKEW:
            logger.debug("session token created in the future")
            return False
        if now - session.created_at > self.ttl:
            logger.debug("session token expired")
            return False
        return True


def _canonical_bytes(session: GameSession) -> bytes:
    body = {
        "v": session.version,
        "targetId": session.target_id,
        "attempts": session.attempts,
        "state": session.state.value,
        "createdAt": (session.created_at - _EPOCH) // _ONE_MS,
    }
    return json.dumps(body, sort_keys=True, separators=(",", ":")).encode("utf-8")


def _session_from_payload(data: dict[str, object]) -> GameSession | None:
    version = data.get("v")
    target_id = data.get("targetId")
    attempts = data.get("attempts")
    created_at = data.get("createdAt")
    state = data.get("state")

    if not _is_integral(version) or version != SESSION_VERSION:
        return None
    if not (
        _is_integral(target_id)
        and _is_integral(attempts)
        and _is_integral(created_at)
    ):
        return None
    if not 0 <= attempts <= MAX_ATTEMPTS:
        return None
    try:
        game_state = GameState(state)
    except ValueError:
        return None
    try:
        created = _EPOCH + int(created_at) * _ONE_MS
    except OverflowError:
        return None
    return GameSession(
        target_id=int(target_id),
        attempts=int(attempts),
        state=game_state,
        created_at=created,
        version=SESSION_VERSION,
    )


def _is_integral(value: object) -> bool:
    """Check that a value is a finite whole number (excluding bool)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value) and value.is_integer()


def _truncate_to_ms(moment: datetime) -> datetime:
    return moment.replace(microsecond=moment.microsecond // 1000 * 1000)


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    padded = text + "=" * (-len(text) % 4)
    return base64.b64decode(padded, altchars=b"-_", validate=True)

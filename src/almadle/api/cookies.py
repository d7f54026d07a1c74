"""Session cookie transport."""

from fastapi import Request, Response

from almadle.config import Settings
from almadle.domain.game import GameSession
from almadle.services.session_codec import SessionCodec

COOKIE_NAME = "almadle_game"


def read_session_token(request: Request) -> str | None:
    return request.cookies.get(COOKIE_NAME)


def set_session_cookie(
    response: Response,
    session: GameSession,
    codec: SessionCodec,
    settings: Settings,
) -> None:
    """Write the signed session, expiring together with the session itself."""
    response.set_cookie(
        COOKIE_NAME,
        codec.encode(session),
        expires=session.expires_at,
        path="/",
        secure=settings.cookie_secure,
        httponly=True,
        samesite="lax",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    """Expire the session cookie immediately."""
    response.delete_cookie(
        COOKIE_NAME,
        path="/",
        secure=settings.cookie_secure,
        httponly=True,
        samesite="lax",
    )

"""Shareable emoji summary of a finished game."""

from datetime import date

from almadle.domain.game import MAX_ATTEMPTS, GameSession
from almadle.domain.guesses import GuessResult, MatchStatus

SHARE_TILES: dict[MatchStatus, str] = {
    MatchStatus.CORRECT: "\N{LARGE GREEN SQUARE}",
    MatchStatus.CLOSE: "\N{LARGE YELLOW SQUARE}",
    MatchStatus.WRONG: "\N{WHITE LARGE SQUARE}",
}


def build_share_text(
    results: list[GuessResult], session: GameSession, day: date
) -> str:
    """Render the header and one tile row per guess."""
    lines = [
        f"Almadle {day.isoformat()}",
        f"Voltooid in {session.attempts}/{MAX_ATTEMPTS}",
        "",
    ]
    for result in results:
        lines.append("".join(SHARE_TILES[status] for status in result.matches.tiles()))
    return "\n".join(lines)

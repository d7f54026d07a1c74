"""Game flow: starting rounds, submitting guesses and sharing results."""

import logging
from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from almadle.domain.dishes import Dish
from almadle.domain.game import MAX_ATTEMPTS, GameSession, GameState
from almadle.domain.guesses import GuessResult
from almadle.services.catalog import CatalogService
from almadle.services.scoring import is_winning_guess, score_guess
from almadle.services.selector import (
    calendar_seed,
    pick_random_dish,
    random_seed_token,
    select_calendar_dish,
    select_seeded_dish,
)
from almadle.services.session_codec import SessionCodec
from almadle.services.share import build_share_text

logger = logging.getLogger(__name__)


class NoActiveGameError(Exception):
    """Raised when an action needs a valid session and none exists."""


class UnknownDishError(Exception):
    """Raised when a guess or target id is not in the catalog."""


class GameInProgressError(Exception):
    """Raised when an action is only allowed after the game has ended."""


class SelectionMode(StrEnum):
    """How the target dish of a new round is chosen."""

    RANDOM = "random"
    DAILY = "daily"
    SEEDED = "seeded"


@dataclass(frozen=True)
class StartResult:
    """Outcome of a start request."""

    session: GameSession
    issued: bool
    mode: SelectionMode | None = None
    seed: str | None = None


@dataclass(frozen=True)
class GuessOutcome:
    """Outcome of a guess submission."""

    session: GameSession
    result: GuessResult | None
    target: Dish | None
    changed: bool


@dataclass
class GameService:
    """Coordinates selection, scoring and session transitions."""

    catalog: CatalogService
    codec: SessionCodec

    def start(  # noqa: PLR0913
        self,
        existing: GameSession | None,
        *,
        today: date,
        force_new: bool = False,
        mode: SelectionMode = SelectionMode.RANDOM,
        seed: str | None = None,
    ) -> StartResult:
        """Keep a running game or issue a new one."""
        if existing and not existing.is_finished and not force_new:
            return StartResult(session=existing, issued=False)

        dishes = self.catalog.list_dishes()
        if mode is SelectionMode.DAILY:
            seed = seed or calendar_seed(today)
            target = select_calendar_dish(dishes, seed)
        elif mode is SelectionMode.SEEDED:
            seed = seed or random_seed_token()
            target = select_seeded_dish(dishes, seed)
        else:
            seed = None
            target = pick_random_dish(dishes)

        logger.info("Starting new game", extra={"mode": mode.value})
        return StartResult(
            session=self.codec.issue(target.id), issued=True, mode=mode, seed=seed
        )

    def submit_guess(self, session: GameSession | None, guess_id: int) -> GuessOutcome:
        """Score a guess and advance the session."""
        if session is None:
            raise NoActiveGameError
        target = self.catalog.get(session.target_id)
        guess = self.catalog.get(guess_id)
        if target is None or guess is None:
            raise UnknownDishError

        if session.is_finished:
            return GuessOutcome(session=session, result=None, target=target, changed=False)

        attempts = session.attempts + 1
        if is_winning_guess(guess, target):
            state = GameState.WON
        elif attempts >= MAX_ATTEMPTS:
            state = GameState.LOST
        else:
            state = GameState.PLAYING

        updated = self.codec.advance(session, attempts=attempts, state=state)
        return GuessOutcome(
            session=updated,
            result=score_guess(guess, target),
            target=target if updated.is_finished else None,
            changed=True,
        )

    def share(
        self, session: GameSession | None, guess_ids: list[int], today: date
    ) -> str:
        """Return the shareable summary of a finished game."""
        if session is None:
            raise NoActiveGameError
        if not session.is_finished:
            raise GameInProgressError
        target = self.catalog.get(session.target_id)
        if target is None or len(guess_ids) > MAX_ATTEMPTS:
            raise UnknownDishError
        results = []
        for guess_id in guess_ids:
            guess = self.catalog.get(guess_id)
            if guess is None:
                raise UnknownDishError
            results.append(score_guess(guess, target))
        return build_share_text(results, session, today)

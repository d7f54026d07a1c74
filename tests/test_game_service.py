"""Tests for the game flow state machine."""

from datetime import date

import pytest

from almadle.domain.game import MAX_ATTEMPTS, GameState
from almadle.services.game import (
    GameInProgressError,
    GameService,
    NoActiveGameError,
    SelectionMode,
    UnknownDishError,
)
from almadle.services.selector import select_calendar_dish, select_seeded_dish

TODAY = date(2026, 3, 14)


def _wrong_ids(game_service: GameService, target_id: int) -> list[int]:
    return [d.id for d in game_service.catalog.list_dishes() if d.id != target_id]


def test_start_issues_session_when_none_exists(game_service: GameService) -> None:
    started = game_service.start(None, today=TODAY)

    assert started.issued
    assert started.session.attempts == 0
    assert started.session.state is GameState.PLAYING
    assert game_service.catalog.get(started.session.target_id) is not None


def test_start_keeps_running_game(game_service: GameService) -> None:
    existing = game_service.start(None, today=TODAY).session

    started = game_service.start(existing, today=TODAY)

    assert not started.issued
    assert started.session is existing


def test_start_replaces_finished_or_forced_game(game_service: GameService) -> None:
    existing = game_service.start(None, today=TODAY).session
    finished = game_service.submit_guess(existing, existing.target_id).session

    assert game_service.start(finished, today=TODAY).issued
    assert game_service.start(existing, today=TODAY, force_new=True).issued


def test_daily_mode_uses_calendar_seed(game_service: GameService, dishes) -> None:
    started = game_service.start(None, today=TODAY, mode=SelectionMode.DAILY)

    assert started.seed == "20260314"
    assert started.session.target_id == select_calendar_dish(dishes, TODAY).id


def test_seeded_mode_generates_replayable_token(
    game_service: GameService, dishes
) -> None:
    started = game_service.start(None, today=TODAY, mode=SelectionMode.SEEDED)

    assert started.seed
    assert started.session.target_id == select_seeded_dish(dishes, started.seed).id

    replay = game_service.start(
        None, today=TODAY, mode=SelectionMode.SEEDED, seed=started.seed
    )
    assert replay.session.target_id == started.session.target_id


def test_five_misses_then_win(game_service: GameService) -> None:
    session = game_service.start(None, today=TODAY).session
    for guess_id in _wrong_ids(game_service, session.target_id)[:5]:
        outcome = game_service.submit_guess(session, guess_id)
        assert outcome.target is None
        session = outcome.session
    assert session.attempts == 5
    assert session.state is GameState.PLAYING

    outcome = game_service.submit_guess(session, session.target_id)

    assert outcome.session.attempts == 6
    assert outcome.session.state is GameState.WON
    assert outcome.target.id == session.target_id
    assert outcome.result is not None


def test_sixth_miss_loses_and_further_guesses_are_no_ops(
    game_service: GameService,
) -> None:
    session = game_service.start(None, today=TODAY).session
    wrong = _wrong_ids(game_service, session.target_id)
    for guess_id in wrong[:MAX_ATTEMPTS]:
        outcome = game_service.submit_guess(session, guess_id)
        session = outcome.session

    assert session.state is GameState.LOST
    assert session.attempts == MAX_ATTEMPTS
    assert outcome.target is not None

    replay = game_service.submit_guess(session, session.target_id)

    assert not replay.changed
    assert replay.result is None
    assert replay.session == session
    assert replay.target.id == session.target_id


def test_guess_without_session_is_rejected(game_service: GameService) -> None:
    with pytest.raises(NoActiveGameError):
        game_service.submit_guess(None, 1)


def test_unknown_guess_is_rejected(game_service: GameService) -> None:
    session = game_service.start(None, today=TODAY).session
    with pytest.raises(UnknownDishError):
        game_service.submit_guess(session, 999)


def test_unknown_target_is_rejected(game_service: GameService, codec) -> None:
    session = codec.issue(target_id=999)
    with pytest.raises(UnknownDishError):
        game_service.submit_guess(session, 1)


def test_share_requires_finished_game(game_service: GameService) -> None:
    session = game_service.start(None, today=TODAY).session
    with pytest.raises(GameInProgressError):
        game_service.share(session, [1], TODAY)
    with pytest.raises(NoActiveGameError):
        game_service.share(None, [1], TODAY)


def test_share_renders_rows_for_finished_game(game_service: GameService) -> None:
    session = game_service.start(None, today=TODAY).session
    miss = _wrong_ids(game_service, session.target_id)[0]
    session = game_service.submit_guess(session, miss).session
    session = game_service.submit_guess(session, session.target_id).session

    text = game_service.share(session, [miss, session.target_id], TODAY)

    lines = text.splitlines()
    assert lines[0] == "Almadle 2026-03-14"
    assert lines[1] == "Voltooid in 2/6"
    assert lines[-1] == "\N{LARGE GREEN SQUARE}" * 6
    assert len(lines) == 5


def test_share_rejects_unknown_or_too_many_guesses(game_service: GameService) -> None:
    session = game_service.start(None, today=TODAY).session
    session = game_service.submit_guess(session, session.target_id).session

    with pytest.raises(UnknownDishError):
        game_service.share(session, [999], TODAY)
    with pytest.raises(UnknownDishError):
        game_service.share(session, [1] * (MAX_ATTEMPTS + 1), TODAY)

"""Game API endpoints."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.concurrency import run_in_threadpool

from almadle.api.cookies import read_session_token, set_session_cookie
from almadle.api.models import (
    DishOut,
    GuessOut,
    GuessRequest,
    GuessResponse,
    ShareRequest,
    ShareResponse,
    StartResponse,
    TargetOut,
)
from almadle.containers import AppContainer
from almadle.domain.game import MAX_ATTEMPTS, GameSession
from almadle.services.game import NoActiveGameError, SelectionMode

router = APIRouter(prefix="/api", tags=["game"])


def _get_container(request: Request) -> AppContainer:
    return request.app.state.container


def current_session(
    request: Request, container: AppContainer = Depends(_get_container)
) -> GameSession | None:
    """Return the verified session carried by the request, if any."""
    return container.session_codec.decode(read_session_token(request))


def _today(container: AppContainer) -> date:
    return datetime.now(tz=ZoneInfo(container.settings.daily_timezone)).date()


@router.get("/game/start")
async def start_game(  # noqa: PLR0913
    response: Response,
    new: bool = False,
    mode: SelectionMode = SelectionMode.RANDOM,
    seed: str | None = Query(default=None, max_length=64),
    session: GameSession | None = Depends(current_session),
    container: AppContainer = Depends(_get_container),
) -> StartResponse:
    """Start a game unless one is already running."""
    started = container.game_service.start(
        session,
        today=_today(container),
        force_new=new,
        mode=mode,
        seed=seed,
    )
    if started.issued:
        set_session_cookie(
            response, started.session, container.session_codec, container.settings
        )
    return StartResponse(
        max_attempts=MAX_ATTEMPTS,
        mode=started.mode.value if started.mode else None,
        seed=started.seed,
    )


@router.get("/dishes")
async def list_dishes(
    container: AppContainer = Depends(_get_container),
) -> list[DishOut]:
    """Return the catalog without image references."""
    return [DishOut.from_dish(dish) for dish in container.catalog_service.list_dishes()]


@router.get("/dishes/search")
async def search_dishes(
    q: str = Query(default="", max_length=100),
    exclude: list[int] = Query(default=[]),
    container: AppContainer = Depends(_get_container),
) -> list[DishOut]:
    """Autocomplete dish names, skipping dishes already guessed."""
    hits = container.catalog_service.search(q, exclude_ids=exclude)
    return [DishOut.from_dish(dish) for dish in hits]


@router.post("/game/guess")
async def submit_guess(
    body: GuessRequest,
    response: Response,
    session: GameSession | None = Depends(current_session),
    container: AppContainer = Depends(_get_container),
) -> GuessResponse:
    """Score a guess against the hidden target of the session."""
    outcome = container.game_service.submit_guess(session, body.guess_id)
    if outcome.changed:
        set_session_cookie(
            response, outcome.session, container.session_codec, container.settings
        )
    target = outcome.target
    return GuessResponse(
        guess=GuessOut.from_result(outcome.result) if outcome.result else None,
        state=outcome.session.state,
        attempts=outcome.session.attempts,
        target=TargetOut(id=target.id, name=target.name) if target else None,
    )


@router.get("/game/image")
async def game_image(
    session: GameSession | None = Depends(current_session),
    container: AppContainer = Depends(_get_container),
) -> Response:
    """Return the target photo at the detail level the session has earned."""
    if session is None:
        raise NoActiveGameError
    dish = container.catalog_service.get(session.target_id)
    if dish is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    content = await container.image_store.load(dish.image_ref)
    if content is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)

    image = await run_in_threadpool(
        container.disclosure_renderer.render, content, session
    )
    headers = {
        "Cache-Control": "no-store",
        "Vary": "Cookie",
        "X-Almadle-Mode": image.mode.value,
        "X-Almadle-State": session.state.value,
        "X-Almadle-Attempts": str(session.attempts),
    }
    if image.level is not None:
        headers["X-Almadle-PixelFactor"] = str(image.level.pixel_factor)
        headers["X-Almadle-Small"] = (
            f"{image.level.coarse_width}x{image.level.coarse_height}"
        )
    return Response(content=image.content, media_type=image.media_type, headers=headers)


@router.post("/game/share")
async def share_game(
    body: ShareRequest,
    session: GameSession | None = Depends(current_session),
    container: AppContainer = Depends(_get_container),
) -> ShareResponse:
    """Return the emoji summary of a finished game."""
    text = container.game_service.share(session, body.guess_ids, _today(container))
    return ShareResponse(text=text)

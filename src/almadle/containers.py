"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from almadle.adapters.image_store import AssetImageStore, ImageStore
from almadle.adapters.json_dish_repository import JsonDishRepository
from almadle.config import Settings
from almadle.services.catalog import CatalogService
from almadle.services.disclosure import DisclosureRenderer
from almadle.services.game import GameService
from almadle.services.selector import EmptyCatalogError
from almadle.services.session_codec import SessionCodec


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_service: CatalogService
    session_codec: SessionCodec
    game_service: GameService
    image_store: ImageStore
    disclosure_renderer: DisclosureRenderer
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    catalog_service = CatalogService.load(
        JsonDishRepository(Path(resolved_settings.catalog_path))
    )
    if not catalog_service.list_dishes():
        raise EmptyCatalogError(
            f"Catalog {resolved_settings.catalog_path} contains no dishes"
        )
    session_codec = SessionCodec(secret=resolved_settings.almadle_secret)
    game_service = GameService(catalog=catalog_service, codec=session_codec)
    image_store = AssetImageStore.create(
        roots=resolved_settings.image_roots,
        timeout=resolved_settings.image_fetch_timeout,
    )

    async def close_resources() -> None:
        await image_store.close()

    return AppContainer(
        settings=resolved_settings,
        catalog_service=catalog_service,
        session_codec=session_codec,
        game_service=game_service,
        image_store=image_store,
        disclosure_renderer=DisclosureRenderer(),
        close_resources=close_resources,
    )

"""Shared test fixtures."""

import io
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from PIL import Image

from almadle.config import Settings
from almadle.containers import AppContainer
from almadle.domain.dishes import Dish
from almadle.services.catalog import CatalogService, DishRepository
from almadle.services.disclosure import DisclosureRenderer
from almadle.services.game import GameService
from almadle.services.session_codec import SessionCodec

SECRET = "test-hmac-secret"


def make_dish(  # noqa: PLR0913
    dish_id: int,
    name: str,
    *,
    category: str = "Hoofdgerecht",
    diet: str = "Vlees",
    carb_source: str = "Aardappelen",
    price: str = "5.00",
    allergens: tuple[str, ...] = (),
) -> Dish:
    return Dish(
        id=dish_id,
        name=name,
        image_ref=f"images/{dish_id}.jpg",
        category=category,
        diet=diet,
        carb_source=carb_source,
        price_student=Decimal(price),
        allergens=allergens,
    )


def make_png(size: tuple[int, int] = (640, 480)) -> bytes:
    """Build a colourful test photo that varies along both axes."""
    vertical = Image.linear_gradient("L").resize(size)
    horizontal = Image.linear_gradient("L").rotate(90).resize(size)
    constant = Image.new("L", size, 128)
    image = Image.merge("RGB", (vertical, horizontal, constant))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@dataclass
class FixedClock:
    """Controllable clock for session expiry tests."""

    now: datetime = field(default_factory=lambda: datetime(2026, 3, 14, 12, tzinfo=UTC))

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@dataclass
class InMemoryDishRepository(DishRepository):
    """In-memory catalog source for tests."""

    dishes: list[Dish] = field(default_factory=list)

    def load_dishes(self) -> list[Dish]:
        return list(self.dishes)


@dataclass
class FakeImageStore:
    """Image store returning bytes from a dict."""

    images: dict[str, bytes] = field(default_factory=dict)
    requested: list[str] = field(default_factory=list)

    async def load(self, image_ref: str) -> bytes | None:
        self.requested.append(image_ref)
        return self.images.get(image_ref)


@pytest.fixture
def dishes() -> list[Dish]:
    return [
        make_dish(
            1,
            "Kippenpasta",
            category="Pasta",
            carb_source="Pasta",
            price="5.20",
            allergens=("Gluten", "Melk"),
        ),
        make_dish(
            2, "Visschotel", diet="Vis", price="6.00", allergens=("Gluten",)
        ),
        make_dish(3, "Vol-au-vent", carb_source="Frietjes", price="4.80"),
        make_dish(4, "Veggie curry", diet="Vegan", carb_source="Rijst", price="4.20"),
        make_dish(5, "Lasagne", category="Pasta", carb_source="Pasta", price="5.00"),
        make_dish(6, "Falafelwrap", diet="Vegetarisch", price="3.90"),
        make_dish(7, "Stoofvlees", carb_source="Frietjes", price="6.50"),
        make_dish(8, "Spaghetti bolognese", category="Pasta", price="4.50"),
    ]


@pytest.fixture
def catalog(dishes: list[Dish]) -> CatalogService:
    return CatalogService.load(InMemoryDishRepository(dishes))


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def codec(clock: FixedClock) -> SessionCodec:
    return SessionCodec(secret=SECRET, clock=clock)


@pytest.fixture
def game_service(catalog: CatalogService, codec: SessionCodec) -> GameService:
    return GameService(catalog=catalog, codec=codec)


@pytest.fixture
def photo() -> bytes:
    return make_png()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        almadle_secret=SECRET,
        catalog_path="data/alma_food.json",
        environment="local",
    )


@pytest.fixture
def image_store(dishes: list[Dish], photo: bytes) -> FakeImageStore:
    return FakeImageStore(images={dish.image_ref: photo for dish in dishes})


@pytest.fixture
def container(
    settings: Settings,
    catalog: CatalogService,
    image_store: FakeImageStore,
) -> AppContainer:
    session_codec = SessionCodec(secret=settings.almadle_secret)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        catalog_service=catalog,
        session_codec=session_codec,
        game_service=GameService(catalog=catalog, codec=session_codec),
        image_store=image_store,
        disclosure_renderer=DisclosureRenderer(),
        close_resources=close_resources,
    )

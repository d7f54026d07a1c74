"""Catalog snapshot loader backed by a JSON file."""

import json
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter

from almadle.domain.dishes import Dish
from almadle.services.catalog import DishRepository

_CENTS = Decimal("0.01")


class DishRow(BaseModel):
    """Single row of the ingested catalog file."""

    id: int = Field(gt=0)
    name: str
    image_url: str = ""
    category: str
    diet: str
    carb_source: str
    price_student: Decimal = Field(ge=0)
    allergens: list[str] | None = None

    def to_dish(self) -> Dish:
        return Dish(
            id=self.id,
            name=self.name,
            image_ref=self.image_url,
            category=self.category,
            diet=self.diet,
            carb_source=self.carb_source,
            price_student=self.price_student.quantize(_CENTS),
            allergens=tuple(self.allergens or ()),
        )


_ROWS = TypeAdapter(list[DishRow])


@dataclass
class JsonDishRepository(DishRepository):
    """Reads dishes from the catalog snapshot written by the ingestion job."""

    path: Path

    def load_dishes(self) -> list[Dish]:
        """Return all dishes in file order."""
        # Parse floats as Decimal so 5.2 stays 5.20 and not 5.2000000000000002.
        raw = json.loads(self.path.read_text(encoding="utf-8"), parse_float=Decimal)
        return [row.to_dish() for row in _ROWS.validate_python(raw)]

"""Domain models for the canteen dish catalog."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Dish:
    """Represents one menu item from the catalog snapshot."""

    id: int
    name: str
    image_ref: str
    category: str
    diet: str
    carb_source: str
    price_student: Decimal
    allergens: tuple[str, ...] = ()

    @property
    def allergen_count(self) -> int:
        return len(set(self.allergens))

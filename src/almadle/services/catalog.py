"""Read-only access to the dish catalog."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from almadle.domain.dishes import Dish

SEARCH_LIMIT = 5


class DishRepository(Protocol):
    """Source of the catalog snapshot."""

    def load_dishes(self) -> list[Dish]:
        """Return every dish in catalog order."""


@dataclass
class CatalogService:
    """Ordered, immutable catalog loaded once per process."""

    dishes: tuple[Dish, ...]
    _by_id: dict[int, Dish] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._by_id = {}
        for dish in self.dishes:
            if dish.id in self._by_id:
                raise ValueError(f"Duplicate dish id in catalog: {dish.id}")
            self._by_id[dish.id] = dish

    @classmethod
    def load(cls, repository: DishRepository) -> "CatalogService":
        """Load the catalog snapshot from a repository."""
        return cls(tuple(repository.load_dishes()))

    def get(self, dish_id: int) -> Dish | None:
        """Return a dish by id, if present."""
        return self._by_id.get(dish_id)

    def list_dishes(self) -> tuple[Dish, ...]:
        return self.dishes

    def search(
        self,
        term: str,
        exclude_ids: Iterable[int] = (),
        limit: int = SEARCH_LIMIT,
    ) -> list[Dish]:
        """Return dishes whose name contains the term, skipping excluded ids."""
        needle = term.strip().casefold()
        if not needle:
            return []
        excluded = set(exclude_ids)
        hits: list[Dish] = []
        for dish in self.dishes:
            if dish.id in excluded or needle not in dish.name.casefold():
                continue
            hits.append(dish)
            if len(hits) >= limit:
                break
        return hits

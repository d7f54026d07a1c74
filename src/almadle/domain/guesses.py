"""Models for scored guesses."""

from dataclasses import dataclass
from enum import StrEnum

from almadle.domain.dishes import Dish


class MatchStatus(StrEnum):
    """Outcome of comparing one attribute of a guess with the target."""

    CORRECT = "correct"
    CLOSE = "close"
    WRONG = "wrong"


class Direction(StrEnum):
    """Where the guessed value sits relative to the target value."""

    HIGHER = "higher"
    LOWER = "lower"


@dataclass(frozen=True)
class GuessMatches:
    """Per-attribute verdicts for a single guess."""

    category: MatchStatus
    diet: MatchStatus
    carb_source: MatchStatus
    price: MatchStatus
    price_direction: Direction | None
    allergen_count: MatchStatus
    name_length: MatchStatus
    name_length_diff: int

    def tiles(self) -> tuple[MatchStatus, ...]:
        """Return verdicts in display order."""
        return (
            self.category,
            self.diet,
            self.carb_source,
            self.price,
            self.allergen_count,
            self.name_length,
        )


@dataclass(frozen=True)
class GuessResult:
    """Snapshot of a guessed dish plus its verdicts."""

    dish: Dish
    matches: GuessMatches

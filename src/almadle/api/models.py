"""Pydantic models for the game API."""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from almadle.domain.dishes import Dish
from almadle.domain.game import GameState
from almadle.domain.guesses import Direction, GuessResult, MatchStatus

Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class GuessRequest(BaseModel):
    """Guess submission payload."""

    model_config = ConfigDict(populate_by_name=True)

    guess_id: int = Field(alias="guessId")


class ShareRequest(BaseModel):
    """Share summary payload."""

    model_config = ConfigDict(populate_by_name=True)

    guess_ids: list[int] = Field(alias="guessIds")


class StartResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    max_attempts: int = Field(alias="maxAttempts")
    mode: str | None = None
    seed: str | None = None


class DishOut(BaseModel):
    """Public view of a dish; the image reference is never exposed."""

    id: int
    name: str
    category: str
    diet: str
    carb_source: str
    price_student: Price
    allergens: list[str]

    @classmethod
    def from_dish(cls, dish: Dish) -> "DishOut":
        return cls(
            id=dish.id,
            name=dish.name,
            category=dish.category,
            diet=dish.diet,
            carb_source=dish.carb_source,
            price_student=dish.price_student,
            allergens=list(dish.allergens),
        )


class MatchesOut(BaseModel):
    """Per-attribute verdicts; wire names follow the public game contract."""

    model_config = ConfigDict(populate_by_name=True)

    category: MatchStatus
    diet: MatchStatus
    carb_source: MatchStatus
    price: MatchStatus
    price_direction: Direction | None = Field(alias="priceDirection")
    allergen_count: MatchStatus = Field(alias="allergenCount")
    name_length: MatchStatus = Field(alias="nameLength")
    name_length_diff: int = Field(alias="nameLengthDiff")


class GuessOut(BaseModel):
    dish: DishOut
    matches: MatchesOut

    @classmethod
    def from_result(cls, result: GuessResult) -> "GuessOut":
        matches = result.matches
        return cls(
            dish=DishOut.from_dish(result.dish),
            matches=MatchesOut(
                category=matches.category,
                diet=matches.diet,
                carb_source=matches.carb_source,
                price=matches.price,
                price_direction=matches.price_direction,
                allergen_count=matches.allergen_count,
                name_length=matches.name_length,
                name_length_diff=matches.name_length_diff,
            ),
        )


class TargetOut(BaseModel):
    id: int
    name: str


class GuessResponse(BaseModel):
    """Guess outcome; ``target`` stays null while the game is running."""

    guess: GuessOut | None
    state: GameState
    attempts: int
    target: TargetOut | None


class ShareResponse(BaseModel):
    text: str

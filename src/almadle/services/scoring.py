"""Attribute comparison between a guessed dish and the target."""

from decimal import Decimal

from almadle.domain.dishes import Dish
from almadle.domain.guesses import Direction, GuessMatches, GuessResult, MatchStatus

PRICE_CLOSE_DELTA = Decimal("1.00")
ALLERGEN_CLOSE_DELTA = 2
NAME_LENGTH_CLOSE_DELTA = 3


def evaluate(guess: Dish, target: Dish) -> GuessMatches:
    """Compare every public attribute of the guess with the target."""
    price_diff = abs(guess.price_student - target.price_student)
    price = _tier(price_diff, PRICE_CLOSE_DELTA)
    name_length_diff = len(guess.name) - len(target.name)
    return GuessMatches(
        category=_equal(guess.category, target.category),
        diet=_equal(guess.diet, target.diet),
        carb_source=_equal(guess.carb_source, target.carb_source),
        price=price,
        price_direction=_direction(guess.price_student, target.price_student),
        allergen_count=_tier(
            abs(guess.allergen_count - target.allergen_count), ALLERGEN_CLOSE_DELTA
        ),
        name_length=_tier(abs(name_length_diff), NAME_LENGTH_CLOSE_DELTA),
        name_length_diff=name_length_diff,
    )


def score_guess(guess: Dish, target: Dish) -> GuessResult:
    """Return the guessed dish together with its verdicts."""
    return GuessResult(dish=guess, matches=evaluate(guess, target))


def is_winning_guess(guess: Dish, target: Dish) -> bool:
    # Identity, not attributes: two dishes can share every compared value.
    return guess.id == target.id


def _equal(left: str, right: str) -> MatchStatus:
    return MatchStatus.CORRECT if left == right else MatchStatus.WRONG


def _tier(diff: Decimal | int, close_delta: Decimal | int) -> MatchStatus:
    if diff == 0:
        return MatchStatus.CORRECT
    if diff <= close_delta:
        return MatchStatus.CLOSE
    return MatchStatus.WRONG


def _direction(guess_value: Decimal, target_value: Decimal) -> Direction | None:
    if guess_value == target_value:
        return None
    return Direction.HIGHER if guess_value > target_value else Direction.LOWER

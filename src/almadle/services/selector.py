"""Target dish selection.

Calendar and token modes are reproducible: the same seed always lands on the
same dish for a fixed catalog ordering. ``pick_random_dish`` uses the OS
entropy source and is for rounds that never need to be replayed.
"""

import random
import secrets
import string
from collections.abc import Callable, Sequence
from datetime import date

from almadle.domain.dishes import Dish

_MASK_32 = 0xFFFFFFFF
_TWO_POW_32 = 4294967296
_FNV_OFFSET_BASIS = 0x811C9DC5
_FNV_PRIME = 0x01000193
_SEED_SEPARATORS = str.maketrans("", "", "-/.")
_TOKEN_ALPHABET = string.ascii_letters + string.digits

_system_random = random.SystemRandom()


class EmptyCatalogError(ValueError):
    """Raised when a dish must be selected from an empty catalog."""


class InvalidSeedError(ValueError):
    """Raised when a calendar seed is not a date."""


def normalize_seed(seed: str) -> str:
    """Strip whitespace and date separators so equivalent seeds collide."""
    return seed.strip().translate(_SEED_SEPARATORS)


def calendar_seed(day: date) -> str:
    """Return the compact YYYYMMDD seed for a calendar day."""
    return day.strftime("%Y%m%d")


def mulberry32(seed: int) -> Callable[[], float]:
    """Return a Mulberry32 generator yielding floats in [0, 1)."""
    state = seed & _MASK_32

    def next_float() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & _MASK_32
        t = _imul(state ^ (state >> 15), state | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK_32
        return ((t ^ (t >> 14)) & _MASK_32) / _TWO_POW_32

    return next_float


def fnv1a_32(text: str) -> int:
    """Return the 32-bit FNV-1a hash of the UTF-8 encoded text."""
    value = _FNV_OFFSET_BASIS
    for byte in text.encode("utf-8"):
        value ^= byte
        value = (value * _FNV_PRIME) & _MASK_32
    return value


def select_calendar_dish(dishes: Sequence[Dish], day: date | str) -> Dish:
    """Select the dish of the day from a date or a YYYY-MM-DD style seed."""
    _require_dishes(dishes)
    seed = calendar_seed(day) if isinstance(day, date) else normalize_seed(day)
    if not seed.isdigit():
        raise InvalidSeedError(f"Calendar seed must be a date, got {day!r}")
    draw = mulberry32(int(seed))
    return dishes[_index(draw(), len(dishes))]


def select_seeded_dish(dishes: Sequence[Dish], token: str) -> Dish:
    """Select a dish from an arbitrary client-visible token."""
    _require_dishes(dishes)
    fraction = fnv1a_32(normalize_seed(token)) / _TWO_POW_32
    return dishes[_index(fraction, len(dishes))]


def pick_random_dish(dishes: Sequence[Dish]) -> Dish:
    """Pick a dish with non-reproducible randomness."""
    _require_dishes(dishes)
    return _system_random.choice(dishes)


def random_seed_token(length: int = 10) -> str:
    """Return a fresh alphanumeric token for replayable rounds."""
    return "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(length))


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK_32


def _index(fraction: float, size: int) -> int:
    return min(size - 1, int(fraction * size))


def _require_dishes(dishes: Sequence[Dish]) -> None:
    if not dishes:
        raise EmptyCatalogError("Cannot select a dish from an empty catalog")

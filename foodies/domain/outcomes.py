from __future__ import annotations

from dataclasses import dataclass
from typing import Union

LISTING_PATH = "/meals"

VALIDATION_FAILURE_MESSAGE = "Please fill in all fields correctly!"
PERSISTENCE_FAILURE_MESSAGE = "Could not save your meal. Please try again later."


@dataclass(frozen=True)
class RevalidatePath:
    """Marks cached data for ``path`` as stale."""

    path: str


@dataclass(frozen=True)
class Redirect:
    path: str


Effect = Union[RevalidatePath, Redirect]


@dataclass(frozen=True)
class ValidationFailure:
    message: str = VALIDATION_FAILURE_MESSAGE


@dataclass(frozen=True)
class PersistenceFailure:
    message: str = PERSISTENCE_FAILURE_MESSAGE


@dataclass(frozen=True)
class ShareMealSuccess:
    meal_id: str
    slug: str
    effects: tuple[Effect, ...]


ShareMealOutcome = Union[ValidationFailure, PersistenceFailure, ShareMealSuccess]

from __future__ import annotations

from typing import Protocol, runtime_checkable

from foodies.domain.models import MealRecord, MealSnapshot, SaveMealResult

STORAGE_PREFIXES = ("images/",)


@runtime_checkable
class MealRepository(Protocol):
    """Persistence contract for shared meals.

    ``save_meal`` reports failures through ``SaveMealResult`` instead of
    raising, so callers always branch on the outcome.
    """

    async def save_meal(self, record: MealRecord) -> SaveMealResult: ...

    async def list_meals(self) -> list[MealSnapshot]: ...

    async def get_meal(self, *, slug: str) -> MealSnapshot | None: ...


@runtime_checkable
class ImageStorage(Protocol):
    """Storage contract for uploaded images, keyed under ``images/``."""

    def put_bytes(self, *, key: str, payload: bytes) -> str: ...

    def get_bytes(self, *, key: str) -> bytes: ...


@runtime_checkable
class ListingCache(Protocol):
    """Path-keyed cache of listing responses.

    ``generation`` changes on every invalidation of ``path``; ``put`` with a
    stale generation is dropped so a slow load cannot resurrect old data.
    """

    def get(self, path: str) -> object | None: ...

    def generation(self, path: str) -> int: ...

    def put(self, path: str, value: object, *, generation: int | None = None) -> None: ...

    def invalidate(self, path: str) -> None: ...

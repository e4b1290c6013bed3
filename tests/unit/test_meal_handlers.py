import asyncio
from dataclasses import dataclass, field

import pytest

from foodies.api.handlers.deps import ApiDeps
from foodies.api.handlers.meals import apply_share_effects, list_meals_handler, share_meal_handler
from foodies.clients.stub import InMemoryListingCache, StubImageStorage
from foodies.domain.models import ImageUpload, MealRecord, MealSnapshot, SaveMealResult
from foodies.domain.outcomes import ShareMealSuccess
from foodies.repositories.stub import InMemoryMealRepository


@dataclass
class _SlowListingRepository:
    """Returns a listing snapshot taken before it yields to other tasks."""

    inner: InMemoryMealRepository
    loading: asyncio.Event = field(default_factory=asyncio.Event)
    release: asyncio.Event = field(default_factory=asyncio.Event)

    async def save_meal(self, record: MealRecord) -> SaveMealResult:
        return await self.inner.save_meal(record)

    async def list_meals(self) -> list[MealSnapshot]:
        snapshot = await self.inner.list_meals()
        self.loading.set()
        await self.release.wait()
        return snapshot

    async def get_meal(self, *, slug: str) -> MealSnapshot | None:
        return await self.inner.get_meal(slug=slug)


def _fields() -> dict[str, object]:
    return {
        "title": "Tacos",
        "summary": "Quick tacos",
        "instructions": "Cook and serve",
        "image": ImageUpload(filename="tacos.jpg", content_type="image/jpeg", payload=b"x" * 1024),
        "name": "Ana",
        "email": "ana@example.com",
    }


@pytest.mark.unit
def test_share_during_listing_load_is_not_hidden_by_stale_cache() -> None:
    async def _run() -> tuple[int, object | None, list[str]]:
        storage = StubImageStorage()
        repository = _SlowListingRepository(inner=InMemoryMealRepository(storage=storage))
        cache = InMemoryListingCache()
        api_deps = ApiDeps(repository=repository, storage=storage, listing_cache=cache)

        loading = asyncio.create_task(list_meals_handler(api_deps=api_deps))
        await repository.loading.wait()

        outcome = await share_meal_handler(fields=_fields(), api_deps=api_deps)
        assert isinstance(outcome, ShareMealSuccess)
        apply_share_effects(outcome=outcome, api_deps=api_deps)

        repository.release.set()
        stale = await loading
        cached = cache.get("/meals")
        fresh = await list_meals_handler(api_deps=api_deps)
        return len(stale.items), cached, [item.slug for item in fresh.items]

    stale_count, cached, fresh_slugs = asyncio.run(_run())

    assert stale_count == 0
    assert cached is None
    assert fresh_slugs == ["tacos"]


@pytest.mark.unit
def test_listing_is_served_from_cache_until_invalidated() -> None:
    async def _run() -> tuple[list[str], list[str]]:
        storage = StubImageStorage()
        repository = InMemoryMealRepository(storage=storage)
        cache = InMemoryListingCache()
        api_deps = ApiDeps(repository=repository, storage=storage, listing_cache=cache)

        await list_meals_handler(api_deps=api_deps)
        await repository.save_meal(
            MealRecord(
                title="Tacos",
                summary="Quick tacos",
                instructions="Cook and serve",
                image=ImageUpload(filename="tacos.jpg", content_type="image/jpeg", payload=b"x"),
                creator="Ana",
                creator_email="ana@example.com",
            )
        )
        cached = [item.slug for item in (await list_meals_handler(api_deps=api_deps)).items]
        cache.invalidate("/meals")
        reloaded = [item.slug for item in (await list_meals_handler(api_deps=api_deps)).items]
        return cached, reloaded

    assert asyncio.run(_run()) == ([], ["tacos"])

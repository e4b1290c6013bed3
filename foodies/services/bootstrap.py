from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from foodies.api.handlers.deps import ApiDeps
from foodies.clients.filesystem import FilesystemImageStorage
from foodies.clients.stub import InMemoryListingCache, StubImageStorage
from foodies.domain.contracts import ImageStorage, ListingCache, MealRepository
from foodies.repositories.postgres import AsyncpgPoolManager, PostgresMealRepository
from foodies.repositories.stub import InMemoryMealRepository
from foodies.settings import RuntimeSettings


@dataclass
class RuntimeContainer:
    repository: MealRepository
    storage: ImageStorage
    listing_cache: ListingCache
    api_deps: ApiDeps
    on_startup: Callable[[], Awaitable[None]] | None
    on_shutdown: Callable[[], Awaitable[None]] | None


def build_runtime_container(settings: RuntimeSettings) -> RuntimeContainer:
    on_startup: Callable[[], Awaitable[None]] | None = None
    on_shutdown: Callable[[], Awaitable[None]] | None = None

    storage: ImageStorage
    if settings.images_dir is not None:
        storage = FilesystemImageStorage(root=settings.images_dir)
    else:
        storage = StubImageStorage()

    repository: MealRepository
    if settings.database_url:
        pool_manager = AsyncpgPoolManager(dsn=settings.database_url)
        repository = PostgresMealRepository(pool_manager=pool_manager, storage=storage)
        on_startup = pool_manager.startup
        on_shutdown = pool_manager.shutdown
    else:
        repository = InMemoryMealRepository(storage=storage)

    listing_cache = InMemoryListingCache()
    api_deps = ApiDeps(
        repository=repository,
        storage=storage,
        listing_cache=listing_cache,
        listing_path=settings.listing_path,
    )

    return RuntimeContainer(
        repository=repository,
        storage=storage,
        listing_cache=listing_cache,
        api_deps=api_deps,
        on_startup=on_startup,
        on_shutdown=on_shutdown,
    )

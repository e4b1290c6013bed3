from __future__ import annotations

from dataclasses import dataclass

from foodies.domain.contracts import ImageStorage, ListingCache, MealRepository
from foodies.domain.outcomes import LISTING_PATH


@dataclass(frozen=True)
class ApiDeps:
    repository: MealRepository
    storage: ImageStorage
    listing_cache: ListingCache
    listing_path: str = LISTING_PATH

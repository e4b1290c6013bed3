from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
import logging

from foodies.domain.contracts import ImageStorage
from foodies.domain.errors import DomainDependencyError, DomainValidationError
from foodies.domain.ids import image_key, new_meal_public_id, slug_candidates
from foodies.domain.models import MealRecord, MealSnapshot, SaveMealResult

logger = logging.getLogger("foodies.repositories")


@dataclass
class InMemoryMealRepository:
    """Non-network repository with deterministic behavior for local runs and tests."""

    storage: ImageStorage
    meals: dict[str, MealSnapshot] = field(default_factory=dict)
    save_calls: list[MealRecord] = field(default_factory=list)

    async def save_meal(self, record: MealRecord) -> SaveMealResult:
        self.save_calls.append(record)
        slug = next((candidate for candidate in slug_candidates(record.title) if candidate not in self.meals), None)
        if slug is None:
            return SaveMealResult.failed("failed to allocate unique meal slug")

        key = image_key(slug=slug, filename=record.image.filename)
        try:
            image_ref = self.storage.put_bytes(key=key, payload=record.image.payload)
        except (DomainDependencyError, DomainValidationError) as exc:
            logger.error("image write failed", extra={"slug": slug}, exc_info=True)
            return SaveMealResult.failed(f"image write failed: {exc}")

        meal = MealSnapshot(
            meal_id=new_meal_public_id(),
            slug=slug,
            title=record.title,
            summary=record.summary,
            instructions=record.instructions,
            image_ref=image_ref,
            creator=record.creator,
            creator_email=record.creator_email,
            created_at=datetime.now(tz=UTC),
        )
        self.meals[slug] = meal
        return SaveMealResult.saved(meal)

    async def list_meals(self) -> list[MealSnapshot]:
        # Insertion order is creation order.
        return list(reversed(self.meals.values()))

    async def get_meal(self, *, slug: str) -> MealSnapshot | None:
        return self.meals.get(slug)

from __future__ import annotations

from dataclasses import dataclass
import importlib
import logging
from pathlib import Path
from typing import Any

from foodies.domain.contracts import ImageStorage
from foodies.domain.errors import DomainInvariantError
from foodies.domain.ids import image_key, new_meal_public_id, slug_candidates
from foodies.domain.models import MealRecord, MealSnapshot, SaveMealResult

try:
    asyncpg_module = importlib.import_module("asyncpg")
except ModuleNotFoundError:  # pragma: no cover
    asyncpg_module = None  # type: ignore[assignment]


SQL_DIR = Path(__file__).with_name("sql")


def load_sql(name: str) -> str:
    return (SQL_DIR / name).read_text(encoding="utf-8").strip()


SQL_CREATE_MEALS_TABLE = load_sql("create_meals_table.sql")
SQL_CREATE_MEAL = load_sql("create_meal.sql")
SQL_LIST_MEALS = load_sql("list_meals.sql")
SQL_GET_MEAL = load_sql("get_meal.sql")

logger = logging.getLogger("foodies.repositories")


def _is_unique_violation(exc: Exception) -> bool:
    return getattr(exc, "sqlstate", None) == "23505"


def _meal_from_row(row: Any) -> MealSnapshot:
    return MealSnapshot(
        meal_id=row["public_id"],
        slug=row["slug"],
        title=row["title"],
        summary=row["summary"],
        instructions=row["instructions"],
        image_ref=row["image_ref"],
        creator=row["creator"],
        creator_email=row["creator_email"],
        created_at=row["created_at"],
    )


@dataclass
class AsyncpgPoolManager:
    dsn: str
    ensure_schema: bool = True
    pool: Any | None = None

    async def startup(self) -> None:
        if asyncpg_module is None:  # pragma: no cover
            raise RuntimeError("asyncpg is required for postgres repository mode")

        self.pool = await asyncpg_module.create_pool(
            dsn=self.dsn,
            min_size=1,
            max_size=5,
        )
        if self.ensure_schema:
            async with self.pool.acquire() as conn:
                await conn.execute(SQL_CREATE_MEALS_TABLE)

    async def shutdown(self) -> None:
        if self.pool is None:
            return
        await self.pool.close()
        self.pool = None


@dataclass
class PostgresMealRepository:
    pool_manager: AsyncpgPoolManager
    storage: ImageStorage

    def _pool(self) -> Any:
        if self.pool_manager.pool is None:
            raise RuntimeError("postgres pool is not initialized")
        return self.pool_manager.pool

    async def save_meal(self, record: MealRecord) -> SaveMealResult:
        try:
            pool = self._pool()
            async with pool.acquire() as conn:
                for slug in slug_candidates(record.title):
                    key = image_key(slug=slug, filename=record.image.filename)
                    try:
                        # The image is written only once the slug is reserved;
                        # a failed write rolls the row back.
                        async with conn.transaction():
                            row = await conn.fetchrow(
                                SQL_CREATE_MEAL,
                                new_meal_public_id(),
                                slug,
                                record.title,
                                record.summary,
                                record.instructions,
                                key,
                                record.creator,
                                record.creator_email,
                            )
                            if row is None:
                                raise DomainInvariantError("failed to create meal")
                            self.storage.put_bytes(key=key, payload=record.image.payload)
                    except Exception as exc:
                        if _is_unique_violation(exc):
                            continue
                        raise
                    return SaveMealResult.saved(_meal_from_row(row))
        except Exception as exc:
            logger.error("meal insert failed", extra={"title": record.title}, exc_info=True)
            return SaveMealResult.failed(str(exc))
        return SaveMealResult.failed("failed to allocate unique meal slug")

    async def list_meals(self) -> list[MealSnapshot]:
        pool = self._pool()
        async with pool.acquire() as conn:
            rows = await conn.fetch(SQL_LIST_MEALS)
        return [_meal_from_row(row) for row in rows]

    async def get_meal(self, *, slug: str) -> MealSnapshot | None:
        pool = self._pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(SQL_GET_MEAL, slug)
        if row is None:
            return None
        return _meal_from_row(row)

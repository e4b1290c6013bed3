from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from foodies.domain.outcomes import LISTING_PATH


@dataclass(frozen=True)
class RuntimeSettings:
    host: str = "0.0.0.0"
    port: int = 8000
    database_url: str | None = None
    images_dir: Path | None = None
    listing_path: str = LISTING_PATH


def settings_from_env() -> RuntimeSettings:
    images_dir = os.getenv("IMAGES_DIR")
    return RuntimeSettings(
        host=os.getenv("APP_HOST", "0.0.0.0"),
        port=_env_int("APP_PORT", 8000),
        database_url=os.getenv("DATABASE_URL") or None,
        images_dir=Path(images_dir) if images_dir else None,
        listing_path=os.getenv("LISTING_PATH", LISTING_PATH),
    )


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default

    try:
        parsed = int(value)
    except ValueError:
        return default

    return parsed if parsed > 0 else default

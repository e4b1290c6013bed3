from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from foodies.domain.contracts import STORAGE_PREFIXES
from foodies.domain.errors import ImageStorageError, InvalidStorageKeyError


@dataclass
class FilesystemImageStorage:
    """Stores uploaded images as plain files below ``root``."""

    root: Path

    def _path(self, key: str) -> Path:
        if not any(key.startswith(prefix) for prefix in STORAGE_PREFIXES):
            raise InvalidStorageKeyError("storage key must start with an allowed prefix")
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise InvalidStorageKeyError(f"storage key escapes storage root: {key}")
        return path

    def put_bytes(self, *, key: str, payload: bytes) -> str:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(payload)
        except OSError as exc:
            raise ImageStorageError(f"failed to write image: {key}") from exc
        return key

    def get_bytes(self, *, key: str) -> bytes:
        path = self._path(key)
        if not path.is_file():
            raise KeyError(f"storage key not found: {key}")
        return path.read_bytes()

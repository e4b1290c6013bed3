from __future__ import annotations

from dataclasses import dataclass, field

from foodies.domain.contracts import STORAGE_PREFIXES
from foodies.domain.errors import InvalidStorageKeyError


@dataclass
class StubImageStorage:
    writes: list[str] = field(default_factory=list)
    objects: dict[str, bytes] = field(default_factory=dict)

    def put_bytes(self, *, key: str, payload: bytes) -> str:
        if not any(key.startswith(prefix) for prefix in STORAGE_PREFIXES):
            raise InvalidStorageKeyError("storage key must start with an allowed prefix")
        self.writes.append(key)
        self.objects[key] = payload
        return key

    def get_bytes(self, *, key: str) -> bytes:
        payload = self.objects.get(key)
        if payload is None:
            raise KeyError(f"storage key not found: {key}")
        return payload


@dataclass
class InMemoryListingCache:
    entries: dict[str, object] = field(default_factory=dict)
    invalidations: list[str] = field(default_factory=list)
    generations: dict[str, int] = field(default_factory=dict)

    def get(self, path: str) -> object | None:
        return self.entries.get(path)

    def generation(self, path: str) -> int:
        return self.generations.get(path, 0)

    def put(self, path: str, value: object, *, generation: int | None = None) -> None:
        if generation is not None and generation != self.generation(path):
            return
        self.entries[path] = value

    def invalidate(self, path: str) -> None:
        # Fire-and-forget: a missing entry is not an error.
        self.invalidations.append(path)
        self.generations[path] = self.generation(path) + 1
        self.entries.pop(path, None)

from __future__ import annotations

from collections.abc import Iterator
import importlib
import re
import unicodedata

ulid_module = importlib.import_module("ulid")

MAX_SLUG_ATTEMPTS = 5
DEFAULT_SLUG = "meal"
DEFAULT_IMAGE_EXTENSION = "bin"
IMAGE_KEY_PREFIX = "images/"

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")
_EXTENSION = re.compile(r"^[a-z0-9]{1,8}$")


def new_meal_public_id() -> str:
    return f"meal_{ulid_module.new().str}"


def slugify(text: str) -> str:
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = _NON_SLUG_CHARS.sub("-", ascii_text.lower()).strip("-")
    return slug or DEFAULT_SLUG


def unique_slug_suffix() -> str:
    return ulid_module.new().str[-10:].lower()


def slug_candidates(title: str) -> Iterator[str]:
    """Yield ``slug``, ``slug-2`` ... ``slug-N``, then ``slug-<ulid suffix>`` candidates.

    The numbered candidates stop at MAX_SLUG_ATTEMPTS; the ulid-suffixed
    ones that follow are unique in practice, so repeated titles never run
    out of slugs.
    """
    base = slugify(title)
    yield base
    for suffix in range(2, MAX_SLUG_ATTEMPTS + 1):
        yield f"{base}-{suffix}"
    for _ in range(MAX_SLUG_ATTEMPTS):
        yield f"{base}-{unique_slug_suffix()}"


def image_key(*, slug: str, filename: str) -> str:
    _, dot, extension = filename.rpartition(".")
    extension = extension.lower()
    if not dot or not _EXTENSION.match(extension):
        extension = DEFAULT_IMAGE_EXTENSION
    return f"{IMAGE_KEY_PREFIX}{slug}.{extension}"

from __future__ import annotations

from collections.abc import Mapping
import logging

from foodies.domain.contracts import MealRepository
from foodies.domain.models import ImageUpload, MealRecord, MealSubmission
from foodies.domain.outcomes import (
    LISTING_PATH,
    PersistenceFailure,
    Redirect,
    RevalidatePath,
    ShareMealOutcome,
    ShareMealSuccess,
    ValidationFailure,
)

COMPONENT_ID = "domain.meal.share"

TEXT_FIELDS = ("title", "summary", "instructions", "name", "email")

logger = logging.getLogger("foodies.share_meal")


def _text_field(fields: Mapping[str, object], key: str) -> str | None:
    value = fields.get(key)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _image_field(fields: Mapping[str, object]) -> ImageUpload | None:
    image = fields.get("image")
    size = getattr(image, "size", None)
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        return None
    if isinstance(image, ImageUpload):
        return image

    # Any other blob works as long as it carries the bytes to store.
    payload = getattr(image, "payload", None)
    if not isinstance(payload, (bytes, bytearray, memoryview)) or len(payload) == 0:
        return None
    filename = getattr(image, "filename", None)
    content_type = getattr(image, "content_type", None)
    return ImageUpload(
        filename=filename if isinstance(filename, str) else "",
        content_type=content_type if isinstance(content_type, str) else None,
        payload=bytes(payload),
    )


def parse_meal_submission(fields: Mapping[str, object]) -> MealSubmission | None:
    """Build a MealSubmission from a form field-map.

    Returns None when any required field is missing or blank, when the
    email has no ``@`` or when the image is missing or empty. The caller
    only learns that the form is invalid, not which field failed.
    """
    texts = {key: _text_field(fields, key) for key in TEXT_FIELDS}
    if any(value is None for value in texts.values()):
        return None
    if "@" not in texts["email"]:
        return None
    image = _image_field(fields)
    if image is None:
        return None

    return MealSubmission(
        title=texts["title"],
        summary=texts["summary"],
        instructions=texts["instructions"],
        image=image,
        creator_name=texts["name"],
        creator_email=texts["email"],
    )


async def share_meal(
    fields: Mapping[str, object],
    *,
    repository: MealRepository,
    listing_path: str = LISTING_PATH,
) -> ShareMealOutcome:
    submission = parse_meal_submission(fields)
    if submission is None:
        logger.info("meal submission rejected", extra={"component": COMPONENT_ID})
        return ValidationFailure()

    result = await repository.save_meal(MealRecord.from_submission(submission))
    if not result.ok or result.meal is None:
        logger.warning(
            "meal submission not persisted",
            extra={"component": COMPONENT_ID, "error": result.error},
        )
        return PersistenceFailure()

    logger.info(
        "meal shared",
        extra={"component": COMPONENT_ID, "meal_id": result.meal.meal_id, "slug": result.meal.slug},
    )
    return ShareMealSuccess(
        meal_id=result.meal.meal_id,
        slug=result.meal.slug,
        effects=(RevalidatePath(listing_path), Redirect(listing_path)),
    )

from __future__ import annotations

from collections.abc import Mapping
import logging
import mimetypes

from starlette.datastructures import UploadFile

from foodies.api.handlers.deps import ApiDeps
from foodies.api.schemas import ListMealsResponse, MealResponse
from foodies.domain.errors import InvalidStorageKeyError
from foodies.domain.ids import IMAGE_KEY_PREFIX
from foodies.domain.models import ImageUpload, MealSnapshot
from foodies.domain.outcomes import Redirect, RevalidatePath, ShareMealOutcome, ShareMealSuccess
from foodies.domain.use_cases.share_meal import share_meal

COMPONENT_ID_SHARE = "api.share_meal"
COMPONENT_ID_LIST = "api.list_meals"
COMPONENT_ID_GET = "api.get_meal"
COMPONENT_ID_IMAGE = "api.get_meal_image"

logger = logging.getLogger("foodies.api")


async def form_to_fields(form: Mapping[str, object]) -> dict[str, object]:
    """Turn parsed multipart data into a plain field-map.

    Uploaded files are read into ``ImageUpload`` values so the use case
    never touches framework objects.
    """
    fields: dict[str, object] = {}
    for key, value in form.items():
        if isinstance(value, UploadFile):
            payload = await value.read()
            fields[key] = ImageUpload(
                filename=value.filename or "",
                content_type=value.content_type,
                payload=payload,
            )
        else:
            fields[key] = value
    return fields


async def share_meal_handler(*, fields: Mapping[str, object], api_deps: ApiDeps) -> ShareMealOutcome:
    return await share_meal(fields, repository=api_deps.repository, listing_path=api_deps.listing_path)


def apply_share_effects(*, outcome: ShareMealSuccess, api_deps: ApiDeps) -> str | None:
    """Run the effects of a successful share in order and return the redirect target."""
    redirect_to: str | None = None
    for effect in outcome.effects:
        if isinstance(effect, RevalidatePath):
            api_deps.listing_cache.invalidate(effect.path)
            logger.info("listing cache invalidated", extra={"component": COMPONENT_ID_SHARE, "path": effect.path})
        elif isinstance(effect, Redirect):
            redirect_to = effect.path
    return redirect_to


def meal_to_response(meal: MealSnapshot) -> MealResponse:
    return MealResponse(
        meal_id=meal.meal_id,
        slug=meal.slug,
        title=meal.title,
        summary=meal.summary,
        instructions=meal.instructions,
        image=f"/{meal.image_ref}",
        creator=meal.creator,
        creator_email=meal.creator_email,
        created_at=meal.created_at,
    )


async def list_meals_handler(*, api_deps: ApiDeps) -> ListMealsResponse:
    cached = api_deps.listing_cache.get(api_deps.listing_path)
    if isinstance(cached, ListMealsResponse):
        return cached

    generation = api_deps.listing_cache.generation(api_deps.listing_path)
    meals = await api_deps.repository.list_meals()
    response = ListMealsResponse(items=[meal_to_response(meal) for meal in meals])
    # Skipped when a share invalidated the listing while it was loading.
    api_deps.listing_cache.put(api_deps.listing_path, response, generation=generation)
    return response


async def get_meal_handler(*, slug: str, api_deps: ApiDeps) -> MealResponse | None:
    meal = await api_deps.repository.get_meal(slug=slug)
    if meal is None:
        return None
    return meal_to_response(meal)


def get_image_handler(*, name: str, api_deps: ApiDeps) -> tuple[bytes, str] | None:
    if "/" in name or name.startswith("."):
        return None
    try:
        payload = api_deps.storage.get_bytes(key=f"{IMAGE_KEY_PREFIX}{name}")
    except (KeyError, InvalidStorageKeyError):
        return None
    media_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
    return payload, media_type

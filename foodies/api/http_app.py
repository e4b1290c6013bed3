from __future__ import annotations

from contextlib import asynccontextmanager
from collections.abc import Awaitable, Callable
import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from foodies.api.handlers.deps import ApiDeps
from foodies.api.handlers.meals import (
    apply_share_effects,
    form_to_fields,
    get_image_handler,
    get_meal_handler,
    list_meals_handler,
    share_meal_handler,
)
from foodies.api.schemas import (
    ErrorResponse,
    HealthResponse,
    ListMealsResponse,
    MealResponse,
    MessageResponse,
    ReadyResponse,
)
from foodies.domain.outcomes import PersistenceFailure, ValidationFailure

SERVICE_NAME = "foodies"


def build_app(
    run_id: str,
    api_deps: ApiDeps | None = None,
    on_startup: Callable[[], Awaitable[None]] | None = None,
    on_shutdown: Callable[[], Awaitable[None]] | None = None,
) -> FastAPI:
    logger = logging.getLogger("runtime")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        del app
        logger.info("service started", extra={"service": SERVICE_NAME, "run_id": run_id})

        if on_startup is not None:
            await on_startup()

        yield

        if on_shutdown is not None:
            await on_shutdown()

        logger.info("service stopped", extra={"service": SERVICE_NAME, "run_id": run_id})

    app = FastAPI(title="foodies", version="0.1.0", lifespan=lifespan)

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service=SERVICE_NAME)

    @app.get("/ready", response_model=ReadyResponse, tags=["System"])
    async def ready() -> ReadyResponse:
        if api_deps is None:
            raise HTTPException(status_code=503, detail="api dependencies are not available")
        return ReadyResponse(
            status="ready",
            service=SERVICE_NAME,
            repository=type(api_deps.repository).__name__,
        )

    @app.post(
        "/meals/share",
        status_code=status.HTTP_303_SEE_OTHER,
        responses={400: {"model": MessageResponse}, 503: {"model": MessageResponse}},
        tags=["Meals"],
    )
    async def share_meal(request: Request) -> Response:
        if api_deps is None:
            raise HTTPException(status_code=503, detail="api dependencies are not available")
        async with request.form() as form:
            fields = await form_to_fields(form)
        outcome = await share_meal_handler(fields=fields, api_deps=api_deps)

        if isinstance(outcome, ValidationFailure):
            return JSONResponse(status_code=400, content=MessageResponse(message=outcome.message).model_dump())
        if isinstance(outcome, PersistenceFailure):
            return JSONResponse(status_code=503, content=MessageResponse(message=outcome.message).model_dump())

        redirect_to = apply_share_effects(outcome=outcome, api_deps=api_deps) or api_deps.listing_path
        return RedirectResponse(url=redirect_to, status_code=status.HTTP_303_SEE_OTHER)

    @app.get("/meals", response_model=ListMealsResponse, tags=["Meals"])
    async def list_meals() -> ListMealsResponse:
        if api_deps is None:
            raise HTTPException(status_code=503, detail="api dependencies are not available")
        return await list_meals_handler(api_deps=api_deps)

    @app.get(
        "/meals/{slug}",
        response_model=MealResponse,
        responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
        tags=["Meals"],
    )
    async def get_meal(slug: str) -> MealResponse:
        if api_deps is None:
            raise HTTPException(status_code=503, detail="api dependencies are not available")
        meal = await get_meal_handler(slug=slug, api_deps=api_deps)
        if meal is None:
            raise HTTPException(status_code=404, detail="meal not found")
        return meal

    @app.get("/images/{name}", responses={404: {"model": ErrorResponse}}, tags=["Meals"])
    async def get_image(name: str) -> Response:
        if api_deps is None:
            raise HTTPException(status_code=503, detail="api dependencies are not available")
        image = get_image_handler(name=name, api_deps=api_deps)
        if image is None:
            raise HTTPException(status_code=404, detail="image not found")
        payload, media_type = image
        return Response(content=payload, media_type=media_type)

    return app

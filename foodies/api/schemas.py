from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

MEAL_ID_PATTERN = r"^meal_[0-9A-HJKMNP-TV-Z]{26}$"
SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class ErrorResponse(BaseModel):
    detail: str


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    service: str


class ReadyResponse(BaseModel):
    status: str
    service: str
    repository: str


class MealResponse(BaseModel):
    meal_id: str = Field(pattern=MEAL_ID_PATTERN)
    slug: str = Field(pattern=SLUG_PATTERN)
    title: str
    summary: str
    instructions: str
    image: str
    creator: str
    creator_email: str
    created_at: datetime | None = None


class ListMealsResponse(BaseModel):
    items: list[MealResponse]

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ImageUpload:
    filename: str
    content_type: str | None
    payload: bytes

    @property
    def size(self) -> int:
        return len(self.payload)


@dataclass(frozen=True)
class MealSubmission:
    title: str
    summary: str
    instructions: str
    image: ImageUpload
    creator_name: str
    creator_email: str


@dataclass(frozen=True)
class MealRecord:
    title: str
    summary: str
    instructions: str
    image: ImageUpload
    creator: str
    creator_email: str

    @classmethod
    def from_submission(cls, submission: MealSubmission) -> MealRecord:
        return cls(
            title=submission.title,
            summary=submission.summary,
            instructions=submission.instructions,
            image=submission.image,
            creator=submission.creator_name,
            creator_email=submission.creator_email,
        )


@dataclass(frozen=True)
class MealSnapshot:
    meal_id: str
    slug: str
    title: str
    summary: str
    instructions: str
    image_ref: str
    creator: str
    creator_email: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class SaveMealResult:
    meal: MealSnapshot | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.meal is not None

    @classmethod
    def saved(cls, meal: MealSnapshot) -> SaveMealResult:
        return cls(meal=meal)

    @classmethod
    def failed(cls, error: str) -> SaveMealResult:
        return cls(error=error)

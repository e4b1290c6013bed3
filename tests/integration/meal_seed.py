from __future__ import annotations

from fastapi.testclient import TestClient

IMAGE_BYTES = b"\xff\xd8\xff" + b"x" * 1021


def meal_form(**overrides: str) -> dict[str, str]:
    form = {
        "title": "Tacos",
        "summary": "Quick tacos",
        "instructions": "Cook and serve",
        "name": "Ana",
        "email": "ana@example.com",
    }
    form.update(overrides)
    return form


def share_meal(
    *,
    client: TestClient,
    image: bytes | None = IMAGE_BYTES,
    filename: str = "tacos.jpg",
    **overrides: str,
):
    files = {"image": (filename, image, "image/jpeg")} if image is not None else None
    return client.post(
        "/meals/share",
        data=meal_form(**overrides),
        files=files,
        follow_redirects=False,
    )

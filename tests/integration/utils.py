"""Shared helpers for integration tests."""

from __future__ import annotations

from dinnerboard.config import get_settings


def auth_headers() -> dict[str, str]:
    token = get_settings().api_token
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


def create_meal(client, name: str, *ingredients: tuple[str, str], tags=None) -> dict:
    response = client.post(
        "/meals",
        json={
            "name": name,
            "tags": tags or [],
            "ingredients": [{"name": n, "category": c} for n, c in ingredients],
        },
        headers=auth_headers(),
    )
    assert response.status_code == 201, response.text
    return response.json()

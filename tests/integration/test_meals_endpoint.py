"""Integration tests for meal template endpoints."""

from __future__ import annotations

from fastapi import status

from tests.integration.utils import auth_headers, create_meal


def test_meals_crud_flow(client):
    response = client.get("/meals")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []

    created = create_meal(client, "Tacos", ("beef", "meat"), ("tortilla", "bakery"), tags=["mexican"])
    meal_id = created["id"]
    assert created["ingredients"] == [
        {"name": "beef", "category": "meat"},
        {"name": "tortilla", "category": "bakery"},
    ]

    response = client.get(f"/meals/{meal_id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["tags"] == ["mexican"]

    response = client.put(
        f"/meals/{meal_id}",
        json={"description": "Tuesday", "ingredients": [{"name": "chicken", "category": "meat"}]},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["description"] == "Tuesday"
    assert body["tags"] == ["mexican"]
    assert [i["name"] for i in body["ingredients"]] == ["chicken"]

    response = client.delete(f"/meals/{meal_id}", headers=auth_headers())
    assert response.status_code == status.HTTP_204_NO_CONTENT

    assert client.get(f"/meals/{meal_id}").status_code == status.HTTP_404_NOT_FOUND
    assert client.delete(f"/meals/{meal_id}", headers=auth_headers()).status_code == 404
    assert client.put(f"/meals/{meal_id}", json={"name": "x"}).status_code == 404


def test_duplicate_meal_name_returns_conflict(client):
    create_meal(client, "Chili")

    response = client.post("/meals", json={"name": "chili"}, headers=auth_headers())

    assert response.status_code == status.HTTP_409_CONFLICT


def test_meal_validation_rejects_blank_name(client):
    response = client.post("/meals", json={"name": "   "}, headers=auth_headers())
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    response = client.post("/meals", json={"description": "no name"}, headers=auth_headers())
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert client.get("/meals").json() == []


def test_empty_update_is_rejected(client):
    meal = create_meal(client, "Soup")

    response = client.put(f"/meals/{meal['id']}", json={}, headers=auth_headers())

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_null_fields_leave_meal_unchanged(client):
    meal = create_meal(client, "Chili", ("beans", "pantry"), tags=["spicy"])

    response = client.put(
        f"/meals/{meal['id']}",
        json={"name": None, "ingredients": None, "tags": ["weeknight"]},
        headers=auth_headers(),
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["name"] == "Chili"
    assert body["tags"] == ["weeknight"]
    assert [ingredient["name"] for ingredient in body["ingredients"]] == ["beans"]

    response = client.put(f"/meals/{meal['id']}", json={"name": None}, headers=auth_headers())
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert client.get(f"/meals/{meal['id']}").json()["name"] == "Chili"


def test_null_description_clears_it(client):
    created = client.post(
        "/meals",
        json={"name": "Stew", "description": "Slow cooker"},
        headers=auth_headers(),
    ).json()

    response = client.put(
        f"/meals/{created['id']}", json={"description": None}, headers=auth_headers()
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["description"] is None

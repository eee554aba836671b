"""Integration tests for meal suggestions."""

from __future__ import annotations

from datetime import date

from fastapi import status

from tests.integration.utils import auth_headers, create_meal


def test_suggestions_rank_and_exclude_scheduled(client):
    for name in ("rice", "garlic"):
        client.post("/pantry", json={"name": name, "category": "pantry"}, headers=auth_headers())
    scheduled = create_meal(client, "Fried Rice", ("rice", "pantry"), ("egg", "dairy"))
    create_meal(client, "Garlic Rice", ("rice", "pantry"), ("garlic", "produce"))
    create_meal(client, "Shakshuka", ("egg", "dairy"), ("tomato", "produce"))
    create_meal(client, "Salad", ("lettuce", "produce"))
    create_meal(client, "Aioli Fries", ("garlic", "produce"), ("potato", "produce"))
    client.put(
        f"/dinners/{date.today().isoformat()}",
        json={"title": "Fried Rice", "meal_template_id": scheduled["id"]},
        headers=auth_headers(),
    )

    response = client.get("/suggestions")
    assert response.status_code == status.HTTP_200_OK
    suggestions = response.json()["suggestions"]

    assert [s["name"] for s in suggestions] == ["Garlic Rice", "Aioli Fries", "Shakshuka"]
    assert [s["score"] for s in suggestions] == [5, 2, 1]
    assert suggestions[2]["reason"] == "Shares 1 ingredient(s) with this week's meals"

    response = client.get("/suggestions", params={"limit": 10})
    names = [s["name"] for s in response.json()["suggestions"]]
    assert names[-1] == "Salad"
    assert "Fried Rice" not in names


def test_suggestions_limit_validation(client):
    assert client.get("/suggestions", params={"limit": 0}).status_code == 422
    assert client.get("/suggestions").json() == {"suggestions": []}

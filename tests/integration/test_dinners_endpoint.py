"""Integration tests for dinner scheduling endpoints."""

from __future__ import annotations

from datetime import date, timedelta

from fastapi import status

from tests.integration.utils import auth_headers, create_meal


def _schedule(client, offset_days: int, title: str) -> dict:
    event_date = (date.today() + timedelta(days=offset_days)).isoformat()
    response = client.put(f"/dinners/{event_date}", json={"title": title}, headers=auth_headers())
    assert response.status_code == status.HTTP_200_OK, response.text
    return response.json()


def test_dinners_lists_current_window(client):
    meal = create_meal(client, "Risotto", ("arborio", "pantry"))
    _schedule(client, 2, "risotto")
    _schedule(client, 7, "Out of range")

    response = client.get("/dinners")
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["date_range"]["start"] == date.today().isoformat()
    assert body["date_range"]["end"] == (date.today() + timedelta(days=6)).isoformat()
    assert [dinner["title"] for dinner in body["dinners"]] == ["risotto"]
    assert body["dinners"][0]["meal_template_id"] == meal["id"]
    assert body["dinners"][0]["source"] == "manual"


def test_schedule_with_unknown_template_is_404(client):
    event_date = date.today().isoformat()
    response = client.put(
        f"/dinners/{event_date}",
        json={"title": "Mystery", "meal_template_id": 999},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND

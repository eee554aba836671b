"""Tests for the Typer command-line interface."""

from __future__ import annotations

import json
from datetime import date

import pytest
from typer.testing import CliRunner

from dinnerboard.cli import app
from dinnerboard.config import get_settings
from dinnerboard.db.dinners import upsert_dinner_event
from dinnerboard.db.meals import create_meal_template
from dinnerboard.db.repository import Database

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setenv("DINNERBOARD_LOG_LEVEL", "WARNING")
    get_settings.cache_clear()


def _schedule_today(name: str, *ingredients: str) -> None:
    with Database.from_settings(get_settings()) as database:
        meal = create_meal_template(
            database,
            name=name,
            ingredients=[{"name": ingredient, "category": "produce"} for ingredient in ingredients],
        )
        upsert_dinner_event(database, event_date=date.today(), title=name, meal_template_id=meal.id)


def test_grocery_list_without_active_list_exits_nonzero():
    result = runner.invoke(app, ["grocery-list"])

    assert result.exit_code == 1
    assert "No active grocery list" in result.output


def test_seed_refresh_and_suggest():
    result = runner.invoke(app, ["seed"])
    assert result.exit_code == 0
    assert "5 pantry staple(s)" in result.output

    _schedule_today("Gazpacho", "tomato", "cucumber", "garlic")

    result = runner.invoke(app, ["refresh", "--no-pretty"])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert sorted(item["name"] for item in payload["items"]) == ["cucumber", "tomato"]
    assert payload["is_active"] is True

    result = runner.invoke(app, ["grocery-list", "--no-pretty"])
    assert result.exit_code == 0
    assert set(json.loads(result.output)["items"]) == {"produce"}

    result = runner.invoke(app, ["suggest", "--limit", "2", "--no-pretty"])
    assert result.exit_code == 0
    assert json.loads(result.output) == []

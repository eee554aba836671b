"""Tests for the CSV meal import."""

from __future__ import annotations

import pytest

from dinnerboard.db.meals import list_meal_templates
from dinnerboard.db.pantry import pantry_staple_names
from dinnerboard.seed import guess_category, parse_meal_rows, seed_database

CSV_TEXT = """Family dinners export
generated by spreadsheet

Recipe Name,Category,URL,Ingredients,Tags
Chicken Tacos,Weeknight,https://example.com/tacos,chicken thighs|tortillas|cheddar|lime,mexican|quick
"Pasta, Pesto",,—,penne|basil|parmesan,
Broken row,only,three
,Nameless,,rice,
"""


@pytest.mark.parametrize(
    "ingredient, category",
    [
        ("Salmon fillet", "meat"),
        ("Sour Cream", "dairy"),
        ("red onion", "produce"),
        ("frozen peas", "frozen"),
        ("ciabatta", "bakery"),
        ("soy sauce", "pantry"),
    ],
)
def test_guess_category(ingredient, category):
    assert guess_category(ingredient) == category


def test_parse_meal_rows_skips_preamble_and_bad_rows():
    meals = list(parse_meal_rows(CSV_TEXT.splitlines(keepends=True)))

    assert [meal.name for meal in meals] == ["Chicken Tacos", "Pasta, Pesto"]

    tacos, pasta = meals
    assert tacos.description == "Weeknight - https://example.com/tacos"
    assert tacos.tags == ["mexican", "quick"]
    assert [(i.name, i.category) for i in tacos.ingredients] == [
        ("chicken thighs", "meat"),
        ("tortillas", "pantry"),
        ("cheddar", "dairy"),
        ("lime", "produce"),
    ]
    assert pasta.description == "Dinner Ideas"
    assert pasta.tags == []


def test_seed_database_is_repeatable(database, tmp_path):
    csv_path = tmp_path / "meals.csv"
    csv_path.write_text(CSV_TEXT, encoding="utf-8")

    first = seed_database(database, csv_path)
    second = seed_database(database, csv_path)

    assert first.meals == second.meals == 2
    assert len(list_meal_templates(database)) == 2
    assert pantry_staple_names(database) == {"salt", "black pepper", "olive oil", "garlic", "butter"}

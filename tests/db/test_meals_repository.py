from __future__ import annotations

from datetime import date

import pytest

from dinnerboard.db.dinners import get_dinner_event, upsert_dinner_event
from dinnerboard.db.meals import (
    create_meal_template,
    delete_meal_template,
    find_meal_template_by_name,
    get_meal_template,
    list_meal_templates,
    update_meal_template,
    upsert_meal_template,
)
from dinnerboard.errors import ConflictError, NotFoundError
from dinnerboard.models.catalog import Ingredient


def test_create_and_list_meal_templates(database):
    create_meal_template(
        database,
        name="  Tacos ",
        description="Tuesday classic",
        tags=["mexican", "quick", "quick"],
        ingredients=[Ingredient(name="beef", category="meat"), {"name": "tortilla", "category": "bakery"}],
    )
    create_meal_template(database, name="burgers")

    meals = list_meal_templates(database)
    assert [meal.name for meal in meals] == ["burgers", "Tacos"]

    tacos = meals[1]
    assert tacos.tags == ["mexican", "quick", "quick"]
    assert [ingredient.name for ingredient in tacos.ingredients] == ["beef", "tortilla"]
    assert tacos.ingredients[1].category == "bakery"


def test_duplicate_name_is_conflict_ignoring_case(database):
    create_meal_template(database, name="Chili")

    with pytest.raises(ConflictError):
        create_meal_template(database, name="CHILI")

    other = create_meal_template(database, name="Stew")
    with pytest.raises(ConflictError):
        update_meal_template(database, other.id, name="chili")


def test_find_by_name_is_case_insensitive(database):
    created = create_meal_template(database, name="Pad Thai")

    assert find_meal_template_by_name(database, "pad thai").id == created.id
    assert find_meal_template_by_name(database, "Pad  Thai") is None


def test_list_excluding_ids(database):
    keep = create_meal_template(database, name="Keep")
    skip = create_meal_template(database, name="Skip")

    meals = list_meal_templates(database, excluding={skip.id})

    assert [meal.id for meal in meals] == [keep.id]


def test_update_meal_template_partial(database):
    meal = create_meal_template(database, name="Soup", description="warm", tags=["winter"])

    updated = update_meal_template(
        database, meal.id, ingredients=[{"name": "leek", "category": "produce"}]
    )

    assert updated.description == "warm"
    assert updated.tags == ["winter"]
    assert updated.ingredients == [Ingredient(name="leek", category="produce")]


def test_update_and_delete_missing_meal_raise(database):
    with pytest.raises(NotFoundError):
        update_meal_template(database, 999, name="nope")
    with pytest.raises(NotFoundError):
        delete_meal_template(database, 999)


def test_delete_unlinks_dinner_events(database):
    meal = create_meal_template(database, name="Curry")
    upsert_dinner_event(database, event_date=date(2024, 6, 4), title="Curry")
    assert get_dinner_event(database, date(2024, 6, 4)).meal_template_id == meal.id

    delete_meal_template(database, meal.id)

    event = get_dinner_event(database, date(2024, 6, 4))
    assert event is not None
    assert event.meal_template_id is None
    assert event.meal_template is None
    assert get_meal_template(database, meal.id) is None


def test_upsert_overwrites_by_name(database):
    first = upsert_meal_template(database, name="Pizza", tags=["friday"])
    second = upsert_meal_template(
        database, name="pizza", description="homemade", ingredients=[{"name": "dough", "category": "bakery"}]
    )

    assert first.id == second.id
    assert second.name == "Pizza"
    assert second.tags == []
    assert len(list_meal_templates(database)) == 1

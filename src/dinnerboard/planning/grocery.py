"""Grocery list aggregation from the week's scheduled dinners."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional

from dinnerboard import metrics
from dinnerboard.db.dinners import list_dinner_events_in_range
from dinnerboard.db.grocery_lists import activate_grocery_list
from dinnerboard.db.meals import find_meal_template_by_name
from dinnerboard.db.pantry import pantry_staple_names
from dinnerboard.db.repository import Database
from dinnerboard.models.catalog import MealTemplate
from dinnerboard.models.dinners import DinnerEvent
from dinnerboard.models.grocery import GroceryItemDraft, GroceryList
from dinnerboard.planning.window import compute_window

logger = logging.getLogger(__name__)

TemplateResolver = Callable[[str], Optional[MealTemplate]]


def _resolve_event(
    event: DinnerEvent, resolve_template: TemplateResolver
) -> tuple[str, Optional[MealTemplate]]:
    """Return the meal display name and the template whose ingredients the event uses."""

    if event.meal_template is not None:
        return event.meal_template.name, event.meal_template
    # Unlinked events fall back to an exact, case-insensitive title match.
    return event.title, resolve_template(event.title)


def aggregate_ingredients(
    events: Iterable[DinnerEvent],
    pantry_names: set[str],
    resolve_template: TemplateResolver,
) -> list[GroceryItemDraft]:
    """Merge event ingredients into one entry per lowercase name, skipping pantry staples.

    The first occurrence of a name fixes its display name and category; every
    occurrence records the meal it came from once.
    """

    merged: dict[str, GroceryItemDraft] = {}
    for event in events:
        meal_name, template = _resolve_event(event, resolve_template)
        if template is None:
            logger.debug("No meal template for dinner %s (%s)", event.date, event.title)
            continue

        for ingredient in template.ingredients:
            key = ingredient.name.lower()
            if key in pantry_names:
                continue

            entry = merged.get(key)
            if entry is None:
                merged[key] = GroceryItemDraft(
                    name=ingredient.name,
                    category=ingredient.category,
                    from_meals=[meal_name],
                )
            elif meal_name not in entry.from_meals:
                entry.from_meals.append(meal_name)

    return list(merged.values())


def regenerate_grocery_list(database: Database, now: Optional[datetime] = None) -> GroceryList:
    """Rebuild the grocery list for the current window and make it the active list."""

    window = compute_window(now)
    events = list_dinner_events_in_range(database, window.start, window.end)
    pantry_names = pantry_staple_names(database)

    items = aggregate_ingredients(
        events,
        pantry_names,
        lambda title: find_meal_template_by_name(database, title),
    )
    grocery_list = activate_grocery_list(database, window.start, window.end, items)

    metrics.GROCERY_LIST_REGENERATIONS.inc()
    metrics.GROCERY_ITEMS_GENERATED.inc(len(grocery_list.items))
    logger.info(
        "Regenerated grocery list id=%s from %s dinner(s) with %s item(s)",
        grocery_list.id,
        len(events),
        len(grocery_list.items),
    )
    return grocery_list


__all__ = ["TemplateResolver", "aggregate_ingredients", "regenerate_grocery_list"]

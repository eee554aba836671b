"""Meal suggestions ranked by pantry coverage and overlap with this week's meals."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from dinnerboard import metrics
from dinnerboard.db.dinners import list_dinner_events_in_range
from dinnerboard.db.meals import list_meal_templates
from dinnerboard.db.pantry import pantry_staple_names
from dinnerboard.db.repository import Database
from dinnerboard.models.catalog import MealTemplate
from dinnerboard.models.dinners import DinnerEvent
from dinnerboard.models.grocery import MealSuggestion
from dinnerboard.planning.window import compute_window

logger = logging.getLogger(__name__)

DEFAULT_SUGGESTION_LIMIT = 3
PANTRY_MATCH_WEIGHT = 2
OVERLAP_WEIGHT = 1


def describe_reason(pantry_match_count: int, ingredient_overlap_count: int) -> str:
    if pantry_match_count > 0 and ingredient_overlap_count > 0:
        return (
            f"Uses {pantry_match_count} pantry item(s) and shares "
            f"{ingredient_overlap_count} ingredient(s) with this week's meals"
        )
    if pantry_match_count > 0:
        return f"Uses {pantry_match_count} pantry item(s) you already have"
    if ingredient_overlap_count > 0:
        return f"Shares {ingredient_overlap_count} ingredient(s) with this week's meals"
    return "Good for variety"


def week_meal_profile(events: Iterable[DinnerEvent]) -> tuple[set[int], set[str]]:
    """Collect scheduled template ids and their lowercase ingredient names.

    Only events explicitly linked to a template count; title matches are ignored here.
    """

    meal_ids: set[int] = set()
    ingredient_names: set[str] = set()
    for event in events:
        if event.meal_template_id is None:
            continue
        meal_ids.add(event.meal_template_id)
        if event.meal_template is not None:
            ingredient_names.update(ing.name.lower() for ing in event.meal_template.ingredients)
    return meal_ids, ingredient_names


def score_meal_templates(
    candidates: Iterable[MealTemplate],
    pantry_names: set[str],
    week_ingredients: set[str],
) -> list[MealSuggestion]:
    """Score candidates and order them by score, highest first.

    Ties keep catalog order (name ignoring case, then id).
    """

    ordered = sorted(candidates, key=lambda meal: (meal.name.lower(), meal.id))
    scored: list[MealSuggestion] = []
    for meal in ordered:
        pantry_match_count = 0
        ingredient_overlap_count = 0
        for ingredient in meal.ingredients:
            name = ingredient.name.lower()
            if name in pantry_names:
                pantry_match_count += 1
            if name in week_ingredients:
                ingredient_overlap_count += 1

        scored.append(
            MealSuggestion(
                id=meal.id,
                name=meal.name,
                description=meal.description,
                tags=list(meal.tags),
                pantry_match_count=pantry_match_count,
                ingredient_overlap_count=ingredient_overlap_count,
                score=pantry_match_count * PANTRY_MATCH_WEIGHT
                + ingredient_overlap_count * OVERLAP_WEIGHT,
                reason=describe_reason(pantry_match_count, ingredient_overlap_count),
            )
        )

    # sorted() is stable, so equal scores stay in catalog order.
    return sorted(scored, key=lambda suggestion: suggestion.score, reverse=True)


def get_meal_suggestions(
    database: Database,
    limit: int = DEFAULT_SUGGESTION_LIMIT,
    now: Optional[datetime] = None,
) -> list[MealSuggestion]:
    """Return up to ``limit`` templates not scheduled this week, best reuse first."""

    if limit <= 0:
        return []

    window = compute_window(now)
    pantry_names = pantry_staple_names(database)
    events = list_dinner_events_in_range(database, window.start, window.end)
    week_meal_ids, week_ingredients = week_meal_profile(events)

    candidates = list_meal_templates(database, excluding=week_meal_ids)
    ranked = score_meal_templates(candidates, pantry_names, week_ingredients)

    metrics.SUGGESTION_REQUESTS.inc()
    logger.debug(
        "Scored %s candidate meal(s); excluded %s scheduled this week",
        len(ranked),
        len(week_meal_ids),
    )
    return ranked[:limit]


__all__ = [
    "DEFAULT_SUGGESTION_LIMIT",
    "describe_reason",
    "week_meal_profile",
    "score_meal_templates",
    "get_meal_suggestions",
]

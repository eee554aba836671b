"""Grocery aggregation and meal suggestion logic over the planning window."""

from dinnerboard.planning.grocery import aggregate_ingredients, regenerate_grocery_list
from dinnerboard.planning.suggestions import get_meal_suggestions, score_meal_templates
from dinnerboard.planning.window import WINDOW_DAYS, compute_window

__all__ = [
    "WINDOW_DAYS",
    "compute_window",
    "aggregate_ingredients",
    "regenerate_grocery_list",
    "score_meal_templates",
    "get_meal_suggestions",
]

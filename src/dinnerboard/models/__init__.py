"""Pydantic models defining shared data contracts."""

from dinnerboard.models.catalog import Ingredient, MealTemplate, PantryItem
from dinnerboard.models.dinners import DinnerEvent
from dinnerboard.models.grocery import (
    GroceryItemDraft,
    GroceryList,
    GroceryListItem,
    MealSuggestion,
    PlanningWindow,
)

__all__ = [
    "Ingredient",
    "MealTemplate",
    "PantryItem",
    "DinnerEvent",
    "GroceryItemDraft",
    "GroceryList",
    "GroceryListItem",
    "MealSuggestion",
    "PlanningWindow",
]

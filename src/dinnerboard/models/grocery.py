"""Grocery list, planning window and suggestion models."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PlanningWindow(BaseModel):
    """Inclusive date span covered by a planning run."""

    start: date
    end: date

    model_config = ConfigDict(frozen=True)

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end


class GroceryItemDraft(BaseModel):
    """Aggregated grocery entry that has not been persisted yet."""

    name: str
    category: str
    from_meals: list[str] = Field(default_factory=list)
    is_checked: bool = Field(default=False)


class GroceryListItem(BaseModel):
    """Persisted entry on a grocery list."""

    id: int
    list_id: int
    name: str
    category: str
    from_meals: list[str] = Field(default_factory=list)
    is_checked: bool = Field(default=False)

    model_config = ConfigDict(frozen=True)


class GroceryList(BaseModel):
    """Grocery list generated for a planning window."""

    id: int
    start_date: date
    end_date: date
    is_active: bool
    created_at: datetime
    items: list[GroceryListItem] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def grouped_items(self) -> dict[str, list[GroceryListItem]]:
        """Return items bucketed by category, preserving item order."""

        grouped: dict[str, list[GroceryListItem]] = {}
        for item in self.items:
            grouped.setdefault(item.category or "other", []).append(item)
        return grouped


class MealSuggestion(BaseModel):
    """Meal template ranked by how much it reuses pantry and weekly ingredients."""

    id: int
    name: str
    description: Optional[str] = Field(default=None)
    tags: list[str] = Field(default_factory=list)
    pantry_match_count: int = Field(ge=0)
    ingredient_overlap_count: int = Field(ge=0)
    score: int = Field(ge=0)
    reason: str

    model_config = ConfigDict(frozen=True)


__all__ = [
    "PlanningWindow",
    "GroceryItemDraft",
    "GroceryListItem",
    "GroceryList",
    "MealSuggestion",
]

"""Meal catalog and pantry models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Ingredient(BaseModel):
    """Unquantified named ingredient with its store category."""

    name: str
    category: str = Field(default="other")

    model_config = ConfigDict(frozen=True)


class MealTemplate(BaseModel):
    """Reusable meal definition with its ordered ingredient list."""

    id: int
    name: str
    description: Optional[str] = Field(default=None)
    tags: list[str] = Field(default_factory=list)
    ingredients: list[Ingredient] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(frozen=True)


class PantryItem(BaseModel):
    """Item tracked in the pantry; staples are kept off generated grocery lists."""

    id: int
    name: str
    category: str
    always_on_hand: bool = Field(default=True)
    created_at: datetime

    model_config = ConfigDict(frozen=True)


__all__ = ["Ingredient", "MealTemplate", "PantryItem"]

"""Scheduled dinner models."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from dinnerboard.models.catalog import MealTemplate


class DinnerEvent(BaseModel):
    """Dinner scheduled for a calendar date, optionally linked to a meal template."""

    id: int
    date: date
    title: str
    notes: Optional[str] = Field(default=None)
    external_id: Optional[str] = Field(default=None)
    source: str = Field(default="manual")
    meal_template_id: Optional[int] = Field(default=None)
    meal_template: Optional[MealTemplate] = Field(default=None)

    model_config = ConfigDict(frozen=True)


__all__ = ["DinnerEvent"]

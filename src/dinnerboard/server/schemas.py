"""Request and response payloads for the Dinnerboard API."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from dinnerboard.models.dinners import DinnerEvent
from dinnerboard.models.grocery import (
    GroceryList,
    GroceryListItem,
    MealSuggestion,
    PlanningWindow,
)


class IngredientPayload(BaseModel):
    name: str = Field(max_length=255)
    category: str = Field(default="other", max_length=64)


class MealCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    tags: list[str] = Field(default_factory=list)
    ingredients: list[IngredientPayload] = Field(default_factory=list)

    model_config = ConfigDict(str_strip_whitespace=True)


class MealUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    tags: Optional[list[str]] = None
    ingredients: Optional[list[IngredientPayload]] = None

    model_config = ConfigDict(str_strip_whitespace=True)

    def changes(self) -> dict[str, Any]:
        """Return the fields to write. A null leaves a field unchanged, except ``description``."""

        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key == "description"
        }


class PantryCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    category: str = Field(min_length=1, max_length=64)
    always_on_hand: bool = Field(default=True)

    model_config = ConfigDict(str_strip_whitespace=True)


class PantryUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[str] = Field(default=None, min_length=1, max_length=64)
    always_on_hand: Optional[bool] = None

    model_config = ConfigDict(str_strip_whitespace=True)

    def changes(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class DinnerUpsertRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    notes: Optional[str] = Field(default=None, max_length=1000)
    meal_template_id: Optional[int] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class CalendarWebhookRequest(BaseModel):
    """Calendar webhook payload; field checks happen in the handler so the secret is checked first."""

    secret: Optional[Any] = None
    date: Optional[Any] = None
    title: Optional[Any] = None
    notes: Optional[Any] = None
    external_id: Optional[Any] = None


class IngestedDinner(BaseModel):
    id: int
    date: date
    title: str
    matched: bool
    matched_meal: Optional[str] = None


class CalendarWebhookResponse(BaseModel):
    success: bool = True
    message: str = "Dinner event processed"
    dinner_event: IngestedDinner
    grocery_list_item_count: int


class DinnersResponse(BaseModel):
    dinners: list[DinnerEvent]
    date_range: PlanningWindow


class GroceryListPayload(BaseModel):
    id: int
    start_date: date
    end_date: date
    is_active: bool
    created_at: datetime
    items: list[GroceryListItem]
    grouped_items: dict[str, list[GroceryListItem]]

    @classmethod
    def from_list(cls, grocery_list: GroceryList) -> "GroceryListPayload":
        return cls(
            id=grocery_list.id,
            start_date=grocery_list.start_date,
            end_date=grocery_list.end_date,
            is_active=grocery_list.is_active,
            created_at=grocery_list.created_at,
            items=grocery_list.items,
            grouped_items=grocery_list.grouped_items(),
        )


class GroceryListResponse(BaseModel):
    grocery_list: Optional[GroceryListPayload] = None
    message: Optional[str] = None


class SuggestionsResponse(BaseModel):
    suggestions: list[MealSuggestion]


__all__ = [
    "IngredientPayload",
    "MealCreateRequest",
    "MealUpdateRequest",
    "PantryCreateRequest",
    "PantryUpdateRequest",
    "DinnerUpsertRequest",
    "CalendarWebhookRequest",
    "CalendarWebhookResponse",
    "IngestedDinner",
    "DinnersResponse",
    "GroceryListPayload",
    "GroceryListResponse",
    "SuggestionsResponse",
]

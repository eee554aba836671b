"""Dependency definitions for the Dinnerboard API server."""

from __future__ import annotations

import hmac
from datetime import date, datetime
from typing import Any, Callable, List, Optional

from fastapi import Depends, HTTPException, Request, status

from dinnerboard.config import Settings, get_settings
from dinnerboard.db.dinners import list_dinner_events_in_range, upsert_dinner_event
from dinnerboard.db.grocery_lists import (
    get_active_grocery_list,
    list_grocery_lists,
    toggle_grocery_item,
)
from dinnerboard.db.meals import (
    create_meal_template,
    delete_meal_template,
    get_meal_template,
    list_meal_templates,
    update_meal_template,
)
from dinnerboard.db.pantry import (
    create_pantry_item,
    delete_pantry_item,
    list_pantry_items,
    update_pantry_item,
)
from dinnerboard.db.repository import Database
from dinnerboard.models.catalog import MealTemplate, PantryItem
from dinnerboard.models.dinners import DinnerEvent
from dinnerboard.models.grocery import GroceryList, GroceryListItem, MealSuggestion
from dinnerboard.planning.grocery import regenerate_grocery_list
from dinnerboard.planning.suggestions import get_meal_suggestions

DinnersProvider = Callable[[date, date], List[DinnerEvent]]
DinnerUpserter = Callable[[dict], DinnerEvent]
MealsProvider = Callable[[], List[MealTemplate]]
MealFetcher = Callable[[int], Optional[MealTemplate]]
MealCreator = Callable[[dict], MealTemplate]
MealUpdater = Callable[[int, dict], MealTemplate]
MealDeleter = Callable[[int], None]
PantryProvider = Callable[[], List[PantryItem]]
PantryCreator = Callable[[dict], PantryItem]
PantryUpdater = Callable[[int, dict], PantryItem]
PantryDeleter = Callable[[int], None]
GroceryListProvider = Callable[[], Optional[GroceryList]]
GroceryListHistoryProvider = Callable[[int], List[GroceryList]]
GroceryListRegenerator = Callable[[Optional[datetime]], GroceryList]
GroceryItemToggler = Callable[[int], Optional[GroceryListItem]]
SuggestionProvider = Callable[[int, Optional[datetime]], List[MealSuggestion]]


def get_database(request: Request) -> Database:
    """Return the database handle opened by the application factory."""

    return request.app.state.database


def get_dinners_provider(database: Database = Depends(get_database)) -> DinnersProvider:
    return lambda start, end: list_dinner_events_in_range(database, start, end)


def get_dinner_upserter(database: Database = Depends(get_database)) -> DinnerUpserter:
    return lambda payload: upsert_dinner_event(database, **payload)


def get_meals_provider(database: Database = Depends(get_database)) -> MealsProvider:
    return lambda: list_meal_templates(database)


def get_meal_fetcher(database: Database = Depends(get_database)) -> MealFetcher:
    return lambda meal_id: get_meal_template(database, meal_id)


def get_meal_creator(database: Database = Depends(get_database)) -> MealCreator:
    return lambda payload: create_meal_template(database, **payload)


def get_meal_updater(database: Database = Depends(get_database)) -> MealUpdater:
    return lambda meal_id, payload: update_meal_template(database, meal_id, **payload)


def get_meal_deleter(database: Database = Depends(get_database)) -> MealDeleter:
    return lambda meal_id: delete_meal_template(database, meal_id)


def get_pantry_provider(database: Database = Depends(get_database)) -> PantryProvider:
    return lambda: list_pantry_items(database)


def get_pantry_creator(database: Database = Depends(get_database)) -> PantryCreator:
    return lambda payload: create_pantry_item(database, **payload)


def get_pantry_updater(database: Database = Depends(get_database)) -> PantryUpdater:
    return lambda item_id, payload: update_pantry_item(database, item_id, **payload)


def get_pantry_deleter(database: Database = Depends(get_database)) -> PantryDeleter:
    return lambda item_id: delete_pantry_item(database, item_id)


def get_grocery_list_provider(database: Database = Depends(get_database)) -> GroceryListProvider:
    return lambda: get_active_grocery_list(database)


def get_grocery_list_history_provider(
    database: Database = Depends(get_database),
) -> GroceryListHistoryProvider:
    return lambda limit: list_grocery_lists(database, limit=limit)


def get_grocery_list_regenerator(
    database: Database = Depends(get_database),
) -> GroceryListRegenerator:
    return lambda now=None: regenerate_grocery_list(database, now)


def get_grocery_item_toggler(database: Database = Depends(get_database)) -> GroceryItemToggler:
    return lambda item_id: toggle_grocery_item(database, item_id)


def get_suggestion_provider(database: Database = Depends(get_database)) -> SuggestionProvider:
    return lambda limit, now=None: get_meal_suggestions(database, limit=limit, now=now)


def require_api_token(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """Ensure requests carry the configured API token when required."""

    token = settings.api_token
    if not token:
        return

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.split("Bearer ")[-1].strip() == token:
        return

    if request.headers.get("X-API-Key") == token:
        return

    if request.query_params.get("api_token") == token:
        return

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def webhook_secret_matches(provided: Any, settings: Settings) -> bool:
    """Return True when the webhook secret is configured and equals ``provided``."""

    expected = settings.webhook_secret
    if not expected or not isinstance(provided, str) or not provided:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))

"""ASGI application for Dinnerboard."""
# mypy: ignore-errors

from __future__ import annotations

import logging
from datetime import date, datetime
from time import perf_counter
from typing import Any, Optional
from uuid import uuid4

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from dinnerboard import __version__, metrics
from dinnerboard.config import Settings, get_settings
from dinnerboard.db.repository import Database
from dinnerboard.errors import ConflictError, NotFoundError
from dinnerboard.logging_utils import configure_logging as configure_app_logging
from dinnerboard.models.catalog import MealTemplate, PantryItem
from dinnerboard.models.dinners import DinnerEvent
from dinnerboard.models.grocery import GroceryListItem
from dinnerboard.planning.window import compute_window
from dinnerboard.server import deps
from dinnerboard.server.schemas import (
    CalendarWebhookRequest,
    CalendarWebhookResponse,
    DinnersResponse,
    DinnerUpsertRequest,
    GroceryListPayload,
    GroceryListResponse,
    IngestedDinner,
    MealCreateRequest,
    MealUpdateRequest,
    PantryCreateRequest,
    PantryUpdateRequest,
    SuggestionsResponse,
)

logger = logging.getLogger(__name__)


def _json_safe(value: Any) -> Any:
    """Convert non-serializable values into JSON-safe representations."""

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (list, tuple)):
        return [_json_safe(entry) for entry in value]
    if isinstance(value, dict):
        return {key: _json_safe(sub_value) for key, sub_value in value.items()}
    return repr(value)


def _configure_logging(settings: Settings) -> None:
    secrets = [settings.api_token or "", settings.webhook_secret or ""]
    configure_app_logging(settings.log_level, settings.log_format, secrets)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip()


def _route_label(request: Request) -> str:
    """Return the matched route template so ids and dates share one metrics series."""

    route = request.scope.get("route")
    return getattr(route, "path", "<unmatched>")


def _parse_event_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()


def create_app(database: Database | None = None) -> FastAPI:
    """Create and configure a FastAPI application instance.

    The database handle is opened here and closed when the application shuts down.
    """

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="Dinnerboard", version=__version__)
    application.state.database = (database or Database.from_settings(settings)).open()

    @application.on_event("shutdown")
    def close_database() -> None:
        application.state.database.close()

    logger.debug("Application created with log level %s", settings.log_level)

    if settings.log_requests:
        access_logger = logging.getLogger("dinnerboard.access")

        @application.middleware("http")
        async def log_request_response(request: Request, call_next):
            """Log request/response details without leaking sensitive data."""

            request_id = request.headers.get("X-Request-ID") or uuid4().hex
            request.state.request_id = request_id
            start = perf_counter()
            path = request.url.path
            method = request.method
            try:
                response: Response = await call_next(request)
            except Exception:
                duration_ms = (perf_counter() - start) * 1000
                access_logger.exception(
                    "HTTP %s %s status=500 duration_ms=%.2f",
                    method,
                    path,
                    duration_ms,
                    extra={"request_id": request_id},
                )
                metrics.REQUEST_COUNT.labels(
                    method=method, path=_route_label(request), status="500"
                ).inc()
                metrics.REQUEST_LATENCY.labels(method=method, path=_route_label(request)).observe(
                    duration_ms / 1000.0
                )
                raise

            duration_ms = (perf_counter() - start) * 1000
            response.headers.setdefault("X-Request-ID", request_id)
            access_logger.info(
                "HTTP %s %s status=%s duration_ms=%.2f",
                method,
                path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id},
            )
            route_path = _route_label(request)
            metrics.REQUEST_COUNT.labels(
                method=method,
                path=route_path,
                status=str(response.status_code),
            ).inc()
            metrics.REQUEST_LATENCY.labels(method=method, path=route_path).observe(duration_ms / 1000.0)
            return response

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        log_kwargs: dict[str, Any] = {}
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            log_kwargs["extra"] = {"request_id": request_id}

        logger.warning(
            "Validation error on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
            **log_kwargs,
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": _json_safe(exc.errors())},
        )

    @application.get("/healthz", include_in_schema=False)
    def healthz() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @application.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        payload = generate_latest()
        return Response(content=payload, media_type=CONTENT_TYPE_LATEST)

    @application.get(
        "/dinners",
        response_model=DinnersResponse,
        summary="List dinners scheduled in the current window",
    )
    def dinners_list(
        provider: deps.DinnersProvider = Depends(deps.get_dinners_provider),
    ) -> DinnersResponse:
        window = compute_window()
        return DinnersResponse(dinners=provider(window.start, window.end), date_range=window)

    @application.put(
        "/dinners/{event_date}",
        response_model=DinnerEvent,
        summary="Schedule or replace the dinner for a date",
    )
    def dinners_upsert(
        event_date: date,
        payload: DinnerUpsertRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        upserter: deps.DinnerUpserter = Depends(deps.get_dinner_upserter),
    ) -> DinnerEvent:
        upsert_payload: dict[str, Any] = {
            "event_date": event_date,
            "title": payload.title,
            "notes": payload.notes,
            "source": "manual",
        }
        if "meal_template_id" in payload.model_fields_set:
            upsert_payload["meal_template_id"] = payload.meal_template_id
        try:
            return upserter(upsert_payload)
        except NotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @application.post(
        "/ingest-calendar",
        response_model=CalendarWebhookResponse,
        summary="Calendar webhook: record a dinner and refresh the grocery list",
    )
    def ingest_calendar(
        payload: CalendarWebhookRequest = Body(...),
        settings: Settings = Depends(get_settings),
        upserter: deps.DinnerUpserter = Depends(deps.get_dinner_upserter),
        regenerator: deps.GroceryListRegenerator = Depends(deps.get_grocery_list_regenerator),
    ) -> CalendarWebhookResponse:
        if not deps.webhook_secret_matches(payload.secret, settings):
            logger.warning("Rejected calendar webhook with invalid secret")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid webhook secret"
            )

        title = _optional_text(payload.title)
        raw_date = _optional_text(payload.date)
        if not raw_date or not title:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Missing required fields: date and title",
            )
        try:
            event_date = _parse_event_date(raw_date)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid date format"
            ) from exc

        event = upserter(
            {
                "event_date": event_date,
                "title": title,
                "notes": _optional_text(payload.notes),
                "external_id": _optional_text(payload.external_id),
                "source": "webhook",
            }
        )
        grocery_list = regenerator(None)
        return CalendarWebhookResponse(
            dinner_event=IngestedDinner(
                id=event.id,
                date=event.date,
                title=event.title,
                matched=event.meal_template_id is not None,
                matched_meal=event.meal_template.name if event.meal_template else None,
            ),
            grocery_list_item_count=len(grocery_list.items),
        )

    @application.get(
        "/meals",
        response_model=list[MealTemplate],
        summary="List meal templates",
    )
    def meals_list(
        provider: deps.MealsProvider = Depends(deps.get_meals_provider),
    ) -> list[MealTemplate]:
        return provider()

    @application.post(
        "/meals",
        response_model=MealTemplate,
        status_code=status.HTTP_201_CREATED,
        summary="Create meal template",
    )
    def meals_create(
        payload: MealCreateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        creator: deps.MealCreator = Depends(deps.get_meal_creator),
    ) -> MealTemplate:
        try:
            return creator(payload.model_dump())
        except ConflictError as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    @application.get(
        "/meals/{meal_id}",
        response_model=MealTemplate,
        summary="Get meal template",
    )
    def meals_get(
        meal_id: int,
        fetcher: deps.MealFetcher = Depends(deps.get_meal_fetcher),
    ) -> MealTemplate:
        meal = fetcher(meal_id)
        if meal is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Meal not found")
        return meal

    @application.put(
        "/meals/{meal_id}",
        response_model=MealTemplate,
        summary="Update meal template",
    )
    def meals_update(
        meal_id: int,
        payload: MealUpdateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        updater: deps.MealUpdater = Depends(deps.get_meal_updater),
    ) -> MealTemplate:
        update_payload = payload.changes()
        if not update_payload:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No fields provided for update",
            )
        try:
            return updater(meal_id, update_payload)
        except NotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        except ConflictError as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    @application.delete(
        "/meals/{meal_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete meal template",
    )
    def meals_delete(
        meal_id: int,
        auth: None = Depends(deps.require_api_token),
        deleter: deps.MealDeleter = Depends(deps.get_meal_deleter),
    ) -> None:
        try:
            deleter(meal_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @application.get(
        "/pantry",
        response_model=list[PantryItem],
        summary="List pantry items",
    )
    def pantry_list(
        provider: deps.PantryProvider = Depends(deps.get_pantry_provider),
    ) -> list[PantryItem]:
        return provider()

    @application.post(
        "/pantry",
        response_model=PantryItem,
        status_code=status.HTTP_201_CREATED,
        summary="Create pantry item",
    )
    def pantry_create(
        payload: PantryCreateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        creator: deps.PantryCreator = Depends(deps.get_pantry_creator),
    ) -> PantryItem:
        try:
            return creator(payload.model_dump())
        except ConflictError as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    @application.put(
        "/pantry/{item_id}",
        response_model=PantryItem,
        summary="Update pantry item",
    )
    def pantry_update(
        item_id: int,
        payload: PantryUpdateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        updater: deps.PantryUpdater = Depends(deps.get_pantry_updater),
    ) -> PantryItem:
        update_payload = payload.changes()
        if not update_payload:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No fields provided for update",
            )
        try:
            return updater(item_id, update_payload)
        except NotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        except ConflictError as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    @application.delete(
        "/pantry/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete pantry item",
    )
    def pantry_delete(
        item_id: int,
        auth: None = Depends(deps.require_api_token),
        deleter: deps.PantryDeleter = Depends(deps.get_pantry_deleter),
    ) -> None:
        try:
            deleter(item_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @application.get(
        "/grocery-list",
        response_model=GroceryListResponse,
        summary="Get the active grocery list",
    )
    def grocery_list_get(
        provider: deps.GroceryListProvider = Depends(deps.get_grocery_list_provider),
    ) -> GroceryListResponse:
        grocery_list = provider()
        if grocery_list is None:
            return GroceryListResponse(message="No active grocery list found")
        return GroceryListResponse(grocery_list=GroceryListPayload.from_list(grocery_list))

    @application.post(
        "/grocery-list/refresh",
        response_model=GroceryListResponse,
        summary="Regenerate the grocery list for the current window",
    )
    def grocery_list_refresh(
        auth: None = Depends(deps.require_api_token),
        regenerator: deps.GroceryListRegenerator = Depends(deps.get_grocery_list_regenerator),
    ) -> GroceryListResponse:
        grocery_list = regenerator(None)
        return GroceryListResponse(grocery_list=GroceryListPayload.from_list(grocery_list))

    @application.get(
        "/grocery-list/history",
        response_model=list[GroceryListPayload],
        summary="List generated grocery lists, newest first",
    )
    def grocery_list_history(
        limit: int = Query(default=20, ge=1, le=200),
        provider: deps.GroceryListHistoryProvider = Depends(
            deps.get_grocery_list_history_provider
        ),
    ) -> list[GroceryListPayload]:
        return [GroceryListPayload.from_list(entry) for entry in provider(limit)]

    @application.patch(
        "/grocery-list/items/{item_id}",
        response_model=GroceryListItem,
        summary="Toggle a grocery list item's checked state",
    )
    def grocery_item_toggle(
        item_id: int,
        auth: None = Depends(deps.require_api_token),
        toggler: deps.GroceryItemToggler = Depends(deps.get_grocery_item_toggler),
    ) -> GroceryListItem:
        item = toggler(item_id)
        if item is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
        return item

    @application.get(
        "/suggestions",
        response_model=SuggestionsResponse,
        summary="Suggest meals that reuse pantry and weekly ingredients",
    )
    def suggestions_list(
        limit: Optional[int] = Query(default=None, ge=1, le=50),
        settings: Settings = Depends(get_settings),
        provider: deps.SuggestionProvider = Depends(deps.get_suggestion_provider),
    ) -> SuggestionsResponse:
        return SuggestionsResponse(suggestions=provider(limit or settings.suggestion_limit, None))

    return application


__all__ = ["create_app"]

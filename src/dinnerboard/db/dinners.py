"""Data access helpers for scheduled dinners."""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from dinnerboard.errors import NotFoundError
from dinnerboard.models.dinners import DinnerEvent

from .meals import _find_by_name
from .meals import _to_model as _meal_to_model
from .models import DinnerEventORM, MealTemplateORM
from .repository import Database

logger = logging.getLogger(__name__)

_MATCH_BY_TITLE = object()


def _to_model(row: DinnerEventORM) -> DinnerEvent:
    return DinnerEvent.model_validate(
        {
            "id": row.id,
            "date": row.date,
            "title": row.title,
            "notes": row.notes,
            "external_id": row.external_id,
            "source": row.source,
            "meal_template_id": row.meal_template_id,
            "meal_template": _meal_to_model(row.meal_template) if row.meal_template else None,
        }
    )


def list_dinner_events_in_range(database: Database, start: date, end: date) -> List[DinnerEvent]:
    """Return dinners dated within ``[start, end]`` with their linked templates resolved."""

    with database.session_scope() as session:
        rows = (
            session.execute(
                select(DinnerEventORM)
                .where(DinnerEventORM.date >= start, DinnerEventORM.date <= end)
                .order_by(DinnerEventORM.date.asc())
            )
            .scalars()
            .unique()
            .all()
        )
        return [_to_model(row) for row in rows]


def get_dinner_event(database: Database, event_date: date) -> Optional[DinnerEvent]:
    with database.session_scope() as session:
        row = _find_by_date(session, event_date)
        if row is None:
            return None
        return _to_model(row)


def _find_by_date(session: Session, event_date: date) -> Optional[DinnerEventORM]:
    return (
        session.execute(select(DinnerEventORM).where(DinnerEventORM.date == event_date))
        .scalars()
        .unique()
        .one_or_none()
    )


def upsert_dinner_event(
    database: Database,
    *,
    event_date: date,
    title: str,
    notes: Optional[str] = None,
    external_id: Optional[str] = None,
    source: str = "manual",
    meal_template_id: Optional[int] | object = _MATCH_BY_TITLE,
) -> DinnerEvent:
    """Insert or replace the dinner scheduled on ``event_date``.

    When ``meal_template_id`` is omitted the event is linked to the template whose name
    matches the title ignoring case, or left unlinked when none does.
    """

    clean_title = title.strip()
    with database.session_scope() as session:
        if meal_template_id is _MATCH_BY_TITLE:
            template = _find_by_name(session, clean_title)
            template_id = template.id if template is not None else None
        else:
            template_id = meal_template_id  # type: ignore[assignment]
            if template_id is not None and session.get(MealTemplateORM, template_id) is None:
                raise NotFoundError(f"Meal {template_id} not found")

        row = _find_by_date(session, event_date)
        if row is None:
            row = DinnerEventORM(date=event_date)
            session.add(row)
        row.title = clean_title
        row.notes = notes or None
        row.external_id = external_id or None
        row.source = source
        row.meal_template_id = template_id
        session.flush()
        session.refresh(row)
        logger.info(
            "Upserted dinner date=%s title=%s meal_template_id=%s source=%s",
            event_date,
            clean_title,
            template_id,
            source,
        )
        return _to_model(row)


__all__ = ["list_dinner_events_in_range", "get_dinner_event", "upsert_dinner_event"]

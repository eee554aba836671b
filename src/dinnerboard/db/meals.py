"""Data access helpers for the meal template catalog."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from dinnerboard.errors import ConflictError, NotFoundError
from dinnerboard.models.catalog import Ingredient, MealTemplate

from .models import DinnerEventORM, MealTemplateORM
from .repository import Database

logger = logging.getLogger(__name__)

_UNSET = object()


def _to_model(row: MealTemplateORM) -> MealTemplate:
    return MealTemplate.model_validate(
        {
            "id": row.id,
            "name": row.name,
            "description": row.description,
            "tags": list(row.tags or []),
            "ingredients": list(row.ingredients or []),
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }
    )


def _dump_ingredients(ingredients: Iterable[Ingredient | dict]) -> list[dict[str, str]]:
    validated = [Ingredient.model_validate(entry) for entry in ingredients]
    return [entry.model_dump() for entry in validated]


def _clean_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    stripped = description.strip()
    return stripped or None


def _ensure_unique_name(session: Session, name: str, exclude_id: Optional[int] = None) -> None:
    query = select(MealTemplateORM.id).where(func.lower(MealTemplateORM.name) == name.lower())
    if exclude_id is not None:
        query = query.where(MealTemplateORM.id != exclude_id)
    if session.execute(query.limit(1)).first() is not None:
        raise ConflictError(f"A meal with the name '{name}' already exists")


def list_meal_templates(
    database: Database, *, excluding: Optional[Iterable[int]] = None
) -> List[MealTemplate]:
    """Return meal templates ordered by name, skipping ids in ``excluding``."""

    excluded = set(excluding or ())
    with database.session_scope() as session:
        query = select(MealTemplateORM).order_by(
            func.lower(MealTemplateORM.name).asc(), MealTemplateORM.id.asc()
        )
        if excluded:
            query = query.where(MealTemplateORM.id.not_in(excluded))
        rows = session.execute(query).scalars().all()
        return [_to_model(row) for row in rows]


def get_meal_template(database: Database, meal_id: int) -> Optional[MealTemplate]:
    with database.session_scope() as session:
        row = session.get(MealTemplateORM, meal_id)
        if row is None:
            return None
        return _to_model(row)


def find_meal_template_by_name(database: Database, name: str) -> Optional[MealTemplate]:
    """Return the template whose name equals ``name`` ignoring case, if any."""

    with database.session_scope() as session:
        row = _find_by_name(session, name)
        if row is None:
            return None
        return _to_model(row)


def _find_by_name(session: Session, name: str) -> Optional[MealTemplateORM]:
    return (
        session.execute(
            select(MealTemplateORM)
            .where(func.lower(MealTemplateORM.name) == name.strip().lower())
            .order_by(MealTemplateORM.id.asc())
            .limit(1)
        )
        .scalars()
        .first()
    )


def create_meal_template(
    database: Database,
    *,
    name: str,
    description: Optional[str] = None,
    tags: Optional[Sequence[str]] = None,
    ingredients: Optional[Iterable[Ingredient | dict]] = None,
) -> MealTemplate:
    clean_name = name.strip()
    with database.session_scope() as session:
        _ensure_unique_name(session, clean_name)
        row = MealTemplateORM(
            name=clean_name,
            description=_clean_description(description),
            tags=list(tags or []),
            ingredients=_dump_ingredients(ingredients or []),
        )
        session.add(row)
        session.flush()
        session.refresh(row)
        logger.info("Created meal template id=%s name=%s", row.id, row.name)
        return _to_model(row)


def update_meal_template(
    database: Database,
    meal_id: int,
    *,
    name: str | object = _UNSET,
    description: str | None | object = _UNSET,
    tags: Sequence[str] | None | object = _UNSET,
    ingredients: Iterable[Ingredient | dict] | None | object = _UNSET,
) -> MealTemplate:
    with database.session_scope() as session:
        row = session.get(MealTemplateORM, meal_id)
        if row is None:
            raise NotFoundError(f"Meal {meal_id} not found")

        if name is not _UNSET:
            clean_name = str(name).strip()
            _ensure_unique_name(session, clean_name, exclude_id=meal_id)
            row.name = clean_name
        if description is not _UNSET:
            row.description = _clean_description(description)  # type: ignore[arg-type]
        if tags is not _UNSET:
            row.tags = list(tags or [])  # type: ignore[arg-type]
        if ingredients is not _UNSET:
            row.ingredients = _dump_ingredients(ingredients or [])  # type: ignore[arg-type]

        session.flush()
        session.refresh(row)
        return _to_model(row)


def upsert_meal_template(
    database: Database,
    *,
    name: str,
    description: Optional[str] = None,
    tags: Optional[Sequence[str]] = None,
    ingredients: Optional[Iterable[Ingredient | dict]] = None,
) -> MealTemplate:
    """Create a template or overwrite the one with the same name (case-insensitive)."""

    clean_name = name.strip()
    with database.session_scope() as session:
        row = _find_by_name(session, clean_name)
        if row is None:
            row = MealTemplateORM(name=clean_name)
            session.add(row)
        row.description = _clean_description(description)
        row.tags = list(tags or [])
        row.ingredients = _dump_ingredients(ingredients or [])
        session.flush()
        session.refresh(row)
        return _to_model(row)


def delete_meal_template(database: Database, meal_id: int) -> None:
    """Delete a template and unlink any dinner events that referenced it."""

    with database.session_scope() as session:
        row = session.get(MealTemplateORM, meal_id)
        if row is None:
            raise NotFoundError(f"Meal {meal_id} not found")
        session.execute(
            update(DinnerEventORM)
            .where(DinnerEventORM.meal_template_id == meal_id)
            .values(meal_template_id=None)
        )
        session.delete(row)
        logger.info("Deleted meal template id=%s name=%s", meal_id, row.name)


__all__ = [
    "list_meal_templates",
    "get_meal_template",
    "find_meal_template_by_name",
    "create_meal_template",
    "update_meal_template",
    "upsert_meal_template",
    "delete_meal_template",
]

"""Pantry persistence helpers."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from dinnerboard.errors import ConflictError, NotFoundError
from dinnerboard.models.catalog import PantryItem

from .models import PantryItemORM
from .repository import Database

_UNSET = object()


def _normalize(value: str) -> str:
    return value.strip().lower()


def _to_model(row: PantryItemORM) -> PantryItem:
    return PantryItem.model_validate(
        {
            "id": row.id,
            "name": row.name,
            "category": row.category,
            "always_on_hand": row.always_on_hand,
            "created_at": row.created_at,
        }
    )


def _ensure_unique_name(session: Session, name: str, exclude_id: Optional[int] = None) -> None:
    query = select(PantryItemORM.id).where(PantryItemORM.name == name)
    if exclude_id is not None:
        query = query.where(PantryItemORM.id != exclude_id)
    if session.execute(query.limit(1)).first() is not None:
        raise ConflictError(f"A pantry item named '{name}' already exists")


def list_pantry_items(
    database: Database, *, always_on_hand: Optional[bool] = None
) -> List[PantryItem]:
    """Return pantry items ordered by category then name."""

    with database.session_scope() as session:
        query = select(PantryItemORM).order_by(
            PantryItemORM.category.asc(), PantryItemORM.name.asc()
        )
        if always_on_hand is not None:
            query = query.where(PantryItemORM.always_on_hand.is_(always_on_hand))
        rows = session.execute(query).scalars().all()
        return [_to_model(row) for row in rows]


def pantry_staple_names(database: Database) -> set[str]:
    """Lowercase names of every always-on-hand pantry item."""

    return {item.name.lower() for item in list_pantry_items(database, always_on_hand=True)}


def create_pantry_item(
    database: Database,
    *,
    name: str,
    category: str,
    always_on_hand: bool = True,
) -> PantryItem:
    clean_name = _normalize(name)
    with database.session_scope() as session:
        _ensure_unique_name(session, clean_name)
        row = PantryItemORM(
            name=clean_name,
            category=_normalize(category),
            always_on_hand=bool(always_on_hand),
        )
        session.add(row)
        session.flush()
        session.refresh(row)
        return _to_model(row)


def update_pantry_item(
    database: Database,
    item_id: int,
    *,
    name: str | object = _UNSET,
    category: str | object = _UNSET,
    always_on_hand: bool | object = _UNSET,
) -> PantryItem:
    with database.session_scope() as session:
        row = session.get(PantryItemORM, item_id)
        if row is None:
            raise NotFoundError(f"Pantry item {item_id} not found")

        if name is not _UNSET:
            clean_name = _normalize(str(name))
            _ensure_unique_name(session, clean_name, exclude_id=item_id)
            row.name = clean_name
        if category is not _UNSET:
            row.category = _normalize(str(category))
        if always_on_hand is not _UNSET:
            row.always_on_hand = bool(always_on_hand)

        session.flush()
        return _to_model(row)


def upsert_pantry_item(
    database: Database,
    *,
    name: str,
    category: str,
    always_on_hand: bool = True,
) -> PantryItem:
    clean_name = _normalize(name)
    with database.session_scope() as session:
        row = session.execute(
            select(PantryItemORM).where(PantryItemORM.name == clean_name)
        ).scalar_one_or_none()
        if row is None:
            row = PantryItemORM(name=clean_name)
            session.add(row)
        row.category = _normalize(category)
        row.always_on_hand = bool(always_on_hand)
        session.flush()
        session.refresh(row)
        return _to_model(row)


def delete_pantry_item(database: Database, item_id: int) -> None:
    with database.session_scope() as session:
        row = session.get(PantryItemORM, item_id)
        if row is None:
            raise NotFoundError(f"Pantry item {item_id} not found")
        session.delete(row)


__all__ = [
    "list_pantry_items",
    "pantry_staple_names",
    "create_pantry_item",
    "update_pantry_item",
    "upsert_pantry_item",
    "delete_pantry_item",
]

"""Grocery list persistence and single-active-list lifecycle."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from dinnerboard.models.grocery import GroceryItemDraft, GroceryList, GroceryListItem

from .models import GroceryListItemORM, GroceryListORM
from .repository import Database

logger = logging.getLogger(__name__)


def _item_to_model(row: GroceryListItemORM) -> GroceryListItem:
    return GroceryListItem.model_validate(
        {
            "id": row.id,
            "list_id": row.list_id,
            "name": row.name,
            "category": row.category,
            "from_meals": list(row.from_meals or []),
            "is_checked": row.is_checked,
        }
    )


def _to_model(row: GroceryListORM, *, sort_items: bool = False) -> GroceryList:
    items = list(row.items)
    if sort_items:
        items.sort(key=lambda item: (item.category, item.name))
    return GroceryList.model_validate(
        {
            "id": row.id,
            "start_date": row.start_date,
            "end_date": row.end_date,
            "is_active": row.is_active,
            "created_at": row.created_at,
            "items": [_item_to_model(item) for item in items],
        }
    )


def activate_grocery_list(
    database: Database,
    start: date,
    end: date,
    items: Iterable[GroceryItemDraft],
) -> GroceryList:
    """Deactivate every active list and store ``items`` as the new active list.

    Both steps share one transaction under the database write lock, so readers see
    either the previous active list or the new one and a failed insert leaves the
    previous list active.
    """

    drafts = list(items)
    with database.write_lock, database.session_scope() as session:
        deactivated = session.execute(
            update(GroceryListORM)
            .where(GroceryListORM.is_active.is_(True))
            .values(is_active=False)
        ).rowcount
        row = GroceryListORM(start_date=start, end_date=end, is_active=True)
        row.items = [
            GroceryListItemORM(
                position=position,
                name=draft.name,
                category=draft.category,
                from_meals=list(draft.from_meals),
                is_checked=draft.is_checked,
            )
            for position, draft in enumerate(drafts)
        ]
        session.add(row)
        session.flush()
        session.refresh(row)
        logger.info(
            "Activated grocery list id=%s window=%s..%s items=%s deactivated=%s",
            row.id,
            start,
            end,
            len(drafts),
            deactivated,
        )
        return _to_model(row)


def get_active_grocery_list(database: Database) -> Optional[GroceryList]:
    """Return the active list with items ordered by category then name."""

    with database.write_lock, database.session_scope() as session:
        row = (
            session.execute(
                select(GroceryListORM)
                .where(GroceryListORM.is_active.is_(True))
                .options(selectinload(GroceryListORM.items))
                .order_by(GroceryListORM.id.desc())
                .limit(1)
            )
            .scalars()
            .first()
        )
        if row is None:
            return None
        return _to_model(row, sort_items=True)


def list_grocery_lists(database: Database, limit: int = 20) -> List[GroceryList]:
    """Return generated lists newest first, including deactivated history."""

    with database.session_scope() as session:
        rows = (
            session.execute(
                select(GroceryListORM)
                .options(selectinload(GroceryListORM.items))
                .order_by(GroceryListORM.id.desc())
                .limit(limit)
            )
            .scalars()
            .all()
        )
        return [_to_model(row, sort_items=True) for row in rows]


def get_grocery_item(database: Database, item_id: int) -> Optional[GroceryListItem]:
    with database.session_scope() as session:
        row = session.get(GroceryListItemORM, item_id)
        if row is None:
            return None
        return _item_to_model(row)


def set_grocery_item_checked(
    database: Database, item_id: int, value: bool
) -> Optional[GroceryListItem]:
    with database.session_scope() as session:
        row = session.get(GroceryListItemORM, item_id)
        if row is None:
            return None
        row.is_checked = bool(value)
        session.flush()
        return _item_to_model(row)


def toggle_grocery_item(database: Database, item_id: int) -> Optional[GroceryListItem]:
    """Flip ``is_checked`` on an item; ``None`` when the item does not exist."""

    with database.session_scope() as session:
        row = session.get(GroceryListItemORM, item_id)
        if row is None:
            logger.debug("Toggle requested for missing grocery item %s", item_id)
            return None
        row.is_checked = not row.is_checked
        session.flush()
        return _item_to_model(row)


__all__ = [
    "activate_grocery_list",
    "get_active_grocery_list",
    "list_grocery_lists",
    "get_grocery_item",
    "set_grocery_item_checked",
    "toggle_grocery_item",
]

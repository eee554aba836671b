"""Import meal templates from a recipe CSV export and install default pantry staples."""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from dinnerboard.db.meals import upsert_meal_template
from dinnerboard.db.pantry import upsert_pantry_item
from dinnerboard.db.repository import Database
from dinnerboard.models.catalog import Ingredient

logger = logging.getLogger(__name__)

HEADER_PREFIX = "Recipe Name,"
DEFAULT_MEAL_CATEGORY = "Dinner Ideas"
MISSING_URL_MARKERS = {"", "—", "-"}

_CATEGORY_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    (
        "meat",
        re.compile(
            r"fish|halibut|salmon|shrimp|chicken|beef|pork|sirloin|steak|bacon|sausage|turkey"
            r"|cod|tilapia|mussels|ribs|andouille|pepperoni|ham|roast beef|deli meat|hot dog"
        ),
    ),
    (
        "dairy",
        re.compile(
            r"cheese|butter|cream|milk|sour cream|yogurt|ricotta|mozzarella|parmesan|feta"
            r"|mascarpone|goat cheese|provolone|cheddar|asiago|romano|monterey"
        ),
    ),
    (
        "produce",
        re.compile(
            r"tomato|onion|pepper|garlic|lime|lemon|avocado|cilantro|parsley|cucumber|jalape"
            r"|cabbage|mushroom|zucchini|lettuce|spinach|broccoli|carrot|celery|basil|mint|dill"
            r"|rosemary|thyme|asparagus|squash|potato|beet|peach|apple|strawberr|kale|snap peas"
            r"|edamame|corn|brussels|ginger"
        ),
    ),
    ("frozen", re.compile(r"frozen|ice cream")),
    ("bakery", re.compile(r"bread|baguette|roll|bun|pita|flatbread|pizza dough|ciabatta")),
]

DEFAULT_PANTRY_STAPLES = [
    ("salt", "pantry"),
    ("black pepper", "pantry"),
    ("olive oil", "pantry"),
    ("garlic", "produce"),
    ("butter", "dairy"),
]


@dataclass
class SeedMeal:
    name: str
    description: str
    tags: List[str] = field(default_factory=list)
    ingredients: List[Ingredient] = field(default_factory=list)


@dataclass
class SeedReport:
    meals: int = 0
    pantry_items: int = 0


def guess_category(ingredient: str) -> str:
    """Best-effort store category for an ingredient name; ``pantry`` when unknown."""

    lowered = ingredient.lower()
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(lowered):
            return category
    return "pantry"


def _split_pipe(value: str) -> list[str]:
    return [part.strip() for part in value.split("|") if part.strip()]


def parse_meal_rows(lines: Iterable[str]) -> Iterator[SeedMeal]:
    """Yield meals from CSV lines that follow the ``Recipe Name,`` header row."""

    started = False
    data_lines: list[str] = []
    for line in lines:
        if not line.strip():
            continue
        if not started:
            started = line.startswith(HEADER_PREFIX)
            continue
        data_lines.append(line)

    for columns in csv.reader(data_lines, skipinitialspace=True):
        if len(columns) < 4:
            continue
        columns = [column.strip() for column in columns]
        name = columns[0]
        if not name:
            continue

        category = columns[1] or DEFAULT_MEAL_CATEGORY
        recipe_url = columns[2]
        description = category
        if recipe_url not in MISSING_URL_MARKERS:
            description = f"{category} - {recipe_url}"

        yield SeedMeal(
            name=name,
            description=description,
            tags=_split_pipe(columns[4]) if len(columns) > 4 else [],
            ingredients=[
                Ingredient(name=ingredient, category=guess_category(ingredient))
                for ingredient in _split_pipe(columns[3])
            ],
        )


def seed_database(
    database: Database,
    csv_path: Optional[Path] = None,
    *,
    include_pantry_staples: bool = True,
) -> SeedReport:
    """Upsert meals from ``csv_path`` (when given) and the default pantry staples."""

    report = SeedReport()
    if csv_path is not None:
        with Path(csv_path).open("r", encoding="utf-8") as handle:
            for meal in parse_meal_rows(handle):
                upsert_meal_template(
                    database,
                    name=meal.name,
                    description=meal.description,
                    tags=meal.tags,
                    ingredients=meal.ingredients,
                )
                report.meals += 1
                logger.info(
                    "Imported meal %s (%s ingredients, %s tags)",
                    meal.name,
                    len(meal.ingredients),
                    len(meal.tags),
                )

    if include_pantry_staples:
        for name, category in DEFAULT_PANTRY_STAPLES:
            upsert_pantry_item(database, name=name, category=category, always_on_hand=True)
            report.pantry_items += 1

    logger.info("Seed complete meals=%s pantry_items=%s", report.meals, report.pantry_items)
    return report


__all__ = [
    "DEFAULT_PANTRY_STAPLES",
    "SeedMeal",
    "SeedReport",
    "guess_category",
    "parse_meal_rows",
    "seed_database",
]

"""Recipe catalog: load recipe notes from markdown frontmatter and serve searches."""

from __future__ import annotations

import logging
import re
from pathlib import Path

import frontmatter
import yaml

from meal_prep.collaborators import CandidateFilters
from meal_prep.models import Ingredient, Recipe

logger = logging.getLogger(__name__)


def normalize_time(raw: str | int | float | None) -> int:
    """Parse varied time formats into integer minutes (0 when unknown).

    Handles: "10 minutes", "5 mins", 15, "1 hour 30 minutes", "" -> 0.
    """
    if raw is None:
        return 0
    if isinstance(raw, (int, float)):
        return int(raw) if raw > 0 else 0

    s = str(raw).strip()
    total = 0

    m = re.search(r"(\d+)\s*(?:hours?|hrs?|h)\b", s, re.IGNORECASE)
    if m:
        total += int(m.group(1)) * 60

    m = re.search(r"(\d+)\s*(?:minutes?|mins?|m)\b", s, re.IGNORECASE)
    if m:
        total += int(m.group(1))

    if total > 0:
        return total

    m = re.match(r"(\d+)$", s)
    if m:
        return int(m.group(1))

    return 0


def _to_float(val: object) -> float:
    if val is None or val == "":
        return 0.0
    try:
        return float(val)
    except (ValueError, TypeError):
        return 0.0


def _to_str_set(val: object) -> frozenset[str]:
    if not val:
        return frozenset()
    if isinstance(val, str):
        val = val.split(",")
    return frozenset(str(v).strip().lower() for v in val if str(v).strip())


def _parse_ingredients(raw: object) -> tuple[Ingredient, ...]:
    if not isinstance(raw, list):
        return ()
    items = []
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("name"):
            continue
        items.append(
            Ingredient(
                name=str(entry["name"]),
                amount=entry.get("amount", ""),
                unit=str(entry.get("unit") or ""),
            )
        )
    return tuple(items)


def parse_recipe_file(file_path: Path) -> Recipe | None:
    """Parse one recipe note; returns None for non-recipe or unreadable files."""
    try:
        post = frontmatter.load(file_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning("Could not read %s: %s", file_path.name, e)
        return None

    meta = post.metadata
    if meta.get("type") != "recipe":
        return None

    servings = int(_to_float(meta.get("servings"))) or 1

    return Recipe(
        id=str(meta.get("id") or file_path.stem),
        name=str(meta.get("name") or file_path.stem),
        calories_kcal=_to_float(meta.get("calories")),
        protein_grams=_to_float(meta.get("protein_g")),
        carbs_grams=_to_float(meta.get("carbs_g")),
        fat_grams=_to_float(meta.get("fat_g")),
        prep_time_minutes=normalize_time(meta.get("prep_time")),
        cook_time_minutes=normalize_time(meta.get("cook_time")),
        servings=servings,
        meal_types=_to_str_set(meta.get("meal_types") or meta.get("meal_type")),
        ingredients=_parse_ingredients(meta.get("ingredients")),
        dietary_tags=_to_str_set(meta.get("dietary_tags")),
        description=post.content.strip(),
    )


def discover_recipe_files(recipes_path: Path) -> list[Path]:
    """Find all .md files in the recipe directory."""
    return sorted(recipes_path.glob("*.md"))


def load_recipes(recipes_path: Path) -> list[Recipe]:
    recipes = []
    for f in discover_recipe_files(recipes_path):
        r = parse_recipe_file(f)
        if r:
            recipes.append(r)
    logger.info("Loaded %d recipes from %s", len(recipes), recipes_path)
    return recipes


def matches_filters(recipe: Recipe, filters: CandidateFilters) -> bool:
    if filters.meal_type and filters.meal_type.lower() not in {
        m.lower() for m in recipe.meal_types
    }:
        return False
    if filters.dietary_tags and not recipe.has_dietary_tags(filters.dietary_tags):
        return False
    if filters.calorie_range is not None:
        low, high = filters.calorie_range
        if not low <= recipe.calories_kcal <= high:
            return False
    if filters.max_prep_time is not None and recipe.prep_time_minutes > filters.max_prep_time:
        return False
    return True


class InMemoryRecipeProvider:
    """Recipe candidate provider over a fixed list, in catalog order."""

    def __init__(self, recipes: list[Recipe]):
        self._recipes = tuple(recipes)

    @classmethod
    def from_directory(cls, recipes_path: Path) -> InMemoryRecipeProvider:
        return cls(load_recipes(recipes_path))

    def search(self, filters: CandidateFilters) -> list[Recipe]:
        result = [r for r in self._recipes if matches_filters(r, filters)]
        return result[: filters.limit]

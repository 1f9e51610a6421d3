"""Shopping list consolidation across every meal in a plan."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from meal_prep.models import MealSlot, ShoppingListItem
from meal_prep.units import (
    Unparseable,
    amount_value,
    format_amount,
    normalize_name,
    normalize_unit,
    parse_amount,
)

logger = logging.getLogger(__name__)


@dataclass
class _Group:
    ingredient: str
    unit: str
    total: float = 0.0
    recipes: dict[str, None] = field(default_factory=dict)


def consolidate_ingredients(slots: Iterable[MealSlot]) -> tuple[ShoppingListItem, ...]:
    """Merge ingredient usage across all slots into a shopping list.

    Every slot counts, so a recipe served twice contributes its ingredients
    twice. Items are keyed by (name, unit) after trimming and case-folding;
    the first-seen spelling of each is what gets displayed. Items and their
    contributing recipe names keep first-seen order.
    """
    groups: dict[tuple[str, str], _Group] = {}

    for slot in slots:
        recipe = slot.recipe
        if recipe is None:
            continue
        for ing in recipe.ingredients:
            name_key = normalize_name(ing.name)
            if not name_key:
                logger.debug("Skipping unnamed ingredient in %s", recipe.name)
                continue

            key = (name_key, normalize_unit(ing.unit))
            group = groups.get(key)
            if group is None:
                group = _Group(
                    ingredient=ing.name.strip(),
                    unit=(ing.unit or "").strip(),
                )
                groups[key] = group

            parsed = parse_amount(ing.amount)
            if isinstance(parsed, Unparseable):
                logger.debug(
                    "Unparseable amount %r for %s in %s; counting as zero",
                    parsed.raw,
                    ing.name,
                    recipe.name,
                )
            group.total += amount_value(parsed)
            group.recipes.setdefault(recipe.name, None)

    return tuple(
        ShoppingListItem(
            ingredient=g.ingredient,
            total_amount=format_amount(g.total),
            unit=g.unit,
            used_in_recipes=tuple(g.recipes),
        )
        for g in groups.values()
    )

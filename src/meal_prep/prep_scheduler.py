"""Start-of-week prep schedule built from a consolidated shopping list."""

from __future__ import annotations

from meal_prep.categories import CATEGORY_ORDER, IngredientCategory, classify_ingredient
from meal_prep.config import DEFAULTS
from meal_prep.models import PrepStep, ShoppingListItem

PREP_ACTIONS: dict[IngredientCategory, str] = {
    IngredientCategory.VEGETABLE: (
        "Wash and chop vegetables: {items}. Chop, dice, or slice as needed for recipes."
    ),
    IngredientCategory.PROTEIN: (
        "Prepare proteins: {items}. Trim, portion, and marinate if needed."
    ),
    IngredientCategory.GRAIN: (
        "Cook grains and legumes: {items}. Cook according to package directions "
        "and store in portions."
    ),
    IngredientCategory.DAIRY: (
        "Portion dairy: {items}. Divide into containers sized for each meal."
    ),
    IngredientCategory.OTHER: (
        "Measure out remaining ingredients: {items}. Group them by recipe."
    ),
}

CLEANUP_INSTRUCTION = (
    "Label and store all prepped ingredients according to storage instructions. "
    "Clean prep area and wash containers."
)


def group_by_category(
    shopping_list: tuple[ShoppingListItem, ...] | list[ShoppingListItem],
) -> dict[IngredientCategory, list[ShoppingListItem]]:
    """Partition items by category, keeping list order within each category."""
    groups: dict[IngredientCategory, list[ShoppingListItem]] = {
        c: [] for c in CATEGORY_ORDER
    }
    for item in shopping_list:
        groups[classify_ingredient(item.ingredient)].append(item)
    return groups


def estimate_minutes(category: IngredientCategory, item_count: int, prep_config: dict) -> int:
    timing = prep_config[category.value]
    return max(int(timing["base_minutes"]), int(timing["per_item_minutes"]) * item_count, 1)


def build_prep_steps(
    shopping_list: tuple[ShoppingListItem, ...] | list[ShoppingListItem],
    config: dict | None = None,
) -> tuple[PrepStep, ...]:
    """One step per non-empty category in priority order, then a cleanup step.

    The cleanup step is always present, so an empty shopping list still
    yields a single-step schedule.
    """
    prep_config = (config or DEFAULTS)["prep"]
    steps: list[PrepStep] = []

    for category, items in group_by_category(shopping_list).items():
        if not items:
            continue
        names = tuple(i.ingredient for i in items)
        steps.append(
            PrepStep(
                step=len(steps) + 1,
                instruction=PREP_ACTIONS[category].format(items=", ".join(names)),
                estimated_time=estimate_minutes(category, len(items), prep_config),
                ingredients=names,
            )
        )

    steps.append(
        PrepStep(
            step=len(steps) + 1,
            instruction=CLEANUP_INSTRUCTION,
            estimated_time=max(int(prep_config["cleanup_minutes"]), 1),
        )
    )
    return tuple(steps)

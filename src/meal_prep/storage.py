"""Storage guidance per shopping list item, keyed by ingredient category."""

from __future__ import annotations

from meal_prep.categories import IngredientCategory, classify_ingredient
from meal_prep.models import ShoppingListItem, StorageInstruction

# category -> (method, duration)
STORAGE_RULES: dict[IngredientCategory, tuple[str, str]] = {
    IngredientCategory.VEGETABLE: ("Refrigerate in airtight containers", "3-5 days"),
    IngredientCategory.PROTEIN: (
        "Refrigerate (cooked) or freeze (raw portions)",
        "3-4 days refrigerated, 3 months frozen",
    ),
    IngredientCategory.GRAIN: ("Refrigerate in sealed containers once cooked", "5-7 days"),
    IngredientCategory.DAIRY: ("Refrigerate", "Use by expiration date"),
}

PANTRY_RULE = (
    "Store in pantry or refrigerate as appropriate",
    "Follow package instructions",
)


def storage_for(ingredient: str) -> StorageInstruction:
    method, duration = STORAGE_RULES.get(classify_ingredient(ingredient), PANTRY_RULE)
    return StorageInstruction(ingredient=ingredient, method=method, duration=duration)


def build_storage_instructions(
    shopping_list: tuple[ShoppingListItem, ...] | list[ShoppingListItem],
) -> tuple[StorageInstruction, ...]:
    """One instruction per item, in shopping list order."""
    return tuple(storage_for(item.ingredient) for item in shopping_list)

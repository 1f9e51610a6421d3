"""Ingredient category classification by ordered keyword containment."""

from __future__ import annotations

from enum import Enum


class IngredientCategory(Enum):
    VEGETABLE = "vegetable"
    PROTEIN = "protein"
    GRAIN = "grain"
    DAIRY = "dairy"
    OTHER = "other"


# Evaluated top to bottom; the first category with a keyword contained in the
# lower-cased ingredient name wins.
CATEGORY_KEYWORDS: tuple[tuple[IngredientCategory, tuple[str, ...]], ...] = (
    (
        IngredientCategory.VEGETABLE,
        (
            "tomato",
            "onion",
            "garlic",
            "carrot",
            "celery",
            "bell pepper",
            "broccoli",
            "spinach",
            "lettuce",
            "cucumber",
            "zucchini",
            "asparagus",
            "mushroom",
            "kale",
            "cabbage",
            "cauliflower",
            "sweet potato",
            "eggplant",
            "green bean",
            "brussels sprout",
        ),
    ),
    (
        IngredientCategory.PROTEIN,
        (
            "chicken",
            "beef",
            "pork",
            "fish",
            "salmon",
            "tuna",
            "turkey",
            "shrimp",
            "tofu",
            "tempeh",
            "eggs",
            "egg white",
            "beans",
            "lentils",
            "chickpeas",
        ),
    ),
    (
        IngredientCategory.GRAIN,
        (
            "rice",
            "quinoa",
            "oats",
            "oatmeal",
            "pasta",
            "bread",
            "barley",
            "bulgur",
            "farro",
            "couscous",
            "noodle",
            "tortilla",
        ),
    ),
    (
        IngredientCategory.DAIRY,
        (
            "milk",
            "cheese",
            "yogurt",
            "butter",
            "cream",
            "kefir",
            "ghee",
        ),
    ),
)

CATEGORY_ORDER: tuple[IngredientCategory, ...] = tuple(
    c for c, _ in CATEGORY_KEYWORDS
) + (IngredientCategory.OTHER,)


def classify_ingredient(name: str | None) -> IngredientCategory:
    """Classify an ingredient name; empty or unmatched names are OTHER."""
    if not name:
        return IngredientCategory.OTHER
    name_lower = name.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        for kw in keywords:
            if kw in name_lower:
                return category
    return IngredientCategory.OTHER

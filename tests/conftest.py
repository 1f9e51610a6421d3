import copy

import pytest
from meal_prep.config import DEFAULTS
from meal_prep.models import Ingredient, Recipe


def make_recipe(
    name: str,
    meal_types: list[str],
    calories: float = 600,
    protein: float = 35,
    ingredients: list[tuple[str, object, str]] | None = None,
    tags: list[str] | None = None,
    prep_time: int = 10,
) -> Recipe:
    return Recipe(
        id=name.lower().replace(" ", "-"),
        name=name,
        calories_kcal=calories,
        protein_grams=protein,
        carbs_grams=60,
        fat_grams=20,
        prep_time_minutes=prep_time,
        cook_time_minutes=15,
        servings=1,
        meal_types=frozenset(meal_types),
        ingredients=tuple(Ingredient(n, a, u) for n, a, u in (ingredients or [])),
        dietary_tags=frozenset(tags or []),
    )


def make_config(**planning_overrides) -> dict:
    """Defaults with a short solver work limit and optional planning overrides."""
    config = copy.deepcopy(DEFAULTS)
    config["planning"]["solver"]["max_deterministic_time"] = 2.0
    for k, v in planning_overrides.items():
        config["planning"][k] = v
    return config


@pytest.fixture
def sample_recipes() -> list[Recipe]:
    """Three recipes per meal type, all at 600 kcal / 35 g protein."""
    return [
        # Breakfasts
        make_recipe("Blueberry Oat Bowl", ["breakfast"], ingredients=[
            ("Blueberries", "100", "g"),
            ("Almond Milk", "250", "ml"),
            ("Rolled Oats", "50", "g"),
        ]),
        make_recipe("Berry Smoothie", ["breakfast"], ingredients=[
            ("Blueberries", "150", "g"),
            ("Almond Milk", "300", "ml"),
        ]),
        make_recipe("Spinach Egg Scramble", ["breakfast"], ingredients=[
            ("Eggs", "3", ""),
            ("Spinach", "40", "g"),
        ]),
        # Lunches
        make_recipe("Chicken Rice Bowl", ["lunch"], ingredients=[
            ("Chicken Breast", "150", "g"),
            ("Brown Rice", "80", "g"),
            ("Broccoli", "100", "g"),
        ]),
        make_recipe("Lentil Soup", ["lunch"], tags=["vegan"], ingredients=[
            ("Lentils", "90", "g"),
            ("Carrot", "1", ""),
            ("Onion", "1", ""),
        ]),
        make_recipe("Tuna Salad", ["lunch"], ingredients=[
            ("Tuna", "120", "g"),
            ("Lettuce", "1", "head"),
        ]),
        # Dinners
        make_recipe("Salmon Quinoa", ["dinner"], ingredients=[
            ("Salmon Fillet", "180", "g"),
            ("Quinoa", "70", "g"),
            ("Asparagus", "100", "g"),
        ]),
        make_recipe("Beef Stir Fry", ["dinner"], ingredients=[
            ("Beef Strips", "160", "g"),
            ("Bell Pepper", "1", ""),
            ("Brown Rice", "80", "g"),
        ]),
        make_recipe("Tofu Curry", ["dinner"], tags=["vegan"], ingredients=[
            ("Tofu", "200", "g"),
            ("Coconut Cream", "100", "ml"),
            ("Brown Rice", "80", "g"),
        ]),
        # Snacks
        make_recipe("Greek Yogurt Cup", ["snack"], calories=200, protein=15, ingredients=[
            ("Greek Yogurt", "170", "g"),
        ]),
        make_recipe("Trail Mix", ["snack"], calories=200, protein=6, tags=["vegan"], ingredients=[
            ("Mixed Nuts", "30", "g"),
        ]),
        make_recipe("Apple Slices", ["snack"], calories=200, protein=1, tags=["vegan"]),
    ]

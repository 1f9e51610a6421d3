"""Shared data models for meal plan assembly and meal prep."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class MealType(Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class Ingredient:
    name: str
    amount: str | float | int | None = ""
    unit: str = ""


@dataclass(frozen=True)
class Recipe:
    id: str
    name: str
    calories_kcal: float = 0.0
    protein_grams: float = 0.0
    carbs_grams: float = 0.0
    fat_grams: float = 0.0
    prep_time_minutes: int = 0
    cook_time_minutes: int = 0
    servings: int = 1
    meal_types: frozenset[str] = frozenset()
    ingredients: tuple[Ingredient, ...] = ()
    dietary_tags: frozenset[str] = frozenset()
    description: str = ""

    def has_meal_type(self, meal_type: MealType) -> bool:
        return meal_type.value in {m.lower() for m in self.meal_types}

    def has_dietary_tags(self, required: frozenset[str]) -> bool:
        tags = {t.lower() for t in self.dietary_tags}
        return all(t.lower() in tags for t in required)


@dataclass(frozen=True)
class MealSlot:
    day: int  # 1-indexed day of the plan
    meal_number: int  # 1-indexed position within the day
    meal_type: MealType
    recipe: Recipe | None = None


@dataclass(frozen=True)
class MealPlanRequest:
    days: int
    meals_per_day: int
    daily_calorie_target: float | None
    fitness_goal: str = "maintenance"
    dietary_tags: frozenset[str] = frozenset()
    generate_meal_prep: bool = True
    plan_name: str = ""
    client_name: str | None = None
    description: str | None = None
    # Recipes with a longer prep time are never selected
    max_prep_time: int | None = None
    # Soft cap on distinct ingredients across the whole plan
    max_ingredients: int | None = None

    @property
    def slot_count(self) -> int:
        return self.days * self.meals_per_day


@dataclass(frozen=True)
class ShoppingListItem:
    ingredient: str
    total_amount: str
    unit: str
    used_in_recipes: tuple[str, ...] = ()


@dataclass(frozen=True)
class PrepStep:
    step: int
    instruction: str
    estimated_time: int
    ingredients: tuple[str, ...] = ()


@dataclass(frozen=True)
class StorageInstruction:
    ingredient: str
    method: str
    duration: str


@dataclass(frozen=True)
class MealPrepPlan:
    shopping_list: tuple[ShoppingListItem, ...] = ()
    prep_instructions: tuple[PrepStep, ...] = ()
    storage_instructions: tuple[StorageInstruction, ...] = ()

    @property
    def total_prep_time(self) -> int:
        return sum(s.estimated_time for s in self.prep_instructions)


@dataclass(frozen=True)
class DayDiagnostic:
    """How far one day's assembled meals land from the calorie target."""

    day: int
    calories: float
    target: float

    @property
    def deviation(self) -> float:
        return self.calories - self.target


@dataclass(frozen=True)
class MealPlan:
    meals: tuple[MealSlot, ...]
    days: int
    meals_per_day: int
    daily_calorie_target: float
    fitness_goal: str = "maintenance"
    plan_name: str = ""
    client_name: str | None = None
    description: str | None = None
    start_of_week_meal_prep: MealPrepPlan | None = None
    diagnostics: tuple[DayDiagnostic, ...] = field(default_factory=tuple)

    def meals_for_day(self, day: int) -> list[MealSlot]:
        return [m for m in self.meals if m.day == day]

    def day_calories(self, day: int) -> float:
        return sum(m.recipe.calories_kcal for m in self.meals_for_day(day) if m.recipe)

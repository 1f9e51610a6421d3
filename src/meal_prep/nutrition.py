"""Nutrition totals for an assembled meal plan."""

from __future__ import annotations

from dataclasses import dataclass

from meal_prep.models import MealPlan


@dataclass(frozen=True)
class Macros:
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0

    def __add__(self, other: Macros) -> Macros:
        return Macros(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
        )


@dataclass(frozen=True)
class PlanNutrition:
    total: Macros
    daily: tuple[tuple[int, Macros], ...]
    average_daily: Macros


def calculate_plan_nutrition(plan: MealPlan) -> PlanNutrition:
    """Sum macros per day and across the plan; averages are rounded to whole units."""
    daily = []
    total = Macros()
    for day in range(1, plan.days + 1):
        day_macros = Macros()
        for slot in plan.meals_for_day(day):
            if slot.recipe is None:
                continue
            r = slot.recipe
            day_macros += Macros(r.calories_kcal, r.protein_grams, r.carbs_grams, r.fat_grams)
        daily.append((day, day_macros))
        total += day_macros

    days = max(plan.days, 1)
    average = Macros(
        calories=round(total.calories / days),
        protein=round(total.protein / days),
        carbs=round(total.carbs / days),
        fat=round(total.fat / days),
    )
    return PlanNutrition(total=total, daily=tuple(daily), average_daily=average)

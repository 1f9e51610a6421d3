"""Serialize a meal plan for persistence, document export, and the CLI."""

from __future__ import annotations

import json
from datetime import datetime

from meal_prep.models import MealPlan, MealPrepPlan, Recipe
from meal_prep.nutrition import calculate_plan_nutrition


def _number(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value


def recipe_to_dict(recipe: Recipe) -> dict:
    return {
        "id": recipe.id,
        "name": recipe.name,
        "description": recipe.description,
        "caloriesKcal": _number(recipe.calories_kcal),
        "proteinGrams": _number(recipe.protein_grams),
        "carbsGrams": _number(recipe.carbs_grams),
        "fatGrams": _number(recipe.fat_grams),
        "prepTimeMinutes": recipe.prep_time_minutes,
        "cookTimeMinutes": recipe.cook_time_minutes,
        "servings": recipe.servings,
        "mealTypes": sorted(recipe.meal_types),
        "dietaryTags": sorted(recipe.dietary_tags),
        "ingredientsJson": [
            {"name": i.name, "amount": i.amount, "unit": i.unit}
            for i in recipe.ingredients
        ],
    }


def meal_prep_to_dict(prep: MealPrepPlan) -> dict:
    return {
        "totalPrepTime": prep.total_prep_time,
        "shoppingList": [
            {
                "ingredient": item.ingredient,
                "totalAmount": item.total_amount,
                "unit": item.unit,
                "usedInRecipes": list(item.used_in_recipes),
            }
            for item in prep.shopping_list
        ],
        "prepInstructions": [
            {
                "step": s.step,
                "instruction": s.instruction,
                "estimatedTime": s.estimated_time,
                "ingredients": list(s.ingredients),
            }
            for s in prep.prep_instructions
        ],
        "storageInstructions": [
            {"ingredient": s.ingredient, "method": s.method, "duration": s.duration}
            for s in prep.storage_instructions
        ],
    }


def meal_plan_to_dict(plan: MealPlan) -> dict:
    """Opaque payload handed to the persistence and export collaborators."""
    data = {
        "planName": plan.plan_name,
        "fitnessGoal": plan.fitness_goal,
        "description": plan.description,
        "clientName": plan.client_name,
        "dailyCalorieTarget": _number(plan.daily_calorie_target),
        "days": plan.days,
        "mealsPerDay": plan.meals_per_day,
        "meals": [
            {
                "day": m.day,
                "mealNumber": m.meal_number,
                "mealType": m.meal_type.value,
                "recipe": recipe_to_dict(m.recipe) if m.recipe else None,
            }
            for m in plan.meals
        ],
        "diagnostics": [
            {
                "day": d.day,
                "calories": _number(d.calories),
                "target": _number(d.target),
                "deviation": _number(d.deviation),
            }
            for d in plan.diagnostics
        ],
    }
    if plan.start_of_week_meal_prep is not None:
        data["startOfWeekMealPrep"] = meal_prep_to_dict(plan.start_of_week_meal_prep)
    return data


def format_plan_json(plan: MealPlan) -> str:
    return json.dumps(meal_plan_to_dict(plan), indent=2)


def format_plan_markdown(plan: MealPlan) -> str:
    """Format a meal plan, and its meal prep if present, as markdown."""
    title = plan.plan_name or f"{plan.days}-Day Meal Plan"
    lines = [
        f"# {title}",
        "",
        f"- Generated: {datetime.now().strftime('%Y-%m-%d')}",
        f"- Fitness goal: {plan.fitness_goal}",
        f"- Daily calorie target: {plan.daily_calorie_target:.0f}",
        "",
    ]

    for day in range(1, plan.days + 1):
        day_slots = plan.meals_for_day(day)
        if not day_slots:
            continue
        lines.append(f"## Day {day}")
        lines.append("")
        lines.append("| # | Meal | Recipe | Calories | Protein |")
        lines.append("|---|------|--------|----------|---------|")
        for slot in day_slots:
            r = slot.recipe
            lines.append(
                f"| {slot.meal_number} "
                f"| {slot.meal_type.value.title()} "
                f"| {r.name if r else 'TBD'} "
                f"| {r.calories_kcal if r else 0:.0f} "
                f"| {r.protein_grams if r else 0:.0f}g |"
            )
        lines.append(f"| | **Total** | | **{plan.day_calories(day):.0f}** | |")
        lines.append("")

    nutrition = calculate_plan_nutrition(plan)
    avg = nutrition.average_daily
    lines.append("## Nutrition")
    lines.append("")
    lines.append(
        f"- Average per day: {avg.calories:.0f} kcal, {avg.protein:.0f}g protein, "
        f"{avg.carbs:.0f}g carbs, {avg.fat:.0f}g fat"
    )
    lines.append("")

    prep = plan.start_of_week_meal_prep
    if prep is None:
        return "\n".join(lines)

    lines.append(f"## Start-of-Week Meal Prep (~{prep.total_prep_time} min)")
    lines.append("")
    lines.append("### Shopping List")
    lines.append("")
    for item in prep.shopping_list:
        unit = f" {item.unit}" if item.unit else ""
        lines.append(
            f"- [ ] {item.ingredient}: {item.total_amount}{unit} "
            f"({', '.join(item.used_in_recipes)})"
        )
    lines.append("")
    lines.append("### Prep Steps")
    lines.append("")
    for s in prep.prep_instructions:
        lines.append(f"{s.step}. {s.instruction} ({s.estimated_time} min)")
    lines.append("")
    lines.append("### Storage")
    lines.append("")
    for s in prep.storage_instructions:
        lines.append(f"- **{s.ingredient}**: {s.method}, {s.duration}")
    lines.append("")

    return "\n".join(lines)

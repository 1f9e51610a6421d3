"""Compose the start-of-week meal prep plan from assembled meals."""

from __future__ import annotations

import logging
from typing import Sequence

from meal_prep.consolidator import consolidate_ingredients
from meal_prep.models import MealPrepPlan, MealSlot
from meal_prep.prep_scheduler import build_prep_steps
from meal_prep.storage import build_storage_instructions

logger = logging.getLogger(__name__)


def build_meal_prep_plan(meals: Sequence[MealSlot], config: dict | None = None) -> MealPrepPlan:
    """Consolidate ingredients, then derive prep steps and storage guidance.

    Empty meals or recipes without ingredients give an empty shopping list,
    a cleanup-only schedule and no storage instructions.
    """
    shopping_list = consolidate_ingredients(meals)
    prep_steps = build_prep_steps(shopping_list, config)
    storage = build_storage_instructions(shopping_list)

    plan = MealPrepPlan(
        shopping_list=shopping_list,
        prep_instructions=prep_steps,
        storage_instructions=storage,
    )
    logger.info(
        "Meal prep: %d shopping items, %d prep steps, %d min total",
        len(shopping_list),
        len(prep_steps),
        plan.total_prep_time,
    )
    return plan

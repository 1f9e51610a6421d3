"""Meal plan generation: validate, fetch candidates, assemble, attach meal prep."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from meal_prep.assembler import assemble_meal_plan, meal_types_for_day, unique_recipes
from meal_prep.collaborators import CandidateFilters, MealPlanStore, RecipeCandidateProvider
from meal_prep.config import DEFAULTS
from meal_prep.errors import ValidationError
from meal_prep.export import meal_plan_to_dict
from meal_prep.meal_prep_plan import build_meal_prep_plan
from meal_prep.models import MealPlan, MealPlanRequest, Recipe

logger = logging.getLogger(__name__)

MIN_INGREDIENT_LIMIT = 5
MAX_INGREDIENT_LIMIT = 50


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_request(request: MealPlanRequest) -> None:
    """Reject malformed requests before anything is fetched."""
    if not _is_int(request.days) or request.days < 1:
        raise ValidationError("days", f"must be a positive integer, got {request.days!r}")
    if not _is_int(request.meals_per_day) or request.meals_per_day < 1:
        raise ValidationError(
            "meals_per_day", f"must be a positive integer, got {request.meals_per_day!r}"
        )

    target = request.daily_calorie_target
    if target is None:
        raise ValidationError("daily_calorie_target", "is required")
    if isinstance(target, bool) or not isinstance(target, (int, float)):
        raise ValidationError("daily_calorie_target", f"must be a number, got {target!r}")
    if not math.isfinite(target) or target <= 0:
        raise ValidationError("daily_calorie_target", f"must be positive, got {target!r}")

    if request.max_prep_time is not None and (
        not _is_int(request.max_prep_time) or request.max_prep_time < 1
    ):
        raise ValidationError(
            "max_prep_time", f"must be a positive number of minutes, got {request.max_prep_time!r}"
        )
    if request.max_ingredients is not None and (
        not _is_int(request.max_ingredients)
        or not MIN_INGREDIENT_LIMIT <= request.max_ingredients <= MAX_INGREDIENT_LIMIT
    ):
        raise ValidationError(
            "max_ingredients",
            f"must be between {MIN_INGREDIENT_LIMIT} and {MAX_INGREDIENT_LIMIT}, "
            f"got {request.max_ingredients!r}",
        )


def fetch_candidates(
    provider: RecipeCandidateProvider,
    request: MealPlanRequest,
    config: dict | None = None,
) -> list[Recipe]:
    """Query the provider once per meal type in the day.

    Each query first asks for recipes near the per-meal calorie share. When
    that yields fewer recipes than plan days, the query is repeated without
    the calorie range and the extra recipes are appended. Meal type, dietary
    tags and the prep time limit are never relaxed.
    """
    planning = (config or DEFAULTS)["planning"]
    per_meal = request.daily_calorie_target / request.meals_per_day
    variance = per_meal * planning["calorie_variance"]

    candidates: list[Recipe] = []
    for mt in dict.fromkeys(meal_types_for_day(request.meals_per_day, planning["single_meal_type"])):
        filters = CandidateFilters(
            meal_type=mt.value,
            dietary_tags=request.dietary_tags,
            calorie_range=(per_meal - variance, per_meal + variance),
            max_prep_time=request.max_prep_time,
            limit=planning["candidate_limit"],
        )
        found = list(provider.search(filters))
        if len(found) < request.days:
            logger.info(
                "Only %d %s recipes near %.0f kcal, widening calorie range",
                len(found),
                mt.value,
                per_meal,
            )
            widened = CandidateFilters(
                meal_type=mt.value,
                dietary_tags=request.dietary_tags,
                max_prep_time=request.max_prep_time,
                limit=planning["candidate_limit"],
            )
            found.extend(provider.search(widened))
        logger.debug("Provider returned %d %s recipes", len(found), mt.value)
        candidates.extend(found)

    return unique_recipes(candidates)


def build_meal_plan(
    request: MealPlanRequest,
    candidates: Sequence[Recipe],
    config: dict | None = None,
) -> MealPlan:
    """Assemble a plan from an already-fetched candidate pool."""
    validate_request(request)
    config = config or DEFAULTS

    result = assemble_meal_plan(request, candidates, config)

    meal_prep = None
    if request.generate_meal_prep:
        meal_prep = build_meal_prep_plan(result.slots, config)

    return MealPlan(
        meals=result.slots,
        days=request.days,
        meals_per_day=request.meals_per_day,
        daily_calorie_target=request.daily_calorie_target,
        fitness_goal=request.fitness_goal,
        plan_name=request.plan_name,
        client_name=request.client_name,
        description=request.description,
        start_of_week_meal_prep=meal_prep,
        diagnostics=result.diagnostics,
    )


def generate_meal_plan(
    request: MealPlanRequest,
    provider: RecipeCandidateProvider,
    config: dict | None = None,
    store: MealPlanStore | None = None,
) -> MealPlan:
    """Full generation: validate, fetch, assemble, and optionally persist."""
    validate_request(request)
    config = config or DEFAULTS

    candidates = fetch_candidates(provider, request, config)
    logger.info("Assembling %d slots from %d candidates", request.slot_count, len(candidates))
    plan = build_meal_plan(request, candidates, config)

    if store is not None:
        store.save(meal_plan_to_dict(plan))

    return plan

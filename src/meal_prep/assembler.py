"""Meal plan assembly using the OR-Tools CP-SAT solver."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from ortools.sat.python import cp_model

from meal_prep.config import DEFAULTS, protein_share
from meal_prep.errors import InsufficientCandidatesError, SolverError
from meal_prep.models import DayDiagnostic, MealPlanRequest, MealSlot, MealType, Recipe
from meal_prep.units import normalize_name

logger = logging.getLogger(__name__)

# Fixed-point factor for calories and protein grams
SCALE = 10

MEAL_ROTATION = [MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER, MealType.SNACK]


@dataclass(frozen=True)
class AssemblyResult:
    slots: tuple[MealSlot, ...]
    diagnostics: tuple[DayDiagnostic, ...]


def meal_types_for_day(meals_per_day: int, single_meal_type: str = "lunch") -> list[MealType]:
    """Meal type for each meal number of a day.

    1 meal: the configured single meal type; 2: breakfast, dinner;
    3: breakfast, lunch, dinner; 4+: cycle breakfast, lunch, dinner, snack.
    """
    if meals_per_day == 1:
        return [MealType(single_meal_type)]
    if meals_per_day == 2:
        return [MealType.BREAKFAST, MealType.DINNER]
    if meals_per_day == 3:
        return [MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER]
    return [MEAL_ROTATION[i % len(MEAL_ROTATION)] for i in range(meals_per_day)]


def unique_recipes(candidates: Sequence[Recipe]) -> list[Recipe]:
    """Drop repeated recipe ids, keeping first occurrence order."""
    seen: set[str] = set()
    result = []
    for r in candidates:
        if r.id in seen:
            continue
        seen.add(r.id)
        result.append(r)
    return result


def eligible_recipes(
    candidates: Sequence[Recipe],
    meal_type: MealType,
    dietary_tags: frozenset[str] = frozenset(),
    max_prep_time: int | None = None,
) -> list[Recipe]:
    """Candidates that serve this meal type, carry every required tag and fit the prep limit."""
    return [
        r
        for r in candidates
        if r.has_meal_type(meal_type)
        and r.has_dietary_tags(dietary_tags)
        and (max_prep_time is None or r.prep_time_minutes <= max_prep_time)
    ]


def ingredient_keys(recipe: Recipe) -> frozenset[str]:
    """Distinct normalized ingredient names of a recipe."""
    return frozenset(k for k in (normalize_name(i.name) for i in recipe.ingredients) if k)


def greedy_assignment(
    slot_keys: Sequence[tuple[int, int, MealType]],
    by_type: dict[MealType, list[Recipe]],
    per_meal_calories: float,
    window: int,
    max_ingredients: int | None = None,
) -> list[int]:
    """Option index per slot, picked one slot at a time.

    Each slot takes the recipe nearest the per-meal calorie share, preferring
    recipes not served within the variety window and, with an ingredient
    limit, recipes that keep the plan under it. Ties go to catalog order.
    """
    picks: list[int] = []
    served: list[tuple[int, str]] = []
    used: set[str] = set()

    for day, _, mt in slot_keys:
        options = by_type[mt]
        recent = {rid for d, rid in served if day - d < window}

        def rank(i: int) -> tuple:
            r = options[i]
            over = 0
            if max_ingredients:
                over = max(len(used | ingredient_keys(r)) - max_ingredients, 0)
            return (r.id in recent, over, abs(r.calories_kcal - per_meal_calories), i)

        best = min(range(len(options)), key=rank)
        picks.append(best)
        served.append((day, options[best].id))
        used |= ingredient_keys(options[best])

    return picks


def _scaled(value: float) -> int:
    return max(int(round((value or 0) * SCALE)), 0)


def assemble_meal_plan(
    request: MealPlanRequest,
    candidates: Sequence[Recipe],
    config: dict | None = None,
) -> AssemblyResult:
    """Pick one recipe per (day, meal) slot.

    Meal type, dietary tags and the prep time limit are hard constraints.
    The objective keeps each day's calories (and protein, for the fitness
    goal) close to target, penalizes serving the same recipe again within
    the variety window, and penalizes distinct ingredients beyond the
    request's limit. The solver starts from the greedy assignment and falls
    back to it if the work limit runs out before any solution is found.
    """
    config = config or DEFAULTS
    planning = config["planning"]
    weights = planning["weights"]
    window = planning["variety_window_days"]

    pool = unique_recipes(candidates)
    day_types = meal_types_for_day(request.meals_per_day, planning["single_meal_type"])
    by_type = {
        mt: eligible_recipes(pool, mt, request.dietary_tags, request.max_prep_time)
        for mt in set(day_types)
    }
    for mt, recipes in sorted(by_type.items(), key=lambda kv: MEAL_ROTATION.index(kv[0])):
        logger.info("%d %s candidates", len(recipes), mt.value)

    # Fail on the first slot that cannot be filled
    slot_keys: list[tuple[int, int, MealType]] = []
    for day in range(1, request.days + 1):
        for meal_number, mt in enumerate(day_types, start=1):
            if not by_type[mt]:
                raise InsufficientCandidatesError(
                    day, meal_number, mt.value, request.dietary_tags, request.max_prep_time
                )
            slot_keys.append((day, meal_number, mt))

    pool_index = {r.id: i for i, r in enumerate(pool)}
    cal_target = float(request.daily_calorie_target)
    pro_target = cal_target * protein_share(config, request.fitness_goal) / 4

    greedy = greedy_assignment(
        slot_keys,
        by_type,
        cal_target / request.meals_per_day,
        window,
        request.max_ingredients,
    )

    model = cp_model.CpModel()

    choice_vars = []
    recipe_id_vars = []
    day_cal_terms: dict[int, list] = {}
    day_pro_terms: dict[int, list] = {}
    day_cal_max: dict[int, int] = {}
    day_pro_max: dict[int, int] = {}

    for (day, meal_number, mt), hint in zip(slot_keys, greedy):
        options = by_type[mt]
        suffix = f"d{day}_m{meal_number}"

        choice = model.new_int_var(0, len(options) - 1, f"recipe_{suffix}")
        model.add_hint(choice, hint)
        choice_vars.append(choice)

        id_table = [pool_index[r.id] for r in options]
        recipe_id = model.new_int_var(0, len(pool) - 1, f"pool_id_{suffix}")
        model.add_element(choice, id_table, recipe_id)
        recipe_id_vars.append(recipe_id)

        cal_table = [_scaled(r.calories_kcal) for r in options]
        meal_cal = model.new_int_var(0, max(cal_table), f"cal_{suffix}")
        model.add_element(choice, cal_table, meal_cal)
        day_cal_terms.setdefault(day, []).append(meal_cal)
        day_cal_max[day] = day_cal_max.get(day, 0) + max(cal_table)

        pro_table = [_scaled(r.protein_grams) for r in options]
        meal_pro = model.new_int_var(0, max(pro_table), f"pro_{suffix}")
        model.add_element(choice, pro_table, meal_pro)
        day_pro_terms.setdefault(day, []).append(meal_pro)
        day_pro_max[day] = day_pro_max.get(day, 0) + max(pro_table)

    cal_penalty_terms = []
    pro_penalty_terms = []
    cal_target_scaled = _scaled(cal_target)
    pro_target_scaled = _scaled(pro_target)

    for day in range(1, request.days + 1):
        cal_bound = cal_target_scaled + day_cal_max[day]
        cal_dev = model.new_int_var(0, cal_bound, f"cal_dev_d{day}")
        model.add_abs_equality(cal_dev, sum(day_cal_terms[day]) - cal_target_scaled)
        cal_penalty_terms.append(cal_dev)

        pro_bound = pro_target_scaled + day_pro_max[day]
        pro_dev = model.new_int_var(0, pro_bound, f"pro_dev_d{day}")
        model.add_abs_equality(pro_dev, sum(day_pro_terms[day]) - pro_target_scaled)
        pro_penalty_terms.append(pro_dev)

    # Variety: penalize the same recipe in two slots less than `window` days apart
    repeat_terms = []
    for i, (day_i, meal_i, mt_i) in enumerate(slot_keys):
        ids_i = {r.id for r in by_type[mt_i]}
        for j in range(i + 1, len(slot_keys)):
            day_j, meal_j, mt_j = slot_keys[j]
            if day_j - day_i >= window:
                break
            if ids_i.isdisjoint(r.id for r in by_type[mt_j]):
                continue
            same = model.new_bool_var(f"repeat_d{day_i}m{meal_i}_d{day_j}m{meal_j}")
            model.add(recipe_id_vars[i] == recipe_id_vars[j]).only_enforce_if(same)
            model.add(recipe_id_vars[i] != recipe_id_vars[j]).only_enforce_if(~same)
            repeat_terms.append(same)

    objective = (
        weights["calories"] * sum(cal_penalty_terms)
        + weights["protein"] * sum(pro_penalty_terms)
        + weights["variety"] * SCALE * sum(repeat_terms)
    )

    # Ingredient limit: a used flag per distinct ingredient, implied by any pick
    # of a recipe containing it; each flag past the limit is penalized
    if request.max_ingredients:
        used: dict[str, cp_model.IntVar] = {}
        for choice, (day, meal_number, mt) in zip(choice_vars, slot_keys):
            for i, r in enumerate(by_type[mt]):
                keys = ingredient_keys(r)
                if not keys:
                    continue
                picked = model.new_bool_var(f"pick_d{day}_m{meal_number}_{i}")
                model.add(choice == i).only_enforce_if(picked)
                model.add(choice != i).only_enforce_if(~picked)
                for k in sorted(keys):
                    if k not in used:
                        used[k] = model.new_bool_var(f"uses_{len(used)}")
                    model.add_implication(picked, used[k])
        excess = model.new_int_var(0, len(used), "ingredient_excess")
        model.add(excess >= sum(used.values()) - request.max_ingredients)
        objective = objective + weights["ingredients"] * SCALE * excess
        logger.debug("%d distinct ingredients, limit %d", len(used), request.max_ingredients)

    model.minimize(objective)

    solver = cp_model.CpSolver()
    solver.parameters.max_deterministic_time = float(
        planning["solver"]["max_deterministic_time"]
    )
    solver.parameters.num_workers = 1
    solver.parameters.random_seed = int(planning["solver"]["random_seed"])
    status = solver.solve(model)

    if status == cp_model.MODEL_INVALID:
        raise SolverError(f"Solver returned {solver.status_name(status)}")

    if status in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        picks = [solver.value(c) for c in choice_vars]
        logger.info(
            "Solver %s: objective=%.0f, repeats=%d",
            solver.status_name(status),
            solver.objective_value,
            sum(solver.value(b) for b in repeat_terms),
        )
    else:
        logger.warning(
            "Solver returned %s within its work limit; using the greedy assignment",
            solver.status_name(status),
        )
        picks = greedy

    slots = tuple(
        MealSlot(
            day=day,
            meal_number=meal_number,
            meal_type=mt,
            recipe=by_type[mt][pick],
        )
        for (day, meal_number, mt), pick in zip(slot_keys, picks)
    )

    diagnostics = []
    variance = planning["calorie_variance"]
    for day in range(1, request.days + 1):
        calories = sum(s.recipe.calories_kcal for s in slots if s.day == day)
        diag = DayDiagnostic(day=day, calories=calories, target=cal_target)
        if abs(diag.deviation) > cal_target * variance:
            logger.warning(
                "Day %d lands at %.0f kcal, %+.0f from the %.0f kcal target",
                day,
                calories,
                diag.deviation,
                cal_target,
            )
        diagnostics.append(diag)

    return AssemblyResult(slots=slots, diagnostics=tuple(diagnostics))

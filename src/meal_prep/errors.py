"""Errors raised while generating a meal plan."""

from __future__ import annotations


class MealPlanError(Exception):
    """Base class for fatal meal plan generation errors."""


class ValidationError(MealPlanError, ValueError):
    """A MealPlanRequest is malformed and was rejected before any recipe fetch."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class InsufficientCandidatesError(MealPlanError):
    """No candidate recipe satisfies the constraints of a slot."""

    def __init__(
        self,
        day: int,
        meal_number: int,
        meal_type: str,
        dietary_tags: frozenset[str] = frozenset(),
        max_prep_time: int | None = None,
    ):
        self.day = day
        self.meal_number = meal_number
        self.meal_type = meal_type
        self.dietary_tags = dietary_tags
        self.max_prep_time = max_prep_time
        msg = f"No {meal_type} recipe available for day {day}, meal {meal_number}"
        if dietary_tags:
            msg += f" with dietary tags: {', '.join(sorted(dietary_tags))}"
        if max_prep_time is not None:
            msg += f" within {max_prep_time} min prep"
        super().__init__(msg)


class SolverError(MealPlanError):
    """The optimizer could not produce an assignment."""

"""Interfaces of the collaborators around the engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from meal_prep.models import Recipe


@dataclass(frozen=True)
class CandidateFilters:
    meal_type: str | None = None
    dietary_tags: frozenset[str] = frozenset()
    calorie_range: tuple[float, float] | None = None
    max_prep_time: int | None = None
    limit: int = 100


class RecipeCandidateProvider(Protocol):
    """Source of candidate recipes, queried once per generation request."""

    def search(self, filters: CandidateFilters) -> list[Recipe]: ...


class MealPlanStore(Protocol):
    """Persists a finished meal plan payload; the engine never reads it back."""

    def save(self, payload: dict) -> None: ...


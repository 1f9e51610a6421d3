"""Engine settings: defaults, YAML overrides, and CLI override merging."""

from __future__ import annotations

import copy
from pathlib import Path

import yaml

DEFAULTS = {
    "planning": {
        # Meal type used when a plan has a single meal per day
        "single_meal_type": "lunch",
        "candidate_limit": 100,
        # Per-meal calorie range hint sent to the provider (target +/- 20%)
        "calorie_variance": 0.20,
        # Same recipe in the same meal type within this many days is penalized
        "variety_window_days": 2,
        "weights": {
            "calories": 10,
            "protein": 4,
            "variety": 200,
            # Per distinct ingredient beyond the request's max_ingredients
            "ingredients": 300,
        },
        "solver": {
            # Deterministic work units, not wall-clock seconds
            "max_deterministic_time": 5.0,
            "random_seed": 0,
        },
    },
    # Share of daily calories from protein, by fitness goal
    "fitness_goals": {
        "weight_loss": 0.30,
        "muscle_gain": 0.30,
        "maintenance": 0.25,
        "endurance": 0.20,
        "default": 0.25,
    },
    "prep": {
        "vegetable": {"base_minutes": 15, "per_item_minutes": 5},
        "protein": {"base_minutes": 20, "per_item_minutes": 8},
        "grain": {"base_minutes": 25, "per_item_minutes": 10},
        "dairy": {"base_minutes": 5, "per_item_minutes": 2},
        "other": {"base_minutes": 5, "per_item_minutes": 2},
        "cleanup_minutes": 10,
    },
}


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, returning a new dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def default_config() -> dict:
    return copy.deepcopy(DEFAULTS)


def load_config(config_path: Path | None = None) -> dict:
    """Load engine settings from a YAML file, falling back to defaults."""
    if config_path is not None and config_path.exists():
        with open(config_path) as f:
            user_config = yaml.safe_load(f) or {}
        return deep_merge(default_config(), user_config)

    return default_config()


def apply_cli_overrides(config: dict, **overrides: object) -> dict:
    """Apply CLI argument overrides to config.

    Supports flat keys that map into nested config:
      seed -> planning.solver.random_seed
      max_time -> planning.solver.max_deterministic_time
      single_meal_type -> planning.single_meal_type
    """
    if overrides.get("seed") is not None:
        config["planning"]["solver"]["random_seed"] = overrides["seed"]
    if overrides.get("max_time") is not None:
        config["planning"]["solver"]["max_deterministic_time"] = overrides["max_time"]
    if overrides.get("single_meal_type") is not None:
        config["planning"]["single_meal_type"] = str(overrides["single_meal_type"]).lower()

    return config


def protein_share(config: dict, fitness_goal: str | None) -> float:
    goals = config["fitness_goals"]
    key = (fitness_goal or "").strip().lower().replace(" ", "_").replace("-", "_")
    return goals.get(key, goals["default"])

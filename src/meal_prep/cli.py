"""CLI entry point for the meal prep engine."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def _split_csv(raw: str | None) -> frozenset[str]:
    if not raw:
        return frozenset()
    return frozenset(t.strip().lower() for t in raw.split(",") if t.strip())


def cmd_plan(args: argparse.Namespace) -> None:
    from meal_prep.catalog import InMemoryRecipeProvider
    from meal_prep.config import apply_cli_overrides, load_config
    from meal_prep.errors import MealPlanError
    from meal_prep.export import format_plan_json, format_plan_markdown
    from meal_prep.generator import generate_meal_plan
    from meal_prep.models import MealPlanRequest

    config = load_config(Path(args.config) if args.config else None)
    config = apply_cli_overrides(
        config,
        seed=args.seed,
        max_time=args.max_time,
        single_meal_type=args.single_meal_type,
    )

    request = MealPlanRequest(
        days=args.days,
        meals_per_day=args.meals_per_day,
        daily_calorie_target=args.calories,
        fitness_goal=args.goal,
        dietary_tags=_split_csv(args.dietary_tags),
        generate_meal_prep=not args.no_meal_prep,
        plan_name=args.name or "",
        client_name=args.client,
        max_prep_time=args.max_prep_time,
        max_ingredients=args.max_ingredients,
    )
    provider = InMemoryRecipeProvider.from_directory(Path(args.recipes))

    try:
        plan = generate_meal_plan(request, provider, config)
    except MealPlanError as e:
        logger.error("%s", e)
        sys.exit(1)

    plan_json_str = format_plan_json(plan)

    if args.save_plan is not None:
        save_path = "meal-plan.json" if args.save_plan == "auto" else args.save_plan
        with open(save_path, "w") as f:
            f.write(plan_json_str)
        print(f"Plan saved to {save_path}", file=sys.stderr)

    if args.format == "json":
        print(plan_json_str)
    else:
        print(format_plan_markdown(plan))


def cmd_categorize(args: argparse.Namespace) -> None:
    from meal_prep.categories import classify_ingredient
    from meal_prep.storage import storage_for

    for name in args.ingredients:
        storage = storage_for(name)
        print(f"{name}\t{classify_ingredient(name).value}\t{storage.method} ({storage.duration})")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meal-prep",
        description="Assemble meal plans and start-of-week meal prep from a recipe catalog",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file overriding engine defaults",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Logging verbosity (default: info)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this file",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    # plan
    p_plan = sub.add_parser("plan", help="Generate a meal plan with meal prep")
    p_plan.add_argument(
        "--recipes", type=str, required=True, help="Directory of recipe markdown notes"
    )
    p_plan.add_argument("--days", type=int, default=7)
    p_plan.add_argument("--meals-per-day", type=int, default=3)
    p_plan.add_argument("--calories", type=float, required=True, help="Daily calorie target")
    p_plan.add_argument("--goal", type=str, default="maintenance", help="Fitness goal")
    p_plan.add_argument("--dietary-tags", type=str, help="Comma-separated required tags")
    p_plan.add_argument(
        "--max-prep-time", type=int, help="Skip recipes with a longer prep time (minutes)"
    )
    p_plan.add_argument(
        "--max-ingredients",
        type=int,
        help="Keep distinct ingredients across the plan near this count (5-50)",
    )
    p_plan.add_argument("--name", type=str, help="Plan name")
    p_plan.add_argument("--client", type=str, help="Client the plan is written for")
    p_plan.add_argument(
        "--single-meal-type",
        type=str,
        choices=["breakfast", "lunch", "dinner", "snack"],
        help="Meal type used when --meals-per-day is 1",
    )
    p_plan.add_argument(
        "--no-meal-prep",
        action="store_true",
        help="Skip shopping list, prep steps and storage guidance",
    )
    p_plan.add_argument("--seed", type=int, help="Solver random seed")
    p_plan.add_argument(
        "--max-time", type=float, help="Solver work limit in deterministic time units"
    )
    p_plan.add_argument(
        "--save-plan",
        nargs="?",
        const="auto",
        default=None,
        help="Save plan JSON to file. Optional path; defaults to meal-plan.json",
    )
    p_plan.add_argument(
        "--format", type=str, choices=["json", "markdown"], default="markdown"
    )
    p_plan.set_defaults(func=cmd_plan)

    # categorize
    p_cat = sub.add_parser("categorize", help="Show category and storage for ingredients")
    p_cat.add_argument("ingredients", nargs="+", help="Ingredient names")
    p_cat.set_defaults(func=cmd_categorize)

    return parser


def main() -> None:
    from meal_prep.log import setup_logging

    parser = build_parser()
    args = parser.parse_args()

    log_file = Path(args.log_file) if args.log_file else None
    setup_logging(level=args.log_level, log_file=log_file)

    args.func(args)


if __name__ == "__main__":
    main()

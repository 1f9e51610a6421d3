"""End-to-end tests: validation, candidate fetch, assembly and meal prep."""

import json

import pytest
from conftest import make_config, make_recipe
from meal_prep.catalog import InMemoryRecipeProvider
from meal_prep.errors import InsufficientCandidatesError, ValidationError
from meal_prep.export import format_plan_markdown, meal_plan_to_dict
from meal_prep.generator import (
    build_meal_plan,
    fetch_candidates,
    generate_meal_plan,
    validate_request,
)
from meal_prep.models import MealPlanRequest


class RecordingProvider(InMemoryRecipeProvider):
    def __init__(self, recipes):
        super().__init__(recipes)
        self.calls = []

    def search(self, filters):
        self.calls.append(filters)
        return super().search(filters)


class RecordingStore:
    def __init__(self):
        self.payloads = []

    def save(self, payload):
        self.payloads.append(payload)


def _request(**kwargs):
    params = {"days": 3, "meals_per_day": 3, "daily_calorie_target": 1800}
    params.update(kwargs)
    return MealPlanRequest(**params)


class TestValidateRequest:
    @pytest.mark.parametrize(
        "kwargs, field",
        [
            ({"days": 0}, "days"),
            ({"days": -1}, "days"),
            ({"meals_per_day": 0}, "meals_per_day"),
            ({"daily_calorie_target": None}, "daily_calorie_target"),
            ({"daily_calorie_target": 0}, "daily_calorie_target"),
            ({"daily_calorie_target": "2000"}, "daily_calorie_target"),
            ({"daily_calorie_target": float("nan")}, "daily_calorie_target"),
            ({"max_prep_time": 0}, "max_prep_time"),
            ({"max_prep_time": 12.5}, "max_prep_time"),
            ({"max_ingredients": 4}, "max_ingredients"),
            ({"max_ingredients": 51}, "max_ingredients"),
        ],
    )
    def test_rejects(self, kwargs, field):
        with pytest.raises(ValidationError) as exc:
            validate_request(_request(**kwargs))
        assert exc.value.field == field

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_request(_request(days=0))

    def test_rejected_before_fetch(self, sample_recipes):
        provider = RecordingProvider(sample_recipes)
        with pytest.raises(ValidationError):
            generate_meal_plan(_request(meals_per_day=0), provider, make_config())
        assert provider.calls == []

    def test_accepts_valid(self):
        validate_request(_request())
        validate_request(_request(max_prep_time=30, max_ingredients=5))
        validate_request(_request(max_ingredients=50))


class TestFetchCandidates:
    def test_one_query_per_meal_type(self, sample_recipes):
        provider = RecordingProvider(sample_recipes)
        candidates = fetch_candidates(provider, _request(), make_config())

        assert [f.meal_type for f in provider.calls] == ["breakfast", "lunch", "dinner"]
        assert provider.calls[0].calorie_range == pytest.approx((480, 720))
        assert len(candidates) == 9

    def test_widens_calorie_range_when_short(self, sample_recipes):
        provider = RecordingProvider(sample_recipes)
        # 300 kcal per meal leaves no recipe in range
        candidates = fetch_candidates(
            provider, _request(daily_calorie_target=900), make_config()
        )
        assert len(provider.calls) == 6
        assert provider.calls[1].calorie_range is None
        assert len(candidates) == 9

    def test_dietary_tags_passed_through(self, sample_recipes):
        provider = RecordingProvider(sample_recipes)
        fetch_candidates(provider, _request(dietary_tags=frozenset({"vegan"})), make_config())
        assert all(f.dietary_tags == frozenset({"vegan"}) for f in provider.calls)

    def test_prep_time_limit_kept_when_widening(self, sample_recipes):
        provider = RecordingProvider(sample_recipes)
        fetch_candidates(
            provider, _request(daily_calorie_target=900, max_prep_time=20), make_config()
        )
        assert len(provider.calls) == 6
        assert all(f.max_prep_time == 20 for f in provider.calls)


class TestGenerateMealPlan:
    @pytest.mark.parametrize("days, meals", [(1, 1), (3, 3), (2, 4), (7, 3)])
    def test_meal_count(self, sample_recipes, days, meals):
        plan = generate_meal_plan(
            _request(days=days, meals_per_day=meals),
            InMemoryRecipeProvider(sample_recipes),
            make_config(),
        )
        assert len(plan.meals) == days * meals
        assert all(m.recipe is not None for m in plan.meals)

    def test_meal_prep_present_by_default(self, sample_recipes):
        plan = build_meal_plan(_request(), sample_recipes, make_config())
        assert plan.start_of_week_meal_prep is not None

    def test_meal_prep_absent_when_disabled(self, sample_recipes):
        plan = build_meal_plan(_request(generate_meal_prep=False), sample_recipes, make_config())
        assert plan.start_of_week_meal_prep is None
        assert "startOfWeekMealPrep" not in meal_plan_to_dict(plan)

    def test_insufficient_candidates_surface(self, sample_recipes):
        with pytest.raises(InsufficientCandidatesError) as exc:
            generate_meal_plan(
                _request(dietary_tags=frozenset({"keto"})),
                InMemoryRecipeProvider(sample_recipes),
                make_config(),
            )
        assert exc.value.day == 1
        assert exc.value.meal_type == "breakfast"

    def test_recipes_without_ingredients_give_empty_prep(self):
        pool = [
            make_recipe("Toast", ["breakfast"]),
            make_recipe("Soup", ["lunch"]),
            make_recipe("Stew", ["dinner"]),
        ]
        plan = build_meal_plan(_request(days=1), pool, make_config())
        prep = plan.start_of_week_meal_prep

        assert prep.shopping_list == ()
        assert prep.storage_instructions == ()
        assert len(prep.prep_instructions) == 1
        assert prep.total_prep_time == prep.prep_instructions[0].estimated_time

    def test_store_receives_payload(self, sample_recipes):
        store = RecordingStore()
        plan = generate_meal_plan(
            _request(days=1), InMemoryRecipeProvider(sample_recipes), make_config(), store=store
        )
        assert len(store.payloads) == 1
        assert store.payloads[0] == meal_plan_to_dict(plan)
        json.dumps(store.payloads[0])

    def test_diagnostics_per_day(self, sample_recipes):
        plan = build_meal_plan(_request(), sample_recipes, make_config())
        assert [d.day for d in plan.diagnostics] == [1, 2, 3]
        assert all(d.deviation == 0 for d in plan.diagnostics)


class TestBlueberryScenario:
    """3 days x 3 meals; two breakfasts share blueberries and almond milk."""

    @pytest.fixture
    def plan(self, sample_recipes):
        return generate_meal_plan(
            _request(),
            InMemoryRecipeProvider(sample_recipes),
            make_config(variety_window_days=3),
        )

    def test_each_breakfast_once(self, plan):
        breakfasts = [m.recipe.name for m in plan.meals if m.meal_type.value == "breakfast"]
        assert sorted(breakfasts) == [
            "Berry Smoothie",
            "Blueberry Oat Bowl",
            "Spinach Egg Scramble",
        ]

    def test_shopping_list_totals(self, plan):
        items = {i.ingredient: i for i in plan.start_of_week_meal_prep.shopping_list}

        assert items["Blueberries"].total_amount == "250"
        assert items["Blueberries"].unit == "g"
        assert sorted(items["Blueberries"].used_in_recipes) == [
            "Berry Smoothie",
            "Blueberry Oat Bowl",
        ]
        assert items["Almond Milk"].total_amount == "550"
        assert items["Almond Milk"].unit == "ml"
        assert len(items["Almond Milk"].used_in_recipes) == 2

    def test_storage_matches_shopping_list(self, plan):
        prep = plan.start_of_week_meal_prep
        assert len(prep.storage_instructions) == len(prep.shopping_list)
        assert [s.ingredient for s in prep.storage_instructions] == [
            i.ingredient for i in prep.shopping_list
        ]

    def test_total_prep_time(self, plan):
        prep = plan.start_of_week_meal_prep
        assert prep.total_prep_time == sum(s.estimated_time for s in prep.prep_instructions)
        assert prep.prep_instructions[-1].ingredients == ()

    def test_payload_shape(self, plan):
        data = meal_plan_to_dict(plan)
        prep = data["startOfWeekMealPrep"]
        assert data["mealsPerDay"] == 3
        assert len(data["meals"]) == 9
        assert prep["totalPrepTime"] == sum(s["estimatedTime"] for s in prep["prepInstructions"])
        blueberries = next(i for i in prep["shoppingList"] if i["ingredient"] == "Blueberries")
        assert blueberries["totalAmount"] == "250"

    def test_markdown_mentions_shopping_list(self, plan):
        md = format_plan_markdown(plan)
        assert "## Day 3" in md
        assert "Blueberries: 250 g" in md
        assert "Almond Milk: 550 ml" in md

"""Nutrition aggregation logic for meal plans."""
from collections import defaultdict
from typing import Dict, Any, List

from kitchen.domain.MealPlan import MealPlan
from kitchen.domain.Recipe import Recipe
from kitchen.utilities.constants import NUTRITION_KEYS, SINGLE_SLOTS, SNACKS_SLOT


def _empty_totals() -> Dict[str, float]:
    return {k: 0 for k in NUTRITION_KEYS}


def _add(totals: Dict[str, float], nutrition: Dict[str, Any]):
    for k in NUTRITION_KEYS:
        totals[k] += nutrition.get(k, 0) or 0


def compute_plan_nutrition(plan: MealPlan, recipes: List[Recipe]) -> Dict[str, Any]:
    """Aggregate nutrition for every day of a meal plan.

    Recipes missing from `recipes` are skipped.

    Returns structure:
    {
      'days': [
         {'date': 'yyyy-mm-dd', 'calories': n, 'protein': g, 'carbs': g, 'fat': g, 'fiber': g,
          'meals': {'breakfast': {'id': str, 'title': str, 'calories': n, ...}, 'snacks': [...]}},
         ...
      ],
      'totals': {'calories': n, 'protein': g, 'carbs': g, 'fat': g, 'fiber': g}
    }
    """
    if not plan:
        return {'days': [], 'totals': _empty_totals()}

    recipe_index = {r.id: r for r in recipes}
    totals = defaultdict(int, _empty_totals())
    days = []

    def detail(recipe: Recipe):
        return {'id': recipe.id, 'title': recipe.title, **recipe.nutrition}

    for entry in plan.entries():
        day_totals = defaultdict(int, _empty_totals())
        meals: Dict[str, Any] = {}
        for slot in SINGLE_SLOTS:
            recipe = recipe_index.get(getattr(entry, slot))
            if recipe is None:
                continue
            meals[slot] = detail(recipe)
            _add(day_totals, recipe.nutrition)
        snacks = [recipe_index[s] for s in entry.snacks if s in recipe_index]
        if snacks:
            meals[SNACKS_SLOT] = [detail(r) for r in snacks]
            for r in snacks:
                _add(day_totals, r.nutrition)
        _add(totals, day_totals)
        days.append({'date': entry.date.isoformat(), **day_totals, 'meals': meals})

    return {'days': days, 'totals': dict(totals)}


__all__ = ["compute_plan_nutrition"]

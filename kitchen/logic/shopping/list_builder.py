"""Shopping list builder.

Provides generate_from_meal_plan(meal_plan, resolve_recipes, on_missing=None):
collects every recipe assigned in a meal plan, aggregates their ingredients and
returns a new (unsaved) ShoppingList linked back to the plan.
"""
import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from kitchen.domain.MealPlan import MealPlan
from kitchen.domain.Recipe import Recipe
from kitchen.domain.ShoppingList import ShoppingItem, ShoppingList
from kitchen.logic.shopping.aggregator import aggregate

logger = logging.getLogger(__name__)

RecipeResolver = Callable[[Iterable[str]], List[Recipe]]


def shopping_list_name(meal_plan: MealPlan) -> str:
    return f"Shopping List for {meal_plan.name}"


def collect_plan_recipes(meal_plan: MealPlan, resolve_recipes: RecipeResolver) -> Tuple[List[Recipe], List[str]]:
    """Resolve the recipes assigned in a plan.

    Returns:
        (recipes, missing_ids): recipes in plan order (entry, then breakfast,
        lunch, dinner, snacks), repeated as often as they are assigned, and the
        distinct ids the resolver could not find, in first-seen order.
    """
    assigned = meal_plan.recipe_ids()
    unique_ids = list(dict.fromkeys(assigned))
    if not unique_ids:
        return [], []
    index: Dict[str, Recipe] = {r.id: r for r in resolve_recipes(unique_ids) if r is not None}
    missing = [rid for rid in unique_ids if rid not in index]
    recipes = [index[rid] for rid in assigned if rid in index]
    return recipes, missing


def build_shopping_list(meal_plan: MealPlan, recipes: List[Recipe]) -> ShoppingList:
    items = [
        ShoppingItem(
            name=agg['name'],
            quantity=agg['quantity'],
            unit=agg['unit'],
            category=agg['category'],
        )
        for agg in aggregate(recipes)
    ]
    return ShoppingList(
        user=meal_plan.user,
        name=shopping_list_name(meal_plan),
        items=items,
        meal_plan=meal_plan.id,
    )


def generate_from_meal_plan(meal_plan: MealPlan, resolve_recipes: RecipeResolver,
                            on_missing: Optional[Callable[[List[str]], None]] = None) -> ShoppingList:
    """Build a shopping list from every recipe scheduled in the meal plan.

    Args:
        meal_plan: plan to read; never modified.
        resolve_recipes: returns the Recipe objects for the ids it can find.
        on_missing: called with the ids that could not be resolved (only when
            there are any). Those recipes are left out of the list.

    Returns:
        ShoppingList owned by the plan's user, not yet persisted; items carry
        an estimated price of 0 since recipes hold no price data.
    """
    recipes, missing = collect_plan_recipes(meal_plan, resolve_recipes)
    if missing:
        logger.warning("Meal plan %s references %d missing recipe(s): %s",
                       meal_plan.id, len(missing), ", ".join(missing))
        if on_missing is not None:
            on_missing(missing)
    shopping_list = build_shopping_list(meal_plan, recipes)
    logger.info("Shopping list generated for meal plan %s: recipes=%d items=%d",
                meal_plan.id, len(recipes), len(shopping_list.items))
    return shopping_list


__all__ = ['generate_from_meal_plan', 'collect_plan_recipes', 'build_shopping_list',
           'shopping_list_name', 'RecipeResolver']

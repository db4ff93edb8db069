import logging
from typing import Iterable, List, Optional

from fastapi import APIRouter, Depends, Query, Response

from kitchen.api.dependencies import (
    Page,
    get_meal_plan_repo,
    get_owner,
    get_recipe_repo,
    get_shopping_list_repo,
)
from kitchen.domain.MealPlan import MealPlan
from kitchen.infra.MealPlan_Repository import MealPlanRepository
from kitchen.infra.Recipe_Repository import RecipeRepository
from kitchen.infra.ShoppingList_Repository import ShoppingListRepository
from kitchen.infra.pdf_utils import generate_pdf_for_meal_plan
from kitchen.logic.reporting.nutrition import compute_plan_nutrition
from kitchen.logic.shopping.list_builder import generate_from_meal_plan
from kitchen.utilities.constants import RECIPE_SUMMARY_FIELDS, SINGLE_SLOTS
from kitchen.utilities.errors import NotFoundError
from kitchen.utilities.validators import MealPlanCreate, MealPlanUpdate, SlotAssignment

router = APIRouter(prefix="/api/meal-plans", tags=["meal-plans"])
logger = logging.getLogger(__name__)

DETAIL_FIELDS = RECIPE_SUMMARY_FIELDS + ("ingredients", "nutrition")


# -------------------- Helpers --------------------
def populate(plan: MealPlan, recipes: RecipeRepository, fields=RECIPE_SUMMARY_FIELDS) -> dict:
    """Serialize a plan with slot ids replaced by recipe summaries (null when the recipe is gone)."""
    doc = plan.to_dict()
    index = {r.id: r.summary(fields) for r in recipes.resolve(plan.user, plan.recipe_ids())}
    for meal in doc["meals"]:
        for slot in SINGLE_SLOTS:
            meal[slot] = index.get(meal[slot]) if meal[slot] else None
        meal["snacks"] = [index[s] for s in meal["snacks"] if s in index]
    return doc


def _ensure_recipes_exist(owner: str, recipe_ids: Iterable[str], recipes: RecipeRepository):
    wanted = [rid for rid in dict.fromkeys(recipe_ids) if rid]
    found = {r.id for r in recipes.resolve(owner, wanted)}
    for rid in wanted:
        if rid not in found:
            raise NotFoundError("Recipe", rid)


def _meal_ids(meals: Optional[List[dict]]) -> List[str]:
    ids: List[str] = []
    for meal in meals or []:
        ids.extend(meal.get(slot) for slot in SINGLE_SLOTS)
        ids.extend(meal.get("snacks") or [])
    return [i for i in ids if i]


# -------------------- CRUD --------------------
@router.get("")
def list_meal_plans(active: Optional[bool] = Query(default=None),
                    page: Page = Depends(),
                    owner: str = Depends(get_owner),
                    plans: MealPlanRepository = Depends(get_meal_plan_repo),
                    recipes: RecipeRepository = Depends(get_recipe_repo)):
    """Return the owner's meal plans, latest start date first."""
    result = page.apply("mealPlans", plans.list(owner, active=active))
    result["mealPlans"] = [populate(p, recipes) for p in result["mealPlans"]]
    return result


@router.post("", status_code=201)
def create_meal_plan(body: MealPlanCreate,
                     owner: str = Depends(get_owner),
                     plans: MealPlanRepository = Depends(get_meal_plan_repo),
                     recipes: RecipeRepository = Depends(get_recipe_repo)):
    doc = body.model_dump(by_alias=True, mode="json")
    _ensure_recipes_exist(owner, _meal_ids(doc["meals"]), recipes)
    plan = plans.create(MealPlan.from_dict({**doc, "user": owner}))
    return {"message": "Meal plan created successfully", "mealPlan": populate(plan, recipes)}


@router.get("/{plan_id}")
def get_meal_plan(plan_id: str,
                  owner: str = Depends(get_owner),
                  plans: MealPlanRepository = Depends(get_meal_plan_repo),
                  recipes: RecipeRepository = Depends(get_recipe_repo)):
    return populate(plans.get(owner, plan_id), recipes, DETAIL_FIELDS)


@router.put("/{plan_id}")
def update_meal_plan(plan_id: str, body: MealPlanUpdate,
                     owner: str = Depends(get_owner),
                     plans: MealPlanRepository = Depends(get_meal_plan_repo),
                     recipes: RecipeRepository = Depends(get_recipe_repo)):
    changes = body.changes()
    if "meals" in changes:
        _ensure_recipes_exist(owner, _meal_ids(changes["meals"]), recipes)
    plan = plans.update(owner, plan_id, changes)
    logger.info("Meal plan updated: id=%s fields=%s", plan_id, sorted(changes))
    return {"message": "Meal plan updated successfully", "mealPlan": populate(plan, recipes)}


@router.delete("/{plan_id}")
def delete_meal_plan(plan_id: str,
                     owner: str = Depends(get_owner),
                     plans: MealPlanRepository = Depends(get_meal_plan_repo)):
    plans.delete(owner, plan_id)
    return {"message": "Meal plan deleted successfully"}


# -------------------- Slots --------------------
@router.put("/{plan_id}/meals")
def assign_meal(plan_id: str, body: SlotAssignment,
                owner: str = Depends(get_owner),
                plans: MealPlanRepository = Depends(get_meal_plan_repo),
                recipes: RecipeRepository = Depends(get_recipe_repo)):
    plan = plans.get(owner, plan_id)
    if body.recipe_id and not recipes.exists(owner, body.recipe_id):
        raise NotFoundError("Recipe", body.recipe_id)
    plan.assign_slot(body.date, body.meal_type, body.recipe_id)
    plan = plans.save(plan)
    logger.info("Meal assigned: plan=%s date=%s slot=%s recipe=%s",
                plan_id, body.date, body.meal_type, body.recipe_id)
    return {"message": "Meal updated successfully", "mealPlan": populate(plan, recipes)}


@router.delete("/{plan_id}/meals")
def remove_meal(plan_id: str, body: SlotAssignment,
                owner: str = Depends(get_owner),
                plans: MealPlanRepository = Depends(get_meal_plan_repo),
                recipes: RecipeRepository = Depends(get_recipe_repo)):
    plan = plans.get(owner, plan_id)
    if plan.clear_slot(body.date, body.meal_type, body.recipe_id) is not None:
        plan = plans.save(plan)
    return {"message": "Meal removed successfully", "mealPlan": populate(plan, recipes)}


# -------------------- Derived views --------------------
@router.post("/{plan_id}/shopping-list", status_code=201)
def generate_shopping_list(plan_id: str,
                           owner: str = Depends(get_owner),
                           plans: MealPlanRepository = Depends(get_meal_plan_repo),
                           recipes: RecipeRepository = Depends(get_recipe_repo),
                           lists: ShoppingListRepository = Depends(get_shopping_list_repo)):
    plan = plans.get(owner, plan_id)
    skipped: List[str] = []
    shopping_list = generate_from_meal_plan(plan, recipes.resolver(owner), on_missing=skipped.extend)
    saved = lists.create(shopping_list)
    return {
        "message": "Shopping list generated successfully",
        "shoppingList": saved.to_dict(),
        "skippedRecipeIds": skipped,
    }


@router.get("/{plan_id}/nutrition")
def meal_plan_nutrition(plan_id: str,
                        owner: str = Depends(get_owner),
                        plans: MealPlanRepository = Depends(get_meal_plan_repo),
                        recipes: RecipeRepository = Depends(get_recipe_repo)):
    plan = plans.get(owner, plan_id)
    nutrition = compute_plan_nutrition(plan, recipes.resolve(owner, plan.recipe_ids()))
    return {"mealPlan": plan.id, **nutrition}


@router.get("/{plan_id}/pdf")
def export_meal_plan_pdf(plan_id: str,
                         owner: str = Depends(get_owner),
                         plans: MealPlanRepository = Depends(get_meal_plan_repo),
                         recipes: RecipeRepository = Depends(get_recipe_repo)):
    plan = plans.get(owner, plan_id)
    index = {r.id: r for r in recipes.resolve(owner, plan.recipe_ids())}
    pdf_bytes = generate_pdf_for_meal_plan(plan, index)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename=meal_plan_{plan.id}.pdf"
        },
    )

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from kitchen.api.dependencies import Page, get_meal_plan_repo, get_owner, get_shopping_list_repo
from kitchen.domain.ShoppingList import ShoppingItem, ShoppingList
from kitchen.infra.MealPlan_Repository import MealPlanRepository
from kitchen.infra.ShoppingList_Repository import ShoppingListRepository
from kitchen.infra.pdf_utils import generate_pdf_for_shopping_list
from kitchen.utilities.errors import NotFoundError
from kitchen.utilities.validators import (
    ShoppingItemInput,
    ShoppingItemUpdate,
    ShoppingListCreate,
    ShoppingListUpdate,
)

router = APIRouter(prefix="/api/shopping-lists", tags=["shopping-lists"])
logger = logging.getLogger(__name__)


def _with_meal_plan(shopping_list: ShoppingList, plans: MealPlanRepository) -> dict:
    """Serialize a list with mealPlan expanded to {id, name, startDate, endDate}."""
    doc = shopping_list.to_dict()
    if shopping_list.meal_plan:
        try:
            plan = plans.get(shopping_list.user, shopping_list.meal_plan)
        except NotFoundError:
            doc["mealPlan"] = None
        else:
            doc["mealPlan"] = {
                "id": plan.id,
                "name": plan.name,
                "startDate": plan.start_date.isoformat(),
                "endDate": plan.end_date.isoformat(),
            }
    return doc


# -------------------- Lists --------------------
@router.get("")
def list_shopping_lists(completed: Optional[bool] = Query(default=None),
                        page: Page = Depends(),
                        owner: str = Depends(get_owner),
                        lists: ShoppingListRepository = Depends(get_shopping_list_repo),
                        plans: MealPlanRepository = Depends(get_meal_plan_repo)):
    result = page.apply("shoppingLists", lists.list(owner, completed=completed))
    result["shoppingLists"] = [_with_meal_plan(sl, plans) for sl in result["shoppingLists"]]
    return result


@router.post("", status_code=201)
def create_shopping_list(body: ShoppingListCreate,
                         owner: str = Depends(get_owner),
                         lists: ShoppingListRepository = Depends(get_shopping_list_repo),
                         plans: MealPlanRepository = Depends(get_meal_plan_repo)):
    if body.meal_plan:
        plans.get(owner, body.meal_plan)
    doc = body.model_dump(by_alias=True, mode="json")
    shopping_list = ShoppingList(
        user=owner,
        name=body.name,
        items=[ShoppingItem.from_dict(i) for i in doc["items"]],
        meal_plan=body.meal_plan,
    )
    saved = lists.create(shopping_list)
    return {"message": "Shopping list created successfully", "shoppingList": saved.to_dict()}


@router.get("/{list_id}")
def get_shopping_list(list_id: str,
                      owner: str = Depends(get_owner),
                      lists: ShoppingListRepository = Depends(get_shopping_list_repo),
                      plans: MealPlanRepository = Depends(get_meal_plan_repo)):
    return _with_meal_plan(lists.get(owner, list_id), plans)


@router.put("/{list_id}")
def update_shopping_list(list_id: str, body: ShoppingListUpdate,
                         owner: str = Depends(get_owner),
                         lists: ShoppingListRepository = Depends(get_shopping_list_repo),
                         plans: MealPlanRepository = Depends(get_meal_plan_repo)):
    changes = body.changes()
    if changes.get("mealPlan"):
        plans.get(owner, changes["mealPlan"])
    shopping_list = lists.update(owner, list_id, changes)
    logger.info("Shopping list updated: id=%s fields=%s", list_id, sorted(changes))
    return {"message": "Shopping list updated successfully", "shoppingList": shopping_list.to_dict()}


@router.delete("/{list_id}")
def delete_shopping_list(list_id: str,
                         owner: str = Depends(get_owner),
                         lists: ShoppingListRepository = Depends(get_shopping_list_repo)):
    lists.delete(owner, list_id)
    return {"message": "Shopping list deleted successfully"}


# -------------------- Items --------------------
@router.post("/{list_id}/items")
def add_item(list_id: str, body: ShoppingItemInput,
             owner: str = Depends(get_owner),
             lists: ShoppingListRepository = Depends(get_shopping_list_repo)):
    shopping_list = lists.get(owner, list_id)
    shopping_list.add_item(ShoppingItem.from_dict(body.model_dump(by_alias=True, mode="json")))
    saved = lists.save(shopping_list)
    return {"message": "Item added successfully", "shoppingList": saved.to_dict()}


@router.put("/{list_id}/items/{item_id}")
def update_item(list_id: str, item_id: str, body: ShoppingItemUpdate,
                owner: str = Depends(get_owner),
                lists: ShoppingListRepository = Depends(get_shopping_list_repo)):
    shopping_list = lists.get(owner, list_id)
    shopping_list.update_item(item_id, body.changes())
    saved = lists.save(shopping_list)
    return {"message": "Item updated successfully", "shoppingList": saved.to_dict()}


@router.delete("/{list_id}/items/{item_id}")
def remove_item(list_id: str, item_id: str,
                owner: str = Depends(get_owner),
                lists: ShoppingListRepository = Depends(get_shopping_list_repo)):
    shopping_list = lists.get(owner, list_id)
    shopping_list.remove_item(item_id)
    saved = lists.save(shopping_list)
    return {"message": "Item removed successfully", "shoppingList": saved.to_dict()}


@router.patch("/{list_id}/items/{item_id}/toggle")
def toggle_item(list_id: str, item_id: str,
                owner: str = Depends(get_owner),
                lists: ShoppingListRepository = Depends(get_shopping_list_repo)):
    shopping_list = lists.get(owner, list_id)
    shopping_list.toggle_item(item_id)
    saved = lists.save(shopping_list)
    return {"message": "Item toggled successfully", "shoppingList": saved.to_dict()}


@router.get("/{list_id}/pdf")
def export_shopping_list_pdf(list_id: str,
                             owner: str = Depends(get_owner),
                             lists: ShoppingListRepository = Depends(get_shopping_list_repo)):
    shopping_list = lists.get(owner, list_id)
    return Response(
        content=generate_pdf_for_shopping_list(shopping_list),
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename=shopping_list_{shopping_list.id}.pdf"
        },
    )

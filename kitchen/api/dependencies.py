"""Request-scoped dependencies shared by the API routers."""
import math
from typing import List, Optional

from fastapi import Depends, Header, HTTPException, Query, Request

from kitchen.infra.Document_Store import DocumentStore
from kitchen.infra.MealPlan_Repository import MealPlanRepository
from kitchen.infra.Recipe_Repository import RecipeRepository
from kitchen.infra.ShoppingList_Repository import ShoppingListRepository
from kitchen.utilities.constants import DEFAULT_PAGE_LIMIT


def get_store(request: Request) -> DocumentStore:
    store = getattr(request.app.state, "store", None)
    if store is None or not store.is_open:
        raise HTTPException(status_code=503, detail="Storage is not available")
    return store


def get_owner(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Owner id set by the upstream auth layer."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Not authorized, no user id")
    return x_user_id.strip()


def get_recipe_repo(store: DocumentStore = Depends(get_store)) -> RecipeRepository:
    return RecipeRepository(store)


def get_meal_plan_repo(store: DocumentStore = Depends(get_store)) -> MealPlanRepository:
    return MealPlanRepository(store)


def get_shopping_list_repo(store: DocumentStore = Depends(get_store)) -> ShoppingListRepository:
    return ShoppingListRepository(store)


class Page:
    def __init__(self, page: int = Query(default=1, ge=1),
                 limit: int = Query(default=DEFAULT_PAGE_LIMIT, ge=1, le=100)):
        self.page = page
        self.limit = limit

    def apply(self, key: str, docs: List[dict]) -> dict:
        '''Slices docs and wraps them as {<key>, totalPages, currentPage, total}.'''
        total = len(docs)
        start = (self.page - 1) * self.limit
        return {
            key: docs[start:start + self.limit],
            "totalPages": math.ceil(total / self.limit),
            "currentPage": self.page,
            "total": total,
        }

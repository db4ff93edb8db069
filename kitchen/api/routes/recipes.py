import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from kitchen.api.dependencies import Page, get_owner, get_recipe_repo
from kitchen.domain.Recipe import Recipe
from kitchen.infra.Recipe_Repository import RecipeRepository
from kitchen.utilities.validators import Difficulty, RecipeInput, RecipeUpdate

router = APIRouter(prefix="/api/recipes", tags=["recipes"])
logger = logging.getLogger(__name__)


@router.get("")
def list_recipes(search: Optional[str] = Query(default=None),
                 cuisine: Optional[str] = Query(default=None),
                 difficulty: Optional[Difficulty] = Query(default=None),
                 favorite: Optional[bool] = Query(default=None),
                 page: Page = Depends(),
                 owner: str = Depends(get_owner),
                 repo: RecipeRepository = Depends(get_recipe_repo)):
    """Return the owner's recipes, newest first."""
    recipes = repo.list(owner, search=search, cuisine=cuisine, difficulty=difficulty, favorite=favorite)
    return page.apply("recipes", [r.to_dict() for r in recipes])


@router.post("", status_code=201)
def create_recipe(body: RecipeInput,
                  owner: str = Depends(get_owner),
                  repo: RecipeRepository = Depends(get_recipe_repo)):
    recipe = repo.create(owner, Recipe.from_dict(body.document()))
    return {"message": "Recipe created successfully", "recipe": recipe.to_dict()}


@router.get("/{recipe_id}")
def get_recipe(recipe_id: str,
               owner: str = Depends(get_owner),
               repo: RecipeRepository = Depends(get_recipe_repo)):
    return repo.get(owner, recipe_id).to_dict()


@router.put("/{recipe_id}")
def update_recipe(recipe_id: str, body: RecipeUpdate,
                  owner: str = Depends(get_owner),
                  repo: RecipeRepository = Depends(get_recipe_repo)):
    recipe = repo.update(owner, recipe_id, body.changes())
    logger.info("Recipe updated: id=%s fields=%s", recipe_id, sorted(body.changes()))
    return {"message": "Recipe updated successfully", "recipe": recipe.to_dict()}


@router.delete("/{recipe_id}")
def delete_recipe(recipe_id: str,
                  owner: str = Depends(get_owner),
                  repo: RecipeRepository = Depends(get_recipe_repo)):
    repo.delete(owner, recipe_id)
    return {"message": "Recipe deleted successfully"}


@router.post("/{recipe_id}/favorite")
def favorite_recipe(recipe_id: str,
                    owner: str = Depends(get_owner),
                    repo: RecipeRepository = Depends(get_recipe_repo)):
    recipe = repo.set_favorite(owner, recipe_id, True)
    return {"message": "Recipe added to favorites", "recipe": recipe.to_dict()}


@router.delete("/{recipe_id}/favorite")
def unfavorite_recipe(recipe_id: str,
                      owner: str = Depends(get_owner),
                      repo: RecipeRepository = Depends(get_recipe_repo)):
    recipe = repo.set_favorite(owner, recipe_id, False)
    return {"message": "Recipe removed from favorites", "recipe": recipe.to_dict()}

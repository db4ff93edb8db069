import logging
from typing import Callable, Iterable, List, Optional

from kitchen.domain.Recipe import Recipe, utc_now
from kitchen.infra.Document_Store import DocumentStore
from kitchen.infra.paths import RECIPES
from kitchen.utilities.errors import NotFoundError

logger = logging.getLogger(__name__)


class RecipeRepository:
    """Owner-scoped persistence for Recipe documents."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def list(self, owner: str, search: Optional[str] = None, cuisine: Optional[str] = None,
             difficulty: Optional[str] = None, favorite: Optional[bool] = None) -> List[Recipe]:
        """Return the owner's recipes, newest first, narrowed by the optional filters."""
        filters = {'createdBy': owner}
        if difficulty:
            filters['difficulty'] = difficulty
        if favorite is not None:
            filters['isFavorite'] = favorite
        needle = (search or '').strip().lower()
        wanted_cuisine = (cuisine or '').strip().lower()

        def matches(doc) -> bool:
            if wanted_cuisine and (doc.get('cuisine') or '').lower() != wanted_cuisine:
                return False
            if needle:
                haystack = f"{doc.get('title') or ''} {doc.get('description') or ''}".lower()
                return needle in haystack
            return True

        docs = self.store.find(RECIPES, matches, **filters)
        docs.sort(key=lambda d: d.get('createdAt') or '', reverse=True)
        return [Recipe.from_dict(d) for d in docs]

    def get(self, owner: str, recipe_id: str) -> Recipe:
        doc = self.store.get(RECIPES, recipe_id)
        if doc is None or doc.get('createdBy') != owner:
            raise NotFoundError("Recipe", recipe_id)
        return Recipe.from_dict(doc)

    def exists(self, owner: str, recipe_id: str) -> bool:
        doc = self.store.get(RECIPES, recipe_id)
        return doc is not None and doc.get('createdBy') == owner

    def create(self, owner: str, recipe: Recipe) -> Recipe:
        recipe.created_by = owner
        recipe.id = None
        saved = Recipe.from_dict(self.store.insert(RECIPES, recipe.to_dict()))
        logger.info("Recipe created: id=%s title=%r ai=%s", saved.id, saved.title, saved.is_ai_generated)
        return saved

    def update(self, owner: str, recipe_id: str, changes: dict) -> Recipe:
        '''Applies camelCase field changes (already allow-listed by the caller).'''
        current = self.get(owner, recipe_id)
        doc = current.to_dict()
        doc.update(changes)
        doc.update({'id': recipe_id, 'createdBy': owner, 'createdAt': current.created_at,
                    'updatedAt': utc_now()})
        updated = Recipe.from_dict(doc)
        return Recipe.from_dict(self.store.replace(RECIPES, recipe_id, updated.to_dict()))

    def set_favorite(self, owner: str, recipe_id: str, favorite: bool) -> Recipe:
        return self.update(owner, recipe_id, {'isFavorite': favorite})

    def delete(self, owner: str, recipe_id: str):
        self.get(owner, recipe_id)
        self.store.delete(RECIPES, recipe_id)
        logger.info("Recipe deleted: id=%s", recipe_id)

    def resolve(self, owner: str, recipe_ids: Iterable[str]) -> List[Recipe]:
        """Return the owner's recipes for the given ids; unknown ids are left out."""
        wanted = set(recipe_ids)
        if not wanted:
            return []
        docs = self.store.find(RECIPES, lambda d: d.get('id') in wanted, createdBy=owner)
        return [Recipe.from_dict(d) for d in docs]

    def resolver(self, owner: str) -> Callable[[Iterable[str]], List[Recipe]]:
        return lambda ids: self.resolve(owner, ids)

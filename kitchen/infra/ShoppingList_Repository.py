import logging
from typing import List, Optional

from kitchen.domain.Recipe import utc_now
from kitchen.domain.ShoppingList import ShoppingList
from kitchen.infra.Document_Store import DocumentStore
from kitchen.infra.paths import SHOPPING_LISTS
from kitchen.utilities.errors import NotFoundError

logger = logging.getLogger(__name__)


class ShoppingListRepository:
    """Owner-scoped persistence for ShoppingList documents.

    Every write goes through ShoppingList.to_dict(), which recomputes
    totalEstimatedCost and isCompleted from the items.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def list(self, owner: str, completed: Optional[bool] = None) -> List[ShoppingList]:
        docs = self.store.find(SHOPPING_LISTS, user=owner)
        lists = [ShoppingList.from_dict(d) for d in docs]
        if completed is not None:
            lists = [sl for sl in lists if sl.is_completed == completed]
        lists.sort(key=lambda sl: sl.created_at or '', reverse=True)
        return lists

    def get(self, owner: str, list_id: str) -> ShoppingList:
        doc = self.store.get(SHOPPING_LISTS, list_id)
        if doc is None or doc.get('user') != owner:
            raise NotFoundError("Shopping list", list_id)
        return ShoppingList.from_dict(doc)

    def create(self, shopping_list: ShoppingList) -> ShoppingList:
        shopping_list.id = None
        saved = ShoppingList.from_dict(self.store.insert(SHOPPING_LISTS, shopping_list.to_dict()))
        logger.info("Shopping list created: id=%s name=%r items=%d", saved.id, saved.name, len(saved.items))
        return saved

    def save(self, shopping_list: ShoppingList) -> ShoppingList:
        self.get(shopping_list.user, shopping_list.id)
        shopping_list.updated_at = utc_now()
        return ShoppingList.from_dict(
            self.store.replace(SHOPPING_LISTS, shopping_list.id, shopping_list.to_dict())
        )

    def update(self, owner: str, list_id: str, changes: dict) -> ShoppingList:
        '''Applies camelCase field changes (already allow-listed by the caller).'''
        current = self.get(owner, list_id)
        doc = current.to_dict()
        doc.update(changes)
        doc.update({'id': list_id, 'user': owner, 'createdAt': current.created_at, 'updatedAt': utc_now()})
        updated = ShoppingList.from_dict(doc)
        return ShoppingList.from_dict(self.store.replace(SHOPPING_LISTS, list_id, updated.to_dict()))

    def delete(self, owner: str, list_id: str):
        self.get(owner, list_id)
        self.store.delete(SHOPPING_LISTS, list_id)
        logger.info("Shopping list deleted: id=%s", list_id)

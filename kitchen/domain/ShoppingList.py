"""ShoppingList aggregate: purchasable items with two derived fields.

totalEstimatedCost and isCompleted are recomputed from the items after every
item mutation and on every (de)serialization; callers cannot set them.
"""
from typing import List, Optional
from uuid import uuid4

from kitchen.domain.Ingredient import quantity_text
from kitchen.domain.Recipe import utc_now
from kitchen.utilities.constants import DEFAULT_CATEGORY, DEFAULT_SHOPPING_LIST_NAME, SHOPPING_CATEGORIES
from kitchen.utilities.errors import NotFoundError, ValidationFailure

ITEM_FIELDS = ("name", "quantity", "unit", "category", "isCompleted", "estimatedPrice", "notes")


class ShoppingItem:
    def __init__(self, name: str, quantity: str = "", unit: str = "", category: str = DEFAULT_CATEGORY,
                 is_completed: bool = False, estimated_price: float = 0, notes: str = "",
                 id: Optional[str] = None):
        if not name or not name.strip():
            raise ValidationFailure("Item name is required")
        category = category or DEFAULT_CATEGORY
        if category not in SHOPPING_CATEGORIES:
            raise ValidationFailure(f"Invalid category: {category}")
        estimated_price = estimated_price or 0
        if estimated_price < 0:
            raise ValidationFailure("Estimated price cannot be negative")
        self.id = id or uuid4().hex
        self.name = name.strip()
        self.quantity = quantity_text(quantity)
        self.unit = unit or ""
        self.category = category
        self.is_completed = bool(is_completed)
        self.estimated_price = estimated_price
        self.notes = notes or ""

    def __str__(self) -> str:
        mark = "x" if self.is_completed else " "
        return f"[{mark}] {self.name} - {self.quantity} {self.unit} ({self.category})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return ShoppingItem(
            id=d.get("id"),
            name=str(d.get("name") or ""),
            quantity=d.get("quantity", ""),
            unit=str(d.get("unit") or ""),
            category=d.get("category") or DEFAULT_CATEGORY,
            is_completed=bool(d.get("isCompleted", False)),
            estimated_price=d.get("estimatedPrice") or 0,
            notes=str(d.get("notes") or ""),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "category": self.category,
            "isCompleted": self.is_completed,
            "estimatedPrice": self.estimated_price,
            "notes": self.notes,
        }


class ShoppingList:
    def __init__(self, user: str, name: str = DEFAULT_SHOPPING_LIST_NAME,
                 items: Optional[List[ShoppingItem]] = None, meal_plan: Optional[str] = None,
                 id: Optional[str] = None, created_at: Optional[str] = None,
                 updated_at: Optional[str] = None):
        if not user:
            raise ValidationFailure("Shopping list owner is required")
        self.id = id
        self.user = user
        self.name = (name or "").strip() or DEFAULT_SHOPPING_LIST_NAME
        self.items: List[ShoppingItem] = items[:] if items else []
        self.meal_plan = meal_plan
        self.total_estimated_cost = 0
        self.is_completed = False
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at
        self.recalculate()

    def recalculate(self):
        '''Recomputes the derived totals from the current items.'''
        self.total_estimated_cost = sum(item.estimated_price or 0 for item in self.items)
        self.is_completed = len(self.items) > 0 and all(item.is_completed for item in self.items)
        return self

    def _changed(self):
        self.updated_at = utc_now()
        self.recalculate()

    # --- Items ------------------------------------------------------------------
    def get_item(self, item_id: str) -> ShoppingItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise NotFoundError("Item", item_id)

    def add_item(self, item: ShoppingItem) -> ShoppingItem:
        self.items.append(item)
        self._changed()
        return item

    def update_item(self, item_id: str, changes: dict) -> ShoppingItem:
        '''Applies camelCase item field changes; unknown keys are rejected.'''
        item = self.get_item(item_id)
        unknown = set(changes) - set(ITEM_FIELDS)
        if unknown:
            raise ValidationFailure(f"Unknown item fields: {', '.join(sorted(unknown))}")
        merged = item.to_dict()
        merged.update(changes)
        updated = ShoppingItem.from_dict(merged)
        self.items[self.items.index(item)] = updated
        self._changed()
        return updated

    def remove_item(self, item_id: str) -> ShoppingItem:
        item = self.get_item(item_id)
        self.items.remove(item)
        self._changed()
        return item

    def toggle_item(self, item_id: str) -> ShoppingItem:
        item = self.get_item(item_id)
        item.is_completed = not item.is_completed
        self._changed()
        return item

    def __str__(self) -> str:
        items_str = ",\n\t".join(str(item) for item in self.items)
        return f"Shopping List {self.name}:\n\t{items_str}"

    def __repr__(self) -> str:
        return self.__str__()

    # --- Serialization ------------------------------------------------------------
    @staticmethod
    def from_dict(data):
        d = dict(data)
        return ShoppingList(
            id=d.get("id"),
            user=d.get("user"),
            name=str(d.get("name") or ""),
            items=[ShoppingItem.from_dict(i) for i in d.get("items") or []],
            meal_plan=d.get("mealPlan"),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self):
        self.recalculate()
        return {
            "id": self.id,
            "user": self.user,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
            "mealPlan": self.meal_plan,
            "totalEstimatedCost": self.total_estimated_cost,
            "isCompleted": self.is_completed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

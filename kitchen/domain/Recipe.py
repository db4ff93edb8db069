"""Recipe domain entity: title, ingredients, instructions, timing, nutrition, tags."""
from datetime import datetime, timezone
from typing import List, Dict, Optional

from kitchen.domain.Ingredient import Ingredient
from kitchen.utilities.constants import DEFAULT_DIFFICULTY, DIFFICULTIES, NUTRITION_KEYS
from kitchen.utilities.errors import ValidationFailure


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _number(value, default=0):
    if value is None or isinstance(value, bool):
        return default
    try:
        num = float(value)
    except (TypeError, ValueError):
        return default
    return int(num) if num.is_integer() else num


class Recipe:
    def __init__(self, title: str = "", description: str = "",
                 ingredients: Optional[List[Ingredient]] = None,
                 instructions: Optional[List[str]] = None,
                 prep_time: int = 0, cook_time: int = 0, servings: int = 0,
                 difficulty: str = DEFAULT_DIFFICULTY, cuisine: str = "",
                 dietary_tags: Optional[List[str]] = None,
                 nutrition: Optional[Dict[str, float]] = None,
                 created_by: Optional[str] = None, is_ai_generated: bool = False,
                 is_favorite: bool = False, id: Optional[str] = None,
                 created_at: Optional[str] = None, updated_at: Optional[str] = None):
        if not title or not title.strip():
            raise ValidationFailure("Recipe title is required")
        if difficulty not in DIFFICULTIES:
            raise ValidationFailure(f"Invalid difficulty: {difficulty}")
        if prep_time < 0 or cook_time < 0:
            raise ValidationFailure("Preparation and cooking times cannot be negative")
        self.id = id
        self.title = title.strip()
        self.description = description or ""
        self.ingredients = ingredients[:] if ingredients else []
        self.instructions = instructions[:] if instructions else []
        self.prep_time = prep_time
        self.cook_time = cook_time
        self.servings = servings
        self.difficulty = difficulty
        self.cuisine = cuisine or ""
        # Set semantics, first occurrence order
        self.dietary_tags = list(dict.fromkeys(dietary_tags or []))
        n = nutrition or {}
        self.nutrition = {k: _number(n.get(k)) for k in NUTRITION_KEYS}
        self.created_by = created_by
        self.is_ai_generated = is_ai_generated
        self.is_favorite = is_favorite
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at

    def __str__(self) -> str:
        return f"{self.title} - {self.servings} servings - {self.difficulty} - {len(self.ingredients)} ingredients"

    __repr__ = __str__

    def summary(self, fields) -> dict:
        '''Returns the subset of the document used when a recipe is populated into a meal plan.'''
        doc = self.to_dict()
        return {k: doc.get(k) for k in fields}

    @staticmethod
    def from_dict(data):
        d = dict(data)
        return Recipe(
            id=d.get("id"),
            title=str(d.get("title") or ""),
            description=str(d.get("description") or ""),
            ingredients=[Ingredient.from_dict(i) for i in d.get("ingredients") or []],
            instructions=[str(s) for s in d.get("instructions") or [] if str(s).strip()],
            prep_time=int(_number(d.get("prepTime"))),
            cook_time=int(_number(d.get("cookTime"))),
            servings=int(_number(d.get("servings"))),
            difficulty=d.get("difficulty") or DEFAULT_DIFFICULTY,
            cuisine=str(d.get("cuisine") or ""),
            dietary_tags=[str(t) for t in d.get("dietaryTags") or []],
            nutrition=d.get("nutrition") or {},
            created_by=d.get("createdBy"),
            is_ai_generated=bool(d.get("isAIGenerated", False)),
            is_favorite=bool(d.get("isFavorite", False)),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "instructions": self.instructions,
            "prepTime": self.prep_time,
            "cookTime": self.cook_time,
            "servings": self.servings,
            "difficulty": self.difficulty,
            "cuisine": self.cuisine,
            "dietaryTags": self.dietary_tags,
            "nutrition": dict(self.nutrition),
            "createdBy": self.created_by,
            "isAIGenerated": self.is_ai_generated,
            "isFavorite": self.is_favorite,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

"""
Input validation schemas using Pydantic.

Each entity has an explicit create and update schema; only the fields listed
here can reach a stored document. Owner ids, ids, timestamps and the derived
shopping list totals are never accepted from a request body (unknown keys are
ignored). Wire names are camelCase; use `changes()` to get the camelCase dict
of the fields a client actually sent.
"""
import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from kitchen.domain.Ingredient import quantity_text
from kitchen.domain.MealPlan import normalize_date

Difficulty = Literal["easy", "medium", "hard"]
MealType = Literal["breakfast", "lunch", "dinner", "snacks"]
Category = Literal["produce", "meat", "dairy", "pantry", "frozen", "bakery", "beverages", "other"]


class Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def changes(self) -> dict:
        """camelCase dict of the fields explicitly set by the client."""
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


# --- Recipes -------------------------------------------------------------------
class IngredientInput(Schema):
    """Schema for a recipe ingredient line; quantity stays free text."""
    name: str = Field(..., min_length=1, max_length=100)
    quantity: str = ""
    unit: str = Field("", max_length=20)

    @field_validator('quantity', mode='before')
    @classmethod
    def quantity_as_text(cls, v):
        """Numbers are accepted and stored as their text form."""
        return quantity_text(v)

    @field_validator('name', 'unit')
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip()


class NutritionInput(Schema):
    calories: float = Field(0, ge=0)
    protein: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)
    fiber: float = Field(0, ge=0)


class RecipeInput(Schema):
    """Schema for recipe creation."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    ingredients: List[IngredientInput] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    prep_time: int = Field(0, ge=0)
    cook_time: int = Field(0, ge=0)
    servings: int = Field(0, ge=0)
    difficulty: Difficulty = "medium"
    cuisine: str = ""
    dietary_tags: List[str] = Field(default_factory=list)
    nutrition: NutritionInput = Field(default_factory=NutritionInput)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if v is None:
            return v
        if not v.strip():
            raise ValueError('Recipe title cannot be empty')
        return v.strip()

    @field_validator('instructions')
    @classmethod
    def validate_instructions(cls, v):
        """Filter out empty steps."""
        if v is None:
            return v
        return [step.strip() for step in v if step and step.strip()]

    @field_validator('dietary_tags')
    @classmethod
    def validate_tags(cls, v):
        if v is None:
            return v
        return list(dict.fromkeys(tag.strip() for tag in v if tag and tag.strip()))

    def document(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class RecipeUpdate(RecipeInput):
    """Partial recipe update; every field optional."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    ingredients: Optional[List[IngredientInput]] = None
    instructions: Optional[List[str]] = None
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=0)
    difficulty: Optional[Difficulty] = None
    cuisine: Optional[str] = None
    dietary_tags: Optional[List[str]] = None
    nutrition: Optional[NutritionInput] = None


class RecipePreferences(Schema):
    dietary_preferences: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    cuisine: Optional[str] = None
    meal_type: Optional[str] = None


class GenerateRecipeRequest(Schema):
    ingredients: List[str] = Field(..., min_length=1)
    preferences: RecipePreferences = Field(default_factory=RecipePreferences)

    @field_validator('ingredients')
    @classmethod
    def validate_ingredients(cls, v):
        cleaned = [i.strip() for i in v if i and i.strip()]
        if not cleaned:
            raise ValueError('At least one ingredient is required')
        return cleaned


# --- Meal plans ------------------------------------------------------------------
class MealEntryInput(Schema):
    date: dt.date
    breakfast: Optional[str] = None
    lunch: Optional[str] = None
    dinner: Optional[str] = None
    snacks: List[str] = Field(default_factory=list)

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, v):
        return normalize_date(v)


class MealPlanCreate(Schema):
    name: str = Field(..., min_length=1, max_length=200)
    start_date: dt.date
    end_date: dt.date
    meals: List[MealEntryInput] = Field(default_factory=list)
    is_active: bool = True
    notes: str = ""

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def parse_dates(cls, v):
        return normalize_date(v)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        return v.strip()


class MealPlanUpdate(Schema):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    meals: Optional[List[MealEntryInput]] = None
    is_active: Optional[bool] = None
    notes: Optional[str] = None

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def parse_dates(cls, v):
        return normalize_date(v) if v is not None else v


class SlotAssignment(Schema):
    """Body of PUT/DELETE /api/meal-plans/{id}/meals."""
    date: dt.date
    meal_type: MealType
    recipe_id: Optional[str] = None

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, v):
        return normalize_date(v)


# --- Shopping lists ----------------------------------------------------------------
class ShoppingItemInput(Schema):
    name: str = Field(..., min_length=1, max_length=100)
    quantity: str = ""
    unit: str = ""
    category: Category = "other"
    is_completed: bool = False
    estimated_price: float = Field(0, ge=0)
    notes: str = ""

    @field_validator('quantity', mode='before')
    @classmethod
    def quantity_as_text(cls, v):
        return quantity_text(v)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        return v.strip() if v is not None else v


class ShoppingItemUpdate(ShoppingItemInput):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    quantity: Optional[str] = None
    unit: Optional[str] = None
    category: Optional[Category] = None
    is_completed: Optional[bool] = None
    estimated_price: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class ShoppingListCreate(Schema):
    name: Optional[str] = None
    items: List[ShoppingItemInput] = Field(default_factory=list)
    meal_plan: Optional[str] = None


class ShoppingListUpdate(Schema):
    name: Optional[str] = None
    items: Optional[List[ShoppingItemInput]] = None
    meal_plan: Optional[str] = None

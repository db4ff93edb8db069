from typing import Final

DATE_FORMAT: Final[str] = "%Y-%m-%d"

# Meal slots in the order they are visited when collecting recipes
SINGLE_SLOTS: Final[tuple[str, ...]] = ("breakfast", "lunch", "dinner")
SNACKS_SLOT: Final[str] = "snacks"
MEAL_SLOTS: Final[tuple[str, ...]] = SINGLE_SLOTS + (SNACKS_SLOT,)

DIFFICULTIES: Final[tuple[str, ...]] = ("easy", "medium", "hard")
DEFAULT_DIFFICULTY: Final[str] = "medium"

SHOPPING_CATEGORIES: Final[tuple[str, ...]] = (
    "produce", "meat", "dairy", "pantry", "frozen", "bakery", "beverages", "other"
)
DEFAULT_CATEGORY: Final[str] = "other"
DEFAULT_SHOPPING_LIST_NAME: Final[str] = "My Shopping List"

NUTRITION_KEYS: Final[tuple[str, ...]] = ("calories", "protein", "carbs", "fat", "fiber")

DEFAULT_PAGE_LIMIT: Final[int] = 10

# Fields returned when a meal plan slot is populated with its recipe
RECIPE_SUMMARY_FIELDS: Final[tuple[str, ...]] = (
    "id", "title", "description", "prepTime", "cookTime", "servings", "difficulty", "cuisine"
)

RECIPE_SYSTEM_PROMPT: Final[str] = (
    "You are a professional chef and nutritionist. Always respond with valid JSON only."
)
RECIPE_JSON_FORMAT: Final[str] = (
    """
{
  "title": "Recipe Name",
  "description": "Brief description",
  "ingredients": [
    {"name": "ingredient name", "quantity": "amount", "unit": "unit"}
  ],
  "instructions": ["step 1", "step 2", "step 3"],
  "prepTime": 15,
  "cookTime": 30,
  "servings": 4,
  "difficulty": "easy|medium|hard",
  "cuisine": "cuisine type",
  "dietaryTags": ["tag1", "tag2"],
  "nutrition": {
    "calories": 400,
    "protein": 25,
    "carbs": 45,
    "fat": 12,
    "fiber": 5
  }
}
    """
)
IMAGE_ANALYSIS_PROMPT: Final[str] = (
    "Identify all the food ingredients in this image. Return only a JSON array of "
    "ingredient names. Example: [\"tomatoes\", \"onions\", \"garlic\"]"
)

import re
import json
import base64
import logging
from json import JSONDecodeError
from typing import List, Optional

from openai import OpenAI, OpenAIError
from pydantic import ValidationError
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from kitchen.api.dependencies import get_owner, get_recipe_repo
from kitchen.domain.Recipe import Recipe
from kitchen.infra.Recipe_Repository import RecipeRepository
from kitchen.utilities import config
from kitchen.utilities.constants import IMAGE_ANALYSIS_PROMPT, RECIPE_JSON_FORMAT, RECIPE_SYSTEM_PROMPT
from kitchen.utilities.errors import UpstreamFailure
from kitchen.utilities.validators import GenerateRecipeRequest, RecipeInput

logger = logging.getLogger(__name__)


# === Helper: Get OpenAI Client ===
def _get_openai_client():
    """Return an OpenAI client if OPENAI_API_KEY is set, otherwise None."""
    if not config.OPENAI_API_KEY:
        return None
    return OpenAI(api_key=config.OPENAI_API_KEY)


def _require_client():
    client = _get_openai_client()
    if client is None:
        logger.warning("OPENAI_API_KEY not set, AI features are unavailable")
        raise UpstreamFailure("AI provider is not configured")
    return client


# === Prompt ===
def build_recipe_prompt(ingredients: List[str], preferences: Optional[dict] = None) -> str:
    prefs = preferences or {}
    dietary = prefs.get("dietaryPreferences") or []
    allergies = prefs.get("allergies") or []
    cuisine = prefs.get("cuisine")
    lines = [
        f"Create a detailed recipe using these ingredients: {', '.join(ingredients)}.",
        "",
        "Requirements:",
        f"- Make it a {prefs.get('mealType') or 'main dish'}",
        f"- Cuisine style: {cuisine}" if cuisine else "- Any cuisine style",
    ]
    if dietary:
        lines.append(f"- Dietary preferences: {', '.join(dietary)}")
    if allergies:
        lines.append(f"- Avoid these allergens: {', '.join(allergies)}")
    lines.extend([
        "- Include exact measurements and cooking times",
        "- Provide nutritional estimates (calories, protein, carbs, fat per serving)",
        "- Rate the difficulty (easy/medium/hard)",
        "",
        "Format the response as a JSON object with this exact structure:",
    ])
    return "\n".join(lines) + RECIPE_JSON_FORMAT


# === Recipe Generation ===
def create_recipe_from_ai(ingredients: List[str], preferences: Optional[dict] = None) -> Recipe:
    """Ask the model for a recipe built from the ingredients and return it as an unsaved Recipe.

    Raises UpstreamFailure when the provider is not configured, the call fails,
    or the output cannot be turned into a valid recipe.
    """
    client = _require_client()
    try:
        response = client.responses.create(
            model=config.OPENAI_MODEL,
            instructions=RECIPE_SYSTEM_PROMPT,
            input=build_recipe_prompt(ingredients, preferences),
        )
    except OpenAIError as e:
        logger.exception("Recipe generation request failed")
        raise UpstreamFailure(f"AI request failed: {e}") from e

    recipe_data = (response.output_text or "").strip()
    if not recipe_data:
        logger.warning("AI returned empty recipe data")
        raise UpstreamFailure("AI returned an empty response")

    parsed = _parse_json_output(recipe_data)
    if parsed is None:
        # One follow-up call asking the model to fix its own formatting
        fixed = _request_json_fix(client, recipe_data)
        parsed = _parse_json_output(fixed) if fixed else None
    if not isinstance(parsed, dict):
        logger.error("AI output is not valid JSON and no JSON object could be recovered")
        raise UpstreamFailure("AI did not return a valid recipe")
    return _recipe_from_ai_payload(parsed)


def _recipe_from_ai_payload(payload: dict) -> Recipe:
    data = dict(payload)
    if isinstance(data.get("difficulty"), str):
        data["difficulty"] = data["difficulty"].strip().lower()
    try:
        validated = RecipeInput.model_validate(data)
    except ValidationError as e:
        logger.warning("AI recipe failed validation: %s", e.errors())
        raise UpstreamFailure("AI returned a recipe with invalid fields") from e
    recipe = Recipe.from_dict(validated.document())
    recipe.is_ai_generated = True
    return recipe


# === Image Analysis ===
def analyze_ingredient_image(image: bytes, content_type: str = "image/jpeg") -> List[str]:
    """Return the ingredient names the vision model recognizes in the image."""
    client = _require_client()
    data_url = f"data:{content_type};base64,{base64.b64encode(image).decode('ascii')}"
    try:
        response = client.responses.create(
            model=config.OPENAI_VISION_MODEL,
            input=[{
                "role": "user",
                "content": [
                    {"type": "input_text", "text": IMAGE_ANALYSIS_PROMPT},
                    {"type": "input_image", "image_url": data_url},
                ],
            }],
        )
    except OpenAIError as e:
        logger.exception("Image analysis request failed")
        raise UpstreamFailure(f"AI request failed: {e}") from e

    parsed = _parse_json_output((response.output_text or "").strip())
    if not isinstance(parsed, list):
        logger.warning("Image analysis did not return a JSON array")
        raise UpstreamFailure("AI did not return a list of ingredients")
    return [str(name).strip() for name in parsed if str(name).strip()]


# === Text Cleaning Helpers ===
def _parse_json_output(text: str):
    """Parse model output as JSON, recovering from code fences, trailing commas and surrounding prose."""
    try:
        return json.loads(text)
    except JSONDecodeError:
        pass
    cleaned = _remove_trailing_commas(_strip_code_fences(text))
    try:
        return json.loads(cleaned)
    except JSONDecodeError:
        pass
    candidate = _extract_json_by_balancing(cleaned)
    if candidate:
        try:
            return json.loads(_remove_trailing_commas(candidate))
        except JSONDecodeError:
            logger.exception("Failed to decode extracted JSON from AI output")
    return None


def _strip_code_fences(text: str) -> str:
    """Remove common markdown code fences and leading/trailing whitespace."""
    text = re.sub(r"```(?:json)?\n(.*?)```", r"\1", text, flags=re.S)
    text = re.sub(r"^```|```$", "", text)
    return text.strip()


def _remove_trailing_commas(text: str) -> str:
    return re.sub(r",\s*(\}|\])", r"\1", text)


def _extract_json_by_balancing(text: str) -> Optional[str]:
    """Extract the first JSON object/array by balancing braces/brackets."""
    start = None
    stack = []
    in_string = False
    escape = False

    for i, ch in enumerate(text):
        if escape:
            escape = False
            continue
        if in_string:
            if ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            if start is None:
                start = i
            stack.append(ch)
        elif ch in "}]":
            if not stack:
                continue
            opening = stack.pop()
            if (opening == "{" and ch != "}") or (opening == "[" and ch != "]"):
                return None
            if not stack:
                return text[start:i + 1]
    return None


def _request_json_fix(client: OpenAI, previous_output: str) -> Optional[str]:
    """Ask the model to reformat previous_output as a strict JSON object."""
    try:
        prompt = (
            "The previous response contained a recipe but was not valid JSON. "
            "Please reformat ONLY the recipe as valid JSON (no surrounding text) using the same keys. "
            "Here is the original output:\n\n" + previous_output
        )
        resp = client.responses.create(model=config.OPENAI_MODEL, input=prompt)
        return (resp.output_text or "").strip()
    except OpenAIError:
        logger.exception("Error while requesting AI to fix JSON formatting")
        return None


# === FastAPI Endpoints ===
router = APIRouter(prefix="/api/recipes", tags=["ai"])


@router.post("/generate", status_code=201)
def generate_recipe(body: GenerateRecipeRequest,
                    owner: str = Depends(get_owner),
                    repo: RecipeRepository = Depends(get_recipe_repo)):
    recipe = create_recipe_from_ai(body.ingredients, body.preferences.changes())
    saved = repo.create(owner, recipe)
    return {"message": "Recipe generated successfully", "recipe": saved.to_dict()}


@router.post("/analyze-image")
def analyze_image(image: UploadFile = File(...), owner: str = Depends(get_owner)):
    content_type = image.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed")
    data = image.file.read()
    if not data:
        raise HTTPException(status_code=400, detail="No image provided")
    ingredients = analyze_ingredient_image(data, content_type)
    logger.info("Image analyzed for user %s: %d ingredient(s)", owner, len(ingredients))
    return {"ingredients": ingredients}

import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from openai import OpenAIError

from kitchen.api import api_ai
from kitchen.api.api_run import create_app
from kitchen.utilities.errors import UpstreamFailure

RECIPE = {
    "title": "Chicken Stir Fry",
    "description": "Quick weeknight dinner",
    "ingredients": [
        {"name": "Chicken", "quantity": 500, "unit": "g"},
        {"name": "Broccoli", "quantity": "1", "unit": "head"},
    ],
    "instructions": ["Slice chicken", "Stir fry everything"],
    "prepTime": 10,
    "cookTime": 15,
    "servings": 2,
    "difficulty": "Easy",
    "cuisine": "Chinese",
    "dietaryTags": ["high-protein"],
    "nutrition": {"calories": 450, "protein": 40, "carbs": 20, "fat": 18, "fiber": 4},
}


class FakeResponses:
    def __init__(self, outputs):
        self.outputs = list(outputs)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        output = self.outputs.pop(0)
        if isinstance(output, Exception):
            raise output
        return SimpleNamespace(output_text=output)


class FakeClient:
    def __init__(self, *outputs):
        self.responses = FakeResponses(outputs)


@pytest.fixture
def fake_client(monkeypatch):
    def install(*outputs):
        client = FakeClient(*outputs)
        monkeypatch.setattr(api_ai, "_get_openai_client", lambda: client)
        return client
    return install


@pytest.fixture
def client(tmp_path):
    with TestClient(create_app(str(tmp_path))) as c:
        yield c


def test_prompt_includes_preferences():
    prompt = api_ai.build_recipe_prompt(
        ["chicken", "rice"],
        {"dietaryPreferences": ["halal"], "allergies": ["peanuts"], "cuisine": "Thai", "mealType": "lunch"},
    )
    assert "chicken, rice" in prompt
    assert "Avoid these allergens: peanuts" in prompt
    assert "Cuisine style: Thai" in prompt
    assert "Make it a lunch" in prompt
    assert '"dietaryTags"' in prompt


def test_recipe_from_fenced_output(fake_client):
    fake = fake_client("Here you go:\n```json\n" + json.dumps(RECIPE) + "\n```")
    recipe = api_ai.create_recipe_from_ai(["chicken", "broccoli"])
    assert recipe.title == "Chicken Stir Fry"
    assert recipe.difficulty == "easy"
    assert recipe.ingredients[0].quantity == "500"
    assert recipe.is_ai_generated
    assert recipe.id is None
    assert len(fake.responses.calls) == 1


def test_invalid_json_gets_one_fix_request(fake_client):
    fake = fake_client("Sorry, the recipe is: title Chicken", json.dumps(RECIPE))
    recipe = api_ai.create_recipe_from_ai(["chicken"])
    assert recipe.title == "Chicken Stir Fry"
    assert len(fake.responses.calls) == 2


def test_unusable_output_raises(fake_client):
    fake_client("no json here", "still no json")
    with pytest.raises(UpstreamFailure):
        api_ai.create_recipe_from_ai(["chicken"])


def test_recipe_missing_title_raises(fake_client):
    fake_client(json.dumps({**RECIPE, "title": ""}))
    with pytest.raises(UpstreamFailure):
        api_ai.create_recipe_from_ai(["chicken"])


def test_provider_error_raises(fake_client):
    fake_client(OpenAIError("rate limited"))
    with pytest.raises(UpstreamFailure):
        api_ai.create_recipe_from_ai(["chicken"])


def test_no_api_key(monkeypatch):
    monkeypatch.setattr(api_ai, "_get_openai_client", lambda: None)
    with pytest.raises(UpstreamFailure):
        api_ai.create_recipe_from_ai(["chicken"])


def test_generate_endpoint_saves_recipe(client, fake_client):
    fake_client(json.dumps(RECIPE))
    headers = {"X-User-Id": "user-1"}
    resp = client.post("/api/recipes/generate", headers=headers, json={
        "ingredients": ["chicken", "broccoli"],
        "preferences": {"cuisine": "Chinese"},
    })
    assert resp.status_code == 201, resp.text
    recipe = resp.json()["recipe"]
    assert recipe["isAIGenerated"] is True
    assert recipe["createdBy"] == "user-1"

    listed = client.get("/api/recipes", headers=headers).json()
    assert [r["id"] for r in listed["recipes"]] == [recipe["id"]]


def test_generate_endpoint_reports_upstream_failure(client, monkeypatch):
    monkeypatch.setattr(api_ai, "_get_openai_client", lambda: None)
    resp = client.post("/api/recipes/generate", headers={"X-User-Id": "user-1"},
                       json={"ingredients": ["chicken"]})
    assert resp.status_code == 502
    assert resp.json()["detail"] == "AI provider is not configured"
    assert client.get("/api/recipes", headers={"X-User-Id": "user-1"}).json()["total"] == 0


def test_generate_endpoint_requires_ingredients(client):
    resp = client.post("/api/recipes/generate", headers={"X-User-Id": "user-1"}, json={"ingredients": [" "]})
    assert resp.status_code == 422


def test_analyze_image(client, fake_client):
    fake = fake_client('["tomatoes", "onions", "garlic"]')
    resp = client.post(
        "/api/recipes/analyze-image",
        headers={"X-User-Id": "user-1"},
        files={"image": ("fridge.png", b"\x89PNG fake bytes", "image/png")},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json() == {"ingredients": ["tomatoes", "onions", "garlic"]}
    content = fake.responses.calls[0]["input"][0]["content"]
    assert content[1]["image_url"].startswith("data:image/png;base64,")


def test_analyze_image_rejects_other_files(client, fake_client):
    fake_client('["tomatoes"]')
    resp = client.post(
        "/api/recipes/analyze-image",
        headers={"X-User-Id": "user-1"},
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )
    assert resp.status_code == 400

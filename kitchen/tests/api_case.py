import tempfile
import unittest

from fastapi.testclient import TestClient

from kitchen.api.api_run import create_app


class ApiTestCase(unittest.TestCase):
    """Runs every test against a fresh app whose data directory is a temp dir."""
    owner = "user-1"
    other_owner = "user-2"

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        client = TestClient(create_app(self._tmp.name))
        self.client = client.__enter__()
        self.addCleanup(client.__exit__, None, None, None)
        self.headers = {"X-User-Id": self.owner}
        self.other_headers = {"X-User-Id": self.other_owner}

    def create_recipe(self, title, ingredients=(), headers=None, **fields):
        body = {"title": title, "ingredients": list(ingredients), **fields}
        resp = self.client.post("/api/recipes", json=body, headers=headers or self.headers)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["recipe"]

    def create_meal_plan(self, name="Week 1", start="2025-01-06", end="2025-01-12", headers=None, **fields):
        body = {"name": name, "startDate": start, "endDate": end, **fields}
        resp = self.client.post("/api/meal-plans", json=body, headers=headers or self.headers)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["mealPlan"]

    def assign(self, plan_id, day, meal_type, recipe_id, headers=None):
        return self.client.put(
            f"/api/meal-plans/{plan_id}/meals",
            json={"date": day, "mealType": meal_type, "recipeId": recipe_id},
            headers=headers or self.headers,
        )

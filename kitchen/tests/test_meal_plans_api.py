from kitchen.tests.api_case import ApiTestCase


class TestMealPlansAPI(ApiTestCase):

    def test_create_prepopulates_days(self):
        plan = self.create_meal_plan()
        self.assertEqual(plan["user"], self.owner)
        self.assertEqual(len(plan["meals"]), 7)
        self.assertEqual(plan["meals"][0], {
            "date": "2025-01-06", "breakfast": None, "lunch": None, "dinner": None, "snacks": [],
        })
        self.assertTrue(plan["isActive"])

    def test_create_rejects_bad_ranges_and_duplicates(self):
        resp = self.client.post("/api/meal-plans", headers=self.headers, json={
            "name": "Backwards", "startDate": "2025-01-12", "endDate": "2025-01-06",
        })
        self.assertEqual(resp.status_code, 400)

        resp = self.client.post("/api/meal-plans", headers=self.headers, json={
            "name": "Twice", "startDate": "2025-01-06", "endDate": "2025-01-12",
            "meals": [{"date": "2025-01-06"}, {"date": "2025-01-06T12:00:00Z"}],
        })
        self.assertEqual(resp.status_code, 400)

        resp = self.client.post("/api/meal-plans", headers=self.headers, json={"name": "No dates"})
        self.assertEqual(resp.status_code, 422)

    def test_create_with_unknown_recipe_rejected(self):
        resp = self.client.post("/api/meal-plans", headers=self.headers, json={
            "name": "Week", "startDate": "2025-01-06", "endDate": "2025-01-12",
            "meals": [{"date": "2025-01-06", "lunch": "missing"}],
        })
        self.assertEqual(resp.status_code, 404)

    def test_assign_and_clear_slots(self):
        soup = self.create_recipe("Soup")
        plan = self.create_meal_plan()

        resp = self.assign(plan["id"], "2025-01-06T18:00:00.000Z", "dinner", soup["id"])
        self.assertEqual(resp.status_code, 200, resp.text)
        monday = resp.json()["mealPlan"]["meals"][0]
        self.assertEqual(monday["dinner"]["title"], "Soup")
        self.assertEqual(monday["dinner"]["id"], soup["id"])

        resp = self.client.request("DELETE", f"/api/meal-plans/{plan['id']}/meals", headers=self.headers,
                                   json={"date": "2025-01-06", "mealType": "dinner"})
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()["mealPlan"]["meals"][0]["dinner"])

    def test_assign_outside_existing_entries_appends(self):
        soup = self.create_recipe("Soup")
        plan = self.create_meal_plan()
        resp = self.assign(plan["id"], "2025-02-01", "lunch", soup["id"])
        meals = resp.json()["mealPlan"]["meals"]
        self.assertEqual(len(meals), 8)
        self.assertEqual(meals[-1]["date"], "2025-02-01")

    def test_snack_removal_needs_recipe_id(self):
        nuts = self.create_recipe("Trail mix")
        plan = self.create_meal_plan()
        self.assign(plan["id"], "2025-01-07", "snacks", nuts["id"])
        self.assign(plan["id"], "2025-01-07", "snacks", nuts["id"])

        url = f"/api/meal-plans/{plan['id']}/meals"
        resp = self.client.request("DELETE", url, headers=self.headers,
                                   json={"date": "2025-01-07", "mealType": "snacks"})
        snacks = resp.json()["mealPlan"]["meals"][1]["snacks"]
        self.assertEqual([s["id"] for s in snacks], [nuts["id"]])

        resp = self.client.request("DELETE", url, headers=self.headers,
                                   json={"date": "2025-01-07", "mealType": "snacks", "recipeId": nuts["id"]})
        self.assertEqual(resp.json()["mealPlan"]["meals"][1]["snacks"], [])

    def test_assign_unknown_or_foreign_recipe(self):
        foreign = self.create_recipe("Not yours", headers=self.other_headers)
        plan = self.create_meal_plan()

        resp = self.assign(plan["id"], "2025-01-06", "lunch", "does-not-exist")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "Recipe not found")

        resp = self.assign(plan["id"], "2025-01-06", "lunch", foreign["id"])
        self.assertEqual(resp.status_code, 404)

        stored = self.client.get(f"/api/meal-plans/{plan['id']}", headers=self.headers).json()
        self.assertIsNone(stored["meals"][0]["lunch"])

    def test_invalid_meal_type(self):
        soup = self.create_recipe("Soup")
        plan = self.create_meal_plan()
        resp = self.assign(plan["id"], "2025-01-06", "brunch", soup["id"])
        self.assertEqual(resp.status_code, 422)

    def test_other_owner_gets_not_found(self):
        plan = self.create_meal_plan()
        resp = self.client.get(f"/api/meal-plans/{plan['id']}", headers=self.other_headers)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "Meal plan not found")

    def test_list_and_update(self):
        first = self.create_meal_plan("January", "2025-01-06", "2025-01-12")
        self.create_meal_plan("February", "2025-02-03", "2025-02-09", isActive=False)

        data = self.client.get("/api/meal-plans", headers=self.headers).json()
        self.assertEqual([p["name"] for p in data["mealPlans"]], ["February", "January"])
        active = self.client.get("/api/meal-plans", headers=self.headers, params={"active": "true"}).json()
        self.assertEqual([p["name"] for p in active["mealPlans"]], ["January"])

        resp = self.client.put(f"/api/meal-plans/{first['id']}", headers=self.headers,
                               json={"name": "January week 2", "notes": "Batch cook on Sunday"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["mealPlan"]["name"], "January week 2")
        self.assertEqual(len(resp.json()["mealPlan"]["meals"]), 7)

        resp = self.client.put(f"/api/meal-plans/{first['id']}", headers=self.headers,
                               json={"endDate": "2025-01-01"})
        self.assertEqual(resp.status_code, 400)

    def test_delete(self):
        plan = self.create_meal_plan()
        resp = self.client.delete(f"/api/meal-plans/{plan['id']}", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        resp = self.client.get(f"/api/meal-plans/{plan['id']}", headers=self.headers)
        self.assertEqual(resp.status_code, 404)

    def test_generate_shopping_list(self):
        pancakes = self.create_recipe("Pancakes", [
            {"name": "Flour", "quantity": "1", "unit": "cup"},
            {"name": "Egg", "quantity": "2", "unit": ""},
        ])
        custard = self.create_recipe("Custard", [
            {"name": "egg", "quantity": "1", "unit": ""},
            {"name": "Milk", "quantity": "1", "unit": "cup"},
        ])
        plan = self.create_meal_plan()
        self.assign(plan["id"], "2025-01-06", "breakfast", pancakes["id"])
        self.assign(plan["id"], "2025-01-06", "lunch", custard["id"])

        resp = self.client.post(f"/api/meal-plans/{plan['id']}/shopping-list", headers=self.headers)
        self.assertEqual(resp.status_code, 201, resp.text)
        data = resp.json()
        self.assertEqual(data["skippedRecipeIds"], [])
        shopping_list = data["shoppingList"]
        self.assertEqual(shopping_list["name"], "Shopping List for Week 1")
        self.assertEqual(shopping_list["mealPlan"], plan["id"])
        self.assertEqual(shopping_list["user"], self.owner)
        self.assertEqual(
            [(i["name"], i["quantity"], i["category"]) for i in shopping_list["items"]],
            [("Flour", "1", "pantry"), ("Egg", "3", "dairy"), ("Milk", "1", "dairy")],
        )
        self.assertEqual(shopping_list["totalEstimatedCost"], 0)
        self.assertFalse(shopping_list["isCompleted"])

        stored = self.client.get(f"/api/shopping-lists/{shopping_list['id']}", headers=self.headers)
        self.assertEqual(stored.status_code, 200)

    def test_generate_skips_deleted_recipes(self):
        stew = self.create_recipe("Stew", [{"name": "Beef", "quantity": "500", "unit": "g"}])
        plan = self.create_meal_plan()
        self.assign(plan["id"], "2025-01-08", "dinner", stew["id"])
        self.client.delete(f"/api/recipes/{stew['id']}", headers=self.headers)

        resp = self.client.post(f"/api/meal-plans/{plan['id']}/shopping-list", headers=self.headers)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["skippedRecipeIds"], [stew["id"]])
        self.assertEqual(resp.json()["shoppingList"]["items"], [])

    def test_generate_for_foreign_plan(self):
        plan = self.create_meal_plan(headers=self.other_headers)
        resp = self.client.post(f"/api/meal-plans/{plan['id']}/shopping-list", headers=self.headers)
        self.assertEqual(resp.status_code, 404)

    def test_nutrition(self):
        oats = self.create_recipe("Oats", nutrition={"calories": 300, "protein": 10})
        salad = self.create_recipe("Salad", nutrition={"calories": 150, "fiber": 6})
        plan = self.create_meal_plan()
        self.assign(plan["id"], "2025-01-06", "breakfast", oats["id"])
        self.assign(plan["id"], "2025-01-06", "snacks", salad["id"])
        self.assign(plan["id"], "2025-01-07", "breakfast", oats["id"])

        data = self.client.get(f"/api/meal-plans/{plan['id']}/nutrition", headers=self.headers).json()
        self.assertEqual(data["totals"]["calories"], 750)
        self.assertEqual(data["totals"]["protein"], 20)
        self.assertEqual(data["days"][0]["calories"], 450)
        self.assertEqual(data["days"][0]["meals"]["snacks"][0]["title"], "Salad")
        self.assertEqual(data["days"][2]["calories"], 0)

    def test_pdf_export(self):
        soup = self.create_recipe("Soup")
        plan = self.create_meal_plan(notes="Cook <double> portions & freeze")
        self.assign(plan["id"], "2025-01-06", "dinner", soup["id"])
        resp = self.client.get(f"/api/meal-plans/{plan['id']}/pdf", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers["content-type"], "application/pdf")
        self.assertTrue(resp.content.startswith(b"%PDF"))

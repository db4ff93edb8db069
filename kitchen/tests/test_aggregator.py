import unittest

from kitchen.domain.Ingredient import Ingredient
from kitchen.domain.Recipe import Recipe
from kitchen.logic.shopping.aggregator import aggregate, format_quantity, parse_quantity


def recipe(title, *ingredients):
    return Recipe(title=title, ingredients=[Ingredient(*i) for i in ingredients])


class TestQuantityParsing(unittest.TestCase):

    def test_leading_number(self):
        self.assertEqual(parse_quantity("2 cups"), 2.0)
        self.assertEqual(parse_quantity("1.5kg"), 1.5)
        self.assertEqual(parse_quantity("  3"), 3.0)
        self.assertEqual(parse_quantity(".5"), 0.5)
        self.assertEqual(parse_quantity("-1"), -1.0)
        self.assertEqual(parse_quantity("1e2g"), 100.0)
        self.assertEqual(parse_quantity("1/2"), 1.0)

    def test_unparseable_is_zero(self):
        self.assertEqual(parse_quantity("a pinch"), 0.0)
        self.assertEqual(parse_quantity(""), 0.0)
        self.assertEqual(parse_quantity(None), 0.0)

    def test_format(self):
        self.assertEqual(format_quantity(3.0), "3")
        self.assertEqual(format_quantity(1.5), "1.5")
        self.assertEqual(format_quantity(0.1 + 0.2), "0.30000000000000004")


class TestAggregate(unittest.TestCase):

    def test_same_ingredient_is_summed(self):
        items = aggregate([recipe("A", ("egg", "2", "")), recipe("B", ("egg", "2", ""))])
        self.assertEqual(items, [{"name": "egg", "quantity": "4", "unit": "", "category": "dairy"}])

    def test_single_occurrence_keeps_text(self):
        items = aggregate([recipe("A", ("Rice", "2 cups", "cup"))])
        self.assertEqual(items[0]["quantity"], "2 cups")

    def test_merge_parses_leading_number(self):
        items = aggregate([recipe("A", ("Rice", "2 cups", "cup")), recipe("B", ("rice", "1 cup", "cup"))])
        self.assertEqual(items[0]["quantity"], "3")

    def test_unparseable_contributes_zero(self):
        items = aggregate([recipe("A", ("Salt", "a pinch", "")), recipe("B", ("salt", "1", "tsp"))])
        self.assertEqual(items[0]["quantity"], "1")
        items = aggregate([recipe("A", ("Salt", "a pinch", "")), recipe("B", ("Salt", "a pinch", ""))])
        self.assertEqual(items[0]["quantity"], "0")

    def test_first_name_and_unit_win(self):
        items = aggregate([recipe("A", ("Sugar", "100", "g")), recipe("B", ("SUGAR", "0.5", "kg"))])
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]["name"], "Sugar")
        self.assertEqual(items[0]["unit"], "g")
        self.assertEqual(items[0]["quantity"], "100.5")

    def test_order_is_first_seen(self):
        items = aggregate([
            recipe("A", ("Flour", "1", "cup"), ("Egg", "2", "")),
            recipe("B", ("egg", "1", ""), ("Milk", "1", "cup")),
        ])
        self.assertEqual([i["name"] for i in items], ["Flour", "Egg", "Milk"])

    def test_recipe_used_twice_counts_twice(self):
        pancakes = recipe("Pancakes", ("Milk", "1", "cup"))
        items = aggregate([pancakes, pancakes])
        self.assertEqual(items[0]["quantity"], "2")

    def test_category_follows_display_name(self):
        items = aggregate([recipe("A", ("Chicken", "1", "kg"))])
        self.assertEqual(items[0]["category"], "meat")

    def test_empty_input(self):
        self.assertEqual(aggregate([]), [])
        self.assertEqual(aggregate([recipe("Water only")]), [])

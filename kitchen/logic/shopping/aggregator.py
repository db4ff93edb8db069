"""Ingredient aggregator.

Merges ingredient lines across recipes into one line per case-folded name.
This is the only place where free-text quantities are turned into numbers:

  * the first occurrence keeps its quantity text untouched ("2 cups" stays "2 cups");
  * every merge parses both sides with a leading-number float parse
    ("2 cups" -> 2, "1.5kg" -> 1.5) and unparseable text ("a pinch") counts as 0;
  * the sum is written back as text with no rounding ("3", "1.5").

Units are taken from the first occurrence; later units are dropped without
conversion or mismatch checks.
"""
import math
import re
from typing import Dict, Iterable, List, Any

from kitchen.domain.Recipe import Recipe
from kitchen.logic.shopping.categorizer import categorize

_LEADING_NUMBER = re.compile(
    r'^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))'
)


def parse_quantity(text) -> float:
    """Leading-number float parse of a free-text quantity; 0.0 when no number leads the text."""
    match = _LEADING_NUMBER.match(str(text or ''))
    if not match:
        return 0.0
    value = float(match.group(1).replace('Infinity', 'inf'))
    return 0.0 if math.isnan(value) else value


def format_quantity(value: float) -> str:
    """Shortest text form of a summed quantity: integral values drop the decimal point."""
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def merge_quantities(existing: str, new: str) -> str:
    return format_quantity(parse_quantity(existing) + parse_quantity(new))


def aggregate(recipes: Iterable[Recipe]) -> List[Dict[str, Any]]:
    """Merge the ingredients of the given recipes.

    Args:
        recipes: Recipe objects in plan order; a recipe listed twice contributes twice.

    Returns:
        List of dicts { name, quantity, unit, category } in first-seen order of
        the case-folded ingredient name.
    """
    merged: Dict[str, Dict[str, Any]] = {}
    for recipe in recipes:
        for ingredient in recipe.ingredients:
            if not ingredient.name:
                continue
            key = ingredient.name.lower()
            existing = merged.get(key)
            if existing is not None:
                existing['quantity'] = merge_quantities(existing['quantity'], ingredient.quantity)
                continue
            merged[key] = {
                'name': ingredient.name,
                'quantity': ingredient.quantity,
                'unit': ingredient.unit or '',
                'category': categorize(ingredient.name),
            }
    return list(merged.values())


__all__ = ['aggregate', 'parse_quantity', 'format_quantity', 'merge_quantities']

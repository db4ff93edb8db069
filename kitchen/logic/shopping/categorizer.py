"""Ingredient categorizer.

categorize(name) maps an ingredient name to a shopping category by
case-insensitive keyword containment. Categories are tried in table order;
the first one with a matching keyword wins ("bell pepper" is produce even
though "pepper" is also a pantry keyword).
"""
from typing import Tuple

from kitchen.utilities.constants import DEFAULT_CATEGORY

CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ('produce', ('tomato', 'onion', 'garlic', 'carrot', 'potato', 'lettuce', 'spinach', 'apple',
                 'banana', 'lemon', 'lime', 'cucumber', 'pepper', 'mushroom', 'broccoli',
                 'cauliflower', 'celery', 'herbs', 'parsley', 'cilantro', 'basil', 'thyme')),
    ('meat', ('chicken', 'beef', 'pork', 'turkey', 'fish', 'salmon', 'tuna', 'shrimp', 'lamb',
              'bacon', 'sausage')),
    ('dairy', ('milk', 'cheese', 'butter', 'yogurt', 'cream', 'egg', 'cottage cheese')),
    ('pantry', ('rice', 'pasta', 'flour', 'sugar', 'salt', 'pepper', 'oil', 'vinegar', 'soy sauce',
                'spices', 'beans', 'lentils', 'oats', 'quinoa', 'nuts', 'seeds')),
    ('frozen', ('frozen', 'ice cream')),
    ('bakery', ('bread', 'rolls', 'bagels', 'muffins')),
    ('beverages', ('water', 'juice', 'soda', 'coffee', 'tea', 'wine', 'beer')),
)


def categorize(ingredient_name: str) -> str:
    """Return the shopping category for an ingredient name ('other' when nothing matches)."""
    name = (ingredient_name or '').lower()
    if not name:
        return DEFAULT_CATEGORY
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


__all__ = ['categorize', 'CATEGORY_KEYWORDS']

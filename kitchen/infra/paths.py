from pathlib import Path

# Collection names; each collection is stored as <data dir>/<name>.json
RECIPES = 'recipes'
MEAL_PLANS = 'meal_plans'
SHOPPING_LISTS = 'shopping_lists'
COLLECTIONS = (RECIPES, MEAL_PLANS, SHOPPING_LISTS)


def collection_file(data_dir: Path, collection: str) -> Path:
    return Path(data_dir) / f'{collection}.json'


__all__ = ['RECIPES', 'MEAL_PLANS', 'SHOPPING_LISTS', 'COLLECTIONS', 'collection_file']

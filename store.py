"""
JSON file store for the recipe collection.

The whole collection lives in one JSON array. Every operation reads the full
file, changes the list in memory and writes the full file back, all while
holding the store's lock. The lock only covers threads of one process.
"""
import json
import logging
import threading
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


class RecipeStoreError(Exception):
    pass


class DuplicateRecipe(RecipeStoreError):
    pass


class RecipeNotFound(RecipeStoreError):
    pass


class StorageError(RecipeStoreError):
    pass


def has_id(recipe, recipe_id: str) -> bool:
    # Non-object entries in the file never match.
    return isinstance(recipe, dict) and recipe.get("id") == recipe_id


def stamp() -> str:
    # zh-CN locale layout: 2024/1/5 14:03:07
    now = datetime.now()
    return f"{now.year}/{now.month}/{now.day} {now:%H:%M:%S}"


class RecipeStore:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def load(self) -> list[dict]:
        """Read the collection. Returns [] on any read or parse failure."""
        try:
            recipes = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Failed to read recipes from %s: %s", self.path, exc)
            return []
        if not isinstance(recipes, list):
            logger.error("Recipes file %s does not hold a JSON array", self.path)
            return []
        return recipes

    def save(self, recipes: list[dict]) -> bool:
        try:
            self.path.write_text(
                json.dumps(recipes, indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to write recipes to %s: %s", self.path, exc)
            return False
        return True

    def list_recipes(self) -> list[dict]:
        with self._lock:
            return self.load()

    def create(self, recipe: dict) -> dict:
        with self._lock:
            recipes = self.load()
            if any(has_id(r, recipe["id"]) for r in recipes):
                raise DuplicateRecipe(recipe["id"])
            recipe = {**recipe, "time": stamp()}
            recipes.append(recipe)
            if not self.save(recipes):
                raise StorageError(str(self.path))
            return recipe

    def update(self, recipe_id: str, recipe: dict) -> dict:
        with self._lock:
            recipes = self.load()
            index = next(
                (i for i, r in enumerate(recipes) if has_id(r, recipe_id)), None
            )
            if index is None:
                raise RecipeNotFound(recipe_id)
            recipe = {**recipe, "time": stamp()}
            recipes[index] = recipe
            if not self.save(recipes):
                raise StorageError(str(self.path))
            return recipe

    def delete(self, recipe_id: str) -> int:
        """Remove every record with this id and return how many went."""
        with self._lock:
            recipes = self.load()
            kept = [r for r in recipes if not has_id(r, recipe_id)]
            if len(kept) == len(recipes):
                raise RecipeNotFound(recipe_id)
            if not self.save(kept):
                raise StorageError(str(self.path))
            return len(recipes) - len(kept)

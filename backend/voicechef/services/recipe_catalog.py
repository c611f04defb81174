import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError

from ..exceptions import RecipeNotFound
from ..models.recipe import Recipe
from .sample_recipes import SAMPLE_RECIPES

log = logging.getLogger(__name__)


class RecipeCatalog:
    """Read-only recipe source keyed by recipe id."""

    def __init__(self, recipes: Iterable[Recipe]):
        self._recipes: Dict[str, Recipe] = {}
        for recipe in recipes:
            self._recipes[recipe.id] = recipe

    @classmethod
    def from_file(cls, path: Optional[str]) -> "RecipeCatalog":
        """
        Load a JSON list of recipes. Without a path, or when the file is
        unusable, the bundled sample recipes are served instead.
        """
        if not path:
            return cls.sample()

        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
            recipes = [Recipe.model_validate(item) for item in raw]
        except (OSError, json.JSONDecodeError, ValidationError, TypeError) as e:
            log.warning(f"Could not load recipes from {path}, using samples: {e}")
            return cls.sample()

        log.info(f"Loaded {len(recipes)} recipes from {path}")
        return cls(recipes)

    @classmethod
    def sample(cls) -> "RecipeCatalog":
        return cls(Recipe.model_validate(item) for item in SAMPLE_RECIPES)

    def get(self, recipe_id: str) -> Recipe:
        try:
            return self._recipes[str(recipe_id)]
        except KeyError:
            raise RecipeNotFound(recipe_id) from None

    def add(self, recipe: Recipe) -> None:
        self._recipes[recipe.id] = recipe

    def list(self) -> List[Recipe]:
        return list(self._recipes.values())

    def search(self, query: str) -> List[Recipe]:
        """Case-insensitive match on title, category and ingredients."""
        needle = query.lower().strip()
        if not needle:
            return self.list()

        results = []
        for recipe in self._recipes.values():
            haystack = [recipe.title, recipe.category or "", *recipe.ingredients]
            if any(needle in field.lower() for field in haystack):
                results.append(recipe)
        return results

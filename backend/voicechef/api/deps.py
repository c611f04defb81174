from functools import lru_cache

from ..core.config import get_settings
from ..services.favorites import FavoritesStore
from ..services.recipe_catalog import RecipeCatalog


@lru_cache()
def get_catalog() -> RecipeCatalog:
    return RecipeCatalog.from_file(get_settings().recipes_path)


@lru_cache()
def get_favorites() -> FavoritesStore:
    return FavoritesStore(get_settings().favorites_path)

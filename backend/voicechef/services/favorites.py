import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List

from ..exceptions import FavoritesStoreError

log = logging.getLogger(__name__)


class FavoritesStore:
    """
    Durable recipe-id -> bool mapping kept in a small JSON file.

    Every write replaces the file atomically so a crash mid-write leaves the
    previous favorites intact.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._favorites: Dict[str, bool] = self._load()

    def _load(self) -> Dict[str, bool]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            log.warning(f"Cannot read favorites from {self.path}, starting empty: {e}")
            return {}
        if not isinstance(data, dict):
            log.warning(f"Favorites file {self.path} is not a JSON object, starting empty")
            return {}
        return {str(key): bool(value) for key, value in data.items()}

    def _save(self) -> None:
        tmp = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".favorites-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._favorites, f, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except OSError as e:
            if tmp is not None and os.path.exists(tmp):
                os.unlink(tmp)
            raise FavoritesStoreError(f"Cannot write favorites to {self.path}: {e}") from e

    def is_favorite(self, recipe_id: str) -> bool:
        return self._favorites.get(recipe_id, False)

    def set_favorite(self, recipe_id: str, favorited: bool) -> None:
        if self.is_favorite(recipe_id) == favorited and recipe_id in self._favorites:
            return
        previous = self._favorites.get(recipe_id)
        self._favorites[recipe_id] = favorited
        try:
            self._save()
        except FavoritesStoreError:
            if previous is None:
                del self._favorites[recipe_id]
            else:
                self._favorites[recipe_id] = previous
            raise
        log.info(f"Recipe {recipe_id} favorited={favorited}")

    def toggle_favorite(self, recipe_id: str) -> bool:
        favorited = not self.is_favorite(recipe_id)
        self.set_favorite(recipe_id, favorited)
        return favorited

    def favorites(self) -> List[str]:
        return sorted(recipe_id for recipe_id, value in self._favorites.items() if value)

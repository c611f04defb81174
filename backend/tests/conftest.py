import pytest

from backend.voicechef.core.narration import NarrationCoordinator
from backend.voicechef.core.session import CookingSession
from backend.voicechef.models.recipe import Recipe, RecipeStep
from backend.voicechef.services.favorites import FavoritesStore
from backend.voicechef.services.recipe_catalog import RecipeCatalog


class FakeSpeaker:
    """Stands in for the browser's speech synthesis."""

    def __init__(self):
        self.said = []
        self.hushed = []

    async def say(self, utterance_id, text):
        self.said.append((utterance_id, text))

    async def hush(self, utterance_id):
        self.hushed.append(utterance_id)


class CountingFavorites(FavoritesStore):
    def __init__(self, path):
        super().__init__(path)
        self.calls = []

    def set_favorite(self, recipe_id, favorited):
        self.calls.append((recipe_id, favorited))
        super().set_favorite(recipe_id, favorited)


@pytest.fixture
def eggs():
    return Recipe(
        id="eggs",
        title="Soft Boiled Eggs",
        ingredients=["2 eggs", "water", "salt"],
        steps=[
            RecipeStep(instruction="Bring water to a boil.", duration_seconds=0),
            RecipeStep(instruction="Lower the eggs in.", duration_seconds=5),
            RecipeStep(instruction="Cool under cold water.", duration_seconds=3),
            RecipeStep(instruction="Peel and season.", duration_seconds=0),
        ],
    )


@pytest.fixture
def toast():
    return Recipe(
        id="toast",
        title="Toast",
        ingredients=["bread"],
        steps=[RecipeStep(instruction="Toast the bread.", duration_seconds=0)],
    )


@pytest.fixture
def speaker():
    return FakeSpeaker()


@pytest.fixture
def favorites(tmp_path):
    return CountingFavorites(str(tmp_path / "favorites.json"))


@pytest.fixture
def make_session(eggs, toast, speaker, favorites):
    def make(**kwargs):
        return CookingSession(
            catalog=RecipeCatalog([eggs]),
            favorites=favorites,
            narrator=NarrationCoordinator(speaker.say, speaker.hush),
            default_recipe=toast,
            **kwargs,
        )

    return make

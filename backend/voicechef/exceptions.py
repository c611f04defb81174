class VoiceChefError(Exception):
    """Base class for errors raised by voicechef services."""


class RecipeNotFound(VoiceChefError):
    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe '{recipe_id}' not found")
        self.recipe_id = recipe_id


class FavoritesStoreError(VoiceChefError):
    """The favorites file could not be read or written."""


class TranscriberError(VoiceChefError):
    """The speech-to-text service rejected the session or dropped it."""

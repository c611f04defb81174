from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    openai_api_key: str = ""
    sampling_rate_in: int = 48_000
    sampling_rate_out: int = 24_000

    tick_interval_seconds: float = 1.0
    recipes_path: Optional[str] = None
    favorites_path: str = "favorites.json"
    default_recipe_id: str = "rajma-chawal"
    static_dir: str = "frontend/static"
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_prefix": "",
        "extra": "ignore",
    }

    @property
    def transcription_enabled(self) -> bool:
        return bool(self.openai_api_key) and self.openai_api_key != "your_openai_api_key_here"

@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()

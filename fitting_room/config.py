"""Configuration management for the fitting room engine."""

from pathlib import Path
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class GeminiConfig(BaseModel):
    """Gemini image generation settings."""
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.5-flash-image"
    timeout: float = 120.0
    temperature: float = 0.4
    
    def generate_url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"


class FetchConfig(BaseModel):
    """Garment image download settings."""
    timeout: float = 30.0


class StudioConfig(BaseSettings):
    """Main engine configuration."""
    
    # Persistence
    store_path: Path = Path("data/fitting_room.json")
    saved_outfits_key: str = "savedOutfits"
    
    log_level: str = "INFO"
    
    # Sub-configs
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    
    # Gemini credentials (loaded from .env)
    gemini_api_key: str | None = None
    
    class Config:
        env_file = ".env"
        env_prefix = ""
        env_nested_delimiter = "__"
        extra = "ignore"


def load_config() -> StudioConfig:
    """Load configuration from environment and defaults."""
    return StudioConfig()

"""External collaborators of the composition engine."""

from .garment_registry import GarmentRegistry
from .gemini_client import GeminiImageClient, ImageGenerator, run_generation
from .image_fetcher import ImageFetcher
from .outfit_index import SavedOutfitIndex
from .store import DurableStore, JsonFileStore, MemoryStore

__all__ = [
    "GarmentRegistry",
    "GeminiImageClient",
    "ImageGenerator",
    "run_generation",
    "ImageFetcher",
    "SavedOutfitIndex",
    "DurableStore",
    "JsonFileStore",
    "MemoryStore",
]

"""Layered outfit composition on top of a model image."""

from .config import StudioConfig, load_config
from .engine import EditOutcome, HistoryStack, OutfitStudio

__version__ = "1.0.0"

__all__ = [
    "StudioConfig",
    "load_config",
    "EditOutcome",
    "HistoryStack",
    "OutfitStudio",
]

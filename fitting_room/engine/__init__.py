"""Outfit composition engine."""

from .history import HistoryStack
from .studio import EditOutcome, OutfitStudio

__all__ = [
    "HistoryStack",
    "EditOutcome",
    "OutfitStudio",
]

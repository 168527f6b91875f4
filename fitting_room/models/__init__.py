"""Data models for the outfit composition engine."""

from .garment import Garment
from .layer import OutfitLayer, PoseCache
from .pose import DEFAULT_POSE, DEFAULT_POSE_INDEX, POSE_INSTRUCTIONS, pose_index
from .saved_outfit import SavedOutfit

__all__ = [
    "Garment",
    "OutfitLayer",
    "PoseCache",
    "SavedOutfit",
    "POSE_INSTRUCTIONS",
    "DEFAULT_POSE",
    "DEFAULT_POSE_INDEX",
    "pose_index",
]

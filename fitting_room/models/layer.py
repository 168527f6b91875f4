"""Outfit layer and pose cache models."""

from pydantic import BaseModel, Field, computed_field

from .garment import Garment
from .pose import DEFAULT_POSE


class PoseCache(BaseModel):
    """Pose instruction -> generated image reference for one layer.
    
    Entries are only ever added. The first entry is the layer's
    representative image, the base for every later pose rendering.
    """
    
    images: dict[str, str] = Field(default_factory=dict)
    
    def __contains__(self, pose: str) -> bool:
        return pose in self.images
    
    def __len__(self) -> int:
        return len(self.images)
    
    def has(self, pose: str) -> bool:
        return pose in self.images
    
    def get(self, pose: str) -> str | None:
        return self.images.get(pose)
    
    def add(self, pose: str, image: str) -> None:
        """Insert a new entry. Existing entries are never replaced."""
        if pose in self.images:
            raise ValueError(f"Pose already cached: {pose!r}")
        self.images[pose] = image
    
    @property
    def representative(self) -> str | None:
        """The first-inserted image, or None for an empty cache."""
        return next(iter(self.images.values()), None)
    
    @property
    def poses(self) -> list[str]:
        return list(self.images)


class OutfitLayer(BaseModel):
    """One step of the composition history."""
    
    garment: Garment | None = None
    pose_cache: PoseCache
    
    @classmethod
    def create(cls, image: str, garment: Garment | None = None, pose: str = DEFAULT_POSE) -> "OutfitLayer":
        """Build a layer whose cache starts with ``image`` under ``pose``."""
        return cls(garment=garment, pose_cache=PoseCache(images={pose: image}))
    
    @computed_field
    @property
    def garment_id(self) -> str | None:
        return self.garment.id if self.garment else None
    
    @property
    def is_root(self) -> bool:
        return self.garment is None
    
    @property
    def representative_image(self) -> str | None:
        return self.pose_cache.representative

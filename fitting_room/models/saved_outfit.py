"""Saved outfit model."""

import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


def new_outfit_id() -> str:
    return f"outfit-{uuid.uuid4().hex}"


class SavedOutfit(BaseModel):
    """A named, immutable snapshot of a garment sequence."""
    
    model_config = ConfigDict(frozen=True)
    
    id: str = Field(default_factory=new_outfit_id)
    name: str
    garment_ids: list[str] = Field(description="Garments in layering order, root excluded")
    preview_url: str
    created_at: datetime = Field(default_factory=datetime.now)

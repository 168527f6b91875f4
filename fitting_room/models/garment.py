"""Garment models."""

from pydantic import BaseModel, ConfigDict, Field


class Garment(BaseModel):
    """A wearable item that can be layered onto the model.
    
    Garments are immutable and identified by ``id`` alone; two garments with
    the same id are the same garment as far as the engine is concerned.
    """
    
    model_config = ConfigDict(frozen=True)
    
    id: str = Field(min_length=1)
    name: str
    url: str = Field(description="http(s) URL, data: URL, or local file path of the garment image")
    
    # Optional catalog metadata
    brand: str | None = None
    material: str | None = None
    price: float | None = Field(default=None, ge=0)
    
    def label(self) -> str:
        """Short human-readable label, e.g. for progress messages."""
        if self.brand:
            return f"{self.name} ({self.brand})"
        return self.name

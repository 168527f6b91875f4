# Test fixtures and configuration
import io
import itertools
import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from PIL import Image

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fitting_room.engine import OutfitStudio
from fitting_room.models import Garment
from fitting_room.services import GarmentRegistry, ImageFetcher, MemoryStore, SavedOutfitIndex
from fitting_room.utils.images import to_data_url


def make_png(color=(255, 0, 0)) -> bytes:
    """Encode a 1x1 PNG with Pillow."""
    output = io.BytesIO()
    Image.new("RGB", (1, 1), color).save(output, format="PNG")
    return output.getvalue()


@pytest.fixture
def png_bytes():
    """Minimal valid PNG image bytes."""
    return make_png()


@pytest.fixture
def garments():
    """A small catalog whose images are inline data URLs (no network)."""
    return {
        "jacket": Garment(id="jacket", name="Cloud Jacket", url=to_data_url(make_png((0, 0, 255))), brand="Google Cloud"),
        "tee": Garment(id="tee", name="Gemini Tee", url=to_data_url(make_png((0, 255, 0))), price=24.99),
        "sweat": Garment(id="sweat", name="Gemini Sweat", url=to_data_url(make_png((9, 9, 9)))),
    }


@pytest.fixture
def generator():
    """Fake image generation service producing traceable image references.
    
    apply_garment(base, garment) -> "<base>+g<n>"; render_pose(base, pose) -> "<base>@<pose>"
    """
    counter = itertools.count(1)
    
    async def apply_garment(base_image, garment_image):
        return f"{base_image}+g{next(counter)}"
    
    async def render_pose(base_image, pose):
        return f"{base_image}@{pose}"
    
    fake = AsyncMock()
    fake.apply_garment = AsyncMock(side_effect=apply_garment)
    fake.render_pose = AsyncMock(side_effect=render_pose)
    return fake


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def studio(generator, garments, store):
    """Studio wired to fakes, with model image ``M0`` loaded."""
    outfits = SavedOutfitIndex(store)
    outfits.load_all()
    studio = OutfitStudio(
        generator=generator,
        registry=GarmentRegistry(garments.values()),
        outfits=outfits,
        fetcher=ImageFetcher(),
    )
    studio.initialize("M0")
    return studio

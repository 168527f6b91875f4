"""Default garment catalog available at startup."""

from .models import Garment

DEFAULT_CATALOG: tuple[Garment, ...] = (
    Garment(
        id="gemini-sweat",
        name="Gemini Sweat",
        url="https://raw.githubusercontent.com/ammaarreshi/app-images/refs/heads/main/gemini-sweat-2.png",
        brand="Google Store",
        material="80% Cotton, 20% Polyester",
        price=59.99,
    ),
    Garment(
        id="gemini-tee",
        name="Gemini Tee",
        url="https://raw.githubusercontent.com/ammaarreshi/app-images/refs/heads/main/Gemini-tee.png",
        brand="Google Store",
        material="100% Organic Cotton",
        price=24.99,
    ),
    Garment(
        id="google-cloud-jacket",
        name="Cloud Jacket",
        url="https://raw.githubusercontent.com/ammaarreshi/app-images/main/google-cloud-jacket.png",
        brand="Google Cloud",
        material="100% Recycled Polyester",
        price=85.50,
    ),
)

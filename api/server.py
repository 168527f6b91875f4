"""FastAPI server for the fitting room.

Drives one OutfitStudio session:
- model: base image of the person (data URL or http URL)
- garments: catalog entries or uploaded images layered on top
- poses / saved outfits on the current composition
"""

import base64
import binascii

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from fitting_room.config import load_config
from fitting_room.engine import EditOutcome, OutfitStudio
from fitting_room.errors import FittingRoomError, ValidationFailure, friendly_error_message
from fitting_room.models import POSE_INSTRUCTIONS, Garment, OutfitLayer, SavedOutfit
from fitting_room.utils.images import is_data_url, split_data_url
from fitting_room.utils.logging import configure_logging


app = FastAPI(
    title="Fitting Room API",
    description="Layered virtual try-on with undo/redo, poses and saved outfits",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ModelRequest(BaseModel):
    """Request body for loading the model image."""
    image: str  # data URL or http(s) URL


class UploadRequest(BaseModel):
    """Request body for a custom garment upload."""
    image_base64: str  # data URL or raw base64
    filename: str = "Custom garment"


class PoseRequest(BaseModel):
    pose: int | str


class SaveOutfitRequest(BaseModel):
    name: str


class StudioState(BaseModel):
    """Snapshot of the composition shown to the user."""
    position: int
    layers: list[OutfitLayer]
    active_garment_ids: list[str]
    displayed_image: str | None
    current_pose: str
    available_poses: list[str]
    poses: list[str]
    busy: bool


class StudioResponse(BaseModel):
    """Response envelope for every mutating endpoint."""
    success: bool
    error: str | None = None
    outcome: str | None = None
    state: StudioState | None = None


class OutfitResponse(BaseModel):
    success: bool
    error: str | None = None
    outfit: SavedOutfit | None = None


# Initialize studio (will be done on first request)
_studio: OutfitStudio | None = None


def get_studio() -> OutfitStudio:
    """Get or create the studio instance."""
    global _studio
    if _studio is None:
        config = load_config()  # Loads from .env automatically via pydantic-settings
        configure_logging(config.log_level)
        _studio = OutfitStudio.from_config(config)
    return _studio


def snapshot(studio: OutfitStudio) -> StudioState:
    return StudioState(
        position=studio.history.position,
        layers=studio.active_layers,
        active_garment_ids=studio.active_garment_ids,
        displayed_image=studio.displayed_image,
        current_pose=studio.current_pose,
        available_poses=studio.available_poses,
        poses=list(POSE_INSTRUCTIONS),
        busy=studio.is_busy,
    )


def failure(studio: OutfitStudio, error: Exception, context: str) -> StudioResponse:
    return StudioResponse(
        success=False,
        error=friendly_error_message(error, context),
        state=snapshot(studio),
    )


def decode_upload(data: str) -> bytes:
    if is_data_url(data):
        return split_data_url(data)[1]
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationFailure("Upload is not valid base64") from None


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Fitting Room API", "version": "1.0.0"}


@app.get("/api/state", response_model=StudioState)
async def state():
    return snapshot(get_studio())


@app.post("/api/model", response_model=StudioResponse)
async def load_model(request: ModelRequest):
    """Start a new composition on top of the given model image."""
    studio = get_studio()
    if not studio.initialize(request.image):
        return StudioResponse(success=False, error="Please wait for the current operation to finish.", state=snapshot(studio))
    return StudioResponse(success=True, state=snapshot(studio))


@app.post("/api/reset", response_model=StudioResponse)
async def start_over():
    studio = get_studio()
    return StudioResponse(success=studio.start_over(), state=snapshot(studio))


@app.get("/api/garments", response_model=list[Garment])
async def list_garments():
    return list(get_studio().registry)


@app.post("/api/garments/{garment_id}", response_model=StudioResponse)
async def add_garment(garment_id: str):
    """Layer a known garment onto the current composition."""
    studio = get_studio()
    try:
        garment = studio.registry.resolve(garment_id)
        outcome = await studio.add_garment(garment)
    except FittingRoomError as e:
        return failure(studio, e, "Failed to apply garment")

    return StudioResponse(
        success=outcome is not EditOutcome.SKIPPED,
        outcome=outcome.value,
        state=snapshot(studio),
    )


@app.post("/api/garments", response_model=StudioResponse)
async def upload_garment(request: UploadRequest):
    """Layer a custom garment image onto the current composition."""
    studio = get_studio()
    try:
        image_bytes = decode_upload(request.image_base64)
        _, outcome = await studio.upload_garment(image_bytes, request.filename)
    except FittingRoomError as e:
        return failure(studio, e, "Failed to apply garment")

    return StudioResponse(
        success=outcome is not EditOutcome.SKIPPED,
        outcome=outcome.value,
        state=snapshot(studio),
    )


@app.delete("/api/layers/last", response_model=StudioResponse)
async def remove_last_garment():
    studio = get_studio()
    return StudioResponse(success=studio.remove_last_garment(), state=snapshot(studio))


@app.post("/api/pose", response_model=StudioResponse)
async def select_pose(request: PoseRequest):
    """Switch the displayed pose, rendering it if needed."""
    studio = get_studio()
    try:
        await studio.select_pose(request.pose)
    except FittingRoomError as e:
        return failure(studio, e, "Failed to change pose")
    return StudioResponse(success=True, state=snapshot(studio))


@app.get("/api/outfits", response_model=list[SavedOutfit])
async def list_outfits():
    return get_studio().saved_outfits


@app.post("/api/outfits", response_model=OutfitResponse)
async def save_outfit(request: SaveOutfitRequest):
    try:
        outfit = get_studio().save_outfit(request.name)
    except FittingRoomError as e:
        return OutfitResponse(success=False, error=e.message)
    return OutfitResponse(success=True, outfit=outfit)


@app.delete("/api/outfits/{outfit_id}", response_model=OutfitResponse)
async def delete_outfit(outfit_id: str):
    if not get_studio().delete_outfit(outfit_id):
        return OutfitResponse(success=False, error=f"Outfit '{outfit_id}' not found")
    return OutfitResponse(success=True)


@app.post("/api/outfits/{outfit_id}/apply", response_model=StudioResponse)
async def apply_outfit(outfit_id: str):
    """Rebuild the composition from a saved outfit."""
    studio = get_studio()
    outfit = studio.outfits.get(outfit_id)
    if outfit is None:
        return StudioResponse(success=False, error=f"Outfit '{outfit_id}' not found", state=snapshot(studio))

    try:
        applied = await studio.apply_saved_outfit(outfit)
    except FittingRoomError as e:
        return failure(studio, e, f"Failed to load outfit '{outfit.name}'")
    return StudioResponse(success=applied, state=snapshot(studio))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

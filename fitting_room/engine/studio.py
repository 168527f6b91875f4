"""Single-flight facade over the composition history."""

import logging
import uuid
from collections.abc import Iterable
from enum import Enum
from pathlib import Path

from ..catalog import DEFAULT_CATALOG
from ..config import StudioConfig
from ..errors import FittingRoomError, ValidationFailure
from ..models import (
    DEFAULT_POSE_INDEX,
    POSE_INSTRUCTIONS,
    Garment,
    OutfitLayer,
    SavedOutfit,
    pose_index,
)
from ..pipeline.replay_pipeline import ProgressCallback, ReplayPipeline
from ..services.garment_registry import GarmentRegistry
from ..services.gemini_client import GeminiImageClient, ImageGenerator, run_generation
from ..services.image_fetcher import ImageFetcher
from ..services.outfit_index import SavedOutfitIndex
from ..services.store import JsonFileStore
from ..utils.images import to_data_url, validate_image
from .history import HistoryStack

logger = logging.getLogger(__name__)


class EditOutcome(str, Enum):
    """What an add-garment request ended up doing."""

    GENERATED = "generated"  # new layer from a generation call
    REDO = "redo"  # re-entered the next layer of the redo buffer
    SKIPPED = "skipped"  # precondition failed (busy, no model loaded)


class OutfitStudio:
    """Owns the history, the active pose pointer and the busy flag.

    Every operation that can touch the history checks ``is_busy`` first and
    does nothing while another generation call is outstanding, so at most
    one call ever affects the history at a time. The flag is set before the
    first ``await`` and cleared only after the result has been committed.
    """

    def __init__(
        self,
        generator: ImageGenerator,
        registry: GarmentRegistry,
        outfits: SavedOutfitIndex,
        fetcher: ImageFetcher,
    ):
        self.generator = generator
        self.registry = registry
        self.outfits = outfits
        self.fetcher = fetcher
        self.replay = ReplayPipeline(generator, registry, fetcher)

        self.history = HistoryStack()
        self._pose_index = DEFAULT_POSE_INDEX
        self._busy = False

    @classmethod
    def from_config(
        cls,
        config: StudioConfig,
        catalog: Iterable[Garment] = DEFAULT_CATALOG,
    ) -> "OutfitStudio":
        """Wire the studio to Gemini and a JSON file store and load saved outfits."""
        fetcher = ImageFetcher(config.fetch)
        generator = GeminiImageClient(config.gemini, config.gemini_api_key, fetcher)
        outfits = SavedOutfitIndex(JsonFileStore(Path(config.store_path)), config.saved_outfits_key)
        outfits.load_all()
        return cls(generator, GarmentRegistry(catalog), outfits, fetcher)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def is_busy(self) -> bool:
        return self._busy

    @property
    def current_pose_index(self) -> int:
        return self._pose_index

    @property
    def current_pose(self) -> str:
        return POSE_INSTRUCTIONS[self._pose_index]

    @property
    def current_layer(self) -> OutfitLayer | None:
        return self.history.current_layer

    @property
    def active_layers(self) -> list[OutfitLayer]:
        return self.history.active_layers()

    @property
    def active_garment_ids(self) -> list[str]:
        return self.history.active_garment_ids()

    @property
    def displayed_image(self) -> str | None:
        """The current layer in the active pose, else its representative image."""
        layer = self.history.current_layer
        if layer is None:
            return None
        return layer.pose_cache.get(self.current_pose) or layer.representative_image

    @property
    def available_poses(self) -> list[str]:
        layer = self.history.current_layer
        return layer.pose_cache.poses if layer else []

    @property
    def saved_outfits(self) -> list[SavedOutfit]:
        return self.outfits.outfits

    # ------------------------------------------------------------------
    # History operations
    # ------------------------------------------------------------------

    def initialize(self, base_image: str) -> bool:
        """Load a new model image as the root layer, discarding all history."""
        if self._busy:
            return False
        self.history.initialize(base_image)
        self._pose_index = DEFAULT_POSE_INDEX
        logger.info("Studio initialized with a new model image")
        return True

    def start_over(self) -> bool:
        """Unload the model and forget ad-hoc garments."""
        if self._busy:
            return False
        self.history.clear()
        self._pose_index = DEFAULT_POSE_INDEX
        self.registry.reset()
        logger.info("Studio reset")
        return True

    async def add_garment(
        self,
        garment: Garment,
        garment_image: bytes | None = None,
        base_image: str | None = None,
    ) -> EditOutcome:
        """Layer ``garment`` on top of the current position.

        Args:
            garment: Garment to apply
            garment_image: Garment image bytes; fetched from ``garment.url`` if omitted
            base_image: Image to dress; defaults to the displayed image

        Returns:
            Which path the request took

        Raises:
            GenerationFailure: the garment image or the generation call failed;
                history and position are left untouched
        """
        if self._busy or self.history.is_empty:
            return EditOutcome.SKIPPED

        if self.history.is_redo_hit(garment.id):
            self.history.redo()
            self._pose_index = DEFAULT_POSE_INDEX
            logger.info("Redo hit for %s, reusing layer %d", garment.id, self.history.position)
            return EditOutcome.REDO

        base = base_image or self.displayed_image
        self._busy = True
        try:
            if garment_image is None:
                garment_image = await self.fetcher.fetch(garment.url)
            logger.info("Applying %s at position %d", garment.label(), self.history.position)
            result_image = await run_generation(
                self.generator.apply_garment(base, garment_image)
            )

            self.history.push(OutfitLayer.create(result_image, garment=garment))
            self._pose_index = DEFAULT_POSE_INDEX
            self.registry.add(garment)
        except FittingRoomError as e:
            logger.warning("Failed to apply %s: %s", garment.id, e.message)
            raise
        finally:
            self._busy = False

        logger.info("Layer %d created for %s", self.history.position, garment.id)
        return EditOutcome.GENERATED

    async def upload_garment(
        self,
        image_bytes: bytes,
        filename: str,
        base_image: str | None = None,
    ) -> tuple[Garment, EditOutcome]:
        """Apply a user-supplied garment image.

        Raises:
            ValidationFailure: the bytes are not an image
        """
        mime_type = validate_image(image_bytes)
        garment = Garment(
            id=f"custom-{uuid.uuid4().hex}",
            name=filename or "Custom garment",
            url=to_data_url(image_bytes, mime_type),
            brand="Custom Upload",
        )
        outcome = await self.add_garment(garment, garment_image=image_bytes, base_image=base_image)
        return garment, outcome

    def remove_last_garment(self) -> bool:
        """Step back one layer; the layer stays available for redo."""
        if self._busy or not self.history.undo():
            return False
        self._pose_index = DEFAULT_POSE_INDEX
        return True

    async def select_pose(self, pose: int | str) -> bool:
        """Show the current layer in ``pose``, generating it on a cache miss.

        The pointer moves immediately; if generation fails it moves back.
        New renders always start from the layer's representative image.

        Returns:
            True if the active pose changed

        Raises:
            ValidationFailure: unknown pose
            GenerationFailure: the pose could not be rendered
        """
        layer = self.history.current_layer
        if self._busy or layer is None:
            return False
        index = pose_index(pose)
        if index == self._pose_index:
            return False

        instruction = POSE_INSTRUCTIONS[index]
        if layer.pose_cache.has(instruction):
            self._pose_index = index
            logger.debug("Pose cache hit: %s", instruction)
            return True

        base = layer.representative_image
        if base is None:
            return False

        previous = self._pose_index
        self._pose_index = index
        self._busy = True
        try:
            logger.info("Rendering pose '%s'", instruction)
            result_image = await run_generation(self.generator.render_pose(base, instruction))
            layer.pose_cache.add(instruction, result_image)
        except FittingRoomError as e:
            self._pose_index = previous
            logger.warning("Failed to render pose '%s': %s", instruction, e.message)
            raise
        finally:
            self._busy = False
        return True

    # ------------------------------------------------------------------
    # Saved outfits
    # ------------------------------------------------------------------

    def save_outfit(self, name: str) -> SavedOutfit:
        """Snapshot the active garments under ``name``.

        Raises:
            ValidationFailure: blank name, or nothing to save
        """
        name = name.strip()
        if not name:
            raise ValidationFailure("Please enter a name for your outfit.")

        preview = self.displayed_image
        garment_ids = self.active_garment_ids
        if not garment_ids or preview is None:
            raise ValidationFailure("Add at least one garment to save an outfit.")

        return self.outfits.save(name, garment_ids, preview)

    def delete_outfit(self, outfit_id: str) -> bool:
        return self.outfits.delete(outfit_id)

    async def apply_saved_outfit(
        self,
        outfit: SavedOutfit,
        on_progress: ProgressCallback | None = None,
    ) -> bool:
        """Rebuild the history from ``outfit``, one garment at a time.

        Layers are committed as they are generated; on failure the ones
        already built stay visible.

        Returns:
            False if the studio was busy or no model is loaded

        Raises:
            ResolutionFailure: the outfit references an unknown garment
            GenerationFailure: a replay step failed
        """
        if self._busy or self.history.is_empty:
            return False

        logger.info("Loading outfit '%s' (%s)", outfit.name, outfit.id)
        self._busy = True
        self._pose_index = DEFAULT_POSE_INDEX
        try:
            await self.replay.run(self.history, outfit.garment_ids, on_progress)
        finally:
            self._busy = False
        return True

    async def close(self):
        """Release HTTP clients held by the collaborators."""
        for collaborator in (self.generator, self.fetcher):
            close = getattr(collaborator, "close", None)
            if close is not None:
                await close()


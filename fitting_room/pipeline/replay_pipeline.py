"""Rebuilds a composition history from a saved garment sequence."""

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from ..errors import FittingRoomError, ValidationFailure
from ..models import OutfitLayer
from ..services.garment_registry import GarmentRegistry
from ..services.gemini_client import ImageGenerator, run_generation
from ..services.image_fetcher import ImageFetcher

if TYPE_CHECKING:
    from ..engine.history import HistoryStack

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[OutfitLayer, int, int], Awaitable[None]]


class ReplayPipeline:
    """Sequential replay of a saved outfit.
    
    Flow:
    1. Rewind the history to the root (the base image is reused, not regenerated)
    2. For each garment id: resolve, fetch its image, generate on top of the
       previous step's result, push the new layer
    3. Stop at the first failure; layers built so far stay in place
    
    Every step always generates: the redo buffer is never consulted.
    """
    
    def __init__(
        self,
        generator: ImageGenerator,
        registry: GarmentRegistry,
        fetcher: ImageFetcher,
    ):
        self.generator = generator
        self.registry = registry
        self.fetcher = fetcher
    
    async def run(
        self,
        history: "HistoryStack",
        garment_ids: list[str],
        on_progress: ProgressCallback | None = None,
    ) -> list[OutfitLayer]:
        """Replay ``garment_ids`` onto ``history``.
        
        Args:
            history: History to rebuild; must already hold a root layer
            garment_ids: Garments in layering order
            on_progress: Awaited after each layer is committed with
                ``(layer, step, total)``
            
        Returns:
            The active layers once every garment has been applied
            
        Raises:
            ResolutionFailure: an id is unknown to the registry
            GenerationFailure: a fetch or generation call failed
        """
        root = history.root
        base_image = root.representative_image if root else None
        if base_image is None:
            raise ValidationFailure("Base model image is not available.")
        
        history.reset_position()
        total = len(garment_ids)
        logger.info("Replaying %d garment(s)", total)
        
        for step, garment_id in enumerate(garment_ids, start=1):
            try:
                garment = self.registry.resolve(garment_id)
                logger.info("Replay step %d/%d: applying %s", step, total, garment.label())
                
                garment_bytes = await self.fetcher.fetch(garment.url)
                result_image = await run_generation(
                    self.generator.apply_garment(base_image, garment_bytes)
                )
            except FittingRoomError as e:
                logger.warning(
                    "Replay stopped at step %d/%d (%s): %s", step, total, garment_id, e.message
                )
                raise
            
            layer = OutfitLayer.create(result_image, garment=garment)
            history.push(layer)
            base_image = result_image
            
            if on_progress is not None:
                await on_progress(layer, step, total)
        
        logger.info("Replay complete: %d layer(s) active", len(history.active_layers()))
        return history.active_layers()

"""Deduplicating registry of every garment seen so far."""

import logging
from collections.abc import Iterable, Iterator

from ..errors import ResolutionFailure
from ..models import Garment

logger = logging.getLogger(__name__)


class GarmentRegistry:
    """Insertion-ordered set of garments keyed by id.
    
    Seeded from the catalog; ad-hoc uploads join it once they have been
    applied successfully. The first registration of an id wins.
    """
    
    def __init__(self, seed: Iterable[Garment] = ()):
        self._seed = tuple(seed)
        self._garments: dict[str, Garment] = {}
        self.reset()
    
    def reset(self) -> None:
        """Forget everything except the seed garments."""
        self._garments = {}
        for garment in self._seed:
            self.add(garment)
    
    def add(self, garment: Garment) -> bool:
        """Register a garment. Returns False if the id was already known."""
        if garment.id in self._garments:
            return False
        self._garments[garment.id] = garment
        logger.debug("Registered garment %s", garment.id)
        return True
    
    def get(self, garment_id: str) -> Garment | None:
        return self._garments.get(garment_id)
    
    def resolve(self, garment_id: str) -> Garment:
        """Return the garment for ``garment_id`` or raise ResolutionFailure."""
        garment = self._garments.get(garment_id)
        if garment is None:
            raise ResolutionFailure(garment_id)
        return garment
    
    def __contains__(self, garment_id: object) -> bool:
        return garment_id in self._garments
    
    def __iter__(self) -> Iterator[Garment]:
        return iter(list(self._garments.values()))
    
    def __len__(self) -> int:
        return len(self._garments)

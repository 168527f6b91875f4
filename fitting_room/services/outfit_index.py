"""Named saved outfits, persisted through a durable store."""

import logging
from collections.abc import Iterator

from pydantic import TypeAdapter, ValidationError

from ..errors import PersistenceFailure
from ..models import SavedOutfit
from .store import DurableStore

logger = logging.getLogger(__name__)

_OUTFIT_LIST = TypeAdapter(list[SavedOutfit])


class SavedOutfitIndex:
    """Newest-first list of saved outfits.
    
    The whole index is written back to the store after every mutation.
    Persistence is best-effort: store errors are logged, never raised.
    """
    
    def __init__(self, store: DurableStore, key: str = "savedOutfits"):
        self.store = store
        self.key = key
        self._outfits: list[SavedOutfit] = []
    
    def load_all(self) -> list[SavedOutfit]:
        """Rehydrate the index from the store.
        
        Missing, unreadable or malformed data leaves the index empty.
        """
        self._outfits = []
        try:
            raw = self.store.get(self.key)
        except PersistenceFailure as e:
            logger.error("Failed to load saved outfits: %s", e)
            return self.outfits
        
        if raw:
            try:
                self._outfits = _OUTFIT_LIST.validate_json(raw)
            except ValidationError as e:
                logger.warning("Discarding malformed saved outfits: %s", e.error_count())
        
        logger.info("Loaded %d saved outfit(s)", len(self._outfits))
        return self.outfits
    
    def save(self, name: str, garment_ids: list[str], preview_url: str) -> SavedOutfit:
        """Create a new outfit at the front of the index and persist."""
        outfit = SavedOutfit(
            name=name,
            garment_ids=list(garment_ids),
            preview_url=preview_url,
        )
        self._outfits.insert(0, outfit)
        self._persist()
        logger.info("Saved outfit '%s' (%s) with %d garment(s)", name, outfit.id, len(garment_ids))
        return outfit
    
    def delete(self, outfit_id: str) -> bool:
        """Remove an outfit by id. Returns False when nothing matched."""
        remaining = [o for o in self._outfits if o.id != outfit_id]
        if len(remaining) == len(self._outfits):
            return False
        self._outfits = remaining
        self._persist()
        logger.info("Deleted outfit %s", outfit_id)
        return True
    
    def get(self, outfit_id: str) -> SavedOutfit | None:
        return next((o for o in self._outfits if o.id == outfit_id), None)
    
    @property
    def outfits(self) -> list[SavedOutfit]:
        return list(self._outfits)
    
    def __iter__(self) -> Iterator[SavedOutfit]:
        return iter(self.outfits)
    
    def __len__(self) -> int:
        return len(self._outfits)
    
    def _persist(self) -> None:
        try:
            self.store.set(self.key, _OUTFIT_LIST.dump_json(self._outfits).decode("utf-8"))
        except PersistenceFailure as e:
            logger.error("Failed to persist saved outfits: %s", e)

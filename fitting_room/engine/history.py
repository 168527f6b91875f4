"""Layered composition history with undo/redo and branch-overwrite."""

from ..models import OutfitLayer


class HistoryStack:
    """Ordered layers plus a cursor.
    
    Position 0 is always the root layer (the bare model). Layers after the
    cursor form the redo buffer: they survive an undo and can be re-entered
    for free, but any different edit made from the cursor truncates them.
    Layers are never deleted except by that truncation.
    """
    
    def __init__(self):
        self._layers: list[OutfitLayer] = []
        self._position = 0
    
    def initialize(self, base_image: str) -> None:
        """Start over with a single root layer showing ``base_image``."""
        self._layers = [OutfitLayer.create(base_image)]
        self._position = 0
    
    def clear(self) -> None:
        """Drop every layer, including the root."""
        self._layers = []
        self._position = 0
    
    @property
    def is_empty(self) -> bool:
        return not self._layers
    
    @property
    def position(self) -> int:
        return self._position
    
    @property
    def layers(self) -> list[OutfitLayer]:
        """All layers, redo buffer included."""
        return list(self._layers)
    
    def __len__(self) -> int:
        return len(self._layers)
    
    @property
    def root(self) -> OutfitLayer | None:
        return self._layers[0] if self._layers else None
    
    @property
    def current_layer(self) -> OutfitLayer | None:
        return self._layers[self._position] if self._layers else None
    
    @property
    def next_layer(self) -> OutfitLayer | None:
        """The first layer of the redo buffer, if any."""
        index = self._position + 1
        return self._layers[index] if index < len(self._layers) else None
    
    def is_redo_hit(self, garment_id: str) -> bool:
        """Whether re-applying ``garment_id`` can reuse the next layer."""
        nxt = self.next_layer
        return nxt is not None and nxt.garment_id == garment_id
    
    def redo(self) -> OutfitLayer:
        """Step forward into the redo buffer."""
        if self.next_layer is None:
            raise IndexError("Nothing to redo")
        self._position += 1
        return self._layers[self._position]
    
    def push(self, layer: OutfitLayer) -> None:
        """Discard the redo buffer, append ``layer`` and make it current."""
        if not self._layers:
            raise IndexError("History has no root layer")
        if layer.is_root:
            raise ValueError("Only the root layer may be garment-free")
        del self._layers[self._position + 1:]
        self._layers.append(layer)
        self._position = len(self._layers) - 1
    
    def undo(self) -> bool:
        """Step back one layer, keeping it in the redo buffer.
        
        Returns False (and does nothing) when already at the root.
        """
        if self._position == 0:
            return False
        self._position -= 1
        return True
    
    def reset_position(self) -> None:
        """Move the cursor back to the root without dropping any layer."""
        self._position = 0
    
    def active_layers(self) -> list[OutfitLayer]:
        """Layers from the root through the current position."""
        return self._layers[:self._position + 1]
    
    def active_garment_ids(self) -> list[str]:
        return [layer.garment_id for layer in self.active_layers() if layer.garment_id]

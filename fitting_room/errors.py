"""Error taxonomy for the outfit composition engine.

Every error carries a short message that can be shown to the user as is.
"""


class FittingRoomError(Exception):
    """Base class for engine errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class GenerationFailure(FittingRoomError):
    """The image generation service could not produce an image."""


class ImageFetchFailure(GenerationFailure):
    """A garment's source image could not be loaded."""


class ResolutionFailure(FittingRoomError):
    """A garment id is not known to the registry."""

    def __init__(self, garment_id: str):
        super().__init__(f"Unknown garment '{garment_id}'")
        self.garment_id = garment_id


class ValidationFailure(FittingRoomError):
    """Locally supplied input was rejected (not an image, bad pose, ...)."""


class PersistenceFailure(FittingRoomError):
    """The durable store could not be read or written."""


def friendly_error_message(error: BaseException, context: str) -> str:
    """Build the single user-facing message for a failed action."""
    if isinstance(error, FittingRoomError):
        detail = error.message
    else:
        detail = str(error) or error.__class__.__name__
    return f"{context}. {detail}"

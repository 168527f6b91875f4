"""The fixed set of pose instructions a composed image can be re-rendered in."""

from ..errors import ValidationFailure

POSE_INSTRUCTIONS: tuple[str, ...] = (
    "Full frontal view, hands on hips",
    "Slightly turned, 3/4 view",
    "Side profile view",
    "Jumping in the air, mid-action shot",
    "Walking towards camera",
    "Leaning against a wall",
)

DEFAULT_POSE_INDEX = 0
DEFAULT_POSE = POSE_INSTRUCTIONS[DEFAULT_POSE_INDEX]


def pose_index(pose: int | str) -> int:
    """Normalize a pose given by index or instruction text to its index."""
    if isinstance(pose, bool):
        raise ValidationFailure(f"Unknown pose: {pose!r}")
    if isinstance(pose, int):
        if 0 <= pose < len(POSE_INSTRUCTIONS):
            return pose
        raise ValidationFailure(f"Pose index out of range: {pose}")
    try:
        return POSE_INSTRUCTIONS.index(pose)
    except ValueError:
        raise ValidationFailure(f"Unknown pose: {pose!r}") from None

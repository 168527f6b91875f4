"""Prompt templates for the image generation service."""


TRYON_PROMPT = """You are an expert fashion photo editor. Take the clothing item from the garment image and realistically put it on the person in the model image.

Requirements:
- Replace the corresponding clothing the person is wearing with the new garment. Layer it only when the garment is naturally worn on top (e.g. a jacket over a shirt).
- Keep the person's face, hair, body shape, skin tone and pose identical to the model image.
- Preserve the background, lighting and camera framing of the model image exactly.
- Reproduce the garment's color, pattern, fabric and details faithfully, with natural folds and shadows.
- Avoid distortions, extra limbs, text or graphics.

Return ONLY the final edited image."""


POSE_PROMPT_TEMPLATE = """You are an expert fashion photographer. Regenerate this photo from a new perspective.

The person, their clothing and the background style must remain identical. Only the pose and camera angle change.

New perspective: "{pose}"

Return ONLY the final image."""


def build_tryon_prompt() -> str:
    """Prompt for applying a garment onto a base image."""
    return TRYON_PROMPT


def build_pose_prompt(pose: str) -> str:
    """Prompt for re-rendering a base image in ``pose``."""
    return POSE_PROMPT_TEMPLATE.format(pose=pose)

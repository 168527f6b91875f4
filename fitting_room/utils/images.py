"""Image reference helpers: data URLs, MIME sniffing and validation."""

import base64
import binascii
import io

from PIL import Image, UnidentifiedImageError

from ..errors import ValidationFailure


def detect_mime_type(image_bytes: bytes, default: str = "image/png") -> str:
    """Detect the image format from magic bytes."""
    if image_bytes[:3] == b'\xff\xd8\xff':
        return "image/jpeg"
    if image_bytes[:8] == b'\x89PNG\r\n\x1a\n':
        return "image/png"
    if image_bytes[:4] == b'RIFF' and image_bytes[8:12] == b'WEBP':
        return "image/webp"
    if image_bytes[:6] in (b'GIF87a', b'GIF89a'):
        return "image/gif"
    return default


def is_data_url(reference: str) -> bool:
    return reference.startswith("data:")


def is_http_url(reference: str) -> bool:
    return reference.startswith("http://") or reference.startswith("https://")


def to_data_url(image_bytes: bytes, mime_type: str | None = None) -> str:
    """Encode raw image bytes as a ``data:`` URL."""
    mime_type = mime_type or detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def split_data_url(data_url: str) -> tuple[str, bytes]:
    """Decode a ``data:`` URL into ``(mime_type, raw_bytes)``."""
    if not is_data_url(data_url):
        raise ValidationFailure("Not a data URL")
    try:
        header, encoded = data_url.split(",", 1)
    except ValueError:
        raise ValidationFailure("Invalid data URL") from None
    
    # e.g. "data:image/png;base64"
    mime_type = header[5:].split(";", 1)[0] or "application/octet-stream"
    try:
        raw_bytes = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationFailure("Data URL payload is not valid base64") from None
    return mime_type, raw_bytes


def validate_image(image_bytes: bytes) -> str:
    """Check that the bytes decode as an image and return its MIME type.
    
    Raises:
        ValidationFailure: if the bytes are empty or not a readable image
    """
    if not image_bytes:
        raise ValidationFailure("Please select an image file.")
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            img.verify()
            image_format = img.format
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        raise ValidationFailure("Please select an image file.") from None
    
    return Image.MIME.get(image_format or "", detect_mime_type(image_bytes))

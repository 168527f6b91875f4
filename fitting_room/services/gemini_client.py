"""Gemini client for garment try-on and pose variation image generation."""

import base64
import logging
from collections.abc import Awaitable
from typing import Any, Protocol

import httpx

from ..config import GeminiConfig
from ..errors import FittingRoomError, GenerationFailure
from ..utils.images import detect_mime_type
from ..utils.prompts import build_pose_prompt, build_tryon_prompt
from .image_fetcher import ImageFetcher

logger = logging.getLogger(__name__)


class ImageGenerator(Protocol):
    """The two generation operations the engine depends on.
    
    Both are single-attempt; any failure surfaces as GenerationFailure.
    """
    
    async def apply_garment(self, base_image: str, garment_image: bytes) -> str: ...
    
    async def render_pose(self, base_image: str, pose: str) -> str: ...


async def run_generation(call: Awaitable[str]) -> str:
    """Await a generation call, normalizing any failure to GenerationFailure."""
    try:
        return await call
    except FittingRoomError:
        raise
    except Exception as e:
        raise GenerationFailure(str(e) or e.__class__.__name__) from e


class GeminiImageClient:
    """Calls the Gemini ``generateContent`` REST endpoint directly with httpx.
    
    Image references handed in (base images) are loaded through an
    ImageFetcher; results come back as ``data:`` URLs.
    """
    
    def __init__(
        self,
        config: GeminiConfig,
        api_key: str | None,
        fetcher: ImageFetcher | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config
        self.api_key = api_key
        self.fetcher = fetcher or ImageFetcher()
        self._client = http_client
    
    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
        return self._client
    
    async def apply_garment(self, base_image: str, garment_image: bytes) -> str:
        """Dress the person in ``base_image`` with the garment in ``garment_image``."""
        model_bytes = await self.fetcher.fetch(base_image)
        parts = [
            _inline_part(model_bytes),
            _inline_part(garment_image),
            {"text": build_tryon_prompt()},
        ]
        return await self._generate(parts, "virtual try-on")
    
    async def render_pose(self, base_image: str, pose: str) -> str:
        """Re-render ``base_image`` in the given pose."""
        image_bytes = await self.fetcher.fetch(base_image)
        parts = [
            _inline_part(image_bytes),
            {"text": build_pose_prompt(pose)},
        ]
        return await self._generate(parts, "pose variation")
    
    async def _generate(self, parts: list[dict[str, Any]], label: str) -> str:
        if not self.api_key:
            raise GenerationFailure("Gemini API key is not configured")
        
        payload = {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "responseModalities": ["IMAGE", "TEXT"],
            },
        }
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        
        logger.info("Requesting %s from %s", label, self.config.model)
        try:
            response = await self.client.post(
                self.config.generate_url(),
                json=payload,
                headers=headers,
            )
            response.raise_for_status()
            api_result = response.json()
        except httpx.HTTPStatusError as e:
            raise GenerationFailure(
                f"Gemini API HTTP error: {e.response.status_code} - {e.response.text[:300]}"
            ) from e
        except httpx.RequestError as e:
            raise GenerationFailure(f"Network error calling Gemini API: {e}") from e
        except ValueError as e:
            raise GenerationFailure("Gemini API returned invalid JSON") from e
        
        return _extract_image(api_result)
    
    async def close(self):
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None


def _inline_part(image_bytes: bytes) -> dict[str, Any]:
    return {
        "inline_data": {
            "mime_type": detect_mime_type(image_bytes),
            "data": base64.b64encode(image_bytes).decode("utf-8"),
        }
    }


def _extract_image(api_result: dict[str, Any]) -> str:
    """Pull the first image out of a generateContent response as a data URL."""
    block_reason = (api_result.get("promptFeedback") or {}).get("blockReason")
    if block_reason:
        raise GenerationFailure(f"Request was blocked. Reason: {block_reason}")
    
    candidates = api_result.get("candidates") or []
    if not candidates:
        raise GenerationFailure("Gemini API returned no candidates")
    
    candidate = candidates[0]
    for part in (candidate.get("content") or {}).get("parts") or []:
        # Both camelCase and snake_case appear in the wild
        inline = part.get("inlineData") or part.get("inline_data")
        if inline and inline.get("data"):
            mime_type = inline.get("mimeType") or inline.get("mime_type") or "image/png"
            return f"data:{mime_type};base64,{inline['data']}"
    
    finish_reason = candidate.get("finishReason")
    if finish_reason and finish_reason != "STOP":
        raise GenerationFailure(f"Image generation stopped unexpectedly. Reason: {finish_reason}")
    raise GenerationFailure("The model did not return an image")

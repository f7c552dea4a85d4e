# -*- coding: utf-8 -*-
"""
Image generation backends.

Two call shapes exist on the provider side:
- Imagen models go through the dedicated `generate_images` endpoint and get
  encoded image bytes back directly.
- Gemini image models go through `generate_content` and return the image as
  an inline_data part somewhere in candidates[0].content.parts.
The backend is picked once from the model id (see select_image_backend).
"""
from typing import Optional

from google.genai import types

from storyboard import presets
from storyboard.data_models import MediaAsset
from storyboard.errors import GenerationFailure
from storyboard.logger import get_logger
from storyboard.media_codec import ensure_bytes, sniff_image_mime

logger = get_logger("gemini_image")


def normalize_aspect_ratio(aspect_ratio: Optional[str]) -> str:
    ar = (aspect_ratio or "").strip()
    if ar in presets.ASPECT_RATIOS:
        return ar
    if ar:
        logger.debug("aspect ratio %r not supported, using %s", ar, presets.DEFAULT_ASPECT_RATIO)
    return presets.DEFAULT_ASPECT_RATIO


def normalize_image_size(image_size: Optional[str]) -> str:
    return image_size if image_size in presets.IMAGE_SIZES else presets.DEFAULT_IMAGE_SIZE


def _first_image_from_parts(parts) -> Optional[MediaAsset]:
    """First inline_data part with a payload, as a MediaAsset."""
    for p in parts or []:
        inline = getattr(p, "inline_data", None)
        if inline and getattr(inline, "data", None):
            data = ensure_bytes(inline.data)
            mime = getattr(inline, "mime_type", None) or sniff_image_mime(data)
            return MediaAsset(data=data, mime_type=mime)
    return None


class ImagenBackend:
    kind = "imagen"
    output_mime = "image/jpeg"

    def __init__(self, model: str):
        self.model = model

    def generate(self, client, prompt: str, aspect_ratio: str, image_size: Optional[str] = None) -> MediaAsset:
        resp = client.models.generate_images(
            model=self.model,
            prompt=prompt,
            config=types.GenerateImagesConfig(
                number_of_images=1,
                output_mime_type=self.output_mime,
                aspect_ratio=normalize_aspect_ratio(aspect_ratio),
            ),
        )
        images = getattr(resp, "generated_images", None) or []
        image = getattr(images[0], "image", None) if images else None
        payload = getattr(image, "image_bytes", None) if image else None
        if not payload:
            raise GenerationFailure("image", f"{self.model} returned no image bytes")
        return MediaAsset(data=ensure_bytes(payload), mime_type=self.output_mime)


class GeminiContentBackend:
    kind = "gemini"

    def __init__(self, model: str):
        self.model = model

    @property
    def supports_image_size(self) -> bool:
        return self.model in presets.SIZED_IMAGE_MODELS

    def image_config(self, aspect_ratio: str, image_size: Optional[str]) -> types.ImageConfig:
        if self.supports_image_size:
            return types.ImageConfig(
                aspect_ratio=normalize_aspect_ratio(aspect_ratio),
                image_size=normalize_image_size(image_size),
            )
        return types.ImageConfig(aspect_ratio=normalize_aspect_ratio(aspect_ratio))

    def generate(self, client, prompt: str, aspect_ratio: str, image_size: Optional[str] = None) -> MediaAsset:
        resp = client.models.generate_content(
            model=self.model,
            contents=[prompt],
            config=types.GenerateContentConfig(image_config=self.image_config(aspect_ratio, image_size)),
        )
        if not resp or not resp.candidates:
            raise GenerationFailure("image", f"{self.model} returned no candidates")
        content = resp.candidates[0].content
        asset = _first_image_from_parts(getattr(content, "parts", None))
        if asset is None:
            raise GenerationFailure("image", f"no inline image data in {self.model} response")
        return asset


def select_image_backend(model: str):
    if "imagen" in (model or ""):
        return ImagenBackend(model)
    return GeminiContentBackend(model)

# -*- coding: utf-8 -*-
"""
One place that knows how each modality is called on the Gemini API.

text  -> generate_content in JSON-schema mode, raw text back
image -> Imagen or Gemini content backend (gemini_image.select_image_backend)
video -> generate_videos job; status reads + credentialed fetch of the result
audio -> generate_content with AUDIO modality, raw PCM back
"""
from contextlib import contextmanager
from typing import NamedTuple, Optional

import httpx
import requests
from google.genai import errors as genai_errors
from google.genai import types

from storyboard import presets
from storyboard.data_models import MediaAsset
from storyboard.env_loader import GeminiConfig
from storyboard.errors import GenerationFailure, NetworkFailure
from storyboard.gemini_image import normalize_aspect_ratio, select_image_backend
from storyboard.logger import get_logger
from storyboard.media_codec import ensure_bytes

logger = get_logger("router")

VIDEO_MIME = "video/mp4"


class VideoStatus(NamedTuple):
    done: bool
    error: Optional[str] = None
    result_uri: Optional[str] = None


@contextmanager
def provider_errors(modality: str):
    """Re-raise SDK API and transport errors as GenerationFailure for the given modality."""
    try:
        yield
    except genai_errors.APIError as e:
        raise GenerationFailure(modality, f"{modality} call rejected: {e}") from e
    except httpx.HTTPError as e:
        raise GenerationFailure(modality, f"{modality} call failed in transport: {e}") from e


def _error_message(error) -> str:
    if isinstance(error, dict):
        return str(error.get("message") or "Video generation failed")
    return str(getattr(error, "message", None) or error)


class ModelRouter:
    def __init__(self, client, config: GeminiConfig, session: Optional[requests.Session] = None):
        self.client = client
        self.config = config
        self.session = session or requests.Session()

    # ---- credential probe ----

    def check_credential(self) -> bool:
        self.client.models.count_tokens(model=presets.VALIDATION_MODEL, contents="test")
        return True

    # ---- text ----

    def generate_structured(
        self,
        model: str,
        system_instruction: str,
        contents: str,
        schema: types.Schema,
        temperature: Optional[float] = None,
    ) -> str:
        logger.info("text call model=%s", model)
        with provider_errors("text"):
            resp = self.client.models.generate_content(
                model=model,
                contents=contents,
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    response_mime_type="application/json",
                    response_schema=schema,
                    temperature=temperature,
                ),
            )
        return getattr(resp, "text", None) or ""

    # ---- image ----

    def generate_image(self, model: str, prompt: str, aspect_ratio: str, image_size: Optional[str] = None) -> MediaAsset:
        backend = select_image_backend(model)
        logger.info("image call model=%s backend=%s", model, backend.kind)
        with provider_errors("image"):
            asset = backend.generate(self.client, prompt, aspect_ratio, image_size)
        logger.debug("image ok: %d bytes %s", len(asset.data), asset.mime_type)
        return asset

    # ---- video ----

    def submit_video(self, model: str, prompt: str, image_bytes: bytes, mime_type: str, aspect_ratio: str):
        logger.info("video submit model=%s", model)
        with provider_errors("video"):
            return self.client.models.generate_videos(
                model=model,
                prompt=prompt,
                image=types.Image(image_bytes=image_bytes, mime_type=mime_type),
                config=types.GenerateVideosConfig(
                    number_of_videos=1,
                    resolution=self.config.video_resolution,
                    aspect_ratio=normalize_aspect_ratio(aspect_ratio),
                ),
            )

    def poll_video(self, handle):
        with provider_errors("video"):
            return self.client.operations.get(handle)

    @staticmethod
    def video_status(handle) -> VideoStatus:
        if not getattr(handle, "done", False):
            return VideoStatus(done=False)
        error = getattr(handle, "error", None)
        if error:
            return VideoStatus(done=True, error=_error_message(error))
        result = getattr(handle, "response", None) or getattr(handle, "result", None)
        videos = getattr(result, "generated_videos", None) or []
        video = getattr(videos[0], "video", None) if videos else None
        return VideoStatus(done=True, result_uri=getattr(video, "uri", None))

    def fetch_video(self, uri: str) -> MediaAsset:
        try:
            resp = self.session.get(
                uri,
                headers={"x-goog-api-key": self.config.api_key},
                timeout=self.config.http_timeout,
            )
        except requests.RequestException as e:
            raise NetworkFailure(f"video download failed: {e}") from e
        if not resp.ok:
            raise NetworkFailure(f"video download failed: HTTP {resp.status_code}", resp.status_code)
        mime = (resp.headers.get("Content-Type") or VIDEO_MIME).split(";")[0].strip()
        if not mime.startswith("video/"):
            mime = VIDEO_MIME
        return MediaAsset(data=resp.content, mime_type=mime)

    # ---- audio ----

    def synthesize_speech(self, model: str, text: str, voice: str) -> bytes:
        logger.info("audio call model=%s voice=%s", model, voice)
        with provider_errors("audio"):
            resp = self.client.models.generate_content(
                model=model,
                contents=text,
                config=types.GenerateContentConfig(
                    response_modalities=["AUDIO"],
                    speech_config=types.SpeechConfig(
                        voice_config=types.VoiceConfig(
                            prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice),
                        ),
                    ),
                ),
            )
        candidates = getattr(resp, "candidates", None) or []
        parts = getattr(candidates[0].content, "parts", None) if candidates else None
        for p in parts or []:
            inline = getattr(p, "inline_data", None)
            if inline and getattr(inline, "data", None):
                return ensure_bytes(inline.data)
        raise GenerationFailure("audio", f"no inline audio data in {model} response")

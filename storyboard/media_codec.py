# -*- coding: utf-8 -*-
"""
In-memory transcoding for generated media.

Images come back either as raw bytes or base64 and are handed out as data
URIs. Speech comes back as headerless PCM (signed 16-bit, mono, 24 kHz) and
gets a RIFF/WAVE header so it plays as-is.
"""
import base64
import io
import wave
from typing import Tuple, Union

from PIL import Image, UnidentifiedImageError

PCM_SAMPLE_RATE = 24000
PCM_CHANNELS = 1
PCM_BITS_PER_SAMPLE = 16
WAV_HEADER_SIZE = 44
WAV_MIME = "audio/wav"
DEFAULT_IMAGE_MIME = "image/png"


def decode_base64(payload: Union[str, bytes]) -> bytes:
    if isinstance(payload, str):
        payload = payload.encode("ascii")
    return base64.b64decode(payload, validate=True)


def ensure_bytes(payload: Union[str, bytes]) -> bytes:
    """SDK responses carry bytes; REST-shaped payloads carry base64 text."""
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    return decode_base64(payload)


def to_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def parse_data_uri(uri: str, default_mime: str = DEFAULT_IMAGE_MIME) -> Tuple[bytes, str]:
    """Split `data:<mime>;base64,<payload>` into (bytes, mime)."""
    if not uri or "," not in uri:
        raise ValueError("not a base64 data URI")
    head, payload = uri.split(",", 1)
    mime = head.split(";")[0]
    mime = mime.split(":", 1)[1] if ":" in mime else ""
    return decode_base64(payload), (mime or default_mime)


def sniff_image_mime(data: bytes, default: str = DEFAULT_IMAGE_MIME) -> str:
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
    except UnidentifiedImageError:
        return default
    return Image.MIME.get(fmt or "", default)


def pcm_to_wav(
    pcm: bytes,
    sample_rate: int = PCM_SAMPLE_RATE,
    channels: int = PCM_CHANNELS,
    bits_per_sample: int = PCM_BITS_PER_SAMPLE,
) -> bytes:
    """Prefix raw little-endian PCM with a canonical 44-byte WAV header."""
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(bits_per_sample // 8)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm)
    return buf.getvalue()

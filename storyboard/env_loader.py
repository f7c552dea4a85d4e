import hashlib
import os

from dotenv import load_dotenv
from google import genai
from pydantic import BaseModel, ValidationError

from storyboard.errors import ConfigError, MissingCredential
from storyboard.logger import get_logger

logger = get_logger("env")

KEY_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")

# GeminiConfig field -> environment override
OVERRIDE_VARS = {
    "poll_interval": "STORYBOARD_POLL_INTERVAL",
    "max_poll_attempts": "STORYBOARD_MAX_POLL_ATTEMPTS",
    "http_timeout": "STORYBOARD_HTTP_TIMEOUT",
    "video_resolution": "STORYBOARD_VIDEO_RESOLUTION",
}


class GeminiConfig(BaseModel):
    """Built once at startup and handed to every component that talks to the provider."""
    api_key: str
    poll_interval: float = 5.0
    max_poll_attempts: int = 24
    http_timeout: float = 120.0
    video_resolution: str = "720p"


def quiet_logs():
    os.environ.setdefault("GRPC_VERBOSITY", "ERROR")
    os.environ.setdefault("GRPC_CPP_ENABLE_STACKTRACE", "0")
    os.environ.setdefault("GRPC_ALTS_ENABLED", "0")


def load_env() -> str:
    # always reload .env so a key edited on disk is picked up
    load_dotenv(override=True)
    for var in KEY_VARS:
        value = os.getenv(var, "")
        if value:
            return value
    return ""


def get_key_info(key: str) -> str:
    if not key:
        return "no key"
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:8]
    return f"key_len={len(key)} | key_sha={digest}"


def validate_key_format(k: str) -> bool:
    # only rules out empty keys and pasted whitespace
    return bool(k and k.strip() and not any(ch.isspace() for ch in k))


def load_config() -> GeminiConfig:
    key = load_env()
    if not validate_key_format(key):
        raise MissingCredential(
            "GEMINI_API_KEY is not set (checked " + ", ".join(KEY_VARS) + ")"
        )
    values = {"api_key": key}
    for field, var in OVERRIDE_VARS.items():
        raw = os.getenv(var)
        if raw is not None:
            values[field] = raw
    try:
        cfg = GeminiConfig(**values)
    except ValidationError as e:
        bad = [OVERRIDE_VARS.get(err["loc"][0], str(err["loc"][0])) for err in e.errors()]
        raise ConfigError("invalid value for " + ", ".join(bad) + f": {e}") from e
    logger.info("config loaded (%s)", get_key_info(key))
    return cfg


def init_client(config: GeminiConfig) -> genai.Client:
    quiet_logs()
    return genai.Client(api_key=config.api_key)

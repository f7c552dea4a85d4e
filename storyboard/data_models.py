from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from storyboard import presets
from storyboard.media_codec import to_data_uri


class _Model(BaseModel):
    # provider JSON and the UI layer both speak camelCase
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Character(_Model):
    id: str
    name: str
    description: str
    visual_prompt: str
    speaker_style: str = ""
    image_url: Optional[str] = None
    is_loading: bool = False


class Scene(_Model):
    id: str
    number: int
    description: str
    dialogue: str = ""
    action: str = ""
    camera: str = ""
    visual_prompt: str
    characters: List[str] = []
    sound_prompt: str = ""
    estimated_duration: str = ""
    transition: str = ""
    video_prompt: str = ""
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    audio_url: Optional[str] = None
    is_loading: bool = False
    is_video_loading: bool = False
    is_audio_loading: bool = False


class GenerationSettings(_Model):
    style: str = presets.DEFAULT_STYLE
    aspect_ratio: str = presets.DEFAULT_ASPECT_RATIO   # "16:9" | "9:16"
    scene_count: int = presets.DEFAULT_SCENE_COUNT
    language: str = presets.DEFAULT_LANGUAGE           # "Chinese" | "English"
    text_model: str = presets.DEFAULT_TEXT_MODEL
    image_model: str = presets.DEFAULT_IMAGE_MODEL
    image_size: str = presets.DEFAULT_IMAGE_SIZE       # "1K" | "2K"
    video_model: str = presets.DEFAULT_VIDEO_MODEL
    audio_model: str = presets.DEFAULT_AUDIO_MODEL
    voice: str = presets.DEFAULT_VOICE

    @field_validator("language")
    @classmethod
    def _known_language(cls, v: str) -> str:
        if v not in presets.LANGUAGES:
            raise ValueError(f"language must be one of {', '.join(presets.LANGUAGES)}")
        return v


class StorySuggestion(_Model):
    suggestion: str
    character_count: int = presets.DEFAULT_CHARACTER_COUNT


class JobState(str, Enum):
    CREATED = "created"
    POLLING = "polling"
    DONE = "done"
    FAILED = "failed"
    TIMEOUT = "timeout"


class GenerationJob(BaseModel):
    """Live video job; only exists for the duration of one generation call."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    handle: Any
    attempts: int = 0
    state: JobState = JobState.CREATED
    result_uri: Optional[str] = None
    error: Optional[str] = None


class MediaAsset(BaseModel):
    data: bytes
    mime_type: str

    @property
    def data_uri(self) -> str:
        return to_data_uri(self.data, self.mime_type)


class MediaKind(str, Enum):
    CHARACTER_IMAGE = "character_image"
    SCENE_IMAGE = "scene_image"
    SCENE_VIDEO = "scene_video"
    SCENE_AUDIO = "scene_audio"


class TaskResult(BaseModel):
    """Terminal message of one per-entity generation task."""
    entity_id: str
    kind: MediaKind
    media_uri: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.media_uri is not None

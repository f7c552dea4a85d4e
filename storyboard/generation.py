# -*- coding: utf-8 -*-
"""
Public entry points of the generation layer.

Single-entity calls (analyze_characters, generate_scene_image, ...) raise
StoryboardError subclasses. The *_task wrappers and the batch runners never
raise: each entity ends in exactly one TaskResult, so a batch always
completes and the caller merges results by id (see storyboard_state).
"""
import asyncio
from typing import Awaitable, List, Optional

from storyboard import presets
from storyboard.data_models import (
    Character, GenerationSettings, MediaAsset, MediaKind, Scene, StorySuggestion, TaskResult,
)
from storyboard.env_loader import GeminiConfig, init_client
from storyboard.errors import PreconditionViolation, StoryboardError
from storyboard.logger import get_logger
from storyboard.media_codec import WAV_MIME, parse_data_uri, pcm_to_wav, to_data_uri
from storyboard.model_router import ModelRouter
from storyboard.prompt_builders import (
    build_character_analysis_instruction,
    build_character_image_prompt,
    build_scene_audio_text,
    build_scene_breakdown_instruction,
    build_scene_breakdown_request,
    build_scene_image_prompt,
    build_scene_video_prompt,
    build_story_suggestion_instruction,
)
from storyboard.schema_validator import (
    CHARACTER_LIST_SCHEMA,
    SCENE_LIST_SCHEMA,
    STORY_SUGGESTION_SCHEMA,
    parse_characters,
    parse_scenes,
    parse_story_suggestion,
)
from storyboard.video_jobs import VideoJobPoller

logger = get_logger("generation")


class GenerationFacade:
    def __init__(self, router: ModelRouter, poller: Optional[VideoJobPoller] = None):
        self.router = router
        self.poller = poller or VideoJobPoller(
            router,
            interval=router.config.poll_interval,
            max_attempts=router.config.max_poll_attempts,
        )

    @classmethod
    def from_config(cls, config: GeminiConfig) -> "GenerationFacade":
        return cls(ModelRouter(init_client(config), config))

    # ================= credential =================

    async def validate_credential(self) -> bool:
        try:
            return await asyncio.to_thread(self.router.check_credential)
        except Exception as e:
            logger.warning("API key validation failed: %s", e)
            return False

    # ================= text =================

    async def suggest_story(
        self,
        story: str,
        scene_count: int = presets.DEFAULT_SCENE_COUNT,
        style: str = presets.DEFAULT_STYLE,
        model: str = presets.VALIDATION_MODEL,
    ) -> StorySuggestion:
        raw = await asyncio.to_thread(
            self.router.generate_structured,
            model,
            build_story_suggestion_instruction(scene_count, style),
            f"故事大纲: {story}",
            STORY_SUGGESTION_SCHEMA,
            0.7,
        )
        return parse_story_suggestion(raw)

    async def analyze_characters(
        self,
        story: str,
        model: str = presets.DEFAULT_TEXT_MODEL,
        language: str = presets.DEFAULT_LANGUAGE,
    ) -> List[Character]:
        raw = await asyncio.to_thread(
            self.router.generate_structured,
            model,
            build_character_analysis_instruction(language),
            f"分析这个故事并提取角色:\n\n{story}",
            CHARACTER_LIST_SCHEMA,
        )
        characters = parse_characters(raw, language)
        logger.info("analyzed %d characters", len(characters))
        return characters

    async def breakdown_scenes(
        self,
        story: str,
        count: int,
        characters: List[Character],
        model: str = presets.DEFAULT_TEXT_MODEL,
        language: str = presets.DEFAULT_LANGUAGE,
    ) -> List[Scene]:
        if count < 1:
            raise PreconditionViolation(f"scene count must be positive, got {count}")
        raw = await asyncio.to_thread(
            self.router.generate_structured,
            model,
            build_scene_breakdown_instruction(count, characters, language),
            build_scene_breakdown_request(story, count),
            SCENE_LIST_SCHEMA,
        )
        scenes = parse_scenes(raw, count)
        logger.info("broke story into %d scenes", len(scenes))
        return scenes

    # ================= media =================

    async def _image(self, prompt: str, model: str, aspect_ratio: str, size: Optional[str]) -> MediaAsset:
        return await asyncio.to_thread(self.router.generate_image, model, prompt, aspect_ratio, size)

    async def generate_character_image(
        self,
        character: Character,
        style: str,
        aspect_ratio: str,
        model: str = presets.DEFAULT_IMAGE_MODEL,
        size: str = presets.DEFAULT_IMAGE_SIZE,
    ) -> str:
        prompt = build_character_image_prompt(character, style)
        asset = await self._image(prompt, model, aspect_ratio, size)
        return asset.data_uri

    async def generate_scene_image(
        self,
        scene: Scene,
        settings: GenerationSettings,
        characters: List[Character],
    ) -> str:
        prompt = build_scene_image_prompt(scene, settings, characters)
        asset = await self._image(prompt, settings.image_model, settings.aspect_ratio, settings.image_size)
        return asset.data_uri

    async def generate_scene_video(self, scene: Scene, settings: GenerationSettings) -> str:
        if not scene.image_url:
            raise PreconditionViolation(
                f"scene {scene.number} has no image; video generation is conditioned on the scene image"
            )
        try:
            image_bytes, mime = parse_data_uri(scene.image_url)
        except ValueError as e:
            raise PreconditionViolation(f"scene {scene.number} image is not a usable data URI") from e

        handle = await asyncio.to_thread(
            self.router.submit_video,
            settings.video_model or presets.DEFAULT_VIDEO_MODEL,
            build_scene_video_prompt(scene),
            image_bytes,
            mime,
            settings.aspect_ratio,
        )
        asset = await self.poller.run(handle)
        return asset.data_uri

    async def generate_scene_audio(
        self,
        scene: Scene,
        settings: GenerationSettings,
        voice: Optional[str] = None,
    ) -> str:
        text = build_scene_audio_text(scene)
        if not text:
            raise PreconditionViolation(f"scene {scene.number} has nothing to speak")
        pcm = await asyncio.to_thread(
            self.router.synthesize_speech,
            settings.audio_model,
            text,
            voice or settings.voice,
        )
        return to_data_uri(pcm_to_wav(pcm), WAV_MIME)

    # ================= per-entity tasks =================

    async def _task(self, entity_id: str, kind: MediaKind, call: Awaitable[str]) -> TaskResult:
        try:
            uri = await call
        except StoryboardError as e:
            logger.warning("%s for %s failed: %s", kind.value, entity_id, e)
            return TaskResult(entity_id=entity_id, kind=kind, error=str(e))
        except Exception as e:
            logger.exception("%s for %s failed unexpectedly", kind.value, entity_id)
            return TaskResult(entity_id=entity_id, kind=kind, error=str(e) or type(e).__name__)
        return TaskResult(entity_id=entity_id, kind=kind, media_uri=uri)

    async def character_image_task(self, character: Character, settings: GenerationSettings) -> TaskResult:
        return await self._task(
            character.id,
            MediaKind.CHARACTER_IMAGE,
            self.generate_character_image(
                character, settings.style, settings.aspect_ratio, settings.image_model, settings.image_size
            ),
        )

    async def scene_image_task(
        self, scene: Scene, settings: GenerationSettings, characters: List[Character]
    ) -> TaskResult:
        return await self._task(
            scene.id, MediaKind.SCENE_IMAGE, self.generate_scene_image(scene, settings, characters)
        )

    async def scene_video_task(self, scene: Scene, settings: GenerationSettings) -> TaskResult:
        return await self._task(scene.id, MediaKind.SCENE_VIDEO, self.generate_scene_video(scene, settings))

    async def scene_audio_task(
        self, scene: Scene, settings: GenerationSettings, voice: Optional[str] = None
    ) -> TaskResult:
        return await self._task(
            scene.id, MediaKind.SCENE_AUDIO, self.generate_scene_audio(scene, settings, voice)
        )

    # ================= batches =================

    async def generate_all_character_images(
        self, characters: List[Character], settings: GenerationSettings
    ) -> List[TaskResult]:
        """One task per character, all in flight at once."""
        return list(await asyncio.gather(*(self.character_image_task(c, settings) for c in characters)))

    async def generate_all_scene_images(
        self, scenes: List[Scene], settings: GenerationSettings, characters: List[Character]
    ) -> List[TaskResult]:
        """Scenes without an image, one at a time; failures do not stop the batch."""
        results = []
        for scene in scenes:
            if scene.image_url:
                continue
            results.append(await self.scene_image_task(scene, settings, characters))
        return results

    async def generate_all_scene_videos(self, scenes: List[Scene], settings: GenerationSettings) -> List[TaskResult]:
        """Scenes without a video, one at a time; scenes lacking an image end as failed results."""
        results = []
        for scene in scenes:
            if scene.video_url:
                continue
            results.append(await self.scene_video_task(scene, settings))
        return results

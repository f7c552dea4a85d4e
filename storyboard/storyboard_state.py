# -*- coding: utf-8 -*-
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from storyboard.data_models import (
    Character, GenerationSettings, MediaKind, Scene, TaskResult,
)

# MediaKind -> (collection, media field, loading flag)
_TARGETS = {
    MediaKind.CHARACTER_IMAGE: ("characters", "image_url", "is_loading"),
    MediaKind.SCENE_IMAGE: ("scenes", "image_url", "is_loading"),
    MediaKind.SCENE_VIDEO: ("scenes", "video_url", "is_video_loading"),
    MediaKind.SCENE_AUDIO: ("scenes", "audio_url", "is_audio_loading"),
}


class StoryboardState(BaseModel):
    """
    The only writer of the character/scene collections.
    Generation tasks never touch this directly; they produce TaskResults
    which are merged here by entity id, one at a time.
    """
    settings: GenerationSettings = Field(default_factory=GenerationSettings)
    characters: List[Character] = []
    scenes: List[Scene] = []
    errors: Dict[str, str] = {}

    def _collection(self, name: str) -> list:
        return self.characters if name == "characters" else self.scenes

    def _patch(self, name: str, entity_id: str, updates: Dict[str, Any]) -> bool:
        items = self._collection(name)
        for i, item in enumerate(items):
            if item.id == entity_id:
                items[i] = item.model_copy(update=updates)
                return True
        return False

    def character(self, entity_id: str) -> Optional[Character]:
        return next((c for c in self.characters if c.id == entity_id), None)

    def scene(self, entity_id: str) -> Optional[Scene]:
        return next((s for s in self.scenes if s.id == entity_id), None)

    def update_character(self, entity_id: str, **updates) -> bool:
        return self._patch("characters", entity_id, updates)

    def update_scene(self, entity_id: str, **updates) -> bool:
        return self._patch("scenes", entity_id, updates)

    def mark_loading(self, kind: MediaKind, ids: Iterable[str]) -> None:
        collection, _, flag = _TARGETS[kind]
        for entity_id in ids:
            self._patch(collection, entity_id, {flag: True})

    def apply(self, result: TaskResult) -> bool:
        """Merge one task's terminal message; loading flag is cleared either way."""
        collection, field, flag = _TARGETS[result.kind]
        updates: Dict[str, Any] = {flag: False}
        key = f"{result.kind.value}:{result.entity_id}"
        if result.ok:
            updates[field] = result.media_uri
            self.errors.pop(key, None)
        else:
            self.errors[key] = result.error or "generation failed"
        return self._patch(collection, result.entity_id, updates)

    def apply_all(self, results: Iterable[TaskResult]) -> int:
        return sum(1 for r in results if self.apply(r))

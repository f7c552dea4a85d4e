# -*- coding: utf-8 -*-
"""
Output contracts for the structured text calls.

Each call declares a provider-side response schema (so the model is
constrained) and a pydantic draft model (so whatever comes back is checked
again locally). A parse error or a missing required field raises
ValidationFailure; nothing here retries.
"""
import json
import re
import uuid
from typing import Any, List, Optional

from google.genai import types
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from storyboard import presets
from storyboard.data_models import Character, Scene, StorySuggestion
from storyboard.errors import ValidationFailure

_S = types.Schema
_T = types.Type

CHARACTER_LIST_SCHEMA = _S(
    type=_T.ARRAY,
    items=_S(
        type=_T.OBJECT,
        properties={
            "name": _S(type=_T.STRING),
            "description": _S(type=_T.STRING, description="性格和角色定位"),
            "visualPrompt": _S(type=_T.STRING, description="用于图像生成的详细外貌描写"),
            "speakerStyle": _S(type=_T.STRING, description="说话风格和声线建议"),
        },
        required=["name", "description", "visualPrompt", "speakerStyle"],
    ),
)

SCENE_LIST_SCHEMA = _S(
    type=_T.ARRAY,
    items=_S(
        type=_T.OBJECT,
        properties={
            "number": _S(type=_T.INTEGER),
            "description": _S(type=_T.STRING, description="场景发生的动作描述"),
            "dialogue": _S(type=_T.STRING, description="关键对白或'无对白'"),
            "action": _S(type=_T.STRING, description="动作类型摘要"),
            "camera": _S(type=_T.STRING, description="镜头角度、景别"),
            "visualPrompt": _S(type=_T.STRING, description="用于生成图像的详细提示词"),
            "videoPrompt": _S(
                type=_T.STRING,
                description="Prompt for video generation (English, motion focused, based on speaker style)",
            ),
            "soundPrompt": _S(type=_T.STRING, description="音效与音乐提示词"),
            "estimatedDuration": _S(type=_T.STRING, description="预估时长 e.g. '4s'"),
            "transition": _S(type=_T.STRING, description="到下一场景的转场建议 (Cut, Dissolve...)"),
            "characters": _S(
                type=_T.ARRAY,
                items=_S(type=_T.STRING),
                description="本场景中出现的角色名字列表 (必须与角色档案中的名字完全一致)",
            ),
        },
        required=[
            "number", "description", "dialogue", "action", "camera", "visualPrompt",
            "videoPrompt", "soundPrompt", "estimatedDuration", "characters",
        ],
    ),
)

STORY_SUGGESTION_SCHEMA = _S(
    type=_T.OBJECT,
    properties={
        "suggestion": _S(type=_T.STRING, description="Markdown格式的分析建议报告"),
        "characterCount": _S(type=_T.INTEGER, description="估算的主要角色数量"),
    },
    required=["suggestion", "characterCount"],
)

NO_SUGGESTION = "无法生成建议。"


class _Draft(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CharacterDraft(_Draft):
    name: str = Field(min_length=1)
    description: str
    visual_prompt: str = Field(min_length=1)
    speaker_style: Optional[str] = None


class SceneDraft(_Draft):
    number: int
    description: str
    dialogue: str
    action: str
    camera: str
    visual_prompt: str = Field(min_length=1)
    video_prompt: str = Field(min_length=1)
    sound_prompt: str
    estimated_duration: str
    transition: str = ""
    characters: List[str]


_CHARACTERS = TypeAdapter(List[CharacterDraft])
_SCENES = TypeAdapter(List[SceneDraft])


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _extract_json_text(raw: str) -> str:
    """Strip a ```json fence if the model wrapped its output in one."""
    txt = (raw or "").strip()
    m = re.search(r"```(?:json)?\s*(\{.*\}|\[.*\])\s*```", txt, flags=re.S | re.I)
    return m.group(1) if m else txt


def load_json(raw: str, what: str) -> Any:
    try:
        return json.loads(_extract_json_text(raw))
    except json.JSONDecodeError as e:
        raise ValidationFailure(f"{what}: response is not valid JSON ({e.msg})") from e


def _validate(adapter: TypeAdapter, data: Any, what: str):
    try:
        return adapter.validate_python(data)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ValidationFailure(f"{what}: {problems}") from e


def parse_characters(raw: str, language: str = presets.DEFAULT_LANGUAGE) -> List[Character]:
    drafts = _validate(_CHARACTERS, load_json(raw, "characters"), "characters")
    fallback_voice = presets.DEFAULT_VOICE_LABEL.get(language, presets.DEFAULT_VOICE_LABEL["English"])
    return [
        Character(
            id=new_id("char"),
            name=d.name,
            description=d.description,
            visual_prompt=d.visual_prompt,
            speaker_style=d.speaker_style or fallback_voice,
        )
        for d in drafts
    ]


def parse_scenes(raw: str, expected_count: int) -> List[Scene]:
    drafts = _validate(_SCENES, load_json(raw, "scenes"), "scenes")
    if len(drafts) != expected_count:
        raise ValidationFailure(
            f"scenes: expected exactly {expected_count} scenes, got {len(drafts)}"
        )
    scenes = []
    for i, d in enumerate(drafts, 1):
        fields = d.model_dump(exclude={"number"})
        scenes.append(Scene(id=new_id("scene"), number=i, **fields))
    return scenes


def parse_story_suggestion(raw: str) -> StorySuggestion:
    data = load_json(raw, "story suggestion")
    if not isinstance(data, dict):
        raise ValidationFailure("story suggestion: expected a JSON object")
    count = data.get("characterCount")
    if isinstance(count, bool) or not isinstance(count, int):
        count = presets.DEFAULT_CHARACTER_COUNT
    return StorySuggestion(
        suggestion=data.get("suggestion") or NO_SUGGESTION,
        character_count=count,
    )

# -*- coding: utf-8 -*-
from typing import List

from storyboard.character_bible import character_bible_text, character_context
from storyboard.data_models import Character, GenerationSettings, Scene
from storyboard.errors import PreconditionViolation
from storyboard.presets import LANGUAGES, style_block

_NO_DIALOGUE = {"", "无对白", "无", "none", "no dialogue", "n/a"}


def _language_directive(language: str) -> str:
    if language not in LANGUAGES:
        raise PreconditionViolation(
            f"unsupported language {language!r} (expected one of {', '.join(LANGUAGES)})"
        )
    if language == "English":
        return "Write every field in English."
    return "所有输出内容必须使用中文 (videoPrompt 除外，使用英文)。"


def build_story_suggestion_instruction(scene_count: int, style: str) -> str:
    """
    Phân tích nhanh: ước lượng số nhân vật + báo cáo gợi ý (Markdown ngắn).
    """
    return f"""
你是一位资深分镜导演和制片人。
请根据用户提供的故事大纲、预选风格({style})和预选分镜数({scene_count})，进行分析。

请分析并提取两个关键信息：
1. **角色数量估算**：根据故事内容，判断需要设计几个主要角色（用于后续生成角色立绘）。
2. **分析建议报告**：生成一份极简的分析报告（Markdown格式）。

**分析报告格式要求**：
*   **核心建议**：
    *   **故事主题**：[一句话概括]
    *   **建议风格**：[{style} 或推荐风格]
    *   **建议分镜**：[{scene_count} 或推荐数量]
    *   **角色数量**：[建议的角色数量] 人
*   **节奏分析**：[简短点评节奏与张力]
*   **风格建议**：[简短描述光影与视觉基调]
*   **分镜逻辑**：[简短描述镜头分配思路，如：起(1-2)-承(3-4)-转(5-6)-合(7-8)]

要求：语言极其简练，直击重点，不要详细展开。
""".strip()


def build_character_analysis_instruction(language: str) -> str:
    return f"""
你是一位专业的编剧和角色设计师。
分析提供的故事并提取主要角色。
对于每个角色，请提供：
1. 姓名 (name)
2. 简短的性格和角色描述 (description)。
3. 极其详细的视觉描述 (visualPrompt)，用于AI绘画生成 (包含外貌、服装、关键特征)。
4. 说话/配音风格建议 (speakerStyle)，描述角色的声线特质和说话习惯（例如：语速快、沉稳低音、活泼高亢）。

{_language_directive(language)}
""".strip()


def build_scene_breakdown_instruction(scene_count: int, characters: List[Character], language: str) -> str:
    """
    Chia truyện thành đúng scene_count cảnh; Character Bible đi kèm để tên nhân vật khớp.
    """
    return f"""
你是一位专业的分镜师。
将故事分解为恰好 {scene_count} 个关键场景，按顺序编号 1 到 {scene_count}。

**关键要求 - 角色一致性**：
1. 必须明确列出每个场景中出现的角色名字（必须与角色档案中的名字完全一致）。
2. 场景的 "visualPrompt" 必须再次详细描述角色的穿着和外貌，不要只写名字。

**其他要求**:
1. {_language_directive(language)}
2. **videoPrompt (英文)**: 专用于生成视频。必须专注于**视觉动作**和**运镜**。
   *   将角色的 "SPEAKER_STYLE" (说话风格) 转化为**视觉化的表演指令**。
   *   例如：SPEAKER_STYLE 是 "aggressive/shouting"，videoPrompt 应包含 "angry facial expression, gesturing wildly"。
   *   SPEAKER_STYLE 是 "shy/whispering"，videoPrompt 应包含 "looking down, subtle movements"。
   *   不要包含对白文本，只描述动作。
3. **soundPrompt**: 描述该场景的音效 (SFX) 和背景音乐氛围。
4. **estimatedDuration**: 估计该镜头在成片中的时长 (如 "5s")。
5. **transition**: 到下一个场景的转场建议 (如 Cut, Dissolve)。

角色档案:
{character_context(characters) or "(none)"}
""".strip()


def build_scene_breakdown_request(story: str, scene_count: int) -> str:
    return f"故事内容: {story}\n\n生成 {scene_count} 个分镜场景。"


def build_character_image_prompt(character: Character, style: str) -> str:
    return (
        f"Character Design Sheet, style: {style_block(style)}. {character.visual_prompt}. "
        "Neutral background, full body shot, detailed character design."
    )


def build_scene_image_prompt(scene: Scene, settings: GenerationSettings, characters: List[Character]) -> str:
    """Character definitions first, then the scene, then style and camera."""
    parts = []
    cb_text = character_bible_text(scene.characters, characters)
    if cb_text:
        parts.append(cb_text)
    parts.append(f"SCENE CONTENT:\n{scene.visual_prompt}")
    parts.append(f"Style: {style_block(settings.style)}. Cinematic shot.")
    if scene.camera:
        parts.append(f"Camera: {scene.camera}.")
    parts.append("High quality, detailed, 8k resolution.")
    return "\n\n".join(parts)


def build_scene_video_prompt(scene: Scene) -> str:
    # Veo renders silent clips; keep dialogue out of the motion prompt
    if scene.video_prompt.strip():
        return scene.video_prompt.strip()
    return f"{scene.description}. Cinematic motion, slow motion, high quality."


def build_scene_audio_text(scene: Scene) -> str:
    line = (scene.dialogue or "").strip()
    if line.lower() in _NO_DIALOGUE:
        return scene.description.strip()
    return line

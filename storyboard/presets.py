# -*- coding: utf-8 -*-
"""
Central registry for StoryBoard Studio.
Model identifiers per modality, supported aspect ratios / sizes / languages,
and the visual style presets that get injected into image prompts.
"""

DEFAULT_TEXT_MODEL = "gemini-3-pro-preview"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_VIDEO_MODEL = "veo-3.1-fast-generate-preview"
DEFAULT_AUDIO_MODEL = "gemini-2.5-flash-preview-tts"
VALIDATION_MODEL = "gemini-2.5-flash"

# Veo accepts only these two; image calls use the same pair.
ASPECT_RATIOS = ("16:9", "9:16")
DEFAULT_ASPECT_RATIO = "16:9"

IMAGE_SIZES = ("1K", "2K")
DEFAULT_IMAGE_SIZE = "1K"
# only this content-endpoint model accepts an image_size bucket
SIZED_IMAGE_MODELS = ("gemini-3-pro-image-preview",)

LANGUAGES = ("Chinese", "English")
DEFAULT_LANGUAGE = "Chinese"

DEFAULT_VOICE_LABEL = {
    "Chinese": "标准声线",
    "English": "Standard voice",
}

DEFAULT_VOICE = "Kore"

DEFAULT_SCENE_COUNT = 8
DEFAULT_CHARACTER_COUNT = 4

STYLE_PRESETS = {
    "电影感": "cinematic lighting, anamorphic lens, shallow depth of field, filmic grain",
    "静谧电影感": "quiet cinematic mood, soft natural light, muted palette, still composition",
    "动漫": "anime, clean lineart, cel shading, vivid colors",
    "吉卜力风格": "Studio Ghibli inspired, hand-painted backgrounds, warm pastoral palette",
    "皮克斯3D": "Pixar style 3D animation, soft global illumination, expressive characters",
    "赛博朋克": "cyberpunk, neon rain, wet streets, high contrast magenta and cyan",
    "水彩": "watercolor painting, soft bleeding edges, paper texture",
    "中国水墨": "Chinese ink wash painting, xuan paper, expressive brush strokes, negative space",
    "油画": "oil painting, visible brush strokes, rich impasto",
    "美漫风格": "American comic book style, bold inks, halftone shading",
    "像素风": "pixel art, limited palette, crisp pixels",
    "线稿": "line art sketch, monochrome pencil, no shading",
    "3D渲染": "high quality 3D render, physically based materials, studio lighting",
    "暗黑哥特": "dark gothic, candlelight, heavy shadows, desaturated palette",
    "黏土定格": "claymation stop motion, handcrafted clay textures",
    "黑白电影": "black and white film, high contrast, film noir lighting",
}
DEFAULT_STYLE = "电影感"


def style_block(style: str) -> str:
    hint = STYLE_PRESETS.get(style)
    if not hint:
        return style or DEFAULT_STYLE
    return f"{style} ({hint})"

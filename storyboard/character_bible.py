# -*- coding: utf-8 -*-
from typing import List, Optional

from storyboard.data_models import Character

CONSISTENCY_HEADER = "IMPORTANT CHARACTER REFERENCES (MAINTAIN CONSISTENCY):"


def names_match(registry_name: str, scene_name: str) -> bool:
    """
    Loose match: either name contains the other (case-sensitive).
    The text model does not always echo names verbatim, e.g. "Akira" vs
    "Akira (cyberninja)".
    """
    return scene_name in registry_name or registry_name in scene_name


def find_character(name: str, registry: List[Character]) -> Optional[Character]:
    for c in registry:
        if names_match(c.name, name):
            return c
    return None


def match_characters(names: Optional[List[str]], registry: List[Character]) -> List[Character]:
    """Registry entries referenced by a scene, in scene order; unmatched names are dropped."""
    matched = []
    for n in names or []:
        c = find_character(n, registry)
        if c is not None:
            matched.append(c)
    return matched


def character_bible_text(names: Optional[List[str]], registry: List[Character]) -> str:
    """Render the consistency block for a scene, or "" when nobody matches."""
    chosen = match_characters(names, registry)
    if not chosen:
        return ""
    lines = [CONSISTENCY_HEADER]
    for c in chosen:
        lines.append(f"CHARACTER [{c.name}] VISUAL DEF: {c.visual_prompt}")
    return "\n".join(lines)


def character_context(registry: List[Character]) -> str:
    """Full registry as handed to the scene breakdown call."""
    return "\n\n".join(
        f"NAME: {c.name}\nVISUAL: {c.visual_prompt}\nSPEAKER_STYLE: {c.speaker_style}"
        for c in registry
    )

"""Gemini prompt building and image generation."""

from vocabart.gemini.prompt import STYLE_KEYWORDS, build_prompt, is_artistic, negative_constraints
from vocabart.gemini.image import ImageClient, build_payload, extract_image

__all__ = [
    # prompt.py
    "STYLE_KEYWORDS",
    "build_prompt",
    "is_artistic",
    "negative_constraints",
    # image.py
    "ImageClient",
    "build_payload",
    "extract_image",
]

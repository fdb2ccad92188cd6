"""Build the image prompt for a flashcard term.

Three framings, picked in order:
  1. a deck-wide style was given -> wordless image in that style
  2. the card hint reads like art direction -> wordless image following it
  3. otherwise -> wordless clipart icon on white

Every framing ends with the same no-text clause so the model draws the
idea rather than writing the word.
"""

from typing import Iterable, Optional

# Case-insensitive substrings that mark a hint as art direction
STYLE_KEYWORDS = frozenset({
    "style",
    "painting",
    "drawing",
    "photo",
    "realistic",
    "art",
    "gogh",
    "picasso",
    "monet",
    "dali",
    "sketch",
    "3d",
})

QUALITY_SUFFIX = "Visual depiction only. Unlabeled."


def negative_constraints(term: str) -> str:
    """The no-text clause appended to every prompt."""
    return (
        f'Do not spell the word "{term}". Do not write any text, letters, or numbers. '
        "No typography, no signage, no labels inside the image. Symbolism only."
    )


def is_artistic(hint: Optional[str], keywords: Iterable[str] = STYLE_KEYWORDS) -> bool:
    """True if the hint mentions any style keyword."""
    if not hint:
        return False
    lowered = hint.lower()
    return any(k.lower() in lowered for k in keywords)


def build_prompt(
    term: str,
    custom_prompt: Optional[str] = None,
    style: Optional[str] = None,
    *,
    keywords: Iterable[str] = STYLE_KEYWORDS,
) -> str:
    """Compose the generation prompt for `term`.

    Args:
        term: The card term to illustrate.
        custom_prompt: Optional per-card hint.
        style: Optional deck-wide style; takes priority over the hint's own style.
        keywords: Vocabulary that marks a hint as art direction.

    Returns:
        The full prompt string, ending with the no-text clause.
    """
    hint = (custom_prompt or "").strip()
    style = (style or "").strip()

    if style:
        parts = [f"A strictly wordless, text-free image of {term}, with an overarching style of {style}."]
        if hint:
            parts.append(f"{hint}.")
        parts.append("High quality, detailed.")
    elif is_artistic(hint, keywords):
        parts = [f"A strictly wordless, text-free image of {term}, {hint}.", "High quality, detailed."]
    elif hint:
        parts = [
            f"A strictly wordless, text-free clipart icon of {term} described as {hint}.",
            "Isolated on white background. Vector style, vibrant colors.",
        ]
    else:
        parts = [
            f"A strictly wordless, text-free clipart icon of {term}.",
            "Isolated on white background. Vector style, vibrant colors.",
        ]

    parts.append(QUALITY_SUFFIX)
    parts.append(negative_constraints(term))
    return " ".join(parts)

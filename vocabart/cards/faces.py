"""
Render flashcard faces with Pillow.

Front: the generated art above a coloured band carrying the term, or a
placeholder when the card has no image. Back: the term over its wrapped
definition, framed in the same colour so both sides of a card match.
"""

import os
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from vocabart.cards.model import Card
from vocabart.utils.image import open_data_uri

# Face size at 300 DPI (3.25" x 3.5")
FACE_WIDTH = 975
FACE_HEIGHT = 1050

BORDER_PX = 18
LABEL_HEIGHT = 170
PADDING_PX = 48

# Border / label colours, cycled by deck position
PALETTE = [
    "#22c55e",
    "#3b82f6",
    "#f97316",
    "#ef4444",
    "#8b5cf6",
    "#06b6d4",
    "#ec4899",
    "#4f46e5",
]

COLORS = {
    "white": "#FFFFFF",
    "ink": "#1e293b",
    "muted": "#475569",
    "failed": "#f87171",
    "pending": "#cbd5e1",
}


def card_color(index: int) -> str:
    return PALETTE[index % len(PALETTE)]


def _load_font(name: str, size: int):
    """Try to load a font, falling back to Pillow's default."""
    font_paths = [
        f"C:/Windows/Fonts/{name}.ttf",
        f"/usr/share/fonts/truetype/dejavu/{name}.ttf",
        f"/usr/share/fonts/truetype/{name}.ttf",
        f"/Library/Fonts/{name}.ttf",
        str(Path(__file__).parent.parent / "fonts" / f"{name}.ttf"),
    ]

    for path in font_paths:
        if os.path.exists(path):
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                continue

    try:
        return ImageFont.truetype(name, size)
    except OSError:
        pass

    return ImageFont.load_default()


def get_fonts() -> dict:
    return {
        "term": _load_font("DejaVuSans-Bold", 64),
        "title": _load_font("DejaVuSans-Bold", 58),
        "body": _load_font("DejaVuSans", 42),
        "marker": _load_font("DejaVuSans-Bold", 44),
    }


def _text_size(draw: ImageDraw.ImageDraw, text: str, font) -> tuple[int, int]:
    bbox = draw.textbbox((0, 0), text, font=font)
    return bbox[2] - bbox[0], bbox[3] - bbox[1]


def draw_centered_text(draw, text: str, center_x: int, y: int, font, fill: str) -> None:
    """Draw text centered at a given X position."""
    width, _ = _text_size(draw, text, font)
    draw.text((center_x - width // 2, y), text, font=font, fill=fill)


def wrap_text(draw, text: str, font, max_width: int) -> list[str]:
    """Greedy word wrap to `max_width` pixels."""
    lines = []
    current_line = []
    for word in text.split():
        test_line = " ".join(current_line + [word])
        if _text_size(draw, test_line, font)[0] <= max_width:
            current_line.append(word)
        else:
            if current_line:
                lines.append(" ".join(current_line))
            current_line = [word]
    if current_line:
        lines.append(" ".join(current_line))
    return lines


def _fit(img: Image.Image, box_w: int, box_h: int) -> Image.Image:
    """Scale `img` to fit inside the box, keeping aspect ratio."""
    scale = min(box_w / img.width, box_h / img.height)
    size = (max(1, int(img.width * scale)), max(1, int(img.height * scale)))
    return img.resize(size, Image.Resampling.LANCZOS)


def render_front(card: Card, index: int, failed: bool = True, fonts: Optional[dict] = None) -> Image.Image:
    """Render the picture side of `card`.

    Args:
        card: Card to draw.
        index: Deck position; picks the colour.
        failed: How to mark a missing image. True draws "Generation Failed",
            False draws a pending placeholder.
        fonts: Preloaded fonts from `get_fonts()`.
    """
    fonts = fonts or get_fonts()
    color = card_color(index)
    face = Image.new("RGB", (FACE_WIDTH, FACE_HEIGHT), COLORS["white"])
    draw = ImageDraw.Draw(face)

    art_x = BORDER_PX + PADDING_PX
    art_y = BORDER_PX + PADDING_PX
    art_w = FACE_WIDTH - 2 * art_x
    art_h = FACE_HEIGHT - LABEL_HEIGHT - BORDER_PX - 2 * PADDING_PX

    art = open_data_uri(card.image)
    if art is not None:
        fitted = _fit(art, art_w, art_h)
        face.paste(fitted, (art_x + (art_w - fitted.width) // 2, art_y + (art_h - fitted.height) // 2))
    elif failed:
        _, h = _text_size(draw, "Generation Failed", fonts["marker"])
        draw_centered_text(draw, "Generation Failed", FACE_WIDTH // 2, art_y + (art_h - h) // 2, fonts["marker"], COLORS["failed"])
    else:
        r = 60
        cx, cy = FACE_WIDTH // 2, art_y + art_h // 2
        draw.ellipse((cx - r, cy - r, cx + r, cy + r), outline=COLORS["pending"], width=12)

    # Term band
    band_top = FACE_HEIGHT - LABEL_HEIGHT
    draw.rectangle((0, band_top, FACE_WIDTH, FACE_HEIGHT), fill=color)
    _, h = _text_size(draw, card.term, fonts["term"])
    draw_centered_text(draw, card.term, FACE_WIDTH // 2, band_top + (LABEL_HEIGHT - h) // 2, fonts["term"], COLORS["white"])

    draw.rectangle((0, 0, FACE_WIDTH - 1, FACE_HEIGHT - 1), outline=color, width=BORDER_PX)
    return face


def render_back(card: Card, index: int, fonts: Optional[dict] = None) -> Image.Image:
    """Render the definition side of `card`."""
    fonts = fonts or get_fonts()
    color = card_color(index)
    face = Image.new("RGB", (FACE_WIDTH, FACE_HEIGHT), COLORS["white"])
    draw = ImageDraw.Draw(face)

    max_width = FACE_WIDTH - 2 * (BORDER_PX + PADDING_PX)
    title_lines = wrap_text(draw, card.term, fonts["title"], max_width)
    body_lines = wrap_text(draw, card.definition, fonts["body"], max_width)

    title_h = _text_size(draw, "Ag", fonts["title"])[1] + 16
    body_h = _text_size(draw, "Ag", fonts["body"])[1] + 14
    rule_gap = 40
    block_h = len(title_lines) * title_h + rule_gap + len(body_lines) * body_h

    y = max(BORDER_PX + PADDING_PX, (FACE_HEIGHT - block_h) // 2)
    for line in title_lines:
        draw_centered_text(draw, line, FACE_WIDTH // 2, y, fonts["title"], COLORS["ink"])
        y += title_h

    draw.line((FACE_WIDTH // 4, y + rule_gap // 3, 3 * FACE_WIDTH // 4, y + rule_gap // 3), fill=color, width=4)
    y += rule_gap

    for line in body_lines:
        if y + body_h > FACE_HEIGHT - BORDER_PX:
            break
        draw_centered_text(draw, line, FACE_WIDTH // 2, y, fonts["body"], COLORS["muted"])
        y += body_h

    draw.rectangle((0, 0, FACE_WIDTH - 1, FACE_HEIGHT - 1), outline=color, width=BORDER_PX)
    return face

"""
Export a deck to a print-ready duplex PDF.

Creates landscape letter (11" x 8.5") pages at 300 DPI with 6 cards per
side on a 3x2 grid. Each front page is followed by its back page, whose
cells are filled in mirrored row order so that printing double-sided and
flipping on the long edge puts every definition behind its picture.
"""

import logging
from pathlib import Path
from typing import Sequence

from PIL import Image, ImageDraw

from vocabart.cards.faces import FACE_HEIGHT, FACE_WIDTH, get_fonts, render_back, render_front
from vocabart.cards.model import Card
from vocabart.deck.layout import PAGE_SIZE, ROW_SIZE, paginate
from vocabart.errors import EmptyDeckError

logger = logging.getLogger(__name__)

PDF_NAME = "flashcard-deck.pdf"

# Page specifications at 300 DPI
DPI = 300
PAGE_WIDTH_PX = int(11.0 * DPI)   # 3300
PAGE_HEIGHT_PX = int(8.5 * DPI)   # 2550

# Unprintable margin
MARGIN_PX = int(0.25 * DPI)  # 75

SAFE_WIDTH_PX = PAGE_WIDTH_PX - (2 * MARGIN_PX)
SAFE_HEIGHT_PX = PAGE_HEIGHT_PX - (2 * MARGIN_PX)

COLS = ROW_SIZE
ROWS = PAGE_SIZE // ROW_SIZE

GUTTER_PX = int(0.125 * DPI)  # 37px
GUIDE_EXTEND_PX = 20

CUT_GUIDE_COLOR = (200, 200, 200)


def _grid_origin() -> tuple[int, int]:
    grid_width = (COLS * FACE_WIDTH) + ((COLS - 1) * GUTTER_PX)
    grid_height = (ROWS * FACE_HEIGHT) + ((ROWS - 1) * GUTTER_PX)
    start_x = MARGIN_PX + (SAFE_WIDTH_PX - grid_width) // 2
    start_y = MARGIN_PX + (SAFE_HEIGHT_PX - grid_height) // 2
    return start_x, start_y


def _cell_position(slot: int) -> tuple[int, int]:
    start_x, start_y = _grid_origin()
    col = slot % COLS
    row = slot // COLS
    return start_x + col * (FACE_WIDTH + GUTTER_PX), start_y + row * (FACE_HEIGHT + GUTTER_PX)


def _draw_cut_guides(draw: ImageDraw.ImageDraw) -> None:
    start_x, start_y = _grid_origin()

    # Vertical guides between columns
    for col in range(1, COLS):
        guide_x = start_x + col * FACE_WIDTH + (col - 1) * GUTTER_PX + GUTTER_PX // 2
        for row in range(ROWS):
            y_start = start_y + row * (FACE_HEIGHT + GUTTER_PX) - GUIDE_EXTEND_PX
            y_end = start_y + row * (FACE_HEIGHT + GUTTER_PX) + FACE_HEIGHT + GUIDE_EXTEND_PX
            draw.line([(guide_x, y_start), (guide_x, y_end)], fill=CUT_GUIDE_COLOR, width=1)

    # Horizontal guides between rows
    for row in range(1, ROWS):
        guide_y = start_y + row * FACE_HEIGHT + (row - 1) * GUTTER_PX + GUTTER_PX // 2
        for col in range(COLS):
            x_start = start_x + col * (FACE_WIDTH + GUTTER_PX) - GUIDE_EXTEND_PX
            x_end = start_x + col * (FACE_WIDTH + GUTTER_PX) + FACE_WIDTH + GUIDE_EXTEND_PX
            draw.line([(x_start, guide_y), (x_end, guide_y)], fill=CUT_GUIDE_COLOR, width=1)


def create_print_page(faces: Sequence[Image.Image], draw_cut_guides: bool = True) -> Image.Image:
    """Place up to PAGE_SIZE faces on one page, filling the grid row by row."""
    page = Image.new("RGB", (PAGE_WIDTH_PX, PAGE_HEIGHT_PX), (255, 255, 255))

    for slot, face in enumerate(faces[:PAGE_SIZE]):
        page.paste(face, _cell_position(slot))

    if draw_cut_guides:
        _draw_cut_guides(ImageDraw.Draw(page))

    return page


def render_pages(cards: Sequence[Card], draw_cut_guides: bool = True) -> list[Image.Image]:
    """Front and back page images for the whole deck, interleaved for duplex printing."""
    fonts = get_fonts()
    pages = []

    for layout_page in paginate(cards, PAGE_SIZE, ROW_SIZE):
        fronts = [render_front(cards[i], i, fonts=fonts) for i in layout_page.front]
        backs = [render_back(cards[i], i, fonts=fonts) for i in layout_page.back]
        pages.append(create_print_page(fronts, draw_cut_guides))
        pages.append(create_print_page(backs, draw_cut_guides))
        logger.info(
            f"  Page {layout_page.number}: cards {layout_page.start + 1}-{layout_page.stop}"
        )

    return pages


def export_print_pdf(cards: Sequence[Card], output_path: Path, draw_cut_guides: bool = True) -> int:
    """Render the deck to a multi-page PDF.

    Returns:
        Number of PDF pages written (two per sheet).

    Raises:
        EmptyDeckError: If there are no cards.
    """
    cards = list(cards)
    if not cards:
        raise EmptyDeckError("Cannot print: no flashcards have been generated yet.")

    logger.info(f"Rendering {len(cards)} cards for print...")
    pages = render_pages(cards, draw_cut_guides)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    pages[0].save(
        output_path,
        "PDF",
        resolution=DPI,
        save_all=True,
        append_images=pages[1:],
    )
    logger.info(f"Saved PDF: {output_path} ({len(pages)} pages)")
    return len(pages)

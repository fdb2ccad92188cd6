"""Zip every generated card image, one entry per card."""

import logging
import zipfile
from pathlib import Path
from typing import Iterable

from vocabart.cards.model import Card
from vocabart.errors import EmptyDeckError
from vocabart.utils.image import decode_data_uri, extension_for, safe_filename

logger = logging.getLogger(__name__)

ARCHIVE_NAME = "flashcard-images.zip"


def archive_entries(cards: Iterable[Card]) -> list[tuple[str, bytes]]:
    """(entry name, image bytes) for each card that has a decodable image.

    Names come from the sanitised term; collisions get `_2`, `_3`, ... suffixes.
    """
    entries = []
    used: dict[str, int] = {}

    for card in cards:
        if not card.image:
            continue
        try:
            mime, raw = decode_data_uri(card.image)
        except ValueError as e:
            logger.warning(f"Skipping {card.term!r} in archive: {e}")
            continue

        stem = safe_filename(card.term)
        used[stem] = used.get(stem, 0) + 1
        if used[stem] > 1:
            stem = f"{stem}_{used[stem]}"
        entries.append((f"{stem}.{extension_for(mime)}", raw))

    return entries


def export_archive(cards: Iterable[Card], output_path: Path) -> int:
    """Write the image archive to `output_path`.

    Returns:
        Number of images written.

    Raises:
        EmptyDeckError: If no card has an image.
    """
    entries = archive_entries(cards)
    if not entries:
        raise EmptyDeckError("No generated images to archive. Generate the deck first.")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(output_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, raw in entries:
            zf.writestr(name, raw)

    logger.info(f"Saved {len(entries)} images to {output_path}")
    return len(entries)

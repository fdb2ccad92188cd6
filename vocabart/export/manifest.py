"""Flat JSON manifest of the deck: term, definition and image per card."""

import dataclasses
import json
import logging
from pathlib import Path
from typing import Iterable

from vocabart.cards.model import Card
from vocabart.errors import EmptyDeckError

logger = logging.getLogger(__name__)

MANIFEST_NAME = "flashcard-data.json"
MISSING_IMAGE = "N/A"
HINTS_NAME = "flashcard-hints.json"


def build_manifest(cards: Iterable[Card]) -> list[dict]:
    """Manifest records in deck order; cards without an image report "N/A"."""
    return [
        {
            "term": card.term,
            "definition": card.definition,
            "imageSrc": card.image or MISSING_IMAGE,
        }
        for card in cards
        if card.term and card.definition
    ]


def export_manifest(cards: Iterable[Card], output_path: Path) -> int:
    """Write the manifest as indented JSON. Returns the number of records.

    Raises:
        EmptyDeckError: If there are no cards to write.
    """
    records = build_manifest(cards)
    if not records:
        raise EmptyDeckError("No flashcard data to export. Generate the deck first.")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(records, f, indent=2, ensure_ascii=False)

    logger.info(f"Saved manifest ({len(records)} cards) to {output_path}")
    return len(records)


def load_manifest(path: Path) -> list[Card]:
    """Read a manifest back into cards. Records missing term or definition are skipped."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Manifest {path} must be a JSON array")

    cards = []
    for record in data:
        if not isinstance(record, dict):
            continue
        term = str(record.get("term") or "").strip()
        definition = str(record.get("definition") or "").strip()
        if not term or not definition:
            continue
        image = record.get("imageSrc")
        if not image or image == MISSING_IMAGE:
            image = None
        cards.append(Card(term=term, definition=definition, image=image))

    logger.info(f"Loaded {len(cards)} cards from {path}")
    return cards


def export_hints(cards: Iterable[Card], output_path: Path) -> int:
    """Write a term -> hint map for cards that carry a hint. Returns the number of entries.

    The manifest records stay term/definition/imageSrc only; hints live in this
    sidecar so a later regeneration keeps them. The first card wins for a repeated term.
    """
    hints = {}
    for card in cards:
        if card.custom_prompt and card.term not in hints:
            hints[card.term] = card.custom_prompt

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(hints, f, indent=2, ensure_ascii=False)
    return len(hints)


def load_hints(path: Path) -> dict[str, str]:
    """Read a hint sidecar; a missing file means no hints."""
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Hint file {path} must be a JSON object")
    return {str(k): v.strip() for k, v in data.items() if isinstance(v, str) and v.strip()}


def apply_hints(cards: Iterable[Card], hints: dict[str, str]) -> list[Card]:
    """Copies of `cards` with each hint looked up by term."""
    return [
        dataclasses.replace(card, custom_prompt=hints[card.term]) if card.term in hints else card
        for card in cards
    ]

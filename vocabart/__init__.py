"""Vocabart - AI-illustrated printable flashcard decks."""

__version__ = "0.1.0"

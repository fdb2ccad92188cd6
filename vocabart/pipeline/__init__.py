"""Deck generation pipeline."""

from vocabart.pipeline.generate import DeckGenerator, DeckResult, ProgressUpdate

__all__ = ["DeckGenerator", "DeckResult", "ProgressUpdate"]

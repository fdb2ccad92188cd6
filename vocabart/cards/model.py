"""Card entity and the in-memory card store."""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


@dataclass
class Card:
    """One term/definition flashcard.

    `term` and `definition` are fixed once parsed. `custom_prompt` and
    `image` change only through CardStore. `image` is a data URI, or
    None while pending or after a failed generation.
    """

    term: str
    definition: str
    custom_prompt: Optional[str] = None
    image: Optional[str] = None


class CardStore:
    """Ordered card collection for the current deck.

    Every `replace()` starts a new generation. Writes carry the generation
    they were issued under and are dropped if the deck has since been
    replaced, so a late response from an old batch cannot land on a new
    card that happens to share its position or term.
    """

    def __init__(self, cards: Optional[list[Card]] = None):
        self._cards: list[Card] = list(cards or [])
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def cards(self) -> tuple[Card, ...]:
        return tuple(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(tuple(self._cards))

    def __getitem__(self, index: int) -> Card:
        return self._cards[index]

    def replace(self, cards: list[Card]) -> int:
        """Discard the current deck and install `cards`. Returns the new generation."""
        self._cards = list(cards)
        self._generation += 1
        logger.debug(f"Card store replaced: {len(self._cards)} cards, generation {self._generation}")
        return self._generation

    def find(self, term: str) -> Optional[int]:
        """Index of the first card whose term equals `term`, or None."""
        for idx, card in enumerate(self._cards):
            if card.term == term:
                return idx
        return None

    def set_image(self, index: int, image: Optional[str], generation: int) -> bool:
        """Write a card's image. Returns False if the write was stale and dropped."""
        if generation != self._generation:
            logger.debug(
                f"Dropping stale image for position {index} "
                f"(generation {generation}, current {self._generation})"
            )
            return False
        self._cards[index].image = image
        return True

    def set_custom_prompt(self, index: int, custom_prompt: Optional[str], generation: int) -> bool:
        """Write a card's hint. Returns False if the write was stale and dropped."""
        if generation != self._generation:
            logger.debug(f"Dropping stale hint for position {index} (generation {generation})")
            return False
        self._cards[index].custom_prompt = custom_prompt
        return True

"""Deck generation: parse, lay out, then illustrate every card concurrently.

All image requests for a deck run as independent tasks on one event loop.
Each task writes only its own card, so the store needs no lock; a failed
card ends with `image = None` and never affects its siblings.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from vocabart.cards.model import Card, CardStore
from vocabart.cards.parser import parse_vocabulary
from vocabart.deck.layout import PAGE_SIZE, Page, paginate
from vocabart.errors import CardNotFoundError, EmptyDeckError
from vocabart.gemini.image import ImageClient

logger = logging.getLogger(__name__)


@dataclass
class ProgressUpdate:
    """Emitted once per resolved card during a full deck run."""

    completed: int
    total: int
    term: str
    success: bool

    @property
    def progress_percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return (self.completed / self.total) * 100


@dataclass
class DeckResult:
    """Outcome of one full deck generation."""

    generation: int
    pages: list[Page]
    total: int = 0
    succeeded: int = 0
    failed_terms: list[str] = field(default_factory=list)
    stale: int = 0
    total_time: float = 0.0

    @property
    def failed(self) -> int:
        return len(self.failed_terms)


class DeckGenerator:
    """Coordinates parsing, layout and per-card image requests against a CardStore."""

    def __init__(
        self,
        store: CardStore,
        client: ImageClient,
        *,
        concurrency: Optional[int] = None,
        page_size: int = PAGE_SIZE,
    ):
        if concurrency is not None and concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self.store = store
        self.client = client
        self.concurrency = concurrency
        self.page_size = page_size
        self.style = ""

    def layout(self) -> list[Page]:
        return paginate(self.store, self.page_size)

    async def generate_deck(
        self,
        text: str,
        style: Optional[str] = None,
        *,
        on_layout: Optional[Callable[[list[Page]], None]] = None,
        on_progress: Optional[Callable[[ProgressUpdate], None]] = None,
    ) -> DeckResult:
        """Replace the deck with the cards parsed from `text` and illustrate them all.

        Args:
            text: Raw vocabulary, one `term (hint): definition` per line.
            style: Deck-wide style applied to every prompt.
            on_layout: Called with the page layout before any request is sent.
            on_progress: Called after each card resolves, success or failure.

        Returns:
            DeckResult once every card has resolved.

        Raises:
            PreconditionError: No API key configured.
            EmptyDeckError: `text` yielded no cards.
        """
        self.client.check_credentials()

        cards = parse_vocabulary(text)
        self.style = (style or "").strip()
        generation = self.store.replace(cards)
        if not cards:
            raise EmptyDeckError("No valid 'term: definition' lines found.")

        pages = self.layout()
        if on_layout:
            on_layout(pages)

        total = len(cards)
        result = DeckResult(generation=generation, pages=pages, total=total)
        semaphore = asyncio.Semaphore(self.concurrency) if self.concurrency else None
        completed = 0
        start_time = time.monotonic()

        logger.info(f"Generating {total} images across {len(pages)} pages (generation {generation})")

        async def _illustrate(index: int, card: Card) -> None:
            nonlocal completed
            if semaphore:
                async with semaphore:
                    image = await self.client.generate(card, self.style)
            else:
                image = await self.client.generate(card, self.style)

            if not self.store.set_image(index, image, generation):
                result.stale += 1
            elif image is None:
                result.failed_terms.append(card.term)
            else:
                result.succeeded += 1

            completed += 1
            logger.info(f"[{completed}/{total}] {card.term}: {'ok' if image else 'FAILED'}")
            if on_progress:
                update = ProgressUpdate(completed=completed, total=total, term=card.term, success=image is not None)
                try:
                    on_progress(update)
                except Exception:
                    logger.exception(f"Progress callback failed for {card.term!r}")

        await asyncio.gather(*(_illustrate(i, c) for i, c in enumerate(cards)))

        result.total_time = time.monotonic() - start_time
        logger.info(
            f"Deck complete: {result.succeeded} ok, {result.failed} failed "
            f"in {result.total_time:.1f}s"
        )
        return result

    async def regenerate(
        self,
        term: str,
        hint: Optional[str] = None,
        style: Optional[str] = None,
    ) -> Optional[str]:
        """Re-illustrate the first card whose term is `term`.

        Args:
            term: Term of the card to regenerate.
            hint: New per-card hint. None keeps the current one; a blank string clears it.
            style: Deck-wide style; None reuses the style of the last full run.

        Returns:
            The new data URI, or None if generation failed.

        Raises:
            PreconditionError: No API key configured.
            CardNotFoundError: No card has this term.
        """
        self.client.check_credentials()

        index = self.store.find(term)
        if index is None:
            raise CardNotFoundError(f"No card with term {term!r}")

        generation = self.store.generation
        if hint is not None:
            self.store.set_custom_prompt(index, hint.strip() or None, generation)

        card = self.store[index]
        style = self.style if style is None else style.strip()
        logger.info(f"Regenerating {term!r}")
        image = await self.client.generate(card, style)

        if not self.store.set_image(index, image, generation):
            logger.info(f"Deck was replaced while regenerating {term!r}; result discarded")
        return image

"""Split a deck into print pages and compute duplex back ordering.

Pages hold PAGE_SIZE cards on a ROW_SIZE-column grid. When the sheet is
flipped on its long edge each printed row comes out mirrored, so the back
page lists every row of card indices reversed.
"""

from dataclasses import dataclass
from typing import Sequence, Sized

PAGE_SIZE = 6
ROW_SIZE = 3  # columns in the print grid


@dataclass(frozen=True)
class Page:
    """One sheet: card indices into the store for each side."""

    number: int
    front: tuple[int, ...]
    back: tuple[int, ...]

    @property
    def start(self) -> int:
        return self.front[0]

    @property
    def stop(self) -> int:
        return self.front[-1] + 1

    def __len__(self) -> int:
        return len(self.front)


def back_order(indices: Sequence[int], row_size: int = ROW_SIZE) -> list[int]:
    """Reverse each consecutive run of `row_size` indices; a short last run is reversed as-is."""
    reordered = []
    for i in range(0, len(indices), row_size):
        reordered.extend(reversed(indices[i:i + row_size]))
    return reordered


def page_count(num_cards: int, page_size: int = PAGE_SIZE) -> int:
    return (num_cards + page_size - 1) // page_size


def paginate(cards: Sized, page_size: int = PAGE_SIZE, row_size: int = ROW_SIZE) -> list[Page]:
    """Lay the store positions of `cards` out on pages.

    Args:
        cards: The card store, or any sized sequence of cards.
        page_size: Cards per sheet side.
        row_size: Grid columns; must match the renderer.

    Returns:
        Pages in deck order; the last may be short. Empty for an empty deck.
    """
    if page_size < 1 or row_size < 1:
        raise ValueError(f"page_size and row_size must be positive (got {page_size}, {row_size})")

    num_cards = len(cards)
    pages = []
    for page_num in range(page_count(num_cards, page_size)):
        start_idx = page_num * page_size
        end_idx = min(start_idx + page_size, num_cards)
        front = tuple(range(start_idx, end_idx))
        pages.append(Page(number=page_num + 1, front=front, back=tuple(back_order(front, row_size))))
    return pages
